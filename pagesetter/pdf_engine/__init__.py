"""
PDF Engine - paginated layout of document elements on a ReportLab canvas.

This module provides:
- Layout templates (professional, academic, minimal)
- Text measurement and wrapping
- Per-element rendering and page flow
- Running headers/footers with "Page X of N"
- Dry-run layout analysis and batch rendering

Usage:
    from pagesetter.pdf_engine import PdfGenerator, analyze_layout

    generator = PdfGenerator()
    generator.generate(elements, "output.pdf")

    report = analyze_layout(elements)
    print(report.actual_pages, report.warnings)

Key components:
- PdfGenerator: Main generator class
- PageFlowController: Cursor, page breaks, list context
- ElementRenderer: One element at a time
- DrawingSurface: ReportLab canvas or in-memory recording
"""

from .renderer import PdfGenerator, generate_pdf
from .dry_run import LayoutReport, analyze_layout
from .batch import BatchResult, BatchStatus, render_batch
from .element_renderer import ElementRenderer
from .page_flow import ListState, PageFlowController, PageInfo, RenderState
from .header_footer import HeaderFooterRenderer
from .estimator import estimate_required_height, estimate_total_pages
from .fonts import FontManager, FontSystem
from .surface import DrawingSurface, RecordingSurface, ReportLabSurface
from .table_layout import TableLayout
from .text_metrics import calculate_line_height, calculate_text_width, wrap_text
from .templates import (
    LayoutTemplate,
    TemplateType,
    PageLayout,
    FontSizes,
    ColorScheme,
    HeaderFooterSpec,
    create_layout_template,
)


__all__ = [
    # Main generator
    'PdfGenerator',
    'generate_pdf',
    'analyze_layout',
    'LayoutReport',
    'render_batch',
    'BatchResult',
    'BatchStatus',

    # Layout core
    'ElementRenderer',
    'PageFlowController',
    'RenderState',
    'PageInfo',
    'ListState',
    'HeaderFooterRenderer',
    'TableLayout',
    'estimate_required_height',
    'estimate_total_pages',

    # Text metrics
    'calculate_text_width',
    'calculate_line_height',
    'wrap_text',

    # Fonts and surfaces
    'FontManager',
    'FontSystem',
    'DrawingSurface',
    'ReportLabSurface',
    'RecordingSurface',

    # Templates
    'LayoutTemplate',
    'TemplateType',
    'PageLayout',
    'FontSizes',
    'ColorScheme',
    'HeaderFooterSpec',
    'create_layout_template',
]
