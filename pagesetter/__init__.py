"""
Pagesetter - paginated PDF layout from semantic document elements.

Usage:
    from pagesetter import generate_pdf
    from pagesetter.document import Heading, Paragraph

    generate_pdf([Heading("Intro", level=1), Paragraph("Hello")], "out.pdf")
"""

from .pdf_engine import PdfGenerator, generate_pdf, analyze_layout


__all__ = ['PdfGenerator', 'generate_pdf', 'analyze_layout']

__version__ = '1.0.0'
