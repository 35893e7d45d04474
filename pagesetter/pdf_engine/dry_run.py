"""
Dry run - full layout against a RecordingSurface, no PDF written.

Reports where every element landed and flags layout problems, most
notably when the "Page X of N" estimate disagrees with the real count.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from config.settings import Settings
from pagesetter.document.models import DocumentElement, count_by_type

from .estimator import estimate_required_height
from .renderer import PdfGenerator
from .surface import RecordingSurface


logger = logging.getLogger(__name__)


@dataclass
class LayoutReport:
    """Result of a dry run"""
    element_count: int
    estimated_pages: int
    actual_pages: int
    page_elements: Tuple[Tuple[int, ...], ...]  # element indices per page
    image_placeholders: int = 0
    element_counts: Dict[str, int] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @property
    def estimate_matches(self) -> bool:
        return self.estimated_pages == self.actual_pages

    def page_of(self, index: int) -> Optional[int]:
        """1-based page holding element ``index``, None if it drew nothing"""
        for page, indices in enumerate(self.page_elements, start=1):
            if index in indices:
                return page
        return None

    def to_dict(self) -> Dict:
        return {
            "element_count": self.element_count,
            "estimated_pages": self.estimated_pages,
            "actual_pages": self.actual_pages,
            "page_elements": [list(p) for p in self.page_elements],
            "image_placeholders": self.image_placeholders,
            "element_counts": dict(self.element_counts),
            "warnings": list(self.warnings),
        }


def analyze_layout(
    elements: Sequence[DocumentElement],
    settings: Optional[Settings] = None,
    generator: Optional[PdfGenerator] = None,
) -> LayoutReport:
    """
    Lay the document out without writing it.

    Args:
        elements: Ordered document elements
        settings: Settings instance (ignored when generator is given)
        generator: Pre-built PdfGenerator to reuse its fonts and template

    Returns:
        LayoutReport; identical input gives an identical report
    """
    generator = generator or PdfGenerator(settings)
    layout = generator.layout
    surface = RecordingSurface(layout.width, layout.height)

    state = generator.render(elements, surface)

    warnings = []
    estimated = state.page_info.total_pages
    actual = state.page_info.current_page
    if estimated != actual:
        warnings.append(
            f"Footer page count is an estimate: printed {estimated}, document has {actual} page(s)"
        )
    if state.image_placeholders:
        warnings.append(f"{state.image_placeholders} image(s) replaced by placeholders")

    for index, element in enumerate(elements):
        required = estimate_required_height(element, generator.font_sizes, layout.content_width)
        if required > layout.usable_height:
            warnings.append(
                f"Element #{index} ({element.element_type.value}) is taller than a page "
                f"({required:.0f}mm > {layout.usable_height:.0f}mm) and will overflow"
            )

    for warning in warnings:
        logger.info(warning)

    return LayoutReport(
        element_count=len(elements),
        estimated_pages=estimated,
        actual_pages=actual,
        page_elements=tuple(tuple(indices) for indices in state.page_elements),
        image_placeholders=state.image_placeholders,
        element_counts={t.value: n for t, n in count_by_type(elements)},
        warnings=warnings,
    )
