"""
Height estimators.

Two deliberately separate functions:

- estimate_required_height: per-element break check for the page flow.
  Conservative on purpose (tables and images use fixed, generous
  constants) so a block is moved to the next page rather than split.
- estimate_total_pages: one cheap pass with fixed per-type heights,
  used only to print "Page X of N" before layout has happened. It can
  disagree with the real page count; nothing reconciles the two.
"""

import math
from typing import Dict, Sequence

from pagesetter.document.models import DocumentElement, ElementType

from .inline_runs import strip_markers
from .templates.base import FontSizes, PageLayout
from .text_metrics import (
    calculate_line_height,
    heading_spacing_after,
    heading_spacing_before,
    wrap_text,
)


# Break-check estimates (mm)
TABLE_REQUIRED_HEIGHT = 60.0
IMAGE_REQUIRED_HEIGHT = 120.0
DEFAULT_REQUIRED_HEIGHT = 15.0
PARAGRAPH_EXTRA = 8.0
CODE_BLOCK_EXTRA = 20.0

# Page-count estimates (mm per element)
PAGE_COUNT_HEIGHTS: Dict[ElementType, float] = {
    ElementType.HEADING: 20.0,
    ElementType.PARAGRAPH: 15.0,
    ElementType.LIST_ITEM: 8.0,
    ElementType.TASK_LIST_ITEM: 8.0,
    ElementType.BLOCK_QUOTE: 20.0,
    ElementType.TABLE: 50.0,
    ElementType.CODE_BLOCK: 30.0,
    ElementType.IMAGE: 100.0,
    ElementType.HORIZONTAL_RULE: 24.0,
}
DEFAULT_PAGE_COUNT_HEIGHT = 10.0


def estimate_required_height(element: DocumentElement, font_sizes: FontSizes,
                             content_width: float) -> float:
    """Space (mm) the element must have left on the page to start there"""
    element_type = element.element_type

    if element_type == ElementType.HEADING:
        level = element.level
        return (heading_spacing_before(level)
                + calculate_line_height(font_sizes.for_heading(level))
                + heading_spacing_after(level))

    if element_type == ElementType.PARAGRAPH:
        lines = wrap_text(strip_markers(element.content), content_width, font_sizes.body)
        return calculate_line_height(font_sizes.body) * len(lines) + PARAGRAPH_EXTRA

    if element_type == ElementType.TABLE:
        return TABLE_REQUIRED_HEIGHT

    if element_type == ElementType.IMAGE:
        return IMAGE_REQUIRED_HEIGHT

    if element_type == ElementType.CODE_BLOCK:
        line_count = len(element.content.splitlines())
        return calculate_line_height(font_sizes.code) * line_count + CODE_BLOCK_EXTRA

    return DEFAULT_REQUIRED_HEIGHT


def estimate_total_pages(elements: Sequence[DocumentElement], layout: PageLayout) -> int:
    """Sum of fixed per-type heights over the usable page height, at least 1"""
    total = sum(PAGE_COUNT_HEIGHTS.get(element.element_type, DEFAULT_PAGE_COUNT_HEIGHT)
                for element in elements)
    return max(1, math.ceil(total / layout.usable_height))
