"""
Page flow - the single forward pass that places elements on pages.

All mutable layout state (cursor, page counter, list counters, footnote
queue) lives in an explicit RenderState owned by the caller and passed
into every step, so a step can be exercised on its own: build a state,
render one element, inspect the state and the recorded drawing.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from pagesetter.document.models import (
    DocumentElement,
    ElementType,
    Footnote,
    ListKind,
    ListType,
)

from .element_renderer import FOOTNOTE_TITLE_GAP, FOOTNOTE_TITLE_TRAILING, ElementRenderer
from .estimator import estimate_required_height
from .header_footer import HeaderFooterRenderer
from .inline_runs import strip_markers
from .templates.base import PageLayout
from .text_metrics import (
    calculate_line_height,
    calculate_paragraph_spacing,
    heading_spacing_after,
    heading_spacing_before,
    wrap_text,
)


logger = logging.getLogger(__name__)


@dataclass
class PageInfo:
    """Page counter and the values printed in the running header/footer"""
    current_page: int = 1
    total_pages: int = 1  # estimate, fixed before the main pass
    title: str = ""


@dataclass
class ListFrame:
    """Counter for one nesting depth"""
    kind: ListKind
    next_number: int = 1


@dataclass
class ListState:
    """
    List context: whether we are inside a list and one frame per depth.

    The frame at index d belongs to the list at nesting depth d; the last
    frame is the innermost active list.
    """
    in_list: bool = False
    frames: List[ListFrame] = field(default_factory=list)

    def enter(self) -> bool:
        """Mark list context; True when this started a new list"""
        if self.in_list:
            return False
        self.in_list = True
        return True

    def leave(self) -> bool:
        """Clear list context; True when a list was actually open"""
        if not self.in_list:
            return False
        self.in_list = False
        self.frames.clear()
        return True

    def next_counter(self, list_type: ListType, depth: int = 0) -> Optional[int]:
        """
        Advance the counter for an item at ``depth``.

        Deeper frames are dropped, a frame is opened for a new depth (or
        replaced when the list kind changes at that depth) and ordered
        frames hand out start, start+1, ... Returns None for bullet and
        task items.
        """
        depth = max(depth, 0)
        del self.frames[depth + 1:]
        while len(self.frames) < depth:
            self.frames.append(ListFrame(ListKind.BULLET))

        if len(self.frames) == depth:
            self.frames.append(ListFrame(list_type.kind, list_type.start))
        elif self.frames[depth].kind != list_type.kind:
            self.frames[depth] = ListFrame(list_type.kind, list_type.start)

        frame = self.frames[depth]
        if frame.kind != ListKind.ORDERED:
            return None
        number = frame.next_number
        frame.next_number += 1
        return number


@dataclass
class RenderState:
    """Everything that changes while one document renders"""
    y_position: float
    page_info: PageInfo
    list_state: ListState = field(default_factory=ListState)
    footnotes: List[Footnote] = field(default_factory=list)
    image_placeholders: int = 0
    # Element indices drawn on each page (index 0 = page 1)
    page_elements: List[List[int]] = field(default_factory=lambda: [[]])


class PageFlowController:
    """
    Drives ElementRenderer and HeaderFooterRenderer down the pages.

    A new page opens whenever the element's conservative required height
    would push the cursor below the footer band plus SAFETY_MARGIN.
    """

    SAFETY_MARGIN = 10.0
    LIST_SPACING_BEFORE = 4.0
    LIST_SPACING_AFTER = 6.0
    LIST_ITEM_SPACING = 3.0
    BLOCKQUOTE_SPACING = 8.0
    TABLE_SPACING = 10.0
    CODE_BLOCK_SPACING = 10.0
    IMAGE_SPACING_BEFORE = 16.0
    RULE_SPACING = 16.0
    OTHER_SPACING = 4.0
    FOOTNOTES_SPACING_BEFORE = 24.0
    FOOTNOTE_ENTRY_SPACING = 4.0

    def __init__(self, layout: PageLayout, renderer: ElementRenderer,
                 header_footer: HeaderFooterRenderer):
        self.layout = layout
        self.renderer = renderer
        self.header_footer = header_footer
        self.font_sizes = renderer.font_sizes

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    def begin(self, surface, total_pages: int, title: str = "") -> RenderState:
        """Initial state on page 1, with page 1's chrome already drawn"""
        state = RenderState(
            y_position=self.layout.content_start_y,
            page_info=PageInfo(current_page=1, total_pages=total_pages, title=title),
        )
        self.header_footer.render(surface, state.page_info)
        return state

    def needs_new_page(self, state: RenderState, required_height: float) -> bool:
        floor = self.layout.content_floor + self.SAFETY_MARGIN
        return state.y_position - required_height < floor

    def new_page(self, surface, state: RenderState) -> None:
        surface.start_page()
        state.page_info.current_page += 1
        state.y_position = self.layout.content_start_y
        state.page_elements.append([])
        self.header_footer.render(surface, state.page_info)
        logger.debug(f"Opened page {state.page_info.current_page}")

    def ensure_space(self, surface, state: RenderState, required_height: float) -> bool:
        """Open a new page if required_height does not fit; True if one was opened"""
        if self.needs_new_page(state, required_height):
            self.new_page(surface, state)
            return True
        return False

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def _update_list_context(self, state: RenderState, element: DocumentElement) -> None:
        if element.is_list_item:
            if state.list_state.enter():
                state.y_position -= self.LIST_SPACING_BEFORE
        elif state.list_state.leave():
            state.y_position -= self.LIST_SPACING_AFTER

    def render_element(self, surface, state: RenderState, element: DocumentElement,
                       index: int = 0) -> None:
        """Break check, list bookkeeping, then draw one element"""
        layout = self.layout
        required = estimate_required_height(element, self.font_sizes, layout.content_width)
        self.ensure_space(surface, state, required)
        self._update_list_context(state, element)

        state.page_elements[-1].append(index)
        x = layout.margin_left
        width = layout.content_width
        renderer = self.renderer
        element_type = element.element_type

        if element_type == ElementType.HEADING:
            state.y_position -= heading_spacing_before(element.level)
            height, _ = renderer.render_heading(surface, element.content, element.level,
                                                x, state.y_position, width)
            state.y_position -= height + heading_spacing_after(element.level)

        elif element_type == ElementType.PARAGRAPH:
            spacing = calculate_paragraph_spacing(self.font_sizes.body)
            in_list = state.list_state.in_list
            if not in_list:
                state.y_position -= spacing
            height, _ = renderer.render_paragraph(surface, element.content, x, state.y_position,
                                                  width, justify=True, formats=element.formatting)
            state.y_position -= height
            if not in_list:
                state.y_position -= spacing

        elif element.is_list_item:
            counter = state.list_state.next_counter(element.list_type, element.depth)
            marker = renderer.list_marker(element, counter)
            height, _ = renderer.render_list_item(surface, element.content, marker, x,
                                                  state.y_position, width, element.depth,
                                                  element.formatting)
            state.y_position -= height + self.LIST_ITEM_SPACING

        elif element_type == ElementType.BLOCK_QUOTE:
            state.y_position -= self.BLOCKQUOTE_SPACING
            height, _ = renderer.render_blockquote(surface, element.content, x, state.y_position,
                                                   width, element.formatting)
            state.y_position -= height + self.BLOCKQUOTE_SPACING

        elif element_type == ElementType.TABLE:
            state.y_position -= self.TABLE_SPACING
            height, _ = renderer.render_table(surface, element.table_data, x, state.y_position, width)
            state.y_position -= height + self.TABLE_SPACING

        elif element_type == ElementType.CODE:
            height, _ = renderer.render_inline_code(surface, element.content, x, state.y_position)
            state.y_position -= height

        elif element_type == ElementType.CODE_BLOCK:
            state.y_position -= self.CODE_BLOCK_SPACING
            height, _ = renderer.render_code_block(surface, element.content, x, state.y_position,
                                                   width)
            state.y_position -= height + self.CODE_BLOCK_SPACING

        elif element_type == ElementType.LINK:
            height, _ = renderer.render_link(surface, element.content, element.url, x,
                                             state.y_position)
            state.y_position -= height

        elif element_type == ElementType.IMAGE:
            if not element.url:
                logger.debug(f"Element #{index}: image without a reference, skipped")
                return
            state.y_position -= self.IMAGE_SPACING_BEFORE
            height, _ = renderer.render_image(surface, element.url, element.content, x,
                                              state.y_position, width, state)
            state.y_position -= height

        elif element_type == ElementType.HORIZONTAL_RULE:
            state.y_position -= self.RULE_SPACING
            renderer.render_horizontal_rule(surface, x, state.y_position, width)
            state.y_position -= self.RULE_SPACING

        elif element_type == ElementType.FOOTNOTE:
            state.footnotes.append(element)

        elif element_type == ElementType.FOOTNOTE_REFERENCE:
            renderer.render_footnote_reference(surface, element.content, x, state.y_position)

        else:
            state.y_position -= self.OTHER_SPACING

    def finish(self, surface, state: RenderState) -> None:
        """Close any open list and flush the footnotes section"""
        if state.list_state.leave():
            state.y_position -= self.LIST_SPACING_AFTER

        if state.footnotes:
            self.render_footnotes(surface, state)

    def render_footnotes(self, surface, state: RenderState) -> None:
        """'References' section: rule, title, then one '[label]: text' entry per footnote"""
        layout = self.layout
        renderer = self.renderer
        body = self.font_sizes.body
        x = layout.margin_left

        title_required = (self.FOOTNOTES_SPACING_BEFORE + FOOTNOTE_TITLE_GAP
                          + FOOTNOTE_TITLE_TRAILING + calculate_line_height(body))
        self.ensure_space(surface, state, title_required)
        state.y_position -= self.FOOTNOTES_SPACING_BEFORE
        height, _ = renderer.render_footnotes_heading(surface, x, state.y_position,
                                                      layout.content_width)
        state.y_position -= height

        for number, footnote in enumerate(state.footnotes, start=1):
            text = renderer.footnote_text(footnote, number)
            lines = len(wrap_text(strip_markers(text), layout.content_width, body))
            self.ensure_space(surface, state, calculate_line_height(body) * lines)
            height, _ = renderer.render_paragraph(surface, text, x, state.y_position,
                                                  layout.content_width, justify=False)
            state.y_position -= height + self.FOOTNOTE_ENTRY_SPACING

    def run(self, surface, elements: Sequence[DocumentElement], total_pages: int,
            title: str = "",
            progress_callback: Optional[Callable[[int, int, str], None]] = None) -> RenderState:
        """
        Lay out the whole sequence; the caller saves the surface.

        progress_callback receives (done, total, message) before each
        element and once more after the footnotes are flushed.
        """
        state = self.begin(surface, total_pages, title)
        total = len(elements)
        for index, element in enumerate(elements):
            if progress_callback:
                progress_callback(index, total, f"Rendering {element.element_type.value}")
            self.render_element(surface, state, element, index)
        self.finish(surface, state)

        if progress_callback:
            progress_callback(total, total, "Layout complete")
        return state
