"""
Element renderer - draws one document element at a given origin.

Every ``render_*`` method takes the surface and the top-left origin of the
element (x, y in mm, y being the first baseline) and returns
``(height_consumed, line_count)``. Spacing between elements is the page
flow's business; the only exceptions are the blockquote and image blocks,
whose returned heights include their own decoration.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from reportlab.lib.colors import Color

from pagesetter.document.models import (
    DocumentElement, Footnote, ListKind, TableData, TaskListItem, TextFormat,
)
from pagesetter.exceptions import ImageEmbeddingError, ImageFetchError

from .fonts import FontSystem
from .inline_runs import TextRun, expand_links, parse_runs, plain_text, runs_for_lines, strip_markers
from .table_layout import TableLayout, draw_table
from .templates.base import ColorScheme, FontSizes
from .text_metrics import calculate_line_height, calculate_text_width, wrap_text
from .units import pt_to_mm


logger = logging.getLogger(__name__)

RenderResult = Tuple[float, int]

# Lists
LIST_INDENT = 16.0
BULLET_WIDTH = 12.0
LIST_TEXT_GAP = 4.0
BULLET_RAISE = 0.15  # fraction of line height
UNICODE_BULLETS = ("●", "◦", "▪", "▫")
BASIC_BULLETS = ("•", "-", "*", "·")

# Blockquotes
QUOTE_SIZE_RATIO = 0.95
QUOTE_BORDER = 4.0
QUOTE_PADDING_LEFT = 12.0
QUOTE_PADDING_VERTICAL = 6.0
QUOTE_BACKGROUND_PADDING = 8.0
QUOTE_TRAILING_SPACE = 4.0
QUOTE_MARK_SCALE = 1.8

# Code blocks
CODE_PADDING = 6.0
CODE_ACCENT_WIDTH = 3.0
LINE_NUMBER_WIDTH = 15.0
LINE_NUMBER_THRESHOLD = 5  # gutter only for blocks longer than this
LINE_NUMBER_SCALE = 0.85
DECLARATION_KEYWORDS = ("fn ", "function ", "def ", "class ", "struct ", "impl ")
COMMENT_PREFIXES = ("//", "#")

# Images
IMAGE_CAPTION_GAP = 8.0
IMAGE_CAPTION_TRAILING = 12.0
IMAGE_TRAILING = 16.0
PLACEHOLDER_WIDTH_RATIO = 0.7
PLACEHOLDER_HEIGHT = 60.0
PLACEHOLDER_ERROR_CHARS = 50

# Horizontal rule
RULE_WIDTH_RATIO = 0.8
RULE_THICKNESS = 1.5

# Footnotes
FOOTNOTE_RULE_RATIO = 0.3
FOOTNOTE_TITLE_GAP = 8.0
FOOTNOTE_TITLE_TRAILING = 12.0

STRIKE_RAISE = 0.3  # of font size
INLINE_TRAILING = 2.0


class ElementRenderer:
    """
    Renders individual elements with the template's fonts, sizes and colours.

    The renderer keeps no per-document state; anything that changes while
    a document renders lives in the page flow's RenderState.
    """

    def __init__(
        self,
        fonts: FontSystem,
        font_sizes: Optional[FontSizes] = None,
        colors: Optional[ColorScheme] = None,
        image_embedder=None,
        image_width_ratio: float = 0.85,
        image_max_height: float = 180.0,
    ):
        """
        Args:
            fonts: Concrete font names for each style role
            font_sizes: Point sizes per role (template defaults if omitted)
            colors: Colour scheme (template defaults if omitted)
            image_embedder: ImageEmbedder used for Image elements; without one
                every image renders as a placeholder
            image_width_ratio: Image box width as a fraction of the column
            image_max_height: Image box height in mm
        """
        self.fonts = fonts
        self.font_sizes = font_sizes or FontSizes()
        self.colors = colors or ColorScheme()
        self.image_embedder = image_embedder
        self.image_width_ratio = image_width_ratio
        self.image_max_height = image_max_height

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def _run_color(self, run: TextRun, default: Color) -> Color:
        return self.colors.code if TextFormat.CODE in run.formats else default

    def _draw_line_runs(
        self,
        surface,
        runs: List[TextRun],
        x: float,
        y: float,
        font_size: float,
        color: Color,
        extra_space: float = 0.0,
    ) -> None:
        """Draw one wrapped line run by run; extra_space is added after every space."""
        cursor = x
        for run in runs:
            font_name = self.fonts.for_formats(run.formats)
            run_color = self._run_color(run, color)
            run_start = cursor

            if extra_space:
                for piece in run.text.split(" "):
                    if piece:
                        surface.place_text(piece, cursor, y, font_name, font_size, run_color)
                        cursor += calculate_text_width(piece, font_size)
                    cursor += calculate_text_width(" ", font_size) + extra_space
                # split() yields one more piece than there are spaces
                cursor -= calculate_text_width(" ", font_size) + extra_space
            else:
                surface.place_text(run.text, cursor, y, font_name, font_size, run_color)
                cursor += calculate_text_width(run.text, font_size)

            if TextFormat.STRIKETHROUGH in run.formats and run.text.strip():
                strike_y = y + pt_to_mm(font_size * STRIKE_RAISE)
                surface.draw_line(run_start, strike_y, cursor, strike_y, 0.5, run_color)

    def render_formatted_text(
        self,
        surface,
        text: str,
        x: float,
        y: float,
        max_width: float,
        justify: bool = False,
        formats: Iterable[TextFormat] = (),
        font_size: Optional[float] = None,
        color: Optional[Color] = None,
    ) -> RenderResult:
        """
        Wrap and draw text carrying inline markers.

        Justification stretches every line except the last so its width
        exactly fills max_width. Lines with a single word, or that already
        fill the column, are drawn unchanged.
        """
        font_size = font_size or self.font_sizes.body
        color = color or self.colors.text
        line_height = calculate_line_height(font_size)

        runs = parse_runs(expand_links(text), formats)
        lines = wrap_text(plain_text(runs), max_width, font_size)
        line_runs = runs_for_lines(lines, runs)

        current_y = y
        for i, (line, runs_in_line) in enumerate(zip(lines, line_runs)):
            extra_space = 0.0
            is_last_line = i == len(lines) - 1
            if justify and not is_last_line:
                gaps = line.count(" ")
                slack = max_width - calculate_text_width(line, font_size)
                if gaps > 0 and slack > 0:
                    extra_space = slack / gaps

            self._draw_line_runs(surface, runs_in_line, x, current_y, font_size, color, extra_space)
            current_y -= line_height

        return line_height * len(lines), len(lines)

    def render_paragraph(self, surface, text: str, x: float, y: float, max_width: float,
                         justify: bool = True, formats: Iterable[TextFormat] = ()) -> RenderResult:
        return self.render_formatted_text(surface, text, x, y, max_width, justify, formats,
                                          self.font_sizes.body)

    def render_heading(self, surface, text: str, level: int, x: float, y: float,
                       max_width: float) -> RenderResult:
        """Bold heading in the heading colour; levels 1-2 get an underline."""
        font_size = self.font_sizes.for_heading(level)
        height, line_count = self.render_formatted_text(
            surface, text, x, y, max_width,
            formats=(TextFormat.BOLD,), font_size=font_size, color=self.colors.heading,
        )

        if level <= 2:
            first_line = wrap_text(strip_markers(text), max_width, font_size)[0]
            underline_y = y - height + 2.0
            surface.draw_line(x, underline_y, x + calculate_text_width(first_line, font_size),
                              underline_y, 0.5, self.colors.heading)

        return height, line_count

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def bullet_glyph(self, depth: int) -> str:
        glyphs = UNICODE_BULLETS if self.fonts.unicode_glyphs else BASIC_BULLETS
        return glyphs[min(max(depth, 0), len(glyphs) - 1)]

    def checkbox_glyph(self, checked: bool) -> str:
        if self.fonts.unicode_glyphs:
            return "☑" if checked else "☐"
        return "[x]" if checked else "[ ]"

    def list_marker(self, element: DocumentElement, counter: Optional[int]) -> str:
        """Ordered counter, checkbox, or the bullet glyph for the item's depth"""
        if counter is not None:
            return f"{counter}."
        if isinstance(element, TaskListItem):
            return self.checkbox_glyph(element.is_checked)
        list_type = getattr(element, "list_type", None)
        if list_type is not None and list_type.kind == ListKind.TASK:
            return self.checkbox_glyph(False)
        return self.bullet_glyph(getattr(element, "depth", 0))

    def render_list_item(self, surface, text: str, marker: str, x: float, y: float,
                         max_width: float, depth: int = 0,
                         formats: Iterable[TextFormat] = ()) -> RenderResult:
        font_size = self.font_sizes.body
        line_height = calculate_line_height(font_size)
        indent = LIST_INDENT * depth

        marker_font = self.fonts.regular if marker in ("☑", "☐") else self.fonts.bold
        surface.place_text(marker, x + indent, y + line_height * BULLET_RAISE,
                           marker_font, font_size, self.colors.bullet)

        text_x = x + indent + BULLET_WIDTH
        text_width = max_width - indent - BULLET_WIDTH - LIST_TEXT_GAP
        return self.render_formatted_text(surface, text, text_x, y, text_width,
                                          formats=formats, font_size=font_size)

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def render_blockquote(self, surface, text: str, x: float, y: float, max_width: float,
                          formats: Iterable[TextFormat] = ()) -> RenderResult:
        """Italic text in a tinted box with a thick left border and a quote mark."""
        font_size = self.font_sizes.body * QUOTE_SIZE_RATIO
        line_height = calculate_line_height(font_size)
        text_x = x + QUOTE_BORDER + QUOTE_PADDING_LEFT
        text_width = max_width - QUOTE_BORDER - QUOTE_PADDING_LEFT - QUOTE_BACKGROUND_PADDING

        line_count = len(wrap_text(strip_markers(text), text_width, font_size))
        total_height = line_height * line_count + QUOTE_PADDING_VERTICAL * 2

        # Background first so the text stays on top
        surface.draw_rect(x, y, max_width, total_height, fill=self.colors.blockquote_bg)
        border_x = x + QUOTE_BORDER / 2
        surface.draw_line(border_x, y + 1.0, border_x, y - total_height + 1.0,
                          QUOTE_BORDER, self.colors.blockquote_border)
        highlight_x = x + QUOTE_BORDER + 1.0
        surface.draw_line(highlight_x, y + 1.0, highlight_x, y - total_height + 1.0,
                          1.0, self.colors.blockquote_highlight)
        surface.place_text('"', x + QUOTE_BORDER + 2.0, y - 2.0, self.fonts.italic,
                           font_size * QUOTE_MARK_SCALE, self.colors.quote_mark)

        _, rendered_lines = self.render_formatted_text(
            surface, text, text_x, y - QUOTE_PADDING_VERTICAL, text_width,
            formats=tuple(formats) + (TextFormat.ITALIC,),
            font_size=font_size, color=self.colors.blockquote,
        )

        return total_height + QUOTE_TRAILING_SPACE, rendered_lines

    def render_table(self, surface, table_data: TableData, x: float, y: float,
                     max_width: float) -> RenderResult:
        """Two-pass table: measure rows, then draw. Returns the summed row heights."""
        font_size = self.font_sizes.body
        layout = TableLayout.compute(table_data, max_width, font_size)
        if layout.column_count == 0:
            return 0.0, 0
        height = draw_table(surface, table_data, layout, x, y, max_width,
                            self.fonts, font_size, self.colors)
        return height, len(layout.row_heights)

    def render_code_block(self, surface, text: str, x: float, y: float, max_width: float,
                          background: bool = True) -> RenderResult:
        """
        Source lines in a tinted panel with a left accent bar.

        Blocks longer than LINE_NUMBER_THRESHOLD lines get a line-number
        gutter. Declaration lines are bold blue and comment lines italic
        green; this is substring matching, not tokenising.
        """
        font_size = self.font_sizes.code
        line_height = calculate_line_height(font_size)
        lines = text.splitlines()
        numbered = background and len(lines) > LINE_NUMBER_THRESHOLD

        if background:
            panel_height = line_height * len(lines) + CODE_PADDING * 2
            panel_x = x - CODE_PADDING
            panel_top = y + CODE_PADDING
            surface.draw_rect(panel_x, panel_top, max_width + CODE_PADDING * 2, panel_height,
                              fill=self.colors.code_bg, stroke=self.colors.code_border,
                              thickness=1.0)
            surface.draw_rect(panel_x, panel_top, CODE_ACCENT_WIDTH, panel_height,
                              fill=self.colors.code_accent)
            if numbered:
                surface.draw_rect(panel_x + CODE_ACCENT_WIDTH, panel_top, LINE_NUMBER_WIDTH,
                                  panel_height, fill=self.colors.code_gutter)

        if background:
            text_x = x + CODE_PADDING + (LINE_NUMBER_WIDTH + 3.0 if numbered else 0.0)
        else:
            text_x = x

        current_y = y
        for number, line in enumerate(lines, start=1):
            if numbered:
                surface.place_text(f"{number:3}", x + 1.0, current_y, self.fonts.regular,
                                   font_size * LINE_NUMBER_SCALE, self.colors.line_number)

            if any(keyword in line for keyword in DECLARATION_KEYWORDS):
                font_name, color = self.fonts.bold, self.colors.keyword
            elif line.lstrip().startswith(COMMENT_PREFIXES):
                font_name, color = self.fonts.italic, self.colors.comment
            else:
                font_name, color = self.fonts.code, self.colors.code
            surface.place_text(line, text_x, current_y, font_name, font_size, color)
            current_y -= line_height

        total_height = line_height * len(lines) + (CODE_PADDING * 2 if background else 0.0)
        return total_height, len(lines)

    # ------------------------------------------------------------------
    # Inline elements
    # ------------------------------------------------------------------

    def render_inline_code(self, surface, text: str, x: float, y: float) -> RenderResult:
        font_size = self.font_sizes.code
        surface.place_text(f"`{text}`", x, y, self.fonts.code, font_size, self.colors.code)
        return calculate_line_height(font_size) + INLINE_TRAILING, 1

    def render_link(self, surface, text: str, url: Optional[str], x: float, y: float) -> RenderResult:
        """'text (url)' in the link colour, underlined"""
        font_size = self.font_sizes.body
        label = strip_markers(text)
        link_text = f"{label} ({url})" if url else label

        surface.place_text(link_text, x, y, self.fonts.regular, font_size, self.colors.link)
        width = calculate_text_width(link_text, font_size)
        surface.draw_line(x, y - 2.0, x + width, y - 2.0, 0.5, self.colors.link)
        return calculate_line_height(font_size) + INLINE_TRAILING, 1

    def render_footnote_reference(self, surface, label: str, x: float, y: float) -> RenderResult:
        """Raised [label] marker; takes no vertical space"""
        surface.place_text(f"[{label}]", x, y + 2.0, self.fonts.regular,
                           self.font_sizes.small, self.colors.link)
        return 0.0, 1

    def render_horizontal_rule(self, surface, x: float, y: float, content_width: float) -> RenderResult:
        """Centred partial-width rule with dot end caps, drawn on y"""
        rule_width = content_width * RULE_WIDTH_RATIO
        rule_x = x + (content_width - rule_width) / 2
        surface.draw_line(rule_x, y, rule_x + rule_width, y, RULE_THICKNESS, self.colors.rule)

        cap = UNICODE_BULLETS[0] if self.fonts.unicode_glyphs else BASIC_BULLETS[0]
        small = self.font_sizes.small
        surface.place_text(cap, rule_x - 4.0, y + 1.0, self.fonts.regular, small, self.colors.rule)
        surface.place_text(cap, rule_x + rule_width + 1.0, y + 1.0, self.fonts.regular,
                           small, self.colors.rule)
        return 0.0, 0

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def render_image(self, surface, url: str, caption: str, x: float, y: float,
                     content_width: float, state=None) -> RenderResult:
        """
        Centred image with an optional 'Figure:' caption.

        Any ImageEmbeddingError is logged and replaced by a placeholder box;
        it never propagates. The returned height runs from y down to where
        the next element should start.
        """
        max_width = content_width * self.image_width_ratio
        box_x = x + (content_width - max_width) / 2

        try:
            if self.image_embedder is None:
                raise ImageFetchError(url, "image embedding is disabled")
            image_height = self.image_embedder.embed(surface, url, box_x, y, max_width,
                                                     self.image_max_height)
        except ImageEmbeddingError as e:
            logger.warning(f"Image loading failed for {url}: {e}")
            if state is not None:
                state.image_placeholders += 1
            return self.render_image_placeholder(surface, str(e), x, y, content_width)

        caption = strip_markers(caption)
        if not caption:
            return image_height + IMAGE_TRAILING, 0

        caption_size = self.font_sizes.caption
        caption_text = f"Figure: {caption}"
        caption_width = calculate_text_width(caption_text, caption_size)
        caption_x = x + (content_width - caption_width) / 2
        caption_y = y - image_height - IMAGE_CAPTION_GAP
        surface.place_text(caption_text, caption_x, caption_y, self.fonts.italic,
                           caption_size, self.colors.blockquote)

        consumed = (y - caption_y) + calculate_line_height(caption_size) + IMAGE_CAPTION_TRAILING
        return consumed, 1

    def render_image_placeholder(self, surface, error: str, x: float, y: float,
                                 content_width: float) -> RenderResult:
        """Fixed-size bordered box with the first characters of the error"""
        width = content_width * PLACEHOLDER_WIDTH_RATIO
        box_x = x + (content_width - width) / 2

        surface.draw_rect(box_x, y, width, PLACEHOLDER_HEIGHT,
                          fill=self.colors.placeholder_fill,
                          stroke=self.colors.placeholder_border, thickness=1.0)
        surface.place_text("Image not available", box_x + 8.0, y - 20.0, self.fonts.bold,
                           self.font_sizes.body, self.colors.blockquote)
        surface.place_text(f"Error: {error[:PLACEHOLDER_ERROR_CHARS]}", box_x + 8.0, y - 35.0,
                           self.fonts.italic, self.font_sizes.small, self.colors.blockquote)
        return PLACEHOLDER_HEIGHT + IMAGE_TRAILING, 2

    # ------------------------------------------------------------------
    # Footnotes
    # ------------------------------------------------------------------

    def render_footnotes_heading(self, surface, x: float, y: float,
                                 content_width: float) -> RenderResult:
        """Short separator rule and the 'References' title"""
        surface.draw_line(x, y, x + content_width * FOOTNOTE_RULE_RATIO, y, 1.0,
                          self.colors.header_rule)
        title_y = y - FOOTNOTE_TITLE_GAP
        surface.place_text("References", x, title_y, self.fonts.bold, self.font_sizes.h6,
                           self.colors.heading)
        return FOOTNOTE_TITLE_GAP + FOOTNOTE_TITLE_TRAILING, 1

    def footnote_text(self, footnote: Footnote, number: int) -> str:
        """'[label]: text', numbering unlabelled footnotes in order"""
        label = footnote.label or str(number)
        return f"[{label}]: {footnote.content}"
