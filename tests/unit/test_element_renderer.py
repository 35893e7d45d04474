"""
Unit tests for ElementRenderer against a RecordingSurface.
"""

import logging

import pytest
from PIL import Image as PILImage

from pagesetter.document.models import Footnote, ListItem, ListType, TaskListItem, TextFormat
from pagesetter.pdf_engine.element_renderer import (
    BULLET_RAISE,
    BULLET_WIDTH,
    ElementRenderer,
    LIST_INDENT,
    PLACEHOLDER_HEIGHT,
    IMAGE_TRAILING,
)
from pagesetter.pdf_engine.page_flow import PageInfo, RenderState
from pagesetter.pdf_engine.surface import RecordingSurface
from pagesetter.pdf_engine.text_metrics import calculate_line_height, calculate_text_width
from pagesetter.pdf_engine.units import pt_to_mm


X = 25.0
Y = 200.0
WIDTH = 160.0

LOREM = (
    "The quick brown fox jumps over the lazy dog while the layout engine keeps "
    "measuring every word so that each justified line ends exactly at the margin."
)


def rgb(color):
    return tuple(color.rgb())


class TestFormattedText:
    """Test wrapping, inline formats and justification."""

    def test_plain_paragraph_draws_lines(self, renderer, surface):
        height, lines = renderer.render_paragraph(surface, LOREM, X, Y, 80.0, justify=False)

        assert lines > 1
        assert height == pytest.approx(calculate_line_height(12) * lines)
        assert " ".join(surface.texts()).split() == LOREM.split()

    def test_justified_lines_reach_the_margin(self, renderer, surface):
        renderer.render_paragraph(surface, LOREM, X, Y, 80.0, justify=True)

        first_line = [op for op in surface.ops_of("text") if op.y == Y]
        last = first_line[-1]
        end = last.x + calculate_text_width(last.text, last.font_size)
        assert end == pytest.approx(X + 80.0)

    def test_last_line_is_not_stretched(self, renderer):
        justified = RecordingSurface()
        ragged = RecordingSurface()
        _, lines = renderer.render_paragraph(justified, LOREM, X, Y, 80.0, justify=True)
        renderer.render_paragraph(ragged, LOREM, X, Y, 80.0, justify=False)

        last_y = Y - calculate_line_height(12) * (lines - 1)
        last_justified = [op for op in justified.ops_of("text") if op.y == pytest.approx(last_y)]
        last_ragged = [op for op in ragged.ops_of("text") if op.y == pytest.approx(last_y)]
        assert last_justified
        assert last_justified == last_ragged

    def test_justify_single_line_is_a_no_op(self, renderer):
        justified = RecordingSurface()
        ragged = RecordingSurface()

        renderer.render_paragraph(justified, "Hello", X, Y, WIDTH, justify=True)
        renderer.render_paragraph(ragged, "Hello", X, Y, WIDTH, justify=False)

        assert justified.ops == ragged.ops

    def test_justify_leaves_hard_split_word_lines_alone(self, renderer):
        """Single-fragment lines above the last line are drawn as-is."""
        text = "x" * 80 + " end"
        justified = RecordingSurface()
        ragged = RecordingSurface()

        _, lines = renderer.render_paragraph(justified, text, X, Y, 40.0, justify=True)
        renderer.render_paragraph(ragged, text, X, Y, 40.0, justify=False)

        assert lines >= 3
        assert justified.ops == ragged.ops

    def test_bold_run_uses_bold_font(self, renderer, surface, fonts):
        renderer.render_formatted_text(surface, "a [BOLD_START]b[BOLD_END]", X, Y, WIDTH)

        by_text = {op.text: op.font_name for op in surface.ops_of("text")}
        assert by_text["a "] == fonts.regular
        assert by_text["b"] == fonts.bold

    def test_element_formats_apply_to_all_text(self, renderer, surface, fonts):
        renderer.render_formatted_text(surface, "all italic", X, Y, WIDTH,
                                       formats=[TextFormat.ITALIC])
        assert {op.font_name for op in surface.ops_of("text")} == {fonts.italic}

    def test_code_run_uses_code_font_and_colour(self, renderer, surface, fonts, colors):
        renderer.render_formatted_text(surface, "[CODE_START]x()[CODE_END]", X, Y, WIDTH)

        op = surface.ops_of("text")[0]
        assert op.font_name == fonts.code
        assert op.color == rgb(colors.code)

    def test_strikethrough_draws_line_through_run(self, renderer, surface):
        renderer.render_formatted_text(surface, "[STRIKE_START]gone[STRIKE_END]", X, Y, WIDTH)

        lines = surface.ops_of("line")
        assert len(lines) == 1
        strike = lines[0]
        assert strike.y == pytest.approx(Y + pt_to_mm(12 * 0.3))
        assert strike.x == X
        assert strike.x2 == pytest.approx(X + calculate_text_width("gone", 12))
        assert strike.thickness == 0.5

    def test_link_markers_render_as_text_and_url(self, renderer, surface):
        renderer.render_formatted_text(surface, "[LINK_START:https://a.io]site[LINK_END]",
                                       X, Y, WIDTH)
        assert "".join(surface.texts()) == "site (https://a.io)"


class TestHeadings:
    """Test heading rendering."""

    def test_heading_is_bold_in_heading_colour(self, renderer, surface, fonts, colors):
        renderer.render_heading(surface, "Introduction", 3, X, Y, WIDTH)

        op = surface.ops_of("text")[0]
        assert op.font_name == fonts.bold
        assert op.font_size == 22.0
        assert op.color == rgb(colors.heading)

    def test_top_levels_are_underlined(self, renderer):
        for level, expected in ((1, 1), (2, 1), (3, 0), (6, 0)):
            surface = RecordingSurface()
            renderer.render_heading(surface, "Title", level, X, Y, WIDTH)
            assert len(surface.ops_of("line")) == expected

    def test_underline_spans_first_line(self, renderer, surface):
        height, _ = renderer.render_heading(surface, "Title", 1, X, Y, WIDTH)

        underline = surface.ops_of("line")[0]
        assert underline.y == pytest.approx(Y - height + 2.0)
        assert underline.x2 - underline.x == pytest.approx(calculate_text_width("Title", 32))

    def test_deep_level_uses_h6(self, renderer, surface):
        renderer.render_heading(surface, "Deep", 9, X, Y, WIDTH)
        assert surface.ops_of("text")[0].font_size == 14.0


class TestListItems:
    """Test list markers and item layout."""

    def test_unicode_bullets_by_depth(self, renderer):
        assert renderer.bullet_glyph(0) == "●"
        assert renderer.bullet_glyph(1) == "◦"
        assert renderer.bullet_glyph(2) == "▪"
        assert renderer.bullet_glyph(3) == "▫"
        assert renderer.bullet_glyph(7) == "▫"

    def test_basic_glyphs_without_dejavu(self, builtin_fonts):
        renderer = ElementRenderer(builtin_fonts)
        assert renderer.bullet_glyph(0) == "•"
        assert renderer.checkbox_glyph(True) == "[x]"
        assert renderer.checkbox_glyph(False) == "[ ]"

    def test_list_marker(self, renderer):
        assert renderer.list_marker(ListItem("a", list_type=ListType.ordered()), 3) == "3."
        assert renderer.list_marker(ListItem("a"), None) == "●"
        assert renderer.list_marker(ListItem("a", depth=1), None) == "◦"
        assert renderer.list_marker(TaskListItem("a", is_checked=True), None) == "☑"
        assert renderer.list_marker(TaskListItem("a"), None) == "☐"
        assert renderer.list_marker(ListItem("a", list_type=ListType.task()), None) == "☐"

    def test_item_is_indented_by_depth(self, renderer, surface, fonts):
        renderer.render_list_item(surface, "Nested", "◦", X, Y, WIDTH, depth=1)

        marker, text = surface.ops_of("text")
        line_height = calculate_line_height(12)
        assert marker.text == "◦"
        assert marker.x == X + LIST_INDENT
        assert marker.y == pytest.approx(Y + line_height * BULLET_RAISE)
        assert marker.font_name == fonts.bold
        assert text.x == X + LIST_INDENT + BULLET_WIDTH

    def test_checkbox_uses_regular_font(self, renderer, surface, fonts):
        renderer.render_list_item(surface, "Done", "☑", X, Y, WIDTH)
        assert surface.ops_of("text")[0].font_name == fonts.regular


class TestBlocks:
    """Test blockquotes and code blocks."""

    def test_blockquote_background_is_drawn_first(self, renderer, surface, colors):
        renderer.render_blockquote(surface, "Quoted words", X, Y, WIDTH)

        first = surface.ops[0]
        assert first.kind == "rect"
        assert first.fill == rgb(colors.blockquote_bg)

    def test_blockquote_height_and_italics(self, renderer, surface, fonts):
        height, lines = renderer.render_blockquote(surface, "Quoted words", X, Y, WIDTH)

        assert lines == 1
        assert height == pytest.approx(calculate_line_height(12 * 0.95) + 6.0 * 2 + 4.0)
        body = [op for op in surface.ops_of("text") if op.text != '"']
        assert {op.font_name for op in body} == {fonts.italic}

    def test_code_block_highlighting(self, renderer, surface, fonts, colors):
        code = "def add(a, b):\n    # sum\n    return a + b"
        height, lines = renderer.render_code_block(surface, code, X, Y, WIDTH)

        assert lines == 3
        assert height == pytest.approx(calculate_line_height(10) * 3 + 12.0)
        ops = {op.text: op for op in surface.ops_of("text")}
        assert ops["def add(a, b):"].font_name == fonts.bold
        assert ops["def add(a, b):"].color == rgb(colors.keyword)
        assert ops["    # sum"].font_name == fonts.italic
        assert ops["    return a + b"].font_name == fonts.code

    def test_short_code_block_has_no_gutter(self, renderer, surface):
        renderer.render_code_block(surface, "a = 1\nb = 2", X, Y, WIDTH)

        assert len(surface.ops_of("rect")) == 2
        assert surface.texts() == ["a = 1", "b = 2"]

    def test_long_code_block_is_numbered(self, renderer, surface):
        code = "\n".join(f"x{i} = {i}" for i in range(6))
        renderer.render_code_block(surface, code, X, Y, WIDTH)

        assert len(surface.ops_of("rect")) == 3
        assert "  1" in surface.texts()
        assert "  6" in surface.texts()

    def test_code_block_without_background(self, renderer, surface):
        height, _ = renderer.render_code_block(surface, "x", X, Y, WIDTH, background=False)

        assert surface.ops_of("rect") == []
        assert height == pytest.approx(calculate_line_height(10))


class TestInlineElements:
    """Test links, inline code, rules and footnote markers."""

    def test_link_shows_url_and_underline(self, renderer, surface, colors):
        height, _ = renderer.render_link(surface, "docs", "https://x.org", X, Y)

        assert surface.texts() == ["docs (https://x.org)"]
        underline = surface.ops_of("line")[0]
        assert underline.y == Y - 2.0
        assert underline.color == rgb(colors.link)
        assert height == pytest.approx(calculate_line_height(12) + 2.0)

    def test_link_without_url(self, renderer, surface):
        renderer.render_link(surface, "docs", None, X, Y)
        assert surface.texts() == ["docs"]

    def test_inline_code_is_backquoted(self, renderer, surface, fonts):
        renderer.render_inline_code(surface, "x = 1", X, Y)

        op = surface.ops_of("text")[0]
        assert op.text == "`x = 1`"
        assert op.font_name == fonts.code

    def test_horizontal_rule(self, renderer, surface):
        assert renderer.render_horizontal_rule(surface, X, Y, WIDTH) == (0.0, 0)

        rule = surface.ops_of("line")[0]
        assert rule.x == pytest.approx(X + WIDTH * 0.1)
        assert rule.x2 - rule.x == pytest.approx(WIDTH * 0.8)
        assert rule.thickness == 1.5
        assert surface.texts() == ["●", "●"]

    def test_footnote_reference_takes_no_space(self, renderer, surface):
        assert renderer.render_footnote_reference(surface, "3", X, Y) == (0.0, 1)
        op = surface.ops_of("text")[0]
        assert op.text == "[3]"
        assert op.y == Y + 2.0

    def test_footnote_text_numbers_unlabelled(self, renderer):
        assert renderer.footnote_text(Footnote("Note", label="a"), 1) == "[a]: Note"
        assert renderer.footnote_text(Footnote("Note"), 2) == "[2]: Note"

    def test_footnotes_heading(self, renderer, surface):
        assert renderer.render_footnotes_heading(surface, X, Y, WIDTH) == (20.0, 1)
        assert surface.texts() == ["References"]


class TestImages:
    """Test image embedding and the placeholder fallback."""

    def test_image_is_centred_in_box(self, renderer, surface, png_path):
        height, lines = renderer.render_image(surface, str(png_path), "", X, Y, WIDTH)

        image = surface.ops_of("image")[0]
        box_width = WIDTH * 0.85
        box_x = X + (WIDTH - box_width) / 2
        assert image.x == pytest.approx(box_x + (box_width - image.width) / 2)
        assert image.y == pytest.approx(Y - image.height)
        assert lines == 0
        assert height == pytest.approx(image.height + IMAGE_TRAILING)

    def test_large_image_is_scaled_to_box(self, renderer, surface, large_png_path):
        renderer.render_image(surface, str(large_png_path), "", X, Y, WIDTH)

        image = surface.ops_of("image")[0]
        assert image.width == pytest.approx(WIDTH * 0.85)
        assert image.height == pytest.approx(WIDTH * 0.85 / 4)

    def test_caption(self, renderer, surface, fonts, png_path):
        height, lines = renderer.render_image(surface, str(png_path), "Chart", X, Y, WIDTH)

        caption = surface.ops_of("text")[0]
        image = surface.ops_of("image")[0]
        assert caption.text == "Figure: Chart"
        assert caption.font_name == fonts.italic
        assert caption.y == pytest.approx(Y - image.height - 8.0)
        assert lines == 1
        assert height == pytest.approx(image.height + 8.0 + calculate_line_height(11) + 12.0)

    def test_missing_image_becomes_placeholder(self, renderer, surface, tmp_path, caplog):
        state = RenderState(y_position=Y, page_info=PageInfo())

        with caplog.at_level(logging.WARNING):
            result = renderer.render_image(surface, str(tmp_path / "missing.png"), "Lost",
                                           X, Y, WIDTH, state)

        assert result == (PLACEHOLDER_HEIGHT + IMAGE_TRAILING, 2)
        assert state.image_placeholders == 1
        assert surface.ops_of("image") == []
        assert "Image not available" in surface.texts()
        assert any("Image loading failed" in r.message for r in caplog.records)

    def test_unsupported_format_becomes_placeholder(self, renderer, surface):
        height, _ = renderer.render_image(surface, "diagram.svg", "", X, Y, WIDTH)

        assert height == PLACEHOLDER_HEIGHT + IMAGE_TRAILING
        error_text = [t for t in surface.texts() if t.startswith("Error: ")][0]
        assert len(error_text) <= len("Error: ") + 50

    def test_no_embedder_renders_placeholder(self, fonts, surface, png_path):
        renderer = ElementRenderer(fonts)
        height, _ = renderer.render_image(surface, str(png_path), "", X, Y, WIDTH)

        assert height == PLACEHOLDER_HEIGHT + IMAGE_TRAILING
        assert surface.ops_of("image") == []

    def test_decompression_bomb_becomes_placeholder(self, renderer, surface, png_path,
                                                    monkeypatch):
        monkeypatch.setattr(PILImage, "MAX_IMAGE_PIXELS", 10)
        state = RenderState(y_position=Y, page_info=PageInfo())

        height, _ = renderer.render_image(surface, str(png_path), "", X, Y, WIDTH, state)

        assert height == PLACEHOLDER_HEIGHT + IMAGE_TRAILING
        assert state.image_placeholders == 1
        assert surface.ops_of("image") == []

    def test_draw_failure_becomes_placeholder(self, renderer, png_path):
        class BrokenImageSurface(RecordingSurface):
            def draw_image(self, image, x, y, width, height):
                raise RuntimeError("cannot embed image stream")

        surface = BrokenImageSurface()
        state = RenderState(y_position=Y, page_info=PageInfo())

        height, _ = renderer.render_image(surface, str(png_path), "", X, Y, WIDTH, state)

        assert height == PLACEHOLDER_HEIGHT + IMAGE_TRAILING
        assert state.image_placeholders == 1
        assert any("cannot embed image stream" in t for t in surface.texts())
