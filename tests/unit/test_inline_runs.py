"""
Unit tests for inline formatting markers.
"""

from pagesetter.document.models import TextFormat
from pagesetter.pdf_engine.inline_runs import (
    TextRun,
    expand_links,
    parse_runs,
    plain_text,
    runs_for_lines,
    strip_markers,
)


BOLD = TextFormat.BOLD
ITALIC = TextFormat.ITALIC
STRIKE = TextFormat.STRIKETHROUGH


class TestParseRuns:
    """Test splitting marked-up text into runs."""

    def test_plain_text_is_one_run(self):
        assert parse_runs("hello") == [TextRun("hello", frozenset())]

    def test_empty_text_still_yields_a_run(self):
        assert parse_runs("", [ITALIC]) == [TextRun("", frozenset({ITALIC}))]

    def test_bold_markers(self):
        runs = parse_runs("a [BOLD_START]b[BOLD_END] c")
        assert runs == [
            TextRun("a ", frozenset()),
            TextRun("b", frozenset({BOLD})),
            TextRun(" c", frozenset()),
        ]

    def test_nested_markers_accumulate(self):
        runs = parse_runs("[BOLD_START]x[ITALIC_START]y[ITALIC_END][BOLD_END]")
        assert runs[0].formats == frozenset({BOLD})
        assert runs[1].formats == frozenset({BOLD, ITALIC})

    def test_base_formats_apply_everywhere(self):
        runs = parse_runs("a[STRIKE_START]b[STRIKE_END]", [ITALIC])
        assert runs[0].formats == frozenset({ITALIC})
        assert runs[1].formats == frozenset({ITALIC, STRIKE})

    def test_end_marker_removes_base_format(self):
        runs = parse_runs("a[BOLD_END]b", [BOLD])
        assert runs == [TextRun("a", frozenset({BOLD})), TextRun("b", frozenset())]

    def test_code_marker(self):
        runs = parse_runs("call [CODE_START]f()[CODE_END]")
        assert runs[1] == TextRun("f()", frozenset({TextFormat.CODE}))


class TestLinksAndStripping:
    """Test link expansion and marker removal."""

    def test_link_becomes_text_and_url(self):
        text = "see [LINK_START:https://example.com]the docs[LINK_END]."
        assert expand_links(text) == "see the docs (https://example.com)."

    def test_link_without_url_keeps_text(self):
        assert expand_links("[LINK_START:]label[LINK_END]") == "label"

    def test_strip_markers(self):
        text = "[BOLD_START]Bold[BOLD_END] and [LINK_START:http://a.b]link[LINK_END]"
        assert strip_markers(text) == "Bold and link (http://a.b)"

    def test_plain_text_joins_runs(self):
        assert plain_text([TextRun("ab"), TextRun("cd", frozenset({BOLD}))]) == "abcd"


class TestRunsForLines:
    """Test mapping formats back onto wrapped lines."""

    def test_formats_follow_wrapped_words(self):
        runs = parse_runs("one [STRIKE_START]two three[STRIKE_END] four")
        lines = ["one two", "three four"]

        result = runs_for_lines(lines, runs)

        assert result[0] == [TextRun("one ", frozenset()), TextRun("two", frozenset({STRIKE}))]
        assert result[1] == [TextRun("three", frozenset({STRIKE})), TextRun(" four", frozenset())]

    def test_space_inside_span_keeps_format(self):
        runs = parse_runs("a [STRIKE_START]b c[STRIKE_END] d")
        result = runs_for_lines(["a b c d"], runs)
        assert TextRun("b c", frozenset({STRIKE})) in result[0]

    def test_line_text_is_unchanged(self):
        runs = parse_runs("x [BOLD_START]y z[BOLD_END]")
        lines = ["x y", "z"]
        result = runs_for_lines(lines, runs)
        assert [plain_text(line_runs) for line_runs in result] == lines

    def test_empty_line_gets_fallback_run(self):
        runs = parse_runs("", [ITALIC])
        assert runs_for_lines([""], runs) == [[TextRun("", frozenset({ITALIC}))]]
