"""
Inline formatting runs.

The upstream parser leaves inline styles in element text as paired markers
(``[BOLD_START]...[BOLD_END]``, ``[ITALIC_...]``, ``[STRIKE_...]``,
``[CODE_...]``) and links as ``[LINK_START:url]text[LINK_END]``.

Wrapping works on the marker-free text so that widths agree with
text_metrics; the styles are then mapped back onto the wrapped lines by
walking non-whitespace characters in order (wrapping only ever drops or
collapses whitespace).
"""

import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional

from pagesetter.document.models import TextFormat


@dataclass(frozen=True)
class TextRun:
    """A stretch of text sharing one set of formats"""
    text: str
    formats: FrozenSet[TextFormat] = frozenset()


MARKERS = {
    "[BOLD_START]": (TextFormat.BOLD, True),
    "[BOLD_END]": (TextFormat.BOLD, False),
    "[ITALIC_START]": (TextFormat.ITALIC, True),
    "[ITALIC_END]": (TextFormat.ITALIC, False),
    "[STRIKE_START]": (TextFormat.STRIKETHROUGH, True),
    "[STRIKE_END]": (TextFormat.STRIKETHROUGH, False),
    "[CODE_START]": (TextFormat.CODE, True),
    "[CODE_END]": (TextFormat.CODE, False),
}

_MARKER_PATTERN = re.compile("|".join(re.escape(m) for m in MARKERS))
_LINK_PATTERN = re.compile(r"\[LINK_START:([^\]]*)\](.*?)\[LINK_END\]", re.DOTALL)


def expand_links(text: str) -> str:
    """Replace link markers with 'text (url)'"""
    def _replace(match):
        url, label = match.group(1), match.group(2)
        return f"{label} ({url})" if url else label
    return _LINK_PATTERN.sub(_replace, text)


def parse_runs(text: str, base_formats: Iterable[TextFormat] = ()) -> List[TextRun]:
    """
    Split marked-up text into runs.

    base_formats apply to the whole text; markers add or remove formats on
    top of them. An END marker removes its format even when it came from
    base_formats. Always returns at least one run.
    """
    base = frozenset(base_formats)
    active = set(base)
    runs: List[TextRun] = []
    position = 0

    for match in _MARKER_PATTERN.finditer(text):
        if match.start() > position:
            runs.append(TextRun(text[position:match.start()], frozenset(active)))
        text_format, opening = MARKERS[match.group(0)]
        if opening:
            active.add(text_format)
        else:
            active.discard(text_format)
        position = match.end()

    if position < len(text):
        runs.append(TextRun(text[position:], frozenset(active)))

    return runs or [TextRun("", base)]


def plain_text(runs: Iterable[TextRun]) -> str:
    return "".join(run.text for run in runs)


def strip_markers(text: str) -> str:
    """Marker-free text with links expanded"""
    return plain_text(parse_runs(expand_links(text)))


def _merge(runs: List[TextRun]) -> List[TextRun]:
    merged: List[TextRun] = []
    for run in runs:
        if merged and merged[-1].formats == run.formats:
            merged[-1] = TextRun(merged[-1].text + run.text, run.formats)
        else:
            merged.append(run)
    return merged


def runs_for_lines(lines: List[str], runs: List[TextRun]) -> List[List[TextRun]]:
    """
    Map formats from the unwrapped runs onto wrapped lines.

    Spaces inside a line take the formats shared by their neighbours, so a
    strikethrough or code span stays continuous across its own spaces but
    does not bleed into the gap after it.
    """
    char_formats = [run.formats for run in runs for char in run.text if not char.isspace()]
    fallback = runs[0].formats if runs else frozenset()
    index = 0
    result = []

    for line in lines:
        per_char: List[Optional[FrozenSet[TextFormat]]] = []
        for char in line:
            if char.isspace():
                per_char.append(None)
            else:
                per_char.append(char_formats[index] if index < len(char_formats) else fallback)
                index += 1

        line_runs = []
        for pos, char in enumerate(line):
            formats = per_char[pos]
            if formats is None:
                before = next((f for f in reversed(per_char[:pos]) if f is not None), None)
                after = next((f for f in per_char[pos + 1:] if f is not None), None)
                if before is not None and after is not None:
                    formats = before & after
                else:
                    formats = before or after or fallback
            line_runs.append(TextRun(char, formats))

        result.append(_merge(line_runs) or [TextRun("", fallback)])

    return result
