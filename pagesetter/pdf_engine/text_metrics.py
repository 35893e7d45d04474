"""
Text measurement and line wrapping.

There is no shaping engine behind the layout, so widths are estimated from a
per-character table. Every wrap, overflow and justification decision goes
through ``calculate_text_width`` so that they agree with each other.

All returned lengths are millimetres; font sizes are points.
"""

from typing import List

from .units import pt_to_mm

# Average Helvetica glyph width as a fraction of the font size
AVG_CHAR_WIDTH_RATIO = 0.52

NARROW_CHARS = frozenset("ilj!|.,:;")
SEMI_NARROW_CHARS = frozenset("tfr")
WIDE_CHARS = frozenset("mwMW")

NARROW_FACTOR = 0.5
SEMI_NARROW_FACTOR = 0.7
WIDE_FACTOR = 1.3
SPACE_FACTOR = 0.6

# Sizes above this are headings and get tighter leading
HEADING_SIZE_THRESHOLD = 16.0
HEADING_LINE_HEIGHT = 1.3
BODY_LINE_HEIGHT = 1.5

HEADING_SPACING_BEFORE = (24.0, 20.0, 16.0, 14.0, 12.0, 10.0)
HEADING_SPACING_AFTER = (16.0, 14.0, 12.0, 10.0, 8.0, 6.0)


def _char_factor(char: str) -> float:
    if char == " ":
        return SPACE_FACTOR
    if char in NARROW_CHARS:
        return NARROW_FACTOR
    if char in SEMI_NARROW_CHARS:
        return SEMI_NARROW_FACTOR
    if char in WIDE_CHARS:
        return WIDE_FACTOR
    return 1.0


def calculate_text_width(text: str, font_size: float) -> float:
    """Estimated rendered width of ``text`` in mm."""
    avg_char_width = font_size * AVG_CHAR_WIDTH_RATIO
    width_pt = sum(avg_char_width * _char_factor(c) for c in text)
    return pt_to_mm(width_pt)


def calculate_line_height(font_size: float) -> float:
    """Line height in mm: 1.3x for heading sizes, 1.5x for body sizes."""
    multiplier = HEADING_LINE_HEIGHT if font_size > HEADING_SIZE_THRESHOLD else BODY_LINE_HEIGHT
    return pt_to_mm(font_size * multiplier)


def calculate_paragraph_spacing(font_size: float) -> float:
    """Space above and below a paragraph: one em, in mm."""
    return pt_to_mm(font_size)


def _level_index(level: int) -> int:
    return min(max(level, 1), 6) - 1


def heading_spacing_before(level: int) -> float:
    return HEADING_SPACING_BEFORE[_level_index(level)]


def heading_spacing_after(level: int) -> float:
    return HEADING_SPACING_AFTER[_level_index(level)]


def _hard_split(word: str, max_width: float, font_size: float) -> List[str]:
    """Break a single over-long word into pieces that fit, one char at a time."""
    pieces = []
    remaining = ""
    for char in word:
        candidate = remaining + char
        if calculate_text_width(candidate, font_size) <= max_width:
            remaining = candidate
        else:
            if remaining:
                pieces.append(remaining)
            remaining = char
    pieces.append(remaining)
    return pieces


def wrap_text(text: str, max_width: float, font_size: float) -> List[str]:
    """
    Greedy word wrap.

    Args:
        text: Text to wrap; any whitespace run separates words
        max_width: Column width in mm
        font_size: Font size in points

    Returns:
        Lines joined by single spaces. Never empty: blank input gives [""].
        A line exceeds max_width only when it is a single character that
        does not fit on its own.
    """
    lines: List[str] = []
    current = ""

    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if calculate_text_width(candidate, font_size) <= max_width:
            current = candidate
            continue

        if current:
            lines.append(current)

        if calculate_text_width(word, font_size) > max_width:
            pieces = _hard_split(word, max_width, font_size)
            lines.extend(pieces[:-1])
            current = pieces[-1]
        else:
            current = word

    if current:
        lines.append(current)

    return lines or [""]
