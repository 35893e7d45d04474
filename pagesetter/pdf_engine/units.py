"""Unit conversion helpers. Layout works in millimetres, ReportLab in points."""
import re

from reportlab.lib import pagesizes
from reportlab.lib.units import cm, inch, mm

from pagesetter.exceptions import LayoutConfigError

POINTS_PER_MM = mm
PX_PER_INCH = 96.0

_LENGTH_PATTERN = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*(mm|cm|in|pt|px)?\s*$", re.IGNORECASE)

_UNIT_TO_POINTS = {
    "mm": mm,
    "cm": cm,
    "in": inch,
    "pt": 1.0,
    "px": inch / PX_PER_INCH,
}

# Portrait (width, height) in points
PAGE_PRESETS = {
    "A3": pagesizes.A3,
    "A4": pagesizes.A4,
    "A5": pagesizes.A5,
    "LETTER": pagesizes.LETTER,
    "LEGAL": pagesizes.LEGAL,
}


def pt_to_mm(value: float) -> float:
    """Convert typographic points to millimetres."""
    return value / POINTS_PER_MM


def mm_to_pt(value: float) -> float:
    """Convert millimetres to typographic points."""
    return value * POINTS_PER_MM


def px_to_mm(value: float, dpi: float = PX_PER_INCH) -> float:
    """Convert pixels to millimetres at the given DPI."""
    return value * 25.4 / dpi


def parse_length(value: str) -> float:
    """
    Parse a length such as "25mm", "1in", "2.5cm", "72pt" or "96px" into mm.

    A bare number is taken as millimetres.
    """
    match = _LENGTH_PATTERN.match(str(value))
    if not match:
        raise LayoutConfigError(f"Invalid length: {value!r}")
    number = float(match.group(1))
    unit = (match.group(2) or "mm").lower()
    return pt_to_mm(number * _UNIT_TO_POINTS[unit])


def page_size_mm(preset: str, orientation: str = "portrait"):
    """Return (width_mm, height_mm) for a named preset."""
    key = preset.strip().upper()
    if key not in PAGE_PRESETS:
        raise LayoutConfigError(
            f"Unknown page size: {preset}. Available: {sorted(PAGE_PRESETS)}"
        )
    width, height = PAGE_PRESETS[key]
    if orientation == "landscape":
        width, height = height, width
    return pt_to_mm(width), pt_to_mm(height)
