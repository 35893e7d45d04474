"""
Base template classes for the layout engine.

A template bundles the fixed configuration of one document: page geometry
(millimetres), font sizes (points), the colour scheme and the running
header/footer switches. None of it changes while a document renders.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from reportlab.lib.colors import Color

from pagesetter.exceptions import LayoutConfigError

from ..units import page_size_mm, parse_length


class TemplateType(Enum):
    """Layout template types"""
    PROFESSIONAL = "professional"
    ACADEMIC = "academic"
    MINIMAL = "minimal"


@dataclass(frozen=True)
class PageLayout:
    """Page size, margins and header/footer bands, all in mm"""
    width: float = 210.0    # A4
    height: float = 297.0
    margin_top: float = 30.0
    margin_bottom: float = 30.0
    margin_left: float = 25.0
    margin_right: float = 25.0
    header_height: float = 18.0
    footer_height: float = 18.0

    def __post_init__(self):
        if self.content_width <= 0:
            raise LayoutConfigError(
                f"Margins leave no horizontal space ({self.width}mm page, "
                f"{self.margin_left}+{self.margin_right}mm margins)"
            )
        if self.usable_height <= 0:
            raise LayoutConfigError("Margins and header/footer bands leave no vertical space")

    @property
    def content_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def content_start_y(self) -> float:
        """Cursor value at the top of a fresh page (origin is bottom-left)"""
        return self.height - self.margin_top - self.header_height

    @property
    def content_floor(self) -> float:
        """Lowest y body content may reach before the footer band"""
        return self.margin_bottom + self.footer_height

    @property
    def usable_height(self) -> float:
        return self.content_start_y - self.content_floor

    @classmethod
    def us_letter(cls) -> 'PageLayout':
        """US Letter with 1in side margins"""
        width, height = page_size_mm("LETTER")
        return cls(width=width, height=height, margin_left=25.4, margin_right=25.4)

    @classmethod
    def from_settings(cls, settings) -> 'PageLayout':
        """Resolve page preset / custom size, orientation and unit margins."""
        if settings.page_width and settings.page_height:
            width = parse_length(settings.page_width)
            height = parse_length(settings.page_height)
            if settings.orientation == "landscape" and height > width:
                width, height = height, width
        else:
            width, height = page_size_mm(settings.page_size, settings.orientation)

        return cls(
            width=width,
            height=height,
            margin_top=parse_length(settings.margin_top),
            margin_bottom=parse_length(settings.margin_bottom),
            margin_left=parse_length(settings.margin_left),
            margin_right=parse_length(settings.margin_right),
            header_height=parse_length(settings.header_height),
            footer_height=parse_length(settings.footer_height),
        )


@dataclass(frozen=True)
class FontSizes:
    """Font sizes in points"""
    h1: float = 32.0
    h2: float = 26.0
    h3: float = 22.0
    h4: float = 18.0
    h5: float = 16.0
    h6: float = 14.0
    body: float = 12.0
    code: float = 10.0
    small: float = 10.0
    caption: float = 11.0

    def for_heading(self, level: int) -> float:
        """Level 1 is largest; anything past 6 uses h6"""
        level = min(max(level, 1), 6)
        return getattr(self, f"h{level}")

    def get(self, role: str) -> float:
        """Lookup by role name ('h1'..'h6', 'code', 'small', 'caption'); body otherwise"""
        if role in ("h1", "h2", "h3", "h4", "h5", "h6", "code", "small", "caption"):
            return getattr(self, role)
        return self.body

    def scaled_to(self, body: float) -> 'FontSizes':
        """Scale every size so the body size becomes ``body``"""
        ratio = body / self.body
        return FontSizes(**{
            name: round(getattr(self, name) * ratio, 2)
            for name in self.__dataclass_fields__
        })


def _rgb(r: float, g: float, b: float) -> Color:
    return Color(r, g, b)


@dataclass(frozen=True)
class ColorScheme:
    """Text and decoration colours"""
    text: Color = field(default_factory=lambda: _rgb(0.15, 0.15, 0.15))
    heading: Color = field(default_factory=lambda: _rgb(0.05, 0.15, 0.3))
    code: Color = field(default_factory=lambda: _rgb(0.65, 0.15, 0.35))
    code_bg: Color = field(default_factory=lambda: _rgb(0.96, 0.97, 0.98))
    code_border: Color = field(default_factory=lambda: _rgb(0.8, 0.82, 0.85))
    code_accent: Color = field(default_factory=lambda: _rgb(0.3, 0.4, 0.6))
    code_gutter: Color = field(default_factory=lambda: _rgb(0.92, 0.93, 0.95))
    line_number: Color = field(default_factory=lambda: _rgb(0.6, 0.6, 0.6))
    keyword: Color = field(default_factory=lambda: _rgb(0.2, 0.3, 0.8))
    comment: Color = field(default_factory=lambda: _rgb(0.5, 0.6, 0.5))
    blockquote: Color = field(default_factory=lambda: _rgb(0.35, 0.35, 0.4))
    blockquote_border: Color = field(default_factory=lambda: _rgb(0.3, 0.5, 0.8))
    blockquote_highlight: Color = field(default_factory=lambda: _rgb(0.6, 0.75, 0.9))
    blockquote_bg: Color = field(default_factory=lambda: _rgb(0.98, 0.98, 0.99))
    quote_mark: Color = field(default_factory=lambda: _rgb(0.7, 0.7, 0.75))
    table_border: Color = field(default_factory=lambda: _rgb(0.6, 0.6, 0.65))
    table_header: Color = field(default_factory=lambda: _rgb(0.25, 0.35, 0.55))
    table_header_text: Color = field(default_factory=lambda: _rgb(1.0, 1.0, 1.0))
    table_stripe: Color = field(default_factory=lambda: _rgb(0.97, 0.98, 0.99))
    table_divider: Color = field(default_factory=lambda: _rgb(0.85, 0.85, 0.85))
    table_row_rule: Color = field(default_factory=lambda: _rgb(0.90, 0.90, 0.90))
    link: Color = field(default_factory=lambda: _rgb(0.1, 0.35, 0.7))
    bullet: Color = field(default_factory=lambda: _rgb(0.3, 0.4, 0.6))
    rule: Color = field(default_factory=lambda: _rgb(0.4, 0.5, 0.7))
    header_title: Color = field(default_factory=lambda: _rgb(0.2, 0.3, 0.5))
    header_rule: Color = field(default_factory=lambda: _rgb(0.3, 0.4, 0.6))
    placeholder_fill: Color = field(default_factory=lambda: _rgb(0.95, 0.95, 0.95))
    placeholder_border: Color = field(default_factory=lambda: _rgb(0.8, 0.8, 0.8))


@dataclass(frozen=True)
class HeaderFooterSpec:
    """Running header and footer switches"""
    show_header: bool = True
    show_footer: bool = True
    header_line: bool = True
    footer_line: bool = True
    show_branding: bool = True


class LayoutTemplate(ABC):
    """
    Abstract base class for layout templates.

    Templates define font family, font sizes, colours and the running
    header/footer. Page geometry comes from settings (see PageLayout.from_settings).
    """

    # 'sans' or 'serif', resolved to concrete fonts by FontManager
    FONT_FAMILY = 'sans'

    @property
    @abstractmethod
    def name(self) -> str:
        """Template display name"""
        pass

    @property
    @abstractmethod
    def template_type(self) -> TemplateType:
        """Template type enum"""
        pass

    def get_font_sizes(self) -> FontSizes:
        return FontSizes()

    def get_colors(self) -> ColorScheme:
        return ColorScheme()

    def get_header_footer(self) -> HeaderFooterSpec:
        return HeaderFooterSpec()


def create_layout_template(template_type: str) -> LayoutTemplate:
    """
    Factory function to create a layout template by name.

    Args:
        template_type: 'professional', 'academic' or 'minimal'

    Returns:
        LayoutTemplate instance
    """
    from .professional import ProfessionalTemplate
    from .academic import AcademicTemplate
    from .minimal import MinimalTemplate

    templates = {
        'professional': ProfessionalTemplate,
        'academic': AcademicTemplate,
        'minimal': MinimalTemplate,
    }

    template_class = templates.get(template_type.lower())
    if not template_class:
        raise LayoutConfigError(
            f"Unknown layout template: {template_type}. "
            f"Available: {list(templates.keys())}"
        )

    return template_class()


def with_font_override(sizes: FontSizes, body: Optional[float]) -> FontSizes:
    """Apply the optional body-size override from settings."""
    if body is None or body == sizes.body:
        return sizes
    if body <= 0:
        raise LayoutConfigError(f"Font size must be positive, got {body}")
    return sizes.scaled_to(body)
