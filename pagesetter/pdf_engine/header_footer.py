"""
Running header and footer, drawn once per page before any body content.
"""

from typing import Callable, Optional

from .fonts import FontSystem
from .templates.base import ColorScheme, FontSizes, HeaderFooterSpec, PageLayout
from .text_metrics import calculate_text_width


HEADER_OFFSET = 8.0  # title baseline above the top margin
HEADER_RULE_GAP = 4.0
FOOTER_OFFSET = 3.0  # footer baseline below the bottom margin
FOOTER_RULE_GAP = 5.0
BRANDING_SCALE = 0.85


def default_page_label(page: int, total: int) -> str:
    return f"Page {page} of {total}"


class HeaderFooterRenderer:
    """Header title + rule, footer rule + branding + 'Page X of N'"""

    def __init__(
        self,
        layout: PageLayout,
        fonts: FontSystem,
        font_sizes: FontSizes,
        colors: ColorScheme,
        spec: Optional[HeaderFooterSpec] = None,
        branding: str = "",
        page_label: Callable[[int, int], str] = default_page_label,
    ):
        self.layout = layout
        self.fonts = fonts
        self.font_sizes = font_sizes
        self.colors = colors
        self.spec = spec or HeaderFooterSpec()
        self.branding = branding
        self.page_label = page_label

    def render(self, surface, page_info) -> None:
        """Draw the chrome for page_info.current_page"""
        if self.spec.show_header:
            self.render_header(surface, page_info.title)
        if self.spec.show_footer:
            self.render_footer(surface, page_info.current_page, page_info.total_pages)

    def render_header(self, surface, title: str) -> None:
        layout = self.layout
        header_y = layout.height - layout.margin_top + HEADER_OFFSET
        surface.place_text(title, layout.margin_left, header_y, self.fonts.bold,
                           self.font_sizes.small, self.colors.header_title)

        if self.spec.header_line:
            rule_y = header_y - HEADER_RULE_GAP
            surface.draw_line(layout.margin_left, rule_y, layout.width - layout.margin_right,
                              rule_y, 1.0, self.colors.header_rule)

    def render_footer(self, surface, page: int, total: int) -> None:
        layout = self.layout
        small = self.font_sizes.small
        footer_y = layout.margin_bottom - FOOTER_OFFSET

        if self.spec.footer_line:
            rule_y = footer_y + FOOTER_RULE_GAP
            surface.draw_line(layout.margin_left, rule_y, layout.width - layout.margin_right,
                              rule_y, 1.0, self.colors.header_rule)

        page_text = self.page_label(page, total)
        page_width = calculate_text_width(page_text, small)
        surface.place_text(page_text, layout.width - layout.margin_right - page_width, footer_y,
                           self.fonts.regular, small, self.colors.text)

        if self.spec.show_branding and self.branding:
            surface.place_text(self.branding, layout.margin_left, footer_y, self.fonts.italic,
                               small * BRANDING_SCALE, self.colors.blockquote)
