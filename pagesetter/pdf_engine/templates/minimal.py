"""
Minimal Template - clean pages with almost no chrome.
"""

from reportlab.lib.colors import Color

from .base import (
    LayoutTemplate, TemplateType, ColorScheme, HeaderFooterSpec
)


class MinimalTemplate(LayoutTemplate):
    """Gray palette, no header/footer rules, no branding."""

    FONT_FAMILY = 'sans'

    @property
    def name(self) -> str:
        return "Minimal"

    @property
    def template_type(self) -> TemplateType:
        return TemplateType.MINIMAL

    def get_colors(self) -> ColorScheme:
        gray = Color(0.4, 0.4, 0.4)
        return ColorScheme(
            heading=Color(0.1, 0.1, 0.1),
            table_header=Color(0.35, 0.35, 0.35),
            bullet=gray,
            rule=gray,
            header_title=gray,
            header_rule=gray,
            blockquote_border=gray,
        )

    def get_header_footer(self) -> HeaderFooterSpec:
        return HeaderFooterSpec(
            header_line=False,
            footer_line=False,
            show_branding=False,
        )
