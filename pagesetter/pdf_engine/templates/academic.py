"""
Academic Template - for papers and reports.

Features:
- Serif family (Times / DejaVu Serif)
- Smaller, black headings
- Muted gray tables and rules
- No branding line in the footer
"""

from reportlab.lib.colors import Color, black

from .base import (
    LayoutTemplate, TemplateType, FontSizes, ColorScheme, HeaderFooterSpec
)


class AcademicTemplate(LayoutTemplate):
    """
    Academic paper template.

    Typography: serif, body 11pt
    Style: Formal, low-colour
    """

    FONT_FAMILY = 'serif'

    GRAY = Color(0.3, 0.3, 0.3)

    @property
    def name(self) -> str:
        return "Academic"

    @property
    def template_type(self) -> TemplateType:
        return TemplateType.ACADEMIC

    def get_font_sizes(self) -> FontSizes:
        return FontSizes(
            h1=20, h2=16, h3=14, h4=13, h5=12, h6=11,
            body=11, code=9, small=9, caption=10,
        )

    def get_colors(self) -> ColorScheme:
        return ColorScheme(
            text=black,
            heading=black,
            code=Color(0.2, 0.2, 0.2),
            table_header=Color(0.85, 0.85, 0.85),
            table_header_text=black,
            link=Color(0.0, 0.2, 0.5),
            bullet=black,
            rule=self.GRAY,
            header_title=self.GRAY,
            header_rule=self.GRAY,
        )

    def get_header_footer(self) -> HeaderFooterSpec:
        return HeaderFooterSpec(show_branding=False)
