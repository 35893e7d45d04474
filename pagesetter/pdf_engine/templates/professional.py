"""
Professional Template - the default look.

Features:
- Helvetica / DejaVu Sans family
- Large dark-blue headings
- Blue-gray table headers with striped rows
- Header title rule and "Page X of N" footer with branding
"""

from .base import LayoutTemplate, TemplateType


class ProfessionalTemplate(LayoutTemplate):
    """
    Default template.

    Uses the base FontSizes and ColorScheme unchanged.
    """

    FONT_FAMILY = 'sans'

    @property
    def name(self) -> str:
        return "Professional"

    @property
    def template_type(self) -> TemplateType:
        return TemplateType.PROFESSIONAL
