"""
Layout template module exports.
"""

from .base import (
    LayoutTemplate,
    TemplateType,
    PageLayout,
    FontSizes,
    ColorScheme,
    HeaderFooterSpec,
    create_layout_template,
    with_font_override,
)

from .professional import ProfessionalTemplate
from .academic import AcademicTemplate
from .minimal import MinimalTemplate


__all__ = [
    # Base classes
    'LayoutTemplate',
    'TemplateType',
    'PageLayout',
    'FontSizes',
    'ColorScheme',
    'HeaderFooterSpec',

    # Factory
    'create_layout_template',
    'with_font_override',

    # Template implementations
    'ProfessionalTemplate',
    'AcademicTemplate',
    'MinimalTemplate',
]
