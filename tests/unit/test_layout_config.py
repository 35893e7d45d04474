"""
Unit tests for settings, unit parsing, page geometry and templates.
"""

import pytest
from pydantic import ValidationError

from config.settings import Settings
from pagesetter.exceptions import LayoutConfigError
from pagesetter.pdf_engine.templates import (
    AcademicTemplate,
    FontSizes,
    MinimalTemplate,
    PageLayout,
    ProfessionalTemplate,
    TemplateType,
    create_layout_template,
    with_font_override,
)
from pagesetter.pdf_engine.units import mm_to_pt, page_size_mm, parse_length, pt_to_mm


class TestUnits:
    """Test length parsing and conversions."""

    @pytest.mark.parametrize("value,expected", [
        ("25mm", 25.0),
        ("2.5cm", 25.0),
        ("1in", 25.4),
        ("72pt", 25.4),
        ("96px", 25.4),
        ("12", 12.0),
        (" 10 MM ", 10.0),
    ])
    def test_parse_length(self, value, expected):
        assert parse_length(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", ["", "ten mm", "5 furlongs", "mm"])
    def test_invalid_length(self, value):
        with pytest.raises(LayoutConfigError):
            parse_length(value)

    def test_conversions_are_inverse(self):
        assert pt_to_mm(mm_to_pt(42.0)) == pytest.approx(42.0)
        assert mm_to_pt(25.4) == pytest.approx(72.0)

    def test_page_presets(self):
        width, height = page_size_mm("a4")
        assert (width, height) == (pytest.approx(210.0, abs=0.1), pytest.approx(297.0, abs=0.1))
        width, height = page_size_mm("Letter", "landscape")
        assert width == pytest.approx(279.4)
        assert height == pytest.approx(215.9)

    def test_unknown_preset(self):
        with pytest.raises(LayoutConfigError, match="Unknown page size"):
            page_size_mm("B9")


class TestPageLayout:
    """Test page geometry."""

    def test_default_a4(self):
        layout = PageLayout()
        assert layout.content_width == 160.0
        assert layout.content_start_y == 297.0 - 30.0 - 18.0
        assert layout.content_floor == 48.0
        assert layout.usable_height == pytest.approx(201.0)

    def test_from_default_settings(self, settings):
        layout = PageLayout.from_settings(settings)
        assert layout.width == pytest.approx(210.0, abs=0.1)
        assert layout.margin_left == pytest.approx(25.0)

    def test_custom_size_and_margins(self, settings):
        custom = settings.model_copy(update={
            "page_width": "8.5in",
            "page_height": "11in",
            "margin_left": "1in",
            "margin_right": "1in",
        })
        layout = PageLayout.from_settings(custom)
        assert layout.width == pytest.approx(215.9)
        assert layout.content_width == pytest.approx(215.9 - 50.8)

    def test_landscape(self, settings):
        layout = PageLayout.from_settings(settings.model_copy(update={"orientation": "landscape"}))
        assert layout.width > layout.height

    def test_margins_too_wide(self):
        with pytest.raises(LayoutConfigError, match="horizontal"):
            PageLayout(margin_left=120.0, margin_right=100.0)

    def test_no_vertical_space(self):
        with pytest.raises(LayoutConfigError, match="vertical"):
            PageLayout(margin_top=150.0, margin_bottom=150.0)

    def test_us_letter(self):
        layout = PageLayout.us_letter()
        assert layout.width == pytest.approx(215.9)
        assert layout.margin_left == 25.4


class TestSettings:
    """Test settings validation."""

    def test_defaults(self, settings):
        assert settings.template == "professional"
        assert settings.page_size == "A4"
        assert settings.max_workers >= 1

    def test_orientation_is_normalised(self):
        assert Settings(_env_file=None, orientation=" Landscape ").orientation == "landscape"

    def test_bad_orientation(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, orientation="sideways")

    def test_bad_image_ratio(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, image_width_ratio=1.5)

    def test_bad_worker_count(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, max_workers=0)

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("PAGESETTER_TEMPLATE", "academic")
        monkeypatch.setenv("PAGESETTER_MARGIN_TOP", "1in")
        settings = Settings(_env_file=None)
        assert settings.template == "academic"
        assert settings.margin_top == "1in"


class TestTemplates:
    """Test the template factory and font overrides."""

    @pytest.mark.parametrize("name,cls,template_type", [
        ("professional", ProfessionalTemplate, TemplateType.PROFESSIONAL),
        ("Academic", AcademicTemplate, TemplateType.ACADEMIC),
        ("minimal", MinimalTemplate, TemplateType.MINIMAL),
    ])
    def test_factory(self, name, cls, template_type):
        template = create_layout_template(name)
        assert isinstance(template, cls)
        assert template.template_type == template_type

    def test_unknown_template(self):
        with pytest.raises(LayoutConfigError, match="Unknown layout template"):
            create_layout_template("fancy")

    def test_academic_is_serif(self):
        assert AcademicTemplate.FONT_FAMILY == "serif"
        assert ProfessionalTemplate.FONT_FAMILY == "sans"

    def test_heading_sizes_decrease(self):
        for template in (ProfessionalTemplate(), AcademicTemplate(), MinimalTemplate()):
            sizes = template.get_font_sizes()
            headings = [sizes.for_heading(level) for level in range(1, 7)]
            assert headings == sorted(headings, reverse=True)

    def test_minimal_hides_branding(self):
        assert MinimalTemplate().get_header_footer().show_branding is False

    def test_font_override_scales_all_sizes(self):
        sizes = with_font_override(FontSizes(), 10.0)
        assert sizes.body == 10.0
        assert sizes.h1 == pytest.approx(32.0 * 10 / 12, abs=0.01)

    def test_font_override_noop(self):
        base = FontSizes()
        assert with_font_override(base, None) is base
        assert with_font_override(base, 12.0) is base

    def test_font_override_rejects_non_positive(self):
        with pytest.raises(LayoutConfigError):
            with_font_override(FontSizes(), 0.0)

    def test_font_size_lookup(self):
        sizes = FontSizes()
        assert sizes.get("h2") == 26.0
        assert sizes.get("code") == 10.0
        assert sizes.get("anything") == 12.0
        assert sizes.for_heading(0) == sizes.h1
