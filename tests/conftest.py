"""
Shared fixtures for the layout engine tests.
"""

import io
from pathlib import Path

import pytest
from PIL import Image as PILImage

from config.settings import Settings
from pagesetter.image_embedding import ImageEmbedder, ImageLoader
from pagesetter.pdf_engine.element_renderer import ElementRenderer
from pagesetter.pdf_engine.fonts import FontSystem
from pagesetter.pdf_engine.header_footer import HeaderFooterRenderer
from pagesetter.pdf_engine.page_flow import PageFlowController
from pagesetter.pdf_engine.surface import RecordingSurface
from pagesetter.pdf_engine.templates import ColorScheme, FontSizes, PageLayout


# ============================================================
# Configuration
# ============================================================

@pytest.fixture
def settings(tmp_path):
    """Settings isolated from any .env file, using base-14 fonts"""
    return Settings(
        _env_file=None,
        register_dejavu_fonts=False,
        document_title="Test Document",
        output_dir=tmp_path / "output",
    )


@pytest.fixture
def layout():
    """Default A4 layout"""
    return PageLayout()


# ============================================================
# Rendering
# ============================================================

@pytest.fixture
def fonts():
    """DejaVu font names; RecordingSurface never needs them registered"""
    return FontSystem.dejavu()


@pytest.fixture
def builtin_fonts():
    return FontSystem.builtin()


@pytest.fixture
def font_sizes():
    return FontSizes()


@pytest.fixture
def colors():
    return ColorScheme()


@pytest.fixture
def renderer(fonts, font_sizes, colors):
    return ElementRenderer(fonts, font_sizes, colors, image_embedder=ImageEmbedder(ImageLoader()))


@pytest.fixture
def header_footer(layout, fonts, font_sizes, colors):
    return HeaderFooterRenderer(layout, fonts, font_sizes, colors, branding="Generated by Pagesetter")


@pytest.fixture
def flow(layout, renderer, header_footer):
    return PageFlowController(layout, renderer, header_footer)


@pytest.fixture
def surface():
    return RecordingSurface()


# ============================================================
# Images
# ============================================================

@pytest.fixture
def png_path(tmp_path) -> Path:
    """200x100 px PNG, about 53x26mm at 96 DPI"""
    path = tmp_path / "chart.png"
    PILImage.new("RGB", (200, 100), (30, 90, 160)).save(path, format="PNG")
    return path


@pytest.fixture
def large_png_path(tmp_path) -> Path:
    """Wider than any content column at 96 DPI"""
    path = tmp_path / "wide.png"
    PILImage.new("RGBA", (1600, 400), (200, 40, 40, 255)).save(path, format="PNG")
    return path


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    PILImage.new("RGB", (40, 20), (0, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()
