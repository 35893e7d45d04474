"""
PDF generator - ties the layout engine to a ReportLab canvas.

Control flow for one document:
1. estimate_total_pages fixes N for the "Page X of N" footers
2. PageFlowController walks the elements once, drawing as it goes
3. The surface is saved; any write failure becomes OutputError
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from config.settings import Settings, get_settings
from pagesetter.document.models import DocumentElement
from pagesetter.exceptions import OutputError
from pagesetter.image_embedding import ImageEmbedder, ImageLoader

from .element_renderer import ElementRenderer
from .estimator import estimate_total_pages
from .fonts import FontManager, FontSystem
from .header_footer import HeaderFooterRenderer
from .page_flow import PageFlowController, RenderState
from .surface import DrawingSurface, ReportLabSurface
from .templates import LayoutTemplate, PageLayout, create_layout_template, with_font_override


logger = logging.getLogger(__name__)


class PdfGenerator:
    """
    Paginated PDF generation from document elements.

    Page geometry comes from settings; fonts, sizes and colours from the
    layout template.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        template: Optional[LayoutTemplate] = None,
        fonts: Optional[FontSystem] = None,
        image_embedder: Optional[ImageEmbedder] = None,
    ):
        """
        Initialize PDF generator.

        Args:
            settings: Settings instance (process-wide settings if omitted)
            template: Layout template (settings.template if omitted)
            fonts: Pre-resolved fonts; skips font registration when given
            image_embedder: Image collaborator (built from settings if omitted)
        """
        self.settings = settings or get_settings()
        self.layout = PageLayout.from_settings(self.settings)
        self.template = template or create_layout_template(self.settings.template)
        self.font_sizes = with_font_override(self.template.get_font_sizes(),
                                             self.settings.base_font_size)
        self.colors = self.template.get_colors()

        if fonts is None:
            font_manager = FontManager([str(self.settings.fonts_dir)])
            fonts = font_manager.load_font_system(self.template.FONT_FAMILY,
                                                  self.settings.register_dejavu_fonts)
        self.fonts = fonts

        self.image_embedder = image_embedder or ImageEmbedder(
            ImageLoader(timeout=self.settings.image_fetch_timeout)
        )

    def build_flow(self) -> PageFlowController:
        """Fresh renderer/header-footer/flow trio for one document"""
        renderer = ElementRenderer(
            self.fonts,
            self.font_sizes,
            self.colors,
            image_embedder=self.image_embedder,
            image_width_ratio=self.settings.image_width_ratio,
            image_max_height=self.settings.image_max_height_mm,
        )
        header_footer = HeaderFooterRenderer(
            self.layout,
            self.fonts,
            self.font_sizes,
            self.colors,
            spec=self.template.get_header_footer(),
            branding=self.settings.branding,
            page_label=self.settings.format_page_number,
        )
        return PageFlowController(self.layout, renderer, header_footer)

    def render(
        self,
        elements: Sequence[DocumentElement],
        surface: DrawingSurface,
        title: Optional[str] = None,
        progress_callback: Optional[Callable[[int, int, str], None]] = None
    ) -> RenderState:
        """
        Lay out elements onto an already-open surface (does not save it).

        Returns:
            Final RenderState (pages, per-page element indices, placeholders)
        """
        title = self.settings.document_title if title is None else title
        total_pages = estimate_total_pages(elements, self.layout)
        logger.debug(f"Estimated {total_pages} page(s) for {len(elements)} element(s)")

        return self.build_flow().run(surface, elements, total_pages, title, progress_callback)

    def generate(
        self,
        elements: Sequence[DocumentElement],
        output_path: Union[str, Path],
        title: Optional[str] = None,
        progress_callback: Optional[Callable[[int, int, str], None]] = None
    ) -> RenderState:
        """
        Render elements to a PDF file.

        Raises:
            OutputError: The file could not be created or written. No
                partial file is left behind.
        """
        output = Path(output_path)
        title = self.settings.document_title if title is None else title

        surface = ReportLabSurface(output, self.layout.width, self.layout.height, title=title)
        try:
            state = self.render(elements, surface, title, progress_callback)
            surface.save()
        except OSError as e:
            _remove_partial(output)
            raise OutputError(output, str(e)) from e
        except Exception:
            _remove_partial(output)
            raise

        logger.info(
            f"PDF rendered: {output} ({state.page_info.current_page} pages, "
            f"estimated {state.page_info.total_pages})"
        )
        return state


def _remove_partial(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove partial output {path}: {e}")


def generate_pdf(
    elements: Sequence[DocumentElement],
    output_path: Union[str, Path],
    settings: Optional[Settings] = None,
    template: Optional[str] = None,
) -> Path:
    """
    Convenience wrapper: render elements to output_path with settings.

    Args:
        elements: Ordered document elements
        output_path: Destination PDF path
        settings: Settings instance (process-wide settings if omitted)
        template: Template name overriding settings.template

    Returns:
        Path to the generated PDF
    """
    settings = settings or get_settings()
    layout_template = create_layout_template(template) if template else None
    PdfGenerator(settings, template=layout_template).generate(elements, output_path)
    return Path(output_path)
