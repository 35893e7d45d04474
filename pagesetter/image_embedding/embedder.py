"""
Image Embedder - place a referenced image on a drawing surface.

Usage:
    embedder = ImageEmbedder(ImageLoader(timeout=5.0))
    height = embedder.embed(surface, "figures/chart.png", x, y, max_w, max_h)
"""

import logging
from typing import Optional, Tuple

from pagesetter.exceptions import ImageDecodeError
from pagesetter.pdf_engine.units import PX_PER_INCH

from .loader import ImageLoader
from .models import LoadedImage, Placement


logger = logging.getLogger(__name__)

# Modes ReportLab's ImageReader embeds without a lossy conversion
_DIRECT_MODES = ("RGB", "RGBA", "L", "CMYK")


def fit_dimensions(
    width_mm: float,
    height_mm: float,
    max_width: float,
    max_height: float
) -> Tuple[float, float]:
    """
    Scale (width, height) into the box, preserving aspect ratio.

    Natural size is kept when it already fits; images are never enlarged.
    """
    if width_mm <= max_width and height_mm <= max_height:
        return width_mm, height_mm

    aspect_ratio = width_mm / height_mm if height_mm else 1.0
    if width_mm / max_width > height_mm / max_height:
        return max_width, max_width / aspect_ratio
    return max_height * aspect_ratio, max_height


class ImageEmbedder:
    """
    Load, scale and draw images.

    Features:
    - Natural size at 96 DPI when it fits the box
    - Aspect-preserving downscale otherwise
    - Horizontal centring inside the box
    """

    def __init__(self, loader: Optional[ImageLoader] = None, dpi: float = PX_PER_INCH):
        self.loader = loader or ImageLoader()
        self.dpi = dpi

    def placement_for(self, loaded: LoadedImage, x: float, y: float,
                      max_width: float, max_height: float) -> Placement:
        """Placement of the image whose box top-left is (x, y)"""
        natural_w, natural_h = loaded.natural_size_mm(self.dpi)
        width, height = fit_dimensions(natural_w, natural_h, max_width, max_height)
        return Placement(x=x + (max_width - width) / 2, y=y - height, width=width, height=height)

    def embed(self, surface, reference: str, x: float, y: float,
              max_width: float, max_height: float) -> float:
        """
        Draw the image below y, inside the box [x, x + max_width].

        Returns:
            Height consumed in mm

        Raises:
            ImageEmbeddingError subclasses on any load or draw failure
        """
        loaded = self.loader.load(reference)
        placement = self.placement_for(loaded, x, y, max_width, max_height)

        image = loaded.image
        try:
            if image.mode not in _DIRECT_MODES:
                image = image.convert("RGBA")
            surface.draw_image(image, placement.x, placement.y, placement.width, placement.height)
        except Exception as e:
            raise ImageDecodeError(reference, f"Failed to draw image: {e}") from e

        logger.debug(
            f"Embedded {reference} ({loaded.width_px}x{loaded.height_px}px) "
            f"at {placement.width:.1f}x{placement.height:.1f}mm"
        )
        return placement.height
