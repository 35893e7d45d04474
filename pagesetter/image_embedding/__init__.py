"""
Image embedding collaborator for the PDF engine.

Usage:
    from pagesetter.image_embedding import ImageEmbedder, ImageLoader

    embedder = ImageEmbedder(ImageLoader(timeout=10.0))
    placed_height = embedder.embed(surface, "chart.png", x, y, max_w, max_h)
"""

from .models import ImageFormat, LoadedImage, Placement, is_url
from .loader import ImageLoader
from .embedder import ImageEmbedder, fit_dimensions


__all__ = [
    # Models
    'ImageFormat',
    'LoadedImage',
    'Placement',
    'is_url',

    # Loading and placement
    'ImageLoader',
    'ImageEmbedder',
    'fit_dimensions',
]
