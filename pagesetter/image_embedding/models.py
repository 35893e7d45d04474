"""
Image Embedding Models

Data models for loading and placing images.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Optional, Tuple
from urllib.parse import urlparse

from pagesetter.exceptions import UnsupportedImageFormatError
from pagesetter.pdf_engine.units import px_to_mm, PX_PER_INCH


class ImageFormat(Enum):
    """Supported image formats"""
    PNG = "png"
    JPEG = "jpeg"
    GIF = "gif"
    BMP = "bmp"
    TIFF = "tiff"
    WEBP = "webp"

    @classmethod
    def from_extension(cls, ext: str, reference: str = "") -> "ImageFormat":
        """Get format from file extension ('jpg' and 'tif' are aliases)"""
        ext = ext.lower().lstrip(".")
        aliases = {"jpg": "jpeg", "tif": "tiff"}
        try:
            return cls(aliases.get(ext, ext))
        except ValueError:
            raise UnsupportedImageFormatError(
                reference or ext, f"Unsupported image format: {ext or 'no extension'}"
            )

    @classmethod
    def from_pil(cls, pil_format: Optional[str], reference: str = "") -> "ImageFormat":
        """Map Pillow's Image.format ('PNG', 'JPEG', 'MPO', ...) to ImageFormat"""
        name = (pil_format or "").lower()
        if name == "mpo":  # multi-picture JPEG from phone cameras
            name = "jpeg"
        return cls.from_extension(name, reference)

    @classmethod
    def from_reference(cls, reference: str) -> Optional["ImageFormat"]:
        """
        Format implied by the path or URL suffix.

        Returns None for URLs without a suffix (the decoded bytes decide).
        Raises UnsupportedImageFormatError for a suffix that is not supported.
        """
        if is_url(reference):
            suffix = PurePosixPath(urlparse(reference).path).suffix
            if not suffix:
                return None
        else:
            suffix = PurePosixPath(reference.replace("\\", "/")).suffix
        return cls.from_extension(suffix, reference)


def is_url(reference: str) -> bool:
    """http(s) URLs are fetched; anything else is a local path"""
    parsed = urlparse(reference)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


@dataclass
class LoadedImage:
    """A decoded image ready to be placed"""
    image: object  # PIL.Image.Image
    format: ImageFormat
    source: str
    width_px: int = 0
    height_px: int = 0

    @property
    def aspect_ratio(self) -> float:
        """Width / Height ratio"""
        if self.height_px == 0:
            return 1.0
        return self.width_px / self.height_px

    def natural_size_mm(self, dpi: float = PX_PER_INCH) -> Tuple[float, float]:
        return px_to_mm(self.width_px, dpi), px_to_mm(self.height_px, dpi)


@dataclass(frozen=True)
class Placement:
    """Where an image ended up, in mm (bottom-left origin)"""
    x: float
    y: float
    width: float
    height: float
