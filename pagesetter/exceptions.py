"""
Pagesetter Custom Exceptions
"""

from pathlib import Path
from typing import Optional, Union


class PagesetterError(Exception):
    """Base exception for the layout engine"""
    pass


class OutputError(PagesetterError):
    """Output surface could not be created or written"""
    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to write PDF to {self.path}: {reason}")


class ElementParseError(PagesetterError):
    """Upstream element record is malformed"""
    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        prefix = f"element #{index}: " if index is not None else ""
        super().__init__(f"{prefix}{message}")


class LayoutConfigError(PagesetterError):
    """Invalid page geometry or template selection"""
    pass


class ImageEmbeddingError(PagesetterError):
    """Image could not be placed on the page"""
    def __init__(self, reference: str, message: str):
        self.reference = reference
        super().__init__(message)


class ImageFetchError(ImageEmbeddingError):
    """Image file missing or download failed"""
    pass


class ImageDecodeError(ImageEmbeddingError):
    """Image bytes could not be decoded"""
    pass


class UnsupportedImageFormatError(ImageEmbeddingError):
    """Image extension is not one we can decode"""
    pass
