"""
Image loading - local files via Pillow, http(s) URLs via httpx.

Every failure is raised as one of the typed ImageEmbeddingError
subclasses so the renderer can degrade to a placeholder.
"""

import io
import logging
from pathlib import Path
from typing import Optional

import httpx
from PIL import Image as PILImage, UnidentifiedImageError

from pagesetter.exceptions import ImageDecodeError, ImageFetchError

from .models import ImageFormat, LoadedImage, is_url


logger = logging.getLogger(__name__)


class ImageLoader:
    """
    Resolve an image reference to a decoded Pillow image.

    Usage:
        loader = ImageLoader(timeout=10.0)
        loaded = loader.load("figures/chart.png")
    """

    def __init__(self, timeout: float = 10.0, client: Optional[httpx.Client] = None):
        """
        Args:
            timeout: Seconds allowed for a URL download
            client: Optional shared httpx.Client (tests pass one with a MockTransport)
        """
        self.timeout = httpx.Timeout(timeout)
        self._client = client

    def load(self, reference: str) -> LoadedImage:
        """
        Load and decode an image.

        Raises:
            UnsupportedImageFormatError: Extension (or decoded format) not supported
            ImageFetchError: File missing/unreadable or download failed
            ImageDecodeError: Bytes are not a valid image
        """
        expected = ImageFormat.from_reference(reference)
        if is_url(reference):
            data = self._download(reference)
        else:
            data = self._read_file(reference)
        return self._decode(reference, data, expected)

    def _read_file(self, reference: str) -> bytes:
        path = Path(reference)
        if not path.is_file():
            raise ImageFetchError(reference, f"Image file not found: {reference}")
        try:
            return path.read_bytes()
        except OSError as e:
            raise ImageFetchError(reference, f"Failed to open image file: {e}") from e

    def _download(self, url: str) -> bytes:
        logger.debug(f"Downloading image: {url}")
        try:
            if self._client is not None:
                response = self._client.get(url, timeout=self.timeout, follow_redirects=True)
            else:
                with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                    response = client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ImageFetchError(url, f"HTTP {e.response.status_code} for {url}") from e
        except httpx.HTTPError as e:
            raise ImageFetchError(url, f"Failed to download image: {e}") from e
        return response.content

    def _decode(self, reference: str, data: bytes, expected: Optional[ImageFormat]) -> LoadedImage:
        try:
            image = PILImage.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, PILImage.DecompressionBombError, OSError, ValueError) as e:
            raise ImageDecodeError(reference, f"Failed to decode image: {e}") from e

        actual = ImageFormat.from_pil(image.format, reference)
        if expected is not None and actual != expected:
            logger.debug(f"{reference}: extension says {expected.value}, content is {actual.value}")

        return LoadedImage(
            image=image,
            format=actual,
            source=reference,
            width_px=image.width,
            height_px=image.height,
        )
