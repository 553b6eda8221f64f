"""
Module: pipeline.images.codec

Purpose:
    Decode and encode page image bytes with Pillow, and expose a lazily
    decoded page image that can be released deterministically.

Key Functions:
    - decode_image(): Bytes → fully loaded PIL image
    - encode_image(): PIL image → bytes

Key Classes:
    - PageImageProvider: Lazy, closable access to a page's pixels

Dependencies:
    - PIL: Image decoding/encoding

Used By:
    - pipeline.orientation: Rotates page images
    - report.controller: Loads images for compositing
"""

from __future__ import annotations

import io
import logging
from typing import Optional, Tuple, Type

from PIL import Image, UnidentifiedImageError

from smartgrade.core.errors import ImageLoadError, PageError
from smartgrade.core.models import Page

logger = logging.getLogger(__name__)

DEFAULT_JPEG_QUALITY = 95


def decode_image(
    data: bytes,
    *,
    page_id: Optional[str] = None,
    error_cls: Type[PageError] = ImageLoadError,
) -> Image.Image:
    """
    Decode image bytes into a fully loaded PIL image.

    Args:
        data: Encoded image bytes
        page_id: Page id, attached to the raised error
        error_cls: Error type to raise (callers pick decode vs load)

    Returns:
        Loaded PIL image (pixel data read, file handle closed)

    Raises:
        error_cls: If the bytes are empty, truncated or not an image
    """
    if not data:
        raise error_cls(f"Page {page_id} has no image data", page_id=page_id)
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return img.copy()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise error_cls(f"Cannot decode image for page {page_id}: {e}", page_id=page_id) from e


def encode_image(
    image: Image.Image,
    *,
    format: str = "JPEG",
    quality: int = DEFAULT_JPEG_QUALITY,
) -> bytes:
    """
    Encode a PIL image to bytes.

    JPEG output is converted to RGB first (JPEG has no alpha channel).
    """
    if format.upper() in ("JPEG", "JPG") and image.mode != "RGB":
        image = image.convert("RGB")
    buf = io.BytesIO()
    if format.upper() in ("JPEG", "JPG"):
        image.save(buf, format="JPEG", quality=quality)
    else:
        image.save(buf, format=format)
    return buf.getvalue()


def mime_type_for(format: str) -> str:
    # Image.MIME is filled as format plugins register
    Image.init()
    return Image.MIME.get(format.upper(), "application/octet-stream")


class PageImageProvider:
    """
    Lazily decoded image for a single page.

    Decodes the page bytes on first access and keeps the pixels until
    close() is called.

    Example:
        >>> with PageImageProvider(page) as provider:
        ...     width, height = provider.size
    """

    def __init__(self, page: Page) -> None:
        self._page = page
        self._image: Optional[Image.Image] = None

    @property
    def page(self) -> Page:
        return self._page

    @property
    def image(self) -> Image.Image:
        """Decoded image (raises ImageLoadError on bad data)."""
        if self._image is None:
            self._image = decode_image(self._page.image, page_id=self._page.id)
            logger.debug(f"Decoded page {self._page.id}: {self._image.size}")
        return self._image

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def close(self) -> None:
        """Release decoded pixels."""
        if self._image is not None:
            self._image.close()
            self._image = None

    def __enter__(self) -> "PageImageProvider":
        return self

    def __exit__(self, *args) -> None:
        self.close()
