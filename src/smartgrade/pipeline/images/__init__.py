"""
Module: pipeline.images

Purpose:
    Page image decoding, encoding and lazy access.
"""

from .codec import (
    PageImageProvider,
    decode_image,
    encode_image,
    mime_type_for,
)

__all__ = [
    "PageImageProvider",
    "decode_image",
    "encode_image",
    "mime_type_for",
]
