"""
Module: pipeline.orientation

Purpose:
    Reconcile a page with the service's orientation hint. Rotates the page
    image clockwise and remaps mark coordinates from the original frame to
    the corrected frame.

Key Functions:
    - rotate_point(): Percentage-space remap for one point
    - remap_marks(): Replacement mark set for a rotation
    - rotate_image(): Clockwise pixel rotation of encoded bytes
    - reconcile_page(): Page + annotation → corrected page + marks

Algorithm:
    Percentages are resolution independent, so the transform is applied in
    percentage space rather than pixel space. For a clockwise rotation of
    the frame:
        90°:  x' = 100 - y,  y' = x
        180°: x' = 100 - x,  y' = 100 - y
        270°: x' = y,        y' = 100 - x
    Four 90° steps return every point to itself.

Dependencies:
    - PIL: Image.transpose
    - pipeline.images.codec: decode/encode

Used By:
    - pipeline.controller: Per-page grading
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

from PIL import Image

from smartgrade.core.errors import ImageDecodeError
from smartgrade.core.models import Mark, Page, PageAnnotation, VALID_ROTATIONS
from smartgrade.core.utils.serialization import candidate_to_mark, new_mark_id

from .images.codec import DEFAULT_JPEG_QUALITY, decode_image, encode_image, mime_type_for

logger = logging.getLogger(__name__)

# Clockwise rotation → PIL transpose (PIL's ROTATE_* are counter-clockwise)
_TRANSPOSE = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


@dataclass(frozen=True)
class ReconciledPage:
    """
    Result of reconciling one page.

    Attributes:
        page: Corrected page (new instance, input page untouched)
        marks: Full replacement mark set in corrected-frame coordinates
        rotation: Rotation that was applied
    """

    page: Page
    marks: tuple[Mark, ...]
    rotation: int


def _check_rotation(rotation: int) -> None:
    if rotation not in VALID_ROTATIONS:
        raise ValueError(f"Rotation must be one of {VALID_ROTATIONS}: {rotation}")


def rotate_point(x: float, y: float, rotation: int) -> Tuple[float, float]:
    """
    Remap a percentage-space point for a clockwise frame rotation.

    Example:
        >>> rotate_point(10, 20, 90)
        (80, 10)
    """
    _check_rotation(rotation)
    if rotation == 90:
        return 100 - y, x
    if rotation == 180:
        return 100 - x, 100 - y
    if rotation == 270:
        return y, 100 - x
    return x, y


def remap_marks(marks: Iterable[Mark], rotation: int) -> tuple[Mark, ...]:
    """
    Remap marks from the original frame to the rotated frame.

    Returns a new tuple; only x and y differ from the inputs.
    """
    _check_rotation(rotation)
    if rotation == 0:
        return tuple(marks)
    return tuple(m.moved_to(*rotate_point(m.x, m.y, rotation)) for m in marks)


def rotate_image(
    data: bytes,
    rotation: int,
    *,
    page_id: Optional[str] = None,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> bytes:
    """
    Rotate encoded image bytes clockwise.

    For 90/270 the output width and height are swapped. Rotation 0 returns
    the input bytes without decoding.

    Raises:
        ImageDecodeError: If the bytes cannot be decoded
    """
    _check_rotation(rotation)
    if rotation == 0:
        return data

    image = decode_image(data, page_id=page_id, error_cls=ImageDecodeError)
    try:
        rotated = image.transpose(_TRANSPOSE[rotation])
        logger.debug(f"Rotated page {page_id} by {rotation}°: {image.size} → {rotated.size}")
        return encode_image(rotated, quality=quality)
    finally:
        image.close()


def reconcile_page(
    page: Page,
    annotation: PageAnnotation,
    *,
    page_index: int,
    id_factory: Callable[[str], str] = new_mark_id,
) -> ReconciledPage:
    """
    Apply an annotation's orientation and language hints to a page.

    Steps:
    1. Rotate the image if rotation != 0 (new bytes, JPEG)
    2. Tag the page with the detected language
    3. Convert candidates to marks, filling missing text in that language
    4. Remap the marks into the corrected frame

    Args:
        page: Page as ingested
        annotation: Validated service output for the page
        page_index: Index of the page in ingestion order
        id_factory: Builds a mark id from the page id

    Returns:
        ReconciledPage with the corrected page and its marks

    Raises:
        ImageDecodeError: If the page image cannot be decoded. The input
            page is never modified, so the caller still holds it intact.
    """
    rotation = annotation.rotation

    if rotation == 0:
        corrected = page.with_language(annotation.language)
    else:
        rotated = rotate_image(page.image, rotation, page_id=page.id)
        corrected = page.with_image(rotated, mime_type_for("JPEG")).with_language(annotation.language)

    original_frame = [
        candidate_to_mark(
            candidate,
            mark_id=id_factory(page.id),
            page_index=page_index,
            language=annotation.language,
        )
        for candidate in annotation.candidates
    ]
    marks = remap_marks(original_frame, rotation)

    logger.info(
        f"Reconciled page {page_index} ({page.id}): rotation={rotation}, "
        f"language={annotation.language.value}, marks={len(marks)}"
    )
    return ReconciledPage(page=corrected, marks=marks, rotation=rotation)
