"""
Module: report.output.renderer

Purpose:
    Assemble composited report pages into a single PDF using ReportLab.
    Each surface becomes one PDF page sized exactly to the surface
    (1 px = 1 pt), so pages of different sizes can share a document.

Key Functions:
    - render_document(): Surfaces → PDF bytes
    - write_document(): Persist PDF bytes
    - suggest_filename(): Download filename for a student

Dependencies:
    - reportlab: PDF generation
    - PIL: Raster encoding

Used By:
    - report.controller: Final assembly
    - scripts/render_report.py
"""

from __future__ import annotations

import io
import logging
import re
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image
from reportlab.lib.pagesizes import landscape, portrait
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

# Constants
DEFAULT_DPI = 72                # 1 px = 1 pt
DEFAULT_JPEG_QUALITY = 85
FILENAME_PREFIX = "Exam_Graded_"
FALLBACK_STUDENT_NAME = "Student"

_NON_ALNUM_RUN = re.compile(r"[\W_]+")


def render_document(
    surfaces: Sequence[Image.Image],
    *,
    jpeg_quality: int = DEFAULT_JPEG_QUALITY,
) -> bytes:
    """
    Render surfaces to PDF bytes, one page per surface, in order.

    Args:
        surfaces: Composited report pages
        jpeg_quality: Quality of the embedded JPEG rasters

    Returns:
        Finalized PDF document

    Raises:
        ValueError: If there are no surfaces

    Example:
        >>> data = render_document([surface])
        >>> data[:5]
        b'%PDF-'
    """
    if not surfaces:
        raise ValueError("Cannot render a report without pages")

    buf = io.BytesIO()
    c = canvas.Canvas(buf)

    for i, surface in enumerate(surfaces):
        _render_page(c, surface, jpeg_quality)
        c.showPage()
        logger.debug(f"Rendered page {i + 1}: {surface.size[0]}x{surface.size[1]}")

    c.save()
    data = buf.getvalue()
    logger.info(f"Rendered {len(surfaces)} pages ({len(data)} bytes)")
    return data


def _render_page(c: canvas.Canvas, surface: Image.Image, jpeg_quality: int) -> None:
    """Size the current page to the surface and draw it at 1:1."""
    width_px, height_px = surface.size
    width_pt = _px_to_pt(width_px)
    height_pt = _px_to_pt(height_px)

    if width_px > height_px:
        c.setPageSize(landscape((width_pt, height_pt)))
    else:
        c.setPageSize(portrait((width_pt, height_pt)))

    c.drawImage(
        _pil_to_reader(surface, jpeg_quality),
        0,
        0,
        width=width_pt,
        height=height_pt,
    )


def _pil_to_reader(img: Image.Image, quality: int) -> ImageReader:
    """
    Convert PIL image to a JPEG-backed ReportLab ImageReader.

    Args:
        img: PIL Image object
        quality: JPEG quality

    Returns:
        ImageReader for use with ReportLab
    """
    if img.mode != "RGB":
        img = img.convert("RGB")
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=quality)
    buf.seek(0)
    return ImageReader(buf)


def _px_to_pt(px: int, dpi: int = DEFAULT_DPI) -> float:
    """
    Convert pixels to PDF points.

    PDF points are 1/72 inch.
    """
    return px * 72.0 / dpi


def write_document(data: bytes, path: Path) -> Path:
    """
    Write PDF bytes to disk, creating parent directories.

    Raises:
        IOError: If the file cannot be written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.info(f"Wrote report to {path}")
    return path


def suggest_filename(student_name: Optional[str]) -> str:
    """
    Download filename for a student's report.

    Every run of non-alphanumeric characters becomes one underscore and
    leading/trailing underscores are dropped.

    Example:
        >>> suggest_filename("Jane  O'Neil")
        'Exam_Graded_Jane_O_Neil.pdf'
        >>> suggest_filename("  ")
        'Exam_Graded_Student.pdf'
    """
    safe = _NON_ALNUM_RUN.sub("_", student_name or "").strip("_")
    return f"{FILENAME_PREFIX}{safe or FALLBACK_STUDENT_NAME}.pdf"
