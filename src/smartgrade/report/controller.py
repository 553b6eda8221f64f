"""
Module: report.controller

Purpose:
    Orchestrate report generation for a graded batch.
    Load → Compose → Rasterize (per page) → Assemble

Key Functions:
    - build_report(): Main entry point for exporting a report

Key Classes:
    - ReportResult: PDF bytes plus page metadata and warnings
    - ReportError: Export aborted on a failed page

Dependencies:
    - pipeline.images: Page image loading
    - report.layout: Page composition
    - report.output: Rasterizing and PDF assembly

Used By:
    - pipeline.session: Export stage
    - scripts/render_report.py
"""

from __future__ import annotations

import logging
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from PIL import Image

from smartgrade.core.errors import ImageLoadError, SmartGradeError
from smartgrade.core.models import Mark, Page, StudentInfo
from smartgrade.pipeline.config import ErrorPolicy
from smartgrade.pipeline.images import PageImageProvider

from .layout import ReportConfig, TextMeasurer, compose_page
from .output import PillowTextMeasurer, rasterize, render_document, suggest_filename

logger = logging.getLogger(__name__)


class ReportError(SmartGradeError):
    """A page could not be exported and the report was aborted."""

    def __init__(self, message: str, page_index: Optional[int] = None):
        super().__init__(message)
        self.page_index = page_index


@dataclass(frozen=True)
class ReportResult:
    """
    Complete export result (immutable).

    Attributes:
        document: Finalized PDF bytes
        filename: Suggested download filename
        page_count: Number of PDF pages
        page_sizes: (width, height) of each PDF page, in points
        warnings: Overflow and skipped-page warnings
        skipped: Indexes of pages left out (skip mode only)

    Example:
        >>> result = build_report(pages, editor.snapshot(), StudentInfo("Ada"))
        >>> result.filename
        'Exam_Graded_Ada.pdf'
    """

    document: bytes
    filename: str
    page_count: int
    page_sizes: tuple[Tuple[int, int], ...]
    warnings: tuple[str, ...] = ()
    skipped: tuple[int, ...] = ()


def group_marks(marks: Iterable[Mark]) -> Dict[int, List[Mark]]:
    """Marks keyed by page index, keeping their relative order."""
    grouped: Dict[int, List[Mark]] = defaultdict(list)
    for mark in marks:
        grouped[mark.page_index].append(mark)
    return grouped


def build_report(
    pages: Sequence[Page],
    marks: Iterable[Mark],
    student: Optional[StudentInfo] = None,
    config: Optional[ReportConfig] = None,
    *,
    on_error: ErrorPolicy = "abort",
    measurer: Optional[TextMeasurer] = None,
) -> ReportResult:
    """
    Render a graded batch to a PDF report.

    Pipeline per page:
    1. Decode the corrected page image
    2. Compose the sidebar layout for the page's marks
    3. Rasterize the layout
    Then all surfaces are assembled into one PDF, in page order.

    Args:
        pages: Corrected pages in ingestion order
        marks: Mark snapshot (e.g. MarkEditor.snapshot())
        student: Student the report is for (drives the filename)
        config: Compositor configuration
        on_error: "abort" (default) or "skip" pages that fail to load
        measurer: Text measurer (defaults to the Pillow fonts used to draw)

    Returns:
        ReportResult with the PDF bytes

    Raises:
        ReportError: If a page image cannot be loaded (abort mode), or if
            no page could be rendered at all
    """
    config = config or ReportConfig()
    measurer = measurer or PillowTextMeasurer(config.font_path)
    start_time = time.perf_counter()
    grouped = group_marks(marks)

    logger.info(f"Exporting report: {len(pages)} pages, {sum(len(m) for m in grouped.values())} marks")

    surfaces: List[Image.Image] = []
    warnings: List[str] = []
    skipped: List[int] = []

    # Surfaces are released on every exit path, including a failed assembly
    try:
        for i, page in enumerate(pages):
            try:
                with PageImageProvider(page) as provider:
                    plan = compose_page(
                        i,
                        provider.size,
                        grouped.get(i, []),
                        config,
                        measurer,
                        page.effective_language,
                    )
                    surfaces.append(rasterize(plan, provider.image, config))
            except ImageLoadError as e:
                if on_error == "abort":
                    logger.error(f"Page {i + 1} ({page.id}) failed to load: {e}")
                    raise ReportError(f"Report aborted at page {i + 1}: {e}", page_index=i) from e
                message = f"Page {i + 1} ({page.id}) omitted from report: {e}"
                logger.warning(message)
                warnings.append(message)
                skipped.append(i)
                continue
            warnings.extend(plan.warnings)

        if not surfaces:
            raise ReportError("No pages could be rendered")

        page_sizes = tuple(s.size for s in surfaces)
        document = render_document(surfaces, jpeg_quality=config.jpeg_quality)
    finally:
        for surface in surfaces:
            surface.close()

    elapsed = time.perf_counter() - start_time
    logger.info(f"Exported {len(page_sizes)} pages in {elapsed:.2f}s")

    return ReportResult(
        document=document,
        filename=suggest_filename(student.name if student else None),
        page_count=len(page_sizes),
        page_sizes=page_sizes,
        warnings=tuple(warnings),
        skipped=tuple(skipped),
    )
