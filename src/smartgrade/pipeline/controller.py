"""
Module: pipeline.controller

Purpose:
    Orchestrate grading of a batch of pages.
    Annotate → Reconcile (rotate + remap) → Collect

Key Functions:
    - grade_pages(): Main entry point for grading a batch

Key Classes:
    - GradingResult: Corrected pages, marks and per-page failures
    - GradingError: Batch aborted on a failed page

Dependencies:
    - pipeline.service: AnnotationService
    - pipeline.orientation: reconcile_page

Used By:
    - pipeline.session: Grading stage
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence

from smartgrade.core.errors import PageError, SmartGradeError
from smartgrade.core.models import Mark, Page

from .config import GradingConfig
from .orientation import ReconciledPage, reconcile_page
from .service import AnnotationService

logger = logging.getLogger(__name__)


class GradingError(SmartGradeError):
    """A page failed and the batch was aborted."""

    def __init__(self, message: str, page_index: int):
        super().__init__(message)
        self.page_index = page_index


@dataclass(frozen=True)
class PageFailure:
    """A page that could not be graded (skip mode only)."""

    page_index: int
    page_id: str
    error: PageError


@dataclass(frozen=True)
class GradingResult:
    """
    Complete grading result (immutable).

    Attributes:
        pages: Pages in ingestion order; corrected where grading succeeded,
            untouched where it failed (skip mode)
        marks: All marks, page by page, in corrected-frame coordinates
        failures: Pages that failed (always empty in abort mode)
    """

    pages: tuple[Page, ...]
    marks: tuple[Mark, ...]
    failures: tuple[PageFailure, ...] = ()

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def succeeded(self) -> bool:
        return not self.failures


def _grade_one(service: AnnotationService, page: Page, page_index: int) -> ReconciledPage:
    annotation = service.annotate(page)
    return reconcile_page(page, annotation, page_index=page_index)


def grade_pages(
    pages: Sequence[Page],
    service: AnnotationService,
    config: Optional[GradingConfig] = None,
) -> GradingResult:
    """
    Grade a batch of pages.

    Pipeline per page:
    1. Ask the service for rotation, language and mark candidates
    2. Rotate the page image and remap candidate coordinates
    3. Fill missing mark text in the detected language

    Pages are independent. With ``config.max_workers > 1`` they are graded
    concurrently, but every result is collected before returning so the
    output order is always the input order.

    Args:
        pages: Pages as ingested
        service: Annotation service
        config: Grading configuration (defaults: sequential, abort on error)

    Returns:
        GradingResult with corrected pages and marks

    Raises:
        GradingError: In abort mode, on the first failed page (lowest
            index). The cause (ServiceError / ImageDecodeError) is chained.
            The input Page objects are never modified.
    """
    config = config or GradingConfig()
    start_time = time.perf_counter()
    logger.info(f"Grading {len(pages)} pages (workers={config.max_workers}, on_error={config.on_error})")

    outcomes: List[ReconciledPage | PageError]
    if config.max_workers > 1 and len(pages) > 1:
        with ThreadPoolExecutor(max_workers=min(config.max_workers, len(pages))) as pool:
            futures = [pool.submit(_grade_one, service, page, i) for i, page in enumerate(pages)]
            outcomes = [_outcome(f.result, i, pages[i]) for i, f in enumerate(futures)]
    else:
        outcomes = []
        for i, page in enumerate(pages):
            outcome = _outcome(lambda: _grade_one(service, page, i), i, page)
            outcomes.append(outcome)
            if isinstance(outcome, PageError) and config.on_error == "abort":
                break

    corrected: List[Page] = []
    marks: List[Mark] = []
    failures: List[PageFailure] = []

    for i, outcome in enumerate(outcomes):
        if isinstance(outcome, PageError):
            if config.on_error == "abort":
                raise GradingError(f"Grading aborted at page {i + 1}: {outcome}", page_index=i) from outcome
            logger.warning(f"Skipping page {i + 1} ({pages[i].id}): {outcome}")
            failures.append(PageFailure(page_index=i, page_id=pages[i].id, error=outcome))
            corrected.append(pages[i])
            continue
        corrected.append(outcome.page)
        marks.extend(outcome.marks)

    elapsed = time.perf_counter() - start_time
    logger.info(
        f"Graded {len(corrected) - len(failures)}/{len(pages)} pages with "
        f"{len(marks)} marks in {elapsed:.2f}s"
    )
    return GradingResult(pages=tuple(corrected), marks=tuple(marks), failures=tuple(failures))


def _outcome(call, page_index: int, page: Page) -> ReconciledPage | PageError:
    """Run one page, returning page-level errors instead of raising them."""
    try:
        return call()
    except PageError as e:
        logger.error(f"Page {page_index + 1} ({page.id}) failed: {e}")
        return e
