"""
Module: pipeline.session

Purpose:
    One grading run from upload to exported report.
    IDLE → PROCESSING → REVIEWING → EXPORTING → COMPLETED

Key Classes:
    - GradingSession: Owns the pages, the mark editor and the last report
    - SessionStatus: Session state

Design:
    - A failed grade returns to IDLE with the ingested pages intact.
    - A failed export returns to REVIEWING with all marks intact.
    - Export renders a snapshot of the editor, never the live list.

Dependencies:
    - pipeline.controller: Batch grading
    - report.controller: Report export

Used By:
    - scripts/render_report.py
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Union

from smartgrade.core.errors import SmartGradeError
from smartgrade.core.models import Page, StudentInfo
from smartgrade.report.controller import ReportResult, build_report
from smartgrade.report.layout import ReportConfig

from .config import ErrorPolicy, GradingConfig
from .controller import GradingResult, grade_pages
from .editor import MarkEditor
from .service import AnnotationService

logger = logging.getLogger(__name__)

PageSource = Union[Page, bytes, str, Path]


class SessionStatus(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    REVIEWING = "reviewing"
    EXPORTING = "exporting"
    COMPLETED = "completed"


class SessionStateError(SmartGradeError):
    """Operation not allowed in the session's current state."""


class GradingSession:
    """
    A single grading run.

    Example:
        >>> session = GradingSession()
        >>> session.ingest([Path("page1.jpg"), Path("page2.jpg")])
        >>> session.grade(GeminiAnnotationService(GradingConfig.from_env()))
        >>> session.editor.toggle(session.editor.snapshot()[0].id)
        >>> result = session.export(StudentInfo("Ada"))
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._pages: List[Page] = []
        self._status = SessionStatus.IDLE
        self._last_grading: Optional[GradingResult] = None
        self._last_report: Optional[ReportResult] = None
        self.editor = MarkEditor()

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def pages(self) -> tuple[Page, ...]:
        with self._lock:
            return tuple(self._pages)

    @property
    def last_grading(self) -> Optional[GradingResult]:
        return self._last_grading

    @property
    def last_report(self) -> Optional[ReportResult]:
        return self._last_report

    def ingest(self, sources: Iterable[PageSource]) -> tuple[Page, ...]:
        """
        Add pages to the session, in order.

        Accepts Page objects, raw image bytes or image file paths.

        Raises:
            SessionStateError: If the session is not IDLE
        """
        with self._lock:
            self._require(SessionStatus.IDLE, action="ingest pages")
            added = tuple(_to_page(source) for source in sources)
            self._pages.extend(added)
        logger.info(f"Ingested {len(added)} pages ({len(self._pages)} total)")
        return added

    def grade(
        self,
        service: AnnotationService,
        config: Optional[GradingConfig] = None,
    ) -> GradingResult:
        """
        Grade all ingested pages and load the marks into the editor.

        Raises:
            SessionStateError: If not IDLE or no pages were ingested
            GradingError: If a page fails in abort mode (session back to IDLE)
        """
        with self._lock:
            self._require(SessionStatus.IDLE, action="grade")
            if not self._pages:
                raise SessionStateError("No pages to grade")
            pages = tuple(self._pages)
            self._status = SessionStatus.PROCESSING

        try:
            result = grade_pages(pages, service, config)
            with self._lock:
                self.editor.clear()
                self.editor.load(result.marks)
                self._pages = list(result.pages)
                self._last_grading = result
                self._status = SessionStatus.REVIEWING
        except Exception:
            # Any failure, not only page errors, must leave the session usable
            with self._lock:
                self._status = SessionStatus.IDLE
            raise

        logger.info(f"Session ready for review: {len(result.marks)} marks")
        return result

    def export(
        self,
        student: Optional[StudentInfo] = None,
        config: Optional[ReportConfig] = None,
        *,
        on_error: ErrorPolicy = "abort",
    ) -> ReportResult:
        """
        Export the reviewed marks as a PDF report.

        Allowed while REVIEWING, and again after COMPLETED.

        Raises:
            SessionStateError: If grading has not finished
            ReportError: If a page fails in abort mode (session back to REVIEWING)
        """
        with self._lock:
            self._require(SessionStatus.REVIEWING, SessionStatus.COMPLETED, action="export")
            pages = tuple(self._pages)
            marks = self.editor.snapshot()
            self._status = SessionStatus.EXPORTING

        try:
            result = build_report(pages, marks, student, config, on_error=on_error)
        except Exception:
            with self._lock:
                self._status = SessionStatus.REVIEWING
            raise

        with self._lock:
            self._last_report = result
            self._status = SessionStatus.COMPLETED
        return result

    def reset(self) -> None:
        """Drop pages, marks and the last report; back to IDLE."""
        with self._lock:
            if self._status in (SessionStatus.PROCESSING, SessionStatus.EXPORTING):
                raise SessionStateError(f"Cannot reset while {self._status.value}")
            self._pages.clear()
            self.editor.clear()
            self._last_grading = None
            self._last_report = None
            self._status = SessionStatus.IDLE
        logger.info("Session reset")

    def _require(self, *allowed: SessionStatus, action: str) -> None:
        if self._status not in allowed:
            raise SessionStateError(f"Cannot {action} while {self._status.value}")


def _to_page(source: PageSource) -> Page:
    if isinstance(source, Page):
        return source
    if isinstance(source, (bytes, bytearray)):
        return Page.from_bytes(bytes(source))
    if isinstance(source, (str, Path)):
        return Page.from_file(Path(source))
    raise TypeError(f"Unsupported page source: {type(source).__name__}")
