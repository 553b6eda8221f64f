"""
Module: pipeline

Purpose:
    Grading pipeline: annotation service client, orientation
    reconciliation, batch grading and the interactive mark editor.

Key Functions:
    - grade_pages(): Grade a batch of pages
    - reconcile_page(): Rotate a page and remap its marks

Key Classes:
    - GradingConfig: Service and batch configuration
    - GeminiAnnotationService: Gemini-backed annotation service
    - MarkEditor: Live mark collection

GradingSession lives in pipeline.session; it depends on the report
package, which in turn loads page images through pipeline.images, so it
is not re-exported here.
"""

from .config import GradingConfig
from .controller import GradingError, GradingResult, PageFailure, grade_pages
from .editor import DeltaKind, MarkDelta, MarkEditor
from .orientation import ReconciledPage, reconcile_page, remap_marks, rotate_image, rotate_point
from .service import AnnotationService, GeminiAnnotationService

__all__ = [
    # Config
    "GradingConfig",
    # Grading
    "GradingError",
    "GradingResult",
    "PageFailure",
    "grade_pages",
    # Orientation
    "ReconciledPage",
    "reconcile_page",
    "remap_marks",
    "rotate_image",
    "rotate_point",
    # Service
    "AnnotationService",
    "GeminiAnnotationService",
    # Editor
    "DeltaKind",
    "MarkDelta",
    "MarkEditor",
]
