"""
Core Models Package

Immutable, validated data models shared by the grading pipeline and the
report renderer.

All models in this package are frozen dataclasses. A change to a page or
a mark always produces a new instance, so the reconciler, the editor and
the compositor never alias each other's state.
"""

from .marks import Mark, MarkCounts, MarkStatus
from .pages import Language, Page
from .annotations import MarkCandidate, PageAnnotation, VALID_ROTATIONS
from .student import StudentInfo

__all__ = [
    "Mark",
    "MarkCounts",
    "MarkStatus",
    "Language",
    "Page",
    "MarkCandidate",
    "PageAnnotation",
    "VALID_ROTATIONS",
    "StudentInfo",
]
