"""
SmartGrade Core Package

Shared data models, the service response schema and small helpers.

**DESIGN NOTES:**

1. **Immutable Data Models**
   - Pages and marks are frozen dataclasses
   - The reconciler emits replacement sets, the editor emits deltas

2. **Percentage-Space Coordinates**
   - Marks store x/y as 0-100 of the current page image
   - Pixel positions are derived only at layout time

3. **Service Output is a Trust Boundary**
   - Responses are schema-validated before any model is built
   - Out-of-range coordinates are clamped with a warning
"""

from .errors import (
    ImageDecodeError,
    ImageLoadError,
    PageError,
    ServiceError,
    SmartGradeError,
)
from .models import (
    Language,
    Mark,
    MarkCandidate,
    MarkCounts,
    MarkStatus,
    Page,
    PageAnnotation,
    StudentInfo,
)

__all__ = [
    "SmartGradeError",
    "PageError",
    "ServiceError",
    "ImageDecodeError",
    "ImageLoadError",
    "Language",
    "Mark",
    "MarkCandidate",
    "MarkCounts",
    "MarkStatus",
    "Page",
    "PageAnnotation",
    "StudentInfo",
]
