"""
Core Utilities

Geometry, localization and serialization helpers.
"""

from .geometry import clamp_percent, clamp_point, percent_to_pixel, pixel_to_percent
from .localization import LABELS, REPORT_TITLE, Labels, labels_for
from .serialization import candidate_to_mark, new_mark_id, parse_annotation_response

__all__ = [
    "clamp_percent",
    "clamp_point",
    "percent_to_pixel",
    "pixel_to_percent",
    "LABELS",
    "REPORT_TITLE",
    "Labels",
    "labels_for",
    "candidate_to_mark",
    "new_mark_id",
    "parse_annotation_response",
]
