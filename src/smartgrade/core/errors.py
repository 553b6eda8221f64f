"""
Module: core.errors

Purpose:
    Exception taxonomy shared by the grading pipeline and the report
    renderer. Page-level errors carry the page they failed on so batch
    callers can decide between aborting and skipping.

Key Classes:
    - SmartGradeError: Base class
    - ServiceError: Annotation service unreachable, malformed or rejected
    - ImageDecodeError: Reconciler could not decode a page image
    - ImageLoadError: Compositor could not load a page image

Used By:
    - pipeline.service, pipeline.orientation, pipeline.images.codec
    - report.controller
"""

from __future__ import annotations

from typing import Optional


class SmartGradeError(Exception):
    """Base class for all toolkit errors."""


class PageError(SmartGradeError):
    """Error tied to a single page of a batch."""

    def __init__(self, message: str, page_id: Optional[str] = None):
        super().__init__(message)
        self.page_id = page_id


class ServiceError(PageError):
    """External annotation service failed or returned unusable data."""


class ImageDecodeError(PageError):
    """Page image could not be decoded for orientation correction."""


class ImageLoadError(PageError):
    """Page image could not be loaded for compositing."""
