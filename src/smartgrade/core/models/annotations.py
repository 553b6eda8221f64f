"""
Module: annotations

Purpose:
    Validated form of the annotation service's per-page response:
    an orientation hint, a language hint and raw mark candidates whose
    coordinates are still relative to the UN-rotated image.

Key Classes:
    - MarkCandidate: One raw annotation from the service
    - PageAnnotation: Rotation + language + candidates for a page

Dependencies:
    - dataclasses (std)

Used By:
    - core.utils.serialization: Builds these from JSON
    - pipeline.orientation: Turns candidates into Marks
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .marks import MarkStatus
from .pages import Language

VALID_ROTATIONS = (0, 90, 180, 270)


@dataclass(frozen=True, slots=True)
class MarkCandidate:
    """
    Raw annotation as returned by the service.

    Coordinates are percentages of the ORIGINAL image frame; they only
    become Mark coordinates after the orientation reconciler remaps them.
    """

    x: float
    y: float
    status: MarkStatus
    question: Optional[str] = None
    student_answer: Optional[str] = None
    correct_answer: Optional[str] = None
    explanation: Optional[str] = None


@dataclass(frozen=True)
class PageAnnotation:
    """
    Service output for one page.

    Attributes:
        rotation: Clockwise degrees needed to make the page upright
        language: Detected content language
        candidates: Mark candidates in original-frame coordinates

    Invariants:
        - rotation in (0, 90, 180, 270)
    """

    rotation: int
    language: Language
    candidates: tuple[MarkCandidate, ...] = ()

    def __post_init__(self) -> None:
        if self.rotation not in VALID_ROTATIONS:
            raise ValueError(f"Invalid rotation: {self.rotation}")
        if not isinstance(self.language, Language):
            object.__setattr__(self, "language", Language(self.language))

    @property
    def candidate_count(self) -> int:
        return len(self.candidates)
