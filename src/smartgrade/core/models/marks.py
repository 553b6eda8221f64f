"""
Module: marks

Purpose:
    Provides the Mark dataclass - a single graded annotation anchored to a
    point on an exam page. Coordinates are percentages of the page image
    as currently stored (i.e. after orientation correction).

Key Classes:
    - MarkStatus: correct / incorrect
    - Mark: Immutable annotation with optional feedback text

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - pipeline.orientation: Remaps marks after rotation
    - pipeline.editor: Live mark collection
    - report.layout.composer: Sidebar layout
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional


class MarkStatus(str, Enum):
    """Correctness of a graded answer."""

    CORRECT = "correct"
    INCORRECT = "incorrect"

    @property
    def opposite(self) -> MarkStatus:
        """The other status (used by the review toggle)."""
        if self is MarkStatus.CORRECT:
            return MarkStatus.INCORRECT
        return MarkStatus.CORRECT


@dataclass(frozen=True, slots=True)
class Mark:
    """
    A graded annotation on one page.

    Attributes:
        id: Identifier unique across the session
        x: Horizontal position, percent of image width (0-100)
        y: Vertical position, percent of image height (0-100)
        status: Correct or incorrect
        page_index: Index of the owning page in ingestion order
        question: Short question text
        student_answer: What the student wrote
        correct_answer: Expected answer
        explanation: Why the answer is right or wrong

    Invariants:
        - status is a MarkStatus
        - page_index >= 0

    The x/y range is NOT validated here; clamping belongs to whoever
    converts user input (see core.utils.geometry.clamp_percent).

    Example:
        >>> m = Mark(id="m1", x=10.0, y=20.0, status=MarkStatus.CORRECT, page_index=0)
        >>> m.toggled().status
        <MarkStatus.INCORRECT: 'incorrect'>
    """

    id: str
    x: float
    y: float
    status: MarkStatus
    page_index: int
    question: Optional[str] = None
    student_answer: Optional[str] = None
    correct_answer: Optional[str] = None
    explanation: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate mark on construction."""
        if not self.id:
            raise ValueError("Mark id must be non-empty")
        if not isinstance(self.status, MarkStatus):
            try:
                object.__setattr__(self, "status", MarkStatus(self.status))
            except ValueError:
                raise ValueError(f"Invalid mark status: {self.status!r}") from None
        if self.page_index < 0:
            raise ValueError(f"page_index cannot be negative: {self.page_index}")

    # ─────────────────────────────────────────────────────────────────────────
    # Derived copies
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_correct(self) -> bool:
        return self.status is MarkStatus.CORRECT

    def with_status(self, status: MarkStatus) -> Mark:
        return replace(self, status=MarkStatus(status))

    def toggled(self) -> Mark:
        """Copy with the opposite status."""
        return replace(self, status=self.status.opposite)

    def moved_to(self, x: float, y: float) -> Mark:
        """Copy at a new percentage position (other fields untouched)."""
        return replace(self, x=x, y=y)

    def with_text(
        self,
        *,
        question: Optional[str] = None,
        student_answer: Optional[str] = None,
        correct_answer: Optional[str] = None,
        explanation: Optional[str] = None,
    ) -> Mark:
        """Copy with any supplied text fields replaced."""
        changes = {
            key: value
            for key, value in (
                ("question", question),
                ("student_answer", student_answer),
                ("correct_answer", correct_answer),
                ("explanation", explanation),
            )
            if value is not None
        }
        return replace(self, **changes)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict (None text fields omitted)."""
        data: dict[str, Any] = {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "status": self.status.value,
            "page_index": self.page_index,
        }
        for key in ("question", "student_answer", "correct_answer", "explanation"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Mark:
        """Deserialize from a dict produced by to_dict()."""
        return cls(
            id=data["id"],
            x=float(data["x"]),
            y=float(data["y"]),
            status=MarkStatus(data["status"]),
            page_index=int(data["page_index"]),
            question=data.get("question"),
            student_answer=data.get("student_answer"),
            correct_answer=data.get("correct_answer"),
            explanation=data.get("explanation"),
        )


@dataclass(frozen=True, slots=True)
class MarkCounts:
    """Tally of marks by status."""

    correct: int = 0
    incorrect: int = 0

    @property
    def total(self) -> int:
        return self.correct + self.incorrect
