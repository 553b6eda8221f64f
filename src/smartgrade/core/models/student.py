"""
Module: student

Purpose:
    Identity captured at export time. Only the name reaches the pipeline,
    where it becomes part of the suggested report filename.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class StudentInfo:
    """Student the report is generated for."""

    name: str
    email: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Student name must be non-empty")
