"""
Serialization Utilities

Turns annotation service JSON into models and candidates into Marks.

The service output is a trust boundary:
- The payload is schema-validated first (see core.schemas)
- Candidate coordinates outside [0, 100] are clamped with a warning
- Missing text fields are filled here, in the page language, never by
  the service
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Union

from ..models.annotations import MarkCandidate, PageAnnotation
from ..models.marks import Mark, MarkStatus
from ..models.pages import Language
from ..schemas.validator import ValidationError, validate_annotation_response
from .geometry import clamp_percent
from .localization import labels_for

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Service Response Parsing
# ─────────────────────────────────────────────────────────────────────────────

def parse_annotation_response(payload: Union[str, bytes, dict[str, Any]]) -> PageAnnotation:
    """
    Build a PageAnnotation from a raw service response.

    Args:
        payload: JSON text/bytes or an already-decoded dict

    Returns:
        PageAnnotation with candidates in original-frame coordinates

    Raises:
        ValidationError: If the payload is not JSON or fails the schema
    """
    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Response is not valid JSON: {e}") from e
    else:
        data = payload

    validate_annotation_response(data)

    language = Language(data.get("detected_language") or Language.EN.value)
    candidates = tuple(_candidate_from_dict(item, i) for i, item in enumerate(data["marks"]))

    return PageAnnotation(
        rotation=int(data["rotation_needed"]),
        language=language,
        candidates=candidates,
    )


def _candidate_from_dict(item: dict[str, Any], index: int) -> MarkCandidate:
    x = float(item["x"])
    y = float(item["y"])
    cx, cy = clamp_percent(x), clamp_percent(y)
    if (cx, cy) != (x, y):
        logger.warning(f"Clamped candidate {index} from ({x}, {y}) to ({cx}, {cy})")

    return MarkCandidate(
        x=cx,
        y=cy,
        status=MarkStatus(item["status"]),
        question=item.get("question") or None,
        student_answer=item.get("student_answer") or None,
        correct_answer=item.get("correct_answer") or None,
        explanation=item.get("explanation") or None,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Candidate → Mark
# ─────────────────────────────────────────────────────────────────────────────

def new_mark_id(page_id: str) -> str:
    """Id for a service-created mark: ``mark-<page id>-<9 hex chars>``."""
    return f"mark-{page_id}-{uuid.uuid4().hex[:9]}"


def candidate_to_mark(
    candidate: MarkCandidate,
    *,
    mark_id: str,
    page_index: int,
    language: Language,
) -> Mark:
    """
    Convert a service candidate into a Mark, filling missing text.

    Coordinates are copied as-is; remapping for rotation is the
    orientation reconciler's job.

    Example:
        >>> c = MarkCandidate(x=5, y=5, status=MarkStatus.CORRECT)
        >>> candidate_to_mark(c, mark_id="m", page_index=0, language=Language.ZH).question
        '题目'
    """
    labels = labels_for(language)
    return Mark(
        id=mark_id,
        x=candidate.x,
        y=candidate.y,
        status=candidate.status,
        page_index=page_index,
        question=candidate.question or labels.question_placeholder,
        student_answer=candidate.student_answer or labels.student_answer_placeholder,
        correct_answer=candidate.correct_answer or labels.correct_answer_placeholder,
        explanation=candidate.explanation or labels.explanation_placeholder,
    )
