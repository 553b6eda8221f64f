"""
Localized strings for placeholders and sidebar labels.

Only the two languages the annotation service can report are supported.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..models.pages import Language


@dataclass(frozen=True)
class Labels:
    """Strings used when a field is missing or when labelling sidebar blocks."""

    question_placeholder: str
    student_answer_placeholder: str
    correct_answer_placeholder: str
    explanation_placeholder: str
    answer_prefix: str
    correct_answer_prefix: str
    note_prefix: str


LABELS: dict[Language, Labels] = {
    Language.EN: Labels(
        question_placeholder="Question",
        student_answer_placeholder="Unknown",
        correct_answer_placeholder="-",
        explanation_placeholder="No explanation provided.",
        answer_prefix="Ans: ",
        correct_answer_prefix="Correct: ",
        note_prefix="Note: ",
    ),
    Language.ZH: Labels(
        question_placeholder="题目",
        student_answer_placeholder="未知",
        correct_answer_placeholder="-",
        explanation_placeholder="无解析",
        answer_prefix="作答：",
        correct_answer_prefix="正确答案：",
        note_prefix="解析：",
    ),
}

# Bilingual because a report may mix pages in both languages
REPORT_TITLE = "Grading Report / 评分报告"


def labels_for(language: Language | str | None) -> Labels:
    """Labels for a language tag, English when unknown or missing."""
    if language is None:
        return LABELS[Language.EN]
    try:
        return LABELS[Language(language)]
    except ValueError:
        return LABELS[Language.EN]
