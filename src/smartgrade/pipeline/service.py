"""
Module: pipeline.service

Purpose:
    Client side of the external annotation service. Sends one page image
    and receives orientation, language and mark candidates.

Key Classes:
    - AnnotationService: Abstract interface (one call per page)
    - GeminiAnnotationService: google-genai implementation

Dependencies:
    - google-genai: Gemini API client
    - core.utils.serialization: Response parsing and validation

Used By:
    - pipeline.controller: Per-page grading
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

from google import genai
from google.genai import types

from smartgrade.core.errors import ServiceError
from smartgrade.core.models import Page, PageAnnotation
from smartgrade.core.schemas import ValidationError
from smartgrade.core.utils.serialization import parse_annotation_response

from .config import GradingConfig

logger = logging.getLogger(__name__)


GRADING_PROMPT = """
You are an expert academic grader. Analyze this image of an exam paper.

Step 1: Detect Orientation & Language
1. Determine if the image needs rotation to be upright. Return 'rotation_needed' as one of [0, 90, 180, 270].
2. Detect the primary language of the exam content. Return 'detected_language' as 'zh' (Chinese) or 'en' (English).

Step 2: Grade & Analyze
Identify every student answer. For each answer:
1. Determine if it is 'correct' or 'incorrect'.
2. Estimate the center position (x, y percentages 0-100) relative to the image AS IT IS CURRENTLY (before rotation).
3. Extract the 'question' (brief summary).
4. Extract the 'student_answer' (what was written).
5. Provide an 'explanation' of why it is right or wrong, and the 'correct_answer' if applicable.

CRITICAL LANGUAGE RULE:
- The content of 'question', 'student_answer', 'correct_answer', and 'explanation' MUST be in the DETECTED LANGUAGE of the exam.
- If the exam is in Chinese, use Chinese. If English, use English.
"""


def build_response_schema() -> types.Schema:
    """Structured output schema sent with every grading request."""
    def text(description: str) -> types.Schema:
        return types.Schema(type=types.Type.STRING, description=description)

    mark = types.Schema(
        type=types.Type.OBJECT,
        properties={
            "x": types.Schema(type=types.Type.NUMBER, description="X coordinate percentage (0-100)"),
            "y": types.Schema(type=types.Type.NUMBER, description="Y coordinate percentage (0-100)"),
            "status": types.Schema(type=types.Type.STRING, enum=["correct", "incorrect"]),
            "question": text("The text of the question"),
            "student_answer": text("The answer provided by the student"),
            "correct_answer": text("The correct answer (if applicable)"),
            "explanation": text("Brief explanation of grading"),
        },
        required=["x", "y", "status"],
    )
    return types.Schema(
        type=types.Type.OBJECT,
        properties={
            "rotation_needed": types.Schema(
                type=types.Type.INTEGER,
                description="Degrees clockwise to rotate image. One of 0, 90, 180, 270.",
            ),
            "detected_language": types.Schema(
                type=types.Type.STRING,
                enum=["en", "zh"],
                description="Primary language of the exam text. 'zh' for Chinese, 'en' for English.",
            ),
            "marks": types.Schema(type=types.Type.ARRAY, items=mark),
        },
        required=["rotation_needed", "marks"],
    )


class AnnotationService(ABC):
    """
    Abstract annotation service.

    Implementations must raise ServiceError for every failure mode
    (transport, rejection, malformed output) and must not retry.
    """

    @abstractmethod
    def annotate(self, page: Page) -> PageAnnotation:
        """
        Annotate one page.

        Args:
            page: Page as ingested (un-rotated)

        Returns:
            Validated PageAnnotation in original-frame coordinates

        Raises:
            ServiceError: On any failure
        """


class GeminiAnnotationService(AnnotationService):
    """
    Annotation service backed by a Gemini vision model.

    Attributes:
        config: Grading configuration (model, temperature, key)

    Example:
        >>> service = GeminiAnnotationService(GradingConfig.from_env())
        >>> annotation = service.annotate(page)
    """

    def __init__(self, config: GradingConfig, client: Optional[Any] = None) -> None:
        """
        Initialize the service.

        Args:
            config: Grading configuration
            client: Pre-built genai client (tests inject a fake here)

        Raises:
            ValueError: If no client is given and no usable API key is set
        """
        self.config = config
        if client is None:
            if not config.has_api_key:
                raise ValueError(
                    "Gemini API key is required. "
                    "Set SMARTGRADE_GEMINI_API_KEY (or GEMINI_API_KEY)."
                )
            client = genai.Client(api_key=config.api_key)
        self._client = client
        self._schema = build_response_schema()

    def annotate(self, page: Page) -> PageAnnotation:
        start_time = time.perf_counter()
        try:
            response = self._client.models.generate_content(
                model=self.config.model,
                contents=[
                    types.Part.from_bytes(data=page.image, mime_type=page.mime_type or "image/jpeg"),
                    GRADING_PROMPT,
                ],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=self._schema,
                    temperature=self.config.temperature,
                ),
            )
        except Exception as e:
            raise ServiceError(f"Annotation request failed for page {page.id}: {e}", page_id=page.id) from e

        text = getattr(response, "text", None)
        if not text:
            raise ServiceError(f"Empty annotation response for page {page.id}", page_id=page.id)

        try:
            annotation = parse_annotation_response(text)
        except ValidationError as e:
            raise ServiceError(f"Malformed annotation response for page {page.id}: {e}", page_id=page.id) from e

        elapsed = time.perf_counter() - start_time
        logger.info(
            f"Annotated page {page.id} in {elapsed:.2f}s: "
            f"{annotation.candidate_count} candidates, rotation={annotation.rotation}"
        )
        return annotation
