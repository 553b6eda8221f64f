"""
Module: pages

Purpose:
    Provides the Page dataclass - one photographed exam page with its
    encoded image bytes and the language detected by the annotation
    service.

Key Classes:
    - Language: Closed set of supported content languages
    - Page: Immutable exam page

Dependencies:
    - dataclasses (std)
    - uuid (std)

Used By:
    - pipeline.orientation: Produces the corrected page
    - pipeline.session: Holds the ingested pages
    - report.controller: Decodes page images for compositing
"""

from __future__ import annotations

import mimetypes
import uuid
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Optional


class Language(str, Enum):
    """Primary language of an exam page."""

    EN = "en"
    ZH = "zh"


DEFAULT_MIME_TYPE = "image/jpeg"


@dataclass(frozen=True)
class Page:
    """
    A single exam page.

    Attributes:
        id: Opaque identifier
        image: Encoded image bytes (JPEG/PNG/...)
        mime_type: MIME type of the encoded bytes
        language: Detected language, set by the orientation reconciler

    Pages are never mutated. The reconciler returns a new Page with the
    rotated image and the language tag applied.
    """

    id: str
    image: bytes = b""
    mime_type: str = DEFAULT_MIME_TYPE
    language: Optional[Language] = None

    def __post_init__(self) -> None:
        """Validate page on construction."""
        if not self.id:
            raise ValueError("Page id must be non-empty")
        if self.language is not None and not isinstance(self.language, Language):
            object.__setattr__(self, "language", Language(self.language))

    def __repr__(self) -> str:
        return (
            f"Page(id={self.id!r}, bytes={len(self.image)}, "
            f"mime_type={self.mime_type!r}, language={self.language!r})"
        )

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str = DEFAULT_MIME_TYPE) -> Page:
        """Create a page with a fresh random id."""
        return cls(id=uuid.uuid4().hex[:9], image=data, mime_type=mime_type)

    @classmethod
    def from_file(cls, path: Path) -> Page:
        """Read an image file into a new page."""
        guessed, _ = mimetypes.guess_type(str(path))
        return cls.from_bytes(Path(path).read_bytes(), guessed or DEFAULT_MIME_TYPE)

    @property
    def effective_language(self) -> Language:
        """Language tag, defaulting to English when none was detected."""
        return self.language or Language.EN

    def with_image(self, data: bytes, mime_type: Optional[str] = None) -> Page:
        return replace(self, image=data, mime_type=mime_type or self.mime_type)

    def with_language(self, language: Language) -> Page:
        return replace(self, language=Language(language))
