"""
Module: pipeline.config

Purpose:
    Configuration dataclass for the grading pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - GradingConfig: Service credentials, model and batch behaviour

Dependencies:
    - dataclasses (std)
    - os (std)

Used By:
    - pipeline.service: Builds the Gemini client
    - pipeline.controller: Batch policy and worker count
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal, Mapping, Optional

ErrorPolicy = Literal["abort", "skip"]

DEFAULT_MODEL = "gemini-2.0-flash"
API_KEY_ENV_VARS = ("SMARTGRADE_GEMINI_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY")
MODEL_ENV_VAR = "SMARTGRADE_GEMINI_MODEL"


@dataclass(frozen=True)
class GradingConfig:
    """
    Configuration for grading a batch of pages (immutable).

    Attributes:
        api_key: Gemini API key (None until the client is actually built)
        model: Gemini model name
        temperature: Sampling temperature for the grading call
        max_workers: Pages graded concurrently (1 = sequential)
        on_error: "abort" stops at the first failed page, "skip" leaves the
            failed page unprocessed and carries on

    Example:
        >>> config = GradingConfig.from_env()
        >>> config.model
        'gemini-2.0-flash'
    """

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    temperature: float = 0.1
    max_workers: int = 1
    on_error: ErrorPolicy = "abort"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.model:
            raise ValueError("model must be non-empty")
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"temperature must be within [0, 2]: {self.temperature}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1: {self.max_workers}")
        if self.on_error not in ("abort", "skip"):
            raise ValueError(f"on_error must be 'abort' or 'skip': {self.on_error!r}")

    @property
    def has_api_key(self) -> bool:
        """True if a usable (non-placeholder) key is configured."""
        return bool(self.api_key) and "YOUR_ACTUAL_API_KEY" not in self.api_key

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> GradingConfig:
        """
        Build a config from environment variables.

        The first non-empty of SMARTGRADE_GEMINI_API_KEY, GEMINI_API_KEY and
        GOOGLE_API_KEY is used as the key; SMARTGRADE_GEMINI_MODEL overrides
        the model. Keyword overrides win over the environment.
        """
        env = os.environ if environ is None else environ
        api_key = next(
            (env[name].strip() for name in API_KEY_ENV_VARS if env.get(name, "").strip()),
            None,
        )
        values = {"api_key": api_key, "model": env.get(MODEL_ENV_VAR) or DEFAULT_MODEL}
        values.update(overrides)
        return cls(**values)
