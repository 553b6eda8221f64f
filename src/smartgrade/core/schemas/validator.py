"""
Schema Validation Utilities

Validates annotation service responses against the bundled JSON schema
before any model is built from them.

The service is a trust boundary: a response that fails validation is
rejected as a whole rather than partially accepted.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_annotation_response(data: Any) -> None:
    """
    Validate one page's service response.

    Args:
        data: Parsed JSON payload

    Raises:
        ValidationError: If the payload does not match the schema. All
            violations are collected in ``errors``; the message and path
            describe the first one.
    """
    if not isinstance(data, dict):
        raise ValidationError(
            f"Response must be a JSON object, got {type(data).__name__}",
        )

    schema = _load_schema("annotation_response")
    validator = jsonschema.Draft7Validator(schema)
    violations = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if not violations:
        return

    first = violations[0]
    raise ValidationError(
        f"Schema validation failed: {first.message}",
        path=".".join(str(p) for p in first.absolute_path),
        errors=[v.message for v in violations],
    )
