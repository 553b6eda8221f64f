"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_annotation_response,
    ValidationError,
)

__all__ = [
    "validate_annotation_response",
    "ValidationError",
]
