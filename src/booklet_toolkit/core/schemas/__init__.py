"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_manifest,
    validate_question_set,
    ValidationError,
    MANIFEST_SCHEMA_VERSION,
    QUESTION_SET_VERSION,
)

__all__ = [
    "validate_manifest",
    "validate_question_set",
    "ValidationError",
    "MANIFEST_SCHEMA_VERSION",
    "QUESTION_SET_VERSION",
]
