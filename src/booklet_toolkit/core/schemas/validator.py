"""
Schema Validation Utilities

Validates booklet manifests and saved question sets against the bundled
JSON schemas.

A manifest names the template and, for every question, the source file,
page and selection rectangle to capture. Validation happens before any
source document is opened so a malformed manifest fails fast.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

# Schema version constants
MANIFEST_SCHEMA_VERSION = 1
QUESTION_SET_VERSION = 1


# Load schemas lazily
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


def validate_manifest(data: Any) -> None:
    """
    Validate manifest data against the schema.

    Args:
        data: Parsed manifest JSON

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Manifest must be a JSON object")

    version = data.get("schema_version")
    if version != MANIFEST_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported manifest schema version: {version} (expected {MANIFEST_SCHEMA_VERSION})",
            path="schema_version",
        )

    _check_schema("manifest", data)


def validate_question_set(data: Any) -> None:
    """
    Validate a saved question set against the schema.

    Args:
        data: Parsed question set JSON

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Question set must be a JSON object")

    version = data.get("version")
    if version != QUESTION_SET_VERSION:
        raise ValidationError(
            f"Unsupported question set version: {version} (expected {QUESTION_SET_VERSION})",
            path="version",
        )

    _check_schema("question_set", data)


def _check_schema(name: str, data: Any) -> None:
    validator = jsonschema.Draft7Validator(_load_schema(name))
    errors = list(validator.iter_errors(data))
    if errors:
        first = jsonschema.exceptions.best_match(errors)
        raise ValidationError(
            f"Schema validation failed: {first.message}",
            path=".".join(str(p) for p in first.absolute_path),
            errors=[e.message for e in errors],
        )
