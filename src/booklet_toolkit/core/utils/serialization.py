"""
Serialization Utilities

Provides to/from JSON utilities for booklet data.

- Manifests describe what to capture (source file, page, rectangle) and
  the template. They are validated against the bundled schema before use.
- Question sets are already-captured questions, saved with their image
  payloads inlined as data URLs so a session can be rebuilt later.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

from ..models.questions import CapturedQuestion
from ..models.selection import SelectionRect
from ..models.template import Template
from ..schemas.validator import (
    MANIFEST_SCHEMA_VERSION,
    QUESTION_SET_VERSION,
    ValidationError,
    validate_manifest,
    validate_question_set,
)


# ─────────────────────────────────────────────────────────────────────────────
# Manifest
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ManifestEntry:
    """
    One capture request from a manifest.

    Attributes:
        source: Path to a PDF or raster image
        page: 1-based page number (ignored for raster images)
        selection: Rectangle in display coordinates
        scale: Display scale the rectangle was drawn at
        id: Optional explicit question id
    """

    source: Path
    page: int
    selection: SelectionRect
    scale: float = 1.0
    id: Optional[str] = None


@dataclass(frozen=True)
class Manifest:
    """Parsed manifest: template plus ordered capture requests."""

    template: Template
    entries: tuple[ManifestEntry, ...]


def parse_manifest(data: dict[str, Any], *, base_path: Path | None = None) -> Manifest:
    """
    Build a Manifest from parsed JSON.

    Args:
        data: Manifest dictionary
        base_path: Directory relative source paths are resolved against

    Returns:
        Manifest instance

    Raises:
        ValidationError: If data fails schema validation or a value cannot be parsed
    """
    validate_manifest(data)

    try:
        template = Template.from_dict(data.get("template", {}))
    except ValueError as e:
        raise ValidationError(f"Invalid template: {e}", path="template") from e

    entries = []
    for item in data["questions"]:
        source = Path(item["source"])
        if base_path is not None and not source.is_absolute():
            source = base_path / source
        entries.append(ManifestEntry(
            source=source,
            page=item.get("page", 1),
            selection=SelectionRect.from_dict(item["selection"]),
            scale=item.get("scale", 1.0),
            id=item.get("id"),
        ))

    return Manifest(template=template, entries=tuple(entries))


def load_manifest(path: Path) -> Manifest:
    """
    Load and validate a manifest file.

    Relative source paths are resolved against the manifest's directory.

    Raises:
        ValidationError: If the file is not valid JSON or fails validation
        OSError: If the file cannot be read
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Manifest is not valid JSON: {e}") from e
    return parse_manifest(data, base_path=path.parent)


def manifest_to_dict(manifest: Manifest) -> dict[str, Any]:
    """Serialize a Manifest back to schema-valid JSON data."""
    questions = []
    for entry in manifest.entries:
        item: dict[str, Any] = {
            "source": entry.source.as_posix(),
            "page": entry.page,
            "selection": entry.selection.to_dict(),
            "scale": entry.scale,
        }
        if entry.id:
            item["id"] = entry.id
        questions.append(item)
    return {
        "schema_version": MANIFEST_SCHEMA_VERSION,
        "template": manifest.template.to_dict(),
        "questions": questions,
    }


# ─────────────────────────────────────────────────────────────────────────────
# Captured question sets
# ─────────────────────────────────────────────────────────────────────────────

def save_questions(questions: Sequence[CapturedQuestion], path: Path) -> None:
    """
    Write captured questions (with inlined images) to a JSON file.

    Raises:
        OSError: If the file cannot be written
    """
    payload = {
        "version": QUESTION_SET_VERSION,
        "questions": [q.to_dict() for q in questions],
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def load_questions(path: Path) -> tuple[CapturedQuestion, ...]:
    """
    Read captured questions written by save_questions().

    Raises:
        ValidationError: If the file fails schema validation or a payload
            cannot be decoded
        OSError: If the file cannot be read
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Question set is not valid JSON: {e}") from e

    validate_question_set(data)

    questions = []
    for i, item in enumerate(data["questions"]):
        try:
            questions.append(CapturedQuestion.from_dict(item))
        except ValueError as e:
            raise ValidationError(f"Invalid question: {e}", path=f"questions.{i}") from e
    return tuple(questions)
