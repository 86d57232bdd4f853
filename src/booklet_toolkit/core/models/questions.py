"""
Module: questions

Purpose:
    Provides the CapturedQuestion dataclass - the record passed from region
    capture into the layout engine - and helpers that keep the booklet
    order contiguous while the user reorders or deletes questions.

Key Functions:
    - CapturedQuestion.to_dict() / CapturedQuestion.from_dict(): Serialization
    - renumber(): Reassign order 1..n following list position
    - move_question(): Move one question and renumber
    - remove_question(): Delete one question and renumber

Dependencies:
    - dataclasses (std)
    - .images.QuestionImage
    - .selection.SelectionRect

Used By:
    - builder.images.capture: Creates CapturedQuestions
    - builder.layout.engine: Lays them out
    - core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Sequence

from .images import QuestionImage
from .selection import SelectionRect


@dataclass(frozen=True)
class CapturedQuestion:
    """
    One clipped question (immutable).

    Attributes:
        id: Opaque unique identifier
        image: Encoded raster of the clipped region
        source_page: Originating page number, 1-based (informational)
        source_document_ref: Opaque reference to the source document (informational)
        selection: Selected rectangle in source pixels; defines aspect ratio
        order: Position in the booklet, 1-based
        source_document_name: Display name of the source document

    Invariants:
        - id is non-empty
        - order >= 1
        - source_page >= 1

    Example:
        >>> q = CapturedQuestion(
        ...     id="q1",
        ...     image=QuestionImage.from_pil(img),
        ...     source_page=3,
        ...     source_document_ref="doc-1",
        ...     selection=SelectionRect(0, 0, 400, 300),
        ...     order=1,
        ... )
        >>> q.selection.aspect_ratio
        0.75
    """

    id: str
    image: QuestionImage
    source_page: int
    source_document_ref: str
    selection: SelectionRect
    order: int
    source_document_name: str = ""

    def __post_init__(self) -> None:
        """Validate question on construction."""
        if not self.id:
            raise ValueError("Question id must be non-empty")
        if self.order < 1:
            raise ValueError(f"order must be >= 1: {self.order}")
        if self.source_page < 1:
            raise ValueError(f"source_page must be >= 1: {self.source_page}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "image": self.image.to_data_url(),
            "image_width": self.image.width,
            "image_height": self.image.height,
            "source_page": self.source_page,
            "source_document_ref": self.source_document_ref,
            "source_document_name": self.source_document_name,
            "selection": self.selection.to_dict(),
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CapturedQuestion":
        """
        Deserialize a question.

        Raises:
            ValueError: If the image payload or a field is invalid
            KeyError: If a required key is missing
        """
        image = QuestionImage.from_data_url(
            data["image"],
            width=data.get("image_width", 0),
            height=data.get("image_height", 0),
        )
        return cls(
            id=data["id"],
            image=image,
            source_page=data.get("source_page", 1),
            source_document_ref=data.get("source_document_ref", ""),
            selection=SelectionRect.from_dict(data["selection"]),
            order=data["order"],
            source_document_name=data.get("source_document_name", ""),
        )


def renumber(questions: Sequence[CapturedQuestion]) -> tuple[CapturedQuestion, ...]:
    """
    Reassign order 1..n following list position.

    Example:
        >>> [q.order for q in renumber([q3, q1])]
        [1, 2]
    """
    return tuple(
        q if q.order == index else replace(q, order=index)
        for index, q in enumerate(questions, start=1)
    )


def move_question(
    questions: Sequence[CapturedQuestion],
    old_index: int,
    new_index: int,
) -> tuple[CapturedQuestion, ...]:
    """
    Move the question at old_index to new_index and renumber.

    Raises:
        IndexError: If either index is out of range
    """
    items = list(questions)
    if not (0 <= old_index < len(items)) or not (0 <= new_index < len(items)):
        raise IndexError(f"Cannot move {old_index} -> {new_index} in {len(items)} questions")
    items.insert(new_index, items.pop(old_index))
    return renumber(items)


def remove_question(
    questions: Sequence[CapturedQuestion],
    question_id: str,
) -> tuple[CapturedQuestion, ...]:
    """
    Delete a question by id and renumber the rest.

    Raises:
        KeyError: If no question has that id
    """
    remaining = [q for q in questions if q.id != question_id]
    if len(remaining) == len(questions):
        raise KeyError(question_id)
    return renumber(remaining)
