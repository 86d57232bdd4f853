"""
Core Models Package

Immutable, validated data models shared by capture, layout and output.

All models in this package are frozen dataclasses. Once a question list
is handed to the layout engine nothing in it can change under the engine.
"""

from .selection import SelectionRect, PlacementError, InvalidGeometryError
from .images import QuestionImage
from .questions import CapturedQuestion, renumber, move_question, remove_question
from .template import Template, NumberingStyle, BookletKind

__all__ = [
    "SelectionRect",
    "PlacementError",
    "InvalidGeometryError",
    "QuestionImage",
    "CapturedQuestion",
    "renumber",
    "move_question",
    "remove_question",
    "Template",
    "NumberingStyle",
    "BookletKind",
]
