"""Pydantic schema definitions for catalog and session data."""

from __future__ import annotations

from .catalog import (
    BehavioralIndicator,
    Competency,
    DifficultyLevel,
    Question,
    StandardCodes,
)
from .session import Answer, AnswerKind, TeamProfile

__all__ = [
    "Answer",
    "AnswerKind",
    "BehavioralIndicator",
    "Competency",
    "DifficultyLevel",
    "Question",
    "StandardCodes",
    "TeamProfile",
]
