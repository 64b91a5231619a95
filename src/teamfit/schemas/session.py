"""Session-side schema: answers and team profiles."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AnswerKind(str, Enum):
    """Declared raw value type of an answer."""

    LIKERT = "LIKERT"
    BINARY = "BINARY"
    CONTINUOUS = "CONTINUOUS"


class Answer(BaseModel):
    """Raw answer to one question within a session.

    ``likert_value`` carries ordinal responses, ``score`` carries binary
    correctness (0/1) and continuous scores.
    """

    answer_id: str
    question_id: str | None = None
    kind: AnswerKind | None = None
    likert_value: int | None = None
    score: float | None = None
    skipped: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def has_value(self) -> bool:
        return self.likert_value is not None or self.score is not None


class TeamProfile(BaseModel):
    """Team saturation and personality snapshot supplied by a collaborator."""

    team_id: str
    saturation: dict[str, float] = Field(default_factory=dict)
    personality: dict[str, float] = Field(default_factory=dict)
    member_count: int | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("saturation")
    @classmethod
    def _check_ratios(cls, value: dict[str, float]) -> dict[str, float]:
        for competency_id, ratio in value.items():
            if not 0.0 <= ratio <= 1.0:
                raise ValueError(
                    f"saturation ratio for {competency_id!r} must be within [0, 1], got {ratio}"
                )
        return value

    @field_validator("personality")
    @classmethod
    def _check_traits(cls, value: dict[str, float]) -> dict[str, float]:
        normalized: dict[str, float] = {}
        for trait, score in value.items():
            if not 0.0 <= score <= 100.0:
                raise ValueError(f"personality score for {trait!r} must be within [0, 100], got {score}")
            normalized[trait.strip().upper()] = float(score)
        return normalized
