"""Question bank schema: competencies, indicators and questions."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DifficultyLevel(str, Enum):
    """Ordered question difficulty."""

    FOUNDATIONAL = "FOUNDATIONAL"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"
    SPECIALIZED = "SPECIALIZED"

    @property
    def rank(self) -> int:
        return _DIFFICULTY_ORDER.index(self)

    def distance(self, other: DifficultyLevel) -> int:
        """Absolute ordinal distance between two levels."""
        return abs(self.rank - other.rank)


_DIFFICULTY_ORDER: tuple[DifficultyLevel, ...] = tuple(DifficultyLevel)


class StandardCodes(BaseModel):
    """External taxonomy mappings attached to a competency."""

    onet_code: str | None = None
    esco_uri: str | None = None
    big_five: str | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("onet_code", "esco_uri", "big_five")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("big_five")
    @classmethod
    def _upper_trait(cls, value: str | None) -> str | None:
        return value.upper() if value else value


class Competency(BaseModel):
    """Competency scored by the engine."""

    competency_id: str
    name: str = ""
    codes: StandardCodes = Field(default_factory=StandardCodes)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def has_esco(self) -> bool:
        return self.codes.esco_uri is not None

    @property
    def big_five_trait(self) -> str | None:
        return self.codes.big_five


class BehavioralIndicator(BaseModel):
    """Observable behaviour belonging to exactly one competency."""

    indicator_id: str
    competency_id: str
    title: str = ""
    weight: float = Field(default=1.0, ge=0.0)
    active: bool = True

    model_config = ConfigDict(extra="forbid", frozen=True)


class Question(BaseModel):
    """Assessment item belonging to exactly one indicator."""

    question_id: str
    indicator_id: str
    difficulty: DifficultyLevel | None = None
    active: bool = True
    tags: frozenset[str] = Field(default_factory=frozenset)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: object) -> object:
        if value is None:
            return frozenset()
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(str(tag).strip().upper() for tag in value if str(tag).strip())
        return value
