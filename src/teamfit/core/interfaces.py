"""Collaborator contracts consumed by the engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Protocol, Sequence, runtime_checkable

from ..schemas import BehavioralIndicator, Question, TeamProfile

if TYPE_CHECKING:
    from .scoring.config import ScoringConfig


@runtime_checkable
class QuestionCatalog(Protocol):
    """Source of active questions per indicator."""

    def active_questions_for_indicator(self, indicator_id: str) -> list[Question]:
        """Return every active question owned by the indicator."""


@runtime_checkable
class IndicatorCatalog(Protocol):
    """Source of behavioural indicators per competency."""

    def indicators_for_competency(self, competency_id: str) -> list[BehavioralIndicator]:
        """Return the indicators owned by one competency."""

    def indicators_for_competencies(self, competency_ids: Iterable[str]) -> list[BehavioralIndicator]:
        """Return the indicators owned by any of the competencies."""


@runtime_checkable
class EligibilityOracle(Protocol):
    """Psychometric validity state computed elsewhere (e.g. retirement)."""

    def is_eligible(self, question_id: str) -> bool:
        """Return True when the question may be used for assembly."""


@runtime_checkable
class ExposureTracker(Protocol):
    """Fire-and-forget notification of selected questions."""

    def record_exposure(self, question_ids: Sequence[str]) -> None:
        """Record that the questions were handed out once more."""


@runtime_checkable
class TeamProfileProvider(Protocol):
    """Lookup of team saturation snapshots."""

    def profile_for(self, team_id: str) -> TeamProfile | None:
        """Return the team's profile, or None when unknown."""


@runtime_checkable
class ScoringConfigProvider(Protocol):
    """Read-only access to scoring tunables."""

    def snapshot(self) -> "ScoringConfig":
        """Return the configuration to use for one scoring call."""


__all__ = [
    "EligibilityOracle",
    "ExposureTracker",
    "IndicatorCatalog",
    "QuestionCatalog",
    "ScoringConfigProvider",
    "TeamProfileProvider",
]
