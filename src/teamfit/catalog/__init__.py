"""In-memory catalogs backing the CLI pipeline and tests."""

from __future__ import annotations

from collections import Counter
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from ..schemas import BehavioralIndicator, Competency, Question, TeamProfile


class QuestionBank:
    """Competencies, indicators and questions held in memory.

    Serves as question catalog, indicator catalog and eligibility oracle.
    Retired questions stay in the bank for scoring lookups but are never
    eligible for assembly.
    """

    def __init__(
        self,
        *,
        competencies: Iterable[Competency] = (),
        indicators: Iterable[BehavioralIndicator] = (),
        questions: Iterable[Question] = (),
        retired_question_ids: Iterable[str] = (),
    ) -> None:
        self._competencies = {item.competency_id: item for item in competencies}
        self._indicators = {item.indicator_id: item for item in indicators}
        self._questions = {item.question_id: item for item in questions}
        self._retired = set(retired_question_ids)

        self._by_competency: dict[str, list[BehavioralIndicator]] = {}
        for indicator in self._indicators.values():
            self._by_competency.setdefault(indicator.competency_id, []).append(indicator)
        self._by_indicator: dict[str, list[Question]] = {}
        for question in self._questions.values():
            self._by_indicator.setdefault(question.indicator_id, []).append(question)

    @property
    def competencies(self) -> Mapping[str, Competency]:
        return MappingProxyType(self._competencies)

    @property
    def indicators(self) -> Mapping[str, BehavioralIndicator]:
        return MappingProxyType(self._indicators)

    @property
    def questions(self) -> Mapping[str, Question]:
        return MappingProxyType(self._questions)

    @property
    def retired_question_ids(self) -> frozenset[str]:
        return frozenset(self._retired)

    def active_questions_for_indicator(self, indicator_id: str) -> list[Question]:
        return [question for question in self._by_indicator.get(indicator_id, []) if question.active]

    def indicators_for_competency(self, competency_id: str) -> list[BehavioralIndicator]:
        return list(self._by_competency.get(competency_id, []))

    def indicators_for_competencies(self, competency_ids: Iterable[str]) -> list[BehavioralIndicator]:
        seen: set[str] = set()
        result: list[BehavioralIndicator] = []
        for competency_id in competency_ids:
            for indicator in self._by_competency.get(competency_id, []):
                if indicator.indicator_id not in seen:
                    seen.add(indicator.indicator_id)
                    result.append(indicator)
        return result

    def is_eligible(self, question_id: str) -> bool:
        return question_id in self._questions and question_id not in self._retired

    def retire(self, question_id: str) -> None:
        self._retired.add(question_id)

    def __len__(self) -> int:
        return len(self._questions)


class TeamProfileRegistry:
    """Team profiles keyed by team id."""

    def __init__(self, profiles: Iterable[TeamProfile] = ()) -> None:
        self._profiles = {profile.team_id: profile for profile in profiles}

    def profile_for(self, team_id: str) -> TeamProfile | None:
        return self._profiles.get(team_id)

    def register(self, profile: TeamProfile) -> None:
        self._profiles[profile.team_id] = profile

    def team_ids(self) -> list[str]:
        return list(self._profiles.keys())

    def __len__(self) -> int:
        return len(self._profiles)


class ExposureLog:
    """Count how often each question has been handed out."""

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()

    def record_exposure(self, question_ids: Sequence[str]) -> None:
        self._counts.update(question_ids)

    def count(self, question_id: str) -> int:
        return self._counts[question_id]

    @property
    def counts(self) -> dict[str, int]:
        return dict(self._counts)


__all__ = ["ExposureLog", "QuestionBank", "TeamProfileRegistry"]
