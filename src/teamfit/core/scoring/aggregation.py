"""Grouping of normalized answers by indicator and competency."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

import structlog

from ...schemas import Answer, BehavioralIndicator, Question
from .normalizer import ScoreNormalizer


@dataclass(slots=True)
class IndicatorAggregation:
    """Running sum of normalized scores for one indicator."""

    indicator_id: str
    total_score: float = 0.0
    question_count: int = 0

    def add(self, normalized: float) -> None:
        self.total_score += normalized
        self.question_count += 1

    @property
    def percentage(self) -> float:
        if self.question_count == 0:
            return 0.0
        return 100.0 * self.total_score / self.question_count


@dataclass(slots=True)
class CompetencyAggregation:
    """Running sum of normalized scores for one competency."""

    competency_id: str
    total_score: float = 0.0
    question_count: int = 0
    indicators: dict[str, IndicatorAggregation] = field(default_factory=dict)

    def add(self, indicator_id: str, normalized: float) -> None:
        self.total_score += normalized
        self.question_count += 1
        indicator = self.indicators.get(indicator_id)
        if indicator is None:
            indicator = self.indicators[indicator_id] = IndicatorAggregation(indicator_id)
        indicator.add(normalized)

    @property
    def percentage(self) -> float:
        if self.question_count == 0:
            return 0.0
        return 100.0 * self.total_score / self.question_count

    @property
    def ratio(self) -> float:
        return self.percentage / 100.0


class CompetencyAggregator:
    """Roll answers up through the question -> indicator -> competency chain."""

    def __init__(self, normalizer: ScoreNormalizer | None = None) -> None:
        self._normalizer = normalizer or ScoreNormalizer()
        self._logger = structlog.get_logger(__name__)

    def aggregate(
        self,
        answers: Iterable[Answer],
        questions: Mapping[str, Question],
        indicators: Mapping[str, BehavioralIndicator],
    ) -> dict[str, CompetencyAggregation]:
        """Return aggregations keyed by competency id, in first-answer order.

        Skipped answers and answers that cannot be traced to a competency are
        dropped, so competencies without a valid answer do not appear.
        """
        aggregations: dict[str, CompetencyAggregation] = {}
        dropped = 0
        for answer in answers:
            indicator = self._resolve_indicator(answer, questions, indicators)
            if indicator is None:
                dropped += 1
                continue
            normalized = self._normalizer.normalize(answer)
            aggregation = aggregations.get(indicator.competency_id)
            if aggregation is None:
                aggregation = aggregations[indicator.competency_id] = CompetencyAggregation(
                    indicator.competency_id
                )
            aggregation.add(indicator.indicator_id, normalized)

        if dropped:
            self._logger.debug("scoring.answers_dropped", dropped=dropped)
        return aggregations

    @staticmethod
    def _resolve_indicator(
        answer: Answer,
        questions: Mapping[str, Question],
        indicators: Mapping[str, BehavioralIndicator],
    ) -> BehavioralIndicator | None:
        if answer.skipped or not answer.question_id or not answer.has_value:
            return None
        question = questions.get(answer.question_id)
        if question is None:
            return None
        return indicators.get(question.indicator_id)
