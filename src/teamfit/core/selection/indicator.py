"""Single-indicator question selection."""

from __future__ import annotations

from typing import AbstractSet, Callable, Collection

import structlog

from ...schemas import DifficultyLevel, Question
from ..errors import InvalidInputError
from ..interfaces import IndicatorCatalog, QuestionCatalog
from .diagnostics import SelectionWarnings, WarningCode
from .filters import EligibilityFilter
from .ranking import DifficultyRanker

QuestionPredicate = Callable[[Question], bool]


class IndicatorSelector:
    """Pick up to N eligible, non-excluded questions for one indicator."""

    def __init__(
        self,
        *,
        catalog: QuestionCatalog,
        eligibility: EligibilityFilter,
        ranker: DifficultyRanker,
    ) -> None:
        self._catalog = catalog
        self._eligibility = eligibility
        self._ranker = ranker
        self._logger = structlog.get_logger(__name__)

    @property
    def ranker(self) -> DifficultyRanker:
        return self._ranker

    def select(
        self,
        indicator_id: str,
        max_count: int,
        preferred_difficulty: DifficultyLevel | None = None,
        exclude: AbstractSet[str] | None = None,
        *,
        levels: Collection[DifficultyLevel] | None = None,
        predicate: QuestionPredicate | None = None,
        warnings: SelectionWarnings | None = None,
    ) -> list[str]:
        """Return up to ``max_count`` question ids, best difficulty match first.

        ``levels`` restricts the pool to the given difficulty bands and
        ``predicate`` applies an extra per-question filter. A short pool
        yields a partial list, never an error.
        """
        if max_count is None or max_count < 0:
            raise InvalidInputError(f"max_count must be a non-negative integer, got {max_count!r}")
        if max_count == 0:
            return []

        pool = self.eligible_pool(indicator_id, exclude, levels=levels, predicate=predicate)
        if not pool:
            self._logger.debug(
                "selection.indicator_empty",
                indicator_id=indicator_id,
                levels=[level.value for level in levels] if levels else None,
            )
            if warnings is not None and not levels:
                warnings.add(
                    WarningCode.NO_ACTIVE_QUESTIONS_INDICATOR,
                    f"No eligible questions found for indicator {indicator_id}",
                    indicator_id=indicator_id,
                )
            return []

        ranked = self._ranker.rank(pool, preferred_difficulty)
        selected = [question.question_id for question in ranked[:max_count]]

        if len(selected) < max_count:
            self._logger.debug(
                "selection.indicator_partial",
                indicator_id=indicator_id,
                requested=max_count,
                selected=len(selected),
            )
            if warnings is not None and not levels:
                warnings.add(
                    WarningCode.INDICATOR_SHORTFALL,
                    f"Indicator {indicator_id} supplied {len(selected)} of {max_count} questions",
                    indicator_id=indicator_id,
                    requested=max_count,
                    selected=len(selected),
                )
        return selected

    def eligible_pool(
        self,
        indicator_id: str,
        exclude: AbstractSet[str] | None = None,
        *,
        levels: Collection[DifficultyLevel] | None = None,
        predicate: QuestionPredicate | None = None,
    ) -> list[Question]:
        excluded = exclude or frozenset()
        allowed_levels = set(levels) if levels else None
        pool: list[Question] = []
        seen: set[str] = set()
        for question in self._catalog.active_questions_for_indicator(indicator_id):
            if question.question_id in excluded or question.question_id in seen:
                continue
            if allowed_levels is not None and question.difficulty not in allowed_levels:
                continue
            if not self._eligibility.is_eligible(question):
                continue
            if predicate is not None and not predicate(question):
                continue
            seen.add(question.question_id)
            pool.append(question)
        return pool

    def eligible_count(self, indicator_id: str) -> int:
        """Number of questions currently usable for the indicator."""
        return len(self.eligible_pool(indicator_id))

    def eligible_count_for_competency(self, competency_id: str, indicators: IndicatorCatalog) -> int:
        """Number of usable questions across a competency's active indicators."""
        return sum(
            self.eligible_count(indicator.indicator_id)
            for indicator in indicators.indicators_for_competency(competency_id)
            if indicator.active
        )
