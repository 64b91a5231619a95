from __future__ import annotations

import random
from typing import Any, Callable

import pytest

from teamfit.catalog import ExposureLog, QuestionBank
from teamfit.core.selection import (
    CompetencySelector,
    DifficultyRanker,
    DistributionPlanner,
    EligibilityFilter,
    IndicatorSelector,
)
from teamfit.schemas import BehavioralIndicator, Competency, DifficultyLevel, Question


def _bank_factory(
    layout: dict[str, dict[str, int]],
    *,
    difficulties: tuple[DifficultyLevel, ...] = tuple(DifficultyLevel),
    **extra: Any,
) -> QuestionBank:
    """Build a bank from ``{competency_id: {indicator_id: question_count}}``.

    Questions are named ``<indicator>-Q<n>`` and cycle through ``difficulties``.
    """
    competencies = []
    indicators = []
    questions = []
    for competency_id, indicator_counts in layout.items():
        competencies.append(Competency(competency_id=competency_id, name=competency_id.title()))
        for indicator_id, count in indicator_counts.items():
            indicators.append(BehavioralIndicator(indicator_id=indicator_id, competency_id=competency_id))
            for n in range(1, count + 1):
                questions.append(
                    Question(
                        question_id=f"{indicator_id}-Q{n}",
                        indicator_id=indicator_id,
                        difficulty=difficulties[(n - 1) % len(difficulties)],
                    )
                )
    return QuestionBank(competencies=competencies, indicators=indicators, questions=questions, **extra)


@pytest.fixture
def build_bank() -> Callable[..., QuestionBank]:
    return _bank_factory


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def build_selection(rng: random.Random) -> Callable[[QuestionBank], dict[str, Any]]:
    """Wire selectors over a bank the way the container does."""

    def _build(bank: QuestionBank) -> dict[str, Any]:
        exposure = ExposureLog()
        indicator_selector = IndicatorSelector(
            catalog=bank,
            eligibility=EligibilityFilter(bank),
            ranker=DifficultyRanker(rng=rng),
        )
        planner = DistributionPlanner(selector=indicator_selector, exposure_tracker=exposure)
        return {
            "indicator": indicator_selector,
            "planner": planner,
            "competency": CompetencySelector(indicators=bank, planner=planner),
            "exposure": exposure,
        }

    return _build
