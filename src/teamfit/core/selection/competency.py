"""Competency-level question selection."""

from __future__ import annotations

from typing import Mapping, Sequence

import structlog

from ...schemas import BehavioralIndicator, DifficultyLevel
from ..errors import InvalidInputError
from ..interfaces import IndicatorCatalog
from .diagnostics import SelectionWarnings, WarningCode
from .distribution import GRADUATED_MIN_QUOTA, DistributionPlanner, DistributionStrategy
from .filters import ContextNeutralityFilter


class CompetencySelector:
    """Resolve indicators for competencies and delegate to the planner."""

    def __init__(
        self,
        *,
        indicators: IndicatorCatalog,
        planner: DistributionPlanner,
        neutrality: ContextNeutralityFilter | None = None,
    ) -> None:
        self._indicators = indicators
        self._planner = planner
        self._neutrality = neutrality or ContextNeutralityFilter()
        self._logger = structlog.get_logger(__name__)

    def select_for_competency(
        self,
        competency_id: str,
        total: int,
        per_indicator: int,
        preferred_difficulty: DifficultyLevel | None = None,
        *,
        warnings: SelectionWarnings | None = None,
    ) -> list[str]:
        indicators = self._active_by_weight(self._indicators.indicators_for_competency(competency_id))
        if not indicators:
            self._logger.warning("selection.no_active_indicators", competency_id=competency_id)
            if warnings is not None:
                warnings.add(
                    WarningCode.NO_ACTIVE_INDICATORS_COMPETENCY,
                    f"No active behavioral indicators found for competency {competency_id}",
                    competency_id=competency_id,
                )
            return []

        return self._planner.plan(
            [indicator.indicator_id for indicator in indicators],
            total,
            per_indicator,
            DistributionStrategy.WATERFALL,
            preferred_difficulty,
            warnings=warnings,
        )

    def select_for_competencies(
        self,
        competency_ids: Sequence[str] | None,
        per_indicator: int,
        preferred_difficulty: DifficultyLevel | None = None,
        *,
        shuffle: bool = False,
        context_neutral_only: bool = False,
        strategy: DistributionStrategy | str = DistributionStrategy.WATERFALL,
        warnings: SelectionWarnings | None = None,
    ) -> list[str]:
        """Select ``per_indicator`` questions for every active indicator.

        Context-neutral selection (universal baseline) spreads each
        indicator over difficulty bands once the quota reaches three.
        """
        self._validate_quota(per_indicator)
        indicators = self._resolve(competency_ids, warnings)
        if not indicators:
            return []

        indicator_ids = [indicator.indicator_id for indicator in indicators]
        total = len(indicator_ids) * per_indicator
        self._logger.info(
            "selection.competencies",
            competencies=len(competency_ids or ()),
            indicators=len(indicator_ids),
            per_indicator=per_indicator,
            context_neutral=context_neutral_only,
        )

        if context_neutral_only and per_indicator >= GRADUATED_MIN_QUOTA:
            selected = self._planner.plan_graduated(
                indicator_ids,
                total,
                per_indicator,
                preferred_difficulty,
                predicate=self._neutrality,
                warnings=warnings,
                record=False,
            )
        else:
            selected = self._planner.plan(
                indicator_ids,
                total,
                per_indicator,
                strategy,
                preferred_difficulty,
                predicate=self._neutrality if context_neutral_only else None,
                warnings=warnings,
                record=False,
            )
        return self._finalize(selected, shuffle)

    def select_for_competencies_weighted(
        self,
        competency_ids: Sequence[str] | None,
        competency_weights: Mapping[str, float] | None,
        per_indicator: int,
        preferred_difficulty: DifficultyLevel | None = None,
        *,
        shuffle: bool = False,
        warnings: SelectionWarnings | None = None,
    ) -> list[str]:
        """Weighted selection where indicator weight is scaled by its competency's weight."""
        self._validate_quota(per_indicator)
        indicators = self._resolve(competency_ids, warnings)
        if not indicators:
            return []

        competency_weights = competency_weights or {}
        indicator_weights = {
            indicator.indicator_id: indicator.weight * float(competency_weights.get(indicator.competency_id, 1.0))
            for indicator in indicators
        }
        selected = self._planner.plan(
            list(indicator_weights),
            len(indicators) * per_indicator,
            per_indicator,
            DistributionStrategy.WEIGHTED,
            preferred_difficulty,
            weights=indicator_weights,
            warnings=warnings,
            record=False,
        )
        return self._finalize(selected, shuffle)

    def _resolve(
        self,
        competency_ids: Sequence[str] | None,
        warnings: SelectionWarnings | None,
    ) -> list[BehavioralIndicator]:
        if not competency_ids:
            self._logger.warning("selection.no_competencies")
            return []
        unique_ids = list(dict.fromkeys(competency_ids))
        indicators = self._active_by_weight(self._indicators.indicators_for_competencies(unique_ids))
        if not indicators:
            self._logger.warning("selection.no_active_indicators", competency_ids=unique_ids)
            if warnings is not None:
                warnings.add(
                    WarningCode.NO_ACTIVE_INDICATORS_COMPETENCIES,
                    f"No active behavioral indicators found for {len(unique_ids)} competencies",
                    competency_ids=unique_ids,
                )
        return indicators

    @staticmethod
    def _active_by_weight(indicators: Sequence[BehavioralIndicator]) -> list[BehavioralIndicator]:
        unique = {indicator.indicator_id: indicator for indicator in indicators if indicator.active}
        return sorted(unique.values(), key=lambda indicator: indicator.weight, reverse=True)

    @staticmethod
    def _validate_quota(per_indicator: int | None) -> None:
        if per_indicator is None or per_indicator < 0:
            raise InvalidInputError(f"per_indicator must be a non-negative integer, got {per_indicator!r}")

    def _finalize(self, selected: list[str], shuffle: bool) -> list[str]:
        """Shuffle when asked, then report the final order as exposed."""
        if shuffle and selected:
            selected = list(selected)
            self._planner.selector.ranker.rng.shuffle(selected)
        self._planner.record_exposure(selected)
        return selected
