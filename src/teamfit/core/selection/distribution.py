"""Budget distribution across several indicators."""

from __future__ import annotations

import math
from enum import Enum
from typing import AbstractSet, Iterable, Mapping, Sequence

import structlog

from ...schemas import DifficultyLevel
from ..errors import InvalidInputError
from ..interfaces import ExposureTracker
from .diagnostics import SelectionWarnings, WarningCode
from .indicator import IndicatorSelector, QuestionPredicate


class DistributionStrategy(str, Enum):
    """How a total budget is spread over indicators."""

    WATERFALL = "WATERFALL"
    WEIGHTED = "WEIGHTED"
    PRIORITY_FIRST = "PRIORITY_FIRST"


GRADUATED_BANDS: tuple[DifficultyLevel, ...] = (
    DifficultyLevel.FOUNDATIONAL,
    DifficultyLevel.INTERMEDIATE,
    DifficultyLevel.ADVANCED,
)

# Quotas below this size skip banding.
GRADUATED_MIN_QUOTA = len(GRADUATED_BANDS)

_STRATEGY_HANDLERS: dict[DistributionStrategy, str] = {
    DistributionStrategy.WATERFALL: "_waterfall",
    DistributionStrategy.WEIGHTED: "_weighted",
    DistributionStrategy.PRIORITY_FIRST: "_priority_first",
}

if set(_STRATEGY_HANDLERS) != set(DistributionStrategy):  # pragma: no cover - import-time guard
    raise RuntimeError("Every DistributionStrategy needs a handler")


class DistributionPlanner:
    """Allocate a question budget over indicators and collect unique ids.

    Every strategy keeps a running exclusion set, so a plan never returns the
    same question twice. ``per_indicator`` of zero or less means uncapped;
    WATERFALL and WEIGHTED do not use it as a cap.
    """

    def __init__(
        self,
        *,
        selector: IndicatorSelector,
        exposure_tracker: ExposureTracker | None = None,
    ) -> None:
        self._selector = selector
        self._exposure_tracker = exposure_tracker
        self._logger = structlog.get_logger(__name__)

    @property
    def selector(self) -> IndicatorSelector:
        return self._selector

    def plan(
        self,
        indicator_ids: Sequence[str] | None,
        total: int,
        per_indicator: int = 0,
        strategy: DistributionStrategy | str = DistributionStrategy.WATERFALL,
        preferred_difficulty: DifficultyLevel | None = None,
        *,
        weights: Mapping[str, float] | None = None,
        exclude: AbstractSet[str] | None = None,
        predicate: QuestionPredicate | None = None,
        warnings: SelectionWarnings | None = None,
        record: bool = True,
    ) -> list[str]:
        """Run one strategy over the indicators.

        With ``record=False`` the caller reports exposure itself through
        :meth:`record_exposure` once the final order is known.
        """
        self._validate_budget(total, per_indicator)
        resolved = self.resolve_strategy(strategy)
        if not indicator_ids:
            self._logger.warning("selection.no_indicators", strategy=resolved.value)
            return []

        handler = getattr(self, _STRATEGY_HANDLERS[resolved])
        selected: list[str] = handler(
            list(indicator_ids),
            total,
            per_indicator,
            preferred_difficulty,
            weights=weights,
            used=set(exclude or ()),
            predicate=predicate,
            warnings=warnings,
        )
        return self._finish(
            selected,
            strategy=resolved.value,
            total=total,
            indicators=len(indicator_ids),
            record=record,
        )

    def plan_graduated(
        self,
        indicator_ids: Sequence[str] | None,
        total: int,
        per_indicator: int,
        preferred_difficulty: DifficultyLevel | None = None,
        *,
        exclude: AbstractSet[str] | None = None,
        predicate: QuestionPredicate | None = None,
        warnings: SelectionWarnings | None = None,
        record: bool = True,
    ) -> list[str]:
        """Split the budget round-robin, then band each indicator's quota."""
        self._validate_budget(total, per_indicator)
        if not indicator_ids:
            self._logger.warning("selection.no_indicators", strategy="GRADUATED")
            return []

        used = set(exclude or ())
        selected: list[str] = []
        for indicator_id, quota in self.round_robin_quotas(indicator_ids, total, per_indicator):
            picked = self.select_graduated(
                indicator_id,
                quota,
                preferred_difficulty,
                used,
                predicate=predicate,
                warnings=warnings,
            )
            selected.extend(picked)
            used.update(picked)
        return self._finish(
            selected,
            strategy="GRADUATED",
            total=total,
            indicators=len(indicator_ids),
            record=record,
        )

    def select_graduated(
        self,
        indicator_id: str,
        quota: int,
        preferred_difficulty: DifficultyLevel | None,
        exclude: AbstractSet[str],
        *,
        predicate: QuestionPredicate | None = None,
        warnings: SelectionWarnings | None = None,
    ) -> list[str]:
        if quota < GRADUATED_MIN_QUOTA:
            return self._selector.select(
                indicator_id,
                quota,
                preferred_difficulty,
                exclude,
                predicate=predicate,
                warnings=warnings,
            )

        base, extra = divmod(quota, len(GRADUATED_BANDS))
        taken = set(exclude)
        picked: list[str] = []
        unmet = 0
        for position, band in enumerate(GRADUATED_BANDS):
            band_quota = base + (1 if position < extra else 0)
            band_ids = self._selector.select(
                indicator_id,
                band_quota,
                band,
                taken,
                levels=(band,),
                predicate=predicate,
            )
            picked.extend(band_ids)
            taken.update(band_ids)
            unmet += band_quota - len(band_ids)

        if unmet:
            self._logger.debug(
                "selection.band_fallback",
                indicator_id=indicator_id,
                unmet=unmet,
            )
            if warnings is not None:
                warnings.add(
                    WarningCode.DIFFICULTY_BAND_FALLBACK,
                    f"Indicator {indicator_id} filled {unmet} slots outside the graduated bands",
                    indicator_id=indicator_id,
                    unmet=unmet,
                )
            picked.extend(
                self._selector.select(
                    indicator_id,
                    unmet,
                    preferred_difficulty,
                    taken,
                    predicate=predicate,
                    warnings=warnings,
                )
            )
        return picked

    @staticmethod
    def resolve_strategy(strategy: DistributionStrategy | str) -> DistributionStrategy:
        if isinstance(strategy, DistributionStrategy):
            return strategy
        try:
            return DistributionStrategy(str(strategy).upper())
        except ValueError as exc:
            raise InvalidInputError(f"Unknown distribution strategy: {strategy!r}") from exc

    @staticmethod
    def round_robin_quotas(
        indicator_ids: Iterable[str],
        total: int,
        per_indicator: int,
    ) -> list[tuple[str, int]]:
        """Deal the budget one slot at a time, capped per indicator."""
        quotas = [[indicator_id, 0] for indicator_id in indicator_ids]
        remaining = total
        while remaining > 0:
            dealt = False
            for entry in quotas:
                if remaining == 0:
                    break
                if per_indicator > 0 and entry[1] >= per_indicator:
                    continue
                entry[1] += 1
                remaining -= 1
                dealt = True
            if not dealt:
                break
        return [(indicator_id, quota) for indicator_id, quota in quotas]

    @staticmethod
    def allocate_weighted(weights: Mapping[str, float], total: int) -> dict[str, int]:
        """Floor-proportional allocation with a minimum of one per weighted indicator.

        Returned in descending weight order; indicators with weight <= 0 are
        left out.
        """
        if total <= 0 or sum(weights.values()) <= 0:
            return {}
        order = sorted(
            ((key, float(value)) for key, value in weights.items() if value > 0),
            key=lambda item: item[1],
            reverse=True,
        )
        positive_total = sum(value for _, value in order)
        allocation = {key: math.floor(total * value / positive_total) for key, value in order}

        for key, _ in order:
            if allocation[key] > 0:
                continue
            if sum(allocation.values()) >= total:
                donor = max(
                    (other for other, count in allocation.items() if count > 1),
                    key=lambda other: allocation[other],
                    default=None,
                )
                if donor is None:
                    break
                allocation[donor] -= 1
            allocation[key] = 1

        remaining = total - sum(allocation.values())
        position = 0
        while remaining > 0:
            key = order[position % len(order)][0]
            allocation[key] += 1
            remaining -= 1
            position += 1
        return allocation

    def _waterfall(
        self,
        indicator_ids: list[str],
        total: int,
        per_indicator: int,
        preferred_difficulty: DifficultyLevel | None,
        *,
        weights: Mapping[str, float] | None,
        used: set[str],
        predicate: QuestionPredicate | None,
        warnings: SelectionWarnings | None,
    ) -> list[str]:
        if total == 0:
            return []
        # One question per indicator per round until the budget or every pool runs out.
        reserved = set(used)
        pools: list[list[str]] = []
        for indicator_id in indicator_ids:
            pool = self._selector.select(
                indicator_id,
                total,
                preferred_difficulty,
                reserved,
                predicate=predicate,
            )
            if not pool and warnings is not None:
                warnings.add(
                    WarningCode.NO_ACTIVE_QUESTIONS_INDICATOR,
                    f"No eligible questions found for indicator {indicator_id}",
                    indicator_id=indicator_id,
                )
            reserved.update(pool)
            pools.append(pool)

        selected: list[str] = []
        cursors = [0] * len(pools)
        while len(selected) < total:
            progressed = False
            for index, pool in enumerate(pools):
                if len(selected) >= total:
                    break
                cursor = cursors[index]
                while cursor < len(pool) and pool[cursor] in used:
                    cursor += 1
                if cursor < len(pool):
                    selected.append(pool[cursor])
                    used.add(pool[cursor])
                    cursor += 1
                    progressed = True
                cursors[index] = cursor
            if not progressed:
                break

        if len(selected) < total:
            self._logger.debug("selection.waterfall_drained", requested=total, selected=len(selected))
            if warnings is not None:
                warnings.add(
                    WarningCode.INDICATOR_SHORTFALL,
                    f"Indicators supplied {len(selected)} of {total} questions",
                    requested=total,
                    selected=len(selected),
                )
        return selected

    def _priority_first(
        self,
        indicator_ids: list[str],
        total: int,
        per_indicator: int,
        preferred_difficulty: DifficultyLevel | None,
        *,
        weights: Mapping[str, float] | None,
        used: set[str],
        predicate: QuestionPredicate | None,
        warnings: SelectionWarnings | None,
    ) -> list[str]:
        selected: list[str] = []
        for indicator_id in indicator_ids:
            remaining = total - len(selected)
            if remaining <= 0:
                break
            to_select = min(per_indicator, remaining) if per_indicator > 0 else remaining
            picked = self._selector.select(
                indicator_id,
                to_select,
                preferred_difficulty,
                used,
                predicate=predicate,
                warnings=warnings,
            )
            selected.extend(picked)
            used.update(picked)
        return selected

    def _weighted(
        self,
        indicator_ids: list[str],
        total: int,
        per_indicator: int,
        preferred_difficulty: DifficultyLevel | None,
        *,
        weights: Mapping[str, float] | None,
        used: set[str],
        predicate: QuestionPredicate | None,
        warnings: SelectionWarnings | None,
    ) -> list[str]:
        unique_ids = list(dict.fromkeys(indicator_ids))
        if weights is None:
            effective = {indicator_id: 1.0 for indicator_id in unique_ids}
        else:
            effective = {indicator_id: float(weights.get(indicator_id, 0.0)) for indicator_id in unique_ids}

        allocation = self.allocate_weighted(effective, total)
        if not allocation:
            self._logger.warning("selection.weighted_empty", total=total, weights=effective)
            return []

        selected: list[str] = []
        for indicator_id, count in allocation.items():
            if count <= 0:
                continue
            picked = self._selector.select(
                indicator_id,
                count,
                preferred_difficulty,
                used,
                predicate=predicate,
                warnings=warnings,
            )
            selected.extend(picked)
            used.update(picked)
        return selected

    @staticmethod
    def _validate_budget(total: int | None, per_indicator: int | None) -> None:
        if total is None or total < 0:
            raise InvalidInputError(f"total must be a non-negative integer, got {total!r}")
        if per_indicator is None or per_indicator < 0:
            raise InvalidInputError(f"per_indicator must be a non-negative integer, got {per_indicator!r}")

    def record_exposure(self, question_ids: Sequence[str]) -> None:
        if question_ids and self._exposure_tracker is not None:
            self._exposure_tracker.record_exposure(list(question_ids))

    def _finish(
        self,
        selected: list[str],
        *,
        strategy: str,
        total: int,
        indicators: int,
        record: bool,
    ) -> list[str]:
        self._logger.info(
            "selection.plan_completed",
            strategy=strategy,
            requested=total,
            selected=len(selected),
            indicators=indicators,
        )
        if record:
            self.record_exposure(selected)
        return selected
