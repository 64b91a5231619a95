"""Adaptive pass threshold and pass outcome."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .config import TeamFitConfig
from .team_fit import ClassificationCounts


@dataclass(slots=True, frozen=True)
class PassDecision:
    passed: bool
    threshold: float
    small_team_adjusted: bool
    severe_gap_adjusted: bool
    reasons: tuple[str, ...] = ()


class PassDecisionEngine:
    """Lower the bar for small or gap-heavy teams, never below the floor."""

    def __init__(self, config: TeamFitConfig | None = None) -> None:
        self._config = config or TeamFitConfig()

    def threshold(
        self,
        counts: ClassificationCounts,
        member_count: int | None,
    ) -> tuple[float, bool, bool]:
        cfg = self._config
        value = cfg.pass_threshold
        small_team = member_count is not None and member_count < cfg.small_team_threshold
        if small_team:
            value -= cfg.small_team_adjustment
        severe_gap = counts.gap_ratio > cfg.severe_gap_ratio
        if severe_gap:
            value -= cfg.severe_gap_adjustment
        return max(cfg.min_pass_threshold, value), small_team, severe_gap

    def decide(
        self,
        adjusted_percentage: float,
        counts: ClassificationCounts,
        member_count: int | None = None,
    ) -> PassDecision:
        threshold, small_team, severe_gap = self.threshold(counts, member_count)

        reasons: list[str] = []
        if counts.total == 0:
            reasons.append("no_scored_competencies")
        ratio = adjusted_percentage / 100.0
        if ratio < threshold and not math.isclose(ratio, threshold):
            reasons.append("below_threshold")
        if counts.diversity_ratio < self._config.min_diversity_ratio:
            reasons.append("insufficient_diversity")

        return PassDecision(
            passed=not reasons,
            threshold=threshold,
            small_team_adjusted=small_team,
            severe_gap_adjusted=severe_gap,
            reasons=tuple(reasons),
        )
