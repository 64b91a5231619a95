"""Scoring tunables and their read-only provider."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any

import structlog

_logger = structlog.get_logger(__name__)


@dataclass
class TeamFitConfig:
    """Classification, multiplier and pass-decision thresholds."""

    saturation_threshold: float = 0.75
    diversity_threshold: float = 0.5
    saturation_penalty: float = 0.9
    diversity_bonus: float = 1.1
    sigmoid_steepness: float = 10.0
    personality_weight: float = 0.1
    pass_threshold: float = 0.6
    min_diversity_ratio: float = 0.3
    small_team_threshold: int = 5
    small_team_adjustment: float = 0.1
    severe_gap_ratio: float = 0.5
    severe_gap_adjustment: float = 0.1
    min_pass_threshold: float = 0.3


@dataclass
class WeightConfig:
    """Competency weight boosts for standard-taxonomy mappings."""

    esco_boost: float = 1.15
    big_five_boost: float = 1.1
    max_weight_multiplier: float = 3.0


@dataclass
class ScoringConfig:
    """Snapshot handed to the scoring engine for one call."""

    team_fit: TeamFitConfig = field(default_factory=TeamFitConfig)
    weights: WeightConfig = field(default_factory=WeightConfig)

    @classmethod
    def from_settings(cls, settings: dict[str, Any] | None = None) -> ScoringConfig:
        settings = settings or {}
        return cls(
            team_fit=TeamFitConfig(**(settings.get("team_fit") or {})),
            weights=WeightConfig(**(settings.get("weights") or {})),
        )


class StaticScoringConfigProvider:
    """Serve the same configuration on every call."""

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self._config = config or ScoringConfig()

    def snapshot(self) -> ScoringConfig:
        return replace(
            self._config,
            team_fit=replace(self._config.team_fit),
            weights=replace(self._config.weights),
        )


def resolve_threshold(value: Any, default: float, *, name: str) -> float:
    """Accept a threshold in (0, 1], otherwise fall back to ``default``."""
    try:
        candidate = float(value)
    except (TypeError, ValueError):
        candidate = math.nan
    if math.isnan(candidate) or candidate <= 0.0 or candidate > 1.0:
        if value is not None:
            _logger.warning("scoring.threshold_fallback", threshold=name, value=value, default=default)
        return default
    return candidate
