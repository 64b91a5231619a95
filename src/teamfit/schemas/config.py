"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.selection.distribution import DistributionStrategy
from .catalog import DifficultyLevel


class SelectionSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    per_indicator: int = Field(default=3, ge=0)
    strategy: DistributionStrategy = DistributionStrategy.WATERFALL
    preferred_difficulty: DifficultyLevel | None = None
    context_neutral_only: bool = False
    shuffle: bool = False


class ScoringSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    saturation_threshold: float | None = None
    diversity_threshold: float | None = None
    saturation_penalty: float | None = None
    diversity_bonus: float | None = None
    sigmoid_steepness: float | None = None
    personality_weight: float | None = None
    pass_threshold: float | None = Field(default=None, ge=0.0, le=1.0)
    min_diversity_ratio: float | None = Field(default=None, ge=0.0, le=1.0)
    small_team_threshold: int | None = Field(default=None, ge=0)
    small_team_adjustment: float | None = None
    severe_gap_ratio: float | None = None
    severe_gap_adjustment: float | None = None
    min_pass_threshold: float | None = Field(default=None, ge=0.0, le=1.0)


class WeightsSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    esco_boost: float | None = Field(default=None, gt=0.0)
    big_five_boost: float | None = Field(default=None, gt=0.0)
    max_weight_multiplier: float | None = Field(default=None, gt=0.0)


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    selection: SelectionSection = Field(default_factory=SelectionSection)
    scoring: ScoringSection = Field(default_factory=ScoringSection)
    weights: WeightsSection = Field(default_factory=WeightsSection)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {"selection": self.selection.model_dump()}
        team_fit = self.scoring.model_dump(exclude_none=True)
        if team_fit:
            settings["team_fit"] = team_fit
        weights = self.weights.model_dump(exclude_none=True)
        if weights:
            settings["weights"] = weights
        return settings


def load_config(raw: Any) -> AppConfig:
    """Validate a parsed YAML document; ``None`` means all defaults."""
    if raw is None:
        return AppConfig()
    return AppConfig.model_validate(raw)
