"""Team-fit classification, balance multiplier and personality compatibility."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping

from ...schemas import TeamProfile
from .config import TeamFitConfig, resolve_threshold

_DEFAULTS = TeamFitConfig()

MIN_MULTIPLIER = 0.8
MAX_MULTIPLIER = 1.2


class TeamFitClass(str, Enum):
    GAP = "GAP"
    DIVERSITY = "DIVERSITY"
    SATURATION = "SATURATION"


@dataclass(slots=True, frozen=True)
class ClassificationCounts:
    """Class counts with derived ratios."""

    gap: int = 0
    diversity: int = 0
    saturation: int = 0

    @classmethod
    def from_classes(cls, classes: Iterable[TeamFitClass]) -> ClassificationCounts:
        counts = {item: 0 for item in TeamFitClass}
        for item in classes:
            counts[item] += 1
        return cls(
            gap=counts[TeamFitClass.GAP],
            diversity=counts[TeamFitClass.DIVERSITY],
            saturation=counts[TeamFitClass.SATURATION],
        )

    @property
    def total(self) -> int:
        return self.gap + self.diversity + self.saturation

    def _ratio(self, count: int) -> float:
        return count / self.total if self.total else 0.0

    @property
    def gap_ratio(self) -> float:
        return self._ratio(self.gap)

    @property
    def diversity_ratio(self) -> float:
        return self._ratio(self.diversity)

    @property
    def saturation_ratio(self) -> float:
        return self._ratio(self.saturation)

    @property
    def balance(self) -> float:
        return self.diversity_ratio - self.saturation_ratio


class TeamFitClassifier:
    """Place a competency in the GAP, DIVERSITY or SATURATION band.

    Lower band edges are inclusive: a ratio equal to a threshold belongs to
    the higher band.
    """

    def __init__(
        self,
        *,
        saturation_threshold: float | None = None,
        diversity_threshold: float | None = None,
    ) -> None:
        self.saturation_threshold = resolve_threshold(
            saturation_threshold,
            _DEFAULTS.saturation_threshold,
            name="saturation_threshold",
        )
        self.diversity_threshold = resolve_threshold(
            diversity_threshold,
            _DEFAULTS.diversity_threshold,
            name="diversity_threshold",
        )

    @classmethod
    def from_config(
        cls,
        config: TeamFitConfig,
        *,
        saturation_override: float | None = None,
    ) -> TeamFitClassifier:
        saturation = config.saturation_threshold
        if saturation_override is not None:
            saturation = resolve_threshold(saturation_override, saturation, name="saturation_override")
        return cls(saturation_threshold=saturation, diversity_threshold=config.diversity_threshold)

    def classify_ratio(self, ratio: float) -> TeamFitClass:
        if ratio >= self.saturation_threshold:
            return TeamFitClass.SATURATION
        if ratio >= self.diversity_threshold:
            return TeamFitClass.DIVERSITY
        return TeamFitClass.GAP

    @staticmethod
    def comparison_ratio(
        competency_id: str,
        candidate_ratio: float,
        team_profile: TeamProfile | None,
    ) -> float:
        """Team saturation for the competency, else the candidate's own ratio."""
        if team_profile is not None and competency_id in team_profile.saturation:
            return team_profile.saturation[competency_id]
        return candidate_ratio

    def classify(
        self,
        competency_id: str,
        candidate_ratio: float,
        team_profile: TeamProfile | None = None,
    ) -> tuple[TeamFitClass, float]:
        ratio = self.comparison_ratio(competency_id, candidate_ratio, team_profile)
        return self.classify_ratio(ratio), ratio


def sigmoid(value: float) -> float:
    if value >= 0:
        return 1.0 / (1.0 + math.exp(-value))
    exp_value = math.exp(value)
    return exp_value / (1.0 + exp_value)


class BalanceMultiplierCalculator:
    """Sigmoid blend between penalty and bonus driven by diversity balance."""

    def __init__(self, config: TeamFitConfig | None = None) -> None:
        self._config = config or TeamFitConfig()

    def base_multiplier(self, balance: float) -> float:
        cfg = self._config
        return cfg.saturation_penalty + (cfg.diversity_bonus - cfg.saturation_penalty) * sigmoid(
            cfg.sigmoid_steepness * balance
        )

    def multiplier(self, counts: ClassificationCounts, compatibility: float | None = None) -> float:
        cfg = self._config
        value = self.base_multiplier(counts.balance)
        if compatibility is not None:
            value += (compatibility - 0.5) * cfg.personality_weight
        return max(MIN_MULTIPLIER, min(MAX_MULTIPLIER, value))

    @staticmethod
    def adjust(raw_percentage: float, multiplier: float) -> float:
        return max(0.0, min(100.0, raw_percentage * multiplier))


def big_five_profile(
    trait_scores: Mapping[str, tuple[float, int]],
) -> dict[str, float]:
    """Per-trait mean of normalized scores on the 0-100 scale.

    ``trait_scores`` maps a trait to ``(sum of normalized scores, count)``.
    """
    return {
        trait: 100.0 * total / count
        for trait, (total, count) in trait_scores.items()
        if count > 0
    }


def personality_compatibility(
    candidate: Mapping[str, float],
    team: Mapping[str, float],
) -> float | None:
    """Similarity in [0, 1] from normalized Euclidean distance over shared traits.

    Returns None when the profiles share no trait.
    """
    shared = [trait for trait in candidate if trait in team]
    if not shared:
        return None
    squared = sum(((candidate[trait] - team[trait]) / 100.0) ** 2 for trait in shared)
    distance = math.sqrt(squared) / math.sqrt(len(shared))
    return max(0.0, min(1.0, 1.0 - distance))
