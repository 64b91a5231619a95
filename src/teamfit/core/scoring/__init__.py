"""Answer normalization, aggregation and team-fit scoring."""

from __future__ import annotations

from .aggregation import CompetencyAggregation, CompetencyAggregator, IndicatorAggregation
from .config import (
    ScoringConfig,
    StaticScoringConfigProvider,
    TeamFitConfig,
    WeightConfig,
    resolve_threshold,
)
from .engine import (
    CompetencyScore,
    IndicatorScore,
    ScoringResult,
    TeamFitMetrics,
    TeamFitScoringEngine,
)
from .normalizer import ScoreNormalizer
from .pass_decision import PassDecision, PassDecisionEngine
from .team_fit import (
    MAX_MULTIPLIER,
    MIN_MULTIPLIER,
    BalanceMultiplierCalculator,
    ClassificationCounts,
    TeamFitClass,
    TeamFitClassifier,
    big_five_profile,
    personality_compatibility,
)
from .weights import competency_weight, weighted_percentage

__all__ = [
    "MAX_MULTIPLIER",
    "MIN_MULTIPLIER",
    "BalanceMultiplierCalculator",
    "ClassificationCounts",
    "CompetencyAggregation",
    "CompetencyAggregator",
    "CompetencyScore",
    "IndicatorAggregation",
    "IndicatorScore",
    "PassDecision",
    "PassDecisionEngine",
    "ScoreNormalizer",
    "ScoringConfig",
    "ScoringResult",
    "StaticScoringConfigProvider",
    "TeamFitClass",
    "TeamFitClassifier",
    "TeamFitConfig",
    "TeamFitMetrics",
    "TeamFitScoringEngine",
    "WeightConfig",
    "big_five_profile",
    "competency_weight",
    "personality_compatibility",
    "resolve_threshold",
    "weighted_percentage",
]
