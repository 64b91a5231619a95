"""Core selection and scoring engine components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .errors import InvalidInputError
from .interfaces import (
    EligibilityOracle,
    ExposureTracker,
    IndicatorCatalog,
    QuestionCatalog,
    ScoringConfigProvider,
    TeamProfileProvider,
)
from .scoring import (
    ScoringConfig,
    ScoringResult,
    StaticScoringConfigProvider,
    TeamFitClass,
    TeamFitScoringEngine,
)
from .selection import (
    CompetencySelector,
    ContextNeutralityFilter,
    DifficultyRanker,
    DistributionPlanner,
    DistributionStrategy,
    EligibilityFilter,
    IndicatorSelector,
    SelectionWarnings,
    WarningCode,
    session_rng,
)

__all__ = [
    "CompetencySelector",
    "ContextNeutralityFilter",
    "DifficultyRanker",
    "DistributionPlanner",
    "DistributionStrategy",
    "EligibilityFilter",
    "EligibilityOracle",
    "ExposureTracker",
    "IndicatorCatalog",
    "IndicatorSelector",
    "InvalidInputError",
    "QuestionCatalog",
    "ScoringConfig",
    "ScoringConfigProvider",
    "ScoringResult",
    "SelectionWarnings",
    "StaticScoringConfigProvider",
    "TeamFitClass",
    "TeamFitScoringEngine",
    "TeamProfileProvider",
    "WarningCode",
    "session_rng",
]
