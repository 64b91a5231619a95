"""Question selection: filters, ranking and budget distribution."""

from __future__ import annotations

from .competency import CompetencySelector
from .diagnostics import SelectionWarning, SelectionWarnings, WarningCode
from .distribution import GRADUATED_BANDS, DistributionPlanner, DistributionStrategy
from .filters import ContextNeutralityFilter, EligibilityFilter
from .indicator import IndicatorSelector
from .ranking import DifficultyRanker, session_rng

__all__ = [
    "GRADUATED_BANDS",
    "CompetencySelector",
    "ContextNeutralityFilter",
    "DifficultyRanker",
    "DistributionPlanner",
    "DistributionStrategy",
    "EligibilityFilter",
    "IndicatorSelector",
    "SelectionWarning",
    "SelectionWarnings",
    "WarningCode",
    "session_rng",
]
