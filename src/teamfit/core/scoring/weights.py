"""Competency weights and the weighted overall percentage."""

from __future__ import annotations

from typing import Iterable

from ...schemas import Competency
from .config import WeightConfig


def competency_weight(
    competency: Competency | None,
    config: WeightConfig,
    *,
    role_weight: float = 1.0,
) -> float:
    """ESCO boost, then Big Five boost on top of it, then the role weight.

    O*NET codes carry no boost. The result is capped at
    ``config.max_weight_multiplier``.
    """
    weight = 1.0
    if competency is not None and competency.has_esco:
        weight *= config.esco_boost
        if competency.big_five_trait is not None:
            weight *= config.big_five_boost
    weight *= role_weight
    return min(weight, config.max_weight_multiplier)


def weighted_percentage(entries: Iterable[tuple[float, float]]) -> float:
    """Weighted mean of ``(percentage, weight)`` pairs; 0.0 when empty."""
    numerator = 0.0
    denominator = 0.0
    for percentage, weight in entries:
        numerator += percentage * weight
        denominator += weight
    if denominator <= 0.0:
        return 0.0
    return numerator / denominator
