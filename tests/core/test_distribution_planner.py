from __future__ import annotations

from collections import Counter

import pytest

from teamfit.core.errors import InvalidInputError
from teamfit.core.selection import DistributionPlanner, DistributionStrategy, SelectionWarnings, WarningCode


def per_indicator(selected: list[str]) -> Counter:
    return Counter(question_id.split("-")[0] for question_id in selected)


def test_waterfall_balances_indicators(build_bank, build_selection):
    planner = build_selection(build_bank({"C1": {"I1": 5, "I2": 5, "I3": 5}}))["planner"]

    selected = planner.plan(["I1", "I2", "I3"], 7, 3)

    counts = per_indicator(selected)
    assert len(selected) == 7
    assert len(set(selected)) == 7
    assert max(counts.values()) - min(counts.values()) <= 1


def test_waterfall_without_cap_fills_budget(build_bank, build_selection):
    planner = build_selection(build_bank({"C1": {"I1": 3, "I2": 3}}))["planner"]

    selected = planner.plan(["I1", "I2"], 5, 0)

    assert len(selected) == 5


def test_waterfall_returns_partial_when_pools_are_shallow(build_bank, build_selection):
    planner = build_selection(build_bank({"C1": {"I1": 1, "I2": 5}}))["planner"]

    selected = planner.plan(["I1", "I2"], 6, 3)

    assert per_indicator(selected) == {"I1": 1, "I2": 5}


def test_waterfall_keeps_drawing_past_the_quota(build_bank, build_selection):
    planner = build_selection(build_bank({"C1": {"I1": 10, "I2": 10}}))["planner"]

    selected = planner.plan(["I1", "I2"], 10, 2, "WATERFALL")

    assert len(selected) == 10
    assert len(set(selected)) == 10
    assert per_indicator(selected) == {"I1": 5, "I2": 5}


def test_waterfall_warns_when_pools_run_dry(build_bank, build_selection):
    planner = build_selection(build_bank({"C1": {"I1": 2, "I2": 1}}))["planner"]
    warnings = SelectionWarnings()

    selected = planner.plan(["I1", "I2"], 5, 1, warnings=warnings)

    assert len(selected) == 3
    assert warnings.codes() == [WarningCode.INDICATOR_SHORTFALL]


def test_priority_first_fills_in_order(build_bank, build_selection):
    planner = build_selection(build_bank({"C1": {"I1": 5, "I2": 5, "I3": 5}}))["planner"]

    selected = planner.plan(["I1", "I2", "I3"], 5, 3, DistributionStrategy.PRIORITY_FIRST)

    assert per_indicator(selected) == {"I1": 3, "I2": 2}


def test_weighted_follows_weights(build_bank, build_selection):
    planner = build_selection(build_bank({"C1": {"I1": 10, "I2": 10}}))["planner"]

    selected = planner.plan(
        ["I1", "I2"],
        4,
        0,
        "weighted",
        weights={"I1": 3.0, "I2": 1.0},
    )

    assert per_indicator(selected) == {"I1": 3, "I2": 1}


def test_weighted_defaults_to_equal_weights(build_bank, build_selection):
    planner = build_selection(build_bank({"C1": {"I1": 10, "I2": 10}}))["planner"]

    selected = planner.plan(["I1", "I2"], 4, 0, DistributionStrategy.WEIGHTED)

    assert per_indicator(selected) == {"I1": 2, "I2": 2}


def test_weighted_with_zero_total_weight_is_empty(build_bank, build_selection):
    parts = build_selection(build_bank({"C1": {"I1": 3}}))

    selected = parts["planner"].plan(["I1"], 3, 0, DistributionStrategy.WEIGHTED, weights={"I1": 0.0})

    assert selected == []
    assert parts["exposure"].counts == {}


def test_allocate_weighted_guarantees_minimum_of_one():
    allocation = DistributionPlanner.allocate_weighted({"A": 10.0, "B": 0.1, "C": 0.1}, 3)

    assert allocation == {"A": 1, "B": 1, "C": 1}


def test_allocate_weighted_distributes_remainder_from_heaviest():
    allocation = DistributionPlanner.allocate_weighted({"A": 1.0, "B": 1.0, "C": 2.0}, 5)

    assert list(allocation) == ["C", "A", "B"]
    assert allocation == {"C": 3, "A": 1, "B": 1}
    assert sum(allocation.values()) == 5


def test_plan_never_duplicates_with_repeated_indicators(build_bank, build_selection):
    planner = build_selection(build_bank({"C1": {"I1": 6}}))["planner"]

    selected = planner.plan(["I1", "I1"], 4, 2)

    assert len(selected) == 4
    assert len(set(selected)) == 4


def test_plan_respects_exclusions(build_bank, build_selection):
    planner = build_selection(build_bank({"C1": {"I1": 3}}))["planner"]

    selected = planner.plan(["I1"], 3, 3, exclude={"I1-Q1"})

    assert sorted(selected) == ["I1-Q2", "I1-Q3"]


@pytest.mark.parametrize(
    ("total", "quota", "strategy"),
    [(-1, 2, "WATERFALL"), (None, 2, "WATERFALL"), (3, -1, "WATERFALL"), (3, 1, "RANDOM")],
)
def test_plan_rejects_invalid_input(build_bank, build_selection, total, quota, strategy):
    planner = build_selection(build_bank({"C1": {"I1": 3}}))["planner"]

    with pytest.raises(InvalidInputError):
        planner.plan(["I1"], total, quota, strategy)


def test_plan_without_indicators_is_empty(build_bank, build_selection):
    planner = build_selection(build_bank({"C1": {"I1": 3}}))["planner"]

    assert planner.plan([], 3, 1) == []
    assert planner.plan(None, 3, 1) == []


def test_plan_records_exposure_once_per_plan(build_bank, build_selection):
    parts = build_selection(build_bank({"C1": {"I1": 3, "I2": 3}}))

    selected = parts["planner"].plan(["I1", "I2"], 4, 2)

    assert parts["exposure"].counts == {question_id: 1 for question_id in selected}
