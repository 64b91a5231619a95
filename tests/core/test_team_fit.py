from __future__ import annotations

import math

import pytest

from teamfit.core.scoring import (
    MAX_MULTIPLIER,
    MIN_MULTIPLIER,
    BalanceMultiplierCalculator,
    ClassificationCounts,
    TeamFitClass,
    TeamFitClassifier,
    TeamFitConfig,
    big_five_profile,
    personality_compatibility,
)
from teamfit.schemas import TeamProfile


@pytest.mark.parametrize(
    ("ratio", "expected"),
    [
        (0.75, TeamFitClass.SATURATION),
        (0.749, TeamFitClass.DIVERSITY),
        (0.5, TeamFitClass.DIVERSITY),
        (0.49, TeamFitClass.GAP),
        (0.0, TeamFitClass.GAP),
    ],
)
def test_classification_band_edges(ratio, expected):
    assert TeamFitClassifier().classify_ratio(ratio) is expected


@pytest.mark.parametrize("value", [0.0, -0.2, 1.5, math.nan, "high"])
def test_invalid_thresholds_fall_back_to_defaults(value):
    classifier = TeamFitClassifier(saturation_threshold=value, diversity_threshold=value)

    assert classifier.saturation_threshold == 0.75
    assert classifier.diversity_threshold == 0.5


def test_saturation_override_from_config():
    config = TeamFitConfig(saturation_threshold=0.8)

    assert TeamFitClassifier.from_config(config).saturation_threshold == 0.8
    assert TeamFitClassifier.from_config(config, saturation_override=0.9).saturation_threshold == 0.9
    assert TeamFitClassifier.from_config(config, saturation_override=2.0).saturation_threshold == 0.8


def test_team_saturation_replaces_candidate_ratio():
    profile = TeamProfile(team_id="T1", saturation={"C1": 0.8})
    classifier = TeamFitClassifier()

    assert classifier.classify("C1", 0.2, profile) == (TeamFitClass.SATURATION, 0.8)
    assert classifier.classify("C2", 0.2, profile) == (TeamFitClass.GAP, 0.2)
    assert classifier.classify("C1", 0.6) == (TeamFitClass.DIVERSITY, 0.6)


def test_classification_counts_ratios():
    counts = ClassificationCounts.from_classes(
        [TeamFitClass.DIVERSITY, TeamFitClass.DIVERSITY, TeamFitClass.SATURATION, TeamFitClass.GAP]
    )

    assert counts.total == 4
    assert counts.diversity_ratio == pytest.approx(0.5)
    assert counts.gap_ratio == pytest.approx(0.25)
    assert counts.balance == pytest.approx(0.25)
    assert ClassificationCounts().balance == 0.0


def test_neutral_balance_gives_unit_multiplier():
    calculator = BalanceMultiplierCalculator()
    counts = ClassificationCounts(diversity=2, saturation=2)

    assert calculator.multiplier(counts) == pytest.approx(1.0)


def test_multiplier_stays_within_bounds():
    calculator = BalanceMultiplierCalculator(TeamFitConfig(personality_weight=1.0))

    high = calculator.multiplier(ClassificationCounts(diversity=3), compatibility=1.0)
    low = calculator.multiplier(ClassificationCounts(saturation=3), compatibility=0.0)

    assert high == pytest.approx(1.2)
    assert low == pytest.approx(0.8)


def test_personality_compatibility_shifts_multiplier():
    calculator = BalanceMultiplierCalculator()
    counts = ClassificationCounts(diversity=1, saturation=1)

    assert calculator.multiplier(counts, compatibility=1.0) == pytest.approx(1.05)
    assert calculator.multiplier(counts, compatibility=0.5) == pytest.approx(1.0)


def test_adjust_clamps_to_percentage_range():
    assert BalanceMultiplierCalculator.adjust(95.0, 1.2) == 100.0
    assert BalanceMultiplierCalculator.adjust(50.0, 0.9) == pytest.approx(45.0)


def test_personality_compatibility_distance():
    assert personality_compatibility({"OPENNESS": 60.0}, {"OPENNESS": 60.0}) == pytest.approx(1.0)
    assert personality_compatibility({"OPENNESS": 100.0}, {"OPENNESS": 0.0}) == pytest.approx(0.0)
    assert personality_compatibility(
        {"OPENNESS": 100.0, "EXTRAVERSION": 0.0},
        {"OPENNESS": 50.0, "EXTRAVERSION": 50.0},
    ) == pytest.approx(0.5)
    assert personality_compatibility({"OPENNESS": 50.0}, {"AGREEABLENESS": 50.0}) is None


def test_big_five_profile_scales_to_hundred():
    assert big_five_profile({"OPENNESS": (3.0, 4), "EMPTY": (0.0, 0)}) == {"OPENNESS": 75.0}


@pytest.mark.parametrize(
    ("config", "counts", "compatibility"),
    [
        (TeamFitConfig(diversity_bonus=1.8), ClassificationCounts(diversity=4), None),
        (TeamFitConfig(saturation_penalty=0.2), ClassificationCounts(saturation=4), None),
        (TeamFitConfig(personality_weight=5.0), ClassificationCounts(diversity=1, saturation=1), 1.0),
    ],
)
def test_multiplier_bounds_ignore_tunables(config, counts, compatibility):
    value = BalanceMultiplierCalculator(config).multiplier(counts, compatibility)

    assert MIN_MULTIPLIER <= value <= MAX_MULTIPLIER


def test_multiplier_bounds_are_not_configurable():
    with pytest.raises(TypeError):
        TeamFitConfig(max_multiplier=2.0)
