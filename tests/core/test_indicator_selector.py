from __future__ import annotations

import pytest

from teamfit.core.errors import InvalidInputError
from teamfit.core.selection import SelectionWarnings, WarningCode
from teamfit.schemas import DifficultyLevel


def test_select_returns_unique_ids_up_to_max(build_bank, build_selection):
    selector = build_selection(build_bank({"C1": {"I1": 5}}))["indicator"]

    selected = selector.select("I1", 3)

    assert len(selected) == 3
    assert len(set(selected)) == 3
    assert all(question_id.startswith("I1-") for question_id in selected)


def test_select_zero_and_invalid_counts(build_bank, build_selection):
    selector = build_selection(build_bank({"C1": {"I1": 5}}))["indicator"]

    assert selector.select("I1", 0) == []
    with pytest.raises(InvalidInputError):
        selector.select("I1", -1)
    with pytest.raises(InvalidInputError):
        selector.select("I1", None)


def test_select_honours_exclusions_and_retirement(build_bank, build_selection):
    bank = build_bank({"C1": {"I1": 5}}, retired_question_ids=["I1-Q2"])
    selector = build_selection(bank)["indicator"]

    selected = selector.select("I1", 5, exclude={"I1-Q1"})

    assert sorted(selected) == ["I1-Q3", "I1-Q4", "I1-Q5"]


def test_select_prefers_closest_difficulty(build_bank, build_selection):
    selector = build_selection(build_bank({"C1": {"I1": 5}}))["indicator"]

    assert selector.select("I1", 1, DifficultyLevel.ADVANCED) == ["I1-Q3"]


def test_select_reports_shortfall_and_empty_pool(build_bank, build_selection):
    selector = build_selection(build_bank({"C1": {"I1": 2}}))["indicator"]
    warnings = SelectionWarnings()

    partial = selector.select("I1", 4, warnings=warnings)
    missing = selector.select("unknown", 2, warnings=warnings)

    assert len(partial) == 2
    assert missing == []
    assert warnings.codes() == [
        WarningCode.INDICATOR_SHORTFALL,
        WarningCode.NO_ACTIVE_QUESTIONS_INDICATOR,
    ]


def test_band_restricted_select_stays_quiet(build_bank, build_selection):
    selector = build_selection(build_bank({"C1": {"I1": 5}}))["indicator"]
    warnings = SelectionWarnings()

    selected = selector.select("I1", 3, levels=(DifficultyLevel.INTERMEDIATE,), warnings=warnings)

    assert selected == ["I1-Q2"]
    assert len(warnings) == 0


def test_eligible_counts(build_bank, build_selection):
    bank = build_bank({"C1": {"I1": 4, "I2": 3}}, retired_question_ids=["I2-Q1"])
    selector = build_selection(bank)["indicator"]

    assert selector.eligible_count("I1") == 4
    assert selector.eligible_count("I2") == 2
    assert selector.eligible_count_for_competency("C1", bank) == 6
    assert selector.eligible_count_for_competency("missing", bank) == 0


def test_direct_selection_does_not_record_exposure(build_bank, build_selection):
    parts = build_selection(build_bank({"C1": {"I1": 3}}))

    parts["indicator"].select("I1", 2)

    assert parts["exposure"].counts == {}
