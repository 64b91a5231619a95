from __future__ import annotations

import random
from collections import Counter

import pytest

from teamfit.catalog import QuestionBank
from teamfit.core.errors import InvalidInputError
from teamfit.core.selection import (
    GRADUATED_BANDS,
    CompetencySelector,
    DifficultyRanker,
    DistributionPlanner,
    EligibilityFilter,
    IndicatorSelector,
    SelectionWarnings,
    WarningCode,
)
from teamfit.schemas import BehavioralIndicator, Competency, Question


def per_indicator(selected: list[str]) -> Counter:
    return Counter(question_id.split("-")[0] for question_id in selected)


def test_select_for_competency_uses_its_indicators(build_bank, build_selection):
    selector = build_selection(build_bank({"C1": {"I1": 3, "I2": 3}, "C2": {"I3": 3}}))["competency"]

    selected = selector.select_for_competency("C1", 4, 2)

    assert per_indicator(selected) == {"I1": 2, "I2": 2}


def test_unknown_competency_warns(build_bank, build_selection):
    selector = build_selection(build_bank({"C1": {"I1": 3}}))["competency"]
    warnings = SelectionWarnings()

    assert selector.select_for_competency("missing", 4, 2, warnings=warnings) == []
    assert selector.select_for_competencies(["missing"], 2, warnings=warnings) == []
    assert warnings.codes() == [
        WarningCode.NO_ACTIVE_INDICATORS_COMPETENCY,
        WarningCode.NO_ACTIVE_INDICATORS_COMPETENCIES,
    ]


def test_select_for_competencies_covers_every_indicator(build_bank, build_selection):
    selector = build_selection(build_bank({"C1": {"I1": 3}, "C2": {"I2": 3}}))["competency"]

    selected = selector.select_for_competencies(["C1", "C2", "C1"], 2)

    assert per_indicator(selected) == {"I1": 2, "I2": 2}


def test_select_for_competencies_input_checks(build_bank, build_selection):
    selector = build_selection(build_bank({"C1": {"I1": 3}}))["competency"]

    assert selector.select_for_competencies([], 2) == []
    assert selector.select_for_competencies(None, 2) == []
    with pytest.raises(InvalidInputError):
        selector.select_for_competencies(["C1"], -1)


def test_inactive_indicators_are_skipped(build_selection):
    bank = QuestionBank(
        competencies=[Competency(competency_id="C1")],
        indicators=[
            BehavioralIndicator(indicator_id="I1", competency_id="C1"),
            BehavioralIndicator(indicator_id="I2", competency_id="C1", active=False),
        ],
        questions=[
            Question(question_id="I1-Q1", indicator_id="I1"),
            Question(question_id="I2-Q1", indicator_id="I2"),
        ],
    )
    selector = build_selection(bank)["competency"]

    assert selector.select_for_competencies(["C1"], 2) == ["I1-Q1"]


def test_context_neutral_selection_filters_tags(build_selection):
    bank = QuestionBank(
        competencies=[Competency(competency_id="C1")],
        indicators=[BehavioralIndicator(indicator_id="I1", competency_id="C1")],
        questions=[
            Question(question_id="I1-Q1", indicator_id="I1", tags=["GENERAL"]),
            Question(question_id="I1-Q2", indicator_id="I1", tags=["SALES"]),
            Question(question_id="I1-Q3", indicator_id="I1"),
        ],
    )
    selector = build_selection(bank)["competency"]

    selected = selector.select_for_competencies(["C1"], 2, context_neutral_only=True)

    assert sorted(selected) == ["I1-Q1", "I1-Q3"]


def test_context_neutral_selection_is_graduated(build_bank, build_selection):
    bank = build_bank({"C1": {"I1": 6}}, difficulties=GRADUATED_BANDS)
    selector = build_selection(bank)["competency"]

    selected = selector.select_for_competencies(["C1"], 3, context_neutral_only=True)

    assert {bank.questions[question_id].difficulty for question_id in selected} == set(GRADUATED_BANDS)


def test_weighted_competency_selection(build_bank, build_selection):
    selector = build_selection(build_bank({"C1": {"I1": 10}, "C2": {"I2": 10}}))["competency"]

    selected = selector.select_for_competencies_weighted(["C1", "C2"], {"C1": 3.0, "C2": 1.0}, 2)

    assert per_indicator(selected) == {"I1": 3, "I2": 1}


def test_shuffle_keeps_the_same_questions(build_bank, build_selection):
    selector = build_selection(build_bank({"C1": {"I1": 3}}))["competency"]

    selected = selector.select_for_competencies(["C1"], 3, shuffle=True)

    assert sorted(selected) == ["I1-Q1", "I1-Q2", "I1-Q3"]


def test_select_for_competency_fills_budget_beyond_quota(build_bank, build_selection):
    selector = build_selection(build_bank({"C1": {"I1": 10, "I2": 10}}))["competency"]

    selected = selector.select_for_competency("C1", 8, 2)

    assert len(selected) == 8
    assert per_indicator(selected) == {"I1": 4, "I2": 4}


class RecordingTracker:
    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    def record_exposure(self, question_ids):
        self.calls.append(list(question_ids))


@pytest.mark.parametrize("context_neutral_only", [False, True])
def test_exposure_is_recorded_in_shuffled_order(build_bank, context_neutral_only):
    bank = build_bank({"C1": {"I1": 6, "I2": 6}}, difficulties=GRADUATED_BANDS)
    tracker = RecordingTracker()
    planner = DistributionPlanner(
        selector=IndicatorSelector(
            catalog=bank,
            eligibility=EligibilityFilter(bank),
            ranker=DifficultyRanker(rng=random.Random(7)),
        ),
        exposure_tracker=tracker,
    )
    selector = CompetencySelector(indicators=bank, planner=planner)

    selected = selector.select_for_competencies(
        ["C1"], 3, shuffle=True, context_neutral_only=context_neutral_only
    )

    assert tracker.calls == [selected]


def test_weighted_selection_records_exposure_once(build_bank, build_selection):
    parts = build_selection(build_bank({"C1": {"I1": 4}, "C2": {"I2": 4}}))

    selected = parts["competency"].select_for_competencies_weighted(["C1", "C2"], None, 2, shuffle=True)

    assert parts["exposure"].counts == {question_id: 1 for question_id in selected}
