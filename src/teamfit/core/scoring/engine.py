"""Team-fit scoring orchestration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

import structlog

from ...schemas import Answer, BehavioralIndicator, Competency, Question, TeamProfile
from ..errors import InvalidInputError
from ..interfaces import ScoringConfigProvider, TeamProfileProvider
from .aggregation import CompetencyAggregation, CompetencyAggregator
from .config import StaticScoringConfigProvider
from .pass_decision import PassDecisionEngine
from .team_fit import (
    BalanceMultiplierCalculator,
    ClassificationCounts,
    TeamFitClass,
    TeamFitClassifier,
    big_five_profile,
    personality_compatibility,
)
from .weights import competency_weight, weighted_percentage


@dataclass(slots=True, frozen=True)
class IndicatorScore:
    """Indicator-level breakdown inside a competency score."""

    indicator_id: str
    title: str
    weight: float
    score: float
    percentage: float
    questions_answered: int


@dataclass(slots=True, frozen=True)
class CompetencyScore:
    """Per-competency result with its team-fit classification."""

    competency_id: str
    name: str
    score: float
    max_score: float
    percentage: float
    questions_answered: int
    weight: float
    classification: TeamFitClass
    comparison_ratio: float
    onet_code: str | None
    esco_uri: str | None
    big_five: str | None
    indicator_scores: tuple[IndicatorScore, ...] = ()


@dataclass(slots=True, frozen=True)
class TeamFitMetrics:
    """Diversity/saturation counts, ratios and the applied multiplier."""

    diversity_count: int
    saturation_count: int
    gap_count: int
    diversity_ratio: float
    saturation_ratio: float
    gap_ratio: float
    balance: float
    multiplier: float
    personality_compatibility: float | None
    saturation_threshold: float
    diversity_threshold: float
    team_profile_used: bool


@dataclass(slots=True, frozen=True)
class ScoringResult:
    """Complete scoring payload for downstream consumers."""

    overall_score: float
    overall_percentage: float
    raw_percentage: float
    passed: bool
    pass_threshold: float
    competency_scores: tuple[CompetencyScore, ...]
    team_fit: TeamFitMetrics
    big_five_profile: dict[str, float] | None
    team_id: str | None = None
    fail_reasons: tuple[str, ...] = ()


class TeamFitScoringEngine:
    """Turn a session's answers into a team-fit score and pass decision."""

    def __init__(
        self,
        *,
        config_provider: ScoringConfigProvider | None = None,
        team_profiles: TeamProfileProvider | None = None,
        aggregator: CompetencyAggregator | None = None,
    ) -> None:
        self._config_provider = config_provider or StaticScoringConfigProvider()
        self._team_profiles = team_profiles
        self._aggregator = aggregator or CompetencyAggregator()
        self._logger = structlog.get_logger(__name__)

    def score(
        self,
        answers: Iterable[Answer],
        *,
        questions: Mapping[str, Question],
        indicators: Mapping[str, BehavioralIndicator],
        competencies: Mapping[str, Competency],
        team_id: str | None = None,
        team_profile: TeamProfile | None = None,
        saturation_threshold: float | None = None,
        role_weights: Mapping[str, float] | None = None,
    ) -> ScoringResult:
        config = self._config_provider.snapshot()
        role_weights = self._validate_role_weights(role_weights)
        profile = self._resolve_profile(team_id, team_profile)

        aggregations = self._aggregator.aggregate(answers, questions, indicators)
        classifier = TeamFitClassifier.from_config(config.team_fit, saturation_override=saturation_threshold)

        scores: list[CompetencyScore] = []
        trait_scores: dict[str, tuple[float, int]] = {}
        for competency_id, aggregation in aggregations.items():
            competency = competencies.get(competency_id)
            weight = competency_weight(
                competency,
                config.weights,
                role_weight=role_weights.get(competency_id, 1.0),
            )
            classification, ratio = classifier.classify(competency_id, aggregation.ratio, profile)
            scores.append(self._competency_score(aggregation, competency, indicators, weight, classification, ratio))

            trait = competency.big_five_trait if competency is not None else None
            if trait is not None:
                total, count = trait_scores.get(trait, (0.0, 0))
                trait_scores[trait] = (total + aggregation.total_score, count + aggregation.question_count)

        counts = ClassificationCounts.from_classes(score.classification for score in scores)
        raw_percentage = weighted_percentage((score.percentage, score.weight) for score in scores)

        candidate_traits = big_five_profile(trait_scores)
        compatibility = None
        if profile is not None and profile.personality and candidate_traits:
            compatibility = personality_compatibility(candidate_traits, profile.personality)

        calculator = BalanceMultiplierCalculator(config.team_fit)
        multiplier = calculator.multiplier(counts, compatibility)
        adjusted = calculator.adjust(raw_percentage, multiplier) if scores else 0.0

        decision = PassDecisionEngine(config.team_fit).decide(
            adjusted,
            counts,
            profile.member_count if profile is not None else None,
        )

        metrics = TeamFitMetrics(
            diversity_count=counts.diversity,
            saturation_count=counts.saturation,
            gap_count=counts.gap,
            diversity_ratio=counts.diversity_ratio,
            saturation_ratio=counts.saturation_ratio,
            gap_ratio=counts.gap_ratio,
            balance=counts.balance,
            multiplier=multiplier,
            personality_compatibility=compatibility,
            saturation_threshold=classifier.saturation_threshold,
            diversity_threshold=classifier.diversity_threshold,
            team_profile_used=profile is not None,
        )

        self._logger.info(
            "scoring.completed",
            team_id=team_id or (profile.team_id if profile else None),
            competencies=counts.total,
            raw_percentage=round(raw_percentage, 2),
            adjusted_percentage=round(adjusted, 2),
            multiplier=round(multiplier, 4),
            diversity_ratio=round(counts.diversity_ratio, 4),
            saturation_ratio=round(counts.saturation_ratio, 4),
            passed=decision.passed,
        )

        return ScoringResult(
            overall_score=adjusted / 100.0,
            overall_percentage=adjusted,
            raw_percentage=raw_percentage,
            passed=decision.passed,
            pass_threshold=decision.threshold,
            competency_scores=tuple(scores),
            team_fit=metrics,
            big_five_profile=candidate_traits or None,
            team_id=team_id or (profile.team_id if profile else None),
            fail_reasons=decision.reasons,
        )

    def _resolve_profile(self, team_id: str | None, team_profile: TeamProfile | None) -> TeamProfile | None:
        if team_profile is not None:
            return team_profile
        if team_id is None or self._team_profiles is None:
            return None
        profile = self._team_profiles.profile_for(team_id)
        if profile is None:
            self._logger.info("scoring.team_profile_missing", team_id=team_id)
        return profile

    @staticmethod
    def _validate_role_weights(role_weights: Mapping[str, float] | None) -> dict[str, float]:
        validated: dict[str, float] = {}
        for competency_id, weight in (role_weights or {}).items():
            if weight is None or weight < 0:
                raise InvalidInputError(f"role weight for {competency_id!r} must be non-negative, got {weight!r}")
            validated[competency_id] = float(weight)
        return validated

    @staticmethod
    def _competency_score(
        aggregation: CompetencyAggregation,
        competency: Competency | None,
        indicators: Mapping[str, BehavioralIndicator],
        weight: float,
        classification: TeamFitClass,
        ratio: float,
    ) -> CompetencyScore:
        indicator_scores = []
        for indicator_id, indicator_agg in aggregation.indicators.items():
            indicator = indicators.get(indicator_id)
            indicator_scores.append(
                IndicatorScore(
                    indicator_id=indicator_id,
                    title=indicator.title if indicator is not None else "",
                    weight=indicator.weight if indicator is not None else 1.0,
                    score=indicator_agg.total_score,
                    percentage=indicator_agg.percentage,
                    questions_answered=indicator_agg.question_count,
                )
            )
        codes = competency.codes if competency is not None else None
        return CompetencyScore(
            competency_id=aggregation.competency_id,
            name=competency.name if competency is not None else "Unknown Competency",
            score=aggregation.total_score,
            max_score=float(aggregation.question_count),
            percentage=aggregation.percentage,
            questions_answered=aggregation.question_count,
            weight=weight,
            classification=classification,
            comparison_ratio=ratio,
            onet_code=codes.onet_code if codes else None,
            esco_uri=codes.esco_uri if codes else None,
            big_five=codes.big_five if codes else None,
            indicator_scores=tuple(indicator_scores),
        )
