"""Dependency injection container for the assessment engine."""

from __future__ import annotations

import random
import uuid

from dependency_injector import containers, providers

from .catalog import ExposureLog, QuestionBank, TeamProfileRegistry
from .core.scoring import ScoringConfig, StaticScoringConfigProvider, TeamFitScoringEngine
from .core.selection import (
    CompetencySelector,
    ContextNeutralityFilter,
    DifficultyRanker,
    DistributionPlanner,
    EligibilityFilter,
    IndicatorSelector,
    session_rng,
)
from .pipeline import AssessmentPipeline


class AssessmentContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    bank = providers.Singleton(QuestionBank)
    team_profiles = providers.Singleton(TeamProfileRegistry)
    exposure_log = providers.Singleton(ExposureLog)

    rng = providers.Singleton(random.Random)

    eligibility = providers.Singleton(EligibilityFilter, oracle=bank)
    neutrality = providers.Singleton(ContextNeutralityFilter)
    ranker = providers.Singleton(DifficultyRanker, rng=rng)

    indicator_selector = providers.Singleton(
        IndicatorSelector,
        catalog=bank,
        eligibility=eligibility,
        ranker=ranker,
    )

    planner = providers.Singleton(
        DistributionPlanner,
        selector=indicator_selector,
        exposure_tracker=exposure_log,
    )

    competency_selector = providers.Singleton(
        CompetencySelector,
        indicators=bank,
        planner=planner,
        neutrality=neutrality,
    )

    scoring_config = providers.Singleton(ScoringConfig)
    scoring_config_provider = providers.Singleton(StaticScoringConfigProvider, config=scoring_config)

    scoring_engine = providers.Singleton(
        TeamFitScoringEngine,
        config_provider=scoring_config_provider,
        team_profiles=team_profiles,
    )

    pipeline = providers.Factory(
        AssessmentPipeline,
        bank=bank,
        selector=competency_selector,
        engine=scoring_engine,
        selection=config.selection,
    )


def create_container(
    *,
    settings: dict | None = None,
    bank: QuestionBank | None = None,
    team_profiles: TeamProfileRegistry | None = None,
    seed: int | None = None,
    session_id: uuid.UUID | str | None = None,
) -> AssessmentContainer:
    """Instantiate container with optional overrides.

    ``session_id`` takes precedence over ``seed`` for the random source.
    """

    container = AssessmentContainer()

    if bank is not None:
        container.bank.override(providers.Object(bank))
    if team_profiles is not None:
        container.team_profiles.override(providers.Object(team_profiles))

    if session_id is not None:
        container.rng.override(providers.Object(session_rng(session_id)))
    elif seed is not None:
        container.rng.override(providers.Singleton(random.Random, seed))

    if not settings or not isinstance(settings, dict):
        return container

    selection_settings = settings.get("selection") or {}
    if selection_settings:
        container.config.override({"selection": selection_settings})

    if settings.get("team_fit") or settings.get("weights"):
        scoring_config = ScoringConfig.from_settings(settings)
        container.scoring_config.override(providers.Object(scoring_config))

    return container
