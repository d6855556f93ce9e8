"""Dependency injection container for the eligibility engine."""

from __future__ import annotations

from dependency_injector import containers, providers

from .adapters import CurrentProfileAdapter, LegacyProfileAdapter
from .core import (
    AggregatorConfig,
    BatchAggregator,
    CriteriaNormalizer,
    EligibilityEngine,
    EligibilityEvaluator,
    MatchScorer,
    MatchScorerConfig,
    NormalizerConfig,
)
from .pipeline import AdapterRegistry, EligibilityReportPipeline
from .schemas import SchoolModuleConfig


class EligibilityContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    current_adapter = providers.Singleton(CurrentProfileAdapter)
    legacy_adapter = providers.Singleton(LegacyProfileAdapter)

    adapter_registry = providers.Singleton(
        AdapterRegistry,
        adapters=providers.List(current_adapter, legacy_adapter),
    )

    module_config = providers.Singleton(SchoolModuleConfig)

    normalizer = providers.Singleton(CriteriaNormalizer)
    eligibility_evaluator = providers.Singleton(EligibilityEvaluator)
    match_scorer = providers.Singleton(MatchScorer)

    aggregator = providers.Singleton(
        BatchAggregator,
        evaluator=eligibility_evaluator,
        scorer=match_scorer,
    )

    engine = providers.Singleton(
        EligibilityEngine,
        normalizer=normalizer,
        aggregator=aggregator,
        module_config=module_config,
    )

    pipeline = providers.Factory(
        EligibilityReportPipeline,
        engine=engine,
        registry=adapter_registry,
    )


def create_container(*, settings: dict | None = None) -> EligibilityContainer:
    """Instantiate container with optional overrides."""

    container = EligibilityContainer()

    if not settings or not isinstance(settings, dict):
        return container

    if "normalizer" in settings:
        normalizer_config = NormalizerConfig(**settings["normalizer"])
        container.normalizer.override(
            providers.Singleton(CriteriaNormalizer, config=normalizer_config)
        )

    if "scorer" in settings:
        scorer_config = MatchScorerConfig(**settings["scorer"])
        container.match_scorer.override(providers.Singleton(MatchScorer, config=scorer_config))

    if "aggregator" in settings:
        aggregator_config = AggregatorConfig(**settings["aggregator"])
        container.aggregator.override(
            providers.Singleton(
                BatchAggregator,
                evaluator=container.eligibility_evaluator,
                scorer=container.match_scorer,
                config=aggregator_config,
            )
        )

    if "school_modules" in settings:
        snapshot = settings["school_modules"]
        if not isinstance(snapshot, SchoolModuleConfig):
            snapshot = SchoolModuleConfig.model_validate(snapshot)
        container.module_config.override(providers.Object(snapshot))

    return container
