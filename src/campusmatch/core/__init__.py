"""Core eligibility and match scoring components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .aggregator import AggregateResult, AggregatorConfig, BatchAggregator, StudentEvaluation
from .criteria import CriteriaNormalizer, CriteriaSet, NormalizerConfig
from .engine import EligibilityEngine
from .evaluators import (
    EligibilityEvaluator,
    EligibilityVerdict,
    MatchDetail,
    MatchResult,
    MatchScorer,
    MatchScorerConfig,
)
from .modules import ModuleResolution, resolve_module_requirement
from .proficiency import meets, to_ordinal

__all__ = [
    "AggregateResult",
    "AggregatorConfig",
    "BatchAggregator",
    "CriteriaNormalizer",
    "CriteriaSet",
    "EligibilityEngine",
    "EligibilityEvaluator",
    "EligibilityVerdict",
    "MatchDetail",
    "MatchResult",
    "MatchScorer",
    "MatchScorerConfig",
    "ModuleResolution",
    "NormalizerConfig",
    "StudentEvaluation",
    "meets",
    "resolve_module_requirement",
    "to_ordinal",
]
