"""Evaluator implementations for the eligibility engine."""

from .eligibility import CriterionCheck, EligibilityEvaluator, EligibilityVerdict
from .match import MatchDetail, MatchResult, MatchScorer, MatchScorerConfig

__all__ = [
    "CriterionCheck",
    "EligibilityEvaluator",
    "EligibilityVerdict",
    "MatchDetail",
    "MatchResult",
    "MatchScorer",
    "MatchScorerConfig",
]
