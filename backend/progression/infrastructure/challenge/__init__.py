from progression.infrastructure.challenge.catalog import (
    ChallengeCatalog,
    ChallengeDefinition,
    UnlockContext,
    UnlockRule,
    default_catalog,
)
from progression.infrastructure.challenge.catalog_config import get_catalog, load_catalog, reload_catalog
from progression.infrastructure.challenge.evaluator import ChallengeEvaluator, evaluate_all
from progression.infrastructure.challenge.rules import MetricName, ProgressRule, RuleKind
from progression.infrastructure.challenge.schemas import EvaluatedChallenge

__all__ = [
    "ChallengeCatalog",
    "ChallengeDefinition",
    "ChallengeEvaluator",
    "EvaluatedChallenge",
    "MetricName",
    "ProgressRule",
    "RuleKind",
    "UnlockContext",
    "UnlockRule",
    "default_catalog",
    "evaluate_all",
    "get_catalog",
    "load_catalog",
    "reload_catalog",
]
