"""
Pipeline stages: features, scoring, debiasing, diversity, exploration,
composition, reasons, cold start, and the orchestrator that runs them.
"""

from .cold_start import augment_pool, is_cold_start_user
from .composer import compose_slates
from .debias import debias_by_popularity
from .diversity import item_similarity, select_diverse_top_k
from .exploration import resolve_policy
from .features import extract_features
from .orchestrator import create_slates, score_pool
from .reasons import compile_reasons
from .scoring import score_item, weighted_score

__all__ = [
    "augment_pool",
    "compile_reasons",
    "compose_slates",
    "create_slates",
    "debias_by_popularity",
    "extract_features",
    "is_cold_start_user",
    "item_similarity",
    "resolve_policy",
    "score_item",
    "score_pool",
    "select_diverse_top_k",
    "weighted_score",
]
