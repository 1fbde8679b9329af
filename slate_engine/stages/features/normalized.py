"""
Normalized ("fine") feature extraction: every factor in [0, 1].

Semantic factors come from the injected SemanticIndex. A missing vector gives
0.0; an index failure gives 0.0 and a warning, never an error.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from slate_engine.models.config import EngineConfig
from slate_engine.models.intention import Intention, Profile
from slate_engine.models.item import CandidateItem
from slate_engine.models.weights import (
    CATEGORY_MATCH,
    DISLIKE_MATCH,
    DISTANCE_COMFORT,
    ENGAGEMENT,
    NOVELTY,
    POPULARITY,
    QUALITY,
    SEMANTIC_SIMILARITY,
    TIME_FIT,
    TRENDING,
    USER_SEMANTIC_MATCH,
)
from slate_engine.services.semantic_index import SemanticIndex
from slate_engine.utils.similarity import clamp

from .common import dislike_match, distance_comfort_fraction, novelty_fraction, time_fit_fraction
from .keywords import goal_keyword_in_title, goal_mentions_category

logger = logging.getLogger(__name__)

_LN_1000 = math.log(1000)
_LN_100 = math.log(100)


def category_match_fraction(item: CandidateItem, intention: Intention) -> float:
    goal = intention.goal_text
    if goal_mentions_category(goal, item.category):
        return 1.0
    if goal_keyword_in_title(goal, item.title):
        return 0.5
    return 0.0


def popularity_fraction(item: CandidateItem) -> float:
    """Log-scaled lifetime interactions: ln(v + 5s + 10sh + 3c + 1) / ln(1000), capped at 1."""
    p = item.popularity
    raw = p.views + 5 * p.saves + 10 * p.shares + 3 * p.clicks
    return min(1.0, math.log(raw + 1) / _LN_1000)


def engagement_fraction(item: CandidateItem) -> float:
    """Log-scaled 24h interactions: ln(2·views_24h + 10·saves_24h + 1) / ln(100), capped at 1."""
    p = item.popularity
    raw = 2 * p.views_24h + 10 * p.saves_24h
    return min(1.0, math.log(raw + 1) / _LN_100)


def trending_fraction(item: CandidateItem) -> float:
    p = item.popularity
    return min(1.0, p.views_24h / max(1, p.views))


def quality_fraction(item: CandidateItem) -> float:
    """0.25 each for image, description, venue, and price being present."""
    present = [
        bool(item.image_url),
        bool(item.description),
        item.has_venue,
        item.price_band is not None,
    ]
    return 0.25 * sum(present)


def _semantic_match(
    index: Optional[SemanticIndex],
    item: CandidateItem,
    query_vector: Optional[Sequence[float]],
    factor: str,
    warnings: List[str],
) -> float:
    if index is None or not query_vector:
        return 0.0
    try:
        item_vector = index.embedding_of(item)
        if item_vector is None or len(item_vector) == 0:
            return 0.0
        return clamp(index.similarity(query_vector, item_vector))
    except Exception as e:
        logger.warning(
            "[sim_fallback] SEMANTIC_INDEX_FAILED item_id=%s factor=%s error=%s",
            item.id, factor, e,
        )
        warnings.append(f"semantic similarity unavailable for {item.id} ({factor}): {e}")
        return 0.0


def extract_normalized_features(
    item: CandidateItem,
    intention: Intention,
    profile: Optional[Profile],
    config: EngineConfig,
    semantic_index: Optional[SemanticIndex] = None,
) -> Tuple[Dict[str, float], List[str]]:
    """Compute the normalized factor map for one item; returns (factors, warnings)."""
    warnings: List[str] = []
    profile_vector = profile.preference_vector if profile is not None else None
    factors = {
        CATEGORY_MATCH: category_match_fraction(item, intention),
        SEMANTIC_SIMILARITY: _semantic_match(
            semantic_index, item, intention.goal_embedding, SEMANTIC_SIMILARITY, warnings
        ),
        USER_SEMANTIC_MATCH: _semantic_match(
            semantic_index, item, profile_vector, USER_SEMANTIC_MATCH, warnings
        ),
        POPULARITY: popularity_fraction(item),
        TIME_FIT: time_fit_fraction(item, intention),
        QUALITY: quality_fraction(item),
        ENGAGEMENT: engagement_fraction(item),
        TRENDING: trending_fraction(item),
        DISTANCE_COMFORT: distance_comfort_fraction(
            item, profile, config.default_travel_tolerance_minutes
        ),
        NOVELTY: novelty_fraction(item, profile),
        DISLIKE_MATCH: dislike_match(item, profile),
    }
    return factors, warnings
