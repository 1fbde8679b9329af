"""
Raw-points feature extraction: factors as point values.

categoryMatch 0-30, vibeAlignment 0-25, timeFit 0-time_fit_max_points,
priceComfort 0-15, socialFit 0-10, distanceComfort 0-10, plus the 0-1
novelty and dislikeMatch auxiliaries. With the default point budgets the
weighted score equals total points / 100.
"""

from typing import Dict, Optional

from slate_engine.models.config import EngineConfig
from slate_engine.models.intention import ExertionLevel, Intention, Profile
from slate_engine.models.item import CandidateItem, PriceBand
from slate_engine.models.weights import (
    CATEGORY_MATCH,
    DISLIKE_MATCH,
    DISTANCE_COMFORT,
    NOVELTY,
    PRICE_COMFORT,
    RAW_POINT_MAXIMA,
    SOCIAL_FIT,
    TIME_FIT,
    VIBE_ALIGNMENT,
)

from .common import dislike_match, distance_comfort_fraction, novelty_fraction, time_fit_fraction
from .keywords import (
    HIGH_ENERGY_VIBES,
    LOW_ENERGY_VIBES,
    SOCIAL_KEYWORDS,
    goal_keyword_in_title,
    goal_mentions_category,
)


def category_match_points(item: CandidateItem, intention: Intention) -> float:
    """30 category + goal keyword; 15 known category only; 10 title keyword only; else 5."""
    goal = intention.goal_text
    mentioned = goal_mentions_category(goal, item.category)
    if mentioned is not None:
        return 30.0 if mentioned else 15.0
    if goal_keyword_in_title(goal, item.title):
        return 10.0
    return 5.0


def vibe_alignment_points(item: CandidateItem, intention: Intention) -> float:
    vibes = intention.vibes
    tags = {t.lower() for t in item.tags}
    title = item.title.lower()

    points = 8.0 * sum(1 for v in vibes if v in tags)
    points += 5.0 * sum(1 for v in vibes if v in title)

    # Energy bonus: exertion level agrees with a recognized descriptor set
    if intention.exertion_level == ExertionLevel.HIGH and HIGH_ENERGY_VIBES.intersection(vibes):
        points += 5.0
    elif intention.exertion_level == ExertionLevel.LOW and LOW_ENERGY_VIBES.intersection(vibes):
        points += 5.0

    return min(RAW_POINT_MAXIMA[VIBE_ALIGNMENT], points)


def price_comfort_points(item: CandidateItem, intention: Intention, profile: Optional[Profile]) -> float:
    """Rank distance between item band and budget: 0→15, 1→10, 2→5, ≥3→2. FREE is always 15."""
    budget = intention.budget_band or (profile.budget_band if profile is not None else None)
    if budget is None or item.price_band is None:
        return 10.0
    if item.price_band == PriceBand.FREE:
        return 15.0
    distance = abs(item.price_band.rank - budget.rank)
    if distance == 0:
        return 15.0
    if distance == 1:
        return 10.0
    if distance == 2:
        return 5.0
    return 2.0


def social_fit_points(item: CandidateItem, intention: Intention) -> float:
    if intention.social_context is None:
        return 5.0
    text = item.text_blob()
    keywords = SOCIAL_KEYWORDS.get(intention.social_context, ())
    return 10.0 if any(kw in text for kw in keywords) else 5.0


def extract_raw_point_features(
    item: CandidateItem,
    intention: Intention,
    profile: Optional[Profile],
    config: EngineConfig,
) -> Dict[str, float]:
    """Compute the raw-points factor map for one item."""
    return {
        CATEGORY_MATCH: category_match_points(item, intention),
        VIBE_ALIGNMENT: vibe_alignment_points(item, intention),
        TIME_FIT: time_fit_fraction(item, intention) * config.time_fit_max_points,
        PRICE_COMFORT: price_comfort_points(item, intention, profile),
        SOCIAL_FIT: social_fit_points(item, intention),
        DISTANCE_COMFORT: RAW_POINT_MAXIMA[DISTANCE_COMFORT]
        * distance_comfort_fraction(item, profile, config.default_travel_tolerance_minutes),
        NOVELTY: novelty_fraction(item, profile),
        DISLIKE_MATCH: dislike_match(item, profile),
    }
