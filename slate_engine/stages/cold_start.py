"""
Cold-start augmentation: top up a small pool for users with no profile signal.

When the matched pool has fewer than cold_start_pool_threshold items and the
profile carries no signal, a generic (unpersonalized) pool for the same city and
window is fetched, scored for accessibility, capped per category, and appended
after the matched items. Matched items are never reordered or removed.
"""

import logging
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import datetime
from typing import Dict, List, Optional, Set, Tuple

from slate_engine.models.config import EngineConfig
from slate_engine.models.intention import Intention, Profile
from slate_engine.models.item import CandidateItem, Category, PriceBand
from slate_engine.services.retrieval import CandidateRetriever
from slate_engine.utils.cancellation import call_with_timeout
from slate_engine.utils.time import minutes_between

logger = logging.getLogger(__name__)

# (max minutes until start, points); later than the last bucket scores 10
START_TIME_BUCKETS: Tuple[Tuple[float, float], ...] = (
    (60, 40.0),
    (120, 35.0),
    (240, 30.0),
    (360, 25.0),
    (720, 20.0),
    (1440, 15.0),
)
LATE_START_POINTS = 10.0

PRICE_ACCESSIBILITY: Dict[PriceBand, float] = {
    PriceBand.FREE: 30.0,
    PriceBand.LOW: 25.0,
    PriceBand.MID: 15.0,
    PriceBand.HIGH: 5.0,
}

CATEGORY_BREADTH: Dict[Category, float] = {
    Category.MUSIC: 20.0,
    Category.FOOD: 18.0,
    Category.COMEDY: 18.0,
    Category.ARTS: 15.0,
    Category.THEATRE: 15.0,
    Category.FAMILY: 12.0,
    Category.DANCE: 12.0,
    Category.FITNESS: 10.0,
    Category.NETWORKING: 8.0,
}
DEFAULT_CATEGORY_BREADTH = 5.0

VENUE_BONUS = 10.0


def is_cold_start_user(profile: Optional[Profile]) -> bool:
    """True when there is no profile or it carries no meaningful signal."""
    return profile is None or not profile.has_signal


def should_augment(pool_size: int, profile: Optional[Profile], config: EngineConfig) -> bool:
    return pool_size < config.cold_start_pool_threshold and is_cold_start_user(profile)


def cold_start_score(item: CandidateItem, now: datetime) -> float:
    """Accessibility score: start-time bucket + price + category breadth + venue bonus (0-100)."""
    minutes_until = minutes_between(now, item.start)
    score = LATE_START_POINTS
    for limit, points in START_TIME_BUCKETS:
        if minutes_until <= limit:
            score = points
            break
    score += PRICE_ACCESSIBILITY.get(item.price_band, 0.0)
    score += CATEGORY_BREADTH.get(item.category, DEFAULT_CATEGORY_BREADTH)
    if item.has_venue:
        score += VENUE_BONUS
    return score


def select_cold_start_items(
    items: List[CandidateItem],
    now: datetime,
    per_category_cap: int = 5,
    max_items: int = 30,
) -> List[CandidateItem]:
    """Sort by cold_start_score (stable), keep at most per_category_cap per category, stop at max_items."""
    ranked = sorted(items, key=lambda i: cold_start_score(i, now), reverse=True)
    per_category: Dict[Category, int] = {}
    selected: List[CandidateItem] = []
    for item in ranked:
        if len(selected) >= max_items:
            break
        count = per_category.get(item.category, 0)
        if count >= per_category_cap:
            continue
        per_category[item.category] = count + 1
        selected.append(item)
    return selected


def merge_after_matched(
    matched: List[CandidateItem],
    extra: List[CandidateItem],
    max_pool_size: int,
) -> Tuple[List[CandidateItem], Set[str]]:
    """
    Append extra items after the matched ones, skipping ids already present,
    until the pool reaches max_pool_size. The matched list is kept whole.

    Returns (merged pool, ids that were added).
    """
    merged = list(matched)
    seen = {i.id for i in matched}
    added: Set[str] = set()
    for item in extra:
        if len(merged) >= max_pool_size:
            break
        if item.id in seen:
            continue
        merged.append(item)
        seen.add(item.id)
        added.add(item.id)
    return merged, added


def augment_pool(
    matched: List[CandidateItem],
    intention: Intention,
    profile: Optional[Profile],
    retriever: Optional[CandidateRetriever],
    config: EngineConfig,
) -> Tuple[List[CandidateItem], Set[str], List[str]]:
    """
    Run cold-start augmentation when it applies.

    Returns:
        pool: matched items followed by any augmented items.
        added_ids: ids of the augmented items.
        warnings: fallback reasons when the generic query failed or timed out.
    """
    if retriever is None or not should_augment(len(matched), profile, config):
        return list(matched), set(), []

    timeout = config.augmentation_timeout_seconds
    try:
        generic = call_with_timeout(retriever.retrieve, timeout, intention.city, intention.window, None)
    except FutureTimeoutError:
        logger.warning("[cold_start] AUGMENTATION_TIMEOUT timeout_s=%s matched=%d", timeout, len(matched))
        return list(matched), set(), [f"cold-start augmentation timed out after {timeout}s"]
    except Exception as e:
        logger.warning("[cold_start] AUGMENTATION_FAILED error=%s matched=%d", e, len(matched))
        return list(matched), set(), [f"cold-start augmentation failed ({e})"]

    selected = select_cold_start_items(
        list(generic or []),
        intention.reference_time,
        per_category_cap=config.cold_start_per_category_cap,
        max_items=config.cold_start_max_items,
    )
    merged, added = merge_after_matched(matched, selected, config.max_pool_size)
    logger.info(
        "[cold_start] augmented matched=%d fetched=%d added=%d",
        len(matched), len(generic or []), len(added),
    )
    return merged, added, []
