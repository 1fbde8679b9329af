"""
Factors shared by both conventions: time fit, distance comfort, novelty, dislike match.

Each helper returns a fraction in [0, 1]; the raw-points extractor scales the
ones it reports in points.
"""

from typing import Optional

from slate_engine.models.intention import Intention, Profile
from slate_engine.models.item import CandidateItem
from slate_engine.utils.time import minutes_between

NEUTRAL_DISTANCE = 0.5
NEUTRAL_NOVELTY = 0.5


def time_fit_fraction(item: CandidateItem, intention: Intention) -> float:
    """
    Front-loaded step over the window: 1, 0.75, 0.5, 0.25 by quartile of window
    length elapsed before the item starts. 0 outside [start, end) or when the
    item has already started.
    """
    window = intention.window
    if not window.contains(item.start):
        return 0.0
    minutes_until = minutes_between(intention.reference_time, item.start)
    if minutes_until < 0:
        return 0.0
    duration = window.duration_minutes
    if duration <= 0:
        return 0.0
    elapsed = minutes_until / duration
    if elapsed < 0.25:
        return 1.0
    if elapsed < 0.5:
        return 0.75
    if elapsed < 0.75:
        return 0.5
    return 0.25


def distance_comfort_fraction(
    item: CandidateItem,
    profile: Optional[Profile],
    default_tolerance_minutes: float,
) -> float:
    """Travel time relative to tolerance; unknown travel time is neutral."""
    if item.travel_minutes is None:
        return NEUTRAL_DISTANCE
    tolerance = default_tolerance_minutes
    if profile is not None and profile.max_travel_minutes:
        tolerance = profile.max_travel_minutes
    ratio = max(0.0, item.travel_minutes) / tolerance
    if ratio <= 0.5:
        return 1.0
    if ratio <= 1.0:
        return 0.7
    if ratio <= 1.5:
        return 0.4
    return 0.1


def novelty_fraction(item: CandidateItem, profile: Optional[Profile]) -> float:
    """
    Supplied novelty wins. Otherwise 1 - share of the item's descriptors
    (tags + category) the user already prefers; neutral without mood history.
    """
    if item.novelty is not None:
        return item.novelty
    if profile is None or not profile.preferred_moods:
        return NEUTRAL_NOVELTY
    descriptors = {t.lower() for t in item.tags} | {item.category.value.lower()}
    moods = {m.lower() for m in profile.preferred_moods}
    return 1.0 - len(descriptors & moods) / len(descriptors)


def dislike_match(item: CandidateItem, profile: Optional[Profile]) -> float:
    """1.0 when any profile dislike names the item's category, a tag, or appears in the title."""
    if profile is None or not profile.dislikes:
        return 0.0
    category = item.category.value.lower()
    tags = {t.lower() for t in item.tags}
    title = item.title.lower()
    for dislike in profile.dislikes:
        d = dislike.lower().strip()
        if d and (d == category or d in tags or d in title):
            return 1.0
    return 0.0
