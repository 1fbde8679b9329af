"""
Keyword tables used by the feature extractor.
"""

from typing import Dict, Optional, Tuple

from slate_engine.models.intention import SocialContext
from slate_engine.models.item import Category

# Goal keywords per category. Categories absent here (WELLNESS, OTHER) can only
# earn categoryMatch through a title keyword hit or the floor.
CATEGORY_KEYWORDS: Dict[Category, Tuple[str, ...]] = {
    Category.FITNESS: ("workout", "fitness", "gym", "yoga", "exercise", "training"),
    Category.MUSIC: ("music", "concert", "show", "band", "performance"),
    Category.COMEDY: ("comedy", "standup", "comedian", "laugh"),
    Category.THEATRE: ("theatre", "theater", "play", "musical", "drama"),
    Category.DANCE: ("dance", "dancing", "ballet", "choreography"),
    Category.ARTS: ("art", "gallery", "museum", "exhibition", "painting"),
    Category.FOOD: ("food", "restaurant", "dining", "brunch", "dinner", "eat"),
    Category.NETWORKING: ("networking", "meetup", "professional", "business"),
    Category.FAMILY: ("family", "kids", "children"),
}

HIGH_ENERGY_VIBES = frozenset({"energetic", "intense", "wild", "party", "loud"})
LOW_ENERGY_VIBES = frozenset({"chill", "relaxed", "calm", "mellow", "peaceful", "gentle"})

SOCIAL_KEYWORDS: Dict[SocialContext, Tuple[str, ...]] = {
    SocialContext.SOLO: ("solo", "individual", "personal", "self"),
    SocialContext.WITH_FRIENDS: ("group", "social", "friends", "community"),
    SocialContext.DATE: ("romantic", "couple", "date", "intimate"),
    SocialContext.FAMILY: ("family", "kids", "children", "all ages"),
}


def goal_mentions_category(goal_text: str, category: Category) -> Optional[bool]:
    """
    True/False whether the goal contains one of the category's keywords.

    None when the category has no keyword table.
    """
    keywords = CATEGORY_KEYWORDS.get(category)
    if keywords is None:
        return None
    return any(kw in goal_text for kw in keywords)


def goal_keyword_in_title(goal_text: str, title: str) -> bool:
    """True if any category keyword appears in both the goal and the title."""
    title = title.lower()
    return any(
        kw in goal_text and kw in title
        for keywords in CATEGORY_KEYWORDS.values()
        for kw in keywords
    )
