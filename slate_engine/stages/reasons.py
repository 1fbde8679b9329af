"""
Reason compilation: map a factor map to 1-3 strings from a fixed vocabulary.

The scoring mode is passed in, never guessed from the values. Each factor is
divided by its maximum for that mode, then checked against one ordered rule
table. No rule firing yields the single filler reason.
"""

from typing import Dict, List, Tuple

from slate_engine.models.weights import (
    CATEGORY_MATCH,
    DISTANCE_COMFORT,
    ENGAGEMENT,
    NOVELTY,
    POPULARITY,
    PRICE_COMFORT,
    SEMANTIC_SIMILARITY,
    SOCIAL_FIT,
    TIME_FIT,
    TRENDING,
    USER_SEMANTIC_MATCH,
    VIBE_ALIGNMENT,
    ScoringMode,
    factor_maxima,
)

STRONG_MATCH = "Strong match for what you asked for"
STARTING_SOON = "Starting soon"
MATCHES_VIBE = "Matches your vibe"
WITHIN_BUDGET = "Within your budget"
SIMILAR_TO_QUERY = "Similar to what you're looking for"
PAST_LIKES = "Based on your past likes"
CLOSE_BY = "Close by"
GOOD_SOCIAL_FIT = "Good fit for your plans"
TRENDING_TODAY = "Trending today"
POPULAR_NOW = "Popular right now"
SOMETHING_NEW = "Something new to try"
DEFAULT_REASON = "Recommended for you"

# (factor, normalized threshold, reason) in priority order
REASON_RULES: Tuple[Tuple[str, float, str], ...] = (
    (CATEGORY_MATCH, 0.83, STRONG_MATCH),
    (TIME_FIT, 0.88, STARTING_SOON),
    (VIBE_ALIGNMENT, 0.6, MATCHES_VIBE),
    (PRICE_COMFORT, 0.9, WITHIN_BUDGET),
    (SEMANTIC_SIMILARITY, 0.7, SIMILAR_TO_QUERY),
    (USER_SEMANTIC_MATCH, 0.7, PAST_LIKES),
    (DISTANCE_COMFORT, 0.8, CLOSE_BY),
    (SOCIAL_FIT, 1.0, GOOD_SOCIAL_FIT),
    (TRENDING, 0.5, TRENDING_TODAY),
    (POPULARITY, 0.7, POPULAR_NOW),
    (ENGAGEMENT, 0.7, POPULAR_NOW),
    (NOVELTY, 0.7, SOMETHING_NEW),
)

REASON_VOCABULARY = frozenset({rule[2] for rule in REASON_RULES} | {DEFAULT_REASON})


def compile_reasons(
    factor_scores: Dict[str, float],
    mode: ScoringMode,
    max_reasons: int = 3,
    time_fit_max_points: float = 20.0,
) -> List[str]:
    """
    Return 1..max_reasons distinct reasons for one item.

    Args:
        factor_scores: Factor map in the convention of `mode`.
        mode: Scoring mode the factor map was produced in.
        max_reasons: Upper bound on reasons (1-3).
        time_fit_max_points: timeFit maximum in raw_points mode.
    """
    maxima = factor_maxima(mode, time_fit_max_points)
    reasons: List[str] = []
    for factor, threshold, reason in REASON_RULES:
        if len(reasons) >= max_reasons:
            break
        if factor not in factor_scores or reason in reasons:
            continue
        max_value = maxima.get(factor, 1.0)
        if max_value <= 0:
            continue
        if factor_scores[factor] / max_value >= threshold:
            reasons.append(reason)
    return reasons or [DEFAULT_REASON]
