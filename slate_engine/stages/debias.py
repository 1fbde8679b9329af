"""
Popularity debiasing: inverse-propensity rescaling against the pool mean.

propensity = (popularity + 1) / (mean_popularity + 1)
score *= propensity ** -alpha

Runs after scoring and before diversity, on the whole pool at once. Popularity
is the recent-window exposure (views_24h + saves_24h); missing counters are 0.
"""

from typing import List

from slate_engine.models.scoring import ScoredItem


def debias_by_popularity(scored_list: List[ScoredItem], alpha: float = 0.3) -> List[ScoredItem]:
    """
    Rescale scores by inverse propensity and re-sort descending.

    Args:
        scored_list: Scored candidates. Not mutated.
        alpha: Debiasing strength; 0 leaves scores unchanged.

    Returns:
        New ScoredItems sorted by debiased score (stable for ties).
    """
    if not scored_list:
        return []

    popularity = [s.item.popularity.recent_exposure for s in scored_list]
    mean_popularity = sum(popularity) / len(popularity)

    debiased = []
    for scored, pop in zip(scored_list, popularity):
        propensity = (pop + 1) / (mean_popularity + 1)
        debiased.append(scored.model_copy(update={"score": scored.score * propensity ** (-alpha)}))

    debiased.sort(key=lambda s: s.score, reverse=True)
    return debiased
