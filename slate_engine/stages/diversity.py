"""
Diversity selection — greedy Maximal Marginal Relevance over the scored pool.

mmr = lambda * normalized_relevance - (1 - lambda) * max_similarity_to_selected

Pairwise similarity is structural, not semantic:
0.4 same category + 0.3 same venue + 0.2 same calendar day + 0.1 same price band.
Venue and price band only count when both items have one.
"""

from typing import List, Optional

from slate_engine.models.item import CandidateItem
from slate_engine.models.scoring import ScoredItem

SAME_CATEGORY_WEIGHT = 0.4
SAME_VENUE_WEIGHT = 0.3
SAME_DAY_WEIGHT = 0.2
SAME_PRICE_BAND_WEIGHT = 0.1


def item_similarity(a: CandidateItem, b: CandidateItem) -> float:
    """Structural similarity in [0, 1]."""
    sim = 0.0
    if a.category == b.category:
        sim += SAME_CATEGORY_WEIGHT
    if a.has_venue and b.has_venue and a.venue_name.strip().lower() == b.venue_name.strip().lower():
        sim += SAME_VENUE_WEIGHT
    if a.start.date() == b.start.date():
        sim += SAME_DAY_WEIGHT
    if a.price_band is not None and a.price_band == b.price_band:
        sim += SAME_PRICE_BAND_WEIGHT
    return sim


def _normalized_relevance(scored_list: List[ScoredItem]) -> List[float]:
    """Min-max normalize scores over the input; all-equal scores map to 1.0."""
    scores = [s.score for s in scored_list]
    low, high = min(scores), max(scores)
    if high - low <= 0:
        return [1.0] * len(scores)
    return [(x - low) / (high - low) for x in scores]


def select_diverse_top_k(
    scored_list: List[ScoredItem],
    k: int = 10,
    lambda_param: float = 0.7,
) -> List[ScoredItem]:
    """
    Select up to k items by MMR.

    Seeds with the first (top-scoring) item, then for each slot picks the
    remaining item with the highest MMR value. Ties keep the earlier item, so
    lambda_param=1.0 reproduces plain top-k and lambda_param=0.0 picks purely for
    dispersion after the seed.

    Args:
        scored_list: Candidates sorted by score (desc). Not mutated.
        k: Number to select.
        lambda_param: Relevance/diversity trade-off in [0, 1].

    Returns:
        Ordered list of up to k ScoredItems, in selection order.
    """
    if not scored_list or k <= 0:
        return []

    relevance = _normalized_relevance(scored_list)
    remaining = list(range(len(scored_list)))
    selected: List[int] = [remaining.pop(0)]

    while remaining and len(selected) < k:
        best_pos: Optional[int] = None
        best_mmr = float("-inf")

        for pos, idx in enumerate(remaining):
            candidate = scored_list[idx].item
            max_sim = max(item_similarity(candidate, scored_list[j].item) for j in selected)
            mmr = lambda_param * relevance[idx] - (1 - lambda_param) * max_sim
            if mmr > best_mmr:
                best_mmr = mmr
                best_pos = pos

        selected.append(remaining.pop(best_pos))

    return [scored_list[i] for i in selected]
