"""
Scorer — weighted linear combination of a factor map into one scalar.

score = clamp(sum(weight_f * value_f / max_f), 0, 1). Deterministic. The factor
map is returned untouched, in the mode's own convention.
"""

from typing import Dict, List, Optional, Tuple

from slate_engine.models.config import EngineConfig
from slate_engine.models.intention import Intention, Profile
from slate_engine.models.item import CandidateItem
from slate_engine.models.scoring import ScoredItem
from slate_engine.models.weights import FeatureWeights, factor_maxima
from slate_engine.services.semantic_index import SemanticIndex
from slate_engine.utils.similarity import clamp

from .features import extract_features


def weighted_score(
    factor_scores: Dict[str, float],
    weights: FeatureWeights,
    maxima: Dict[str, float],
) -> float:
    """Weighted sum over normalized factors; factors missing from the map count as 0."""
    total = 0.0
    for name, weight in weights.weights.items():
        value = factor_scores.get(name, 0.0)
        max_value = maxima.get(name, 1.0)
        total += weight * (value / max_value if max_value > 0 else 0.0)
    return clamp(total)


def score_item(
    item: CandidateItem,
    intention: Intention,
    profile: Optional[Profile],
    weights: FeatureWeights,
    config: EngineConfig,
    semantic_index: Optional[SemanticIndex] = None,
    augmented: bool = False,
) -> Tuple[ScoredItem, List[str]]:
    """Extract features and score one item. Returns (ScoredItem, warnings)."""
    factors, warnings = extract_features(item, intention, profile, config, semantic_index)
    maxima = factor_maxima(config.scoring_mode, config.time_fit_max_points)
    score = weighted_score(factors, weights, maxima)
    scored = ScoredItem(
        item=item,
        base_score=score,
        score=score,
        factor_scores=factors,
        augmented=augmented,
    )
    return scored, warnings
