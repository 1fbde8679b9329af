"""
Computed Parameters

Derives read-only diagnostic values from a base config dict (the same JSON
EngineConfig.from_dict accepts) and an optional weights dict. Used to inspect a
config/weights pair before deploying it (SlateEngine.describe); nothing in the
request path reads these.
"""

from typing import Any, Dict, Optional

from slate_engine.models.config import EngineConfig
from slate_engine.models.weights import (
    DEFAULT_DISLIKE_PENALTY,
    DEFAULT_NORMALIZED_WEIGHTS,
    DEFAULT_RAW_POINT_BUDGETS,
    DISLIKE_MATCH,
    ScoringMode,
    factor_maxima,
)


def normalize_weight_budget(budget: Dict[str, float]) -> Dict[str, float]:
    """
    Divide positive entries by their total; negative (penalty) entries pass through.

    All-zero positives fall back to an even split.
    """
    positives = {k: v for k, v in budget.items() if v > 0}
    total = sum(positives.values())
    normalized: Dict[str, float] = {}
    for name, value in budget.items():
        if value < 0:
            normalized[name] = value
        elif total > 0:
            normalized[name] = value / total
        else:
            normalized[name] = 1.0 / len(budget) if budget else 0.0
    return normalized


def compute_parameters(base_params: Dict[str, Any], weights: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Compute derived parameters from base parameters.

    Args:
        base_params: Engine config dict (sections or flat keys).
        weights: Optional weights dict ({"mode", "weights"} or point budgets).

    Returns:
        Dictionary of computed parameter values.
    """
    config = EngineConfig.from_dict(base_params)
    computed: Dict[str, Any] = {"scoring_mode": config.scoring_mode.value}

    # =========================================================================
    # Normalized Scoring Weights (positive entries sum to 1.0)
    # =========================================================================
    weights = weights or {}
    if "point_budgets" in weights:
        budget = dict(weights["point_budgets"])
        budget.update(weights.get("penalty") or {})
    elif "weights" in weights:
        budget = dict(weights["weights"])
    elif config.scoring_mode == ScoringMode.RAW_POINTS:
        budget = {**DEFAULT_RAW_POINT_BUDGETS, DISLIKE_MATCH: DEFAULT_DISLIKE_PENALTY}
    else:
        budget = {**DEFAULT_NORMALIZED_WEIGHTS, DISLIKE_MATCH: DEFAULT_DISLIKE_PENALTY}
    normalized = normalize_weight_budget(budget)
    for name, value in normalized.items():
        computed[f"normalized_weight_{name}"] = value
    penalties = [name for name, value in normalized.items() if value < 0]
    computed["penalty_factor"] = penalties[0] if len(penalties) == 1 else None

    # =========================================================================
    # Raw-point ceiling (sum of factor maxima that carry a positive weight)
    # =========================================================================
    maxima = factor_maxima(config.scoring_mode, config.time_fit_max_points)
    computed["max_weighted_points"] = sum(
        maxima.get(name, 1.0) for name, value in normalized.items() if value > 0
    )

    # =========================================================================
    # Debiasing multipliers at fixed popularity ratios to the pool mean
    # multiplier = ratio ** -alpha (ratio ~ (pop + 1) / (mean + 1))
    # =========================================================================
    alpha = config.debias_alpha
    computed["debias_multiplier_at_mean"] = 1.0
    computed["debias_multiplier_2x_mean"] = 2.0 ** -alpha
    computed["debias_multiplier_10x_mean"] = 10.0 ** -alpha

    # =========================================================================
    # Diversity trade-off
    # =========================================================================
    computed["mmr_relevance_share"] = config.mmr_lambda
    computed["mmr_diversity_share"] = 1.0 - config.mmr_lambda
    # Max similarity is 1.0 (same category, venue, day, band)
    computed["max_redundancy_penalty"] = 1.0 - config.mmr_lambda

    # =========================================================================
    # Cold-start capacity
    # =========================================================================
    computed["cold_start_max_augmented"] = min(config.cold_start_max_items, config.max_pool_size)
    computed["cold_start_min_categories_to_fill"] = -(
        -config.cold_start_max_items // config.cold_start_per_category_cap
    )

    return computed
