"""
Scoring modes, factor vocabularies, and validated feature weight sets.

Two factor conventions are supported behind one explicit mode flag:

- raw_points: factors are point values (categoryMatch 0-30, vibeAlignment 0-25,
  timeFit 0-20/25, priceComfort 0-15, socialFit 0-10, distanceComfort 0-10).
  Weights are point budgets normalized to sum to 1.
- normalized: every factor is already in [0, 1]; weights are probability-like.

Both modes share the auxiliary factors novelty and dislikeMatch (0-1).
A weight set is validated when it is loaded: factor names must belong to the
mode, positive weights must sum to 1.0 (±0.01), and at most one negative
(penalty) weight is allowed. The penalty is excluded from normalization.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator


class ScoringMode(str, Enum):
    RAW_POINTS = "raw_points"
    NORMALIZED = "normalized"


# Factor names
CATEGORY_MATCH = "categoryMatch"
VIBE_ALIGNMENT = "vibeAlignment"
TIME_FIT = "timeFit"
PRICE_COMFORT = "priceComfort"
SOCIAL_FIT = "socialFit"
SEMANTIC_SIMILARITY = "semanticSimilarity"
USER_SEMANTIC_MATCH = "userSemanticMatch"
POPULARITY = "popularity"
QUALITY = "quality"
ENGAGEMENT = "engagement"
TRENDING = "trending"
DISTANCE_COMFORT = "distanceComfort"
NOVELTY = "novelty"
DISLIKE_MATCH = "dislikeMatch"

# Point maxima for raw_points mode (timeFit is configurable; see factor_maxima)
RAW_POINT_MAXIMA: Dict[str, float] = {
    CATEGORY_MATCH: 30.0,
    VIBE_ALIGNMENT: 25.0,
    TIME_FIT: 20.0,
    PRICE_COMFORT: 15.0,
    SOCIAL_FIT: 10.0,
    DISTANCE_COMFORT: 10.0,
    NOVELTY: 1.0,
    DISLIKE_MATCH: 1.0,
}

NORMALIZED_FACTORS = (
    CATEGORY_MATCH,
    SEMANTIC_SIMILARITY,
    USER_SEMANTIC_MATCH,
    POPULARITY,
    TIME_FIT,
    QUALITY,
    ENGAGEMENT,
    TRENDING,
    DISTANCE_COMFORT,
    NOVELTY,
    DISLIKE_MATCH,
)

FACTORS_BY_MODE = {
    ScoringMode.RAW_POINTS: tuple(RAW_POINT_MAXIMA),
    ScoringMode.NORMALIZED: NORMALIZED_FACTORS,
}


def factor_maxima(mode: ScoringMode, time_fit_max_points: float = 20.0) -> Dict[str, float]:
    """Per-factor maximum value for a mode; dividing by it maps a factor onto [0, 1]."""
    if mode == ScoringMode.RAW_POINTS:
        maxima = dict(RAW_POINT_MAXIMA)
        maxima[TIME_FIT] = float(time_fit_max_points)
        return maxima
    return {name: 1.0 for name in NORMALIZED_FACTORS}


# -------------------------------------------------------------------------
# Default weight sets
# -------------------------------------------------------------------------

DEFAULT_RAW_POINT_BUDGETS: Dict[str, float] = {
    CATEGORY_MATCH: 30,
    VIBE_ALIGNMENT: 25,
    TIME_FIT: 20,
    PRICE_COMFORT: 15,
    SOCIAL_FIT: 10,
}

DEFAULT_NORMALIZED_WEIGHTS: Dict[str, float] = {
    SEMANTIC_SIMILARITY: 0.25,
    CATEGORY_MATCH: 0.22,
    POPULARITY: 0.15,
    ENGAGEMENT: 0.12,
    QUALITY: 0.10,
    USER_SEMANTIC_MATCH: 0.08,
    TIME_FIT: 0.05,
    TRENDING: 0.03,
}

DEFAULT_DISLIKE_PENALTY = -0.10


class FeatureWeights(BaseModel):
    """Externally supplied weight set for one scoring mode."""

    model_config = ConfigDict(frozen=True)

    mode: ScoringMode
    weights: Dict[str, float]

    @model_validator(mode="after")
    def validate_weight_set(self):
        allowed = set(FACTORS_BY_MODE[self.mode])
        unknown = sorted(set(self.weights) - allowed)
        if unknown:
            raise ValueError(f"Unknown factors for mode {self.mode.value}: {unknown}")
        negatives = [name for name, w in self.weights.items() if w < 0]
        if len(negatives) > 1:
            raise ValueError(f"At most one negative (penalty) weight is allowed, got {sorted(negatives)}")
        total = sum(w for w in self.weights.values() if w > 0)
        if abs(total - 1.0) > 0.01:
            raise ValueError(f"Positive weights must sum to 1.0, got {total}")
        return self

    @property
    def penalty_factor(self) -> Optional[str]:
        for name, w in self.weights.items():
            if w < 0:
                return name
        return None

    @classmethod
    def from_point_budgets(
        cls,
        mode: Union[ScoringMode, str],
        budgets: Dict[str, float],
        penalty: Optional[Dict[str, float]] = None,
    ) -> "FeatureWeights":
        """
        Build a weight set from point budgets (e.g. 30/25/20/15/10).

        Positive budgets are divided by their total; the optional single penalty
        entry is passed through untouched.
        """
        positives = {k: float(v) for k, v in budgets.items() if v > 0}
        total = sum(positives.values())
        if total <= 0:
            raise ValueError("Point budgets must contain at least one positive entry")
        weights = {k: v / total for k, v in positives.items()}
        weights.update(penalty or {})
        return cls(mode=ScoringMode(mode), weights=weights)

    @classmethod
    def defaults(cls, mode: Union[ScoringMode, str]) -> "FeatureWeights":
        mode = ScoringMode(mode)
        penalty = {DISLIKE_MATCH: DEFAULT_DISLIKE_PENALTY}
        if mode == ScoringMode.RAW_POINTS:
            return cls.from_point_budgets(mode, DEFAULT_RAW_POINT_BUDGETS, penalty)
        return cls(mode=mode, weights={**DEFAULT_NORMALIZED_WEIGHTS, **penalty})

    @classmethod
    def from_dict(cls, weights_dict: Dict[str, Any]) -> "FeatureWeights":
        """
        Create weights from a dictionary (e.g. loaded from JSON).

        Accepts either {"mode", "weights"} or {"mode", "point_budgets", "penalty"}.
        """
        if "point_budgets" in weights_dict:
            return cls.from_point_budgets(
                weights_dict["mode"],
                weights_dict["point_budgets"],
                weights_dict.get("penalty"),
            )
        return cls.model_validate(weights_dict)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "FeatureWeights":
        with open(path) as f:
            return cls.from_dict(json.load(f))


def ensure_weights(weights: Union[Dict[str, Any], FeatureWeights]) -> FeatureWeights:
    return FeatureWeights.from_dict(weights) if isinstance(weights, dict) else weights
