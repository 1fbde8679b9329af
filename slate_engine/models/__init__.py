"""Data models for the slate engine."""

from .config import DEFAULT_CONFIG, EngineConfig, resolve_config
from .intention import (
    ExertionLevel,
    Intention,
    Profile,
    SocialContext,
    TimeWindow,
    ensure_intention,
    ensure_profile,
)
from .item import (
    CandidateItem,
    Category,
    PopularityCounters,
    PriceBand,
    ensure_candidates,
    price_band_from_prices,
)
from .policy import POLICY_PRESETS, ExplorationLevel, ExplorationPolicy, ensure_level
from .request import RecommendationRequest
from .scoring import ScoredItem
from .slate import PolicyUsed, RecommendationResult, Slate, SlateItem, SlateLabel, slate_overlap
from .weights import FeatureWeights, ScoringMode, ensure_weights, factor_maxima

__all__ = [
    "DEFAULT_CONFIG",
    "CandidateItem",
    "Category",
    "EngineConfig",
    "ExertionLevel",
    "ExplorationLevel",
    "ExplorationPolicy",
    "FeatureWeights",
    "Intention",
    "POLICY_PRESETS",
    "PolicyUsed",
    "PopularityCounters",
    "PriceBand",
    "Profile",
    "RecommendationRequest",
    "RecommendationResult",
    "ScoredItem",
    "ScoringMode",
    "Slate",
    "SlateItem",
    "SlateLabel",
    "SocialContext",
    "TimeWindow",
    "ensure_candidates",
    "ensure_intention",
    "ensure_level",
    "ensure_profile",
    "ensure_weights",
    "factor_maxima",
    "price_band_from_prices",
    "resolve_config",
    "slate_overlap",
]
