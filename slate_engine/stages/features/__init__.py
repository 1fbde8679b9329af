"""
Feature extraction: per-item factor maps in one of two conventions.

Public API: extract_features. The convention comes from EngineConfig.scoring_mode;
it is never inferred from the values.
- raw_points: point-valued factors.
- normalized: [0, 1] factors, including semantic similarity.
"""

from typing import Dict, List, Optional, Tuple

from slate_engine.models.config import EngineConfig
from slate_engine.models.intention import Intention, Profile
from slate_engine.models.item import CandidateItem
from slate_engine.models.weights import ScoringMode
from slate_engine.services.semantic_index import SemanticIndex

from .normalized import extract_normalized_features
from .raw_points import extract_raw_point_features


def extract_features(
    item: CandidateItem,
    intention: Intention,
    profile: Optional[Profile],
    config: EngineConfig,
    semantic_index: Optional[SemanticIndex] = None,
) -> Tuple[Dict[str, float], List[str]]:
    """Return (factor map, warnings) for one item in the configured convention."""
    if config.scoring_mode == ScoringMode.RAW_POINTS:
        return extract_raw_point_features(item, intention, profile, config), []
    return extract_normalized_features(item, intention, profile, config, semantic_index)


__all__ = [
    "extract_features",
    "extract_normalized_features",
    "extract_raw_point_features",
]
