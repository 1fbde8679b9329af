"""
Slate Engine: scored, diversified, explained activity slates.

Single entry point for the package:
- models/: EngineConfig, FeatureWeights, CandidateItem, Intention, Profile, slates
- stages/: features, scoring, debias, diversity, exploration, composer, reasons,
  cold_start, orchestrator
- services/: collaborator protocols (retrieval, policy store, semantic index,
  trace sink) with in-memory implementations
"""

from slate_engine.exceptions import ConfigurationError, SlateEngineError
from slate_engine.models.config import DEFAULT_CONFIG, EngineConfig, resolve_config
from slate_engine.models.intention import Intention, Profile, TimeWindow
from slate_engine.models.item import CandidateItem, Category, PriceBand
from slate_engine.models.policy import ExplorationLevel, ExplorationPolicy
from slate_engine.models.request import RecommendationRequest
from slate_engine.models.slate import RecommendationResult, Slate, SlateItem, SlateLabel
from slate_engine.models.weights import FeatureWeights, ScoringMode
from slate_engine.recommendation_engine import SlateEngine, create_slates
from slate_engine.settings import EngineSettings
from slate_engine.utils.cancellation import CancellationToken

__all__ = [
    "DEFAULT_CONFIG",
    "CancellationToken",
    "CandidateItem",
    "Category",
    "ConfigurationError",
    "EngineConfig",
    "EngineSettings",
    "ExplorationLevel",
    "ExplorationPolicy",
    "FeatureWeights",
    "Intention",
    "PriceBand",
    "Profile",
    "RecommendationRequest",
    "RecommendationResult",
    "ScoringMode",
    "Slate",
    "SlateEngine",
    "SlateEngineError",
    "SlateItem",
    "SlateLabel",
    "TimeWindow",
    "create_slates",
    "resolve_config",
]
