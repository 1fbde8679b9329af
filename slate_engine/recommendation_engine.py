"""
Slate Engine: entry point for callers.

SlateEngine holds only injected collaborators and immutable configuration; it
keeps no per-request state, so one instance can serve concurrent calls.
"""

from typing import Any, Dict, List, Optional, Union

from slate_engine.computed_params import compute_parameters
from slate_engine.exceptions import ConfigurationError
from slate_engine.models.config import EngineConfig, resolve_config
from slate_engine.models.intention import Intention, Profile, ensure_intention, ensure_profile
from slate_engine.models.item import CandidateItem, ensure_candidates
from slate_engine.models.policy import ExplorationLevel, ensure_level
from slate_engine.models.request import RecommendationRequest
from slate_engine.models.slate import RecommendationResult
from slate_engine.models.weights import FeatureWeights, ensure_weights
from slate_engine.services.policy_store import PolicyStore
from slate_engine.services.retrieval import CandidateRetriever
from slate_engine.services.semantic_index import SemanticIndex
from slate_engine.services.trace_sink import TraceSink
from slate_engine.settings import EngineSettings
from slate_engine.stages.orchestrator import create_slates
from slate_engine.utils.cancellation import CancellationToken


class SlateEngine:
    """
    Turns a candidate pool plus an intention into Best / Wildcard / Close & Easy.

    Args:
        config: Engine configuration (DEFAULT_CONFIG when None).
        weights: Default weight set; must match config.scoring_mode. Defaults to
            the built-in weights for that mode. A request may override it.
        retriever: Used only for the cold-start generic query.
        policy_store: Persisted per-user exploration policies.
        semantic_index: Embeddings + similarity for the normalized mode.
        trace_sink: Fire-and-forget trace of each call.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        weights: Optional[Union[FeatureWeights, Dict[str, Any]]] = None,
        retriever: Optional[CandidateRetriever] = None,
        policy_store: Optional[PolicyStore] = None,
        semantic_index: Optional[SemanticIndex] = None,
        trace_sink: Optional[TraceSink] = None,
    ):
        self.config = resolve_config(config)
        self.weights = (
            ensure_weights(weights) if weights is not None
            else FeatureWeights.defaults(self.config.scoring_mode)
        )
        if self.weights.mode != self.config.scoring_mode:
            raise ConfigurationError(
                f"Weight set mode {self.weights.mode.value} does not match engine scoring mode "
                f"{self.config.scoring_mode.value}"
            )
        self.retriever = retriever
        self.policy_store = policy_store
        self.semantic_index = semantic_index
        self.trace_sink = trace_sink

    @classmethod
    def from_settings(cls, settings: Optional[EngineSettings] = None, **collaborators: Any) -> "SlateEngine":
        """Build an engine from environment settings (config + weights files)."""
        settings = settings or EngineSettings.from_env()
        settings.configure_logging()
        config = settings.load_config()
        return cls(config=config, weights=settings.load_weights(config), **collaborators)

    def describe(self) -> Dict[str, Any]:
        """Derived diagnostics for this engine's config and weights (see compute_parameters)."""
        return compute_parameters(
            self.config.model_dump(mode="json"),
            self.weights.model_dump(mode="json"),
        )

    def recommend(
        self,
        candidates: List[Union[CandidateItem, Dict[str, Any]]],
        intention: Union[Intention, Dict[str, Any]],
        profile: Optional[Union[Profile, Dict[str, Any]]] = None,
        exploration_level: Union[ExplorationLevel, str] = ExplorationLevel.MEDIUM,
        weights: Optional[Union[FeatureWeights, Dict[str, Any]]] = None,
        trace_id: Optional[str] = None,
        user_id: Optional[str] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> RecommendationResult:
        """Build slates for one call. Dicts are accepted for every model argument."""
        fields: Dict[str, Any] = {
            "candidates": ensure_candidates(candidates),
            "intention": ensure_intention(intention),
            "profile": ensure_profile(profile),
            "exploration_level": ensure_level(exploration_level),
            "weights": ensure_weights(weights) if weights is not None else self.weights,
            "user_id": user_id,
        }
        if trace_id is not None:
            fields["trace_id"] = trace_id
        return self.run(RecommendationRequest.model_validate(fields), cancellation=cancellation)

    def run(
        self,
        request: RecommendationRequest,
        cancellation: Optional[CancellationToken] = None,
    ) -> RecommendationResult:
        """Build slates for an already-validated request."""
        return create_slates(
            request,
            config=self.config,
            retriever=self.retriever,
            policy_store=self.policy_store,
            semantic_index=self.semantic_index,
            trace_sink=self.trace_sink,
            cancellation=cancellation,
        )


__all__ = [
    "SlateEngine",
    "create_slates",
]
