"""
Pipeline orchestrator — policy, cold-start augmentation, parallel scoring,
debiasing, and slate composition for one request.

The main entry point is create_slates, which returns a RecommendationResult
with the three slates plus call metadata (policy used, cold start, warnings,
cancelled).
"""

import logging
import os
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Dict, List, Optional, Set, Tuple

from slate_engine.exceptions import ConfigurationError
from slate_engine.models.config import EngineConfig, resolve_config
from slate_engine.models.intention import Intention, Profile
from slate_engine.models.item import CandidateItem
from slate_engine.models.policy import ExplorationPolicy
from slate_engine.models.request import RecommendationRequest
from slate_engine.models.scoring import ScoredItem
from slate_engine.models.slate import PolicyUsed, RecommendationResult
from slate_engine.models.weights import FeatureWeights
from slate_engine.services.policy_store import PolicyStore
from slate_engine.services.retrieval import CandidateRetriever
from slate_engine.services.semantic_index import SemanticIndex
from slate_engine.services.trace_sink import TraceRecord, TraceSink
from slate_engine.utils.cancellation import CancellationToken

from .cold_start import augment_pool, is_cold_start_user
from .composer import compose_slates
from .debias import debias_by_popularity
from .exploration import resolve_policy
from .scoring import score_item

logger = logging.getLogger(__name__)


def _check_weights_mode(weights: FeatureWeights, config: EngineConfig) -> None:
    if weights.mode != config.scoring_mode:
        raise ConfigurationError(
            f"Weight set mode {weights.mode.value} does not match engine scoring mode "
            f"{config.scoring_mode.value}"
        )


def _harvest(
    futures: Dict[Future, int],
    done: Set[Future],
    results: Dict[int, ScoredItem],
    warnings: List[str],
) -> None:
    """Collect finished futures; scoring errors propagate."""
    for future in done:
        scored, item_warnings = future.result()
        results[futures[future]] = scored
        warnings.extend(item_warnings)


def score_pool(
    items: List[CandidateItem],
    intention: Intention,
    profile: Optional[Profile],
    weights: FeatureWeights,
    config: EngineConfig,
    semantic_index: Optional[SemanticIndex] = None,
    augmented_ids: Optional[Set[str]] = None,
    cancellation: Optional[CancellationToken] = None,
) -> Tuple[List[ScoredItem], List[str], bool]:
    """
    Score every item on a worker pool sized to config.max_workers (default: CPU count).

    The cancellation token is checked while results are gathered. On
    cancellation, queued work is dropped and whatever finished is returned.

    Returns:
        scored: ScoredItems in input order (only the finished subset if cancelled).
        warnings: Per-item warnings (e.g. semantic index fallbacks).
        cancelled: True if gathering stopped early.
    """
    if not items:
        return [], [], False
    if cancellation is not None and cancellation.cancelled:
        return [], [], True

    augmented_ids = augmented_ids or set()
    max_workers = min(config.max_workers or os.cpu_count() or 1, len(items))
    results: Dict[int, ScoredItem] = {}
    warnings: List[str] = []
    cancelled = False

    executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="slate-engine-score")
    try:
        futures = {
            executor.submit(
                score_item,
                item,
                intention,
                profile,
                weights,
                config,
                semantic_index,
                item.id in augmented_ids,
            ): idx
            for idx, item in enumerate(items)
        }
        pending = set(futures)
        while pending:
            if cancellation is not None and cancellation.cancelled:
                cancelled = True
                break
            timeout = cancellation.wait_interval() if cancellation is not None else None
            done, pending = wait(pending, timeout=timeout, return_when=FIRST_COMPLETED)
            _harvest(futures, done, results, warnings)

        if cancelled:
            # Keep work that finished between the last wait and the cancel check
            finished = {f for f in pending if f.done() and not f.cancelled()}
            _harvest(futures, finished, results, warnings)
            logger.warning(
                "[scoring] CANCELLED scored=%d of=%d",
                len(results), len(items),
            )
    finally:
        executor.shutdown(wait=not cancelled, cancel_futures=True)

    return [results[i] for i in sorted(results)], warnings, cancelled


def _deliver_trace(trace_sink: TraceSink, record: TraceRecord) -> None:
    try:
        trace_sink.record(record)
    except Exception as e:
        logger.warning("[trace] TRACE_SINK_FAILED trace_id=%s error=%s", record.trace_id, e)


def _record_trace(trace_sink: Optional[TraceSink], record: TraceRecord) -> None:
    """Fire-and-forget on a short-lived worker; a slow or failing sink never delays the call."""
    if trace_sink is None:
        return
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="slate-engine-trace")
    try:
        executor.submit(_deliver_trace, trace_sink, record)
    finally:
        executor.shutdown(wait=False)


def _resolve_policy(
    request: RecommendationRequest,
    policy_store: Optional[PolicyStore],
    config: EngineConfig,
) -> Tuple[ExplorationPolicy, bool, List[str]]:
    return resolve_policy(
        request.exploration_level,
        user_id=request.user_id,
        policy_store=policy_store,
        timeout_seconds=config.policy_lookup_timeout_seconds,
    )


def _augment(
    request: RecommendationRequest,
    retriever: Optional[CandidateRetriever],
    config: EngineConfig,
) -> Tuple[List[CandidateItem], Set[str], List[str]]:
    return augment_pool(
        request.candidates,
        request.intention,
        request.profile,
        retriever,
        config,
    )


def create_slates(
    request: RecommendationRequest,
    config: Optional[EngineConfig] = None,
    retriever: Optional[CandidateRetriever] = None,
    policy_store: Optional[PolicyStore] = None,
    semantic_index: Optional[SemanticIndex] = None,
    trace_sink: Optional[TraceSink] = None,
    cancellation: Optional[CancellationToken] = None,
) -> RecommendationResult:
    """
    Build Best / Wildcard / Close & Easy for one request.

    Collaborator failures (policy lookup, semantic index, augmentation, trace
    sink) become warnings on the result. A weight set whose mode differs from
    the configured scoring mode raises ConfigurationError.
    """
    # Resolve config (use defaults when None) and check the weight set against it
    config = resolve_config(config)
    _check_weights_mode(request.weights, config)

    # 1) Exploration policy: persisted per-user policy, else level preset
    policy, used_persisted, warnings = _resolve_policy(request, policy_store, config)

    # 2) Cold-start augmentation (only for small pools and signal-less users)
    cold_start = is_cold_start_user(request.profile)
    pool, augmented_ids, augment_warnings = _augment(request, retriever, config)
    warnings.extend(augment_warnings)

    # 3) Feature extraction + scoring, in parallel
    scored, scoring_warnings, cancelled = score_pool(
        pool,
        request.intention,
        request.profile,
        request.weights,
        config,
        semantic_index=semantic_index,
        augmented_ids=augmented_ids,
        cancellation=cancellation,
    )
    warnings.extend(scoring_warnings)
    if cancelled:
        warnings.append(f"scoring cancelled after {len(scored)} of {len(pool)} items")

    # 4) Popularity debiasing over the whole scored pool
    debiased = debias_by_popularity(scored, alpha=config.debias_alpha)

    # 5) Slates (with reasons)
    slates = compose_slates(debiased, policy, config)

    _record_trace(
        trace_sink,
        TraceRecord(
            trace_id=request.trace_id,
            policy_name=policy.name,
            used_profile=request.profile is not None and request.profile.has_signal,
            used_persisted_policy=used_persisted,
            cold_start=cold_start,
            augmented_count=len(augmented_ids),
            scored_count=len(scored),
            cancelled=cancelled,
            warnings=list(warnings),
        ),
    )

    return RecommendationResult(
        slates=slates,
        policy_used=PolicyUsed.from_policy(policy),
        trace_id=request.trace_id,
        cold_start=cold_start,
        augmented_count=len(augmented_ids),
        cancelled=cancelled,
        warnings=warnings,
    )
