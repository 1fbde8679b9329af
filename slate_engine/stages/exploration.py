"""
Exploration policy selection.

Resolution order:
1) persisted per-user policy from the PolicyStore (bounded by a timeout)
2) preset for the caller-declared exploration level

A failed, slow, or empty lookup falls back to (2) with a warning; it never raises.
"""

import logging
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import List, Optional, Tuple

from slate_engine.models.policy import POLICY_PRESETS, ExplorationLevel, ExplorationPolicy, ensure_policy
from slate_engine.services.policy_store import PolicyStore
from slate_engine.utils.cancellation import call_with_timeout

logger = logging.getLogger(__name__)


def resolve_policy(
    level: ExplorationLevel,
    user_id: Optional[str] = None,
    policy_store: Optional[PolicyStore] = None,
    timeout_seconds: float = 0.15,
) -> Tuple[ExplorationPolicy, bool, List[str]]:
    """
    Resolve the exploration policy for one call.

    Returns:
        policy: Persisted policy when available, else the level preset.
        used_persisted: True if the persisted policy was used.
        warnings: Fallback reasons (empty on the happy path).
    """
    preset = POLICY_PRESETS[level]
    if policy_store is None or not user_id:
        return preset, False, []

    try:
        persisted = call_with_timeout(policy_store.get_policy, timeout_seconds, user_id)
    except FutureTimeoutError:
        logger.warning(
            "[policy_fallback] POLICY_LOOKUP_TIMEOUT user_id=%s timeout_s=%s preset=%s",
            user_id, timeout_seconds, preset.name,
        )
        return preset, False, [f"policy lookup timed out after {timeout_seconds}s; using {preset.name}"]
    except Exception as e:
        logger.warning(
            "[policy_fallback] POLICY_LOOKUP_FAILED user_id=%s error=%s preset=%s",
            user_id, e, preset.name,
        )
        return preset, False, [f"policy lookup failed ({e}); using {preset.name}"]

    if persisted is None:
        return preset, False, []

    try:
        policy = ensure_policy(persisted)
    except ValueError as e:
        logger.warning(
            "[policy_fallback] POLICY_INVALID user_id=%s error=%s preset=%s",
            user_id, e, preset.name,
        )
        return preset, False, [f"persisted policy invalid; using {preset.name}"]
    return policy, True, []
