"""
Policy Store abstraction.

Supplies a persisted, per-user exploration policy (e.g. learned by
BanditPolicyStore). The engine bounds every lookup with its own timeout and
falls back to the preset for the declared exploration level.
"""

from typing import Dict, Optional, Protocol

from slate_engine.models.policy import ExplorationPolicy


class PolicyStore(Protocol):
    """Protocol for per-user exploration policy lookup."""

    def get_policy(self, user_id: str) -> Optional[ExplorationPolicy]:
        """Return the user's persisted policy, or None when there is none."""
        ...


class InMemoryPolicyStore:
    """Policy store backed by a dict. Used for local testing and evaluation."""

    def __init__(self, policies: Optional[Dict[str, ExplorationPolicy]] = None):
        self._policies: Dict[str, ExplorationPolicy] = dict(policies or {})

    def set_policy(self, user_id: str, policy: ExplorationPolicy) -> None:
        self._policies[user_id] = policy

    def get_policy(self, user_id: str) -> Optional[ExplorationPolicy]:
        return self._policies.get(user_id)
