"""
Bandit Policy Store.

Learns which exploration stance pays off from caller-reported rewards (click,
save, skip) and serves it through the PolicyStore protocol, so the engine's
persisted-policy lookup, with its timeout and fallback, applies unchanged.

Strategies over the arms (the three presets by default):
- epsilon_greedy: with probability epsilon pick a random arm, otherwise the arm
  with the best average reward (ties keep arm order).
- thompson: sample Beta(successes + 1, failures + 1) per arm and take the max.

A policy pinned for a user with set_policy wins over the bandit. Statistics
live in memory; a deployment that needs them across restarts persists stats().
"""

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence

import numpy as np

from slate_engine.models.policy import ADVENTUROUS, BALANCED, CONSERVATIVE, ExplorationPolicy
from slate_engine.utils.similarity import clamp

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = 0.25

# Rewards above this count as a success for Thompson sampling
SUCCESS_THRESHOLD = 0.5


class BanditStrategy(str, Enum):
    EPSILON_GREEDY = "epsilon_greedy"
    THOMPSON = "thompson"


@dataclass
class ArmStats:
    """Reward statistics for one policy arm."""

    policy_name: str
    trials: int = 0
    successes: int = 0
    total_reward: float = 0.0

    @property
    def failures(self) -> int:
        return self.trials - self.successes

    @property
    def average_reward(self) -> float:
        return self.total_reward / self.trials if self.trials else 0.0


@dataclass(frozen=True)
class BanditSelection:
    policy: ExplorationPolicy
    was_exploration: bool


def epsilon_greedy_select(
    arms: Sequence[ExplorationPolicy],
    stats: Dict[str, ArmStats],
    epsilon: float,
    rng: np.random.Generator,
) -> BanditSelection:
    if not arms:
        raise ValueError("No policies available")
    if rng.random() < epsilon:
        return BanditSelection(arms[int(rng.integers(len(arms)))], True)
    # max() returns the first maximal arm
    best = max(arms, key=lambda p: stats[p.name].average_reward)
    return BanditSelection(best, False)


def thompson_sampling_select(
    arms: Sequence[ExplorationPolicy],
    stats: Dict[str, ArmStats],
    rng: np.random.Generator,
) -> BanditSelection:
    if not arms:
        raise ValueError("No policies available")
    samples = [rng.beta(stats[p.name].successes + 1, stats[p.name].failures + 1) for p in arms]
    return BanditSelection(arms[int(np.argmax(samples))], False)


class BanditPolicyStore:
    """
    PolicyStore that chooses among policy arms with a multi-armed bandit.

    Args:
        policies: Arms to choose from (default: conservative, balanced, adventurous).
        strategy: "epsilon_greedy" or "thompson".
        epsilon: Exploration rate for epsilon-greedy, in [0, 1].
        seed: Seed for the random generator; fixed seeds give repeatable choices.
    """

    def __init__(
        self,
        policies: Optional[Sequence[ExplorationPolicy]] = None,
        strategy: str = BanditStrategy.EPSILON_GREEDY,
        epsilon: float = DEFAULT_EPSILON,
        seed: Optional[int] = None,
    ):
        arms = list(policies) if policies is not None else [CONSERVATIVE, BALANCED, ADVENTUROUS]
        if not arms:
            raise ValueError("BanditPolicyStore needs at least one policy")
        names = [p.name for p in arms]
        if len(set(names)) != len(names):
            raise ValueError(f"Policy names must be unique: {names}")
        if not 0.0 <= epsilon <= 1.0:
            raise ValueError(f"epsilon must be in [0, 1], got {epsilon}")

        self.arms: List[ExplorationPolicy] = arms
        self.strategy = BanditStrategy(strategy)
        self.epsilon = epsilon
        self._rng = np.random.default_rng(seed)
        self._stats: Dict[str, ArmStats] = {name: ArmStats(name) for name in names}
        self._pinned: Dict[str, ExplorationPolicy] = {}
        self._lock = threading.Lock()

    def set_policy(self, user_id: str, policy: ExplorationPolicy) -> None:
        """Pin a policy for one user; it is served instead of the bandit's choice."""
        with self._lock:
            self._pinned[user_id] = policy

    def clear_policy(self, user_id: str) -> None:
        with self._lock:
            self._pinned.pop(user_id, None)

    def select(self) -> BanditSelection:
        with self._lock:
            if self.strategy == BanditStrategy.THOMPSON:
                selection = thompson_sampling_select(self.arms, self._stats, self._rng)
            else:
                selection = epsilon_greedy_select(self.arms, self._stats, self.epsilon, self._rng)
        logger.debug(
            "[bandit] SELECT strategy=%s policy=%s exploration=%s",
            self.strategy.value, selection.policy.name, selection.was_exploration,
        )
        return selection

    def get_policy(self, user_id: str) -> Optional[ExplorationPolicy]:
        with self._lock:
            pinned = self._pinned.get(user_id)
        if pinned is not None:
            return pinned
        return self.select().policy

    def record_reward(self, policy_name: str, reward: float) -> None:
        """
        Record the outcome of a call served with policy_name.

        reward is clamped to [0, 1] (e.g. 1 for a save, 0.5 for a view, 0 for a skip).
        """
        reward = clamp(reward)
        with self._lock:
            stats = self._stats.get(policy_name)
            if stats is None:
                raise ValueError(f"Unknown policy arm: {policy_name}")
            stats.trials += 1
            stats.successes += 1 if reward > SUCCESS_THRESHOLD else 0
            stats.total_reward += reward
            trials, average = stats.trials, stats.average_reward
        logger.info("[bandit] REWARD policy=%s trials=%d avg_reward=%.3f", policy_name, trials, average)

    def stats(self) -> List[ArmStats]:
        """Snapshot of per-arm statistics, in arm order."""
        with self._lock:
            return [replace(self._stats[p.name]) for p in self.arms]

    def reset(self) -> None:
        with self._lock:
            self._stats = {p.name: ArmStats(p.name) for p in self.arms}
