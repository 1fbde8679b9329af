"""
Bandit Policy Store Tests

- Epsilon-greedy: exploits the best average reward, explores at rate epsilon
- Thompson sampling: prefers the arm with the better success record
- Rewards: clamped to [0, 1], success above 0.5, unknown arms rejected
- Pinned per-user policies win over the bandit
- Engine integration: bandit choice becomes policy_used; no user_id falls
  back to the level preset

Run:
----
    pytest tests/test_bandit.py -v
"""

import logging

import numpy as np
import pytest

from conftest import at, make_intention, make_item
from slate_engine import ExplorationPolicy, SlateEngine
from slate_engine.models.policy import ADVENTUROUS, BALANCED, CONSERVATIVE
from slate_engine.services.bandit_policy_store import (
    ArmStats,
    BanditPolicyStore,
    BanditStrategy,
    epsilon_greedy_select,
)


def _reward(store, name, reward, times):
    for _ in range(times):
        store.record_reward(name, reward)


class TestEpsilonGreedy:
    def test_untried_arms_pick_first(self):
        store = BanditPolicyStore(epsilon=0.0, seed=7)
        selection = store.select()
        assert selection.policy == CONSERVATIVE
        assert not selection.was_exploration

    def test_exploits_best_average_reward(self):
        store = BanditPolicyStore(epsilon=0.0, seed=7)
        _reward(store, "conservative", 0.2, 3)
        _reward(store, "adventurous", 0.9, 3)
        for _ in range(10):
            assert store.select().policy == ADVENTUROUS

    def test_full_epsilon_always_explores(self):
        store = BanditPolicyStore(epsilon=1.0, seed=3)
        _reward(store, "adventurous", 1.0, 5)
        selections = [store.select() for _ in range(60)]
        assert all(s.was_exploration for s in selections)
        assert {s.policy.name for s in selections} == {"conservative", "balanced", "adventurous"}

    def test_same_seed_same_choices(self):
        a = BanditPolicyStore(epsilon=0.5, seed=42)
        b = BanditPolicyStore(epsilon=0.5, seed=42)
        assert [a.select().policy.name for _ in range(20)] == [b.select().policy.name for _ in range(20)]

    def test_no_arms(self):
        with pytest.raises(ValueError, match="No policies"):
            epsilon_greedy_select([], {}, 0.25, np.random.default_rng(0))


class TestThompsonSampling:
    def test_prefers_rewarded_arm(self):
        store = BanditPolicyStore(strategy="thompson", seed=11)
        _reward(store, "conservative", 0.0, 30)
        _reward(store, "balanced", 0.0, 30)
        _reward(store, "adventurous", 1.0, 30)
        assert store.strategy == BanditStrategy.THOMPSON
        for _ in range(20):
            selection = store.select()
            assert selection.policy == ADVENTUROUS
            assert not selection.was_exploration

    def test_unknown_strategy_fails(self):
        with pytest.raises(ValueError):
            BanditPolicyStore(strategy="ucb")


class TestRewards:
    def test_stats_update(self):
        store = BanditPolicyStore(seed=1)
        store.record_reward("balanced", 1.0)
        store.record_reward("balanced", 0.5)
        store.record_reward("balanced", 0.0)
        stats = {s.policy_name: s for s in store.stats()}
        assert stats["balanced"].trials == 3
        assert stats["balanced"].successes == 1
        assert stats["balanced"].failures == 2
        assert stats["balanced"].total_reward == pytest.approx(1.5)
        assert stats["balanced"].average_reward == pytest.approx(0.5)
        assert stats["conservative"] == ArmStats("conservative")

    def test_reward_is_clamped(self):
        store = BanditPolicyStore(seed=1)
        store.record_reward("adventurous", 3.0)
        store.record_reward("adventurous", -2.0)
        stats = {s.policy_name: s for s in store.stats()}["adventurous"]
        assert stats.total_reward == 1.0
        assert stats.successes == 1

    def test_unknown_arm_fails(self):
        with pytest.raises(ValueError, match="Unknown policy arm"):
            BanditPolicyStore().record_reward("reckless", 1.0)

    def test_stats_are_snapshots(self):
        store = BanditPolicyStore(seed=1)
        snapshot = store.stats()
        store.record_reward("balanced", 1.0)
        assert all(s.trials == 0 for s in snapshot)

    def test_reset(self):
        store = BanditPolicyStore(seed=1)
        store.record_reward("balanced", 1.0)
        store.reset()
        assert all(s.trials == 0 for s in store.stats())

    def test_reward_is_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="slate_engine"):
            BanditPolicyStore(seed=1).record_reward("balanced", 1.0)
        assert any("[bandit] REWARD policy=balanced trials=1" in r.getMessage() for r in caplog.records)


class TestConstruction:
    def test_default_arms_are_presets(self):
        assert BanditPolicyStore().arms == [CONSERVATIVE, BALANCED, ADVENTUROUS]

    def test_empty_arms_fail(self):
        with pytest.raises(ValueError, match="at least one"):
            BanditPolicyStore(policies=[])

    def test_duplicate_names_fail(self):
        with pytest.raises(ValueError, match="unique"):
            BanditPolicyStore(policies=[BALANCED, BALANCED])

    def test_epsilon_out_of_range_fails(self):
        with pytest.raises(ValueError, match="epsilon"):
            BanditPolicyStore(epsilon=1.5)


class TestPinnedPolicy:
    def test_pinned_policy_wins(self):
        pinned = ExplorationPolicy(name="learned", novelty_target=0.6, allow_wildcard=False)
        store = BanditPolicyStore(epsilon=0.0, seed=1)
        store.set_policy("u1", pinned)
        assert store.get_policy("u1") == pinned
        assert store.get_policy("u2") == CONSERVATIVE

    def test_clear_policy(self):
        store = BanditPolicyStore(epsilon=0.0, seed=1)
        store.set_policy("u1", ADVENTUROUS)
        store.clear_policy("u1")
        assert store.get_policy("u1") == CONSERVATIVE


class TestEngineIntegration:
    def _call(self, store, **kwargs):
        candidates = [make_item("music", category="MUSIC", start=at(minutes=10), price_min=0)]
        return SlateEngine(policy_store=store).recommend(candidates, make_intention(), **kwargs)

    def test_bandit_choice_is_policy_used(self):
        store = BanditPolicyStore(epsilon=0.0, seed=5)
        _reward(store, "adventurous", 1.0, 4)
        _reward(store, "balanced", 0.1, 4)
        result = self._call(store, exploration_level="LOW", user_id="u1")
        assert result.policy_used.name == "adventurous"
        assert result.warnings == []

    def test_no_user_falls_back_to_level_preset(self):
        store = BanditPolicyStore(epsilon=0.0, seed=5)
        _reward(store, "adventurous", 1.0, 4)
        result = self._call(store, exploration_level="LOW")
        assert result.policy_used.name == "conservative"

    def test_reward_loop(self):
        store = BanditPolicyStore(epsilon=0.0, seed=5)
        result = self._call(store, user_id="u1")
        store.record_reward(result.policy_used.name, 1.0)
        assert {s.policy_name: s for s in store.stats()}[result.policy_used.name].trials == 1
        assert self._call(store, user_id="u1").policy_used.name == result.policy_used.name
