"""
Slate Composition Tests

- Best: MMR-diversified pool, top slate_size by score, priorities from 1
- Wildcard: novelty and score thresholds, disabled by the conservative policy,
  novelty threshold raised by the policy novelty target
- Close & Easy: distance + time fit ordering, items without time fit excluded
- Always three slates in a fixed order, every item with 1-3 reasons
- Slate spread (category/venue) and slate overlap (Jaccard of item ids)

Run:
----
    pytest tests/test_composer.py -v
"""

from conftest import make_scored
from slate_engine.models.config import EngineConfig
from slate_engine.models.policy import ADVENTUROUS, BALANCED, CONSERVATIVE
from slate_engine.models.slate import RecommendationResult, Slate, SlateItem, SlateLabel, slate_overlap
from slate_engine.stages.composer import (
    compose_slates,
    select_best,
    select_close_and_easy,
    select_wildcard,
    slate_diversity,
    wildcard_novelty_threshold,
)
from slate_engine.stages.reasons import REASON_VOCABULARY

CONFIG = EngineConfig()


def _raw(score, item_id, category="OTHER", time_fit=20.0, distance=5.0, novelty=0.5, **item_overrides):
    factors = {
        "categoryMatch": 15.0,
        "vibeAlignment": 0.0,
        "timeFit": time_fit,
        "priceComfort": 10.0,
        "socialFit": 5.0,
        "distanceComfort": distance,
        "novelty": novelty,
        "dislikeMatch": 0.0,
    }
    return make_scored(item_id, score, factors, category=category, **item_overrides)


class TestBest:
    def test_top_five_by_score(self):
        categories = ["MUSIC", "FOOD", "ARTS", "COMEDY", "DANCE", "THEATRE", "FAMILY"]
        pool = [_raw(0.9 - i * 0.1, f"e{i}", category=c) for i, c in enumerate(categories)]
        best = select_best(pool, CONFIG)
        assert [s.id for s in best] == ["e0", "e1", "e2", "e3", "e4"]

    def test_small_pool(self):
        pool = [_raw(0.8, "a"), _raw(0.4, "b")]
        assert [s.id for s in select_best(pool, CONFIG)] == ["a", "b"]

    def test_sorted_by_score_after_diversification(self):
        pool = [_raw(0.9, "m1", "MUSIC"), _raw(0.85, "m2", "MUSIC"), _raw(0.3, "f1", "FOOD")]
        config = EngineConfig(best_pool_size=2, slate_size=2, mmr_lambda=0.0)
        best = select_best(pool, config)
        assert [s.id for s in best] == ["m1", "f1"]


class TestWildcard:
    def test_novel_and_good_enough(self):
        pool = [
            _raw(0.9, "familiar", novelty=0.2),
            _raw(0.6, "novel", novelty=0.8),
            _raw(0.3, "novel-weak", novelty=0.9),
        ]
        assert [s.id for s in select_wildcard(pool, BALANCED, CONFIG)] == ["novel"]

    def test_thresholds_are_strict(self):
        pool = [_raw(0.6, "at-novelty", novelty=0.4), _raw(0.35, "at-floor", novelty=0.8)]
        assert select_wildcard(pool, BALANCED, CONFIG) == []

    def test_conservative_policy_disables(self):
        pool = [_raw(0.9, "novel", novelty=0.9)]
        assert select_wildcard(pool, CONSERVATIVE, CONFIG) == []

    def test_may_overlap_best(self):
        pool = [_raw(0.9, "both", novelty=0.9)]
        assert select_best(pool, CONFIG)[0].id == select_wildcard(pool, BALANCED, CONFIG)[0].id

    def test_policy_novelty_target_raises_threshold(self):
        assert wildcard_novelty_threshold(BALANCED, CONFIG) == 0.4
        assert wildcard_novelty_threshold(ADVENTUROUS, CONFIG) == 0.5
        assert wildcard_novelty_threshold(ADVENTUROUS, EngineConfig(wildcard_novelty_threshold=0.7)) == 0.7

    def test_balanced_and_adventurous_differ(self):
        pool = [
            _raw(0.6, "e0", novelty=0.45),
            _raw(0.6, "e1", novelty=0.9),
            _raw(0.6, "e2", novelty=0.6),
            _raw(0.6, "e3", novelty=0.5),
        ]
        assert [s.id for s in select_wildcard(pool, BALANCED, CONFIG)] == ["e1", "e2", "e3", "e0"]
        assert [s.id for s in select_wildcard(pool, ADVENTUROUS, CONFIG)] == ["e1", "e2"]


class TestCloseAndEasy:
    def test_distance_and_time_order(self):
        pool = [
            _raw(0.9, "far", time_fit=20.0, distance=1.0),
            _raw(0.5, "near-soon", time_fit=20.0, distance=10.0),
            _raw(0.7, "near-later", time_fit=10.0, distance=10.0),
        ]
        assert [s.id for s in select_close_and_easy(pool, CONFIG)] == ["near-soon", "near-later", "far"]

    def test_excludes_items_without_time_fit(self):
        pool = [_raw(0.9, "outside", time_fit=0.0, distance=10.0), _raw(0.2, "inside", time_fit=5.0)]
        assert [s.id for s in select_close_and_easy(pool, CONFIG)] == ["inside"]

    def test_ties_keep_pool_order(self):
        pool = [_raw(0.9, "a"), _raw(0.8, "b"), _raw(0.7, "c")]
        assert [s.id for s in select_close_and_easy(pool, CONFIG)] == ["a", "b", "c"]


class TestComposeSlates:
    def test_three_slates_in_order(self):
        slates = compose_slates([], BALANCED, CONFIG)
        assert [s.label for s in slates] == [SlateLabel.BEST, SlateLabel.WILDCARD, SlateLabel.CLOSE_AND_EASY]
        assert all(s.items == [] for s in slates)

    def test_items_carry_priority_reasons_and_factors(self):
        pool = [_raw(0.9, "a", "MUSIC", novelty=0.8), _raw(0.6, "b", "FOOD")]
        for slate in compose_slates(pool, BALANCED, CONFIG):
            assert [i.priority for i in slate.items] == list(range(1, len(slate.items) + 1))
            for entry in slate.items:
                assert 1 <= len(entry.reasons) <= 3
                assert set(entry.reasons) <= REASON_VOCABULARY
                assert entry.factor_scores["timeFit"] == 20.0

    def test_pool_is_not_mutated(self):
        pool = [_raw(0.9, "a"), _raw(0.6, "b")]
        snapshot = [s.model_copy() for s in pool]
        compose_slates(pool, BALANCED, CONFIG)
        assert pool == snapshot


def _slate(label, ids):
    items = [
        SlateItem(id=i, priority=n + 1, score=0.5, reasons=["Recommended for you"], factor_scores={})
        for n, i in enumerate(ids)
    ]
    return Slate(label=label, items=items)


class TestSlateDiagnostics:
    """Spread within a slate and overlap between slates."""

    def test_empty_slate_has_no_spread(self):
        assert slate_diversity([]) == 0.0

    def test_category_and_venue_spread(self):
        picks = [
            _raw(0.9, "a", "MUSIC", venue_name="Blue Note"),
            _raw(0.8, "b", "MUSIC", venue_name="blue note "),
            _raw(0.7, "c", "FOOD"),
            _raw(0.6, "d", "ARTS", venue_name="Pier 17"),
        ]
        # categories 3/4, venues 2/4
        assert slate_diversity(picks) == 0.625

    def test_category_spread_is_capped(self):
        categories = ["MUSIC", "FOOD", "ARTS", "COMEDY", "DANCE", "THEATRE"]
        picks = [_raw(0.5, f"e{i}", c, venue_name=f"Venue {i}") for i, c in enumerate(categories)]
        assert slate_diversity(picks) == 1.0

    def test_compose_fills_diversity(self):
        pool = [_raw(0.9, "a", "MUSIC", venue_name="A"), _raw(0.6, "b", "FOOD", venue_name="B")]
        best, wildcard, close = compose_slates(pool, CONSERVATIVE, CONFIG)
        assert best.diversity == 1.0
        assert wildcard.diversity == 0.0

    def test_overlap_is_jaccard(self):
        a = _slate(SlateLabel.BEST, ["x", "y", "z"])
        b = _slate(SlateLabel.WILDCARD, ["y", "z", "w"])
        assert slate_overlap(a, b) == 0.5
        assert slate_overlap(a, a) == 1.0

    def test_overlap_of_empty_slates(self):
        assert slate_overlap(_slate(SlateLabel.BEST, []), _slate(SlateLabel.WILDCARD, [])) == 0.0

    def test_result_overlap_by_label(self):
        result = RecommendationResult(
            slates=[_slate(SlateLabel.BEST, ["x", "y"]), _slate(SlateLabel.WILDCARD, ["y"])],
            policy_used={"name": "balanced", "novelty_target": 0.3, "allow_wildcard": True},
            trace_id="t-1",
        )
        assert result.overlap(SlateLabel.BEST, SlateLabel.WILDCARD) == 0.5
        assert result.overlap(SlateLabel.BEST, SlateLabel.CLOSE_AND_EASY) == 0.0
