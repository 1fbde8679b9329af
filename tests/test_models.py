"""
Model and Configuration Tests

Covers validation that must fail at load time rather than per request:

- Price band derivation from min/max price, explicit bands, out-of-enum bands
- Time window ordering (start after end fails fast, never swapped)
- Profile signal detection (drives cold start)
- FeatureWeights: positive sum ≈ 1.0, single penalty, factor names per mode
- EngineConfig: nested-section from_dict, range checks

Run:
----
    pytest tests/test_models.py -v
"""

import json

import pytest
from pydantic import ValidationError

from conftest import NOW, at, make_item
from slate_engine.models.config import DEFAULT_CONFIG, EngineConfig, resolve_config
from slate_engine.models.intention import Profile, TimeWindow
from slate_engine.models.item import Category, PriceBand, price_band_from_prices
from slate_engine.models.weights import FeatureWeights, ScoringMode, factor_maxima


class TestPriceBand:
    """Price band derivation and ordering."""

    @pytest.mark.parametrize(
        "price_min,price_max,expected",
        [
            (None, None, None),
            (0, None, PriceBand.FREE),
            (0, 0, PriceBand.FREE),
            (10, 20, PriceBand.LOW),
            (None, 30, PriceBand.LOW),
            (40, 60, PriceBand.MID),
            (80, None, PriceBand.HIGH),
            (150, 200, PriceBand.LUXE),
            (100, 0, PriceBand.HIGH),
            (30, None, PriceBand.MID),
        ],
    )
    def test_derivation(self, price_min, price_max, expected):
        assert price_band_from_prices(price_min, price_max) == expected

    def test_zero_max_falls_back_to_min(self):
        assert price_band_from_prices(100, 0) == PriceBand.HIGH
        assert make_item(price_min=100, price_max=0).price_band == PriceBand.HIGH

    def test_rank_is_ordered(self):
        ranks = [b.rank for b in (PriceBand.FREE, PriceBand.LOW, PriceBand.MID, PriceBand.HIGH, PriceBand.LUXE)]
        assert ranks == sorted(ranks) == list(range(5))

    def test_item_derives_band_from_prices(self):
        assert make_item(price_min=80).price_band == PriceBand.HIGH

    def test_explicit_band_wins(self):
        assert make_item(price_min=80, price_band="low").price_band == PriceBand.LOW

    def test_out_of_enum_band_fails(self):
        with pytest.raises(ValidationError):
            make_item(price_band="CHEAP")


class TestCandidateItem:
    def test_category_is_case_insensitive(self):
        assert make_item(category="music").category == Category.MUSIC

    def test_unknown_category_fails(self):
        with pytest.raises(ValidationError):
            make_item(category="SKYDIVING")

    def test_missing_popularity_counters_are_zero(self):
        item = make_item(popularity={"views_24h": 4, "saves_24h": None})
        assert item.popularity.saves_24h == 0
        assert item.popularity.recent_exposure == 4

    def test_item_is_immutable(self):
        item = make_item()
        with pytest.raises(ValidationError):
            item.title = "changed"

    def test_naive_start_is_treated_as_utc(self):
        item = make_item(start=NOW.replace(tzinfo=None))
        assert item.start == NOW


class TestTimeWindow:
    def test_start_after_end_fails_fast(self):
        with pytest.raises(ValidationError, match="after end"):
            TimeWindow(start=at(hours=2), end=NOW)

    def test_empty_window_is_allowed(self):
        window = TimeWindow(start=NOW, end=NOW)
        assert not window.contains(NOW)

    def test_half_open(self):
        window = TimeWindow(start=NOW, end=at(hours=1))
        assert window.contains(NOW)
        assert window.contains(at(minutes=59))
        assert not window.contains(at(hours=1))


class TestProfile:
    def test_empty_profile_has_no_signal(self):
        assert not Profile().has_signal

    @pytest.mark.parametrize(
        "fields",
        [
            {"preferred_moods": ["jazz"]},
            {"budget_band": "mid"},
            {"social_style": "date"},
            {"preference_vector": [0.1, 0.2]},
        ],
    )
    def test_any_signal_counts(self, fields):
        assert Profile(**fields).has_signal

    def test_dislikes_alone_are_not_signal(self):
        assert not Profile(dislikes=["karaoke"]).has_signal


class TestFeatureWeights:
    """Weight sets fail at load time, not per request."""

    def test_raw_defaults_are_normalized_point_budgets(self):
        weights = FeatureWeights.defaults(ScoringMode.RAW_POINTS)
        assert weights.weights["categoryMatch"] == pytest.approx(0.30)
        assert weights.weights["socialFit"] == pytest.approx(0.10)
        assert weights.penalty_factor == "dislikeMatch"

    def test_normalized_defaults_sum_to_one(self):
        weights = FeatureWeights.defaults("normalized")
        assert sum(w for w in weights.weights.values() if w > 0) == pytest.approx(1.0)

    def test_positive_sum_must_be_near_one(self):
        with pytest.raises(ValidationError, match="sum to 1.0"):
            FeatureWeights(mode="raw_points", weights={"categoryMatch": 0.5, "timeFit": 0.3})

    def test_within_tolerance_is_accepted(self):
        FeatureWeights(mode="raw_points", weights={"categoryMatch": 0.505, "timeFit": 0.5})

    def test_single_penalty_only(self):
        with pytest.raises(ValidationError, match="negative"):
            FeatureWeights(
                mode="normalized",
                weights={"categoryMatch": 1.0, "dislikeMatch": -0.1, "popularity": -0.1},
            )

    def test_penalty_is_excluded_from_sum(self):
        weights = FeatureWeights(mode="normalized", weights={"categoryMatch": 1.0, "dislikeMatch": -0.5})
        assert weights.penalty_factor == "dislikeMatch"

    def test_unknown_factor_for_mode_fails(self):
        with pytest.raises(ValidationError, match="Unknown factors"):
            FeatureWeights(mode="raw_points", weights={"semanticSimilarity": 1.0})

    def test_from_point_budgets(self):
        weights = FeatureWeights.from_point_budgets("raw_points", {"categoryMatch": 60, "timeFit": 40})
        assert weights.weights == pytest.approx({"categoryMatch": 0.6, "timeFit": 0.4})

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "weights.json"
        path.write_text(json.dumps({
            "mode": "raw_points",
            "point_budgets": {"categoryMatch": 30, "vibeAlignment": 25, "timeFit": 20, "priceComfort": 15, "socialFit": 10},
            "penalty": {"dislikeMatch": -0.2},
        }))
        weights = FeatureWeights.from_json_file(path)
        assert weights.weights["vibeAlignment"] == pytest.approx(0.25)
        assert weights.weights["dislikeMatch"] == -0.2

    def test_factor_maxima_time_fit_is_configurable(self):
        assert factor_maxima(ScoringMode.RAW_POINTS, 25)["timeFit"] == 25.0
        assert set(factor_maxima(ScoringMode.NORMALIZED).values()) == {1.0}


class TestEngineConfig:
    def test_defaults(self):
        assert DEFAULT_CONFIG.scoring_mode == ScoringMode.RAW_POINTS
        assert DEFAULT_CONFIG.mmr_lambda == 0.7
        assert DEFAULT_CONFIG.debias_alpha == 0.3
        assert DEFAULT_CONFIG.wildcard_novelty_threshold == 0.4
        assert DEFAULT_CONFIG.wildcard_score_floor == 0.35
        assert resolve_config(None) is DEFAULT_CONFIG

    def test_from_dict_sections(self):
        config = EngineConfig.from_dict({
            "scoring": {"mode": "normalized", "time_fit_max_points": 25},
            "debias": {"alpha": 0.5},
            "diversity": {"lambda": 0.9, "pool_size": 12},
            "slates": {"size": 4, "wildcard_score_floor": 0.2},
            "cold_start": {"pool_threshold": 10, "max_pool_size": 40},
            "timeouts": {"policy_lookup_seconds": 0.5},
            "concurrency": {"max_workers": 2},
            "unknown_key": "ignored",
        })
        assert config.scoring_mode == ScoringMode.NORMALIZED
        assert config.time_fit_max_points == 25
        assert config.debias_alpha == 0.5
        assert config.mmr_lambda == 0.9
        assert config.best_pool_size == 12
        assert config.slate_size == 4
        assert config.wildcard_score_floor == 0.2
        assert config.cold_start_pool_threshold == 10
        assert config.max_pool_size == 40
        assert config.policy_lookup_timeout_seconds == 0.5
        assert config.max_workers == 2

    def test_flat_keys_are_accepted(self):
        assert EngineConfig.from_dict({"mmr_lambda": 0.5}).mmr_lambda == 0.5

    def test_lambda_out_of_range_fails(self):
        with pytest.raises(ValidationError):
            EngineConfig(mmr_lambda=1.5)

    def test_slate_size_cannot_exceed_best_pool(self):
        with pytest.raises(ValidationError, match="best_pool_size"):
            EngineConfig(slate_size=12, best_pool_size=10)
