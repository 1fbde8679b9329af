"""
Slate composition — Best, Wildcard, and Close & Easy from the debiased pool.

Each slate has its own rule and reads the pool without mutating it:
- Best: MMR-diversify to best_pool_size, then top slate_size by score.
- Wildcard: only when the policy allows it; novelty above
  max(wildcard_novelty_threshold, policy.novelty_target) AND score > floor,
  most novel first. Empty is a valid result.
- Close & Easy: stable re-sort by normalized distanceComfort + timeFit;
  items with no time fit are left out.

Every slate also carries a category/venue spread score for offline evaluation.
"""

from typing import Dict, List

from slate_engine.models.config import EngineConfig
from slate_engine.models.policy import ExplorationPolicy
from slate_engine.models.scoring import ScoredItem
from slate_engine.models.slate import Slate, SlateItem, SlateLabel
from slate_engine.models.weights import DISTANCE_COMFORT, NOVELTY, TIME_FIT, factor_maxima

from .diversity import select_diverse_top_k
from .reasons import compile_reasons


def _fraction(scored: ScoredItem, factor: str, maxima: Dict[str, float]) -> float:
    max_value = maxima.get(factor, 1.0)
    return scored.factor_scores.get(factor, 0.0) / max_value if max_value > 0 else 0.0


def select_best(pool: List[ScoredItem], config: EngineConfig) -> List[ScoredItem]:
    diversified = select_diverse_top_k(pool, k=config.best_pool_size, lambda_param=config.mmr_lambda)
    ranked = sorted(diversified, key=lambda s: s.score, reverse=True)
    return ranked[: config.slate_size]


def wildcard_novelty_threshold(policy: ExplorationPolicy, config: EngineConfig) -> float:
    """The policy's novelty target raises the configured floor, never lowers it."""
    return max(config.wildcard_novelty_threshold, policy.novelty_target)


def select_wildcard(
    pool: List[ScoredItem],
    policy: ExplorationPolicy,
    config: EngineConfig,
) -> List[ScoredItem]:
    """Items above the policy's novelty threshold and the score floor, most novel first."""
    if not policy.allow_wildcard:
        return []
    maxima = factor_maxima(config.scoring_mode, config.time_fit_max_points)
    threshold = wildcard_novelty_threshold(policy, config)
    picks = [
        s for s in pool
        if _fraction(s, NOVELTY, maxima) > threshold
        and s.score > config.wildcard_score_floor
    ]
    # Stable: equal novelty keeps debiased order
    picks.sort(key=lambda s: _fraction(s, NOVELTY, maxima), reverse=True)
    return picks[: config.slate_size]


def select_close_and_easy(pool: List[ScoredItem], config: EngineConfig) -> List[ScoredItem]:
    maxima = factor_maxima(config.scoring_mode, config.time_fit_max_points)
    in_window = [s for s in pool if s.factor_scores.get(TIME_FIT, 0.0) > 0]
    ranked = sorted(
        in_window,
        key=lambda s: _fraction(s, DISTANCE_COMFORT, maxima) + _fraction(s, TIME_FIT, maxima),
        reverse=True,
    )
    return ranked[: config.slate_size]


def slate_diversity(picks: List[ScoredItem]) -> float:
    """
    Mean of category spread (distinct categories / min(n, 5)) and venue spread
    (distinct venues / n). 0.0 for an empty slate.
    """
    if not picks:
        return 0.0
    categories = {s.item.category for s in picks}
    venues = {s.item.venue_name.strip().lower() for s in picks if s.item.has_venue}
    category_spread = min(1.0, len(categories) / min(len(picks), 5))
    venue_spread = len(venues) / len(picks)
    return (category_spread + venue_spread) / 2


def build_slate(label: SlateLabel, picks: List[ScoredItem], config: EngineConfig) -> Slate:
    """Attach 1-based priorities, reasons, and a factor map copy to each pick; score the spread."""
    items = [
        SlateItem(
            id=s.id,
            priority=idx + 1,
            score=s.score,
            reasons=compile_reasons(
                s.factor_scores,
                config.scoring_mode,
                max_reasons=config.max_reasons,
                time_fit_max_points=config.time_fit_max_points,
            ),
            factor_scores=dict(s.factor_scores),
        )
        for idx, s in enumerate(picks)
    ]
    return Slate(label=label, items=items, diversity=slate_diversity(picks))


def compose_slates(
    pool: List[ScoredItem],
    policy: ExplorationPolicy,
    config: EngineConfig,
) -> List[Slate]:
    """
    Build the three slates from a debiased, score-sorted pool.

    Always returns [Best, Wildcard, Close & Easy]; any of them may be empty.
    """
    return [
        build_slate(SlateLabel.BEST, select_best(pool, config), config),
        build_slate(SlateLabel.WILDCARD, select_wildcard(pool, policy, config), config),
        build_slate(SlateLabel.CLOSE_AND_EASY, select_close_and_easy(pool, config), config),
    ]
