"""
Shared fixtures and factories for slate engine tests.

All times are relative to a fixed NOW so time-fit buckets are deterministic.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import pytest

from slate_engine.models.config import EngineConfig
from slate_engine.models.intention import Intention, TimeWindow
from slate_engine.models.item import CandidateItem
from slate_engine.models.scoring import ScoredItem

NOW = datetime(2025, 6, 14, 18, 0, tzinfo=timezone.utc)


def at(hours: float = 0.0, minutes: float = 0.0) -> datetime:
    """NOW plus an offset."""
    return NOW + timedelta(hours=hours, minutes=minutes)


def make_item(item_id: str = "evt-1", **overrides: Any) -> CandidateItem:
    data: Dict[str, Any] = {
        "id": item_id,
        "title": f"Event {item_id}",
        "category": "OTHER",
        "start": at(hours=1),
        "city": "Brooklyn",
    }
    data.update(overrides)
    return CandidateItem.model_validate(data)


def make_intention(window_hours: float = 24.0, **overrides: Any) -> Intention:
    data: Dict[str, Any] = {
        "primary_goal": "something fun to do",
        "window": TimeWindow(start=NOW, end=at(hours=window_hours)),
        "city": "Brooklyn",
        "now": NOW,
    }
    data.update(overrides)
    return Intention.model_validate(data)


def make_scored(
    item_id: str,
    score: float,
    factors: Optional[Dict[str, float]] = None,
    **item_overrides: Any,
) -> ScoredItem:
    return ScoredItem(
        item=make_item(item_id, **item_overrides),
        base_score=score,
        score=score,
        factor_scores=factors or {},
    )


@pytest.fixture
def intention() -> Intention:
    return make_intention()


@pytest.fixture
def raw_config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def normalized_config() -> EngineConfig:
    return EngineConfig(scoring_mode="normalized")
