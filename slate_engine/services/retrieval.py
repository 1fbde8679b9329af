"""
Candidate Retriever abstraction.

Returns CandidateItems for a city + time window + optional filters. How a
retriever finds them is its own concern. Implementations: in-memory (tests,
evaluation) and ChainedRetriever, an explicit ordered fallback over other
retrievers (e.g. category → related category → keyword → generic popular).
"""

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from slate_engine.models.intention import TimeWindow
from slate_engine.models.item import CandidateItem

logger = logging.getLogger(__name__)


class CandidateRetriever(Protocol):
    """Protocol for candidate retrieval."""

    def retrieve(
        self,
        city: Optional[str],
        window: TimeWindow,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[CandidateItem]:
        """
        Return candidates in the city whose start falls inside the window.
        filters=None means no personalization filter (the cold-start query).
        """
        ...


class InMemoryRetriever:
    """
    Retriever over a fixed list of items.

    Supported filters: "categories" (iterable of Category or names) and
    "max_price_rank" (int, inclusive).
    """

    def __init__(self, items: Sequence[CandidateItem]):
        self._items = list(items)

    def retrieve(
        self,
        city: Optional[str],
        window: TimeWindow,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[CandidateItem]:
        filters = filters or {}
        categories = {str(getattr(c, "value", c)).upper() for c in filters.get("categories", [])}
        max_price_rank = filters.get("max_price_rank")
        results = []
        for item in self._items:
            if city and item.city and item.city.lower() != city.lower():
                continue
            if not window.contains(item.start):
                continue
            if categories and item.category.value not in categories:
                continue
            if (
                max_price_rank is not None
                and item.price_band is not None
                and item.price_band.rank > max_price_rank
            ):
                continue
            results.append(item)
        return results


class ChainedRetriever:
    """
    Ordered list of (name, retriever) strategies; the first non-empty result wins.

    Later strategies are not called once one returns items. A failing strategy
    is logged and skipped.
    """

    def __init__(self, strategies: Sequence[Tuple[str, CandidateRetriever]]):
        if not strategies:
            raise ValueError("ChainedRetriever needs at least one strategy")
        self.strategies = list(strategies)
        self.last_strategy: Optional[str] = None

    def retrieve(
        self,
        city: Optional[str],
        window: TimeWindow,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[CandidateItem]:
        self.last_strategy = None
        for name, retriever in self.strategies:
            try:
                items = retriever.retrieve(city, window, filters)
            except Exception as e:
                logger.warning("[retrieval] STRATEGY_FAILED strategy=%s error=%s", name, e)
                continue
            if items:
                logger.debug("[retrieval] strategy=%s returned=%d", name, len(items))
                self.last_strategy = name
                return list(items)
        return []
