"""
Trace Sink abstraction.

Fire-and-forget record of what one call did: trace id, chosen policy, and
whether the profile / persisted policy / cold start were used. The engine
delivers records on a background worker, so a sink may block or fail without
delaying or affecting the returned slates.
"""

import logging
import threading
from typing import List, Protocol

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class TraceRecord(BaseModel):
    trace_id: str
    policy_name: str
    used_profile: bool
    used_persisted_policy: bool
    cold_start: bool
    augmented_count: int = 0
    scored_count: int = 0
    cancelled: bool = False
    warnings: List[str] = Field(default_factory=list)


class TraceSink(Protocol):
    """Protocol for trace persistence/logging."""

    def record(self, record: TraceRecord) -> None:
        ...


class NullTraceSink:
    """Trace sink that drops everything."""

    def record(self, record: TraceRecord) -> None:
        pass


class LoggingTraceSink:
    """Trace sink that writes one log line per call."""

    def __init__(self, level: int = logging.INFO):
        self.level = level

    def record(self, record: TraceRecord) -> None:
        logger.log(
            self.level,
            "[trace] trace_id=%s policy=%s used_profile=%s used_persisted_policy=%s "
            "cold_start=%s augmented=%d scored=%d cancelled=%s warnings=%d",
            record.trace_id,
            record.policy_name,
            record.used_profile,
            record.used_persisted_policy,
            record.cold_start,
            record.augmented_count,
            record.scored_count,
            record.cancelled,
            len(record.warnings),
        )


class InMemoryTraceSink:
    """Trace sink that keeps records in a list. Used by tests."""

    def __init__(self):
        self.records: List[TraceRecord] = []
        self._arrived = threading.Condition()

    def record(self, record: TraceRecord) -> None:
        with self._arrived:
            self.records.append(record)
            self._arrived.notify_all()

    def wait_for(self, count: int = 1, timeout: float = 1.0) -> bool:
        """Block until at least count records have arrived; False on timeout."""
        with self._arrived:
            return self._arrived.wait_for(lambda: len(self.records) >= count, timeout=timeout)
