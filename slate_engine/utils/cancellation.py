"""
Cancellation and bounded calls.

CancellationToken is the caller-supplied signal checked while the pool is being
scored: it trips when cancel() is called or when its monotonic deadline passes.
call_with_timeout bounds a single collaborator call (policy lookup, augmentation
query) without blocking the caller past the timeout.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")

# Poll interval used while waiting on futures when no deadline is set.
_POLL_SECONDS = 0.01


class CancellationToken:
    """Cooperative cancellation: an explicit cancel() flag plus an optional deadline."""

    def __init__(self, deadline: Optional[float] = None):
        # deadline is a time.monotonic() value
        self._event = threading.Event()
        self._deadline = deadline

    @classmethod
    def with_timeout(cls, seconds: float) -> "CancellationToken":
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def wait_interval(self) -> float:
        """How long a gatherer may block before re-checking this token."""
        if self._deadline is None:
            return _POLL_SECONDS
        return max(0.0, min(_POLL_SECONDS, self._deadline - time.monotonic()))


def call_with_timeout(fn: Callable[..., T], timeout_seconds: float, *args: Any, **kwargs: Any) -> T:
    """
    Run fn in a worker thread and wait at most timeout_seconds for its result.

    Raises concurrent.futures.TimeoutError on timeout and re-raises whatever fn
    raised. A timed-out call is abandoned, not interrupted.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="slate-engine-call")
    try:
        future = executor.submit(fn, *args, **kwargs)
        return future.result(timeout=timeout_seconds)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
