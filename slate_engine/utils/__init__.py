"""Shared utilities for similarity, time arithmetic, and cancellation."""

from .cancellation import CancellationToken, call_with_timeout
from .similarity import clamp, cosine_similarity
from .time import as_utc, minutes_between

__all__ = [
    "CancellationToken",
    "call_with_timeout",
    "clamp",
    "cosine_similarity",
    "as_utc",
    "minutes_between",
]
