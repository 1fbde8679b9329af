"""
Time helpers: UTC normalization and minute arithmetic shared by the stages.
"""

from datetime import datetime, timezone


def as_utc(dt: datetime) -> datetime:
    """Return dt as an aware UTC datetime (naive values are assumed to be UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def minutes_between(earlier: datetime, later: datetime) -> float:
    """Signed minutes from earlier to later."""
    return (as_utc(later) - as_utc(earlier)).total_seconds() / 60.0
