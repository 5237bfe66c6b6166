"""Clock abstraction and wall-clock conversions.

The engine works on naive UTC datetimes, matching what the database
stores, so interval arithmetic is in real elapsed time. Hour-of-day and
quiet hours are local concepts: those read the local wall clock through
utc_to_local and convert any derived boundary back with local_to_utc.
"""

from datetime import datetime, timedelta, timezone
from typing import Protocol
from zoneinfo import ZoneInfo

UTC = ZoneInfo("UTC")


class Clock(Protocol):
    def now(self) -> datetime:
        """Current naive UTC time."""
        ...


class SystemClock:
    """Reads the real time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)


class FixedClock:
    """Clock pinned to a given instant, for tests and replays."""

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, **delta) -> None:
        self.current = self.current + timedelta(**delta)


def utc_to_local(dt: datetime, tz: ZoneInfo) -> datetime:
    """Naive UTC (as stored) to naive local wall-clock time."""
    return dt.replace(tzinfo=timezone.utc).astimezone(tz).replace(tzinfo=None)


def local_to_utc(dt: datetime, tz: ZoneInfo) -> datetime:
    """Naive local wall-clock time to naive UTC for storage."""
    return dt.replace(tzinfo=tz).astimezone(timezone.utc).replace(tzinfo=None)
