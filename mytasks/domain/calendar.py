from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Callable
from zoneinfo import ZoneInfo


def start_of_day(now: datetime) -> date:
    """Calendar day of ``now`` in its own time zone (naive values are local wall time)."""
    return now.date()


def as_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def next_midnight(now: datetime) -> datetime:
    following = start_of_day(now) + timedelta(days=1)
    return datetime.combine(following, time.min, tzinfo=now.tzinfo)


def make_clock(timezone: str | None = None) -> Callable[[], datetime]:
    if not timezone:
        return datetime.now
    zone = ZoneInfo(timezone)
    return lambda: datetime.now(zone)


def seconds_until_next_midnight(now: datetime) -> float:
    """Real elapsed seconds until the next local midnight, DST changes included."""
    return next_midnight(now).timestamp() - now.timestamp()
