# barbastore/core.py

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from .exceptions import InvalidDuration


@dataclass(frozen=True)
class Interval:
    """Half-open time interval [start, end)."""

    start: datetime
    end: datetime

    @property
    def minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


def make_interval(day: date, start_time: time, duration_minutes: int) -> Interval:
    if duration_minutes <= 0:
        raise InvalidDuration(f"Duration must be positive, got {duration_minutes} minutes")
    start = datetime.combine(day, start_time)
    return Interval(start=start, end=start + timedelta(minutes=duration_minutes))


def overlaps(a: Interval, b: Interval) -> bool:
    # back-to-back intervals (a.end == b.start) do not overlap
    return a.start < b.end and b.start < a.end
