# barbastore/availability.py

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable, Iterator, Optional

from .core import Interval, make_interval, overlaps
from .domain import Appointment
from .exceptions import InvalidBusinessHours, InvalidDuration


@dataclass(frozen=True)
class BusinessHours:
    open: time
    close: time

    def __post_init__(self):
        if self.close <= self.open:
            raise InvalidBusinessHours(
                f"Business hours must close after they open ({self.open:%H:%M}-{self.close:%H:%M})"
            )

    def window(self, day: date) -> Interval:
        return Interval(start=datetime.combine(day, self.open), end=datetime.combine(day, self.close))

    def admits(self, interval: Interval) -> bool:
        window = self.window(interval.start.date())
        return window.start <= interval.start and interval.end <= window.end


class SlotSequence:
    """Bookable start times for one barber on one day.

    Candidates are the slot grid from opening time plus the end of every
    active booking; a candidate is kept when the service fits before
    closing and does not overlap a booking.

    Inputs are validated and busy intervals are snapshotted when the
    sequence is built; every iteration walks the day again, so the
    sequence can be consumed more than once.
    """

    def __init__(
        self,
        day: date,
        duration_minutes: int,
        busy: Iterable[Interval],
        business_hours: BusinessHours,
        slot_minutes: int,
        clock: Callable[[], datetime] = datetime.now,
    ):
        if slot_minutes <= 0:
            raise InvalidDuration(f"Slot granularity must be positive, got {slot_minutes} minutes")
        # validates the duration
        make_interval(day, business_hours.open, duration_minutes)

        self.day = day
        self.duration_minutes = duration_minutes
        self.business_hours = business_hours
        self.slot_minutes = slot_minutes
        self._busy = tuple(busy)
        self._clock = clock

    def _candidates(self) -> list[datetime]:
        window = self.business_hours.window(self.day)
        step = timedelta(minutes=self.slot_minutes)
        length = timedelta(minutes=self.duration_minutes)

        now = self._clock()
        earliest = now if now.date() == self.day else None

        candidates = set()
        current = window.start
        while current + length <= window.end:
            candidates.add(current)
            current += step
        # also offer the moment each booking ends, so the gap right after it is usable
        for b in self._busy:
            if window.start <= b.end and b.end + length <= window.end:
                candidates.add(b.end)

        return sorted(c for c in candidates if earliest is None or c >= earliest)

    def __iter__(self) -> Iterator[time]:
        length = timedelta(minutes=self.duration_minutes)
        for start in self._candidates():
            candidate = Interval(start=start, end=start + length)
            if not any(overlaps(candidate, b) for b in self._busy):
                yield start.time()

    def __contains__(self, start_time: time) -> bool:
        return any(slot == start_time for slot in self)

    def is_candidate(self, start_time: time) -> bool:
        """True when the start is on the grid or right after a booking, and not already past.

        Overlaps are not considered; a taken candidate is a conflict, not a bad start.
        """
        return datetime.combine(self.day, start_time) in self._candidates()

    def as_strings(self) -> list[str]:
        return [slot.strftime("%H:%M") for slot in self]


def busy_intervals(staff_id: int, day: date, appointments: Iterable[Appointment]) -> list[Interval]:
    busy = []
    for a in appointments:
        if a.staff_id != staff_id:
            continue
        if a.date != day:
            continue
        # rejected/cancelled appointments free their slot right away
        if not a.occupies_time:
            continue
        busy.append(a.interval)
    return busy


def available_slots(
    staff_id: int,
    day: date,
    service_duration: int,
    existing_appointments: Iterable[Appointment],
    business_hours: BusinessHours,
    slot_granularity: int = 30,
    now: Optional[Callable[[], datetime]] = None,
) -> SlotSequence:
    return SlotSequence(
        day=day,
        duration_minutes=service_duration,
        busy=busy_intervals(staff_id, day, existing_appointments),
        business_hours=business_hours,
        slot_minutes=slot_granularity,
        clock=now or datetime.now,
    )
