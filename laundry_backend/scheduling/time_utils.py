"""
Wall-clock time handling for the scheduler.

Halls publish their hours as naive "HH:MM" strings in the building's local
time, and appointments are stored as naive datetimes. Every parse, format and
minute calculation the scheduler performs goes through this module.
"""

from datetime import date, datetime, time, timedelta
from typing import NamedTuple

from laundry_backend.core.errors import InvalidHallHours

WALL_CLOCK_FORMAT = '%H:%M'
_TWELVE_HOUR_FORMATS = ('%I:%M %p', '%I:%M%p')


def parse_wall_clock(value: str) -> time:
    """Parse "21:15" or "9:15 PM" into a time."""
    normalized = value.strip().upper()
    if not normalized:
        raise ValueError('Time is required.')

    if normalized.endswith(('AM', 'PM')):
        for time_format in _TWELVE_HOUR_FORMATS:
            try:
                return datetime.strptime(normalized, time_format).time()
            except ValueError:
                continue
        raise ValueError(f'Invalid time: {value!r}')

    try:
        return datetime.strptime(normalized, WALL_CLOCK_FORMAT).time()
    except ValueError as exc:
        raise ValueError(f'Invalid time: {value!r}') from exc


def format_wall_clock(value: datetime | time) -> str:
    return value.strftime(WALL_CLOCK_FORMAT)


def at_wall_clock(day: date, value: str | time) -> datetime:
    slot_time = parse_wall_clock(value) if isinstance(value, str) else value
    return datetime.combine(day, slot_time.replace(second=0, microsecond=0))


def add_minutes(moment: datetime, minutes: int) -> datetime:
    return moment + timedelta(minutes=minutes)


class TimeWindow(NamedTuple):
    """A half-open interval [start, end)."""

    start: datetime
    end: datetime

    @classmethod
    def starting_at(cls, start: datetime, duration_mins: int) -> 'TimeWindow':
        return cls(start, add_minutes(start, duration_mins))

    def overlaps(self, other: 'TimeWindow') -> bool:
        # Strict on both ends so back-to-back intervals do not collide.
        return self.start < other.end and self.end > other.start

    def fits_within(self, other: 'TimeWindow') -> bool:
        return self.start >= other.start and self.end <= other.end

    def shifted(self, minutes: int) -> 'TimeWindow':
        return TimeWindow(add_minutes(self.start, minutes), add_minutes(self.end, minutes))


def operating_window(day: date, opening_time: str, closing_time: str) -> TimeWindow:
    try:
        opens = at_wall_clock(day, opening_time)
        closes = at_wall_clock(day, closing_time)
    except ValueError as exc:
        raise InvalidHallHours(f'Invalid hall hours: {opening_time!r} to {closing_time!r}.') from exc

    if opens >= closes:
        raise InvalidHallHours(f'Hall opening time {opening_time} must be before closing time {closing_time}.')

    return TimeWindow(opens, closes)


def iterate_slot_starts(window: TimeWindow, increment_minutes: int) -> list[datetime]:
    """Every increment-aligned start inside [window.start, window.end), in order."""
    starts: list[datetime] = []
    current = window.start.replace(second=0, microsecond=0)

    while current < window.end:
        starts.append(current)
        current += timedelta(minutes=increment_minutes)

    return starts
