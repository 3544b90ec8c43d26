"""Calendar helpers: matching days within a month and cycling over months."""

from __future__ import annotations

import calendar
from datetime import date
from typing import TYPE_CHECKING, Iterable, Iterator

if TYPE_CHECKING:
    from .model import SpecificTimeSchedule

# Any leap year works; only February's length depends on it.
_LEAP_YEAR = 2000


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def max_days_in_month(month: int) -> int:
    """Longest possible length of ``month``, counting February as 29 days."""

    return last_day_of_month(_LEAP_YEAR, month)


def first_weekday(year: int, month: int) -> int:
    """Weekday of the first of the month with 0=Sunday .. 6=Saturday."""

    return (date(year, month, 1).weekday() + 1) % 7


def find_days(schedule: SpecificTimeSchedule, year: int, month: int) -> list[int]:
    """Return the ascending days of ``year``/``month`` selected by ``schedule``.

    With explicit month days those that exist in the month are kept; otherwise
    each (ordinal, weekday) pair is turned into a concrete day, e.g. the 2nd
    tuesday, and days past the end of the month are dropped.
    """

    last_day = last_day_of_month(year, month)
    days: set[int] = set()

    if schedule.monthdays:
        days.update(day for day in schedule.monthdays if day <= last_day)
        return sorted(days)

    first = first_weekday(year, month)
    for ordinal in schedule.ordinals:
        for weekday in schedule.weekdays:
            day = (weekday - first) % 7 + 1 + 7 * (ordinal - 1)
            if day <= last_day:
                days.add(day)
    return sorted(days)


class MonthCycle(Iterator[tuple[int, int]]):
    """Endless iterator over candidate months, counting year wraps.

    Each step yields ``(month, wraps)`` where ``month`` is the smallest
    candidate at or after the cursor. When the candidates for the current year
    are used up the cursor restarts at the smallest month and ``wraps`` grows
    by one.

    >>> cycle = MonthCycle(11, [2, 11])
    >>> [next(cycle) for _ in range(3)]
    [(11, 0), (2, 1), (11, 1)]
    """

    def __init__(self, start: int, months: Iterable[int]) -> None:
        self._matches = sorted(set(months))
        if not self._matches:
            raise ValueError("MonthCycle needs at least one candidate month")
        self._cursor = start
        self._remaining = list(self._matches)
        self._wraps = 0

    def __iter__(self) -> MonthCycle:
        return self

    def __next__(self) -> tuple[int, int]:
        while self._remaining and self._remaining[0] < self._cursor:
            self._remaining.pop(0)
        if not self._remaining:
            self._remaining = list(self._matches)
            self._wraps += 1
        self._cursor = self._remaining.pop(0)
        return self._cursor, self._wraps


__all__ = ["MonthCycle", "find_days", "first_weekday", "last_day_of_month", "max_days_in_month"]
