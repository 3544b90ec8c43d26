"""Parse groc recurring schedules and compute their upcoming run times.

Typical use::

    from groctime import parse, next_matches

    schedule = parse("1st monday of jan,feb 10:00", "Europe/Berlin")
    runs = next_matches(schedule, datetime.now(UTC), 3)
"""

from .schedule import (
    IntervalSchedule,
    InvalidScheduleError,
    ScheduleSpecification,
    SpecificTimeSchedule,
    TimeOfDay,
    UnreachableScheduleError,
    next_match,
    next_matches,
    parse,
    to_display_string,
)

__all__ = [
    "IntervalSchedule",
    "InvalidScheduleError",
    "ScheduleSpecification",
    "SpecificTimeSchedule",
    "TimeOfDay",
    "UnreachableScheduleError",
    "next_match",
    "next_matches",
    "parse",
    "to_display_string",
]
