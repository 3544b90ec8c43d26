"""Groc schedule parsing and next-occurrence computation."""

from __future__ import annotations

from .engine import MAX_MONTHS_TO_CONSIDER, next_match, next_matches
from .errors import InvalidScheduleError, ScheduleSyntaxError, UnreachableScheduleError
from .grammar import ParsedSchedule, parse_schedule
from .matching import MonthCycle, find_days
from .model import (
    END_OF_DAY,
    START_OF_DAY,
    IntervalSchedule,
    ScheduleSpecification,
    SpecificTimeSchedule,
    TimeOfDay,
    from_parsed,
    parse,
    to_display_string,
)
from .zones import resolve_timezone, timezone_name

__all__ = [
    "END_OF_DAY",
    "MAX_MONTHS_TO_CONSIDER",
    "START_OF_DAY",
    "IntervalSchedule",
    "InvalidScheduleError",
    "MonthCycle",
    "ParsedSchedule",
    "ScheduleSpecification",
    "ScheduleSyntaxError",
    "SpecificTimeSchedule",
    "TimeOfDay",
    "UnreachableScheduleError",
    "find_days",
    "from_parsed",
    "next_match",
    "next_matches",
    "parse",
    "parse_schedule",
    "resolve_timezone",
    "timezone_name",
    "to_display_string",
]
