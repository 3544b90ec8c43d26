"""Next-occurrence computation for schedule specifications.

All public functions take and return aware ``datetime`` values; results are
in UTC. Naive inputs are read as UTC.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo

from loguru import logger

from .errors import UnreachableScheduleError
from .matching import MonthCycle, find_days
from .model import IntervalSchedule, ScheduleSpecification, SpecificTimeSchedule, TimeOfDay
from .zones import local_instants, resolve_earliest, resolve_standard, to_utc, utc_offset

# Enough months to see every month of the year in and out of a leap year.
MAX_MONTHS_TO_CONSIDER = 48

_ONE_DAY = timedelta(days=1)


def next_match(schedule: ScheduleSpecification, after: datetime) -> datetime:
    """Return the first instant strictly after ``after`` that matches ``schedule``."""

    start = to_utc(after)
    if isinstance(schedule, IntervalSchedule):
        if schedule.is_ranged:
            return _next_ranged_interval(schedule, start)
        return _next_interval(schedule, start)
    if isinstance(schedule, SpecificTimeSchedule):
        return _next_specific_time(schedule, start)
    raise TypeError(f"Unsupported schedule type: {type(schedule).__name__}")


def next_matches(schedule: ScheduleSpecification, after: datetime, count: int) -> list[datetime]:
    """Return the next ``count`` matches, each one searched from the previous."""

    if count < 0:
        raise ValueError(f"count must not be negative, got {count}")
    results: list[datetime] = []
    current = after
    for _ in range(count):
        current = next_match(schedule, current)
        results.append(current)
    return results


def _next_interval(schedule: IntervalSchedule, start: datetime) -> datetime:
    result = start + timedelta(seconds=schedule.seconds)
    return result.replace(second=0, microsecond=0)


def _next_ranged_interval(schedule: IntervalSchedule, now: datetime) -> datetime:
    assert schedule.start is not None
    zone = schedule.timezone

    # Runs are counted from the most recent range start.
    range_start = _previous_boundary(now, schedule.start, zone)
    step = timedelta(seconds=schedule.seconds)
    steps = (now - range_start + step) // step
    candidate = range_start + steps * step

    next_range_start = _next_boundary(now, schedule.start, zone)
    if (
        _in_range(schedule, now)
        and _in_range(schedule, candidate)
        and candidate < next_range_start
    ):
        return candidate
    return next_range_start


def _in_range(schedule: IntervalSchedule, moment: datetime) -> bool:
    """True when ``moment`` lies within a start..end window, end inclusive."""

    assert schedule.start is not None and schedule.end is not None
    previous_start = _previous_boundary(moment, schedule.start, schedule.timezone)
    previous_end = _previous_boundary(moment, schedule.end, schedule.timezone)
    if previous_start > previous_end:
        return True
    return moment == previous_end


def _combine(day: date, time_of_day: TimeOfDay) -> datetime:
    return datetime(day.year, day.month, day.day, time_of_day.hour, time_of_day.minute)


def _previous_boundary(moment: datetime, boundary: TimeOfDay, zone: tzinfo) -> datetime:
    """Latest instant at or before ``moment`` whose local time is ``boundary``."""

    day = moment.astimezone(zone).date()
    while True:
        result = resolve_earliest(_combine(day, boundary), zone)
        if result <= moment:
            return result
        day -= _ONE_DAY


def _next_boundary(moment: datetime, boundary: TimeOfDay, zone: tzinfo) -> datetime:
    """Earliest instant after ``moment`` whose local time is ``boundary``."""

    day = moment.astimezone(zone).date()
    while True:
        result = resolve_earliest(_combine(day, boundary), zone)
        if result > moment:
            return result
        day += _ONE_DAY


def _next_specific_time(schedule: SpecificTimeSchedule, start: datetime) -> datetime:
    zone = schedule.timezone
    target = schedule.time
    local = start.astimezone(zone)

    months_considered = 0
    for month, wraps in MonthCycle(local.month, schedule.months):
        months_considered += 1
        year = local.year + wraps
        days = find_days(schedule, year, month)
        if not days:
            if months_considered >= MAX_MONTHS_TO_CONSIDER:
                raise UnreachableScheduleError(
                    f"No matching days for '{schedule}' within {MAX_MONTHS_TO_CONSIDER} months"
                )
            continue

        if year == local.year and month == local.month:
            days = [day for day in days if day >= local.day]
            if days and days[0] == local.day and _already_passed_today(local.date(), target, start, zone):
                days = days[1:]

        for day in days:
            wall_clock = datetime(year, month, day, target.hour, target.minute)
            candidate = _candidate_instant(schedule, wall_clock, start)
            if candidate is not None:
                return candidate

    raise AssertionError("MonthCycle is endless")  # pragma: no cover


def _already_passed_today(today: date, target: TimeOfDay, start: datetime, zone: tzinfo) -> bool:
    """Whether every instant of today's run at ``target`` is at or before ``start``.

    Inside the repeated hour of a fall-back change the second reading of the
    time can still be ahead. A local time that does not exist today counts as
    passed.
    """

    return all(instant <= start for instant in local_instants(_combine(today, target), zone))


def _candidate_instant(schedule: SpecificTimeSchedule, wall_clock: datetime, start: datetime) -> datetime | None:
    """Resolve one candidate day's run, or ``None`` if the local time is skipped."""

    zone = schedule.timezone
    candidate = resolve_standard(wall_clock, zone)

    # Resolution prefers the smaller offset, so the first of two repeated
    # times is lost when the start was on the larger one. Keep the earlier
    # reading if it is still after the start.
    instants = local_instants(wall_clock, zone)
    if len(instants) == 2 and utc_offset(start, zone) > utc_offset(candidate, zone) and instants[0] > start:
        logger.debug("Using daylight-time occurrence {} for {}", instants[0].isoformat(), wall_clock)
        candidate = instants[0]

    if candidate.astimezone(zone).hour != schedule.hour:
        logger.debug("Skipping nonexistent local time {} in {}", wall_clock, schedule.timezone_name)
        return None
    if candidate <= start:
        return None
    return candidate


__all__ = ["MAX_MONTHS_TO_CONSIDER", "next_match", "next_matches"]
