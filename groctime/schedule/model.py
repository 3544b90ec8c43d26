"""Immutable schedule specifications and their construction from text."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Iterable

from loguru import logger

from .errors import InvalidScheduleError, ScheduleSyntaxError
from .grammar import ALL_MONTHS, ParsedSchedule, parse_schedule
from .matching import max_days_in_month
from .zones import resolve_timezone, timezone_name

ORDINAL_NAMES = ("1st", "2nd", "3rd", "4th", "5th")
WEEKDAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")
MONTH_NAMES = ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")
PERIODS = {"hours": 3600, "minutes": 60}
SECONDS_PER_DAY = 86400


@dataclass(frozen=True, slots=True, order=True)
class TimeOfDay:
    """A wall-clock hour and minute."""

    hour: int
    minute: int

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23 or not 0 <= self.minute <= 59:
            raise InvalidScheduleError(
                f"time must be between 00:00 and 23:59, got {self.hour}:{self.minute:02d}"
            )

    @classmethod
    def parse(cls, value: str | TimeOfDay) -> TimeOfDay:
        """Build from ``"HH:MM"``; an existing :class:`TimeOfDay` is returned as is."""

        if isinstance(value, TimeOfDay):
            return value
        hour_text, sep, minute_text = value.strip().partition(":")
        if not sep or not hour_text.isdigit() or not minute_text.isdigit():
            raise InvalidScheduleError(f"time must be written as HH:MM, got '{value}'")
        return cls(int(hour_text), int(minute_text))

    def __str__(self) -> str:
        return f"{self.hour}:{self.minute:02d}"


START_OF_DAY = TimeOfDay(0, 0)
END_OF_DAY = TimeOfDay(23, 59)


def _check_range(values: frozenset[int], lower: int, upper: int, name: str) -> None:
    for value in values:
        if value < lower or value > upper:
            raise InvalidScheduleError(
                f"{name} must be between {lower} and {upper} inclusive, got {sorted(values)}"
            )


def _join_names(values: Iterable[int], offset: int, names: tuple[str, ...]) -> str:
    selected = set(values)
    return ",".join(name for index, name in enumerate(names) if index + offset in selected)


class ScheduleSpecification:
    """Common base for the two kinds of schedule.

    Instances are immutable and compare by value; use :func:`parse` or one of
    the structured constructors to build them.
    """

    __slots__ = ()

    timezone: tzinfo

    @property
    def is_interval(self) -> bool:
        raise NotImplementedError

    @property
    def timezone_name(self) -> str:
        return timezone_name(self.timezone)

    def to_display_string(self) -> str:
        return str(self)


@dataclass(frozen=True, eq=False, kw_only=True)
class SpecificTimeSchedule(ScheduleSpecification):
    """Fires at a fixed time of day on the selected days.

    Days are chosen either by ordinal and weekday (``2nd tue``) or by explicit
    day of month (``1,15``), restricted to ``months``.
    """

    ordinals: frozenset[int] = frozenset()
    months: frozenset[int] = frozenset()
    weekdays: frozenset[int] = frozenset()
    monthdays: frozenset[int] = frozenset()
    time: TimeOfDay
    timezone: tzinfo = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "ordinals", frozenset(self.ordinals))
        object.__setattr__(self, "months", frozenset(self.months) or ALL_MONTHS)
        object.__setattr__(self, "weekdays", frozenset(self.weekdays))
        object.__setattr__(self, "monthdays", frozenset(self.monthdays))
        object.__setattr__(self, "time", TimeOfDay.parse(self.time))
        object.__setattr__(self, "timezone", resolve_timezone(self.timezone))

        if self.weekdays and self.monthdays:
            raise InvalidScheduleError("cannot specify both monthdays and weekdays")

        _check_range(self.ordinals, 1, 5, "ordinals")
        _check_range(self.weekdays, 0, 6, "weekdays")
        _check_range(self.months, 1, 12, "months")
        _check_range(self.monthdays, 1, 31, "day of month")

        if not self.monthdays and not (self.ordinals and self.weekdays):
            raise InvalidScheduleError("either monthdays or both ordinals and weekdays are required")

        if self.monthdays:
            first_day = min(self.monthdays)
            if not any(first_day <= max_days_in_month(month) for month in self.months):
                raise InvalidScheduleError(
                    f"invalid day of month, got day {first_day} of month {max(self.months)}"
                )

    @property
    def is_interval(self) -> bool:
        return False

    @property
    def hour(self) -> int:
        return self.time.hour

    @property
    def minute(self) -> int:
        return self.time.minute

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScheduleSpecification):
            return NotImplemented
        if not isinstance(other, SpecificTimeSchedule):
            return False
        return (
            self.ordinals == other.ordinals
            and self.months == other.months
            and self.monthdays == other.monthdays
            and self.weekdays == other.weekdays
            and self.time == other.time
            and self.timezone == other.timezone
        )

    def __hash__(self) -> int:
        return hash(
            (self.timezone, self.ordinals, self.months, self.monthdays, self.weekdays, self.time)
        )

    def __str__(self) -> str:
        parts: list[str] = []
        if len(self.ordinals) == len(ORDINAL_NAMES):
            parts.append("every")
        elif self.ordinals:
            parts.append(_join_names(self.ordinals, 1, ORDINAL_NAMES))
        if self.weekdays:
            if len(self.weekdays) == len(WEEKDAY_NAMES):
                parts.append("day")
            else:
                parts.append(_join_names(self.weekdays, 0, WEEKDAY_NAMES))
        if self.monthdays:
            parts.append(",".join(str(day) for day in sorted(self.monthdays)))
        if len(self.months) < len(MONTH_NAMES):
            parts.append("of " + _join_names(self.months, 1, MONTH_NAMES))
        elif not self.weekdays:
            parts.append("of month")
        parts.append(str(self.time))
        return " ".join(parts)


@dataclass(frozen=True, eq=False, kw_only=True)
class IntervalSchedule(ScheduleSpecification):
    """Fires every ``interval`` hours or minutes.

    With a ``start``/``end`` range the runs are counted from ``start`` each day
    and stop at ``end``. ``synchronized`` without a range is shorthand for the
    range 00:00-23:59, which locks runs to multiples of the interval since
    midnight.
    """

    interval: int
    period: str = "minutes"
    start: TimeOfDay | None = None
    end: TimeOfDay | None = None
    synchronized: bool = False
    timezone: tzinfo = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "timezone", resolve_timezone(self.timezone))
        if self.period not in PERIODS:
            raise InvalidScheduleError(f"period must be 'hours' or 'minutes', got '{self.period}'")
        if self.interval <= 0:
            raise InvalidScheduleError("interval must be greater than zero")

        if (self.start is None) != (self.end is None):
            raise InvalidScheduleError("a time range needs both a start and an end")

        if self.start is not None and self.end is not None:
            object.__setattr__(self, "start", TimeOfDay.parse(self.start))
            object.__setattr__(self, "end", TimeOfDay.parse(self.end))
        elif self.synchronized:
            if SECONDS_PER_DAY % self.seconds != 0:
                raise InvalidScheduleError(
                    "can only use synchronized for periods that divide evenly into 24 hours"
                )
            object.__setattr__(self, "start", START_OF_DAY)
            object.__setattr__(self, "end", END_OF_DAY)

    @property
    def is_interval(self) -> bool:
        return True

    @property
    def seconds(self) -> int:
        return self.interval * PERIODS[self.period]

    @property
    def is_ranged(self) -> bool:
        return self.start is not None

    @property
    def is_full_day(self) -> bool:
        return self.start == START_OF_DAY and self.end == END_OF_DAY

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScheduleSpecification):
            return NotImplemented
        if not isinstance(other, IntervalSchedule):
            return False
        if self.seconds != other.seconds:
            return False
        if not self.is_ranged:
            return not other.is_ranged
        return (
            self.start == other.start
            and self.end == other.end
            and (self.timezone == other.timezone or self.is_full_day)
        )

    def __hash__(self) -> int:
        if not self.is_ranged:
            return hash((self.seconds,))
        if self.is_full_day:
            return hash((self.seconds, self.start, self.end))
        return hash((self.seconds, self.start, self.end, self.timezone))

    def __str__(self) -> str:
        text = f"every {self.interval} {self.period}"
        if self.is_ranged:
            if self.is_full_day:
                text += " synchronized"
            else:
                text += f" from {self.start} to {self.end}"
        return text


def from_parsed(parsed: ParsedSchedule, timezone: str | tzinfo | None = None) -> ScheduleSpecification:
    """Build a specification from fields extracted by the grammar."""

    if parsed.is_interval:
        if parsed.interval is None:
            raise InvalidScheduleError(
                f"appears to be periodic ('every...') but is missing an interval, period='{parsed.period}'"
            )
        return IntervalSchedule(
            interval=parsed.interval,
            period=parsed.period,
            start=TimeOfDay.parse(parsed.start_time) if parsed.start_time else None,
            end=TimeOfDay.parse(parsed.end_time) if parsed.end_time else None,
            synchronized=parsed.synchronized,
            timezone=timezone,
        )
    if parsed.time is None:
        raise InvalidScheduleError("a time of day is required")
    return SpecificTimeSchedule(
        ordinals=frozenset(parsed.ordinals),
        months=frozenset(parsed.months),
        weekdays=frozenset(parsed.weekdays),
        monthdays=frozenset(parsed.monthdays),
        time=TimeOfDay.parse(parsed.time),
        timezone=timezone,
    )


def parse(text: str, timezone: str | tzinfo | None = None) -> ScheduleSpecification:
    """Parse schedule ``text`` in ``timezone`` (UTC when omitted).

    Raises :class:`InvalidScheduleError` for syntax errors and for field
    values that cannot form a schedule, e.g. ``31 of feb 10:00``.
    """

    try:
        parsed = parse_schedule(text)
    except ScheduleSyntaxError as exc:
        logger.debug("Rejected schedule {!r}: {}", text, exc)
        raise InvalidScheduleError(str(exc), text=text) from exc

    try:
        return from_parsed(parsed, timezone)
    except InvalidScheduleError as exc:
        logger.debug("Rejected schedule {!r}: {}", text, exc)
        raise InvalidScheduleError(str(exc), text=text) from exc


def to_display_string(schedule: ScheduleSpecification) -> str:
    return str(schedule)


__all__ = [
    "END_OF_DAY",
    "START_OF_DAY",
    "IntervalSchedule",
    "ScheduleSpecification",
    "SpecificTimeSchedule",
    "TimeOfDay",
    "from_parsed",
    "parse",
    "to_display_string",
]
