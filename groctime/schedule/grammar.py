"""Tokenizer and recursive-descent parser for groc schedule text.

The grammar only extracts fields; range checks and cross-field rules are
applied when the fields are turned into a schedule (see ``model``).

Accepted forms::

    every day 09:00
    1st,third mon,wed of jan,feb 17:00
    2nd sunday of second month of quarter 23:25
    1,15 of month 12:00
    every 5 minutes
    every 2 hours from 10:00 to 18:00
    every 30 mins synchronized
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .errors import ScheduleSyntaxError

ALL_ORDINALS = frozenset(range(1, 6))
ALL_WEEKDAYS = frozenset(range(7))
ALL_MONTHS = frozenset(range(1, 13))

ORDINAL_WORDS: dict[str, int] = {
    "1st": 1,
    "first": 1,
    "2nd": 2,
    "second": 2,
    "3rd": 3,
    "third": 3,
    "4th": 4,
    "fourth": 4,
    "5th": 5,
    "fifth": 5,
}

WEEKDAY_WORDS: dict[str, int] = {
    "sun": 0,
    "sunday": 0,
    "mon": 1,
    "monday": 1,
    "tue": 2,
    "tuesday": 2,
    "wed": 3,
    "wednesday": 3,
    "thu": 4,
    "thursday": 4,
    "fri": 5,
    "friday": 5,
    "sat": 6,
    "saturday": 6,
}

MONTH_WORDS: dict[str, int] = {
    "jan": 1,
    "january": 1,
    "feb": 2,
    "february": 2,
    "mar": 3,
    "march": 3,
    "apr": 4,
    "april": 4,
    "may": 5,
    "jun": 6,
    "june": 6,
    "jul": 7,
    "july": 7,
    "aug": 8,
    "august": 8,
    "sep": 9,
    "september": 9,
    "oct": 10,
    "october": 10,
    "nov": 11,
    "november": 11,
    "dec": 12,
    "december": 12,
}

PERIOD_WORDS: dict[str, str] = {
    "hours": "hours",
    "hour": "hours",
    "minutes": "minutes",
    "minute": "minutes",
    "mins": "minutes",
    "min": "minutes",
}

_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
    | (?P<time>\d+:\d+)
    | (?P<ordinal>\d+(?:st|nd|rd|th))(?![a-z])
    | (?P<int>\d+)(?![a-z])
    | (?P<word>[a-z]+)
    | (?P<comma>,)
    """,
    re.VERBOSE,
)


@dataclass(frozen=True, slots=True)
class Token:
    kind: str
    value: str
    position: int


@dataclass(slots=True)
class ParsedSchedule:
    """Raw fields extracted from schedule text."""

    ordinals: set[int] = field(default_factory=set)
    weekdays: set[int] = field(default_factory=set)
    months: set[int] = field(default_factory=set)
    monthdays: set[int] = field(default_factory=set)
    time: str | None = None
    interval: int | None = None
    period: str = ""
    start_time: str | None = None
    end_time: str | None = None
    synchronized: bool = False

    @property
    def is_interval(self) -> bool:
        return bool(self.period)


def tokenize(text: str) -> list[Token]:
    """Split lower-cased schedule text into tokens, dropping whitespace."""

    lowered = text.lower()
    tokens: list[Token] = []
    position = 0
    while position < len(lowered):
        match = _TOKEN_RE.match(lowered, position)
        if match is None:
            raise ScheduleSyntaxError(f"unexpected character {lowered[position]!r}", position)
        kind = match.lastgroup
        assert kind is not None
        if kind != "space":
            tokens.append(Token(kind, match.group(kind), position))
        position = match.end()
    return tokens


def parse_schedule(text: str) -> ParsedSchedule:
    """Parse ``text`` into its raw fields or raise :class:`ScheduleSyntaxError`."""

    return _Parser(text).timespec()


class _Parser:
    def __init__(self, text: str) -> None:
        self._text = text
        self._tokens = tokenize(text)
        self._index = 0

    # token helpers

    def _peek(self, offset: int = 0) -> Token | None:
        index = self._index + offset
        if index < len(self._tokens):
            return self._tokens[index]
        return None

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            raise self._error("unexpected end of schedule")
        self._index += 1
        return token

    def _at_word(self, *words: str) -> bool:
        token = self._peek()
        return token is not None and token.kind == "word" and token.value in words

    def _at_kind(self, kind: str) -> bool:
        token = self._peek()
        return token is not None and token.kind == kind

    def _accept_comma(self) -> bool:
        if self._at_kind("comma"):
            self._index += 1
            return True
        return False

    def _expect_word(self, word: str) -> None:
        if not self._at_word(word):
            raise self._error(f"expected '{word}'")
        self._index += 1

    def _error(self, message: str) -> ScheduleSyntaxError:
        token = self._peek()
        if token is None:
            return ScheduleSyntaxError(message, len(self._text))
        return ScheduleSyntaxError(f"{message}, got '{token.value}'", token.position)

    # grammar rules

    def timespec(self) -> ParsedSchedule:
        if not self._tokens:
            raise ScheduleSyntaxError("schedule is empty", 0)
        next_token = self._peek(1)
        if self._at_word("every") and next_token is not None and next_token.kind == "int":
            result = self._interval()
        else:
            result = self._specific()
        if self._peek() is not None:
            raise self._error("unexpected trailing input")
        return result

    def _interval(self) -> ParsedSchedule:
        result = ParsedSchedule()
        self._expect_word("every")
        result.interval = int(self._advance().value)
        token = self._peek()
        if token is None or token.kind != "word" or token.value not in PERIOD_WORDS:
            raise self._error("expected 'hours' or 'minutes'")
        self._index += 1
        result.period = PERIOD_WORDS[token.value]

        if self._at_word("from"):
            self._index += 1
            result.start_time = self._time()
            self._expect_word("to")
            result.end_time = self._time()
            if self._at_word("synchronized"):
                raise self._error("a time range cannot be combined with 'synchronized'")
        elif self._at_word("synchronized"):
            self._index += 1
            result.synchronized = True
            if self._at_word("from"):
                raise self._error("a time range cannot be combined with 'synchronized'")
        return result

    def _specific(self) -> ParsedSchedule:
        result = ParsedSchedule()

        if self._at_word("every"):
            self._index += 1
            result.ordinals = set(ALL_ORDINALS)
        elif self._at_ordinal():
            result.ordinals = self._ordinal_list()

        if self._at_word("day"):
            self._index += 1
            result.weekdays = set(ALL_WEEKDAYS)
        elif self._at_word(*WEEKDAY_WORDS):
            result.weekdays = self._name_list(WEEKDAY_WORDS)

        if self._at_kind("int"):
            result.monthdays = self._int_list()

        if self._at_word("of"):
            self._index += 1
            result.months = self._month_spec()

        if not self._at_kind("time"):
            raise self._error("expected a time of day (HH:MM)")
        result.time = self._time()

        if result.ordinals and not result.weekdays:
            raise ScheduleSyntaxError("an ordinal must be followed by a weekday", 0)
        if not result.weekdays and not result.monthdays:
            raise ScheduleSyntaxError("expected a weekday or a day of the month", 0)
        if result.weekdays and not result.ordinals:
            result.ordinals = set(ALL_ORDINALS)
        if not result.months:
            result.months = set(ALL_MONTHS)
        return result

    def _at_ordinal(self) -> bool:
        token = self._peek()
        if token is None:
            return False
        return token.kind in ("ordinal", "word") and token.value in ORDINAL_WORDS

    def _ordinal_list(self) -> set[int]:
        values: set[int] = set()
        while True:
            if not self._at_ordinal():
                raise self._error("expected an ordinal (1st..5th)")
            values.add(ORDINAL_WORDS[self._advance().value])
            if not self._accept_comma():
                return values

    def _name_list(self, names: dict[str, int]) -> set[int]:
        values: set[int] = set()
        while True:
            token = self._peek()
            if token is None or token.kind != "word" or token.value not in names:
                raise self._error("expected a name")
            self._index += 1
            values.add(names[token.value])
            if not self._accept_comma():
                return values

    def _int_list(self) -> set[int]:
        values: set[int] = set()
        while True:
            if not self._at_kind("int"):
                raise self._error("expected a day of the month")
            values.add(int(self._advance().value))
            if not self._accept_comma():
                return values

    def _month_spec(self) -> set[int]:
        if self._at_word("month"):
            self._index += 1
            return set(ALL_MONTHS)
        if self._at_word("quarter"):
            self._index += 1
            return {1, 4, 7, 10}
        if self._at_word(*MONTH_WORDS):
            return self._name_list(MONTH_WORDS)
        if self._at_ordinal():
            offsets = self._ordinal_list()
            if max(offsets) > 3:
                raise ScheduleSyntaxError("a quarter only has a first, second and third month", 0)
            self._expect_word("month")
            self._expect_word("of")
            self._expect_word("quarter")
            return {quarter * 3 + offset for quarter in range(4) for offset in offsets}
        raise self._error("expected a month, 'month' or 'quarter'")

    def _time(self) -> str:
        token = self._peek()
        if token is None or token.kind != "time":
            raise self._error("expected a time of day (HH:MM)")
        hour_text, minute_text = token.value.split(":")
        if len(hour_text) > 2 or len(minute_text) != 2:
            raise self._error("time must be written as HH:MM")
        if int(hour_text) > 23 or int(minute_text) > 59:
            raise self._error("time is out of range 00:00..23:59")
        self._index += 1
        return token.value


__all__ = [
    "ALL_MONTHS",
    "ALL_ORDINALS",
    "ALL_WEEKDAYS",
    "MONTH_WORDS",
    "ORDINAL_WORDS",
    "PERIOD_WORDS",
    "WEEKDAY_WORDS",
    "ParsedSchedule",
    "Token",
    "parse_schedule",
    "tokenize",
]
