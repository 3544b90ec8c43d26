"""Exceptions raised while building or evaluating schedules."""

from __future__ import annotations


class InvalidScheduleError(ValueError):
    """Raised when a schedule cannot be parsed or violates a field constraint."""

    def __init__(self, message: str, *, text: str | None = None) -> None:
        if text is not None:
            message = f"Schedule '{text}' is invalid: {message}"
        super().__init__(message)
        self.text = text


class ScheduleSyntaxError(ValueError):
    """Raised by the grammar when the schedule text does not match it."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} (at position {position})")
        self.position = position


class UnreachableScheduleError(RuntimeError):
    """Raised when no matching day was found within the search bound."""


__all__ = ["InvalidScheduleError", "ScheduleSyntaxError", "UnreachableScheduleError"]
