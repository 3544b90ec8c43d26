"""Configuration models for named schedules."""

from __future__ import annotations

from pydantic import AliasChoices, Field, field_validator, model_validator

from groctime.config.base import BaseConfig
from groctime.schedule import ScheduleSpecification, parse, resolve_timezone


class ScheduleEntryConfig(BaseConfig):
    """A single named schedule."""

    name: str = Field(..., min_length=1, description="Unique identifier for the schedule")
    schedule: str = Field(
        ...,
        description="Groc schedule text, e.g. 'every day 09:00' or 'every 5 minutes'",
        validation_alias=AliasChoices("schedule", "cron"),
    )
    timezone: str | None = Field(
        None,
        description="IANA timezone for this schedule (defaults to the top-level timezone)",
    )
    description: str = Field("", description="Free-form description shown in listings")
    enabled: bool = Field(True, description="Whether the schedule is active")

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str | None) -> str | None:
        if value is not None:
            resolve_timezone(value)
        return value

    @model_validator(mode="after")
    def _validate_schedule(self) -> "ScheduleEntryConfig":
        parse(self.schedule, self.timezone)
        return self

    def build(self, default_timezone: str | None = None) -> ScheduleSpecification:
        """Parse the schedule in its own timezone, falling back to ``default_timezone``."""

        return parse(self.schedule, self.timezone or default_timezone)


__all__ = ["ScheduleEntryConfig"]
