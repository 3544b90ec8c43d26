"""Application-level configuration models."""

from __future__ import annotations

from pydantic import Field, field_validator, model_validator

from groctime.config.base import BaseConfig
from groctime.config.schedule import ScheduleEntryConfig
from groctime.schedule import resolve_timezone


class AppConfig(BaseConfig):
    """Top-level configuration: a default timezone and the named schedules."""

    timezone: str = Field("UTC", description="Default timezone for schedules without their own")
    schedules: list[ScheduleEntryConfig] = Field(
        default_factory=list,
        description="Named schedules",
    )

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        resolve_timezone(value)
        return value

    @model_validator(mode="after")
    def _validate_unique_names(self) -> "AppConfig":
        seen: set[str] = set()
        for entry in self.schedules:
            if entry.name in seen:
                raise ValueError(f"Duplicate schedule name '{entry.name}'")
            seen.add(entry.name)
        return self

    def get_schedule(self, name: str) -> ScheduleEntryConfig | None:
        return next((entry for entry in self.schedules if entry.name == name), None)


__all__ = ["AppConfig"]
