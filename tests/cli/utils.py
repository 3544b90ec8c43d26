"""Shared helpers for CLI tests."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path

from loguru import logger
from pytest import MonkeyPatch

from groctime.config import AppConfig, ScheduleEntryConfig


@contextmanager
def logger_to_stderr(level: str = "INFO"):
    """Temporarily route Loguru output to stderr for assertion."""

    handler_id = logger.add(sys.stderr, level=level)
    try:
        yield
    finally:
        logger.remove(handler_id)


def make_app_config(*, timezone: str = "UTC", include_disabled: bool = False) -> AppConfig:
    """Construct an in-memory AppConfig tailored for CLI tests."""

    schedules = [
        ScheduleEntryConfig(name="daily", schedule="every day 09:00"),
        ScheduleEntryConfig(
            name="berlin-monthly",
            schedule="1st monday of month 10:00",
            timezone="Europe/Berlin",
            description="First Monday in Berlin",
        ),
    ]
    if include_disabled:
        schedules.append(ScheduleEntryConfig(name="off", schedule="every 2 hours", enabled=False))
    return AppConfig(timezone=timezone, schedules=schedules)


def patch_load_config(monkeypatch: MonkeyPatch, config: AppConfig) -> None:
    """Force the CLI to return the provided config instead of reading from disk."""

    def _fake_load_config(model: object, path: Path) -> AppConfig:
        if model is not AppConfig:
            raise AssertionError("Unexpected config model request")
        return config

    monkeypatch.setattr("groctime.cli.load_config", _fake_load_config)
