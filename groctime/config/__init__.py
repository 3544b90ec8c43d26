"""Configuration namespace for groctime."""

from __future__ import annotations

from .app import AppConfig
from .base import BaseConfig, load_config
from .schedule import ScheduleEntryConfig

__all__ = [
    "BaseConfig",
    "AppConfig",
    "load_config",
    "ScheduleEntryConfig",
]
