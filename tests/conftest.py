"""Pytest helpers for path configuration and shared fixtures."""

from __future__ import annotations

import sys
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))


SAMPLE_CONFIG = """
timezone = "UTC"

[[schedules]]
name = "morning"
schedule = "every day 09:00"
description = "Daily morning run"

[[schedules]]
name = "new-york-digest"
schedule = "every monday 08:30"
timezone = "America/New_York"

[[schedules]]
name = "quarter-hour"
schedule = "every 15 mins synchronized"

[[schedules]]
name = "paused"
schedule = "1,15 of month 12:00"
enabled = false
"""


@pytest.fixture()
def new_york() -> ZoneInfo:
    return ZoneInfo("America/New_York")


@pytest.fixture()
def sample_config_path(tmp_path: Path) -> Path:
    """A valid configuration file with four schedules, one of them disabled."""

    config_file = tmp_path / "schedules.toml"
    config_file.write_text(SAMPLE_CONFIG.strip() + "\n", encoding="utf-8")
    return config_file
