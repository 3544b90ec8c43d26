from __future__ import annotations

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

from groctime.schedule.zones import local_instants, resolve_earliest, resolve_standard, standard_offset, utc_offset

DUBLIN = ZoneInfo("Europe/Dublin")


def test_local_instants_in_repeated_hour() -> None:
    assert local_instants(datetime(2024, 10, 27, 1, 30), DUBLIN) == [
        datetime(2024, 10, 27, 0, 30, tzinfo=UTC),
        datetime(2024, 10, 27, 1, 30, tzinfo=UTC),
    ]
    assert local_instants(datetime(2025, 3, 30, 1, 30), DUBLIN) == []


def test_standard_offset_uses_smaller_offset() -> None:
    # Winter in Dublin is the negative daylight offset in the tz database.
    assert standard_offset(datetime(2024, 7, 1, 12, 0), DUBLIN) == timedelta(hours=1)
    assert standard_offset(datetime(2024, 12, 1, 12, 0), DUBLIN) == timedelta(0)
    assert standard_offset(datetime(2024, 10, 27, 1, 30), DUBLIN) == timedelta(0)
    assert standard_offset(datetime(2025, 3, 30, 1, 30), DUBLIN) == timedelta(0)


def test_resolve_standard_prefers_later_reading() -> None:
    assert resolve_standard(datetime(2024, 10, 27, 1, 30), DUBLIN) == datetime(2024, 10, 27, 1, 30, tzinfo=UTC)
    # Read as GMT, 01:30 lands past the gap at 02:30 IST.
    assert resolve_standard(datetime(2025, 3, 30, 1, 30), DUBLIN) == datetime(2025, 3, 30, 1, 30, tzinfo=UTC)


def test_resolve_earliest_rounds_gap_down() -> None:
    assert resolve_earliest(datetime(2024, 10, 27, 1, 30), DUBLIN) == datetime(2024, 10, 27, 0, 30, tzinfo=UTC)
    assert resolve_earliest(datetime(2025, 3, 30, 1, 30), DUBLIN) == datetime(2025, 3, 30, 1, 0, tzinfo=UTC)


def test_utc_offset() -> None:
    assert utc_offset(datetime(2024, 7, 1, tzinfo=UTC), DUBLIN) == timedelta(hours=1)
    assert utc_offset(datetime(2024, 12, 1, tzinfo=UTC), DUBLIN) == timedelta(0)
