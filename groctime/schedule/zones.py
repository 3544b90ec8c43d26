"""Timezone helpers for turning local wall-clock times into UTC instants.

A local ``(date, hour, minute)`` can map to zero, one or two instants when a
zone changes its offset. The helpers below enumerate the instants explicitly
and apply one of two resolution policies:

* :func:`resolve_earliest` picks the earlier instant of an ambiguous time and
  rounds a nonexistent time down to the hour, interpreted in standard time.
* :func:`resolve_standard` prefers the standard-time (smaller offset) instant of an ambiguous
  time and reads a nonexistent time with the standard offset, which pushes it
  past the gap (02:30 becomes 03:30 on a 02:00 -> 03:00 change).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import InvalidScheduleError

UTC_ZONE = ZoneInfo("UTC")
_ZERO = timedelta(0)


def resolve_timezone(value: str | tzinfo | None) -> tzinfo:
    """Return a ``tzinfo`` for an IANA name, an existing ``tzinfo`` or ``None`` (UTC)."""

    if value is None or value is timezone.utc:
        return UTC_ZONE
    if isinstance(value, tzinfo):
        return value
    name = value.strip()
    if not name:
        return UTC_ZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise InvalidScheduleError(f"unknown timezone '{value}'") from exc


def timezone_name(zone: tzinfo) -> str:
    key = getattr(zone, "key", None)
    if key:
        return str(key)
    return str(zone)


def to_utc(moment: datetime) -> datetime:
    """Normalise ``moment`` to an aware UTC datetime; naive values are read as UTC."""

    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def utc_offset(moment: datetime, zone: tzinfo) -> timedelta:
    """UTC offset in effect at ``moment`` in ``zone``."""

    return moment.astimezone(zone).utcoffset() or _ZERO


def local_instants(naive: datetime, zone: tzinfo) -> list[datetime]:
    """All UTC instants whose wall-clock rendering in ``zone`` equals ``naive``."""

    found: list[datetime] = []
    for fold in (0, 1):
        candidate = naive.replace(tzinfo=zone, fold=fold).astimezone(timezone.utc)
        if candidate.astimezone(zone).replace(tzinfo=None) != naive:
            continue
        if candidate not in found:
            found.append(candidate)
    return sorted(found)


def standard_offset(naive: datetime, zone: tzinfo) -> timedelta:
    """The smaller of the two UTC offsets that can apply around ``naive``.

    Both ``fold`` readings agree away from an offset change. Inside a gap or
    a repeated interval they give the offsets before and after the change,
    and the smaller one is standard time. ``dst()`` is not consulted: the tz
    database marks some zones' winter time as a negative daylight offset.
    """

    return min(naive.replace(tzinfo=zone, fold=fold).utcoffset() or _ZERO for fold in (0, 1))


def resolve_earliest(naive: datetime, zone: tzinfo) -> datetime:
    instants = local_instants(naive, zone)
    if instants:
        return instants[0]
    rounded = naive.replace(minute=0, second=0, microsecond=0)
    return (rounded - standard_offset(naive, zone)).replace(tzinfo=timezone.utc)


def resolve_standard(naive: datetime, zone: tzinfo) -> datetime:
    instants = local_instants(naive, zone)
    if instants:
        # The smaller offset of a repeated time gives the later instant.
        return instants[-1]
    return (naive - standard_offset(naive, zone)).replace(tzinfo=timezone.utc)


__all__ = [
    "UTC_ZONE",
    "local_instants",
    "resolve_earliest",
    "resolve_standard",
    "resolve_timezone",
    "standard_offset",
    "timezone_name",
    "to_utc",
    "utc_offset",
]
