from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from loguru import logger

from groctime.config import AppConfig, ScheduleEntryConfig
from groctime.schedule import ScheduleSpecification, UnreachableScheduleError, next_match, next_matches


@dataclass(slots=True, frozen=True)
class CatalogEntry:
    """A configured schedule together with its parsed specification."""

    name: str
    text: str
    specification: ScheduleSpecification
    description: str = ""
    enabled: bool = True


class ScheduleCatalog:
    """Read-only view over the schedules named in the configuration."""

    def __init__(self, config: AppConfig):
        self.config = config
        self._entries: dict[str, CatalogEntry] = {}
        self._load_entries()

    def _load_entries(self) -> None:
        logger.info("Loading {} schedule(s), default timezone {}", len(self.config.schedules), self.config.timezone)
        for entry_config in self.config.schedules:
            self._register(entry_config)

    def _register(self, entry_config: ScheduleEntryConfig) -> None:
        log = logger.bind(schedule=entry_config.name)
        specification = entry_config.build(self.config.timezone)
        entry = CatalogEntry(
            name=entry_config.name,
            text=entry_config.schedule,
            specification=specification,
            description=entry_config.description,
            enabled=entry_config.enabled,
        )
        self._entries[entry.name] = entry
        if entry.enabled:
            log.debug("Registered schedule '{}' as '{}' ({})", entry.name, specification, specification.timezone_name)
        else:
            log.info("Schedule '{}' is disabled, listing only.", entry.name)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    @property
    def names(self) -> list[str]:
        return list(self._entries)

    def get(self, name: str) -> CatalogEntry | None:
        return self._entries.get(name)

    def upcoming(self, name: str, after: datetime | None = None, count: int = 1) -> list[datetime]:
        """Return the next ``count`` run times of schedule ``name``.

        Raises ``KeyError`` for an unknown name. Disabled schedules still
        report their run times; the flag only affects listings.
        """

        entry = self._entries.get(name)
        if entry is None:
            raise KeyError(f"Unknown schedule '{name}'")
        start = after if after is not None else datetime.now(UTC)
        return next_matches(entry.specification, start, count)

    def list_schedules(self, after: datetime | None = None) -> list[dict[str, Any]]:
        """Return every configured schedule in serialisable form."""

        start = after if after is not None else datetime.now(UTC)
        rows: list[dict[str, Any]] = []
        for entry in self._entries.values():
            next_run = self._next_run(entry, start) if entry.enabled else None
            rows.append(
                {
                    "name": entry.name,
                    "schedule": entry.text,
                    "display": entry.specification.to_display_string(),
                    "timezone": entry.specification.timezone_name,
                    "enabled": entry.enabled,
                    "description": entry.description,
                    "next_run_time": next_run.isoformat() if next_run else None,
                }
            )
        return rows

    @staticmethod
    def _next_run(entry: CatalogEntry, start: datetime) -> datetime | None:
        try:
            return next_match(entry.specification, start)
        except UnreachableScheduleError as exc:
            logger.bind(schedule=entry.name).warning("Schedule '{}' has no upcoming run: {}", entry.name, exc)
            return None


__all__ = ["CatalogEntry", "ScheduleCatalog"]
