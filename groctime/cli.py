"""Command line interface for groctime."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import typer
from loguru import logger
from pydantic import ValidationError

from .catalog import ScheduleCatalog
from .config import AppConfig, load_config
from .config.inspector import check_config, explain_config
from .schedule import (
    InvalidScheduleError,
    ScheduleSpecification,
    UnreachableScheduleError,
    next_matches,
    parse,
)


@dataclass(slots=True)
class CLIState:
    """Holds shared state between Typer commands."""

    config_path: Path
    _config: AppConfig | None = None
    _catalog: ScheduleCatalog | None = None

    def ensure_config(self) -> AppConfig:
        if self._config is None:
            logger.info("Loading configuration from {}", self.config_path)
            self._config = load_config(AppConfig, self.config_path)
        return self._config

    def ensure_catalog(self) -> ScheduleCatalog:
        if self._catalog is None:
            self._catalog = ScheduleCatalog(self.ensure_config())
        return self._catalog


app = typer.Typer(help="Parse groc schedules and preview their run times")
config_app = typer.Typer(help="Validate and document configuration files")
app.add_typer(config_app, name="config")


def _default_config_path() -> Path:
    repo_root = Path(__file__).resolve().parents[1]
    return repo_root / "config" / "example.toml"


def _normalize_format(value: str) -> str:
    return value.lower()


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):  # pragma: no cover - defensive guard
        raise RuntimeError("CLI context is not initialised")
    return state


def _exit(code: int) -> None:
    raise typer.Exit(code)


def _parse_after(value: str | None) -> datetime:
    """Read an ISO 8601 timestamp; naive values are taken as UTC."""

    if value is None:
        return datetime.now(UTC)
    try:
        moment = datetime.fromisoformat(value)
    except ValueError:
        logger.error("Invalid --after value '{}': expected an ISO 8601 timestamp", value)
        _exit(1)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment


def _check_count(count: int) -> None:
    if count < 1:
        logger.error("--count must be at least 1, got {}", count)
        _exit(1)


def _load_catalog(state: CLIState) -> ScheduleCatalog:
    try:
        return state.ensure_catalog()
    except FileNotFoundError as exc:
        logger.error("{}", exc)
        _exit(2)
    except ValidationError as exc:
        logger.error("Configuration validation failed for {}: {} error(s)", state.config_path, exc.error_count())
        for err in exc.errors():
            location = ".".join(str(part) for part in err["loc"]) or "<root>"
            logger.error("  - {}: {}", location, err["msg"])
        _exit(3)
    except ValueError as exc:
        logger.error("Could not read {}: {}", state.config_path, exc)
        _exit(1)
    raise AssertionError("unreachable")  # pragma: no cover


def _format_run(run: datetime, specification: ScheduleSpecification) -> str:
    local = run.astimezone(specification.timezone)
    return f"{run.isoformat()}  ({local.strftime('%Y-%m-%d %H:%M %Z')})"


def _compute_runs(specification: ScheduleSpecification, after: datetime, count: int) -> list[datetime]:
    try:
        return next_matches(specification, after, count)
    except UnreachableScheduleError as exc:
        logger.error("{}", exc)
        _exit(1)
    raise AssertionError("unreachable")  # pragma: no cover


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config: Path = typer.Option(
        _default_config_path(),
        help="Path to the TOML configuration file",
    ),
) -> None:
    """Initialise CLI state."""

    ctx.obj = CLIState(config_path=config.resolve())

    if ctx.invoked_subcommand is None:
        logger.warning("No command provided. Try 'next \"every day 09:00\"' or 'list'.")
        _exit(0)


@app.command("next", help="Show the next run times of a schedule")
def next_runs(
    schedule: str = typer.Argument(..., help="Schedule text, e.g. 'every monday 09:00'"),
    timezone: str | None = typer.Option(None, "--timezone", "-z", help="IANA timezone (default UTC)"),
    after: str | None = typer.Option(None, "--after", help="ISO 8601 start instant (default now)"),
    count: int = typer.Option(1, "--count", "-n", help="Number of run times to show"),
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for run times",
        callback=_normalize_format,
    ),
) -> None:
    _check_count(count)
    start = _parse_after(after)
    try:
        specification = parse(schedule, timezone)
    except InvalidScheduleError as exc:
        logger.error("{}", exc)
        _exit(1)

    runs = _compute_runs(specification, start, count)

    if format == "json":
        payload = {
            "schedule": schedule,
            "display": specification.to_display_string(),
            "timezone": specification.timezone_name,
            "after": start.isoformat(),
            "runs": [run.isoformat() for run in runs],
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    for run in runs:
        typer.echo(_format_run(run, specification))


@app.command(help="Print the normalised form of a schedule")
def describe(
    schedule: str = typer.Argument(..., help="Schedule text"),
    timezone: str | None = typer.Option(None, "--timezone", "-z", help="IANA timezone (default UTC)"),
) -> None:
    try:
        specification = parse(schedule, timezone)
    except InvalidScheduleError as exc:
        logger.error("{}", exc)
        _exit(1)

    kind = "interval" if specification.is_interval else "specific time"
    logger.info("Parsed {} schedule in {}", kind, specification.timezone_name)
    typer.echo(specification.to_display_string())


@app.command("list", help="List configured schedules with their next run")
def list_schedules(
    ctx: typer.Context,
    after: str | None = typer.Option(None, "--after", help="ISO 8601 start instant (default now)"),
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for the schedule listing",
        callback=_normalize_format,
    ),
) -> None:
    state = _get_state(ctx)
    start = _parse_after(after)
    catalog = _load_catalog(state)
    rows = catalog.list_schedules(after=start)

    if format == "json":
        print(json.dumps({"schedules": rows}, indent=2, ensure_ascii=False, default=str))
        return

    if not rows:
        logger.warning("No schedules configured in {}", state.config_path)
        return

    logger.info("Configured schedules ({}):", len(rows))
    for row in rows:
        next_run = row["next_run_time"] or ("disabled" if not row["enabled"] else "none")
        logger.info(
            "  - {name}: {display} [{timezone}] next={next_run}",
            name=row["name"],
            display=row["display"],
            timezone=row["timezone"],
            next_run=next_run,
        )


@app.command(help="Show upcoming run times of a configured schedule")
def upcoming(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Schedule name from the configuration"),
    after: str | None = typer.Option(None, "--after", help="ISO 8601 start instant (default now)"),
    count: int = typer.Option(5, "--count", "-n", help="Number of run times to show"),
) -> None:
    state = _get_state(ctx)
    _check_count(count)
    start = _parse_after(after)
    catalog = _load_catalog(state)

    try:
        runs = catalog.upcoming(name, after=start, count=count)
    except KeyError:
        logger.error("Unknown schedule '{}'. Available: {}", name, ", ".join(catalog.names) or "none")
        _exit(1)
    except UnreachableScheduleError as exc:
        logger.error("{}", exc)
        _exit(1)

    entry = catalog.get(name)
    assert entry is not None
    if not entry.enabled:
        logger.warning("Schedule '{}' is disabled", name)

    for run in runs:
        typer.echo(_format_run(run, entry.specification))


@config_app.command(help="Validate the configuration file")
def check(
    ctx: typer.Context,
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for validation results",
        callback=_normalize_format,
    ),
) -> None:
    state = _get_state(ctx)
    result, exit_code, _ = check_config(state.config_path)

    if format == "json":
        print(json.dumps(result, indent=2, ensure_ascii=False, default=str))
        _exit(exit_code)

    if result["status"] == "ok":
        logger.info("Configuration OK: {} ({} schedules)", result["config_path"], result["schedules"])
        for warning in result["warnings"]:
            logger.warning(warning)
    else:
        error: dict[str, Any] = result["error"]
        logger.error(
            "Configuration error ({}) for {}: {}",
            error["type"],
            result["config_path"],
            error["message"],
        )
        for detail in error.get("details", []):
            location = detail["loc"] or "<root>"
            logger.error("  - {}: {} ({})", location, detail["message"], detail["type"])

    _exit(exit_code)


@config_app.command(help="Describe available configuration fields")
def explain(
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for configuration schema",
        callback=_normalize_format,
    ),
) -> None:
    fields = explain_config()

    if format == "json":
        print(json.dumps({"fields": fields}, indent=2, ensure_ascii=False, default=str))
        return

    logger.info("Configuration schema ({} fields):", len(fields))
    for field in fields:
        default_value = field["default"]
        if isinstance(default_value, (dict, list)):
            default_repr = json.dumps(default_value, ensure_ascii=False, default=str)
        elif default_value is None:
            default_repr = "None"
        else:
            default_repr = str(default_value)
        description = field["description"] or "(no description)"
        logger.info(
            "  - {name}: type={type}, required={required}, default={default}, description={description}",
            name=field["name"],
            type=field["type"],
            required="yes" if field["required"] else "no",
            default=default_repr,
            description=description,
        )


def main(argv: list[str] | None = None) -> int:
    """Entry point compatible with setuptools console scripts."""

    try:
        result = app(args=argv, standalone_mode=False)
    except typer.Exit as exc:  # pragma: no cover - Typer translates exit codes
        return exc.exit_code
    if isinstance(result, int):
        return result
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
