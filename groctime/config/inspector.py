"""Utilities for inspecting and validating configuration files."""

from __future__ import annotations

from pathlib import Path
from types import UnionType
from typing import Any, Iterable, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from .app import AppConfig
from .base import load_config


class ConfigInspectionError(RuntimeError):
    """Raised when configuration inspection fails unexpectedly."""


def _error_result(path: Path, error_type: str, message: str, **extra: Any) -> dict[str, Any]:
    return {
        "status": "error",
        "config_path": str(path),
        "error": {"type": error_type, "message": message, **extra},
    }


def check_config(path: Path, *, config_cls: type[AppConfig] = AppConfig) -> tuple[dict[str, Any], int, AppConfig | None]:
    """Validate the configuration file and collect warnings.

    Returns a tuple of ``(result_dict, exit_code, config_instance_or_None)``.
    Exit codes: 0 valid, 1 malformed TOML, 2 missing or unreadable file,
    3 validation failure.
    """

    try:
        config = load_config(config_cls, path)
    except (FileNotFoundError, PermissionError) as exc:
        error_type = "missing_file" if isinstance(exc, FileNotFoundError) else "permission_error"
        return _error_result(path, error_type, str(exc)), 2, None
    except ValidationError as exc:
        details = [
            {
                "loc": _format_error_location(err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        return _error_result(path, "validation_error", "Configuration validation failed", details=details), 3, None
    except ValueError as exc:
        return _error_result(path, "invalid_format", str(exc)), 1, None
    except Exception as exc:  # pragma: no cover - unexpected failures
        raise ConfigInspectionError("Unexpected configuration inspection error") from exc

    result = {
        "status": "ok",
        "config_path": str(path),
        "schedules": len(config.schedules),
        "warnings": _collect_warnings(config),
    }
    return result, 0, config


def explain_config(*, config_cls: type[BaseModel] = AppConfig) -> list[dict[str, Any]]:
    """Describe configuration fields for documentation purposes."""

    documentation: list[dict[str, Any]] = []
    visited: set[type[BaseModel]] = set()

    def _walk(model_cls: type[BaseModel], prefix: str = "") -> None:
        if model_cls in visited:
            return
        visited.add(model_cls)

        for field_name, field in model_cls.model_fields.items():
            documentation.append(
                {
                    "name": f"{prefix}{field_name}",
                    "type": _format_annotation(field.annotation),
                    "required": field.is_required(),
                    "default": _format_default(field),
                    "description": field.description or "",
                }
            )
            for nested_cls, nested_prefix in _iter_nested_models(field, base_prefix=f"{prefix}{field_name}"):
                _walk(nested_cls, nested_prefix)

    _walk(config_cls)
    return documentation


def _format_error_location(location: Iterable[Union[int, str]]) -> str:
    return ".".join(str(part) for part in location)


def _collect_warnings(config: AppConfig) -> list[str]:
    warnings: list[str] = []

    if not config.schedules:
        warnings.append("No schedules configured")
    for entry in config.schedules:
        if not entry.enabled:
            warnings.append(f"Schedule '{entry.name}' is disabled")
            continue
        spec = entry.build(config.timezone)
        if spec.is_interval and not getattr(spec, "is_ranged", False):
            warnings.append(
                f"Schedule '{entry.name}' is an unsynchronized interval; "
                "each run is timed from the previous one"
            )

    return warnings


def _format_annotation(annotation: Any) -> str:
    origin = get_origin(annotation)
    if origin is None:
        if isinstance(annotation, type):
            return annotation.__name__
        return repr(annotation).replace("typing.", "")

    args = get_args(annotation)
    if origin in {Union, UnionType}:
        non_none = [arg for arg in args if arg is not type(None)]  # noqa: E721
        if len(non_none) == 1 and len(args) == 2:
            return f"Optional[{_format_annotation(non_none[0])}]"
        return "Union[" + ", ".join(_format_annotation(arg) for arg in args) + "]"

    origin_name = getattr(origin, "__name__", repr(origin).replace("typing.", ""))
    if args:
        return f"{origin_name}[" + ", ".join(_format_annotation(arg) for arg in args) + "]"
    return origin_name


def _format_default(field: FieldInfo) -> Any:
    if field.default_factory is not None:
        return _stringify_default(field.default_factory())
    if field.is_required():
        return None
    return _stringify_default(field.default)


def _stringify_default(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, (list, tuple)):
        return [_stringify_default(item) for item in value]
    return value


def _iter_nested_models(field: FieldInfo, *, base_prefix: str) -> list[tuple[type[BaseModel], str]]:
    annotation = field.annotation
    origin = get_origin(annotation)
    if origin is None:
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            return [(annotation, f"{base_prefix}.")]
        return []

    args = get_args(annotation)
    if origin in {Union, UnionType}:
        return [
            (arg, f"{base_prefix}.")
            for arg in args
            if isinstance(arg, type) and issubclass(arg, BaseModel)
        ]
    if origin in {list, tuple, set} and args:
        item = args[0]
        if isinstance(item, type) and issubclass(item, BaseModel):
            return [(item, f"{base_prefix}[].")]
    return []


__all__ = ["check_config", "explain_config", "ConfigInspectionError"]
