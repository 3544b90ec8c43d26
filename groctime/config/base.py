"""Base configuration model and TOML loader."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import TypeVar

from loguru import logger
from pydantic import BaseModel, ConfigDict

ConfigT = TypeVar("ConfigT", bound="BaseConfig")


class BaseConfig(BaseModel):
    """Strict base for all configuration models; unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


def load_config(model: type[ConfigT], path: Path) -> ConfigT:
    """Load ``path`` as TOML and validate it against ``model``.

    Raises ``FileNotFoundError`` when the file is absent, ``ValueError``
    (``tomllib.TOMLDecodeError``) for malformed TOML and pydantic's
    ``ValidationError`` for content that does not fit the model.
    """

    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open("rb") as handle:
        data = tomllib.load(handle)
    logger.debug("Loaded {} top-level keys from {}", len(data), path)
    return model.model_validate(data)


__all__ = ["BaseConfig", "load_config"]
