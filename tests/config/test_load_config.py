from __future__ import annotations

import tomllib
from pathlib import Path

import pytest
from pydantic import ValidationError

from groctime.config import AppConfig, BaseConfig, load_config


class ExampleConfig(BaseConfig):
    label: str
    feature_enabled: bool


def test_load_config_success(tmp_path: Path) -> None:
    sample = tmp_path / "config.toml"
    sample.write_text(
        """
        label = "nightly"
        feature_enabled = true
        """.strip(),
        encoding="utf-8",
    )

    cfg = load_config(ExampleConfig, sample)

    assert cfg.label == "nightly"
    assert cfg.feature_enabled is True


def test_load_config_missing_file(tmp_path: Path) -> None:
    missing = tmp_path / "missing.toml"
    with pytest.raises(FileNotFoundError):
        load_config(ExampleConfig, missing)


def test_load_config_malformed_toml(tmp_path: Path) -> None:
    sample = tmp_path / "broken.toml"
    sample.write_text("label = \n", encoding="utf-8")

    with pytest.raises(tomllib.TOMLDecodeError):
        load_config(ExampleConfig, sample)


def test_load_config_rejects_unknown_keys(tmp_path: Path) -> None:
    sample = tmp_path / "config.toml"
    sample.write_text('label = "x"\nfeature_enabled = false\nsurprise = 1\n', encoding="utf-8")

    with pytest.raises(ValidationError):
        load_config(ExampleConfig, sample)


def test_app_config_example_file() -> None:
    """The shipped example configuration loads and every schedule parses."""
    config_path = Path(__file__).resolve().parents[2] / "config" / "example.toml"
    cfg = load_config(AppConfig, config_path)

    assert cfg.timezone == "UTC"
    names = [entry.name for entry in cfg.schedules]
    assert names == [
        "nightly-report",
        "weekly-digest",
        "billing-close",
        "quarterly-review",
        "cache-refresh",
        "business-hours-poll",
    ]

    nightly = cfg.get_schedule("nightly-report")
    assert nightly is not None
    assert nightly.timezone == "Europe/London"
    assert nightly.build(cfg.timezone).timezone_name == "Europe/London"

    billing = cfg.get_schedule("billing-close")
    assert billing is not None
    assert billing.timezone is None
    assert billing.build(cfg.timezone).timezone_name == "UTC"

    poll = cfg.get_schedule("business-hours-poll")
    assert poll is not None
    assert poll.enabled is False

    assert cfg.get_schedule("missing") is None
