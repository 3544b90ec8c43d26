import json
import sys
from contextlib import contextmanager

from loguru import logger

from groctime.cli import main


@contextmanager
def _logger_to_stderr():
    logger_id = logger.add(sys.stderr, level="INFO")
    try:
        yield
    finally:
        logger.remove(logger_id)


def test_config_check_json_success(capsys, tmp_path):
    config_text = """
timezone = "Europe/Amsterdam"

[[schedules]]
name = "report"
schedule = "every day 06:00"

[[schedules]]
name = "sync"
schedule = "every 10 mins synchronized"
"""
    config_file = tmp_path / "config.toml"
    config_file.write_text(config_text)

    with _logger_to_stderr():
        exit_code = main(["--config", str(config_file), "config", "check", "--format", "json"])

    assert exit_code == 0

    captured = capsys.readouterr()
    payload = json.loads(captured.out)
    assert payload["status"] == "ok"
    assert payload["schedules"] == 2
    assert payload["warnings"] == []
    assert payload["config_path"].endswith("config.toml")


def test_config_check_warnings(capsys, tmp_path):
    config_text = """
[[schedules]]
name = "drifting"
schedule = "every 5 minutes"

[[schedules]]
name = "parked"
schedule = "every day 06:00"
enabled = false
"""
    config_file = tmp_path / "config.toml"
    config_file.write_text(config_text)

    with _logger_to_stderr():
        exit_code = main(["--config", str(config_file), "config", "check"])

    assert exit_code == 0

    captured = capsys.readouterr()
    assert "Configuration OK" in captured.err
    assert "Schedule 'drifting' is an unsynchronized interval" in captured.err
    assert "Schedule 'parked' is disabled" in captured.err


def test_config_check_empty_file_warns(capsys, tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text("")

    exit_code = main(["--config", str(config_file), "config", "check", "--format", "json"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["warnings"] == ["No schedules configured"]


def test_config_check_missing_file(capsys, tmp_path):
    missing_path = tmp_path / "absent.toml"

    with _logger_to_stderr():
        exit_code = main(["--config", str(missing_path), "config", "check"])

    assert exit_code == 2

    captured = capsys.readouterr()
    assert "Configuration error (missing_file" in captured.err
    assert str(missing_path) in captured.err


def test_config_check_invalid_toml(capsys, tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text("[[schedules]\nname = ")

    exit_code = main(["--config", str(config_file), "config", "check", "--format", "json"])

    assert exit_code == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "error"
    assert payload["error"]["type"] == "invalid_format"


def test_config_check_validation_error(capsys, tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text("unknown_field = 42\n")

    with _logger_to_stderr():
        exit_code = main(["--config", str(config_file), "config", "check"])

    assert exit_code == 3

    captured = capsys.readouterr()
    assert "validation_error" in captured.err
    assert "Extra inputs are not permitted" in captured.err


def test_config_check_invalid_schedule_json(capsys, tmp_path):
    config_text = """
[[schedules]]
name = "broken"
schedule = "monday 1 of jan 10:00"
"""
    config_file = tmp_path / "config.toml"
    config_file.write_text(config_text)

    exit_code = main(["--config", str(config_file), "config", "check", "--format", "json"])

    assert exit_code == 3
    payload = json.loads(capsys.readouterr().out)
    details = payload["error"]["details"]
    assert details[0]["loc"] == "schedules.0"
    assert "both monthdays and weekdays" in details[0]["message"]


def test_config_explain_text_output(capsys):
    with _logger_to_stderr():
        exit_code = main(["config", "explain"])

    assert exit_code == 0

    captured = capsys.readouterr()
    assert "Configuration schema" in captured.err
    assert "schedules[].schedule" in captured.err
    assert "timezone: type=str" in captured.err


def test_config_explain_json_output(capsys):
    exit_code = main(["config", "explain", "--format", "json"])

    assert exit_code == 0

    fields = {field["name"]: field for field in json.loads(capsys.readouterr().out)["fields"]}
    assert fields["timezone"]["default"] == "UTC"
    assert fields["schedules"]["default"] == []
    assert fields["schedules[].name"]["required"] is True
    assert fields["schedules[].timezone"]["type"] == "Optional[str]"
    assert fields["schedules[].enabled"]["default"] is True
