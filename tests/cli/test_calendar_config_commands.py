from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from aurumtrack.cli.main import create_app
from aurumtrack.core.logging import configure_logging


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch):
    monkeypatch.delenv("AURUMTRACK_REFRESH_INTERVAL", raising=False)
    monkeypatch.delenv("AURUMTRACK_PROVIDER", raising=False)
    yield
    configure_logging()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[session]\nholidays = ["2025-01-06"]\n', encoding="utf-8")
    return path


def _calendar(runner: CliRunner, config_file, *args: str) -> list[dict[str, object]]:
    result = runner.invoke(create_app(), ["--format", "jsonl", "--config", str(config_file), "calendar", *args])
    assert result.exit_code == 0, result.output
    return [json.loads(line) for line in result.stdout.splitlines() if line.strip()]


def test_calendar_weekend_is_locked(runner: CliRunner, config_file) -> None:
    rows = _calendar(runner, config_file, "--at", "2025-01-04T12:00")

    assert rows[0]["session"] == "closed_weekend"
    assert rows[0]["gating"] == "locked_non_trading_day"
    assert rows[0]["next_trading_day"] == "2025-01-07"


def test_calendar_after_close_available(runner: CliRunner, config_file) -> None:
    rows = _calendar(runner, config_file, "--at", "2025-01-08T15:45")

    assert rows[0]["session"] == "closed_after_hours"
    assert rows[0]["gating"] == "available"
    assert rows[0]["tomorrow_trading_day"] is True


def test_calendar_accepts_utc_timestamps(runner: CliRunner, config_file) -> None:
    rows = _calendar(runner, config_file, "--at", "2025-01-08T04:00:00+00:00")

    assert rows[0]["session"] == "open"
    assert rows[0]["at"].startswith("2025-01-08T09:30")


def test_calendar_lists_upcoming_days(runner: CliRunner, config_file) -> None:
    rows = _calendar(runner, config_file, "--at", "2025-01-03T18:00", "--days", "5")

    assert [row["trading_day"] for row in rows[1:]] == ["2025-01-07", "2025-01-08"]


def test_calendar_rejects_bad_timestamp(runner: CliRunner, config_file) -> None:
    result = runner.invoke(create_app(), ["--config", str(config_file), "calendar", "--at", "tomorrow"])

    assert result.exit_code == 2
    assert "INVALID_TIMESTAMP" in result.stderr


def test_config_show_section(runner: CliRunner, config_file) -> None:
    result = runner.invoke(
        create_app(),
        ["--format", "jsonl", "--config", str(config_file), "config", "show", "--section", "refresh"],
    )

    assert result.exit_code == 0, result.output
    rows = [json.loads(line) for line in result.stdout.splitlines()]
    assert {row["key"]: row["value"] for row in rows} == {"interval_seconds": 10.0, "clock_seconds": 1.0}


def test_config_show_unknown_section(runner: CliRunner, config_file) -> None:
    result = runner.invoke(create_app(), ["--config", str(config_file), "config", "show", "--section", "nope"])

    assert result.exit_code != 0


def test_config_path(runner: CliRunner, config_file) -> None:
    result = runner.invoke(create_app(), ["--config", str(config_file), "config", "path"])

    assert result.exit_code == 0
    assert result.stdout.strip() == str(config_file)


def test_output_file(runner: CliRunner, config_file, tmp_path) -> None:
    target = tmp_path / "calendar.jsonl"

    result = runner.invoke(
        create_app(),
        ["--format", "jsonl", "--output", str(target), "--config", str(config_file), "calendar", "--at", "2025-01-08T10:00"],
    )

    assert result.exit_code == 0, result.output
    assert json.loads(target.read_text(encoding="utf-8").splitlines()[0])["gating"] == "locked_market_open"


def test_config_init_writes_defaults(runner: CliRunner, tmp_path) -> None:
    target = tmp_path / "fresh" / "config.toml"

    result = runner.invoke(create_app(), ["--config", str(target), "config", "init"])

    assert result.exit_code == 0, result.output
    assert "[refresh]" in target.read_text(encoding="utf-8")


def test_config_init_refuses_to_overwrite(runner: CliRunner, config_file) -> None:
    result = runner.invoke(create_app(), ["--config", str(config_file), "config", "init"])

    assert result.exit_code == 2
    assert "CONFIG_EXISTS" in result.stderr
    assert "holidays" in config_file.read_text(encoding="utf-8")
