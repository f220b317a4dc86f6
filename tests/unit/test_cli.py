"""Tests for metric_time._cli — the metric-time command line.

Test Techniques Used:
    - Specification-based Testing: Commands, flags and output text
    - Golden Values: Known conversions through the CLI
    - Error Condition Testing: Malformed input, range errors, config errors
    - Behavioural Testing: Exit codes
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from metric_time import __version__
from metric_time._cli import (
    EXIT_CONFIG_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_OK,
    EXIT_RUNTIME_ERROR,
    app,
    parse_components,
)
from metric_time._components import TimeComponents

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def runner() -> CliRunner:
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def env_args(tmp_path: Path) -> list[str]:
    """Point --env-file at a missing file so no ambient .env is read."""
    return ["--env-file", str(tmp_path / "missing.env")]


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    """The callback reconfigures the root logger; undo it per test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    for h in root.handlers:
        if h not in original_handlers:
            h.close()
    root.handlers = original_handlers
    root.setLevel(original_level)


# ---------------------------------------------------------------------------
# parse_components
# ---------------------------------------------------------------------------


class TestParseComponents:
    """Technique: Specification-based Testing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("4:36:56", TimeComponents(4, 36, 56, 0)),
            ("4:36:56.5", TimeComponents(4, 36, 56, 500_000_000)),
            ("16:10:23.000012345", TimeComponents(16, 10, 23, 12_345)),
            (" 9:05:00.1 ", TimeComponents(9, 5, 0, 100_000_000)),
        ],
    )
    def test_valid(self, value: str, expected: TimeComponents) -> None:
        """The fraction is a decimal fraction of a second."""
        assert parse_components(value) == expected

    def test_out_of_range_values_still_parse(self) -> None:
        """Bounds are checked later, against the chosen base."""
        assert parse_components("25:99:99") == TimeComponents(25, 99, 99, 0)

    @pytest.mark.parametrize("value", ["", "4:36", "4:36:56.", "a:b:c", "4:36:56.1234567890"])
    def test_invalid(self, value: str) -> None:
        """Malformed values raise BadParameter."""
        with pytest.raises(typer.BadParameter):
            parse_components(value)


# ---------------------------------------------------------------------------
# Global options
# ---------------------------------------------------------------------------


class TestGlobalOptions:
    """Technique: Specification-based Testing."""

    def test_version(self, runner: CliRunner) -> None:
        """--version prints the name and version and exits 0."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == EXIT_OK
        assert f"metric-time v{__version__}" in result.output

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        """--help lists every command and global option."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == EXIT_OK
        for word in ("now", "convert", "watch", "--log-level", "--log-format", "--env-file"):
            assert word in result.output

    def test_no_command_prints_help(self, runner: CliRunner, env_args: list[str]) -> None:
        """Without a command the help text is shown."""
        result = runner.invoke(app, env_args)
        assert result.exit_code == EXIT_OK
        assert "convert" in result.output

    def test_invalid_log_level(self, runner: CliRunner, env_args: list[str]) -> None:
        """An unknown --log-level is a usage error."""
        result = runner.invoke(app, [*env_args, "--log-level", "TRACE", "now"])
        assert result.exit_code != EXIT_OK

    def test_invalid_log_format(self, runner: CliRunner, env_args: list[str]) -> None:
        """An unknown --log-format is a usage error."""
        result = runner.invoke(app, [*env_args, "--log-format", "yaml", "now"])
        assert result.exit_code != EXIT_OK

    def test_log_level_applied(self, runner: CliRunner, env_args: list[str]) -> None:
        """--log-level reaches the root logger."""
        result = runner.invoke(app, [*env_args, "--log-level", "debug", "now"])
        assert result.exit_code == EXIT_OK
        assert logging.getLogger().level == logging.DEBUG

    def test_config_error_exits_one(
        self,
        runner: CliRunner,
        env_args: list[str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Invalid environment configuration exits with code 1."""
        monkeypatch.setenv("METRIC_TIME_CLOCK__INTERVAL", "0")
        result = runner.invoke(app, [*env_args, "now"])
        assert result.exit_code == EXIT_CONFIG_ERROR

    def test_exit_code_constants(self) -> None:
        """Exit code constants match documented values."""
        assert (EXIT_OK, EXIT_CONFIG_ERROR, EXIT_INPUT_ERROR, EXIT_RUNTIME_ERROR) == (0, 1, 2, 3)


# ---------------------------------------------------------------------------
# now
# ---------------------------------------------------------------------------


class TestNowCommand:
    """Technique: Specification-based Testing."""

    def test_default_kind(self, runner: CliRunner, env_args: list[str]) -> None:
        """Without --kind the 24-hour base is used."""
        result = runner.invoke(app, [*env_args, "now"])
        assert result.exit_code == EXIT_OK
        assert result.output.count(":") == 2

    def test_metric(self, runner: CliRunner, env_args: list[str]) -> None:
        """--kind base10 prints a metric time."""
        result = runner.invoke(app, [*env_args, "now", "--kind", "base10"])
        assert result.exit_code == EXIT_OK
        assert result.output.startswith("Metric: ")

    def test_kind_from_env(
        self,
        runner: CliRunner,
        env_args: list[str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """The settings kind applies when --kind is omitted."""
        monkeypatch.setenv("METRIC_TIME_CLOCK__KIND", "base10")
        result = runner.invoke(app, [*env_args, "now"])
        assert result.output.startswith("Metric: ")

    def test_rotations(self, runner: CliRunner, env_args: list[str]) -> None:
        """--rotations adds a line of hand angles."""
        result = runner.invoke(app, [*env_args, "now", "--rotations"])
        assert result.exit_code == EXIT_OK
        assert "hours=" in result.output
        assert "nanoseconds=" in result.output


# ---------------------------------------------------------------------------
# convert
# ---------------------------------------------------------------------------


class TestConvertCommand:
    """Technique: Golden Values + Error Condition Testing."""

    def test_base24_to_metric(self, runner: CliRunner, env_args: list[str]) -> None:
        """04:36:56.123456789 → metric 1:92:31.624371283."""
        result = runner.invoke(
            app,
            [*env_args, "convert", "4:36:56.123456789", "--from", "base24", "--to", "base10"],
        )
        assert result.exit_code == EXIT_OK
        assert result.output.strip() == "Metric: 1:92:31.624371283"

    def test_metric_to_base12(self, runner: CliRunner, env_args: list[str]) -> None:
        """Metric 6:73:87.731495769 → 4:10:23.000012345 PM."""
        result = runner.invoke(
            app,
            [*env_args, "convert", "6:73:87.731495769", "--from", "base10", "--to", "base12_am"],
        )
        assert result.exit_code == EXIT_OK
        assert result.output.strip() == "4:10:23.000012345 PM"

    def test_rotations(self, runner: CliRunner, env_args: list[str]) -> None:
        """--rotations prints angles of the converted value."""
        result = runner.invoke(
            app,
            [
                *env_args,
                "convert",
                "2:45:23.234",
                "--from",
                "base10",
                "--to",
                "base10",
                "--rotations",
            ],
        )
        assert result.exit_code == EXIT_OK
        assert "hours=73.63 minutes=162.84 seconds=83.64 nanoseconds=84.24" in result.output

    def test_out_of_range_reports_json(self, runner: CliRunner, env_args: list[str]) -> None:
        """A range error exits 2 with a JSON error report."""
        result = runner.invoke(
            app,
            [*env_args, "convert", "24:00:00", "--from", "base24", "--to", "base10"],
        )
        assert result.exit_code == EXIT_INPUT_ERROR
        line = next(ln for ln in result.output.splitlines() if ln.startswith("{"))
        payload = json.loads(line)
        assert payload["error_type"] == "hours_high"
        assert payload["message"] == "Hours over bounds"
        assert payload["details"] == {"value": "24:00:00", "kind": "base24"}

    def test_malformed_value(self, runner: CliRunner, env_args: list[str]) -> None:
        """A value that does not parse is a usage error."""
        result = runner.invoke(
            app,
            [*env_args, "convert", "noon", "--from", "base24", "--to", "base10"],
        )
        assert result.exit_code == EXIT_INPUT_ERROR

    def test_unknown_kind(self, runner: CliRunner, env_args: list[str]) -> None:
        """Kinds outside the enum are rejected."""
        result = runner.invoke(
            app,
            [*env_args, "convert", "1:00:00", "--from", "base7", "--to", "base10"],
        )
        assert result.exit_code != EXIT_OK


# ---------------------------------------------------------------------------
# watch
# ---------------------------------------------------------------------------


class TestWatchCommand:
    """Technique: Behavioural Testing — bounded runs."""

    def test_max_events(self, runner: CliRunner, env_args: list[str]) -> None:
        """--max-events bounds the run and the tick total is printed."""
        result = runner.invoke(
            app,
            [*env_args, "watch", "--interval", "0.01", "--max-events", "2", "--kind", "base10"],
        )
        assert result.exit_code == EXIT_OK
        lines = result.output.strip().splitlines()
        assert lines[0].startswith("0\tMetric: ")
        assert lines[1].startswith("1\tMetric: ")
        assert lines[-1] == "ticks: 2"

    def test_invalid_interval(self, runner: CliRunner, env_args: list[str]) -> None:
        """A non-positive interval is a configuration error."""
        result = runner.invoke(app, [*env_args, "watch", "--interval", "0", "--max-events", "1"])
        assert result.exit_code == EXIT_CONFIG_ERROR
