"""Tests for the root pricectl CLI."""

from pathlib import Path
from typing import Any

from click.testing import CliRunner

from pricectl import __version__
from pricectl.cli import cli
from tests.conftest import FakeRatesClient


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "pricectl" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
    assert "pricectl" in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


def test_json_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--json", "--version"])
    assert result.exit_code == 0


def test_quiet_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-q", "--version"])
    assert result.exit_code == 0


def test_log_json_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--log-json"])
    assert result.exit_code == 0


def test_config_option_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-c", "/tmp/missing-pricectl.toml"])
    assert result.exit_code == 0


def test_invalid_config_file(cli_runner: CliRunner, tmp_path: Path) -> None:
    (tmp_path / "pricectl.toml").write_text("[api\n")
    result = cli_runner.invoke(cli, ["usage", "-i", "KEY"])
    assert result.exit_code == 1
    assert "Invalid TOML" in result.output


def test_verbose_adds_telemetry(cli_runner: CliRunner, install_client: Any) -> None:
    install_client(FakeRatesClient())
    result = cli_runner.invoke(cli, ["-v", "usage", "-i", "KEY"])
    assert result.exit_code == 0, result.output
    assert "meta:" in result.stdout
    assert "UsageService.usage" in result.stdout
