"""Tests for the ``pricectl usage`` command."""

from __future__ import annotations

import json
from collections.abc import Callable

from click.testing import CliRunner

from pricectl.cli import cli
from tests.conftest import FakeRatesClient, usage_payload

Install = Callable[[FakeRatesClient], FakeRatesClient]


def test_usage_yaml(cli_runner: CliRunner, install_client: Install) -> None:
    install_client(FakeRatesClient(usage=usage_payload(remaining=123)))
    result = cli_runner.invoke(cli, ["usage", "-i", "KEY"])
    assert result.exit_code == 0, result.output
    assert "status: active" in result.stdout
    assert "requests_remaining: 123" in result.stdout
    assert "test-app" not in result.stdout


def test_usage_json(cli_runner: CliRunner, install_client: Install) -> None:
    install_client(FakeRatesClient())
    result = cli_runner.invoke(cli, ["--json", "usage", "-i", "KEY"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["op"] == "usage"
    assert payload["data"]["plan"]["features"]["time-series"] is False


def test_usage_quiet(cli_runner: CliRunner, install_client: Install) -> None:
    install_client(FakeRatesClient())
    result = cli_runner.invoke(cli, ["-q", "usage", "-i", "KEY"])
    assert result.stdout.strip() == "OK: usage"
