"""Shared fixtures for CLI tests."""

from __future__ import annotations

import json
from typing import Any, Callable

import pytest
from click.testing import CliRunner, Result

from agentlint.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def invoke(runner: CliRunner) -> Callable[..., Result]:
    """Run ``agentlint`` with the given arguments."""

    def _invoke(*args: str) -> Result:
        return runner.invoke(cli, list(args))

    return _invoke


@pytest.fixture
def invoke_json(invoke: Callable[..., Result]) -> Callable[..., tuple[int, Any]]:
    """Run a command with ``--format json``: returns (exit code, parsed stdout)."""

    def _invoke(*args: str) -> tuple[int, Any]:
        result = invoke(*args, "--format", "json")
        return result.exit_code, json.loads(result.stdout)

    return _invoke
