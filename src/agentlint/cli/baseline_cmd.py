"""``agentlint baseline`` -- Manage the accepted-findings baseline.

Subcommands:
    create PATH -- Scan PATH and record every current finding.
    show PATH   -- Print the baseline's per-rule breakdown.

The baseline file defaults to ``baseline.file`` from the policy
(``.agentlint/baseline.json`` under PATH).

Exit Codes:
    0 -- Success.
    2 -- No baseline file to show.
    3 -- Invalid configuration or unreadable baseline.
    5 -- Internal error.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from agentlint.cli.output import print_baseline_stats, render_json
from agentlint.cli.scan import exit_with_error, resolve_policy
from agentlint.core.baseline import BaselineManager
from agentlint.core.policy.models import FORMAT_CHOICES
from agentlint.exceptions import BaselineError, ConfigError
from agentlint.scanner import EXIT_CONFIG, EXIT_INTERNAL, EXIT_USAGE, Scanner

logger = logging.getLogger(__name__)

_PATH = click.Path(exists=True, file_okay=False)
_BASELINE_FILE = click.Path(dir_okay=False)


def _manager(root: Path, config: str | None, baseline_file: str | None) -> tuple[BaselineManager, Scanner]:
    policy = resolve_policy(config, root)
    path = Path(baseline_file).resolve() if baseline_file else policy.baseline.file
    return BaselineManager(root=root, path=path), Scanner(policy)


@click.group("baseline")
def baseline_group() -> None:
    """Create or inspect the findings baseline."""


@baseline_group.command("create")
@click.argument("path", type=_PATH, default=".")
@click.option("--config", "config", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Policy file (default: searched in PATH).")
@click.option("--baseline", "baseline_file", type=_BASELINE_FILE, default=None,
              help="Baseline file to write.")
@click.option("--reason", default=None, help="Justification stored with every entry.")
def create_command(path: str, config: str | None, baseline_file: str | None, reason: str | None) -> None:
    """Scan PATH and record all current findings as accepted."""
    root = Path(path)
    try:
        manager, scanner = _manager(root, config, baseline_file)
        result = scanner.scan_directory(root)
        baseline = manager.create(result.findings, reason=reason)
        manager.save()
    except ConfigError as exc:
        for error in exc.errors:
            click.echo(f"Configuration error: {error}", err=True)
        sys.exit(EXIT_CONFIG)
    except BaselineError as exc:
        exit_with_error(EXIT_CONFIG, f"Baseline error: {exc}")
    except Exception as exc:
        logger.error("Baseline creation failed", exc_info=True)
        exit_with_error(EXIT_INTERNAL, f"Internal error: {exc}")

    click.echo(f"Baseline created with {len(baseline.findings)} findings: {manager.path}")


@baseline_group.command("show")
@click.argument("path", type=_PATH, default=".")
@click.option("--config", "config", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Policy file (default: searched in PATH).")
@click.option("--baseline", "baseline_file", type=_BASELINE_FILE, default=None,
              help="Baseline file to read.")
@click.option("--format", "output_format", type=click.Choice(FORMAT_CHOICES), default="text",
              help="Output format: text (default) or json.")
def show_command(path: str, config: str | None, baseline_file: str | None, output_format: str) -> None:
    """Show how many findings the baseline accepts, per rule."""
    try:
        manager, _ = _manager(Path(path), config, baseline_file)
        loaded = manager.load()
    except ConfigError as exc:
        for error in exc.errors:
            click.echo(f"Configuration error: {error}", err=True)
        sys.exit(EXIT_CONFIG)
    except BaselineError as exc:
        exit_with_error(EXIT_CONFIG, f"Baseline error: {exc}")

    if not loaded:
        exit_with_error(EXIT_USAGE, f"No baseline found at {manager.path}")

    stats = manager.stats()
    if output_format == "json":
        render_json({"path": str(manager.path), **stats})
    else:
        print_baseline_stats(str(manager.path), stats)
