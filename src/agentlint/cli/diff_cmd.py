"""``agentlint diff BASE TARGET`` -- Compare the capabilities of two trees.

Scans both directories under the same policy and reports capability
growth (new shell execution, wider write scopes, new outbound network,
hook contexts, ...) plus findings that appear only in TARGET.

Exit Codes:
    0 -- No fail-on change (warn-on changes still exit 0).
    1 -- At least one fail-on change or condition.
    3 -- Invalid configuration.
    5 -- Internal error.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from agentlint.cli.output import configure_console, configure_logging, print_diff, render_json
from agentlint.cli.scan import exit_with_error, resolve_policy
from agentlint.core.diff import DIFF_CONDITIONS, compare
from agentlint.core.policy.models import FORMAT_CHOICES
from agentlint.exceptions import ConfigError
from agentlint.scanner import EXIT_CONFIG, EXIT_INTERNAL, Scanner, build_diff_report

logger = logging.getLogger(__name__)


@click.command("diff")
@click.argument("base", type=click.Path(exists=True, file_okay=False))
@click.argument("target", type=click.Path(exists=True, file_okay=False))
@click.option("--config", "config", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Policy file (default: searched in TARGET).")
@click.option("--format", "output_format", type=click.Choice(FORMAT_CHOICES), default=None,
              help="Output format: text (default) or json.")
@click.option("--fail-on-change", "fail_on_change", type=click.Choice(DIFF_CONDITIONS), multiple=True,
              help="Change type that fails the diff. Repeatable; replaces the policy list.")
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging.")
def diff_command(
    base: str,
    target: str,
    config: str | None,
    output_format: str | None,
    fail_on_change: tuple[str, ...],
    verbose: bool,
) -> None:
    """Compare agent configuration capabilities between BASE and TARGET."""
    if verbose:
        configure_logging(True)
    try:
        policy = resolve_policy(config, Path(target), output_format=output_format)
        configure_console(policy.output.color)
        scanner = Scanner(policy)
        base_result = scanner.scan_directory(Path(base))
        target_result = scanner.scan_directory(Path(target))
        diff = compare(
            base_result.summary,
            base_result.findings,
            target_result.summary,
            target_result.findings,
            fail_on=list(fail_on_change) or policy.diff_fail_on(),
            warn_on=policy.diff.warn_on,
            base_ref=base,
            target_ref=target,
        )
    except ConfigError as exc:
        for error in exc.errors:
            click.echo(f"Configuration error: {error}", err=True)
        sys.exit(EXIT_CONFIG)
    except Exception as exc:
        logger.error("Diff failed", exc_info=True)
        exit_with_error(EXIT_INTERNAL, f"Internal error: {exc}")

    if policy.output.format == "json":
        render_json(build_diff_report(diff))
    else:
        print_diff(diff)
    sys.exit(diff.summary.exit_code)
