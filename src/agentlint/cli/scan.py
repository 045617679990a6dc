"""``agentlint scan [path]`` -- Analyse agent configuration files.

Scans PATH (default: the current directory) for Claude Code and Cursor
configuration files, evaluates every enabled rule, and reports findings
together with the recommended least-privilege permission manifest.

Exit Codes:
    0 -- Pass or warn.
    1 -- One or more findings at or above the fail threshold.
    2 -- Usage error.
    3 -- Invalid configuration or baseline file.
    4 -- No supported files (when configured to fail) or strict-mode
         parse failure.
    5 -- Internal error.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import replace
from pathlib import Path

import click

from agentlint.cli.output import (
    configure_console,
    configure_logging,
    print_permissions,
    print_scan_report,
    render_json,
)
from agentlint.core.baseline import BaselineManager
from agentlint.core.ir import to_dict
from agentlint.core.policy import Policy, load_policy, validate_policy
from agentlint.core.policy.models import FORMAT_CHOICES
from agentlint.exceptions import BaselineError, ConfigError
from agentlint.scanner import EXIT_CONFIG, EXIT_INTERNAL, EXIT_PASS, ScanResult, Scanner, build_report

logger = logging.getLogger(__name__)

_THRESHOLD_CHOICES: tuple[str, ...] = ("low", "medium", "high", "none")


# -----------------------------------------------------------------------
# Shared helpers (also used by the diff and baseline commands)
# -----------------------------------------------------------------------


def resolve_policy(
    config: str | None,
    root: Path,
    fail_on: str | None = None,
    warn_on: str | None = None,
    strict: bool = False,
    output_format: str | None = None,
) -> Policy:
    """Load the policy for ``root`` and apply command-line overrides.

    Args:
        config: Explicit policy file, or None to search ``root``.
        root: Directory searched for a default policy file.
        fail_on, warn_on: Threshold overrides.
        strict: Force strict mode on.
        output_format: Output format override.

    Raises:
        ConfigError: With every loading and validation problem.
    """
    loaded = load_policy(Path(config).resolve() if config else None, cwd=root)
    if loaded.errors:
        raise ConfigError(loaded.errors)
    for warning in loaded.warnings:
        click.echo(f"Warning: {warning}", err=True)

    policy = loaded.config
    verdict = policy.policy
    if fail_on is not None or warn_on is not None or strict:
        verdict = replace(
            verdict,
            fail_on=fail_on or verdict.fail_on,
            warn_on=warn_on or verdict.warn_on,
            strict=strict or verdict.strict,
        )
    output = policy.output
    if output_format is not None:
        output = replace(output, format=output_format)
    policy = replace(policy, policy=verdict, output=output)

    problems = validate_policy(policy)
    if problems:
        raise ConfigError(problems)
    return policy


def exit_with_error(code: int, message: str) -> None:
    click.echo(message, err=True)
    sys.exit(code)


def _apply_baseline(
    scanner: Scanner,
    result: ScanResult,
    root: Path,
    baseline_file: str | None,
    mode: str | None,
) -> ScanResult:
    """Load, optionally rewrite, and apply the baseline for one scan.

    Args:
        mode: "update", "prune", "ignore" or None (plain suppression).
    """
    policy = scanner.policy
    if mode == "ignore":
        return result
    if not (policy.baseline.enabled or baseline_file or mode):
        return result

    path = Path(baseline_file).resolve() if baseline_file else policy.baseline.file
    manager = BaselineManager(root=root, path=path)
    manager.load()
    if mode == "update":
        manager.update(result.findings)
        manager.save()
        click.echo(f"Baseline updated: {manager.path}", err=True)
    elif mode == "prune":
        if manager.baseline is None:
            click.echo(f"No baseline to prune at {manager.path}", err=True)
            return result
        removed = manager.prune(result.findings)
        manager.save()
        click.echo(f"Pruned {removed} stale baseline entries from {manager.path}", err=True)

    if manager.baseline is None:
        return result
    return scanner.apply_baseline(result, manager)


# -----------------------------------------------------------------------
# Command
# -----------------------------------------------------------------------


@click.command("scan")
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False),
    required=False,
    default=".",
)
@click.option("--config", "config", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Policy file (default: agentlint.yaml or .agentlint.yaml in PATH).")
@click.option("--format", "output_format", type=click.Choice(FORMAT_CHOICES), default=None,
              help="Output format: text (default) or json.")
@click.option("--fail-on", type=click.Choice(_THRESHOLD_CHOICES), default=None,
              help="Fail when a finding at or above this severity remains.")
@click.option("--warn-on", type=click.Choice(_THRESHOLD_CHOICES), default=None,
              help="Warn when a finding at or above this severity remains.")
@click.option("--strict", is_flag=True, default=False,
              help="Fail (exit 4) when any parse or rule error was recorded.")
@click.option("--baseline", "baseline_file", type=click.Path(dir_okay=False), default=None,
              help="Baseline file used to suppress known findings.")
@click.option("--update-baseline", is_flag=True, default=False,
              help="Add current findings to the baseline.")
@click.option("--prune-baseline", is_flag=True, default=False,
              help="Remove baseline entries that no longer match a finding.")
@click.option("--ignore-baseline", is_flag=True, default=False,
              help="Report every finding, even baselined ones.")
@click.option("--permissions-only", is_flag=True, default=False,
              help="Print only the recommended permission manifest.")
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging.")
def scan_command(
    path: str,
    config: str | None,
    output_format: str | None,
    fail_on: str | None,
    warn_on: str | None,
    strict: bool,
    baseline_file: str | None,
    update_baseline: bool,
    prune_baseline: bool,
    ignore_baseline: bool,
    permissions_only: bool,
    verbose: bool,
) -> None:
    """Analyse agent configuration files under PATH.

    Reports risky capabilities (shell execution, file writes, network
    access, secrets, hooks, instruction overrides) and the least-privilege
    permissions the configuration needs.
    """
    modes = [
        name
        for name, flag in (("update", update_baseline), ("prune", prune_baseline), ("ignore", ignore_baseline))
        if flag
    ]
    if len(modes) > 1:
        raise click.UsageError(
            "--update-baseline, --prune-baseline and --ignore-baseline are mutually exclusive"
        )
    if verbose:
        configure_logging(True)

    root = Path(path)
    try:
        policy = resolve_policy(config, root, fail_on, warn_on, strict, output_format)
        configure_console(policy.output.color)
        scanner = Scanner(policy)
        result = scanner.scan_directory(root)
        result = _apply_baseline(scanner, result, root, baseline_file, modes[0] if modes else None)
    except ConfigError as exc:
        for error in exc.errors:
            click.echo(f"Configuration error: {error}", err=True)
        sys.exit(EXIT_CONFIG)
    except BaselineError as exc:
        exit_with_error(EXIT_CONFIG, f"Baseline error: {exc}")
    except Exception as exc:
        logger.error("Scan failed", exc_info=True)
        exit_with_error(EXIT_INTERNAL, f"Internal error: {exc}")

    if permissions_only:
        if policy.output.format == "json":
            render_json(to_dict(result.permissions))
        else:
            print_permissions(result.permissions)
        sys.exit(EXIT_PASS)

    if policy.output.format == "json":
        render_json(build_report(result, policy))
    else:
        print_scan_report(result, policy)
    sys.exit(result.exit_code)
