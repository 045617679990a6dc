"""Rich output formatting helpers for the AgentLint CLI.

Provides severity-coloured terminal output for scan reports, permission
manifests, diffs, baselines and the rule catalogue, plus the JSON
renderer shared by every command.

Severity Color Mapping:
    HIGH = bold red, MEDIUM = yellow, LOW = cyan
"""

from __future__ import annotations

import json
import logging
from typing import Any

import click
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from agentlint.core.diff import DiffResult
from agentlint.core.ir import Finding, PermissionManifest, ScanStatus, Severity, to_dict
from agentlint.core.policy import Policy
from agentlint.core.rules import RuleDefinition, count_by_severity
from agentlint.scanner import ScanResult

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.HIGH: "bold red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
}

_STATUS_STYLES: dict[ScanStatus, str] = {
    ScanStatus.PASS: "bold green",
    ScanStatus.WARN: "bold yellow",
    ScanStatus.FAIL: "bold red",
}

console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr; DEBUG when ``verbose``, else WARNING."""
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(logging.DEBUG if verbose else logging.WARNING)


def configure_console(color: str = "auto") -> None:
    """Rebuild the shared console for the ``output.color`` setting."""
    global console
    if color == "always":
        console = Console(force_terminal=True)
    elif color == "never":
        console = Console(no_color=True, highlight=False)
    else:
        console = Console()


def severity_style(severity: Severity) -> str:
    """Return the Rich style string for a given severity level."""
    return _SEVERITY_STYLES.get(severity, "white")


def status_text(status: ScanStatus) -> Text:
    return Text(status.value.upper(), style=_STATUS_STYLES.get(status, "white"))


def render_json(data: Any) -> None:
    """Print ``data`` as indented JSON with sorted keys."""
    click.echo(json.dumps(data, indent=2, sort_keys=True))


# ---------------------------------------------------------------------------
# Scan
# ---------------------------------------------------------------------------


def print_scan_report(result: ScanResult, policy: Policy) -> None:
    """Print the findings table, manifest and verdict for one scan.

    Args:
        result: A finished scan.
        policy: Policy the scan ran under (controls recommendations and
            the permission manifest).
    """
    if not result.documents:
        console.print("[dim]No supported agent configuration files found.[/dim]")
        _print_errors(result)
        console.print(Text.assemble(("Status: ", "bold"), status_text(result.status)))
        return

    console.print(
        Text.assemble(("AgentLint", "bold"), f" scanned {len(result.documents)} document(s) in {result.root}")
    )
    if result.findings:
        print_findings(result.findings, show_recommendations=policy.output.include_recommendations)
    else:
        console.print("[green]No findings.[/green]")

    if policy.output.include_permission_manifest:
        print_permissions(result.permissions)
    _print_errors(result)
    _print_scan_summary(result)


def print_findings(findings: list[Finding], show_recommendations: bool = True) -> None:
    """Print a severity-coloured table of findings."""
    table = Table(title="Findings", show_header=True, header_style="bold")
    table.add_column("Severity", justify="center")
    table.add_column("Rule", style="bold")
    table.add_column("Location", style="dim")
    table.add_column("Message")
    if show_recommendations:
        table.add_column("Recommendation", style="dim")

    for finding in findings:
        location = f"{finding.location.path}:{finding.location.start_line}"
        row = [
            Text(finding.severity.label.upper(), style=severity_style(finding.severity)),
            finding.rule_id,
            Text(location),
            Text(finding.message),
        ]
        if show_recommendations:
            row.append(Text(finding.recommendation))
        table.add_row(*row)
    console.print(table)


def print_permissions(manifest: PermissionManifest) -> None:
    """Print the recommended permission manifest as YAML in a panel."""
    body = yaml.safe_dump(to_dict(manifest), sort_keys=False, default_flow_style=False)
    console.print(Panel(Text(body.rstrip()), title="Recommended Permissions"))


def _print_errors(result: ScanResult) -> None:
    if not result.errors:
        return
    table = Table(title="Errors", show_header=True, header_style="bold")
    table.add_column("Code", style="bold red")
    table.add_column("Path", style="dim")
    table.add_column("Message")
    for error in result.errors:
        table.add_row(error.code, Text(error.path or "-"), Text(error.message))
    console.print(table)


def _print_scan_summary(result: ScanResult) -> None:
    """Print a one-line summary after the scan tables."""
    counts = count_by_severity(result.findings)
    parts = [f"[bold]{len(result.documents)}[/bold] documents"]
    for severity in (Severity.HIGH, Severity.MEDIUM, Severity.LOW):
        n = counts.get(severity.label, 0)
        if n:
            parts.append(f"[{severity_style(severity)}]{n} {severity.label}[/]")
    parts.append(f"{len(result.findings)} total findings")
    if result.baseline is not None:
        parts.append(f"{result.baseline.suppressed_findings} baselined")
    console.print(" | ".join(parts))
    console.print(Text.assemble(("Status: ", "bold"), status_text(result.status)))


# ---------------------------------------------------------------------------
# Diff
# ---------------------------------------------------------------------------


def print_diff(diff: DiffResult) -> None:
    """Print capability changes and new findings between two scans."""
    console.print(Text.assemble(("AgentLint diff", "bold"), f" {diff.base_ref} -> {diff.target_ref}"))
    if diff.changes:
        table = Table(title="Capability Changes", show_header=True, header_style="bold")
        table.add_column("Severity", justify="center")
        table.add_column("Change", style="bold")
        table.add_column("Detail")
        for change in diff.changes:
            table.add_row(
                Text(change.severity.label.upper(), style=severity_style(change.severity)),
                change.type.value,
                Text(change.message),
            )
        console.print(table)
    else:
        console.print("[green]No capability changes.[/green]")

    if diff.new_findings:
        print_findings(diff.new_findings, show_recommendations=False)
    console.print(
        f"{len(diff.new_findings)} new findings | {len(diff.resolved_findings)} resolved"
    )
    console.print(Text.assemble(("Status: ", "bold"), status_text(diff.summary.status)))


# ---------------------------------------------------------------------------
# Baseline
# ---------------------------------------------------------------------------


def print_baseline_stats(path: str, stats: dict[str, Any]) -> None:
    table = Table(title=Text(f"Baseline: {path}"), show_header=True, header_style="bold")
    table.add_column("Rule", style="bold")
    table.add_column("Findings", justify="right")
    for rule_id, count in sorted(stats["by_rule"].items()):
        table.add_row(rule_id, str(count))
    console.print(table)
    console.print(f"[bold]{stats['total']}[/bold] baselined findings")


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def print_rules_table(definitions: list[RuleDefinition]) -> None:
    table = Table(title="AgentLint Rules", show_header=True, header_style="bold")
    table.add_column("ID", style="bold")
    table.add_column("Group", style="dim")
    table.add_column("Severity", justify="center")
    table.add_column("Title")
    for d in definitions:
        table.add_row(
            d.id,
            d.group,
            Text(d.severity.label.upper(), style=severity_style(d.severity)),
            Text(d.title),
        )
    console.print(table)


def print_rule_detail(definition: RuleDefinition) -> None:
    """Print the full metadata of one rule in a panel."""
    body = Text.assemble(
        ("Group: ", "bold"), (definition.group, ""), "\n",
        ("Severity: ", "bold"),
        (definition.severity.label.upper(), severity_style(definition.severity)), "\n",
        ("Tags: ", "bold"), (", ".join(definition.tags) or "-", "dim"), "\n\n",
        (definition.description, ""), "\n\n",
        ("Recommendation: ", "bold"), (definition.recommendation, ""),
    )
    console.print(Panel(body, title=f"{definition.id}: {definition.title}"))
