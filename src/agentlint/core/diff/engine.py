"""Diff engine: behavioural comparison of two scans.

Capability detectors are one-directional. A change is emitted only when a
boolean goes from False to True or a set gains members; shrinking
capabilities never produce a change. Findings are matched across the two
sides by stable fingerprint.

Verdict precedence (first match wins):

1. any change whose type is listed in ``fail_on`` -> fail
2. ``new_high_findings`` in ``fail_on`` and a new high finding -> fail
3. any change whose type is listed in ``warn_on`` -> warn
4. ``new_medium_findings`` in ``warn_on`` and a new medium finding -> warn
5. otherwise pass
"""

from __future__ import annotations

from typing import Any, Iterable

from agentlint.core.diff.models import (
    EXPANSION_TYPES,
    NEW_HIGH_FINDINGS,
    NEW_MEDIUM_FINDINGS,
    ChangeType,
    DiffChange,
    DiffResult,
    DiffSummary,
)
from agentlint.core.fingerprint import sha256_hex
from agentlint.core.ir import CapabilitySummary, Finding, ScanStatus, Severity

FULLY_OPEN_WRITE: frozenset[str] = frozenset({"**/*", "**", "*"})

DEFAULT_FAIL_ON: tuple[str, ...] = (
    ChangeType.CAPABILITY_EXPANSION.value,
    ChangeType.CONTEXT_CHANGE_TO_HOOK.value,
    ChangeType.WRITE_SCOPE_WIDENING_TO_ALL.value,
)
DEFAULT_WARN_ON: tuple[str, ...] = (NEW_MEDIUM_FINDINGS,)


def _change(
    change_type: ChangeType, severity: Severity, message: str, details: dict[str, Any]
) -> DiffChange:
    key = details.get("field") or message
    change_id = "chg_" + sha256_hex(f"{change_type.value}|{key}")[:12]
    return DiffChange(change_id, change_type, severity, message, details)


def _flag(change_type: ChangeType, severity: Severity, field: str, message: str) -> DiffChange:
    return _change(change_type, severity, message, {"field": field, "from": False, "to": True})


def _added(base: list[str], target: list[str]) -> list[str]:
    known = set(base)
    return [item for item in target if item not in known]


# ---------------------------------------------------------------------------
# Capability transitions
# ---------------------------------------------------------------------------


def detect_capability_changes(
    base: CapabilitySummary, target: CapabilitySummary
) -> list[DiffChange]:
    """Return every growth transition from ``base`` to ``target``."""
    changes: list[DiffChange] = []

    if not base.shell_exec.enabled and target.shell_exec.enabled:
        changes.append(
            _flag(
                ChangeType.CAPABILITY_EXPANSION,
                Severity.HIGH,
                "shell_exec.enabled",
                "shell_exec.enabled: false -> true",
            )
        )
    if not base.shell_exec.dynamic_detected and target.shell_exec.dynamic_detected:
        changes.append(
            _flag(
                ChangeType.SHELL_DYNAMIC_INTRODUCED,
                Severity.HIGH,
                "shell_exec.dynamic_detected",
                "shell_exec.dynamic: false -> true",
            )
        )

    if not base.network.outbound and target.network.outbound:
        changes.append(
            _flag(
                ChangeType.NETWORK_NEW_OUTBOUND,
                Severity.HIGH,
                "network.outbound",
                "network.outbound: false -> true",
            )
        )
    if not base.network.inbound and target.network.inbound:
        changes.append(
            _flag(
                ChangeType.NETWORK_EXPANSION,
                Severity.MEDIUM,
                "network.inbound",
                "network.inbound: false -> true",
            )
        )
    if not base.network.fetches_executable and target.network.fetches_executable:
        changes.append(
            _flag(
                ChangeType.CAPABILITY_EXPANSION,
                Severity.HIGH,
                "network.fetches_executable",
                "network.fetches_executable: false -> true",
            )
        )

    if not base.contexts.has_hooks and target.contexts.has_hooks:
        changes.append(
            _flag(
                ChangeType.CONTEXT_CHANGE_TO_HOOK,
                Severity.HIGH,
                "contexts.has_hooks",
                "Hooks added to configuration",
            )
        )
    if not base.contexts.has_ci_context and target.contexts.has_ci_context:
        changes.append(
            _flag(
                ChangeType.CONTEXT_CHANGE_TO_CI,
                Severity.MEDIUM,
                "contexts.has_ci_context",
                "CI context added to configuration",
            )
        )

    new_sensitive = _added(
        base.filesystem.touches_sensitive_paths, target.filesystem.touches_sensitive_paths
    )
    if new_sensitive:
        changes.append(
            _change(
                ChangeType.SENSITIVE_PATH_NEWLY_TOUCHED,
                Severity.HIGH,
                f"New sensitive paths touched: {', '.join(new_sensitive)}",
                {"new_paths": new_sensitive},
            )
        )

    base_open = any(w in FULLY_OPEN_WRITE for w in base.filesystem.write)
    target_open = any(w in FULLY_OPEN_WRITE for w in target.filesystem.write)
    if target_open and not base_open:
        changes.append(
            _change(
                ChangeType.WRITE_SCOPE_WIDENING_TO_ALL,
                Severity.HIGH,
                "Write scope widened to include all files",
                {
                    "base_writes": list(base.filesystem.write),
                    "target_writes": list(target.filesystem.write),
                },
            )
        )

    new_vars = _added(base.secrets.env_vars_referenced, target.secrets.env_vars_referenced)
    if new_vars:
        changes.append(
            _change(
                ChangeType.CAPABILITY_EXPANSION,
                Severity.HIGH,
                f"New secret variables referenced: {', '.join(new_vars)}",
                {"new_secret_vars": new_vars},
            )
        )
    if not base.secrets.propagation_detected and target.secrets.propagation_detected:
        changes.append(
            _flag(
                ChangeType.CAPABILITY_EXPANSION,
                Severity.HIGH,
                "secrets.propagation_detected",
                "Secret propagation detected",
            )
        )

    return changes


# ---------------------------------------------------------------------------
# Findings and verdict
# ---------------------------------------------------------------------------


def new_findings(base: Iterable[Finding], target: Iterable[Finding]) -> list[Finding]:
    """Findings of ``target`` whose stable fingerprint does not occur in ``base``."""
    known = {f.fingerprints.stable for f in base}
    return [f for f in target if f.fingerprints.stable not in known]


def diff_status(
    changes: list[DiffChange],
    added: list[Finding],
    fail_on: Iterable[str],
    warn_on: Iterable[str],
) -> tuple[ScanStatus, int]:
    """Apply the verdict precedence. Returns (status, exit code)."""
    fail_on = list(fail_on)
    warn_on = list(warn_on)
    change_types = {c.type.value for c in changes}

    if any(t in change_types for t in fail_on):
        return ScanStatus.FAIL, 1
    if NEW_HIGH_FINDINGS in fail_on and any(f.severity == Severity.HIGH for f in added):
        return ScanStatus.FAIL, 1
    if any(t in change_types for t in warn_on):
        return ScanStatus.WARN, 0
    if NEW_MEDIUM_FINDINGS in warn_on and any(f.severity == Severity.MEDIUM for f in added):
        return ScanStatus.WARN, 0
    return ScanStatus.PASS, 0


def compare(
    base_summary: CapabilitySummary,
    base_findings: list[Finding],
    target_summary: CapabilitySummary,
    target_findings: list[Finding],
    fail_on: Iterable[str] = DEFAULT_FAIL_ON,
    warn_on: Iterable[str] = DEFAULT_WARN_ON,
    base_ref: str = "base",
    target_ref: str = "target",
) -> DiffResult:
    """Compare two scans and classify what changed.

    Args:
        base_summary, base_findings: The earlier scan.
        target_summary, target_findings: The later scan.
        fail_on: Change types (or ``new_high_findings``) that fail the diff.
        warn_on: Change types (or ``new_medium_findings``) that warn.
        base_ref, target_ref: Labels carried into the result.
    """
    changes = detect_capability_changes(base_summary, target_summary)
    added = new_findings(base_findings, target_findings)
    resolved = new_findings(target_findings, base_findings)
    status, exit_code = diff_status(changes, added, fail_on, warn_on)

    summary = DiffSummary(
        capability_expansion=any(c.type in EXPANSION_TYPES for c in changes),
        new_high_findings=sum(1 for f in added if f.severity == Severity.HIGH),
        status=status,
        exit_code=exit_code,
    )
    return DiffResult(
        base_ref=base_ref,
        target_ref=target_ref,
        summary=summary,
        changes=changes,
        new_findings=added,
        resolved_findings=resolved,
    )
