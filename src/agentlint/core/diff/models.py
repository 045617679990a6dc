"""Diff data models -- DiffChange and DiffResult.

Pure data holders produced by ``agentlint.core.diff.engine``. Diff results
are handed to renderers and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from agentlint.core.ir import Finding, ScanStatus, Severity


class ChangeType(Enum):
    """Classification of a capability transition between two scans."""

    CAPABILITY_EXPANSION = "capability_expansion"
    SHELL_DYNAMIC_INTRODUCED = "shell_dynamic_introduced"
    NETWORK_NEW_OUTBOUND = "network_new_outbound"
    NETWORK_EXPANSION = "network_expansion"
    CONTEXT_CHANGE_TO_HOOK = "context_change_to_hook"
    CONTEXT_CHANGE_TO_CI = "context_change_to_ci"
    SENSITIVE_PATH_NEWLY_TOUCHED = "sensitive_path_newly_touched"
    WRITE_SCOPE_WIDENING_TO_ALL = "write_scope_widening_to_all"


# Pseudo change types accepted in diff.fail_on / diff.warn_on.
NEW_HIGH_FINDINGS: str = "new_high_findings"
NEW_MEDIUM_FINDINGS: str = "new_medium_findings"

# Change types that set DiffSummary.capability_expansion.
EXPANSION_TYPES: frozenset[ChangeType] = frozenset(
    {
        ChangeType.CAPABILITY_EXPANSION,
        ChangeType.NETWORK_NEW_OUTBOUND,
        ChangeType.SHELL_DYNAMIC_INTRODUCED,
    }
)

DIFF_CONDITIONS: tuple[str, ...] = tuple(t.value for t in ChangeType) + (
    NEW_HIGH_FINDINGS,
    NEW_MEDIUM_FINDINGS,
)


@dataclass(frozen=True)
class DiffChange:
    """One growth transition between base and target.

    Attributes:
        change_id: Deterministic id derived from type and field.
        type: Change classification.
        severity: How serious the transition is.
        message: Human-readable description (e.g. "shell_exec.enabled:
            false -> true").
        details: Structured data about the transition.
    """

    change_id: str
    type: ChangeType
    severity: Severity
    message: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class DiffSummary:
    capability_expansion: bool = False
    new_high_findings: int = 0
    status: ScanStatus = ScanStatus.PASS
    exit_code: int = 0


@dataclass
class DiffResult:
    """Outcome of comparing two scans.

    Attributes:
        base_ref: Label of the base side (a path or name).
        target_ref: Label of the target side.
        summary: Verdict and headline counts.
        changes: Capability transitions, in detection order.
        new_findings: Target findings whose stable fingerprint is absent
            from base.
        resolved_findings: Base findings whose stable fingerprint is absent
            from target.
    """

    base_ref: str
    target_ref: str
    summary: DiffSummary
    changes: list[DiffChange] = field(default_factory=list)
    new_findings: list[Finding] = field(default_factory=list)
    resolved_findings: list[Finding] = field(default_factory=list)
