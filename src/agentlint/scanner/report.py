"""Report object construction.

``build_report`` turns a ``ScanResult`` into the JSON-compatible report
consumed by the renderers (``agentlint.report.v1.0``). The layout:

- ``report_version``, ``schema_version``, ``generated_at``, ``tool``
- ``inputs`` -- scan root, include/exclude globs, tool mode
- ``policy`` -- thresholds and rule overrides in effect
- ``summary`` -- document and parse counts, contexts, severity counts,
  status and exit code, baseline counts when a baseline was applied
- ``documents`` -- per-document summaries
- ``capability_summary``, ``recommended_permissions``, ``findings``
- ``diff`` -- always None for a plain scan
- ``errors`` -- accumulated ``ScanError`` records

``build_diff_report`` wraps a ``DiffResult`` the same way for ``agentlint
diff``.
"""

from __future__ import annotations

import platform
from datetime import datetime, timezone
from typing import Any

from agentlint import __version__
from agentlint.core.diff import DiffResult
from agentlint.core.ir import IR_SCHEMA_VERSION, REPORT_VERSION, to_dict
from agentlint.core.policy import Policy
from agentlint.core.rules import count_by_severity
from agentlint.scanner.models import ScanResult, summarize_document


def build_report(
    result: ScanResult, policy: Policy, generated_at: str | None = None
) -> dict[str, Any]:
    """Build the report dict for ``result``.

    Args:
        result: A finished scan.
        policy: The policy the scan ran under.
        generated_at: ISO-8601 timestamp; defaults to now (UTC).
    """
    summary: dict[str, Any] = {
        "documents_scanned": len(result.documents),
        "files_matched": len(result.documents),
        "parse": result.parse_counts,
        "contexts": to_dict(result.summary.contexts),
        "counts_by_severity": count_by_severity(result.findings),
        "status": result.status.value,
        "exit_code": result.exit_code,
    }
    if result.baseline is not None:
        summary["baseline"] = {
            "new_findings": result.baseline.new_findings,
            "suppressed_findings": result.baseline.suppressed_findings,
            "fixed_findings": result.baseline.fixed_findings,
        }

    report: dict[str, Any] = {
        "report_version": REPORT_VERSION,
        "schema_version": IR_SCHEMA_VERSION,
        "generated_at": generated_at or datetime.now(timezone.utc).isoformat(),
        "tool": {
            "name": "agentlint",
            "version": __version__,
            "build": {"os": platform.system().lower(), "arch": platform.machine()},
        },
        "inputs": {
            "scan_root": result.root,
            "include": list(policy.scan.include),
            "exclude": list(policy.scan.exclude),
            "tool_mode": policy.scan.tool_mode,
        },
        "policy": {
            "ci_mode": policy.policy.ci_mode,
            "fail_on": policy.policy.fail_on,
            "warn_on": policy.policy.warn_on,
            "min_confidence": policy.policy.min_finding_confidence,
            "rules_disabled": list(policy.rules.disable),
            "severity_overrides": dict(policy.rules.severity_overrides),
        },
        "summary": summary,
        "documents": to_dict([summarize_document(d) for d in result.documents]),
        "capability_summary": to_dict(result.summary),
        "recommended_permissions": (
            to_dict(result.permissions) if policy.output.include_permission_manifest else None
        ),
        "findings": to_dict(result.findings),
        "diff": None,
        "errors": to_dict(result.errors),
    }
    if policy.output.include_ir:
        report["ir"] = to_dict(result.documents)
    return report


def build_diff_report(diff: DiffResult, generated_at: str | None = None) -> dict[str, Any]:
    """Build the report dict for a two-directory comparison."""
    body = to_dict(diff)
    return {
        "report_version": REPORT_VERSION,
        "generated_at": generated_at or datetime.now(timezone.utc).isoformat(),
        "tool": {"name": "agentlint", "version": __version__},
        "diff": body,
        "summary": body["summary"],
    }
