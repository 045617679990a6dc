"""Scope expansion rules (SCOPE).

In a single scan these rules report high-risk capability combinations that
would count as an escalation between versions. The version-to-version
comparison itself lives in ``agentlint.core.diff``.
"""

from __future__ import annotations

from agentlint.core.ir import ActionType, Finding, Severity
from agentlint.core.rules.base import (
    DOCUMENT_START,
    Rule,
    RuleContext,
    RuleDefinition,
    heuristic_evidence,
    make_finding,
)

BROAD_WRITE_PATTERNS: tuple[str, ...] = ("**/*", "**", "*", "./")


def is_broad_write_path(path: str) -> bool:
    return any(path == p or path.startswith(p + "/") for p in BROAD_WRITE_PATTERNS)


class CapabilityExpansionRule(Rule):
    """SCOPE-001: dynamic shell, and the network + shell + fetch RCE chain."""

    definition = RuleDefinition(
        id="SCOPE-001",
        group="scope",
        severity=Severity.HIGH,
        title="Capability Expansion Between Versions",
        description=(
            "New capabilities have been added, equivalent to permission escalation. This "
            "includes shell execution, network access, or sensitive file operations."
        ),
        recommendation=(
            "Review the capability expansion carefully. Ensure new capabilities are "
            "intentional and follow least-privilege principles."
        ),
        tags=("scope", "expansion", "diff", "permissions"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        findings: list[Finding] = []
        document = ctx.document
        summary = ctx.summary
        # Scan-wide conditions are reported only on documents contributing to them.
        dynamic_here = any(
            a.shell is not None and a.shell.dynamic for a in document.actions_of(ActionType.SHELL_EXEC)
        )
        fetch_here = any(
            a.network is not None and a.network.fetches_executable
            for a in document.actions_of(ActionType.NETWORK_CALL)
        )
        if summary.shell_exec.dynamic_detected and dynamic_here:
            findings.append(
                make_finding(
                    self.definition,
                    document,
                    DOCUMENT_START,
                    "Dynamic shell execution capability detected. This is a high-risk capability.",
                    heuristic_evidence("shell_exec.dynamic_detected: true", 0.9),
                    0.9,
                )
            )
        if (
            summary.network.outbound
            and summary.shell_exec.enabled
            and summary.network.fetches_executable
            and fetch_here
        ):
            findings.append(
                make_finding(
                    self.definition,
                    document,
                    DOCUMENT_START,
                    "Remote code execution capability pattern detected: "
                    "network + shell + executable fetch.",
                    heuristic_evidence(
                        "RCE pattern: network.outbound + shell_exec + fetches_executable", 0.95
                    ),
                    0.95,
                )
            )
        return findings


class WriteScopeWideningRule(Rule):
    """SCOPE-002: the document writes through a broad glob."""

    definition = RuleDefinition(
        id="SCOPE-002",
        group="scope",
        severity=Severity.MEDIUM,
        title="Write Scope Widening",
        description=(
            "File write access scope has been widened, potentially allowing writes to more "
            "locations."
        ),
        recommendation=(
            "Verify that expanded write scope is intentional. Keep write access as narrow as "
            "possible."
        ),
        tags=("scope", "filesystem", "write", "diff"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        for action in ctx.document.actions_of(ActionType.FILE_WRITE):
            paths = action.filesystem.paths if action.filesystem else []
            for path in paths:
                if is_broad_write_path(path):
                    # Once per document.
                    return [
                        make_finding(
                            self.definition,
                            ctx.document,
                            DOCUMENT_START,
                            f'Broad write scope detected: "{path}". '
                            "This allows writes to many locations.",
                            heuristic_evidence(f"filesystem.write includes broad pattern: {path}", 0.85),
                            0.85,
                        )
                    ]
        return []


RULES: tuple[Rule, ...] = (
    CapabilityExpansionRule(),
    WriteScopeWideningRule(),
)
