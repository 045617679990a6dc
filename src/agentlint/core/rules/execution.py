"""Execution rules (EXEC): shell execution risks."""

from __future__ import annotations

from agentlint.core.ir import ActionType, CapabilityType, ContextType, Finding, Severity
from agentlint.core.rules.base import (
    DOCUMENT_START,
    Rule,
    RuleContext,
    RuleDefinition,
    action_finding,
    heuristic_evidence,
    make_finding,
)


class DynamicShellExecutionRule(Rule):
    """EXEC-001: shell commands built or fetched at runtime."""

    definition = RuleDefinition(
        id="EXEC-001",
        group="execution",
        severity=Severity.HIGH,
        title="Dynamic Shell Execution",
        description=(
            "Detects shell execution where the command is dynamically constructed or "
            "fetched. This includes patterns like curl|bash, wget|sh, and eval with variables."
        ),
        recommendation=(
            "Replace with fixed commands or disable shell access. Use pinned, verified "
            "installers instead of fetching scripts from the network."
        ),
        tags=("rce", "supply-chain", "dynamic-execution"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        findings: list[Finding] = []
        for action in ctx.document.actions_of(ActionType.SHELL_EXEC):
            if action.shell is None or not action.shell.dynamic:
                continue
            findings.append(
                action_finding(self.definition, ctx.document, action, _dynamic_message(action.shell.patterns))
            )
        return findings


def _dynamic_message(patterns: list[str] | None) -> str:
    patterns = patterns or []
    if "curl|bash" in patterns or "wget|bash" in patterns:
        return "Remote code execution risk: curl|bash or wget|bash pattern detected."
    if "eval" in patterns:
        return "Dynamic shell execution via eval detected."
    if "variable_interpolation" in patterns:
        return "Shell command with variable interpolation detected."
    return "Dynamic shell execution detected."


class ShellInNonInteractiveRule(Rule):
    """EXEC-002: shell execution inside hooks."""

    definition = RuleDefinition(
        id="EXEC-002",
        group="execution",
        severity=Severity.HIGH,
        title="Shell Execution in Non-Interactive Context",
        description=(
            "Shell commands executed inside hooks or auto-triggered contexts. Users do not "
            "explicitly approve these actions at runtime."
        ),
        recommendation=(
            "Move shell execution to interactive contexts where user approval is required, "
            "or remove automatic hook execution."
        ),
        tags=("rce", "hook", "automation"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        document = ctx.document
        if document.context_profile.primary != ContextType.HOOK:
            return []
        return [
            action_finding(
                self.definition,
                document,
                action,
                f"Shell execution in hook context: {action.summary}. "
                "Users do not explicitly approve hook actions.",
            )
            for action in document.actions_of(ActionType.SHELL_EXEC)
        ]


class BroadShellCapabilityRule(Rule):
    """EXEC-003: shell capability without any command allowlist."""

    definition = RuleDefinition(
        id="EXEC-003",
        group="execution",
        severity=Severity.MEDIUM,
        title="Broad Shell Capability Declaration",
        description=(
            "Shell execution is allowed without command scope restriction. This enables "
            "arbitrary command execution."
        ),
        recommendation=(
            "Define an explicit command allowlist in the permission manifest, or disable "
            "shell execution."
        ),
        tags=("shell", "permissions", "least-privilege"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        if not ctx.summary.shell_exec.enabled:
            return []
        for cap in ctx.document.capabilities:
            if cap.type != CapabilityType.SHELL_EXEC:
                continue
            shell = cap.scope.shell_exec
            if shell is None or not shell.allowed_commands:
                # Reported once per document.
                return [
                    make_finding(
                        self.definition,
                        ctx.document,
                        DOCUMENT_START,
                        "Shell execution capability declared without command restrictions.",
                        heuristic_evidence("shell_exec: enabled without allowlist", 0.8),
                        0.8,
                    )
                ]
        return []


RULES: tuple[Rule, ...] = (
    DynamicShellExecutionRule(),
    ShellInNonInteractiveRule(),
    BroadShellCapabilityRule(),
)
