"""Observability and audit rules (OBS)."""

from __future__ import annotations

from agentlint.core.ir import ACTION_CAPABILITY_MAP, Finding, Severity
from agentlint.core.rules.base import (
    DOCUMENT_START,
    Rule,
    RuleContext,
    RuleDefinition,
    heuristic_evidence,
    make_finding,
)

PERMISSION_KEYWORDS: tuple[str, ...] = ("permission", "capability", "allowed")


class MissingCapabilityDeclarationRule(Rule):
    """OBS-001: an action type with no capability bucket in the document."""

    definition = RuleDefinition(
        id="OBS-001",
        group="observability",
        severity=Severity.MEDIUM,
        title="Missing Capability Declaration",
        description=(
            "Actions are present without corresponding capability declarations. This creates "
            "opaque behavior that is difficult to audit."
        ),
        recommendation=(
            "Declare all capabilities explicitly in the permission manifest. This improves "
            "visibility and enables policy enforcement."
        ),
        tags=("observability", "capabilities", "audit"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        document = ctx.document
        declared = {cap.type for cap in document.capabilities}
        findings: list[Finding] = []
        seen = set()
        for action in document.actions:
            if action.type in seen:
                continue
            seen.add(action.type)
            expected = ACTION_CAPABILITY_MAP.get(action.type)
            if expected is None or expected in declared:
                continue
            findings.append(
                make_finding(
                    self.definition,
                    document,
                    action.anchors,
                    f'Action "{action.type.value}" performed without declared capability.',
                    heuristic_evidence(
                        f"Action type {action.type.value} without {expected.value} capability", 0.75
                    ),
                    0.75,
                )
            )
        return findings


class NoPermissionManifestRule(Rule):
    """OBS-002: capabilities present, no permission section in the text."""

    definition = RuleDefinition(
        id="OBS-002",
        group="observability",
        severity=Severity.LOW,
        title="No Permission Manifest",
        description=(
            "Agent configuration exists without an explicit permission declaration. This "
            "encourages good hygiene and auditability."
        ),
        recommendation=(
            "Add an explicit permission manifest to the agent configuration. This documents "
            "expected capabilities and enables policy enforcement."
        ),
        tags=("observability", "manifest", "documentation"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        document = ctx.document
        if not document.capabilities:
            return []
        for block in document.instruction_blocks:
            text = block.text.lower()
            if any(keyword in text for keyword in PERMISSION_KEYWORDS):
                return []
        return [
            make_finding(
                self.definition,
                document,
                DOCUMENT_START,
                "Agent configuration has capabilities but no explicit permission manifest.",
                heuristic_evidence("No permission declaration found in document", 0.6),
                0.6,
            )
        ]


RULES: tuple[Rule, ...] = (
    MissingCapabilityDeclarationRule(),
    NoPermissionManifestRule(),
)
