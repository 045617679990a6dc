"""Instruction integrity rules (INST).

Both rules scan ``instruction_blocks`` with a phrase catalog and report at
most one match per block. INST-001 additionally picks up the override
actions emitted by the extractors' full-document scan, skipping lines a
block match already covers.
"""

from __future__ import annotations

import re

from agentlint.core.ir import ActionType, AgentDocument, Evidence, EvidenceKind, Finding, Severity
from agentlint.core.rules.base import Rule, RuleContext, RuleDefinition, action_finding, make_finding
from agentlint.parsers.patterns import OVERRIDE_ACTION_SUMMARY

OVERRIDE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"ignore\s+(?:all\s+)?(?:previous\s+)?(?:instructions?|rules?)", re.I),
    re.compile(r"disregard\s+(?:all\s+)?(?:previous\s+)?(?:rules?|instructions?)", re.I),
    re.compile(r"forget\s+(?:all\s+)?(?:previous\s+)?(?:instructions?|rules?)", re.I),
    re.compile(r"override\s+(?:all\s+)?(?:rules?|restrictions?|safeguards?)", re.I),
    re.compile(r"bypass\s+(?:all\s+)?(?:safety\s+)?(?:rules?|restrictions?|safeguards?)", re.I),
    re.compile(r"disable\s+(?:all\s+)?(?:safety\s+)?(?:safeguards?|restrictions?)", re.I),
    re.compile(r"rewrite\s+(?:your\s+)?(?:rules?|instructions?)", re.I),
    re.compile(r"new\s+system\s+prompt", re.I),
    re.compile(r"you\s+are\s+now\s+(?:a\s+)?(?:new|different)", re.I),
    re.compile(r"pretend\s+(?:you\s+are|that)", re.I),
    re.compile(r"act\s+as\s+if\s+(?:you\s+have\s+no|there\s+are\s+no)", re.I),
    re.compile(r"from\s+now\s+on,?\s+(?:ignore|forget|disregard)", re.I),
)

SELF_MODIFY_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"(?:modify|edit|change|update|rewrite)\s+(?:your(?:self)?\s+|this\s+)?"
        r"(?:rules?|config|instructions?|settings?)",
        re.I,
    ),
    re.compile(r"add\s+(?:new\s+)?(?:rules?|instructions?)\s+to\s+(?:your(?:self)?|this)", re.I),
    re.compile(r"(?:delete|remove)\s+(?:existing\s+)?(?:rules?|restrictions?)", re.I),
    re.compile(r"reconfigure\s+(?:your(?:self)?|the\s+agent)", re.I),
    re.compile(r"change\s+(?:your\s+)?(?:behavior|capabilities)", re.I),
)

AGENT_CONFIG_PATHS: tuple[str, ...] = (".claude/", ".cursorrules", "claude.md", "agents.md")


def _block_matches(
    definition: RuleDefinition,
    document: AgentDocument,
    patterns: tuple[re.Pattern[str], ...],
    label: str,
    confidence: float,
) -> list[Finding]:
    findings: list[Finding] = []
    for block in document.instruction_blocks:
        for pattern in patterns:
            match = pattern.search(block.text)
            if match:
                findings.append(
                    make_finding(
                        definition,
                        document,
                        block.anchors,
                        f'{label}: "{match.group(0)}"',
                        [Evidence(EvidenceKind.REGEX, match.group(0), confidence)],
                        confidence,
                    )
                )
                break
    return findings


class InstructionOverrideRule(Rule):
    """INST-001: attempts to make the agent ignore its rules."""

    definition = RuleDefinition(
        id="INST-001",
        group="instruction",
        severity=Severity.HIGH,
        title="Instruction Override Patterns",
        description=(
            "Patterns that instruct the agent to ignore previous rules, rewrite governance, "
            "or disable safeguards. This is a governance bypass attempt."
        ),
        recommendation=(
            "Remove instruction override patterns. Agent configurations should not attempt "
            "to bypass safety measures."
        ),
        tags=("instruction", "override", "governance", "jailbreak"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        document = ctx.document
        findings = _block_matches(
            self.definition, document, OVERRIDE_PATTERNS, "Instruction override pattern detected", 0.95
        )
        covered = {
            line
            for f in findings
            for line in range(f.location.start_line, f.location.end_line + 1)
        }
        for action in document.actions_of(ActionType.UNKNOWN):
            if OVERRIDE_ACTION_SUMMARY not in action.summary:
                continue
            if action.anchors.start_line in covered:
                continue
            covered.add(action.anchors.start_line)
            findings.append(
                action_finding(
                    self.definition, document, action, "Instruction override pattern detected in action."
                )
            )
        return findings


class SelfModifyingRulesRule(Rule):
    """INST-002: instructions or writes that change the agent's own config."""

    definition = RuleDefinition(
        id="INST-002",
        group="instruction",
        severity=Severity.HIGH,
        title="Self-Modifying Rules",
        description=(
            "Agent is instructed to modify its own configuration, rules, or behavior. This "
            "creates unpredictable governance risks."
        ),
        recommendation=(
            "Agent configurations should be immutable during execution. Remove "
            "self-modification instructions."
        ),
        tags=("instruction", "self-modify", "governance"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        document = ctx.document
        findings = _block_matches(
            self.definition, document, SELF_MODIFY_PATTERNS, "Self-modification pattern detected", 0.9
        )
        for action in document.actions_of(ActionType.FILE_WRITE):
            paths = action.filesystem.paths if action.filesystem else []
            for path in paths:
                lowered = path.lower()
                if any(p in lowered for p in AGENT_CONFIG_PATHS):
                    findings.append(
                        action_finding(
                            self.definition,
                            document,
                            action,
                            f'Self-modification detected: writes to agent configuration path "{path}"',
                        )
                    )
        return findings


RULES: tuple[Rule, ...] = (
    InstructionOverrideRule(),
    SelfModifyingRulesRule(),
)
