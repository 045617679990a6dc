"""Rule engine: runs the rule registry over every document of a scan.

For each document the engine builds one ``RuleContext`` per rule and calls
``evaluate``. Post-processing always happens in the same order:

1. severity override (per rule id, else per group) -- an override of
   ``None`` drops the rule's findings entirely;
2. confidence gate -- findings below the effective threshold (the rule's
   ``confidence_overrides`` entry, else the global minimum) are dropped;
3. accumulation across documents;
4. sort by severity (high first), path, start line, rule id.

A rule that raises is logged and skipped; the remaining rules still run
and the failure is returned in ``EngineResult.errors``.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from agentlint.core.ir import AgentDocument, CapabilitySummary, Finding, Severity
from agentlint.core.rules import (
    execution,
    filesystem,
    hook,
    instruction,
    network,
    observability,
    scope,
    secrets,
)
from agentlint.core.rules.base import Rule, RuleContext, RuleDefinition
from agentlint.exceptions import RuleEvaluationError

logger = logging.getLogger(__name__)


def default_rules() -> tuple[Rule, ...]:
    """Every built-in rule, in registry order (group by group)."""
    return (
        execution.RULES
        + filesystem.RULES
        + network.RULES
        + secrets.RULES
        + hook.RULES
        + instruction.RULES
        + scope.RULES
        + observability.RULES
    )


def sort_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Order findings by severity (high first), path, start line, rule id."""
    return sorted(
        findings,
        key=lambda f: (-int(f.severity), f.location.path, f.location.start_line, f.rule_id),
    )


@dataclass
class EngineResult:
    findings: list[Finding] = field(default_factory=list)
    errors: list[RuleEvaluationError] = field(default_factory=list)


class RuleEngine:
    """Evaluates an ordered set of rules against documents.

    Args:
        rules: Rules to run; defaults to ``default_rules()``.
        min_confidence: Global confidence gate.
        disabled_rules: Rule ids that are never evaluated.
        enabled_rules: If non-empty, only these rule ids are evaluated.
        severity_overrides: Rule id -> severity (``None`` suppresses).
        group_overrides: Group -> severity (``None`` suppresses). A rule id
            override takes precedence.
        confidence_overrides: Rule id -> minimum confidence for that rule.
        allowed_network_domains: Policy allowlist handed to network rules.
        disallowed_network_domains: Policy denylist handed to network rules.
    """

    def __init__(
        self,
        rules: Iterable[Rule] | None = None,
        min_confidence: float = 0.6,
        disabled_rules: Iterable[str] = (),
        enabled_rules: Iterable[str] = (),
        severity_overrides: Mapping[str, Severity | None] | None = None,
        group_overrides: Mapping[str, Severity | None] | None = None,
        confidence_overrides: Mapping[str, float] | None = None,
        allowed_network_domains: Iterable[str] = (),
        disallowed_network_domains: Iterable[str] = (),
    ) -> None:
        self.rules: tuple[Rule, ...] = tuple(rules) if rules is not None else default_rules()
        self.min_confidence = min_confidence
        self.disabled_rules = frozenset(disabled_rules)
        self.enabled_rules = frozenset(enabled_rules)
        self.severity_overrides = dict(severity_overrides or {})
        self.group_overrides = dict(group_overrides or {})
        self.confidence_overrides = dict(confidence_overrides or {})
        self.allowed_network_domains = list(allowed_network_domains)
        self.disallowed_network_domains = list(disallowed_network_domains)
        self._by_id = {rule.id: rule for rule in self.rules}

    # -- Registry lookups --

    def all_rules(self) -> list[RuleDefinition]:
        return [rule.definition for rule in self.rules]

    def is_enabled(self, rule_id: str) -> bool:
        if rule_id in self.disabled_rules:
            return False
        return not self.enabled_rules or rule_id in self.enabled_rules

    def enabled(self) -> list[RuleDefinition]:
        return [rule.definition for rule in self.rules if self.is_enabled(rule.id)]

    def get_rule(self, rule_id: str) -> Rule | None:
        return self._by_id.get(rule_id.upper())

    def rules_by_group(self, group: str) -> list[RuleDefinition]:
        return [rule.definition for rule in self.rules if rule.definition.group == group]

    def threshold_for(self, rule_id: str) -> float:
        return self.confidence_overrides.get(rule_id, self.min_confidence)

    # -- Evaluation --

    def evaluate_document(
        self,
        document: AgentDocument,
        all_documents: list[AgentDocument],
        summary: CapabilitySummary,
        errors: list[RuleEvaluationError] | None = None,
    ) -> list[Finding]:
        """Run every enabled rule on one document, with overrides and gate applied.

        Findings come back unsorted; ``evaluate_all`` sorts the full set.
        """
        findings: list[Finding] = []
        for rule in self.rules:
            definition = rule.definition
            if not self.is_enabled(definition.id):
                continue
            threshold = self.threshold_for(definition.id)
            ctx = RuleContext(
                document=document,
                all_documents=all_documents,
                summary=summary,
                min_confidence=threshold,
                allowed_network_domains=list(self.allowed_network_domains),
                disallowed_network_domains=list(self.disallowed_network_domains),
            )
            try:
                produced = rule.evaluate(ctx)
            except Exception as exc:
                error = RuleEvaluationError(definition.id, f"{document.path}: {exc}")
                logger.warning("Rule %s failed on %s", definition.id, document.path, exc_info=True)
                if errors is not None:
                    errors.append(error)
                continue

            for finding in produced:
                finding = self._apply_override(finding, definition)
                if finding is None:
                    continue
                if finding.confidence < threshold:
                    continue
                findings.append(finding)
        return findings

    def evaluate_all(
        self, documents: list[AgentDocument], summary: CapabilitySummary
    ) -> EngineResult:
        """Evaluate every document and return the sorted findings."""
        result = EngineResult()
        collected: list[Finding] = []
        for document in documents:
            collected.extend(self.evaluate_document(document, documents, summary, result.errors))
        result.findings = sort_findings(collected)
        return result

    def _apply_override(self, finding: Finding, definition: RuleDefinition) -> Finding | None:
        if definition.id in self.severity_overrides:
            severity = self.severity_overrides[definition.id]
        elif definition.group in self.group_overrides:
            severity = self.group_overrides[definition.group]
        else:
            return finding
        if severity is None:
            return None
        if severity == finding.severity:
            return finding
        return dataclasses.replace(finding, severity=severity)


# ---------------------------------------------------------------------------
# Finding helpers
# ---------------------------------------------------------------------------


def count_by_severity(findings: Iterable[Finding]) -> dict[str, int]:
    counts = {"high": 0, "medium": 0, "low": 0}
    for finding in findings:
        counts[finding.severity.label] += 1
    return counts


def filter_by_severity(findings: Iterable[Finding], minimum: Severity) -> list[Finding]:
    return [f for f in findings if f.severity >= minimum]


def has_findings(findings: Iterable[Finding], threshold: Severity | None) -> bool:
    """True if any finding meets ``threshold``. ``None`` means never."""
    if threshold is None:
        return False
    return any(f.severity >= threshold for f in findings)
