"""Rule contract and shared finding construction.

Every rule is a small object with two parts:

- ``definition`` -- immutable ``RuleDefinition`` metadata (id, group,
  severity, title, description, recommendation, tags).
- ``evaluate(ctx)`` -- returns the findings for ``ctx.document``.

Rules never mutate their inputs and keep no state between calls, so one
instance can evaluate any number of documents. The engine owns everything
that is common across rules (disable list, severity overrides, the
confidence gate, ordering); rules only decide *what* to flag.

``make_finding()`` builds a ``Finding`` from rule metadata plus a location
and evidence, attaching the three fingerprints. It is a plain function so
that any rule module can use it without sharing a base class beyond the
two-member ``Rule`` interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from agentlint.core.fingerprint import compute_fingerprints
from agentlint.core.ir import (
    Action,
    AgentDocument,
    Anchors,
    CapabilitySummary,
    Evidence,
    EvidenceKind,
    Finding,
    FindingLocation,
    RelatedAction,
    Severity,
)

# ---------------------------------------------------------------------------
# Rule groups
# ---------------------------------------------------------------------------

RULE_GROUPS: tuple[str, ...] = (
    "execution",
    "filesystem",
    "network",
    "secrets",
    "hook",
    "instruction",
    "scope",
    "observability",
)

DOCUMENT_START = Anchors.line(1)


@dataclass(frozen=True)
class RuleDefinition:
    """Fixed metadata of one rule.

    Attributes:
        id: Rule identifier, ``<GROUP>-<NNN>`` (e.g. "EXEC-001").
        group: One of ``RULE_GROUPS``.
        severity: Default severity, before policy overrides.
        title: Short name shown in reports.
        description: What the rule detects and why it matters.
        recommendation: How to remediate a finding.
        tags: Free-form labels used by tag-based policy.
    """

    id: str
    group: str
    severity: Severity
    title: str
    description: str
    recommendation: str
    tags: tuple[str, ...] = ()


@dataclass
class RuleContext:
    """Inputs to one rule evaluation.

    Attributes:
        document: The document under evaluation.
        all_documents: Every document in the scan.
        summary: The finished scan-wide capability summary.
        min_confidence: Effective confidence threshold for this rule.
        allowed_network_domains: Domains the policy declares as allowed.
        disallowed_network_domains: Domains the policy forbids outright.
    """

    document: AgentDocument
    all_documents: list[AgentDocument]
    summary: CapabilitySummary
    min_confidence: float = 0.6
    allowed_network_domains: list[str] = field(default_factory=list)
    disallowed_network_domains: list[str] = field(default_factory=list)


class Rule(ABC):
    """A single detection rule."""

    definition: RuleDefinition

    @property
    def id(self) -> str:
        return self.definition.id

    @abstractmethod
    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        """Return the findings for ``ctx.document``. Must not mutate ``ctx``."""


# ---------------------------------------------------------------------------
# Finding construction
# ---------------------------------------------------------------------------


def make_finding(
    definition: RuleDefinition,
    document: AgentDocument,
    anchors: Anchors,
    message: str,
    evidence: list[Evidence] | tuple[Evidence, ...],
    confidence: float,
    action: Action | None = None,
) -> Finding:
    """Build a finding for ``document`` with all three fingerprints.

    Args:
        definition: Metadata of the rule raising the finding.
        document: Document the finding is located in.
        anchors: Line range of the finding.
        message: Finding-specific explanation.
        evidence: Supporting evidence; the first entry feeds the
            fingerprints.
        confidence: Confidence used by the engine's gate.
        action: The action that triggered the finding, if any. Recorded as
            the finding's related action.
    """
    fingerprints = compute_fingerprints(
        definition.id, document.path, anchors.start_line, anchors.end_line, evidence
    )
    return Finding(
        finding_id=fingerprints.stable,
        rule_id=definition.id,
        group=definition.group,
        severity=definition.severity,
        title=definition.title,
        description=definition.description,
        message=message,
        recommendation=definition.recommendation,
        confidence=confidence,
        tags=tuple(definition.tags),
        location=FindingLocation(document.path, anchors.start_line, anchors.end_line),
        evidence=tuple(evidence),
        related_actions=(RelatedAction.from_action(action),) if action is not None else (),
        fingerprints=fingerprints,
    )


def action_finding(
    definition: RuleDefinition, document: AgentDocument, action: Action, message: str
) -> Finding:
    """Finding anchored on ``action`` and carrying its evidence."""
    return make_finding(
        definition, document, action.anchors, message, action.evidence, action.confidence, action
    )


def heuristic_evidence(value: str, confidence: float) -> list[Evidence]:
    return [Evidence(EvidenceKind.HEURISTIC, value, confidence)]
