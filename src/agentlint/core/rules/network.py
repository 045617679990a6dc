"""Network rules (NET): outbound access and remote fetch risks."""

from __future__ import annotations

from agentlint.core.ir import Action, ActionType, Finding, Severity
from agentlint.core.rules.base import (
    DOCUMENT_START,
    Rule,
    RuleContext,
    RuleDefinition,
    action_finding,
    heuristic_evidence,
    make_finding,
)


def _domain_listed(domain: str, listed: list[str]) -> bool:
    """True if ``domain`` equals an entry or is a subdomain of one."""
    domain = domain.lower()
    for entry in listed:
        entry = entry.lower().lstrip("*.")
        if domain == entry or domain.endswith("." + entry):
            return True
    return False


class UndeclaredNetworkAccessRule(Rule):
    """NET-001: network calls outside any declared allowlist.

    With a policy allowlist (``capabilities.allowed_network_domains``) every
    contacted domain must be listed. Without one the scan-wide summary acts
    as the declaration. Domains in the policy denylist are always flagged.
    """

    definition = RuleDefinition(
        id="NET-001",
        group="network",
        severity=Severity.HIGH,
        title="Undeclared Network Access",
        description=(
            "Network calls detected without explicit capability declaration. This poses a "
            "silent exfiltration risk."
        ),
        recommendation=(
            "Explicitly declare network access in the permission manifest, or disable "
            "network access if not required."
        ),
        tags=("network", "exfiltration", "undeclared"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        findings: list[Finding] = []
        for action in ctx.document.actions_of(ActionType.NETWORK_CALL):
            if self._undeclared(action, ctx):
                urls = action.network.urls if action.network else []
                domains = action.network.domains if action.network else []
                target = ", ".join(urls) or ", ".join(domains)
                findings.append(
                    action_finding(
                        self.definition,
                        ctx.document,
                        action,
                        f"Network access to {target} detected without explicit declaration.",
                    )
                )
        return findings

    @staticmethod
    def _undeclared(action: Action, ctx: RuleContext) -> bool:
        domains = action.network.domains if action.network else []
        if any(_domain_listed(d, ctx.disallowed_network_domains) for d in domains):
            return True
        if ctx.allowed_network_domains:
            return not all(_domain_listed(d, ctx.allowed_network_domains) for d in domains)
        network = ctx.summary.network
        declared = network.outbound or network.inbound
        return not declared or not all(d in network.allowed_domains for d in domains)


class RemoteScriptFetchRule(Rule):
    """NET-002: network calls that download executable content."""

    definition = RuleDefinition(
        id="NET-002",
        group="network",
        severity=Severity.HIGH,
        title="Remote Script Fetch",
        description=(
            "Network call that fetches executable content such as scripts or binaries. This "
            "is a major supply-chain risk."
        ),
        recommendation=(
            "Avoid fetching executable content from the network. Use pinned, verified "
            "artifacts from trusted sources."
        ),
        tags=("network", "executable", "supply-chain"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        findings: list[Finding] = []
        for action in ctx.document.actions_of(ActionType.NETWORK_CALL):
            if action.network is None or not action.network.fetches_executable:
                continue
            findings.append(
                action_finding(
                    self.definition,
                    ctx.document,
                    action,
                    f"Remote executable content fetched from: {', '.join(action.network.urls)}. "
                    "This is a supply-chain attack vector.",
                )
            )
        return findings


class BroadNetworkAccessRule(Rule):
    """NET-003: outbound access with an empty domain allowlist."""

    definition = RuleDefinition(
        id="NET-003",
        group="network",
        severity=Severity.MEDIUM,
        title="Broad Network Access",
        description=(
            "Outbound network access is enabled without domain restrictions. This allows "
            "data exfiltration to any destination."
        ),
        recommendation="Restrict network access to specific, trusted domains using an allowlist.",
        tags=("network", "outbound", "least-privilege"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        network = ctx.summary.network
        if not network.outbound or network.allowed_domains:
            return []
        first = next(iter(ctx.document.actions_of(ActionType.NETWORK_CALL)), None)
        anchors = first.anchors if first is not None else DOCUMENT_START
        return [
            make_finding(
                self.definition,
                ctx.document,
                anchors,
                "Outbound network access enabled without domain restrictions.",
                heuristic_evidence("network.outbound: true without allowed_domains", 0.8),
                0.8,
            )
        ]


RULES: tuple[Rule, ...] = (
    UndeclaredNetworkAccessRule(),
    RemoteScriptFetchRule(),
    BroadNetworkAccessRule(),
)
