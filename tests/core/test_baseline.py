"""Tests for baseline persistence, mutation and suppression."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import pytest

from agentlint.core.baseline import (
    DEFAULT_BASELINE_FILE,
    Baseline,
    BaselineEntry,
    BaselineFilterResult,
    BaselineManager,
)
from agentlint.core.ir import Finding
from agentlint.exceptions import BaselineError

FindingFactory = Callable[..., Finding]


class FixedClock:
    """Returns a new, predictable timestamp on each call."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        return f"2026-01-0{self.calls}T00:00:00+00:00"


@pytest.fixture
def manager(tmp_path: Path) -> BaselineManager:
    return BaselineManager(tmp_path, clock=FixedClock())


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


class TestPersistence:
    """Loading and saving the JSON file."""

    def test_default_path(self, tmp_path: Path) -> None:
        assert BaselineManager(tmp_path).path == tmp_path / DEFAULT_BASELINE_FILE

    def test_explicit_relative_and_absolute_paths(self, tmp_path: Path) -> None:
        assert BaselineManager(tmp_path, "b.json").path == tmp_path / "b.json"
        absolute = tmp_path / "elsewhere" / "b.json"
        assert BaselineManager("/unused", absolute).path == absolute

    def test_load_missing_file(self, manager: BaselineManager) -> None:
        assert manager.load() is False
        assert manager.baseline is None

    def test_load_invalid_json(self, manager: BaselineManager) -> None:
        manager.path.parent.mkdir(parents=True)
        manager.path.write_text("{not json")
        with pytest.raises(BaselineError, match="Cannot read baseline"):
            manager.load()

    @pytest.mark.parametrize(
        "payload, message",
        [
            ([], "JSON object"),
            ({"version": 2, "findings": []}, "Unsupported baseline version"),
            ({"version": 1, "findings": {}}, "must be a list"),
            ({"version": 1, "findings": [{"rule_id": "EXEC-001"}]}, "Malformed"),
        ],
    )
    def test_load_rejects_bad_structure(
        self, manager: BaselineManager, payload: object, message: str
    ) -> None:
        manager.path.parent.mkdir(parents=True)
        manager.path.write_text(json.dumps(payload))
        with pytest.raises(BaselineError, match=message):
            manager.load()

    def test_save_without_baseline(self, manager: BaselineManager) -> None:
        with pytest.raises(BaselineError, match="No baseline to save"):
            manager.save()

    def test_save_then_load(
        self, manager: BaselineManager, finding_factory: FindingFactory
    ) -> None:
        manager.create([finding_factory()], reason="accepted")
        manager.save()
        text = manager.path.read_text()
        assert text.endswith("}\n")

        reloaded = BaselineManager(manager.path.parent.parent)
        assert reloaded.load() is True
        assert reloaded.baseline == manager.baseline

    def test_load_save_reproduces_file(
        self, manager: BaselineManager, finding_factory: FindingFactory
    ) -> None:
        manager.create([finding_factory(), finding_factory(line=4)])
        manager.save()
        original = manager.path.read_text()

        again = BaselineManager(manager.path.parent.parent)
        again.load()
        again.save()
        assert again.path.read_text() == original

    def test_reason_is_omitted_when_unset(self) -> None:
        entry = BaselineEntry("EXEC-001", "a.md", "sha256:0", "t")
        assert "reason" not in entry.to_dict()
        assert BaselineEntry("EXEC-001", "a.md", "sha256:0", "t", "ok").to_dict()["reason"] == "ok"


# ---------------------------------------------------------------------------
# Mutation
# ---------------------------------------------------------------------------


class TestMutation:
    """create, update and prune."""

    def test_create_deduplicates(
        self, manager: BaselineManager, finding_factory: FindingFactory
    ) -> None:
        finding = finding_factory()
        baseline = manager.create([finding, finding], reason="legacy")
        assert len(baseline.findings) == 1
        entry = baseline.findings[0]
        assert entry.fingerprint == finding.fingerprints.stable
        assert entry.rule_id == "EXEC-001"
        assert entry.path == ".claude/skills/a.md"
        assert entry.reason == "legacy"
        assert baseline.created_at == baseline.updated_at == entry.baselined_at

    def test_create_replaces(
        self, manager: BaselineManager, finding_factory: FindingFactory
    ) -> None:
        manager.create([finding_factory(line=1)])
        manager.create([finding_factory(line=2)])
        assert len(manager.baseline.findings) == 1

    def test_update_without_baseline_creates(
        self, manager: BaselineManager, finding_factory: FindingFactory
    ) -> None:
        manager.update([finding_factory()])
        assert manager.baseline is not None
        assert len(manager.baseline.findings) == 1

    def test_update_is_append_only(
        self, manager: BaselineManager, finding_factory: FindingFactory
    ) -> None:
        first = finding_factory(line=1)
        manager.create([first], reason="original")
        original_entry = manager.baseline.findings[0]

        manager.update([first, finding_factory(line=9)], reason="later")
        entries = manager.baseline.findings
        assert len(entries) == 2
        assert entries[0] is original_entry
        assert entries[0].reason == "original"
        assert entries[1].reason == "later"
        assert manager.baseline.updated_at != manager.baseline.created_at

    def test_prune(self, manager: BaselineManager, finding_factory: FindingFactory) -> None:
        live = finding_factory(line=1)
        manager.create([live, finding_factory(line=2), finding_factory(line=3)])
        assert manager.prune([live]) == 2
        assert [e.fingerprint for e in manager.baseline.findings] == [live.fingerprints.stable]

    def test_prune_nothing(self, manager: BaselineManager, finding_factory: FindingFactory) -> None:
        assert manager.prune([finding_factory()]) == 0
        live = finding_factory()
        manager.create([live])
        updated = manager.baseline.updated_at
        assert manager.prune([live]) == 0
        assert manager.baseline.updated_at == updated


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestFiltering:
    """filter_findings and stats."""

    def test_without_baseline_keeps_everything(
        self, manager: BaselineManager, finding_factory: FindingFactory
    ) -> None:
        findings = [finding_factory(line=1), finding_factory(line=2)]
        kept, counts = manager.filter_findings(findings)
        assert kept == findings
        assert counts == BaselineFilterResult(2, 0, 0)

    def test_counts(self, manager: BaselineManager, finding_factory: FindingFactory) -> None:
        accepted = finding_factory(line=1)
        fixed = finding_factory(line=2)
        fresh = finding_factory(line=3)
        manager.create([accepted, fixed])

        kept, counts = manager.filter_findings([fresh, accepted])
        assert kept == [fresh]
        assert counts.new_findings == 1
        assert counts.suppressed_findings == 1
        assert counts.fixed_findings == 1

    def test_filter_does_not_mutate(
        self, manager: BaselineManager, finding_factory: FindingFactory
    ) -> None:
        manager.create([finding_factory(line=1)])
        before = manager.baseline.to_dict()
        manager.filter_findings([finding_factory(line=5)])
        assert manager.baseline.to_dict() == before

    def test_matching_tolerates_cosmetic_evidence_edits(
        self, manager: BaselineManager, finding_factory: FindingFactory
    ) -> None:
        manager.create([finding_factory(evidence="rm -rf build")])
        kept, _ = manager.filter_findings([finding_factory(evidence="RM  -rf   build ")])
        assert kept == []

    def test_stats(self, manager: BaselineManager, finding_factory: FindingFactory) -> None:
        assert manager.stats() == {"total": 0, "by_rule": {}}
        manager.create(
            [
                finding_factory(line=1),
                finding_factory(line=2),
                finding_factory(rule_id="NET-002"),
            ]
        )
        assert manager.stats() == {"total": 3, "by_rule": {"EXEC-001": 2, "NET-002": 1}}

    def test_baseline_fingerprints(self) -> None:
        baseline = Baseline(findings=[BaselineEntry("EXEC-001", "a", "sha256:1", "t")])
        assert baseline.fingerprints() == {"sha256:1"}
