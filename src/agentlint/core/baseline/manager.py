"""Baseline manager: persistence and suppression of accepted findings.

Lifecycle::

    manager = BaselineManager(root)
    manager.load()                        # False when no file exists yet
    kept, counts = manager.filter_findings(findings)
    manager.update(findings)              # append-only
    manager.save()

``create`` replaces the whole baseline, ``update`` only adds fingerprints
that are not yet present, ``prune`` drops entries that no current finding
matches. Filtering never changes the loaded baseline.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable

from agentlint.core.baseline.models import Baseline, BaselineEntry, BaselineFilterResult
from agentlint.core.ir import Finding
from agentlint.exceptions import BaselineError

logger = logging.getLogger(__name__)

DEFAULT_BASELINE_FILE: str = ".agentlint/baseline.json"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class BaselineManager:
    """Loads, filters against, mutates and saves one baseline file.

    Args:
        root: Project root the default baseline path is resolved against.
        path: Explicit baseline file; relative paths resolve against
            ``root``.
        clock: Returns the current ISO-8601 timestamp. Injectable for
            reproducible output.
    """

    def __init__(
        self,
        root: Path | str = ".",
        path: Path | str | None = None,
        clock: Callable[[], str] = _utc_now,
    ) -> None:
        root = Path(root)
        target = Path(path) if path is not None else Path(DEFAULT_BASELINE_FILE)
        self.path: Path = target if target.is_absolute() else root / target
        self.baseline: Baseline | None = None
        self._clock = clock

    # -- Persistence --

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> bool:
        """Load the baseline file.

        Returns:
            True if a baseline was loaded, False if the file does not exist.

        Raises:
            BaselineError: If the file exists but is not a valid baseline.
        """
        if not self.exists():
            return False
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Failed to load baseline: %s", self.path, exc_info=True)
            raise BaselineError(f"Cannot read baseline {self.path}: {exc}") from exc
        self.baseline = Baseline.from_dict(data)
        return True

    def save(self) -> None:
        """Write the loaded baseline to ``self.path``.

        Raises:
            BaselineError: If no baseline is loaded or the write fails.
        """
        if self.baseline is None:
            raise BaselineError("No baseline to save")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(self.baseline.to_dict(), indent=2) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            raise BaselineError(f"Cannot write baseline {self.path}: {exc}") from exc

    # -- Mutation --

    def _entry(self, finding: Finding, reason: str | None, now: str) -> BaselineEntry:
        return BaselineEntry(
            rule_id=finding.rule_id,
            path=finding.location.path,
            fingerprint=finding.fingerprints.stable,
            baselined_at=now,
            reason=reason,
        )

    def create(self, findings: Iterable[Finding], reason: str | None = None) -> Baseline:
        """Replace the baseline with the given findings' fingerprints."""
        now = self._clock()
        entries: list[BaselineEntry] = []
        seen: set[str] = set()
        for finding in findings:
            if finding.fingerprints.stable in seen:
                continue
            seen.add(finding.fingerprints.stable)
            entries.append(self._entry(finding, reason, now))
        self.baseline = Baseline(created_at=now, updated_at=now, findings=entries)
        return self.baseline

    def update(self, findings: Iterable[Finding], reason: str | None = None) -> Baseline:
        """Add fingerprints not yet baselined. Existing entries are untouched."""
        if self.baseline is None:
            return self.create(findings, reason)
        now = self._clock()
        known = self.baseline.fingerprints()
        for finding in findings:
            if finding.fingerprints.stable in known:
                continue
            known.add(finding.fingerprints.stable)
            self.baseline.findings.append(self._entry(finding, reason, now))
        self.baseline.updated_at = now
        return self.baseline

    def prune(self, current: Iterable[Finding]) -> int:
        """Remove entries matching no current finding. Returns how many went."""
        if self.baseline is None:
            return 0
        live = {f.fingerprints.stable for f in current}
        before = len(self.baseline.findings)
        self.baseline.findings = [e for e in self.baseline.findings if e.fingerprint in live]
        removed = before - len(self.baseline.findings)
        if removed:
            self.baseline.updated_at = self._clock()
        return removed

    # -- Queries --

    def filter_findings(
        self, findings: list[Finding]
    ) -> tuple[list[Finding], BaselineFilterResult]:
        """Split off findings already accepted in the baseline.

        Returns:
            ``(kept, counts)`` where ``kept`` preserves the input order.
        """
        if self.baseline is None:
            return list(findings), BaselineFilterResult(len(findings), 0, 0)
        baselined = self.baseline.fingerprints()
        matched: set[str] = set()
        kept: list[Finding] = []
        for finding in findings:
            fingerprint = finding.fingerprints.stable
            if fingerprint in baselined:
                matched.add(fingerprint)
            else:
                kept.append(finding)
        fixed = sum(1 for e in self.baseline.findings if e.fingerprint not in matched)
        return kept, BaselineFilterResult(
            new_findings=len(kept),
            suppressed_findings=len(findings) - len(kept),
            fixed_findings=fixed,
        )

    def stats(self) -> dict[str, object]:
        """Total entry count and a per-rule breakdown."""
        if self.baseline is None:
            return {"total": 0, "by_rule": {}}
        by_rule: dict[str, int] = {}
        for entry in self.baseline.findings:
            by_rule[entry.rule_id] = by_rule.get(entry.rule_id, 0) + 1
        return {"total": len(self.baseline.findings), "by_rule": by_rule}
