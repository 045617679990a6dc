"""Baseline data models -- BaselineEntry, Baseline, BaselineFilterResult.

On-disk format (JSON, version 1)::

    {
      "version": 1,
      "created_at": "<iso-8601>",
      "updated_at": "<iso-8601>",
      "findings": [
        {"rule_id": "...", "path": "...", "fingerprint": "sha256:...",
         "baselined_at": "<iso-8601>", "reason": "..."}
      ]
    }

``reason`` is optional and omitted when unset, so a load -> save cycle
reproduces the file content exactly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from agentlint.exceptions import BaselineError

BASELINE_VERSION: int = 1


@dataclass
class BaselineEntry:
    """One accepted finding.

    Attributes:
        rule_id: Rule that raised the finding.
        path: Document path of the finding.
        fingerprint: Stable fingerprint used for matching.
        baselined_at: ISO-8601 timestamp of when it was accepted.
        reason: Optional justification.
    """

    rule_id: str
    path: str
    fingerprint: str
    baselined_at: str
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "rule_id": self.rule_id,
            "path": self.path,
            "fingerprint": self.fingerprint,
            "baselined_at": self.baselined_at,
        }
        if self.reason is not None:
            data["reason"] = self.reason
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BaselineEntry:
        try:
            return cls(
                rule_id=str(data["rule_id"]),
                path=str(data["path"]),
                fingerprint=str(data["fingerprint"]),
                baselined_at=str(data.get("baselined_at", "")),
                reason=data.get("reason"),
            )
        except (KeyError, TypeError) as exc:
            raise BaselineError(f"Malformed baseline entry: {data!r}") from exc


@dataclass
class Baseline:
    version: int = BASELINE_VERSION
    created_at: str = ""
    updated_at: str = ""
    findings: list[BaselineEntry] = field(default_factory=list)

    def fingerprints(self) -> set[str]:
        return {entry.fingerprint for entry in self.findings}

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "findings": [entry.to_dict() for entry in self.findings],
        }

    @classmethod
    def from_dict(cls, data: Any) -> Baseline:
        """Build a baseline from parsed JSON.

        Raises:
            BaselineError: If the structure or version is not recognised.
        """
        if not isinstance(data, dict):
            raise BaselineError("Baseline file must contain a JSON object")
        version = data.get("version")
        if version != BASELINE_VERSION:
            raise BaselineError(f"Unsupported baseline version: {version!r}")
        entries = data.get("findings", [])
        if not isinstance(entries, list):
            raise BaselineError("Baseline 'findings' must be a list")
        return cls(
            version=version,
            created_at=str(data.get("created_at", "")),
            updated_at=str(data.get("updated_at", "")),
            findings=[BaselineEntry.from_dict(e) for e in entries],
        )


@dataclass(frozen=True)
class BaselineFilterResult:
    """Counts from filtering current findings against a baseline.

    Attributes:
        new_findings: Findings not present in the baseline.
        suppressed_findings: Findings matched (and hidden) by the baseline.
        fixed_findings: Baseline entries matching no current finding.
    """

    new_findings: int
    suppressed_findings: int
    fixed_findings: int
