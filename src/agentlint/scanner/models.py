"""Scan result models."""

from __future__ import annotations

from dataclasses import dataclass, field

from agentlint.core.baseline import BaselineFilterResult
from agentlint.core.ir import (
    ActionCounts,
    ActionType,
    AgentDocument,
    CapabilitySummary,
    DocumentSummary,
    Finding,
    ParseStatus,
    PermissionManifest,
    ScanError,
    ScanStatus,
)


@dataclass
class ScanResult:
    """Everything one scan produced.

    Attributes:
        root: Label of the scanned root (a directory path or "<memory>").
        documents: Extracted documents, in input order.
        findings: Sorted findings after policy filtering.
        summary: Scan-wide capability summary.
        permissions: Recommended least-privilege manifest.
        status: Verdict.
        exit_code: Process exit code matching ``status``.
        errors: Accumulated parse, read and rule errors.
        baseline: Baseline filter counts, when a baseline was applied.
    """

    root: str
    documents: list[AgentDocument]
    findings: list[Finding]
    summary: CapabilitySummary
    permissions: PermissionManifest
    status: ScanStatus = ScanStatus.PASS
    exit_code: int = 0
    errors: list[ScanError] = field(default_factory=list)
    baseline: BaselineFilterResult | None = None

    @property
    def parse_counts(self) -> dict[str, int]:
        counts = {status.value: 0 for status in ParseStatus}
        for doc in self.documents:
            counts[doc.parse.status.value] += 1
        return counts


def summarize_document(document: AgentDocument) -> DocumentSummary:
    """Per-document digest for reporting."""
    actions = document.actions
    counts = ActionCounts(
        shell_exec=sum(1 for a in actions if a.type == ActionType.SHELL_EXEC),
        file_write=sum(1 for a in actions if a.type == ActionType.FILE_WRITE),
        network_call=sum(1 for a in actions if a.type == ActionType.NETWORK_CALL),
        secrets=sum(
            1
            for a in actions
            if a.secrets is not None and (a.secrets.reads_env_vars or a.secrets.reads_files)
        ),
    )
    return DocumentSummary(
        doc_id=document.doc_id,
        path=document.path,
        tool_family=document.tool_family,
        doc_type=document.doc_type,
        format=document.format,
        hash=document.hash.value,
        parse=document.parse,
        context_profile=document.context_profile,
        action_counts=counts,
    )
