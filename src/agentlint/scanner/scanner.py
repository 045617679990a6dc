"""Scanner: orchestrates extraction, aggregation, rules and the verdict.

Pipeline for ``scan_files``::

    (path, content) pairs
        -> ExtractorRegistry        one AgentDocument per handled path
        -> summarize()              scan-wide CapabilitySummary
        -> RuleEngine.evaluate_all  sorted findings
        -> tag policy               ignore_if_any removes findings
        -> recommend_permissions()  least-privilege manifest
        -> determine_status()       pass / warn / fail + exit code

``scan_directory`` is the filesystem front end: it collects files with
the policy's include/exclude globs, reads them, and delegates. Nothing in
the pipeline executes, fetches or modifies scanned content.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable

from agentlint.core.baseline import BaselineManager
from agentlint.core.capabilities import empty_manifest, recommend_permissions, summarize
from agentlint.core.ir import AgentDocument, Finding, ParseStatus, ScanError, ScanStatus
from agentlint.core.policy import Policy, severity_or_none
from agentlint.core.rules import RuleEngine, has_findings
from agentlint.exceptions import InternalError
from agentlint.parsers import ExtractorRegistry, default_registry
from agentlint.scanner.files import collect_files
from agentlint.scanner.models import ScanResult

logger = logging.getLogger(__name__)

EXIT_PASS = 0
EXIT_FAIL = 1
EXIT_USAGE = 2
EXIT_CONFIG = 3
EXIT_PARSE = 4
EXIT_INTERNAL = 5

PARSE_FAILED = "PARSE_FAILED"
INTERNAL_ERROR = "INTERNAL_ERROR"
CONFIG_INVALID = "CONFIG_INVALID"


def build_engine(policy: Policy) -> RuleEngine:
    """Configure a ``RuleEngine`` from the ``rules`` and ``capabilities`` sections."""
    rules = policy.rules
    return RuleEngine(
        min_confidence=policy.policy.min_finding_confidence,
        disabled_rules=[r.upper() for r in rules.disable],
        enabled_rules=[r.upper() for r in rules.enable],
        severity_overrides={k.upper(): severity_or_none(v) for k, v in rules.severity_overrides.items()},
        group_overrides={k: severity_or_none(v) for k, v in rules.group_overrides.items()},
        confidence_overrides={k.upper(): float(v) for k, v in rules.confidence_overrides.items()},
        allowed_network_domains=policy.capabilities.allowed_network_domains,
        disallowed_network_domains=policy.capabilities.disallowed_network_domains,
    )


class Scanner:
    """Runs a complete scan under one policy.

    Args:
        policy: Policy to apply; defaults to ``Policy()``.
        registry: Extractor registry; defaults to the built-in extractors
            restricted to ``policy.scan.tool_mode``.
        engine: Rule engine; defaults to ``build_engine(policy)``.

    Usage::

        scanner = Scanner(policy)
        result = scanner.scan_directory(Path("."))
        print(result.status.value, len(result.findings))
    """

    def __init__(
        self,
        policy: Policy | None = None,
        registry: ExtractorRegistry | None = None,
        engine: RuleEngine | None = None,
    ) -> None:
        self.policy = policy if policy is not None else Policy()
        self.registry = registry if registry is not None else default_registry(self.policy.scan.tool_mode)
        self.engine = engine if engine is not None else build_engine(self.policy)

    # -- Entry points --

    def scan_directory(self, root: Path | str) -> ScanResult:
        """Collect, read and scan every matching file under ``root``.

        Raises:
            InternalError: If ``root`` is not a directory.
        """
        root = Path(root)
        if not root.is_dir():
            raise InternalError(f"Scan root is not a directory: {root}")
        scan = self.policy.scan
        paths = collect_files(root, scan.include, scan.exclude, self.registry.can_handle)
        pairs: list[tuple[str, str]] = []
        errors: list[ScanError] = []
        for rel in paths:
            try:
                pairs.append((rel, (root / rel).read_text(encoding="utf-8")))
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Failed to read: %s", rel, exc_info=True)
                errors.append(ScanError(PARSE_FAILED, f"Failed to read {rel}: {exc}", rel))
        return self.scan_files(pairs, root=str(root), errors=errors)

    def scan_files(
        self,
        files: Iterable[tuple[str, str]],
        root: str = "<memory>",
        errors: list[ScanError] | None = None,
    ) -> ScanResult:
        """Scan already-read ``(path, content)`` pairs.

        Paths no extractor handles are skipped. At most ``scan.max_files``
        documents are analysed; the rest are reported as an error.
        """
        errors = list(errors or [])
        documents: list[AgentDocument] = []
        skipped = 0
        for path, content in files:
            if not self.registry.can_handle(path):
                continue
            if len(documents) >= self.policy.scan.max_files:
                skipped += 1
                continue
            extraction = self.registry.extract(path, content)
            if extraction is None:
                continue
            documents.append(extraction.document)
            errors.extend(ScanError(PARSE_FAILED, message, path) for message in extraction.errors)
        if skipped:
            errors.append(
                ScanError(
                    INTERNAL_ERROR,
                    f"File limit of {self.policy.scan.max_files} reached; {skipped} files not analysed",
                )
            )

        if not documents:
            status, exit_code = self._no_files_status()
            return ScanResult(
                root=root,
                documents=[],
                findings=[],
                summary=summarize([]),
                permissions=empty_manifest(),
                status=status,
                exit_code=exit_code,
                errors=errors,
            )

        summary = summarize(documents)
        evaluation = self.engine.evaluate_all(documents, summary)
        errors.extend(ScanError(INTERNAL_ERROR, str(e)) for e in evaluation.errors)
        findings = self.apply_tag_policy(evaluation.findings)
        status, exit_code = self.determine_status(findings, errors, documents)
        return ScanResult(
            root=root,
            documents=documents,
            findings=findings,
            summary=summary,
            permissions=recommend_permissions(summary),
            status=status,
            exit_code=exit_code,
            errors=errors,
        )

    def apply_baseline(self, result: ScanResult, manager: BaselineManager) -> ScanResult:
        """Drop baselined findings and recompute the verdict on the rest.

        Under ``baseline.mode: require_no_new`` any finding left after
        filtering fails the scan regardless of its severity.
        """
        kept, counts = manager.filter_findings(result.findings)
        if not result.documents:
            return replace(result, baseline=counts)
        if self.policy.baseline.mode == "require_no_new" and kept:
            status, exit_code = ScanStatus.FAIL, EXIT_FAIL
        else:
            status, exit_code = self.determine_status(kept, result.errors, result.documents)
        return replace(result, findings=kept, status=status, exit_code=exit_code, baseline=counts)

    # -- Policy --

    def apply_tag_policy(self, findings: list[Finding]) -> list[Finding]:
        ignored = set(self.policy.policy.tags.ignore_if_any)
        if not ignored:
            return findings
        return [f for f in findings if not ignored.intersection(f.tags)]

    def _parse_failures(self, documents: list[AgentDocument]) -> bool:
        floor = self.policy.scan.min_parse_confidence
        return any(
            d.parse.status == ParseStatus.FAILED or d.parse.confidence < floor for d in documents
        )

    def _no_files_status(self) -> tuple[ScanStatus, int]:
        verdict = self.policy.policy.no_supported_files_as
        if verdict == "fail":
            return ScanStatus.FAIL, EXIT_PARSE
        if verdict == "warn":
            return ScanStatus.WARN, EXIT_PASS
        return ScanStatus.PASS, EXIT_PASS

    def determine_status(
        self,
        findings: list[Finding],
        errors: list[ScanError],
        documents: list[AgentDocument],
    ) -> tuple[ScanStatus, int]:
        """Verdict and exit code for a finished scan.

        Order: fail conditions (severity threshold, ``fail_if_any`` tags,
        parse failures under ``treat_parse_failed_as: fail``), then
        ``strict`` with accumulated errors, then warn conditions (likewise).
        """
        verdict = self.policy.policy
        tags = verdict.tags
        parse_failed = self._parse_failures(documents)

        if has_findings(findings, severity_or_none(verdict.fail_on)):
            return ScanStatus.FAIL, EXIT_FAIL
        if tags.fail_if_any and any(set(tags.fail_if_any).intersection(f.tags) for f in findings):
            return ScanStatus.FAIL, EXIT_FAIL
        if parse_failed and verdict.treat_parse_failed_as == "fail":
            return ScanStatus.FAIL, EXIT_PARSE
        if verdict.strict and errors:
            return ScanStatus.FAIL, EXIT_PARSE

        if has_findings(findings, severity_or_none(verdict.warn_on)):
            return ScanStatus.WARN, EXIT_PASS
        if tags.warn_if_any and any(set(tags.warn_if_any).intersection(f.tags) for f in findings):
            return ScanStatus.WARN, EXIT_PASS
        if parse_failed and verdict.treat_parse_failed_as == "warn":
            return ScanStatus.WARN, EXIT_PASS

        return ScanStatus.PASS, EXIT_PASS
