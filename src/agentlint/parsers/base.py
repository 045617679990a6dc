"""Shared building blocks for the evidence extractors.

Every extractor turns ``(path, content)`` into an ``AgentDocument`` holding
an ordered list of ``Action`` objects. The pieces they share live here:

- ``ExtractionResult`` -- what an extractor hands back to the scanner.
- Action factories (``shell_action``, ``network_action``,
  ``file_write_action``, ``secrets_action``, ``override_action``) --
  plain functions that encode the summary text, evidence kind and detail
  block conventions for each behaviour type.
- ``DocumentBuilder`` -- holds the document under construction and hands
  out deterministic, ordinal identifiers for actions and blocks.
- ``run_extraction()`` -- runs a format-specific body against a builder
  and converts any exception into a degraded parse status, so one bad file
  never aborts a scan.

Identifiers are derived from the document path and an extraction-order
counter rather than random values, so two scans of identical input produce
byte-identical output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from agentlint.core.capabilities.aggregator import derive_capabilities
from agentlint.core.fingerprint import document_id, hash_document
from agentlint.core.ir import (
    Action,
    ActionType,
    AgentDocument,
    Anchors,
    BlockKind,
    ContextProfile,
    ContextTrigger,
    ContextType,
    DocFormat,
    DocType,
    DocumentHash,
    DocumentLink,
    Evidence,
    EvidenceKind,
    FilesystemDetails,
    FilesystemOperation,
    InstructionBlock,
    LinkKind,
    NetworkDetails,
    NetworkDirection,
    ParseStatus,
    PropagationTarget,
    SecretsDetails,
    ShellDetails,
    ToolFamily,
    TriggerType,
)
from agentlint.exceptions import ParseError
from agentlint.parsers.patterns import (
    OVERRIDE_ACTION_SUMMARY,
    dynamic_pattern_labels,
    extract_domain,
    is_sensitive_path,
)

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """Outcome of extracting one file.

    Attributes:
        document: The extracted document. Always present, even when the
            parse status is ``failed``.
        errors: Error messages raised during extraction.
        warnings: Non-fatal notes (e.g. malformed frontmatter).
    """

    document: AgentDocument
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Action factories
# ---------------------------------------------------------------------------


def shell_action(
    action_id: str,
    command: str,
    anchors: Anchors,
    context: ContextType,
    dynamic: bool = False,
    confidence: float = 0.9,
) -> Action:
    """Build a ``shell_exec`` action for ``command``."""
    return Action(
        action_id=action_id,
        type=ActionType.SHELL_EXEC,
        context=context,
        summary="Execute dynamic shell command" if dynamic else "Execute shell command",
        anchors=anchors,
        evidence=[Evidence(EvidenceKind.SUBSTRING, command, confidence)],
        shell=ShellDetails(
            command=command,
            dynamic=dynamic,
            patterns=dynamic_pattern_labels(command) if dynamic else None,
        ),
    )


def network_action(
    action_id: str,
    url: str,
    anchors: Anchors,
    context: ContextType,
    fetches_executable: bool = False,
    confidence: float = 0.9,
) -> Action:
    """Build an outbound ``network_call`` action for ``url``."""
    domain = extract_domain(url)
    return Action(
        action_id=action_id,
        type=ActionType.NETWORK_CALL,
        context=context,
        summary=(
            "Fetch executable content from network" if fetches_executable else "Network request"
        ),
        anchors=anchors,
        evidence=[Evidence(EvidenceKind.SUBSTRING, url, confidence)],
        network=NetworkDetails(
            direction=NetworkDirection.OUTBOUND,
            domains=[domain] if domain else [],
            urls=[url],
            fetches_executable=fetches_executable,
        ),
    )


def file_write_action(
    action_id: str,
    paths: list[str],
    anchors: Anchors,
    context: ContextType,
    confidence: float = 0.9,
) -> Action:
    """Build a ``file_write`` action, marking any sensitive targets."""
    sensitive = [p for p in paths if is_sensitive_path(p)]
    return Action(
        action_id=action_id,
        type=ActionType.FILE_WRITE,
        context=context,
        summary="Write to sensitive paths" if sensitive else "Write to files",
        anchors=anchors,
        evidence=[
            Evidence(EvidenceKind.HEURISTIC, f"Write access to: {', '.join(paths)}", confidence)
        ],
        filesystem=FilesystemDetails(
            operation=FilesystemOperation.WRITE,
            paths=list(paths),
            sensitive_paths_touched=sensitive or None,
        ),
    )


def secrets_action(
    action_id: str,
    env_vars: list[str],
    files: list[str],
    anchors: Anchors,
    context: ContextType,
    propagates_to: list[PropagationTarget] | None = None,
    confidence: float = 0.9,
) -> Action:
    """Build a secret-access action.

    Secrets are read through the shell, so the action type is
    ``shell_exec``; the ``secrets`` detail block carries the specifics.
    """
    return Action(
        action_id=action_id,
        type=ActionType.SHELL_EXEC,
        context=context,
        summary="Access secrets or credentials",
        anchors=anchors,
        evidence=[Evidence(EvidenceKind.REGEX, ", ".join([*env_vars, *files]), confidence)],
        secrets=SecretsDetails(
            reads_env_vars=list(env_vars) or None,
            reads_files=list(files) or None,
            propagates_to=list(propagates_to) if propagates_to else None,
        ),
    )


def override_action(action_id: str, line: str, line_no: int, context: ContextType) -> Action:
    """Build the marker action for an instruction-override phrase."""
    return Action(
        action_id=action_id,
        type=ActionType.UNKNOWN,
        context=context,
        summary=OVERRIDE_ACTION_SUMMARY,
        anchors=Anchors.line(line_no),
        evidence=[Evidence(EvidenceKind.REGEX, line.strip(), 0.95)],
    )


# ---------------------------------------------------------------------------
# DocumentBuilder
# ---------------------------------------------------------------------------


def default_context_profile(doc_type: DocType) -> ContextProfile:
    """Hooks run unattended; every other document is interactive."""
    if doc_type == DocType.HOOK:
        return ContextProfile(
            primary=ContextType.HOOK,
            triggers=[ContextTrigger(TriggerType.UNKNOWN)],
            requires_user_confirmation=False,
        )
    return ContextProfile(primary=ContextType.INTERACTIVE)


class DocumentBuilder:
    """Mutable wrapper around a document while it is being extracted.

    Once ``run_extraction()`` returns, the document is handed downstream and
    treated as read-only.
    """

    def __init__(
        self,
        path: str,
        content: str,
        tool_family: ToolFamily,
        doc_type: DocType,
        fmt: DocFormat,
    ) -> None:
        doc_id = document_id(path)
        self.document = AgentDocument(
            doc_id=doc_id,
            path=path,
            tool_family=tool_family,
            doc_type=doc_type,
            format=fmt,
            hash=DocumentHash(algo="sha256", value=hash_document(content)),
            context_profile=default_context_profile(doc_type),
        )
        self.binary = "\x00" in content
        self.warnings: list[str] = []
        self._counters: dict[str, int] = {}

    @property
    def context(self) -> ContextType:
        return self.document.context_profile.primary

    def next_id(self, kind: str) -> str:
        count = self._counters.get(kind, 0) + 1
        self._counters[kind] = count
        return f"{self.document.doc_id}:{kind}:{count}"

    def add_shell(
        self, command: str, anchors: Anchors, dynamic: bool, confidence: float
    ) -> None:
        self.document.actions.append(
            shell_action(self.next_id("action"), command, anchors, self.context, dynamic, confidence)
        )

    def add_network(
        self, url: str, anchors: Anchors, fetches_executable: bool, confidence: float
    ) -> None:
        self.document.actions.append(
            network_action(
                self.next_id("action"), url, anchors, self.context, fetches_executable, confidence
            )
        )

    def add_file_write(self, paths: list[str], anchors: Anchors, confidence: float) -> None:
        self.document.actions.append(
            file_write_action(self.next_id("action"), paths, anchors, self.context, confidence)
        )

    def add_secrets(
        self,
        env_vars: list[str],
        anchors: Anchors,
        propagates_to: list[PropagationTarget] | None,
        confidence: float,
    ) -> None:
        self.document.actions.append(
            secrets_action(
                self.next_id("action"), env_vars, [], anchors, self.context, propagates_to, confidence
            )
        )

    def add_override(self, line: str, line_no: int) -> None:
        self.document.actions.append(
            override_action(self.next_id("action"), line, line_no, self.context)
        )

    def add_link(self, url: str, anchors: Anchors) -> None:
        self.document.links.append(DocumentLink(LinkKind.URL, url, anchors))

    def new_block(self, kind: BlockKind, text: str, line_no: int) -> InstructionBlock:
        return InstructionBlock(
            block_id=self.next_id("block"),
            kind=kind,
            text=text,
            anchors=Anchors.line(line_no),
        )


def extend_block(block: InstructionBlock, line: str, line_no: int) -> None:
    """Append a continuation line to an instruction block."""
    block.text += "\n" + line
    block.anchors = Anchors(block.anchors.start_line, line_no)


# ---------------------------------------------------------------------------
# Extraction driver
# ---------------------------------------------------------------------------


def run_extraction(
    builder: DocumentBuilder, body: Callable[[DocumentBuilder], None]
) -> ExtractionResult:
    """Run ``body`` against ``builder`` and finalise the document.

    An exception inside ``body`` never propagates: the actions gathered up
    to that point are kept, the error is recorded, and the parse status
    drops to ``partial`` (some actions survived) or ``failed`` (none did).
    Capabilities are derived from whatever actions were collected.
    """
    doc = builder.document
    errors: list[str] = []
    try:
        if builder.binary:
            raise ParseError("content is not text")
        body(builder)
    except Exception as exc:
        logger.warning("Extraction failed: %s", doc.path, exc_info=True)
        errors.append(f"Failed to parse {doc.path}: {exc}")

    doc.capabilities = derive_capabilities(doc.actions, doc.doc_id)

    if errors:
        doc.parse.status = ParseStatus.PARTIAL if doc.actions else ParseStatus.FAILED
        doc.parse.errors = list(errors)
        if doc.parse.status == ParseStatus.FAILED:
            doc.parse.confidence = 0.0
    if builder.warnings:
        doc.parse.notes = list(builder.warnings)

    return ExtractionResult(document=doc, errors=errors, warnings=list(builder.warnings))
