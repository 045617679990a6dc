"""Data models for the AgentLint intermediate representation.

The pipeline moves through four families of objects:

- **Documents** (``AgentDocument``) -- one per parsed configuration file,
  holding the ordered ``Action`` list produced by the evidence extractor.
- **Capabilities** (``Capability``, ``CapabilitySummary``) -- per-document
  buckets and the scan-wide reduction over all documents.
- **Findings** (``Finding``) -- immutable rule outputs with three
  fingerprints for cross-scan matching.
- **Manifests and summaries** (``PermissionManifest``,
  ``DocumentSummary``) -- derived artefacts handed to reporting.

These are pure data holders. Serialisation to JSON-compatible dicts lives
in ``agentlint.core.ir.serialize`` so that every model shares one set of
conventions (enum values, omitted ``None`` fields).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from agentlint.core.ir.enums import (
    ActionType,
    BlockKind,
    CapabilityType,
    ContextType,
    DocFormat,
    DocType,
    EvidenceKind,
    FilesystemOperation,
    GitOperation,
    LinkKind,
    NetworkDirection,
    ParseStatus,
    PERMISSIONS_VERSION,
    PropagationTarget,
    Severity,
    ToolFamily,
    TriggerType,
)


# ---------------------------------------------------------------------------
# Locations and evidence
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Anchors:
    """Inclusive 1-based line range inside a document."""

    start_line: int
    end_line: int

    @classmethod
    def line(cls, line_no: int) -> Anchors:
        return cls(line_no, line_no)


@dataclass(frozen=True)
class Evidence:
    """One piece of evidence backing an action or finding.

    Attributes:
        kind: How the evidence was obtained (substring, regex, heuristic).
        value: The raw matched text or a heuristic description.
        confidence: Fixed per detection method, in [0, 1].
    """

    kind: EvidenceKind
    value: str
    confidence: float


# ---------------------------------------------------------------------------
# Action detail blocks
# ---------------------------------------------------------------------------


@dataclass
class ShellDetails:
    command: str = ""
    dynamic: bool = False
    patterns: list[str] | None = None


@dataclass
class NetworkDetails:
    direction: NetworkDirection = NetworkDirection.OUTBOUND
    domains: list[str] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)
    fetches_executable: bool = False


@dataclass
class FilesystemDetails:
    operation: FilesystemOperation = FilesystemOperation.WRITE
    paths: list[str] = field(default_factory=list)
    sensitive_paths_touched: list[str] | None = None


@dataclass
class GitDetails:
    operation: GitOperation = GitOperation.UNKNOWN
    ref: str | None = None
    remote: str | None = None


@dataclass
class SecretsDetails:
    reads_env_vars: list[str] | None = None
    reads_files: list[str] | None = None
    propagates_to: list[PropagationTarget] | None = None


# ---------------------------------------------------------------------------
# Action: One detected behaviour instance
# ---------------------------------------------------------------------------


@dataclass
class Action:
    """A single behaviour detected in a document.

    Attributes:
        action_id: Deterministic identifier, unique within the scan.
        type: Behaviour category.
        context: Where the behaviour runs (interactive, hook, ci).
        summary: Short human-readable description.
        anchors: Line range the behaviour was found on.
        evidence: At least one evidence entry. The first entry's confidence
            is the action's confidence.
        shell, network, filesystem, git, secrets: Optional type-specific
            detail blocks.
    """

    action_id: str
    type: ActionType
    context: ContextType
    summary: str
    anchors: Anchors
    evidence: list[Evidence]
    shell: ShellDetails | None = None
    network: NetworkDetails | None = None
    filesystem: FilesystemDetails | None = None
    git: GitDetails | None = None
    secrets: SecretsDetails | None = None

    def __post_init__(self) -> None:
        if not self.evidence:
            raise ValueError(f"Action {self.action_id} has no evidence")

    @property
    def confidence(self) -> float:
        """Confidence of the primary evidence entry."""
        return self.evidence[0].confidence


# ---------------------------------------------------------------------------
# Document structure
# ---------------------------------------------------------------------------


@dataclass
class InstructionBlock:
    """A contiguous run of prose introduced by a header or bullet."""

    block_id: str
    kind: BlockKind
    text: str
    anchors: Anchors


@dataclass
class ContextTrigger:
    type: TriggerType
    details: str | None = None


@dataclass
class ContextProfile:
    """Execution context of a document.

    Hooks run without user confirmation; everything else defaults to an
    interactive context where the user approves each step.
    """

    primary: ContextType
    triggers: list[ContextTrigger] = field(default_factory=list)
    requires_user_confirmation: bool = True
    runs_in_privileged_env: bool = False


@dataclass
class DocumentLink:
    kind: LinkKind
    target: str
    anchors: Anchors


@dataclass
class ParseResult:
    status: ParseStatus = ParseStatus.OK
    confidence: float = 1.0
    errors: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


@dataclass
class DocumentHash:
    algo: str
    value: str


# ---------------------------------------------------------------------------
# Capability: Per-document aggregation bucket
# ---------------------------------------------------------------------------


@dataclass
class FilesystemScope:
    read: list[str] = field(default_factory=list)
    write: list[str] = field(default_factory=list)
    delete: list[str] = field(default_factory=list)


@dataclass
class ShellScope:
    enabled: bool = False
    allowed_commands: list[str] = field(default_factory=list)


@dataclass
class NetworkScope:
    outbound: bool = False
    inbound: bool = False
    allowed_domains: list[str] = field(default_factory=list)


@dataclass
class SecretsScope:
    env_vars: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)


@dataclass
class GitScope:
    allowed_ops: list[str] = field(default_factory=list)


@dataclass
class CapabilityScope:
    """Union of the scope details of every contributing action."""

    filesystem: FilesystemScope | None = None
    shell_exec: ShellScope | None = None
    network: NetworkScope | None = None
    secrets: SecretsScope | None = None
    git: GitScope | None = None


@dataclass
class Capability:
    """Aggregated behaviour category for one document.

    Attributes:
        cap_id: Deterministic identifier.
        type: Capability bucket.
        scope: Merged scope details.
        derived_from_actions: Identities of contributing actions, in order.
        confidence: Maximum confidence over contributing actions.
    """

    cap_id: str
    type: CapabilityType
    scope: CapabilityScope = field(default_factory=CapabilityScope)
    derived_from_actions: list[str] = field(default_factory=list)
    confidence: float = 0.0


# ---------------------------------------------------------------------------
# AgentDocument: One parsed configuration file
# ---------------------------------------------------------------------------


@dataclass
class AgentDocument:
    """A configuration file in normalised form.

    Built once per file per scan by an extractor and treated as read-only
    by everything downstream.
    """

    doc_id: str
    path: str
    tool_family: ToolFamily
    doc_type: DocType
    format: DocFormat
    hash: DocumentHash
    context_profile: ContextProfile
    parse: ParseResult = field(default_factory=ParseResult)
    declared_intents: list[str] = field(default_factory=list)
    instruction_blocks: list[InstructionBlock] = field(default_factory=list)
    actions: list[Action] = field(default_factory=list)
    capabilities: list[Capability] = field(default_factory=list)
    links: list[DocumentLink] = field(default_factory=list)

    def actions_of(self, action_type: ActionType) -> list[Action]:
        """Return the document's actions of one type, in document order."""
        return [a for a in self.actions if a.type == action_type]


# ---------------------------------------------------------------------------
# CapabilitySummary: Scan-wide reduction
# ---------------------------------------------------------------------------


@dataclass
class FilesystemSummary:
    read: list[str] = field(default_factory=list)
    write: list[str] = field(default_factory=list)
    touches_sensitive_paths: list[str] = field(default_factory=list)


@dataclass
class ShellSummary:
    enabled: bool = False
    dynamic_detected: bool = False
    examples: list[str] = field(default_factory=list)


@dataclass
class NetworkSummary:
    outbound: bool = False
    inbound: bool = False
    allowed_domains: list[str] = field(default_factory=list)
    fetches_executable: bool = False


@dataclass
class SecretsSummary:
    env_vars_referenced: list[str] = field(default_factory=list)
    files_referenced: list[str] = field(default_factory=list)
    propagation_detected: bool = False


@dataclass
class GitSummary:
    ops: list[str] = field(default_factory=list)


@dataclass
class ContextSummary:
    has_hooks: bool = False
    has_ci_context: bool = False


@dataclass
class CapabilitySummary:
    """Global capability reduction across every document in a scan.

    List fields have set semantics (deduplicated, first-seen order) and
    boolean fields only ever flip from False to True.
    """

    filesystem: FilesystemSummary = field(default_factory=FilesystemSummary)
    shell_exec: ShellSummary = field(default_factory=ShellSummary)
    network: NetworkSummary = field(default_factory=NetworkSummary)
    secrets: SecretsSummary = field(default_factory=SecretsSummary)
    git: GitSummary = field(default_factory=GitSummary)
    contexts: ContextSummary = field(default_factory=ContextSummary)


# ---------------------------------------------------------------------------
# PermissionManifest: Recommended least-privilege declaration
# ---------------------------------------------------------------------------


@dataclass
class Permissions:
    filesystem: FilesystemScope = field(default_factory=FilesystemScope)
    shell_exec: ShellScope = field(default_factory=ShellScope)
    network: NetworkScope = field(default_factory=NetworkScope)
    secrets: SecretsScope = field(default_factory=SecretsScope)
    git: GitScope = field(default_factory=GitScope)


@dataclass
class PermissionManifest:
    manifest_version: str = PERMISSIONS_VERSION
    permissions: Permissions = field(default_factory=Permissions)


# ---------------------------------------------------------------------------
# Finding: Immutable rule output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FindingLocation:
    path: str
    start_line: int
    end_line: int


@dataclass(frozen=True)
class RelatedAction:
    action_type: ActionType
    context: ContextType
    summary: str
    anchors: Anchors

    @classmethod
    def from_action(cls, action: Action) -> RelatedAction:
        return cls(action.type, action.context, action.summary, action.anchors)


@dataclass(frozen=True)
class Fingerprints:
    """Three deterministic identities of a finding (see core.fingerprint)."""

    stable: str
    location: str
    content: str


@dataclass(frozen=True)
class Finding:
    """A single issue flagged by one rule against one document.

    Findings are frozen. The only post-creation change the engine makes is a
    configured severity override, applied with ``dataclasses.replace``.

    Attributes:
        finding_id: Equal to the stable fingerprint.
        rule_id: Rule identifier (e.g. "EXEC-001").
        group: Rule group (e.g. "execution").
        severity: Effective severity.
        title, description, recommendation, tags: Copied from rule metadata.
        message: Finding-specific explanation.
        confidence: Confidence in [0, 1] used by the engine's gate.
        location: Path and line range.
        evidence: Evidence entries; the first one feeds the fingerprints.
        related_actions: Actions that triggered the finding.
        fingerprints: Stable, location and content identities.
    """

    finding_id: str
    rule_id: str
    group: str
    severity: Severity
    title: str
    description: str
    message: str
    recommendation: str
    confidence: float
    tags: tuple[str, ...]
    location: FindingLocation
    evidence: tuple[Evidence, ...]
    related_actions: tuple[RelatedAction, ...]
    fingerprints: Fingerprints


# ---------------------------------------------------------------------------
# Reporting summaries
# ---------------------------------------------------------------------------


@dataclass
class ActionCounts:
    shell_exec: int = 0
    file_write: int = 0
    network_call: int = 0
    secrets: int = 0


@dataclass
class DocumentSummary:
    """Per-document digest handed to report renderers."""

    doc_id: str
    path: str
    tool_family: ToolFamily
    doc_type: DocType
    format: DocFormat
    hash: str
    parse: ParseResult
    context_profile: ContextProfile
    action_counts: ActionCounts


@dataclass(frozen=True)
class ScanError:
    """An error accumulated during a scan instead of being raised.

    Attributes:
        code: One of "CONFIG_INVALID", "PARSE_FAILED", "INTERNAL_ERROR".
        message: Human-readable description.
        path: Document path the error relates to, if any.
    """

    code: str
    message: str
    path: str | None = None
