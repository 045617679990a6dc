"""Enumerations and schema constants for the AgentLint intermediate representation.

Every document, action, capability and finding produced by the pipeline is
described in terms of the closed vocabularies defined here. Keeping them in
one dependency-free module lets the parsers, rule engine, diff engine and
report renderers share them without import cycles.

String-valued enums serialise by ``.value``. ``Severity`` is an ``IntEnum``
so that thresholds compare directly (``finding.severity >= Severity.MEDIUM``)
and serialises by its lowercase label.
"""

from __future__ import annotations

from enum import Enum, IntEnum

# ---------------------------------------------------------------------------
# Schema versions
# ---------------------------------------------------------------------------

IR_SCHEMA_VERSION: str = "agentlint.ir.v0.1"
REPORT_VERSION: str = "agentlint.report.v1.0"
PERMISSIONS_VERSION: str = "agentlint.permissions.v0.1"


# ---------------------------------------------------------------------------
# Severity: Ordered finding severity
# ---------------------------------------------------------------------------


class Severity(IntEnum):
    """Three-level severity scale for findings: LOW < MEDIUM < HIGH."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        """Lowercase wire label ("low", "medium", "high")."""
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> Severity:
        """Parse a lowercase label. Raises ValueError for unknown labels."""
        try:
            return cls[label.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown severity: {label!r}") from None


# ---------------------------------------------------------------------------
# Document classification
# ---------------------------------------------------------------------------


class ToolFamily(Enum):
    """Agent tool that owns a configuration file."""

    CLAUDE = "claude"
    CURSOR = "cursor"
    GENERIC = "generic"
    UNKNOWN = "unknown"


class DocType(Enum):
    """Role of a configuration file within its tool."""

    SKILL = "skill"
    AGENT = "agent"
    HOOK = "hook"
    RULES = "rules"
    MEMORY = "memory"
    UNKNOWN = "unknown"


class DocFormat(Enum):
    """Syntactic format of a configuration file."""

    MARKDOWN = "markdown"
    TEXT = "text"
    SHELL = "shell"
    JSON = "json"
    YAML = "yaml"
    UNKNOWN = "unknown"


class ParseStatus(Enum):
    """Outcome of evidence extraction for one document."""

    OK = "ok"
    PARTIAL = "partial"
    FAILED = "failed"


class BlockKind(Enum):
    """Classification of an instruction block by its leading line."""

    RULE = "rule"
    GUIDELINE = "guideline"
    COMMAND = "command"
    NARRATIVE = "narrative"
    UNKNOWN = "unknown"


class LinkKind(Enum):
    """Kind of reference a document makes to an external resource."""

    URL = "url"
    FILE_REF = "file_ref"
    MCP_SERVER = "mcp_server"
    UNKNOWN = "unknown"


# ---------------------------------------------------------------------------
# Execution context
# ---------------------------------------------------------------------------


class ContextType(Enum):
    """Where the behaviours described by a document run."""

    INTERACTIVE = "interactive"
    HOOK = "hook"
    CI = "ci"
    UNKNOWN = "unknown"


class TriggerType(Enum):
    """Event that activates a hook."""

    ON_EDIT = "on_edit"
    PRE_COMMIT = "pre_commit"
    POST_EDIT = "post_edit"
    ON_PR = "on_pr"
    SCHEDULED = "scheduled"
    MANUAL = "manual"
    UNKNOWN = "unknown"


# ---------------------------------------------------------------------------
# Actions and evidence
# ---------------------------------------------------------------------------


class ActionType(Enum):
    """Category of a detected behaviour."""

    SHELL_EXEC = "shell_exec"
    FILE_READ = "file_read"
    FILE_WRITE = "file_write"
    NETWORK_CALL = "network_call"
    GIT_OPERATION = "git_operation"
    TOOL_INTEGRATION = "tool_integration"
    UNKNOWN = "unknown"


class EvidenceKind(Enum):
    """Detection method that produced a piece of evidence."""

    SUBSTRING = "substring"
    REGEX = "regex"
    HEURISTIC = "heuristic"


class NetworkDirection(Enum):
    OUTBOUND = "outbound"
    INBOUND = "inbound"
    UNKNOWN = "unknown"


class FilesystemOperation(Enum):
    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    CHMOD = "chmod"
    UNKNOWN = "unknown"


class GitOperation(Enum):
    COMMIT = "commit"
    PUSH = "push"
    CHECKOUT = "checkout"
    MERGE = "merge"
    TAG = "tag"
    REBASE = "rebase"
    UNKNOWN = "unknown"


class PropagationTarget(Enum):
    """Sink a secret value flows into on the same line."""

    SHELL = "shell"
    NETWORK = "network"
    FILE = "file"
    UNKNOWN = "unknown"


# ---------------------------------------------------------------------------
# Capabilities and verdicts
# ---------------------------------------------------------------------------


class CapabilityType(Enum):
    """Aggregation bucket for actions within one document."""

    FILESYSTEM = "filesystem"
    SHELL_EXEC = "shell_exec"
    NETWORK = "network"
    SECRETS = "secrets"
    GIT = "git"
    CI_MODIFICATION = "ci_modification"
    UNKNOWN = "unknown"


class ScanStatus(Enum):
    """Overall verdict of a scan or diff."""

    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


# Action type -> capability bucket. Types absent from the map aggregate
# into CapabilityType.UNKNOWN.
ACTION_CAPABILITY_MAP: dict[ActionType, CapabilityType] = {
    ActionType.SHELL_EXEC: CapabilityType.SHELL_EXEC,
    ActionType.NETWORK_CALL: CapabilityType.NETWORK,
    ActionType.FILE_READ: CapabilityType.FILESYSTEM,
    ActionType.FILE_WRITE: CapabilityType.FILESYSTEM,
    ActionType.GIT_OPERATION: CapabilityType.GIT,
}


def capability_for(action_type: ActionType) -> CapabilityType:
    """Return the capability bucket an action type aggregates into."""
    return ACTION_CAPABILITY_MAP.get(action_type, CapabilityType.UNKNOWN)
