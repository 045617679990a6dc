"""Intermediate representation shared by every AgentLint component.

Submodules:
    enums      -- Closed vocabularies (Severity, ActionType, ...) and schema versions
    models     -- Dataclasses for documents, actions, capabilities and findings
    serialize  -- JSON-compatible conversion of IR objects

All public names are re-exported here so callers can write
``from agentlint.core.ir import Finding, Severity``.
"""

from agentlint.core.ir.enums import (
    ACTION_CAPABILITY_MAP,
    IR_SCHEMA_VERSION,
    PERMISSIONS_VERSION,
    REPORT_VERSION,
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
    PropagationTarget,
    ScanStatus,
    Severity,
    ToolFamily,
    TriggerType,
    capability_for,
)
from agentlint.core.ir.models import (
    Action,
    ActionCounts,
    AgentDocument,
    Anchors,
    Capability,
    CapabilityScope,
    CapabilitySummary,
    ContextProfile,
    ContextSummary,
    ContextTrigger,
    DocumentHash,
    DocumentLink,
    DocumentSummary,
    Evidence,
    FilesystemDetails,
    FilesystemScope,
    FilesystemSummary,
    Finding,
    FindingLocation,
    Fingerprints,
    GitDetails,
    GitScope,
    GitSummary,
    InstructionBlock,
    NetworkDetails,
    NetworkScope,
    NetworkSummary,
    ParseResult,
    PermissionManifest,
    Permissions,
    RelatedAction,
    ScanError,
    SecretsDetails,
    SecretsScope,
    SecretsSummary,
    ShellDetails,
    ShellScope,
    ShellSummary,
)
from agentlint.core.ir.serialize import to_dict

__all__ = [
    "ACTION_CAPABILITY_MAP",
    "Action",
    "ActionCounts",
    "ActionType",
    "AgentDocument",
    "Anchors",
    "BlockKind",
    "Capability",
    "CapabilityScope",
    "CapabilitySummary",
    "CapabilityType",
    "ContextProfile",
    "ContextSummary",
    "ContextTrigger",
    "ContextType",
    "DocFormat",
    "DocType",
    "DocumentHash",
    "DocumentLink",
    "DocumentSummary",
    "Evidence",
    "EvidenceKind",
    "FilesystemDetails",
    "FilesystemOperation",
    "FilesystemScope",
    "FilesystemSummary",
    "Finding",
    "FindingLocation",
    "Fingerprints",
    "GitDetails",
    "GitOperation",
    "GitScope",
    "GitSummary",
    "IR_SCHEMA_VERSION",
    "InstructionBlock",
    "LinkKind",
    "NetworkDetails",
    "NetworkDirection",
    "NetworkScope",
    "NetworkSummary",
    "PERMISSIONS_VERSION",
    "ParseResult",
    "ParseStatus",
    "PermissionManifest",
    "Permissions",
    "PropagationTarget",
    "REPORT_VERSION",
    "RelatedAction",
    "ScanError",
    "ScanStatus",
    "SecretsDetails",
    "SecretsScope",
    "SecretsSummary",
    "Severity",
    "ShellDetails",
    "ShellScope",
    "ShellSummary",
    "ToolFamily",
    "TriggerType",
    "capability_for",
    "to_dict",
]
