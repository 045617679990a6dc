"""Filesystem rules (FS): write access risks.

Write targets are classified three ways:

- *unscoped* -- exactly one of the open sentinels (``**/*``, ``**``,
  ``*``, ``./``, ``/``, ``..``, ``../``);
- *sensitive* -- contains a fragment from ``SENSITIVE_WRITE_PATHS``
  (version-control metadata, CI workflows, key and credential files);
- *cross-boundary* -- climbs out of the project (``../``) or is absolute
  (``/``, ``~``, a Windows drive letter).
"""

from __future__ import annotations

import re

from agentlint.core.ir import ActionType, Evidence, EvidenceKind, Finding, Severity
from agentlint.core.rules.base import Rule, RuleContext, RuleDefinition, action_finding, make_finding

UNSCOPED_PATHS: frozenset[str] = frozenset({"**/*", "**", "*", "./", "/", "..", "../"})

SENSITIVE_WRITE_PATHS: tuple[str, ...] = (
    ".git/",
    ".git\\",
    ".github/workflows/",
    ".github\\workflows\\",
    ".env",
    ".ssh/",
    ".ssh\\",
    "~/.ssh/",
    "id_rsa",
    "id_ed25519",
    "credentials",
    "secrets",
    ".npmrc",
    ".pypirc",
    ".docker/config.json",
    ".kube/config",
    ".aws/credentials",
)

_WINDOWS_DRIVE = re.compile(r"^[A-Z]:\\", re.IGNORECASE)


def is_unscoped_path(path: str) -> bool:
    return path.strip().lower() in UNSCOPED_PATHS


def is_sensitive_write_path(path: str) -> bool:
    lowered = path.lower()
    return any(fragment.lower() in lowered for fragment in SENSITIVE_WRITE_PATHS)


def is_cross_boundary_path(path: str) -> bool:
    return (
        "../" in path
        or "..\\" in path
        or path.startswith("/")
        or path.startswith("~")
        or _WINDOWS_DRIVE.search(path) is not None
    )


class UnscopedWriteAccessRule(Rule):
    """FS-001: write access with an open-ended path scope."""

    definition = RuleDefinition(
        id="FS-001",
        group="filesystem",
        severity=Severity.HIGH,
        title="Unscoped Write Access",
        description=(
            "Agent has write access to the filesystem without a restricted path scope. This "
            "enables repo corruption, credential overwrite, and CI manipulation."
        ),
        recommendation=(
            "Restrict write access to specific directories (e.g., src/**, tests/**). Never "
            "allow unrestricted write access."
        ),
        tags=("filesystem", "write", "permissions"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        findings: list[Finding] = []
        for action in ctx.document.actions_of(ActionType.FILE_WRITE):
            paths = action.filesystem.paths if action.filesystem else []
            for path in paths:
                if is_unscoped_path(path):
                    findings.append(
                        action_finding(
                            self.definition,
                            ctx.document,
                            action,
                            f'Unscoped write access detected: "{path}". '
                            "This allows writing to any file in the repository.",
                        )
                    )
                    break
        return findings


class SensitivePathWriteRule(Rule):
    """FS-002: writes to credential, VCS or CI locations."""

    definition = RuleDefinition(
        id="FS-002",
        group="filesystem",
        severity=Severity.HIGH,
        title="Sensitive Path Write",
        description=(
            "Agent can write to known sensitive locations such as .git/, .github/workflows/, "
            ".env, or ~/.ssh/. This is a direct escalation or persistence vector."
        ),
        recommendation=(
            "Remove write access to sensitive paths. If necessary, require explicit user "
            "approval for each write operation."
        ),
        tags=("filesystem", "sensitive", "security"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        findings: list[Finding] = []
        document = ctx.document
        for action in document.actions_of(ActionType.FILE_WRITE):
            if action.filesystem is None:
                continue
            marked = action.filesystem.sensitive_paths_touched or []
            for path in marked:
                findings.append(
                    action_finding(
                        self.definition,
                        document,
                        action,
                        f'Write access to sensitive path: "{path}". '
                        "This could lead to privilege escalation or persistence.",
                    )
                )
            # Paths the extractor's narrower catalog did not mark.
            for path in action.filesystem.paths:
                if path in marked or not is_sensitive_write_path(path):
                    continue
                findings.append(
                    make_finding(
                        self.definition,
                        document,
                        action.anchors,
                        f'Write access to sensitive path: "{path}".',
                        [
                            Evidence(
                                EvidenceKind.HEURISTIC,
                                f"Sensitive path pattern matched: {path}",
                                action.confidence,
                            )
                        ],
                        action.confidence,
                        action,
                    )
                )
        return findings


class CrossBoundaryWriteRule(Rule):
    """FS-003: writes outside the project directory."""

    definition = RuleDefinition(
        id="FS-003",
        group="filesystem",
        severity=Severity.MEDIUM,
        title="Cross-Boundary Write",
        description=(
            "Agent can write outside the declared project scope, such as parent directories "
            "or sibling repositories."
        ),
        recommendation=(
            "Restrict write access to the project directory. Never allow writes to parent or "
            "sibling directories."
        ),
        tags=("filesystem", "scope", "boundary"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        findings: list[Finding] = []
        for action in ctx.document.actions_of(ActionType.FILE_WRITE):
            paths = action.filesystem.paths if action.filesystem else []
            for path in paths:
                if is_cross_boundary_path(path):
                    findings.append(
                        action_finding(
                            self.definition,
                            ctx.document,
                            action,
                            f'Cross-boundary write access detected: "{path}". '
                            "This path is outside the project scope.",
                        )
                    )
        return findings


RULES: tuple[Rule, ...] = (
    UnscopedWriteAccessRule(),
    SensitivePathWriteRule(),
    CrossBoundaryWriteRule(),
)
