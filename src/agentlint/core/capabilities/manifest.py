"""Least-privilege permission manifest derived from a capability summary.

The manifest is a *recommendation*: the narrowest permission set that still
covers what the scanned configuration legitimately does, with the
dangerous parts removed.

- Filesystem read: the observed read paths, or ``**/*`` if none were seen.
- Filesystem write: the observed write paths minus the broad sentinels
  (``**/*``, ``**``, ``*``, ``./``).
- Shell: enabled only if shell use was seen and no dynamic execution was
  detected; allowed commands are the non-dynamic examples (at most 10).
- Network: outbound only if outbound access was seen and nothing fetched
  executable content; the observed domains are carried over.
- Secrets: always empty.
- Git: the observed operations.
"""

from __future__ import annotations

import re

from agentlint.core.ir import (
    CapabilitySummary,
    FilesystemScope,
    GitScope,
    NetworkScope,
    PermissionManifest,
    Permissions,
    SecretsScope,
    ShellScope,
)

BROAD_WRITE_PATHS: frozenset[str] = frozenset({"**/*", "**", "*", "./"})
MAX_ALLOWED_COMMANDS: int = 10

_DYNAMIC_COMMAND_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"curl.*\|.*(?:bash|sh)", re.IGNORECASE),
    re.compile(r"wget.*\|.*(?:bash|sh)", re.IGNORECASE),
    re.compile(r"\beval\b", re.IGNORECASE),
)


def is_broad_path(path: str) -> bool:
    return path in BROAD_WRITE_PATHS


def is_dynamic_command(command: str) -> bool:
    return any(p.search(command) for p in _DYNAMIC_COMMAND_PATTERNS)


def recommend_permissions(summary: CapabilitySummary) -> PermissionManifest:
    """Derive the recommended permission manifest for ``summary``."""
    allowed_commands = [c for c in summary.shell_exec.examples if not is_dynamic_command(c)]
    return PermissionManifest(
        permissions=Permissions(
            filesystem=FilesystemScope(
                read=list(summary.filesystem.read) or ["**/*"],
                write=[p for p in summary.filesystem.write if not is_broad_path(p)],
                delete=[],
            ),
            shell_exec=ShellScope(
                enabled=summary.shell_exec.enabled and not summary.shell_exec.dynamic_detected,
                allowed_commands=allowed_commands[:MAX_ALLOWED_COMMANDS],
            ),
            network=NetworkScope(
                outbound=summary.network.outbound and not summary.network.fetches_executable,
                allowed_domains=list(summary.network.allowed_domains),
            ),
            secrets=SecretsScope(env_vars=[], files=[]),
            git=GitScope(allowed_ops=list(summary.git.ops)),
        )
    )


def empty_manifest() -> PermissionManifest:
    """Manifest reported when nothing was scanned."""
    return PermissionManifest()
