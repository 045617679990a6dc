"""Capability aggregation: actions -> per-document capabilities -> summary.

Two reductions live here:

1. ``derive_capabilities(actions)`` buckets one document's actions by
   capability type (see ``ACTION_CAPABILITY_MAP``). Each bucket unions the
   scope details of its contributors (commands, domains, paths) and takes
   the maximum contributor confidence.

2. ``update_summary(summary, document)`` folds one document into the
   scan-wide ``CapabilitySummary``. List fields are inserted with set
   semantics (first-seen order, no duplicates) and boolean fields are only
   ever OR-ed to ``True``. As a consequence the fold is idempotent: folding
   the same document twice leaves the summary unchanged. ``summarize()``
   folds a whole document list.

Shell examples are capped at ``MAX_SHELL_EXAMPLES`` distinct commands.
"""

from __future__ import annotations

from typing import Iterable

from agentlint.core.ir import (
    Action,
    ActionType,
    AgentDocument,
    Capability,
    CapabilityScope,
    CapabilitySummary,
    CapabilityType,
    DocType,
    FilesystemScope,
    NetworkDirection,
    NetworkScope,
    ShellScope,
    capability_for,
)

MAX_SHELL_EXAMPLES: int = 5


def _add_unique(target: list, values: Iterable) -> None:
    for value in values:
        if value not in target:
            target.append(value)


# ---------------------------------------------------------------------------
# Per-document capabilities
# ---------------------------------------------------------------------------


def derive_capabilities(actions: list[Action], id_prefix: str = "") -> list[Capability]:
    """Bucket ``actions`` into one ``Capability`` per capability type.

    Buckets appear in the order their first contributing action appears.

    Args:
        actions: The document's actions in document order.
        id_prefix: Prefix for the deterministic capability identifiers
            (normally the document id).

    Returns:
        List of capabilities, one per distinct capability type.
    """
    buckets: dict[CapabilityType, Capability] = {}
    for action in actions:
        cap_type = capability_for(action.type)
        cap = buckets.get(cap_type)
        if cap is None:
            cap = Capability(
                cap_id=f"{id_prefix}:cap:{len(buckets) + 1}",
                type=cap_type,
                scope=CapabilityScope(),
            )
            buckets[cap_type] = cap
        cap.derived_from_actions.append(action.action_id)
        cap.confidence = max(cap.confidence, action.confidence)
        _merge_scope(cap.scope, action)
    return list(buckets.values())


def _merge_scope(scope: CapabilityScope, action: Action) -> None:
    if action.type == ActionType.SHELL_EXEC:
        if scope.shell_exec is None:
            scope.shell_exec = ShellScope()
        scope.shell_exec.enabled = True
        if action.shell is not None and action.shell.command:
            scope.shell_exec.allowed_commands.append(action.shell.command)

    elif action.type == ActionType.NETWORK_CALL:
        if scope.network is None:
            scope.network = NetworkScope()
        if action.network is not None:
            if action.network.direction == NetworkDirection.OUTBOUND:
                scope.network.outbound = True
            elif action.network.direction == NetworkDirection.INBOUND:
                scope.network.inbound = True
            scope.network.allowed_domains.extend(action.network.domains)

    elif action.type in (ActionType.FILE_WRITE, ActionType.FILE_READ):
        if scope.filesystem is None:
            scope.filesystem = FilesystemScope()
        if action.filesystem is not None:
            target = (
                scope.filesystem.write
                if action.type == ActionType.FILE_WRITE
                else scope.filesystem.read
            )
            target.extend(action.filesystem.paths)


# ---------------------------------------------------------------------------
# Scan-wide summary
# ---------------------------------------------------------------------------


def update_summary(summary: CapabilitySummary, document: AgentDocument) -> CapabilitySummary:
    """Fold one document into ``summary`` in place and return it."""
    if document.doc_type == DocType.HOOK:
        summary.contexts.has_hooks = True
    if document.context_profile.runs_in_privileged_env:
        summary.contexts.has_ci_context = True

    for action in document.actions:
        _fold_action(summary, action)
    return summary


def _fold_action(summary: CapabilitySummary, action: Action) -> None:
    if action.type == ActionType.SHELL_EXEC:
        shell = summary.shell_exec
        shell.enabled = True
        if action.shell is not None:
            if action.shell.dynamic:
                shell.dynamic_detected = True
            command = action.shell.command
            if command and command not in shell.examples and len(shell.examples) < MAX_SHELL_EXAMPLES:
                shell.examples.append(command)

    elif action.type == ActionType.NETWORK_CALL and action.network is not None:
        network = summary.network
        if action.network.direction == NetworkDirection.OUTBOUND:
            network.outbound = True
        elif action.network.direction == NetworkDirection.INBOUND:
            network.inbound = True
        _add_unique(network.allowed_domains, action.network.domains)
        if action.network.fetches_executable:
            network.fetches_executable = True

    elif action.type == ActionType.FILE_WRITE and action.filesystem is not None:
        _add_unique(summary.filesystem.write, action.filesystem.paths)
        _add_unique(
            summary.filesystem.touches_sensitive_paths,
            action.filesystem.sensitive_paths_touched or [],
        )

    elif action.type == ActionType.FILE_READ and action.filesystem is not None:
        _add_unique(summary.filesystem.read, action.filesystem.paths)

    elif action.type == ActionType.GIT_OPERATION and action.git is not None:
        _add_unique(summary.git.ops, [action.git.operation.value])

    if action.secrets is not None:
        secrets = summary.secrets
        _add_unique(secrets.env_vars_referenced, action.secrets.reads_env_vars or [])
        _add_unique(secrets.files_referenced, action.secrets.reads_files or [])
        if action.secrets.propagates_to:
            secrets.propagation_detected = True


def summarize(documents: Iterable[AgentDocument]) -> CapabilitySummary:
    """Build the scan-wide capability summary for ``documents``."""
    summary = CapabilitySummary()
    for document in documents:
        update_summary(summary, document)
    return summary
