"""Property-based tests for capability aggregation.

The scan-wide summary is a join: folding a document twice changes
nothing, folding more documents only ever grows it, and the order
documents are folded in does not matter beyond first-seen list order.
"""

from __future__ import annotations

from hypothesis import given, settings

from agentlint.core.capabilities import (
    is_dynamic_command,
    recommend_permissions,
    summarize,
    update_summary,
)
from agentlint.core.ir import CapabilitySummary
from agent_strategies import extract_tree, file_trees


def _flags(summary: CapabilitySummary) -> tuple[bool, ...]:
    return (
        summary.shell_exec.enabled,
        summary.shell_exec.dynamic_detected,
        summary.network.outbound,
        summary.network.inbound,
        summary.network.fetches_executable,
        summary.secrets.propagation_detected,
        summary.contexts.has_hooks,
        summary.contexts.has_ci_context,
    )


def _sets(summary: CapabilitySummary) -> tuple[frozenset[str], ...]:
    return (
        frozenset(summary.filesystem.read),
        frozenset(summary.filesystem.write),
        frozenset(summary.filesystem.touches_sensitive_paths),
        frozenset(summary.network.allowed_domains),
        frozenset(summary.secrets.env_vars_referenced),
        frozenset(summary.secrets.files_referenced),
        frozenset(summary.git.ops),
    )


@settings(max_examples=50, deadline=None)
@given(file_trees)
def test_refolding_is_idempotent(files: dict[str, str]) -> None:
    documents = extract_tree(files)
    once = summarize(documents)
    again = summarize(documents)
    for document in documents:
        update_summary(again, document)
    assert once == again


@settings(max_examples=50, deadline=None)
@given(file_trees)
def test_order_does_not_matter(files: dict[str, str]) -> None:
    documents = extract_tree(files)
    forward = summarize(documents)
    backward = summarize(list(reversed(documents)))
    assert _flags(forward) == _flags(backward)
    assert _sets(forward) == _sets(backward)


@settings(max_examples=50, deadline=None)
@given(file_trees, file_trees)
def test_more_documents_only_grow(first: dict[str, str], second: dict[str, str]) -> None:
    small = summarize(extract_tree(first))
    large = summarize(extract_tree(first) + extract_tree(second))
    for before, after in zip(_flags(small), _flags(large)):
        assert after or not before
    for before, after in zip(_sets(small), _sets(large)):
        assert before <= after


@settings(max_examples=50, deadline=None)
@given(file_trees)
def test_lists_have_no_duplicates(files: dict[str, str]) -> None:
    summary = summarize(extract_tree(files))
    for values in (
        summary.filesystem.write,
        summary.network.allowed_domains,
        summary.secrets.env_vars_referenced,
        summary.shell_exec.examples,
    ):
        assert len(values) == len(set(values))


@settings(max_examples=50, deadline=None)
@given(file_trees)
def test_manifest_never_grants_dynamic_shell(files: dict[str, str]) -> None:
    summary = summarize(extract_tree(files))
    shell = recommend_permissions(summary).permissions.shell_exec
    if summary.shell_exec.dynamic_detected:
        assert shell.enabled is False
    assert not any(is_dynamic_command(c) for c in shell.allowed_commands)
    assert recommend_permissions(summary).permissions.secrets.env_vars == []


def test_empty_scan() -> None:
    assert summarize([]) == CapabilitySummary()
