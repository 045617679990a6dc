"""Tests for include/exclude matching and directory collection."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from agentlint.core.policy import Policy
from agentlint.parsers import default_registry
from agentlint.scanner import collect_files, matches_any

MakeProject = Callable[..., Path]

TREE = {
    "CLAUDE.md": "# Guide\n",
    "docs/CLAUDE.md": "# Docs guide\n",
    ".claude/skills/a.md": "# A\n",
    ".claude/skills/nested/b.md": "# B\n",
    ".cursorrules": "- Be brief\n",
    "node_modules/pkg/CLAUDE.md": "# Vendored\n",
    ".git/CLAUDE.md": "# Git\n",
    "README.md": "# Readme\n",
}


class TestMatchesAny:

    @pytest.mark.parametrize(
        "path, patterns, expected",
        [
            (".claude/skills/nested/b.md", [".claude/**"], True),
            ("CLAUDE.md", ["CLAUDE.md"], True),
            ("docs/CLAUDE.md", ["CLAUDE.md"], False),
            ("docs/CLAUDE.md", ["**/CLAUDE.md"], True),
            ("CLAUDE.md", ["**/CLAUDE.md"], True),
            (".git/HEAD", ["**/.git/**"], True),
            ("src/.git/HEAD", ["**/.git/**"], True),
            ("claude.md", ["CLAUDE.md"], False),
            ("README.md", [], False),
        ],
    )
    def test_patterns(self, path: str, patterns: list[str], expected: bool) -> None:
        assert matches_any(path, patterns) is expected


class TestCollectFiles:

    def test_default_policy(self, make_project: MakeProject) -> None:
        root = make_project(TREE)
        scan = Policy().scan
        found = collect_files(root, scan.include, scan.exclude, default_registry().can_handle)
        assert found == [".claude/skills/a.md", ".claude/skills/nested/b.md", ".cursorrules", "CLAUDE.md"]

    def test_excludes_apply_after_includes(self, make_project: MakeProject) -> None:
        root = make_project(TREE)
        found = collect_files(root, ["**/CLAUDE.md"], Policy().scan.exclude)
        assert found == ["CLAUDE.md", "docs/CLAUDE.md"]

    def test_extractor_predicate_filters(self, make_project: MakeProject) -> None:
        root = make_project({"README.md": "x", "CLAUDE.md": "y"})
        assert collect_files(root, ["*"], []) == ["CLAUDE.md", "README.md"]
        assert collect_files(root, ["*"], [], default_registry().can_handle) == ["CLAUDE.md"]

    def test_empty_directory(self, empty_dir: Path) -> None:
        scan = Policy().scan
        assert collect_files(empty_dir, scan.include, scan.exclude) == []
