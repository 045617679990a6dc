"""Extractor registry: path-based dispatch to the right evidence extractor.

The ``ExtractorRegistry`` holds an ordered list of ``(predicate,
extractor)`` pairs. For a given path the first pair whose predicate
accepts it wins; if none does, the file is not analysed at all.

``default_registry()`` registers the built-in extractors:

1. Claude Code -- ``.claude/**``, ``CLAUDE.md``, ``AGENTS.md``
2. Cursor      -- ``.cursorrules``

``tool_mode`` restricts the registry to a single tool family, which is how
the ``scan.tool_mode`` policy option is honoured.
"""

from __future__ import annotations

from typing import Callable, NamedTuple

from agentlint.parsers import claude, cursor
from agentlint.parsers.base import ExtractionResult

PathPredicate = Callable[[str], bool]
Extractor = Callable[[str, str], ExtractionResult]

TOOL_MODES: tuple[str, ...] = ("auto", "claude", "cursor")

SUPPORTED_PATTERNS: tuple[str, ...] = (
    ".claude/skills/**/*.md",
    ".claude/agents/**/*.md",
    ".claude/hooks/**",
    "CLAUDE.md",
    "AGENTS.md",
    ".cursorrules",
)


class ExtractorEntry(NamedTuple):
    name: str
    can_handle: PathPredicate
    extract: Extractor


class ExtractorRegistry:
    """Ordered (predicate, extractor) dispatch table.

    Attributes:
        entries: Registered extractors in registration order.
    """

    def __init__(self) -> None:
        self.entries: list[ExtractorEntry] = []

    def register(self, name: str, can_handle: PathPredicate, extract: Extractor) -> None:
        """Append an extractor. Earlier registrations take precedence."""
        self.entries.append(ExtractorEntry(name, can_handle, extract))

    def find(self, path: str) -> ExtractorEntry | None:
        for entry in self.entries:
            if entry.can_handle(path):
                return entry
        return None

    def can_handle(self, path: str) -> bool:
        return self.find(path) is not None

    def extract(self, path: str, content: str) -> ExtractionResult | None:
        """Extract ``path`` with the first matching extractor.

        Returns:
            The extraction result, or None when no extractor handles the
            path.
        """
        entry = self.find(path)
        if entry is None:
            return None
        return entry.extract(path, content)


def default_registry(tool_mode: str = "auto") -> ExtractorRegistry:
    """Create a registry with the built-in extractors.

    Args:
        tool_mode: ``auto`` registers every extractor; ``claude`` or
            ``cursor`` registers only that one.

    Raises:
        ValueError: If ``tool_mode`` is not one of ``TOOL_MODES``.
    """
    if tool_mode not in TOOL_MODES:
        raise ValueError(f"Unknown tool mode: {tool_mode!r}")
    registry = ExtractorRegistry()
    if tool_mode in ("auto", "claude"):
        registry.register("claude", claude.can_handle, claude.extract)
    if tool_mode in ("auto", "cursor"):
        registry.register("cursor", cursor.can_handle, cursor.extract)
    return registry
