"""Evidence extractors for agent configuration files.

Submodules
----------
- ``patterns``: fixed detection catalogs (commands, secrets, paths, phrases).
- ``base``: action factories, ``DocumentBuilder`` and the failure-tolerant
  extraction driver.
- ``claude``: Claude Code skills, agents, hooks and memory files.
- ``cursor``: Cursor ``.cursorrules`` files.
- ``registry``: ordered path-based dispatch with ``default_registry()``.
"""

from agentlint.parsers.base import DocumentBuilder, ExtractionResult
from agentlint.parsers.registry import (
    SUPPORTED_PATTERNS,
    TOOL_MODES,
    ExtractorRegistry,
    default_registry,
)

__all__ = [
    "DocumentBuilder",
    "ExtractionResult",
    "ExtractorRegistry",
    "SUPPORTED_PATTERNS",
    "TOOL_MODES",
    "default_registry",
]
