"""AgentLint: Static security analysis for AI agent configuration files."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
