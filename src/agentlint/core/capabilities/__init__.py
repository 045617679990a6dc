"""Capability aggregation for AgentLint.

Submodules
----------
- ``aggregator``: per-document capability buckets and the scan-wide
  ``CapabilitySummary`` fold.
- ``manifest``: least-privilege ``PermissionManifest`` recommendation.

All public names are re-exported here::

    from agentlint.core.capabilities import summarize, recommend_permissions
"""

from agentlint.core.capabilities.aggregator import (
    MAX_SHELL_EXAMPLES,
    derive_capabilities,
    summarize,
    update_summary,
)
from agentlint.core.capabilities.manifest import (
    BROAD_WRITE_PATHS,
    empty_manifest,
    is_broad_path,
    is_dynamic_command,
    recommend_permissions,
)

__all__ = [
    "BROAD_WRITE_PATHS",
    "MAX_SHELL_EXAMPLES",
    "derive_capabilities",
    "empty_manifest",
    "is_broad_path",
    "is_dynamic_command",
    "recommend_permissions",
    "summarize",
    "update_summary",
]
