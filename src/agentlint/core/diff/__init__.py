"""Behavioural diff between two scans.

Submodules
----------
- ``models``: ChangeType, DiffChange, DiffSummary, DiffResult.
- ``engine``: growth-only capability detectors, fingerprint matching of
  findings, and the diff verdict.
"""

from agentlint.core.diff.engine import (
    DEFAULT_FAIL_ON,
    DEFAULT_WARN_ON,
    compare,
    detect_capability_changes,
    diff_status,
    new_findings,
)
from agentlint.core.diff.models import (
    DIFF_CONDITIONS,
    NEW_HIGH_FINDINGS,
    NEW_MEDIUM_FINDINGS,
    ChangeType,
    DiffChange,
    DiffResult,
    DiffSummary,
)

__all__ = [
    "ChangeType",
    "DEFAULT_FAIL_ON",
    "DEFAULT_WARN_ON",
    "DIFF_CONDITIONS",
    "DiffChange",
    "DiffResult",
    "DiffSummary",
    "NEW_HIGH_FINDINGS",
    "NEW_MEDIUM_FINDINGS",
    "compare",
    "detect_capability_changes",
    "diff_status",
    "new_findings",
]
