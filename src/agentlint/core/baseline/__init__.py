"""Baseline suppression of previously accepted findings.

Submodules
----------
- ``models``: BaselineEntry, Baseline (versioned JSON format),
  BaselineFilterResult.
- ``manager``: BaselineManager -- load/save, create/update/prune, filter.
"""

from agentlint.core.baseline.manager import DEFAULT_BASELINE_FILE, BaselineManager
from agentlint.core.baseline.models import (
    BASELINE_VERSION,
    Baseline,
    BaselineEntry,
    BaselineFilterResult,
)

__all__ = [
    "BASELINE_VERSION",
    "Baseline",
    "BaselineEntry",
    "BaselineFilterResult",
    "BaselineManager",
    "DEFAULT_BASELINE_FILE",
]
