"""Policy configuration.

Submodules
----------
- ``models``: The ``Policy`` dataclass tree and its defaults.
- ``loader``: YAML discovery and loading, section-wise merge over the
  defaults, and full-list validation.
"""

from agentlint.core.policy.loader import (
    CONFIG_FILE_NAMES,
    PolicyLoadResult,
    find_policy_file,
    load_policy,
    merge_policy,
    validate_policy,
)
from agentlint.core.policy.models import POLICY_VERSION, Policy, severity_or_none

__all__ = [
    "CONFIG_FILE_NAMES",
    "POLICY_VERSION",
    "Policy",
    "PolicyLoadResult",
    "find_policy_file",
    "load_policy",
    "merge_policy",
    "severity_or_none",
    "validate_policy",
]
