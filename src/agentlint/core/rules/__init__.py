"""Rule evaluation for agent configuration documents.

Twenty rules in eight groups, each a ``Rule`` object with fixed
``RuleDefinition`` metadata and a pure ``evaluate(ctx)`` method.

Submodules
----------
- ``base``: Rule contract, ``RuleContext`` and finding construction helpers.
- ``execution``: EXEC-001..003, shell execution risks.
- ``filesystem``: FS-001..003, write access risks.
- ``network``: NET-001..003, network access and remote fetches.
- ``secrets``: SEC-001..003, secret references and propagation.
- ``hook``: HOOK-001..002, automatic hook behaviour.
- ``instruction``: INST-001..002, override and self-modification phrases.
- ``scope``: SCOPE-001..002, high-risk capability combinations.
- ``observability``: OBS-001..002, auditability of declared capabilities.
- ``engine``: ``RuleEngine`` with overrides, confidence gate and ordering.
"""

from agentlint.core.rules.base import RULE_GROUPS, Rule, RuleContext, RuleDefinition, make_finding
from agentlint.core.rules.engine import (
    EngineResult,
    RuleEngine,
    count_by_severity,
    default_rules,
    filter_by_severity,
    has_findings,
    sort_findings,
)

__all__ = [
    "EngineResult",
    "RULE_GROUPS",
    "Rule",
    "RuleContext",
    "RuleDefinition",
    "RuleEngine",
    "count_by_severity",
    "default_rules",
    "filter_by_severity",
    "has_findings",
    "make_finding",
    "sort_findings",
]
