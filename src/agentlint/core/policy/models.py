"""Policy options object with defaults.

The policy is a tree of dataclasses, one per configuration section:

- ``scan``         -- which files to analyse and how;
- ``policy``       -- verdict thresholds and tag-based escalation;
- ``rules``        -- enable/disable lists, severity and confidence overrides;
- ``capabilities`` -- diff escalation switches and network domain lists;
- ``diff``         -- change types that fail or warn a diff;
- ``baseline``     -- baseline file and mode;
- ``output``       -- rendering options;
- ``meta``         -- ownership information (informational only).

Values are stored exactly as written in the YAML file (severities as
lowercase strings, ``"none"`` included) and checked by
``agentlint.core.policy.loader.validate_policy``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any

from agentlint.core.ir import Severity

POLICY_VERSION: int = 1

SEVERITY_CHOICES: tuple[str, ...] = ("low", "medium", "high", "none")
VERDICT_CHOICES: tuple[str, ...] = ("pass", "warn", "fail")
FORMAT_CHOICES: tuple[str, ...] = ("text", "json")
COLOR_CHOICES: tuple[str, ...] = ("auto", "always", "never")
BASELINE_MODES: tuple[str, ...] = ("suppress_known", "require_no_new")
FINGERPRINT_CHOICES: tuple[str, ...] = ("stable", "location", "content")


def severity_or_none(label: str) -> Severity | None:
    """Map a policy severity label to a Severity; ``"none"`` maps to None."""
    if label == "none":
        return None
    return Severity.from_label(label)


@dataclass
class ScanOptions:
    root: str = "."
    include: list[str] = field(
        default_factory=lambda: [".claude/**", ".cursorrules", "CLAUDE.md", "AGENTS.md"]
    )
    exclude: list[str] = field(default_factory=lambda: ["**/.git/**", "**/node_modules/**"])
    tool_mode: str = "auto"
    max_files: int = 2000
    timeout: str = "10s"
    min_parse_confidence: float = 0.5


@dataclass
class TagPolicy:
    fail_if_any: list[str] = field(default_factory=list)
    warn_if_any: list[str] = field(default_factory=list)
    ignore_if_any: list[str] = field(default_factory=list)


@dataclass
class VerdictPolicy:
    ci_mode: bool = False
    fail_on: str = "high"
    warn_on: str = "medium"
    min_finding_confidence: float = 0.6
    treat_parse_failed_as: str = "warn"
    no_supported_files_as: str = "pass"
    strict: bool = False
    tags: TagPolicy = field(default_factory=TagPolicy)


@dataclass
class RuleOptions:
    enable: list[str] = field(default_factory=list)
    disable: list[str] = field(default_factory=list)
    severity_overrides: dict[str, str] = field(default_factory=dict)
    group_overrides: dict[str, str] = field(default_factory=dict)
    confidence_overrides: dict[str, float] = field(default_factory=dict)


@dataclass
class CapabilityOptions:
    fail_on_expansion: bool = True
    fail_on_new_dynamic_shell: bool = True
    fail_on_new_network_outbound: bool = False
    fail_on_sensitive_path_write: bool = True
    sensitive_paths: list[str] = field(
        default_factory=lambda: [".github/workflows/**", ".git/**", ".env", "~/.ssh/**"]
    )
    allowed_write_scopes: list[str] = field(default_factory=list)
    disallowed_write_scopes: list[str] = field(default_factory=list)
    allowed_network_domains: list[str] = field(default_factory=list)
    disallowed_network_domains: list[str] = field(default_factory=list)


@dataclass
class DiffOptions:
    enabled: bool = True
    fail_on: list[str] = field(
        default_factory=lambda: [
            "capability_expansion",
            "context_change_to_hook",
            "write_scope_widening_to_all",
        ]
    )
    warn_on: list[str] = field(default_factory=lambda: ["new_medium_findings"])


@dataclass
class BaselineOptions:
    enabled: bool = False
    file: str = ".agentlint/baseline.json"
    mode: str = "suppress_known"
    fingerprint: str = "stable"
    expires_days: int = 30


@dataclass
class OutputOptions:
    format: str = "text"
    color: str = "auto"
    include_recommendations: bool = True
    include_permission_manifest: bool = True
    include_ir: bool = False


@dataclass
class MetaOptions:
    policy_name: str = "default"
    owner: str = ""
    last_reviewed: str = ""


@dataclass
class Policy:
    """Complete policy configuration. ``Policy()`` is the default policy."""

    version: int = POLICY_VERSION
    scan: ScanOptions = field(default_factory=ScanOptions)
    policy: VerdictPolicy = field(default_factory=VerdictPolicy)
    rules: RuleOptions = field(default_factory=RuleOptions)
    capabilities: CapabilityOptions = field(default_factory=CapabilityOptions)
    diff: DiffOptions = field(default_factory=DiffOptions)
    baseline: BaselineOptions = field(default_factory=BaselineOptions)
    output: OutputOptions = field(default_factory=OutputOptions)
    meta: MetaOptions = field(default_factory=MetaOptions)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def diff_fail_on(self) -> list[str]:
        """``diff.fail_on`` plus the change types the capability switches add."""
        conditions = list(self.diff.fail_on)
        switches = (
            (self.capabilities.fail_on_expansion, "capability_expansion"),
            (self.capabilities.fail_on_new_dynamic_shell, "shell_dynamic_introduced"),
            (self.capabilities.fail_on_new_network_outbound, "network_new_outbound"),
            (self.capabilities.fail_on_sensitive_path_write, "sensitive_path_newly_touched"),
        )
        for enabled, change_type in switches:
            if enabled and change_type not in conditions:
                conditions.append(change_type)
        return conditions


def section_fields(section: Any) -> set[str]:
    return {f.name for f in fields(section)}
