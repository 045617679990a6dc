"""Policy loading, merging and validation.

``load_policy`` finds a YAML policy file (explicit path, else the first of
``CONFIG_FILE_NAMES`` present in the working directory), parses it with
``yaml.safe_load`` and merges it section by section over the defaults.
Loading never raises: problems are returned in ``PolicyLoadResult.errors``
and ``warnings``. ``validate_policy`` checks value shapes and ranges and
returns the complete list of problems so they can all be fixed in one pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any

import yaml

from agentlint.core.policy.models import (
    BASELINE_MODES,
    COLOR_CHOICES,
    FINGERPRINT_CHOICES,
    FORMAT_CHOICES,
    POLICY_VERSION,
    SEVERITY_CHOICES,
    VERDICT_CHOICES,
    Policy,
    section_fields,
)

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES: tuple[str, ...] = (
    "agentlint.yaml",
    "agentlint.yml",
    ".agentlint.yaml",
    ".agentlint.yml",
    ".agentlint/agentlint.yaml",
    ".agentlint/agentlint.yml",
)

TOOL_MODE_CHOICES: tuple[str, ...] = ("auto", "claude", "cursor")
RULE_GROUP_CHOICES: tuple[str, ...] = (
    "execution",
    "filesystem",
    "network",
    "secrets",
    "hook",
    "instruction",
    "scope",
    "observability",
)

# Mapping-valued options: merged key by key instead of replaced.
_MERGED_MAPPINGS: frozenset[str] = frozenset(
    {"severity_overrides", "group_overrides", "confidence_overrides"}
)


@dataclass
class PolicyLoadResult:
    """Outcome of ``load_policy``.

    Attributes:
        config: The merged policy (defaults when loading failed).
        path: The file that was loaded, or None.
        errors: Fatal problems (missing explicit file, invalid YAML).
        warnings: Non-fatal problems (unknown version or keys).
    """

    config: Policy
    path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def find_policy_file(cwd: Path) -> Path | None:
    for name in CONFIG_FILE_NAMES:
        candidate = cwd / name
        if candidate.is_file():
            return candidate
    return None


def load_policy(config_path: str | Path | None = None, cwd: str | Path | None = None) -> PolicyLoadResult:
    """Load the policy for a working directory.

    Args:
        config_path: Explicit policy file. Relative paths resolve against
            ``cwd``.
        cwd: Directory searched for a default policy file; defaults to the
            process working directory.
    """
    base = Path(cwd) if cwd is not None else Path.cwd()
    if config_path is not None:
        path = Path(config_path)
        if not path.is_absolute():
            path = base / path
        if not path.is_file():
            return PolicyLoadResult(Policy(), errors=[f"Configuration file not found: {path}"])
    else:
        path = find_policy_file(base)
        if path is None:
            return PolicyLoadResult(Policy())

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Failed to read policy: %s", path, exc_info=True)
        return PolicyLoadResult(Policy(), errors=[f"Failed to parse configuration file {path}: {exc}"])

    if data is not None and not isinstance(data, dict):
        return PolicyLoadResult(
            Policy(), errors=[f"Configuration file {path} must contain a mapping"]
        )
    warnings: list[str] = []
    config = merge_policy(data or {}, warnings)
    return PolicyLoadResult(config, path=path, warnings=warnings)


def merge_policy(data: dict[str, Any], warnings: list[str] | None = None) -> Policy:
    """Merge a parsed policy mapping over the defaults.

    Scalars and lists replace the default; override mappings and nested
    sections (``policy.tags``) are merged key by key. Unknown sections and
    keys are reported in ``warnings`` and ignored.
    """
    warnings = warnings if warnings is not None else []
    policy = Policy()
    version = data.get("version")
    if version is not None and version != POLICY_VERSION:
        warnings.append(f"Unknown policy version: {version}. Using defaults for unknown fields.")

    for name, value in data.items():
        if name == "version":
            continue
        section = getattr(policy, name, None)
        if section is None or not is_dataclass(section):
            warnings.append(f"Unknown policy section: {name}")
            continue
        if value is None:
            continue
        if not isinstance(value, dict):
            warnings.append(f"Policy section {name} must be a mapping")
            continue
        _merge_section(section, value, name, warnings)
    return policy


def _merge_section(section: Any, values: dict[str, Any], prefix: str, warnings: list[str]) -> None:
    known = section_fields(section)
    for key, value in values.items():
        if key not in known:
            warnings.append(f"Unknown policy key: {prefix}.{key}")
            continue
        current = getattr(section, key)
        if is_dataclass(current) and isinstance(value, dict):
            _merge_section(current, value, f"{prefix}.{key}", warnings)
        elif key in _MERGED_MAPPINGS and isinstance(value, dict):
            current.update(value)
        elif value is not None:
            setattr(section, key, value)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _is_confidence(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and 0 <= value <= 1


def _check_choice(errors: list[str], label: str, value: Any, choices: tuple[str, ...]) -> None:
    if value not in choices:
        errors.append(f"Invalid {label} value: {value} (expected one of {', '.join(choices)})")


# Free-form strings used as paths or durations. Choice-valued strings are
# checked against their choice lists; meta strings are informational.
_TEXT_FIELDS: frozenset[str] = frozenset({"scan.root", "scan.timeout", "baseline.file"})


def _check_shapes(section: Any, defaults: Any, prefix: str, errors: list[str]) -> None:
    """Compare each value's type with the type of its default."""
    for f in fields(defaults):
        label = f"{prefix}.{f.name}" if prefix else f.name
        value = getattr(section, f.name)
        default = getattr(defaults, f.name)
        if is_dataclass(default):
            if isinstance(value, type(default)):
                _check_shapes(value, default, label, errors)
            else:
                errors.append(f"{label} must be a mapping")
        elif isinstance(default, list):
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                errors.append(f"{label} must be a list of strings")
        elif isinstance(default, dict):
            if not isinstance(value, dict) or not all(isinstance(key, str) for key in value):
                errors.append(f"{label} must be a mapping")
        elif isinstance(default, bool):
            if not isinstance(value, bool):
                errors.append(f"{label} must be true or false")
        elif label in _TEXT_FIELDS:
            if not isinstance(value, str):
                errors.append(f"{label} must be a string")


def validate_policy(policy: Policy) -> list[str]:
    """Return every problem found in ``policy``; an empty list means valid.

    Values of the wrong shape (a scalar where a list or mapping belongs,
    a list holding non-strings) are reported first. Range checks on a
    mapping are skipped when the mapping itself is malformed.
    """
    errors: list[str] = []
    _check_shapes(policy, Policy(), "", errors)
    rules = policy.rules

    _check_choice(errors, "policy.fail_on", policy.policy.fail_on, SEVERITY_CHOICES)
    _check_choice(errors, "policy.warn_on", policy.policy.warn_on, SEVERITY_CHOICES)
    _check_choice(
        errors, "policy.treat_parse_failed_as", policy.policy.treat_parse_failed_as, VERDICT_CHOICES
    )
    _check_choice(
        errors, "policy.no_supported_files_as", policy.policy.no_supported_files_as, VERDICT_CHOICES
    )
    if not _is_confidence(policy.policy.min_finding_confidence):
        errors.append("policy.min_finding_confidence must be between 0 and 1")
    if not _is_confidence(policy.scan.min_parse_confidence):
        errors.append("scan.min_parse_confidence must be between 0 and 1")

    _check_choice(errors, "scan.tool_mode", policy.scan.tool_mode, TOOL_MODE_CHOICES)
    max_files = policy.scan.max_files
    if not isinstance(max_files, int) or isinstance(max_files, bool) or max_files < 1:
        errors.append(f"scan.max_files must be a positive integer, got {max_files!r}")

    if isinstance(rules.severity_overrides, dict):
        for rule_id, label in rules.severity_overrides.items():
            _check_choice(errors, f"rules.severity_overrides.{rule_id}", label, SEVERITY_CHOICES)
    if isinstance(rules.group_overrides, dict):
        for group, label in rules.group_overrides.items():
            if group not in RULE_GROUP_CHOICES:
                errors.append(f"Unknown rule group in rules.group_overrides: {group}")
            _check_choice(errors, f"rules.group_overrides.{group}", label, SEVERITY_CHOICES)
    if isinstance(rules.confidence_overrides, dict):
        for rule_id, value in rules.confidence_overrides.items():
            if not _is_confidence(value):
                errors.append(f"rules.confidence_overrides.{rule_id} must be between 0 and 1")

    _check_choice(errors, "output.format", policy.output.format, FORMAT_CHOICES)
    _check_choice(errors, "output.color", policy.output.color, COLOR_CHOICES)
    _check_choice(errors, "baseline.mode", policy.baseline.mode, BASELINE_MODES)
    _check_choice(errors, "baseline.fingerprint", policy.baseline.fingerprint, FINGERPRINT_CHOICES)

    return errors
