"""Tests for the ``agentlint scan`` command.

Verifies:
    - Exit codes for clean, risky, empty and misconfigured projects.
    - JSON report output.
    - Threshold, strict and config-file options.
    - Baseline update, suppression, pruning and error handling.
    - The permissions-only view.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest
from click.testing import Result

from agentlint import __version__

Invoke = Callable[..., Result]
InvokeJson = Callable[..., tuple[int, Any]]


# ---------------------------------------------------------------------------
# Basic verdicts
# ---------------------------------------------------------------------------


class TestScanVerdicts:
    """Exit codes and headline text."""

    def test_clean_project(self, invoke: Invoke, clean_project: Path) -> None:
        result = invoke("scan", str(clean_project))
        assert result.exit_code == 0
        assert "No findings." in result.stdout
        assert "Status: PASS" in result.stdout

    def test_risky_project(self, invoke: Invoke, risky_project: Path) -> None:
        result = invoke("scan", str(risky_project))
        assert result.exit_code == 1
        assert "total findings" in result.stdout
        assert "Recommended Permissions" in result.stdout
        assert "Status: FAIL" in result.stdout

    def test_empty_directory(self, invoke: Invoke, empty_dir: Path) -> None:
        result = invoke("scan", str(empty_dir))
        assert result.exit_code == 0
        assert "No supported agent configuration files found." in result.stdout

    def test_fail_on_none(self, invoke: Invoke, risky_project: Path) -> None:
        result = invoke("scan", str(risky_project), "--fail-on", "none")
        assert result.exit_code == 0
        assert "Status: WARN" in result.stdout

    def test_missing_path_is_a_usage_error(self, invoke: Invoke, tmp_path: Path) -> None:
        assert invoke("scan", str(tmp_path / "missing")).exit_code == 2

    def test_invalid_threshold_is_a_usage_error(self, invoke: Invoke, clean_project: Path) -> None:
        assert invoke("scan", str(clean_project), "--fail-on", "critical").exit_code == 2

    def test_version(self, invoke: Invoke) -> None:
        result = invoke("--version")
        assert result.exit_code == 0
        assert __version__ in result.stdout


# ---------------------------------------------------------------------------
# JSON output
# ---------------------------------------------------------------------------


class TestScanJson:
    """``--format json`` prints the full report."""

    def test_report_shape(self, invoke_json: InvokeJson, risky_project: Path) -> None:
        code, report = invoke_json("scan", str(risky_project))
        assert code == 1
        assert report["report_version"]
        assert report["tool"]["name"] == "agentlint"
        assert report["summary"]["status"] == "fail"
        assert report["summary"]["exit_code"] == 1
        assert report["summary"]["documents_scanned"] == 2
        assert len(report["findings"]) == 5
        assert {f["severity"] for f in report["findings"]} <= {"high", "medium", "low"}
        assert report["diff"] is None
        assert report["errors"] == []

    def test_clean_report(self, invoke_json: InvokeJson, clean_project: Path) -> None:
        code, report = invoke_json("scan", str(clean_project))
        assert code == 0
        assert report["findings"] == []
        assert report["capability_summary"]["shell_exec"]["dynamic_detected"] is False
        assert report["recommended_permissions"]["permissions"]["secrets"]["env_vars"] == []

    def test_keys_are_sorted(self, invoke: Invoke, clean_project: Path) -> None:
        result = invoke("scan", str(clean_project), "--format", "json")
        keys = list(json.loads(result.stdout))
        assert keys == sorted(keys)

    def test_format_from_policy_file(self, invoke: Invoke, clean_project: Path) -> None:
        (clean_project / "agentlint.yaml").write_text("output:\n  format: json\n")
        result = invoke("scan", str(clean_project))
        assert json.loads(result.stdout)["summary"]["status"] == "pass"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class TestScanConfig:
    """Policy discovery, explicit config files and validation errors."""

    def test_policy_found_in_scanned_path(self, invoke: Invoke, risky_project: Path) -> None:
        (risky_project / "agentlint.yaml").write_text("policy:\n  fail_on: none\n  warn_on: none\n")
        result = invoke("scan", str(risky_project))
        assert result.exit_code == 0
        assert "Status: PASS" in result.stdout

    def test_explicit_config(self, invoke: Invoke, risky_project: Path, tmp_path: Path) -> None:
        config = tmp_path / "relaxed.yaml"
        config.write_text("rules:\n  group_overrides:\n    execution: none\n    network: none\n")
        result = invoke("scan", str(risky_project), "--config", str(config), "--format", "json")
        findings = json.loads(result.stdout)["findings"]
        assert not any(f["rule_id"].startswith(("EXEC-", "NET-")) for f in findings)

    def test_invalid_config_exits_3(self, invoke: Invoke, clean_project: Path) -> None:
        (clean_project / "agentlint.yaml").write_text(
            "policy:\n  fail_on: critical\nscan:\n  max_files: 0\n"
        )
        result = invoke("scan", str(clean_project))
        assert result.exit_code == 3
        assert result.stderr.count("Configuration error:") == 2
        assert result.stdout == ""

    @pytest.mark.parametrize(
        "text",
        [
            "rules:\n  severity_overrides: high\n",
            "rules:\n  disable: EXEC-001\n",
            "policy:\n  tags: rce\n",
        ],
    )
    def test_malformed_config_shape_exits_3(
        self, invoke: Invoke, risky_project: Path, text: str
    ) -> None:
        (risky_project / "agentlint.yaml").write_text(text)
        result = invoke("scan", str(risky_project))
        assert result.exit_code == 3
        assert "Configuration error:" in result.stderr
        assert result.stdout == ""

    def test_unparseable_config_exits_3(self, invoke: Invoke, clean_project: Path) -> None:
        (clean_project / "agentlint.yaml").write_text("policy: [unclosed\n")
        assert invoke("scan", str(clean_project)).exit_code == 3

    def test_unknown_keys_warn(self, invoke: Invoke, clean_project: Path) -> None:
        (clean_project / "agentlint.yaml").write_text("telemetry:\n  enabled: true\n")
        result = invoke("scan", str(clean_project))
        assert result.exit_code == 0
        assert "Warning: Unknown policy section: telemetry" in result.stderr


# ---------------------------------------------------------------------------
# Parse failures and strict mode
# ---------------------------------------------------------------------------


class TestScanStrict:

    def test_parse_failure_warns(self, invoke: Invoke, make_project: Callable[..., Path]) -> None:
        root = make_project({"CLAUDE.md": "abc\x00def\n"})
        result = invoke("scan", str(root))
        assert result.exit_code == 0
        assert "PARSE_FAILED" in result.stdout

    def test_strict_exits_4(self, invoke: Invoke, make_project: Callable[..., Path]) -> None:
        root = make_project({"CLAUDE.md": "abc\x00def\n"})
        result = invoke("scan", str(root), "--strict")
        assert result.exit_code == 4
        assert "Status: FAIL" in result.stdout

    def test_no_files_can_fail(self, invoke: Invoke, empty_dir: Path) -> None:
        (empty_dir / "agentlint.yaml").write_text("policy:\n  no_supported_files_as: fail\n")
        assert invoke("scan", str(empty_dir)).exit_code == 4


# ---------------------------------------------------------------------------
# Baselines
# ---------------------------------------------------------------------------


class TestScanBaseline:
    """--update-baseline, --baseline, --prune-baseline, --ignore-baseline."""

    def test_update_then_suppress(self, invoke: Invoke, risky_project: Path) -> None:
        baseline = risky_project / ".agentlint" / "baseline.json"
        result = invoke("scan", str(risky_project), "--update-baseline")
        assert result.exit_code == 0
        assert "Baseline updated" in result.stderr
        assert len(json.loads(baseline.read_text())["findings"]) == 5

        # The policy leaves baselines off unless a file is named.
        assert invoke("scan", str(risky_project)).exit_code == 1
        suppressed = invoke("scan", str(risky_project), "--baseline", str(baseline))
        assert suppressed.exit_code == 0
        assert "5 baselined" in suppressed.stdout

    def test_policy_enables_baseline(
        self, invoke: Invoke, invoke_json: InvokeJson, risky_project: Path
    ) -> None:
        invoke("scan", str(risky_project), "--update-baseline")
        (risky_project / "agentlint.yaml").write_text("baseline:\n  enabled: true\n")
        code, report = invoke_json("scan", str(risky_project))
        assert code == 0
        assert report["findings"] == []
        assert report["summary"]["baseline"] == {
            "new_findings": 0,
            "suppressed_findings": 5,
            "fixed_findings": 0,
        }

    def test_ignore_baseline(self, invoke: Invoke, risky_project: Path) -> None:
        invoke("scan", str(risky_project), "--update-baseline")
        (risky_project / "agentlint.yaml").write_text("baseline:\n  enabled: true\n")
        assert invoke("scan", str(risky_project), "--ignore-baseline").exit_code == 1

    def test_prune_removes_fixed_entries(self, invoke: Invoke, risky_project: Path) -> None:
        baseline = risky_project / ".agentlint" / "baseline.json"
        invoke("scan", str(risky_project), "--update-baseline")
        (risky_project / ".claude" / "skills" / "deploy.md").write_text("# Deploy\n")

        result = invoke("scan", str(risky_project), "--prune-baseline")
        assert result.exit_code == 0
        assert "Pruned 5 stale baseline entries" in result.stderr
        assert json.loads(baseline.read_text())["findings"] == []

    def test_prune_without_baseline(self, invoke: Invoke, risky_project: Path) -> None:
        result = invoke("scan", str(risky_project), "--prune-baseline")
        assert "No baseline to prune" in result.stderr
        assert result.exit_code == 1

    def test_modes_are_exclusive(self, invoke: Invoke, clean_project: Path) -> None:
        result = invoke("scan", str(clean_project), "--update-baseline", "--ignore-baseline")
        assert result.exit_code == 2
        assert "mutually exclusive" in result.stderr

    def test_corrupt_baseline_exits_3(self, invoke: Invoke, clean_project: Path) -> None:
        bad = clean_project / "baseline.json"
        bad.write_text("{not json")
        result = invoke("scan", str(clean_project), "--baseline", str(bad))
        assert result.exit_code == 3
        assert "Baseline error" in result.stderr


# ---------------------------------------------------------------------------
# Permissions only
# ---------------------------------------------------------------------------


class TestPermissionsOnly:

    def test_text(self, invoke: Invoke, risky_project: Path) -> None:
        result = invoke("scan", str(risky_project), "--permissions-only")
        assert result.exit_code == 0
        assert "Recommended Permissions" in result.stdout
        assert "Findings" not in result.stdout

    def test_json(self, invoke_json: InvokeJson, risky_project: Path) -> None:
        code, manifest = invoke_json("scan", str(risky_project), "--permissions-only")
        assert code == 0
        permissions = manifest["permissions"]
        assert permissions["shell_exec"]["enabled"] is False
        assert permissions["network"]["outbound"] is False
        assert permissions["network"]["allowed_domains"] == ["x.com"]
