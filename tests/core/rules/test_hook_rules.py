"""Tests for HOOK-001 and HOOK-002."""

from __future__ import annotations

from typing import Callable

from agentlint.core.ir import Finding, Severity
from samples import POST_EDIT_HOOK

RunRules = Callable[..., list[Finding]]


def _only(findings: list[Finding], rule_id: str) -> list[Finding]:
    return [f for f in findings if f.rule_id == rule_id]


class TestAutoTriggeredHook:
    """HOOK-001."""

    def test_post_edit_hook_with_shell(self, run_rules: RunRules) -> None:
        (finding,) = _only(run_rules({".claude/hooks/post_edit.sh": POST_EDIT_HOOK}), "HOOK-001")
        assert finding.severity == Severity.HIGH
        assert finding.message.startswith("Auto-triggered hook (post_edit) performs shell_exec")

    def test_every_side_effect_is_reported(self, run_rules: RunRules) -> None:
        content = "#!/bin/bash\nnpm run lint\necho done > build.log\n"
        findings = _only(run_rules({".claude/hooks/pre-commit.sh": content}), "HOOK-001")
        assert [f.location.start_line for f in findings] == [2, 3]

    def test_unknown_trigger_is_exempt(self, run_rules: RunRules) -> None:
        assert _only(run_rules({".claude/hooks/format.sh": POST_EDIT_HOOK}), "HOOK-001") == []

    def test_hook_without_side_effects(self, run_rules: RunRules) -> None:
        content = "#!/bin/bash\n# nothing to do\n"
        assert _only(run_rules({".claude/hooks/post_edit.sh": content}), "HOOK-001") == []

    def test_skills_are_not_hooks(self, run_rules: RunRules) -> None:
        content = "# Lint\n\n```bash\nnpm run lint\n```\n"
        assert _only(run_rules({".claude/skills/post_edit.md": content}), "HOOK-001") == []


class TestHiddenHookActivation:
    """HOOK-002."""

    def test_undocumented_hook_without_trigger(self, run_rules: RunRules) -> None:
        (finding,) = _only(run_rules({".claude/hooks/format.sh": POST_EDIT_HOOK}), "HOOK-002")
        assert finding.severity == Severity.MEDIUM
        assert finding.location.start_line == 1
        assert finding.confidence == 0.7

    def test_named_trigger(self, run_rules: RunRules) -> None:
        assert _only(run_rules({".claude/hooks/post_edit.sh": POST_EDIT_HOOK}), "HOOK-002") == []

    def test_documented_hook(self, run_rules: RunRules) -> None:
        content = "# Formatter\nRuns prettier over changed files.\n"
        assert _only(run_rules({".claude/hooks/format.md": content}), "HOOK-002") == []
