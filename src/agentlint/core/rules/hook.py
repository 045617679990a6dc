"""Hook and automation rules (HOOK)."""

from __future__ import annotations

from agentlint.core.ir import ActionType, DocType, Finding, Severity, TriggerType
from agentlint.core.rules.base import (
    DOCUMENT_START,
    Rule,
    RuleContext,
    RuleDefinition,
    action_finding,
    heuristic_evidence,
    make_finding,
)

SIDE_EFFECT_TYPES: frozenset[ActionType] = frozenset(
    {ActionType.SHELL_EXEC, ActionType.FILE_WRITE, ActionType.NETWORK_CALL}
)


class AutoTriggeredHookRule(Rule):
    """HOOK-001: hooks that fire on their own and have side effects.

    A hook whose triggers are all ``manual`` or ``unknown`` is exempt; a
    hook with no trigger metadata at all is treated as auto-triggered.
    """

    definition = RuleDefinition(
        id="HOOK-001",
        group="hook",
        severity=Severity.HIGH,
        title="Auto-Triggered Hook with Side Effects",
        description=(
            "Hooks that run automatically and perform shell execution, file writes, or "
            "network calls. Users do not explicitly approve hooks."
        ),
        recommendation=(
            "Remove side effects from automatic hooks, or convert to interactive skills that "
            "require user approval."
        ),
        tags=("hook", "automation", "side-effects"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        document = ctx.document
        if document.doc_type != DocType.HOOK:
            return []
        side_effects = [a for a in document.actions if a.type in SIDE_EFFECT_TYPES]
        if not side_effects:
            return []
        triggers = document.context_profile.triggers
        auto = any(t.type not in (TriggerType.MANUAL, TriggerType.UNKNOWN) for t in triggers)
        if triggers and not auto:
            return []
        trigger_types = ", ".join(t.type.value for t in triggers)
        return [
            action_finding(
                self.definition,
                document,
                action,
                f"Auto-triggered hook ({trigger_types}) performs {action.type.value}: {action.summary}",
            )
            for action in side_effects
        ]


class HiddenHookActivationRule(Rule):
    """HOOK-002: hooks with neither a known trigger nor any documentation."""

    definition = RuleDefinition(
        id="HOOK-002",
        group="hook",
        severity=Severity.MEDIUM,
        title="Hidden Hook Activation",
        description=(
            "Hooks defined without clear documentation or discoverability. This makes it "
            "difficult to audit agent behavior."
        ),
        recommendation=(
            "Document all hooks clearly. Include trigger conditions and expected behavior in "
            "comments or documentation."
        ),
        tags=("hook", "documentation", "discoverability"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        document = ctx.document
        if document.doc_type != DocType.HOOK:
            return []
        clear_trigger = any(t.type != TriggerType.UNKNOWN for t in document.context_profile.triggers)
        documented = bool(document.instruction_blocks or document.declared_intents)
        if clear_trigger or documented:
            return []
        return [
            make_finding(
                self.definition,
                document,
                DOCUMENT_START,
                "Hook lacks clear trigger documentation or discoverability.",
                heuristic_evidence("No trigger type or documentation detected", 0.7),
                0.7,
            )
        ]


RULES: tuple[Rule, ...] = (
    AutoTriggeredHookRule(),
    HiddenHookActivationRule(),
)
