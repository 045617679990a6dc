"""AgentLint exception hierarchy.

All public exceptions inherit from AgentLintError, giving callers a single
base class to catch when they want to handle any AgentLint-specific failure
without swallowing unrelated errors.

The pipeline never lets ``ParseError`` or ``RuleEvaluationError`` escape a
component boundary: they are caught, logged, and accumulated as error
records next to the normal results. The CLI maps ``ConfigError`` and
``BaselineError`` to the configuration exit code and anything unexpected
to the internal-error exit code.
"""

from __future__ import annotations


class AgentLintError(Exception):
    """Base exception for all AgentLint errors."""


class ParseError(AgentLintError):
    """Raised when evidence extraction for a single document fails.

    Degrades the document's parse status to ``partial`` (actions gathered
    before the failure are kept) or ``failed`` (nothing was extracted).
    """


class RuleEvaluationError(AgentLintError):
    """Raised when a single rule cannot evaluate a document.

    The engine logs it and continues with the remaining rules.
    """

    def __init__(self, rule_id: str, message: str) -> None:
        super().__init__(f"{rule_id}: {message}")
        self.rule_id = rule_id


class ConfigError(AgentLintError):
    """Raised for invalid policy configuration.

    Carries the complete list of validation problems rather than only the
    first one, so users can fix everything in a single pass.
    """

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors) if errors else "invalid configuration")
        self.errors = list(errors)


class BaselineError(AgentLintError):
    """Raised when a baseline file cannot be read, parsed, or written."""


class InternalError(AgentLintError):
    """Raised for unexpected failures inside the analysis pipeline."""
