"""Credential and secret rules (SEC).

A variable counts as a known secret when its upper-cased name equals, or
contains, an entry of ``KNOWN_SECRET_VARS``; so ``MY_GITHUB_TOKEN`` and
``STRIPE_SECRET_KEY`` both match. Files count as secret-bearing when their
lower-cased path contains an entry of ``SECRET_FILE_PATTERNS``.
"""

from __future__ import annotations

from agentlint.core.ir import Action, Evidence, EvidenceKind, Finding, Severity
from agentlint.core.rules.base import Rule, RuleContext, RuleDefinition, action_finding, make_finding

KNOWN_SECRET_VARS: tuple[str, ...] = (
    "GITHUB_TOKEN",
    "GH_TOKEN",
    "GITLAB_TOKEN",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_ACCESS_KEY_ID",
    "AWS_SESSION_TOKEN",
    "AZURE_CLIENT_SECRET",
    "AZURE_CLIENT_ID",
    "AZURE_TENANT_ID",
    "AZURE_SUBSCRIPTION_ID",
    "GOOGLE_APPLICATION_CREDENTIALS",
    "GCP_SERVICE_ACCOUNT",
    "GCLOUD_SERVICE_KEY",
    "API_KEY",
    "API_SECRET",
    "SECRET_KEY",
    "PRIVATE_KEY",
    "DATABASE_PASSWORD",
    "DATABASE_URL",
    "DB_PASSWORD",
    "DB_HOST",
    "REDIS_PASSWORD",
    "MONGODB_URI",
    "PASSWORD",
    "TOKEN",
    "NPM_TOKEN",
    "NPM_AUTH_TOKEN",
    "PYPI_TOKEN",
    "PYPI_PASSWORD",
    "DOCKER_PASSWORD",
    "DOCKER_AUTH",
    "SSH_PRIVATE_KEY",
    "SSH_KEY",
    "SLACK_TOKEN",
    "SLACK_WEBHOOK",
    "DISCORD_TOKEN",
    "SENDGRID_API_KEY",
    "STRIPE_SECRET_KEY",
    "TWILIO_AUTH_TOKEN",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "ENCRYPTION_KEY",
    "JWT_SECRET",
    "SESSION_SECRET",
    "COOKIE_SECRET",
)

SECRET_FILE_PATTERNS: tuple[str, ...] = (
    ".env",
    ".env.local",
    ".env.production",
    ".env.development",
    "credentials.json",
    "secrets.json",
    "service-account.json",
    ".npmrc",
    ".pypirc",
    ".netrc",
    ".docker/config.json",
    ".aws/credentials",
    ".kube/config",
    "id_rsa",
    "id_ed25519",
    "id_ecdsa",
    ".ssh/config",
)


def is_known_secret_var(name: str) -> bool:
    upper = name.upper()
    return any(secret in upper for secret in KNOWN_SECRET_VARS)


def is_secret_file(path: str) -> bool:
    lowered = path.lower()
    return any(pattern in lowered for pattern in SECRET_FILE_PATTERNS)


class EnvironmentSecretReferenceRule(Rule):
    """SEC-001: one finding per distinct secret variable, at its first use."""

    definition = RuleDefinition(
        id="SEC-001",
        group="secrets",
        severity=Severity.HIGH,
        title="Environment Secret Reference",
        description=(
            "References to known secret environment variables such as GITHUB_TOKEN, "
            "AWS_SECRET_ACCESS_KEY, or API_KEY. Agents should not touch secrets by default."
        ),
        recommendation=(
            "Remove secret references from agent configurations. Use secure secret "
            "management practices."
        ),
        tags=("secrets", "credentials", "environment"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        findings: list[Finding] = []
        seen: set[str] = set()
        for action in ctx.document.actions:
            if action.secrets is None:
                continue
            for name in action.secrets.reads_env_vars or []:
                if name in seen or not is_known_secret_var(name):
                    continue
                seen.add(name)
                findings.append(
                    make_finding(
                        self.definition,
                        ctx.document,
                        action.anchors,
                        f"Reference to secret environment variable: ${name}. "
                        "Agents should not access secrets directly.",
                        [Evidence(EvidenceKind.REGEX, f"${name}", action.confidence)],
                        action.confidence,
                        action,
                    )
                )
        return findings


class ImplicitSecretAccessRule(Rule):
    """SEC-002: access to files that usually hold credentials."""

    definition = RuleDefinition(
        id="SEC-002",
        group="secrets",
        severity=Severity.MEDIUM,
        title="Implicit Secret Access",
        description="Access to .env files or configuration files that commonly contain secrets.",
        recommendation=(
            "Avoid accessing secret-containing files. Use environment variables or secure "
            "secret stores instead."
        ),
        tags=("secrets", "files", "configuration"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        findings: list[Finding] = []
        seen: set[str] = set()
        for action in ctx.document.actions:
            for path in _touched_files(action):
                if path in seen or not is_secret_file(path):
                    continue
                seen.add(path)
                findings.append(
                    make_finding(
                        self.definition,
                        ctx.document,
                        action.anchors,
                        f'Access to secret-containing file: "{path}".',
                        [
                            Evidence(
                                EvidenceKind.HEURISTIC,
                                f"Secret file pattern: {path}",
                                action.confidence,
                            )
                        ],
                        action.confidence,
                        action,
                    )
                )
        return findings


def _touched_files(action: Action) -> list[str]:
    files = list(action.secrets.reads_files or []) if action.secrets else []
    if action.filesystem is not None:
        files.extend(action.filesystem.paths)
    return files


class SecretPropagationRule(Rule):
    """SEC-003: secrets flowing into shell, network or file sinks."""

    definition = RuleDefinition(
        id="SEC-003",
        group="secrets",
        severity=Severity.HIGH,
        title="Secret Propagation",
        description=(
            "Secrets are propagated to shell commands, network calls, or file writes. This "
            "creates exfiltration and logging risks."
        ),
        recommendation=(
            "Never propagate secrets through agent actions. Use secure API authentication "
            "methods."
        ),
        tags=("secrets", "propagation", "exfiltration"),
    )

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        findings: list[Finding] = []
        for action in ctx.document.actions:
            if action.secrets is None or not action.secrets.propagates_to:
                continue
            destinations = ", ".join(t.value for t in action.secrets.propagates_to)
            names = ", ".join(action.secrets.reads_env_vars or []) or "secrets"
            findings.append(
                action_finding(
                    self.definition,
                    ctx.document,
                    action,
                    f"Secret propagation detected: {names} propagated to {destinations}.",
                )
            )
        return findings


RULES: tuple[Rule, ...] = (
    EnvironmentSecretReferenceRule(),
    ImplicitSecretAccessRule(),
    SecretPropagationRule(),
)
