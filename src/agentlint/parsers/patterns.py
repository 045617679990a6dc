"""Fixed detection catalogs shared by the evidence extractors.

All catalogs are module-level immutable data (tuples, frozensets and
compiled regexes), loaded once and shared read-only by every extractor and
rule. Separating them from the extraction logic keeps them testable on
their own and makes catalog changes easy to audit.

Catalog groups:

- **Dynamic shell execution** -- remote fetch piped into an interpreter,
  ``eval`` on a variable or quoted string, command substitution wrapping a
  remote fetch.
- **Command tokens** -- known executable names whose presence marks a line
  as a plain shell command.
- **File writes** -- redirections, ``tee``, in-place edits.
- **Secrets** -- environment-variable reference syntax and known-sensitive
  variable names.
- **Sensitive paths** -- version-control metadata, CI workflows, key files.
- **Narrative patterns** -- natural-language descriptions of behaviour
  ("run `make test`", "write to `src/`", "fetch from https://...").
- **Instruction overrides** -- phrases that try to switch off the agent's
  governing rules.
"""

from __future__ import annotations

import re

from agentlint.core.ir.enums import BlockKind, PropagationTarget


def _command_regex(commands: tuple[str, ...]) -> re.Pattern[str]:
    alternation = "|".join(re.escape(cmd) for cmd in commands)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Dynamic shell execution
# ---------------------------------------------------------------------------

_REMOTE_PIPE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"curl\s+.*\|\s*(?:bash|sh|zsh)", re.IGNORECASE),
    re.compile(r"wget\s+.*\|\s*(?:bash|sh|zsh)", re.IGNORECASE),
    re.compile(r"\beval\s+\$", re.IGNORECASE),
    re.compile(r"\beval\s+[\"'`]", re.IGNORECASE),
)

DYNAMIC_SHELL_PATTERNS: tuple[re.Pattern[str], ...] = _REMOTE_PIPE_PATTERNS + (
    re.compile(r"\$\(\s*curl", re.IGNORECASE),
    re.compile(r"`\s*curl", re.IGNORECASE),
    re.compile(r"source\s+<\(curl", re.IGNORECASE),
    re.compile(r"bash\s+<\(curl", re.IGNORECASE),
)
"""Full catalog used for shell scripts and markdown code blocks."""

RULES_DYNAMIC_SHELL_PATTERNS: tuple[re.Pattern[str], ...] = _REMOTE_PIPE_PATTERNS
"""Reduced catalog used for whole code blocks in rules files."""

# Sub-pattern labels recorded on dynamic shell actions.
_DYNAMIC_LABELS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("curl|bash", re.compile(r"curl.*\|.*(?:bash|sh|zsh)", re.IGNORECASE)),
    ("wget|bash", re.compile(r"wget.*\|.*(?:bash|sh|zsh)", re.IGNORECASE)),
    ("eval", re.compile(r"\beval\b", re.IGNORECASE)),
)
_VARIABLE_REF = re.compile(r"\$\{?\w+\}?")
_EXEC_WORD = re.compile(r"(?:bash|sh|exec|run)", re.IGNORECASE)


def is_dynamic_shell(text: str, patterns: tuple[re.Pattern[str], ...] = DYNAMIC_SHELL_PATTERNS) -> bool:
    """True if ``text`` matches any dynamic shell execution pattern."""
    return any(p.search(text) for p in patterns)


def dynamic_pattern_labels(command: str) -> list[str]:
    """Classify a dynamic command into sub-pattern labels.

    Labels: ``curl|bash``, ``wget|bash``, ``eval`` and
    ``variable_interpolation`` (a variable reference together with an
    execution word).
    """
    labels = [label for label, pattern in _DYNAMIC_LABELS if pattern.search(command)]
    if _VARIABLE_REF.search(command) and _EXEC_WORD.search(command):
        labels.append("variable_interpolation")
    return labels


# ---------------------------------------------------------------------------
# Command tokens
# ---------------------------------------------------------------------------

SHELL_COMMANDS: tuple[str, ...] = (
    "npm", "npx", "yarn", "pnpm",
    "pip", "pip3", "python", "python3",
    "ruby", "gem", "bundle",
    "go", "cargo", "rustc",
    "make", "cmake", "gradle", "mvn",
    "docker", "kubectl", "terraform",
    "git", "gh", "gcloud", "aws", "az",
    "curl", "wget", "ssh", "scp", "rsync",
    "rm", "cp", "mv", "mkdir", "chmod", "chown",
    "apt", "apt-get", "brew", "yum", "dnf",
    "systemctl", "service",
    "bash", "sh", "zsh", "exec",
)

RULES_SHELL_COMMANDS: tuple[str, ...] = (
    "npm", "npx", "yarn", "pnpm",
    "pip", "pip3", "python", "python3",
    "make", "cargo", "go build", "go run",
    "docker", "kubectl",
    "git", "curl", "wget",
    "bash", "sh", "zsh",
)

_SHELL_COMMAND_RE = _command_regex(SHELL_COMMANDS)
_RULES_SHELL_COMMAND_RE = _command_regex(RULES_SHELL_COMMANDS)


def contains_shell_command(text: str) -> bool:
    """True if ``text`` contains a token from the full command catalog."""
    return _SHELL_COMMAND_RE.search(text) is not None


def contains_rules_shell_command(text: str) -> bool:
    """True if ``text`` contains a token from the rules-file command catalog."""
    return _RULES_SHELL_COMMAND_RE.search(text) is not None


SHELL_LANGUAGES: frozenset[str] = frozenset({
    "bash", "sh", "zsh", "shell", "console", "terminal",
})
"""Fenced code block labels scanned as shell."""


# ---------------------------------------------------------------------------
# File writes
# ---------------------------------------------------------------------------

FILE_WRITE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r">\s*\S+"),
    re.compile(r">>\s*\S+"),
    re.compile(r"\btee\s+", re.IGNORECASE),
    re.compile(r"\becho\s+.*>", re.IGNORECASE),
    re.compile(r"\bcat\s+.*>", re.IGNORECASE),
    re.compile(r"\bsed\s+-i", re.IGNORECASE),
    re.compile(r"\bawk\s+.*>", re.IGNORECASE),
)

_REDIRECT_TARGET = re.compile(r">>?\s*[\"']?([^\s\"'>]+)[\"']?")
_TEE_TARGET = re.compile(r"\btee\s+(?:-a\s+)?[\"']?([^\s\"'|]+)[\"']?", re.IGNORECASE)


def contains_file_write(line: str) -> bool:
    return any(p.search(line) for p in FILE_WRITE_PATTERNS)


def extract_write_paths(line: str) -> list[str]:
    """Return the redirect target and ``tee`` target of a shell line."""
    paths: list[str] = []
    redirect = _REDIRECT_TARGET.search(line)
    if redirect:
        paths.append(redirect.group(1))
    tee = _TEE_TARGET.search(line)
    if tee:
        paths.append(tee.group(1))
    return paths


# ---------------------------------------------------------------------------
# Secrets
# ---------------------------------------------------------------------------

KNOWN_SECRET_VARS: tuple[str, ...] = (
    "GITHUB_TOKEN",
    "GH_TOKEN",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_ACCESS_KEY_ID",
    "AZURE_CLIENT_SECRET",
    "AZURE_SUBSCRIPTION_ID",
    "GOOGLE_APPLICATION_CREDENTIALS",
    "GCP_SERVICE_ACCOUNT",
    "API_KEY",
    "API_SECRET",
    "SECRET_KEY",
    "PRIVATE_KEY",
    "DATABASE_PASSWORD",
    "DB_PASSWORD",
    "PASSWORD",
    "TOKEN",
    "NPM_TOKEN",
    "PYPI_TOKEN",
    "DOCKER_PASSWORD",
    "SSH_PRIVATE_KEY",
)

ENV_VAR_PATTERN = re.compile(r"\$\{?([A-Z_][A-Z0-9_]*)\}?")


def is_secret_var(name: str, catalog: tuple[str, ...] = KNOWN_SECRET_VARS) -> bool:
    """True if the upper-cased name equals or contains a catalog entry."""
    upper = name.upper()
    return any(upper == secret or secret in upper for secret in catalog)


def extract_env_vars(text: str) -> list[str]:
    """Environment variable names referenced as ``$NAME`` or ``${NAME}``.

    Names are returned once each, in first-seen order.
    """
    return list(dict.fromkeys(ENV_VAR_PATTERN.findall(text)))


_PROPAGATION_PATTERNS: tuple[tuple[PropagationTarget, re.Pattern[str]], ...] = (
    (PropagationTarget.NETWORK, re.compile(r"curl|wget|http", re.IGNORECASE)),
    (PropagationTarget.FILE, re.compile(r">|tee|echo.*>", re.IGNORECASE)),
    (PropagationTarget.SHELL, re.compile(r"\bexec\b|\beval\b|\bbash\b|\bsh\b", re.IGNORECASE)),
)


def secret_propagation_targets(line: str) -> list[PropagationTarget]:
    """Sinks a secret on ``line`` flows into (network, file, shell)."""
    return [target for target, pattern in _PROPAGATION_PATTERNS if pattern.search(line)]


# ---------------------------------------------------------------------------
# Sensitive paths
# ---------------------------------------------------------------------------

SENSITIVE_PATH_FRAGMENTS: tuple[str, ...] = (
    ".git/",
    ".github/workflows/",
    ".env",
    ".ssh/",
    "~/.ssh/",
    "credentials",
    "secrets",
    ".npmrc",
    ".pypirc",
    "id_rsa",
    "id_ed25519",
)


def is_sensitive_path(path: str, fragments: tuple[str, ...] = SENSITIVE_PATH_FRAGMENTS) -> bool:
    """Case-insensitive substring match against a sensitive-path catalog."""
    lowered = path.lower()
    return any(fragment.lower() in lowered for fragment in fragments)


# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------

URL_PATTERN = re.compile(r"https?://[^\s'\"<>]+", re.IGNORECASE)
_DOMAIN_PATTERN = re.compile(r"(?:https?://)?([^/\s:]+)")

EXECUTABLE_URL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\.sh$", re.IGNORECASE),
    re.compile(r"\.bash$", re.IGNORECASE),
    re.compile(r"\.py$", re.IGNORECASE),
    re.compile(r"\.rb$", re.IGNORECASE),
    re.compile(r"\.js$", re.IGNORECASE),
    re.compile(r"install\.sh", re.IGNORECASE),
    re.compile(r"setup\.sh", re.IGNORECASE),
    re.compile(r"bootstrap", re.IGNORECASE),
    re.compile(r"get\.docker\.com", re.IGNORECASE),
    re.compile(r"raw\.githubusercontent\.com", re.IGNORECASE),
)


def extract_urls(text: str) -> list[str]:
    return URL_PATTERN.findall(text)


def extract_domain(url: str) -> str | None:
    match = _DOMAIN_PATTERN.search(url)
    return match.group(1) if match else None


def is_executable_url(url: str) -> bool:
    """True if the URL looks like it serves a script or installer."""
    return any(p.search(url) for p in EXECUTABLE_URL_PATTERNS)


# ---------------------------------------------------------------------------
# Narrative patterns: markdown documents
# ---------------------------------------------------------------------------

MARKDOWN_COMMAND_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\brun\s+`([^`]+)`", re.IGNORECASE),
    re.compile(r"\bexecute\s+`([^`]+)`", re.IGNORECASE),
    re.compile(r"\bcall\s+`([^`]+)`", re.IGNORECASE),
    re.compile(r"\buse\s+`([^`]+)`", re.IGNORECASE),
)

MARKDOWN_WRITE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bwrite\s+(?:to\s+)?(?:files?\s+)?(?:in\s+)?`?([^`\s]+)`?", re.IGNORECASE),
    re.compile(r"\bmodify\s+`?([^`\s]+)`?", re.IGNORECASE),
    re.compile(r"\bedit\s+`?([^`\s]+)`?", re.IGNORECASE),
)

_MARKDOWN_BLOCK_KINDS: tuple[tuple[BlockKind, re.Pattern[str]], ...] = (
    (BlockKind.RULE, re.compile(r"rule|must|always|never|required", re.IGNORECASE)),
    (BlockKind.GUIDELINE, re.compile(r"guide|should|prefer|recommend", re.IGNORECASE)),
    (BlockKind.COMMAND, re.compile(r"command|run|execute|install", re.IGNORECASE)),
)


def classify_header(line: str) -> BlockKind:
    """Block kind of a markdown header line (substring keywords)."""
    for kind, pattern in _MARKDOWN_BLOCK_KINDS:
        if pattern.search(line):
            return kind
    return BlockKind.UNKNOWN


# ---------------------------------------------------------------------------
# Narrative patterns: rules files
# ---------------------------------------------------------------------------

RULES_COMMAND_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\balways\s+run\s+[\"'`]?([^\"'`]+)[\"'`]?", re.IGNORECASE),
    re.compile(r"\brun\s+tests?\s+(?:using|with)\s+[\"'`]?([^\"'`]+)[\"'`]?", re.IGNORECASE),
    re.compile(r"\bexecute\s+[\"'`]?([^\"'`]+)[\"'`]?", re.IGNORECASE),
    re.compile(r"\buse\s+[\"'`]?([^\"'`]+)[\"'`]?\s+(?:to|for)", re.IGNORECASE),
)

RULES_WRITE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bwrite\s+(?:to\s+)?[\"'`]?([^\"'`\s]+)[\"'`]?", re.IGNORECASE),
    re.compile(r"\bmodify\s+[\"'`]?([^\"'`\s]+)[\"'`]?", re.IGNORECASE),
    re.compile(r"\bedit\s+(?:files?\s+in\s+)?[\"'`]?([^\"'`\s]+)[\"'`]?", re.IGNORECASE),
    re.compile(r"\bcreate\s+(?:files?\s+in\s+)?[\"'`]?([^\"'`\s]+)[\"'`]?", re.IGNORECASE),
)

RULES_UNSCOPED_WRITE = re.compile(r"\bwrite\s+(?:to\s+)?(?:any|all|anywhere)", re.IGNORECASE)

RULES_NETWORK_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bfetch\s+(?:from\s+)?[\"'`]?(https?://[^\"'`\s]+)[\"'`]?", re.IGNORECASE),
    re.compile(r"\bdownload\s+(?:from\s+)?[\"'`]?(https?://[^\"'`\s]+)[\"'`]?", re.IGNORECASE),
    re.compile(r"\baccess\s+[\"'`]?(https?://[^\"'`\s]+)[\"'`]?", re.IGNORECASE),
)

_RULE_START_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^[-*•]\s+"),
    re.compile(r"^\d+[.)]\s+"),
    re.compile(r"^#+\s+"),
    re.compile(r"^\*\*"),
)

_RULES_BLOCK_KINDS: tuple[tuple[BlockKind, re.Pattern[str]], ...] = (
    (BlockKind.RULE, re.compile(r"\b(?:must|always|never|required|shall)\b", re.IGNORECASE)),
    (BlockKind.GUIDELINE, re.compile(r"\b(?:should|prefer|recommend|consider)\b", re.IGNORECASE)),
    (BlockKind.COMMAND, re.compile(r"\b(?:run|execute|command|install)\b", re.IGNORECASE)),
)

_BULLET_PREFIX = re.compile(r"^[-*•#\d.)\s]+")
_COMMAND_LIKE = re.compile(r"^[\w-]+\s+")
_PATH_LIKE: tuple[re.Pattern[str], ...] = (
    re.compile(r"^[./~]"),
    re.compile(r"\.(?:js|ts|py|rb|go|rs|java|c|cpp|h|hpp|md|txt|json|yaml|yml)$", re.IGNORECASE),
    re.compile(r"^[\w-]+/"),
)


def is_rule_start(line: str) -> bool:
    """True for bullets, numbered items, headers and bold lead-ins."""
    return any(p.search(line) for p in _RULE_START_PATTERNS)


def classify_rule(line: str) -> BlockKind:
    """Block kind of a rules-file item (whole-word keywords)."""
    for kind, pattern in _RULES_BLOCK_KINDS:
        if pattern.search(line):
            return kind
    return BlockKind.UNKNOWN


def strip_bullet(line: str) -> str:
    return _BULLET_PREFIX.sub("", line).strip()


def looks_like_command(text: str) -> bool:
    return contains_rules_shell_command(text) or _COMMAND_LIKE.search(text.strip()) is not None


def looks_like_path(text: str) -> bool:
    return any(p.search(text) for p in _PATH_LIKE)


# ---------------------------------------------------------------------------
# Instruction overrides
# ---------------------------------------------------------------------------

MARKDOWN_OVERRIDE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"ignore\s+(?:all\s+)?previous\s+instructions?", re.IGNORECASE),
    re.compile(r"disregard\s+(?:all\s+)?(?:previous\s+)?(?:rules?|instructions?)", re.IGNORECASE),
    re.compile(r"rewrite\s+your\s+rules?", re.IGNORECASE),
    re.compile(r"disable\s+(?:all\s+)?safeguards?", re.IGNORECASE),
    re.compile(r"bypass\s+(?:all\s+)?(?:safety\s+)?(?:rules?|restrictions?)", re.IGNORECASE),
    re.compile(r"forget\s+(?:all\s+)?(?:previous\s+)?instructions?", re.IGNORECASE),
)

RULES_OVERRIDE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"ignore\s+(?:all\s+)?previous\s+(?:rules?|instructions?)", re.IGNORECASE),
    re.compile(r"disregard\s+(?:all\s+)?(?:previous\s+)?(?:rules?|instructions?)", re.IGNORECASE),
    re.compile(r"override\s+(?:all\s+)?(?:rules?|restrictions?)", re.IGNORECASE),
    re.compile(r"bypass\s+(?:all\s+)?(?:safety\s+)?(?:rules?|restrictions?)", re.IGNORECASE),
    re.compile(r"disable\s+(?:all\s+)?safeguards?", re.IGNORECASE),
)

OVERRIDE_ACTION_SUMMARY: str = "Instruction override pattern detected"
