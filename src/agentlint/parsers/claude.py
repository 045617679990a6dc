"""Evidence extractor for Claude Code configuration files.

Handles everything under ``.claude/`` (skills, agents, hooks, settings)
plus the project memory files ``CLAUDE.md`` and ``AGENTS.md``.

Document classification is purely path based:

- ``.claude/skills/``  -> skill
- ``.claude/agents/``  -> agent
- ``.claude/hooks/``   -> hook (context ``hook``, triggers from the file name)
- ``CLAUDE.md`` / ``AGENTS.md`` -> memory

Content is then walked line by line. Shell scripts (``.sh``/``.bash`` or a
``#!`` shebang) are analysed as commands; everything else is analysed as
Markdown, where fenced shell blocks are analysed as commands and the prose
is split into instruction blocks and scanned for narrative patterns
("run `make test`", "edit `src/app.py`").

Skill files may start with YAML frontmatter. Its ``name`` and
``description`` become declared intents; malformed frontmatter is recorded
as a parse note and otherwise ignored.
"""

from __future__ import annotations

import re

import yaml

from agentlint.core.ir import (
    Anchors,
    BlockKind,
    ContextTrigger,
    DocFormat,
    DocType,
    InstructionBlock,
    ToolFamily,
    TriggerType,
)
from agentlint.parsers.base import DocumentBuilder, ExtractionResult, extend_block, run_extraction
from agentlint.parsers.patterns import (
    MARKDOWN_COMMAND_PATTERNS,
    MARKDOWN_OVERRIDE_PATTERNS,
    MARKDOWN_WRITE_PATTERNS,
    SHELL_LANGUAGES,
    classify_header,
    contains_file_write,
    contains_shell_command,
    extract_env_vars,
    extract_urls,
    extract_write_paths,
    is_dynamic_shell,
    is_executable_url,
    is_secret_var,
    secret_propagation_targets,
)

# Confidence per detection method.
_SHELL_DYNAMIC = 0.95
_SHELL_COMMAND = 0.85
_BLOCK_COMMAND = 0.8
_SECRET_IN_SHELL = 0.9
_SECRET_IN_PROSE = 0.7
_FILE_WRITE = 0.85
_INLINE_COMMAND = 0.7
_INLINE_WRITE = 0.6

_FRONTMATTER_PATTERN = re.compile(r"^---\s*\n(.*?)\n---\s*(?:\n|$)", re.DOTALL)
_HEADER_TEXT = re.compile(r"^#+\s*(.+)")

_TRIGGER_MARKERS: tuple[tuple[TriggerType, tuple[str, ...]], ...] = (
    (TriggerType.PRE_COMMIT, ("pre_commit", "pre-commit")),
    (TriggerType.POST_EDIT, ("post_edit", "post-edit")),
    (TriggerType.ON_EDIT, ("on_edit", "on-edit")),
    (TriggerType.ON_PR, ("on_pr", "on-pr")),
)


# ---------------------------------------------------------------------------
# Path classification
# ---------------------------------------------------------------------------


def can_handle(path: str) -> bool:
    normalized = path.lower()
    return (
        ".claude/" in normalized
        or normalized.endswith("claude.md")
        or normalized.endswith("agents.md")
    )


def doc_type_for(path: str) -> DocType:
    normalized = path.lower()
    if ".claude/skills/" in normalized:
        return DocType.SKILL
    if ".claude/agents/" in normalized:
        return DocType.AGENT
    if ".claude/hooks/" in normalized:
        return DocType.HOOK
    if normalized.endswith("claude.md") or normalized.endswith("agents.md"):
        return DocType.MEMORY
    return DocType.UNKNOWN


def format_for(path: str) -> DocFormat:
    normalized = path.lower()
    if normalized.endswith(".md"):
        return DocFormat.MARKDOWN
    if normalized.endswith((".sh", ".bash")):
        return DocFormat.SHELL
    if normalized.endswith(".json"):
        return DocFormat.JSON
    if normalized.endswith((".yaml", ".yml")):
        return DocFormat.YAML
    return DocFormat.TEXT


def triggers_for(path: str) -> list[ContextTrigger]:
    """Hook triggers encoded in the file name; ``unknown`` if none."""
    normalized = path.lower()
    triggers = [
        ContextTrigger(trigger)
        for trigger, markers in _TRIGGER_MARKERS
        if any(marker in normalized for marker in markers)
    ]
    return triggers or [ContextTrigger(TriggerType.UNKNOWN)]


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def extract(path: str, content: str) -> ExtractionResult:
    """Extract a Claude Code configuration file into an ``AgentDocument``."""
    doc_type = doc_type_for(path)
    fmt = format_for(path)
    builder = DocumentBuilder(path, content, ToolFamily.CLAUDE, doc_type, fmt)
    if doc_type == DocType.HOOK:
        builder.document.context_profile.triggers = triggers_for(path)

    def body(b: DocumentBuilder) -> None:
        if fmt == DocFormat.SHELL:
            _parse_shell(b, content)
        elif fmt == DocFormat.MARKDOWN:
            _parse_markdown(b, content)
        elif content.startswith("#!"):
            _parse_shell(b, content)
        else:
            _parse_markdown(b, content)

    return run_extraction(builder, body)


def _parse_shell(b: DocumentBuilder, content: str) -> None:
    for index, line in enumerate(content.split("\n")):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        anchors = Anchors.line(index + 1)

        _shell_line(b, stripped, anchors, _SHELL_COMMAND)

        secret_vars = [v for v in extract_env_vars(line) if is_secret_var(v)]
        if secret_vars:
            b.add_secrets(secret_vars, anchors, secret_propagation_targets(line), _SECRET_IN_SHELL)

        if contains_file_write(line):
            paths = extract_write_paths(line)
            if paths:
                b.add_file_write(paths, anchors, _FILE_WRITE)


def _shell_line(b: DocumentBuilder, line: str, anchors: Anchors, command_confidence: float) -> None:
    """Dynamic execution (plus its URLs) or a plain command, never both."""
    if is_dynamic_shell(line):
        b.add_shell(line, anchors, True, _SHELL_DYNAMIC)
        for url in extract_urls(line):
            b.add_network(url, anchors, is_executable_url(url), _SHELL_DYNAMIC)
    elif contains_shell_command(line):
        b.add_shell(line, anchors, False, command_confidence)


def _parse_code_block(b: DocumentBuilder, lines: list[str], fence_line: int) -> None:
    for offset, raw in enumerate(lines):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        anchors = Anchors.line(fence_line + offset + 1)
        _shell_line(b, line, anchors, _BLOCK_COMMAND)
        secret_vars = [v for v in extract_env_vars(line) if is_secret_var(v)]
        if secret_vars:
            b.add_secrets(secret_vars, anchors, secret_propagation_targets(line), _SECRET_IN_SHELL)


def _parse_markdown(b: DocumentBuilder, content: str) -> None:
    doc = b.document
    frontmatter_intents = _read_frontmatter(b, content)

    current: InstructionBlock | None = None
    in_code = False
    fence_line = 0
    fence_lang = ""
    code_lines: list[str] = []

    for index, line in enumerate(content.split("\n")):
        line_no = index + 1

        if line.strip().startswith("```"):
            if not in_code:
                in_code = True
                fence_line = line_no
                fence_lang = line.strip()[3:].lower()
                code_lines = []
            else:
                if fence_lang in SHELL_LANGUAGES:
                    _parse_code_block(b, code_lines, fence_line)
                else:
                    _secret_references(b, code_lines, fence_line + 1)
                in_code = False
                fence_lang = ""
                code_lines = []
            continue

        if in_code:
            code_lines.append(line)
            continue

        if line.startswith("#"):
            if current is not None:
                doc.instruction_blocks.append(current)
            current = b.new_block(classify_header(line), line, line_no)
        elif current is not None and line.strip():
            extend_block(current, line, line_no)

        _inline_actions(b, line, line_no)
        _secret_references(b, [line], line_no)

    if current is not None:
        doc.instruction_blocks.append(current)

    doc.declared_intents = frontmatter_intents + _header_intents(doc.instruction_blocks)
    _detect_overrides(b, content)


def _inline_actions(b: DocumentBuilder, line: str, line_no: int) -> None:
    anchors = Anchors.line(line_no)

    for url in extract_urls(line):
        b.add_link(url, anchors)

    for pattern in MARKDOWN_COMMAND_PATTERNS:
        match = pattern.search(line)
        if match and match.group(1):
            command = match.group(1)
            if contains_shell_command(command):
                b.add_shell(command, anchors, is_dynamic_shell(command), _INLINE_COMMAND)

    for pattern in MARKDOWN_WRITE_PATTERNS:
        match = pattern.search(line)
        if match and match.group(1):
            target = match.group(1)
            if not target.startswith("http"):
                b.add_file_write([target], anchors, _INLINE_WRITE)


def _secret_references(b: DocumentBuilder, lines: list[str], first_line: int) -> None:
    """Secret variables mentioned in prose or non-shell code."""
    for offset, line in enumerate(lines):
        secret_vars = [v for v in extract_env_vars(line) if is_secret_var(v)]
        if secret_vars:
            b.add_secrets(secret_vars, Anchors.line(first_line + offset), None, _SECRET_IN_PROSE)


def _detect_overrides(b: DocumentBuilder, content: str) -> None:
    for index, line in enumerate(content.split("\n")):
        for pattern in MARKDOWN_OVERRIDE_PATTERNS:
            if pattern.search(line):
                b.add_override(line, index + 1)


def _header_intents(blocks: list[InstructionBlock]) -> list[str]:
    intents: list[str] = []
    for block in blocks:
        match = _HEADER_TEXT.match(block.text)
        if match:
            intents.append(match.group(1).strip())
    return intents


def _read_frontmatter(b: DocumentBuilder, content: str) -> list[str]:
    """Declared ``name`` and ``description`` from skill frontmatter."""
    if b.document.doc_type != DocType.SKILL:
        return []
    match = _FRONTMATTER_PATTERN.match(content)
    if not match:
        return []
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        b.warnings.append(f"Invalid frontmatter in {b.document.path}: {exc}")
        return []
    if not isinstance(data, dict):
        return []
    return [
        str(data[key]).strip()
        for key in ("name", "description")
        if data.get(key) is not None and str(data[key]).strip()
    ]
