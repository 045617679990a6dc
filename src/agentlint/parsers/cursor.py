"""Evidence extractor for Cursor rules files (``.cursorrules``).

A rules file is free-form prose, usually a list of bullets. Every
non-empty line outside a fenced block belongs to an instruction block: a
bullet, numbered item, header or bold lead-in starts a new block, other
lines extend the current one (or start a ``narrative`` block if there is
none yet).

Fenced code blocks are analysed as a whole rather than line by line: one
shell action for the whole block if it contains a known command, one
network action per URL, one secrets action for the block's secret
references. All of them are anchored to the fence lines.

Prose lines are scanned for narrative patterns ("always run ...",
"write to ...", "fetch from https://...") which yield low-confidence
actions. Rules files run in the interactive context only.
"""

from __future__ import annotations

from agentlint.core.ir import (
    Anchors,
    BlockKind,
    DocFormat,
    DocType,
    InstructionBlock,
    ToolFamily,
)
from agentlint.parsers.base import DocumentBuilder, ExtractionResult, extend_block, run_extraction
from agentlint.parsers.patterns import (
    RULES_COMMAND_PATTERNS,
    RULES_DYNAMIC_SHELL_PATTERNS,
    RULES_NETWORK_PATTERNS,
    RULES_OVERRIDE_PATTERNS,
    RULES_UNSCOPED_WRITE,
    RULES_WRITE_PATTERNS,
    classify_rule,
    contains_rules_shell_command,
    extract_env_vars,
    extract_urls,
    is_dynamic_shell,
    is_executable_url,
    is_rule_start,
    is_secret_var,
    looks_like_command,
    looks_like_path,
    strip_bullet,
)

_BLOCK_DYNAMIC = 0.95
_BLOCK_COMMAND = 0.8
_BLOCK_NETWORK = 0.85
_BLOCK_SECRET = 0.85
_PROSE_COMMAND = 0.7
_PROSE_WRITE = 0.6
_PROSE_UNSCOPED_WRITE = 0.8
_PROSE_NETWORK = 0.7
_PROSE_SECRET = 0.7

_MAX_INTENT_LENGTH = 100


def can_handle(path: str) -> bool:
    return path.lower().endswith(".cursorrules")


def extract(path: str, content: str) -> ExtractionResult:
    """Extract a ``.cursorrules`` file into an ``AgentDocument``."""
    builder = DocumentBuilder(path, content, ToolFamily.CURSOR, DocType.RULES, DocFormat.TEXT)
    return run_extraction(builder, lambda b: _parse_rules(b, content))


def _parse_rules(b: DocumentBuilder, content: str) -> None:
    doc = b.document
    current: InstructionBlock | None = None
    in_code = False
    fence_line = 0
    code_lines: list[str] = []

    for index, line in enumerate(content.split("\n")):
        line_no = index + 1

        if line.strip().startswith("```"):
            if not in_code:
                in_code = True
                fence_line = line_no
                code_lines = []
            else:
                _analyze_code_block(b, "\n".join(code_lines), Anchors(fence_line, line_no))
                in_code = False
                code_lines = []
            continue

        if in_code:
            code_lines.append(line)
            continue

        if is_rule_start(line):
            if current is not None:
                doc.instruction_blocks.append(current)
            current = b.new_block(classify_rule(line), line, line_no)
        elif current is not None and line.strip():
            extend_block(current, line, line_no)
        elif current is None and line.strip():
            current = b.new_block(BlockKind.NARRATIVE, line, line_no)

        _prose_actions(b, line, line_no)

    if current is not None:
        doc.instruction_blocks.append(current)

    doc.declared_intents = _first_line_intents(doc.instruction_blocks)

    for index, line in enumerate(content.split("\n")):
        for pattern in RULES_OVERRIDE_PATTERNS:
            if pattern.search(line):
                b.add_override(line, index + 1)


def _analyze_code_block(b: DocumentBuilder, code: str, anchors: Anchors) -> None:
    if contains_rules_shell_command(code):
        dynamic = is_dynamic_shell(code, RULES_DYNAMIC_SHELL_PATTERNS)
        b.add_shell(code.strip(), anchors, dynamic, _BLOCK_DYNAMIC if dynamic else _BLOCK_COMMAND)

    for url in extract_urls(code):
        b.add_network(url, anchors, is_executable_url(url), _BLOCK_NETWORK)

    secret_vars = [v for v in extract_env_vars(code) if is_secret_var(v)]
    if secret_vars:
        b.add_secrets(secret_vars, anchors, None, _BLOCK_SECRET)


def _prose_actions(b: DocumentBuilder, line: str, line_no: int) -> None:
    anchors = Anchors.line(line_no)

    for pattern in RULES_COMMAND_PATTERNS:
        match = pattern.search(line)
        if match and match.group(1):
            command = match.group(1).strip()
            if looks_like_command(command):
                b.add_shell(command, anchors, False, _PROSE_COMMAND)

    for pattern in RULES_WRITE_PATTERNS:
        match = pattern.search(line)
        if match and match.group(1):
            target = match.group(1)
            if not target.startswith("http") and looks_like_path(target):
                b.add_file_write([target], anchors, _PROSE_WRITE)

    if RULES_UNSCOPED_WRITE.search(line):
        b.add_file_write(["**/*"], anchors, _PROSE_UNSCOPED_WRITE)

    for pattern in RULES_NETWORK_PATTERNS:
        match = pattern.search(line)
        if match and match.group(1):
            url = match.group(1)
            b.add_network(url, anchors, is_executable_url(url), _PROSE_NETWORK)

    secret_vars = [v for v in extract_env_vars(line) if is_secret_var(v)]
    if secret_vars:
        b.add_secrets(secret_vars, anchors, None, _PROSE_SECRET)

    for url in extract_urls(line):
        b.add_link(url, anchors)


def _first_line_intents(blocks: list[InstructionBlock]) -> list[str]:
    intents: list[str] = []
    for block in blocks:
        first_line = block.text.split("\n")[0]
        if len(first_line) < _MAX_INTENT_LENGTH:
            intent = strip_bullet(first_line)
            if intent:
                intents.append(intent)
    return intents
