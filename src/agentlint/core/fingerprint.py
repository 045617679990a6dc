"""Deterministic identities for findings and documents.

Every finding carries three fingerprints, each ``sha256:`` followed by the
first 16 hex characters of a SHA-256 digest over a ``|``-joined key:

- **stable**   = rule id | path | start line | normalised evidence.
  Primary identity across runs and versions; used by diff and baseline.
- **location** = rule id | path | start line | end line.
  Tolerates drift in the evidence text.
- **content**  = rule id | normalised evidence.
  Tolerates the finding moving to another line.

Evidence normalisation trims, collapses every whitespace run to a single
space and lowercases, so cosmetic edits to a flagged line do not change
the stable identity. Inputs are hashed as UTF-8 and nothing depends on the
machine, locale or run, which makes the fingerprints byte-identical across
environments.
"""

from __future__ import annotations

import hashlib
import re

from agentlint.core.ir.models import Evidence, Fingerprints

FINGERPRINT_ALGORITHM: str = "sha256"
FINGERPRINT_HEX_LENGTH: int = 16

_WHITESPACE_RUN = re.compile(r"\s+")


def sha256_hex(content: str) -> str:
    """Return the full SHA-256 hex digest of a UTF-8 string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def normalize_evidence(evidence: str) -> str:
    """Trim, collapse whitespace runs to one space, and lowercase."""
    return _WHITESPACE_RUN.sub(" ", evidence.strip()).lower()


def _tagged(key: str) -> str:
    return f"{FINGERPRINT_ALGORITHM}:{sha256_hex(key)[:FINGERPRINT_HEX_LENGTH]}"


def stable_fingerprint(rule_id: str, path: str, start_line: int, evidence: str) -> str:
    """Identity of a finding across runs and versions."""
    return _tagged(f"{rule_id}|{path}|{start_line}|{normalize_evidence(evidence)}")


def location_fingerprint(rule_id: str, path: str, start_line: int, end_line: int) -> str:
    """Identity of a finding tolerant of evidence-text drift."""
    return _tagged(f"{rule_id}|{path}|{start_line}|{end_line}")


def content_fingerprint(rule_id: str, evidence: str) -> str:
    """Identity of a finding tolerant of location drift."""
    return _tagged(f"{rule_id}|{normalize_evidence(evidence)}")


def primary_evidence_value(evidence: list[Evidence] | tuple[Evidence, ...]) -> str:
    """Value of the first evidence entry, or "" when there is none."""
    return evidence[0].value if evidence else ""


def compute_fingerprints(
    rule_id: str,
    path: str,
    start_line: int,
    end_line: int,
    evidence: list[Evidence] | tuple[Evidence, ...],
) -> Fingerprints:
    """Compute the full fingerprint set for a finding.

    Args:
        rule_id: Rule identifier.
        path: Document path as reported in the finding.
        start_line: First line of the finding location.
        end_line: Last line of the finding location.
        evidence: Finding evidence; only the first entry's value is hashed.

    Returns:
        The ``Fingerprints`` triple.
    """
    value = primary_evidence_value(evidence)
    return Fingerprints(
        stable=stable_fingerprint(rule_id, path, start_line, value),
        location=location_fingerprint(rule_id, path, start_line, end_line),
        content=content_fingerprint(rule_id, value),
    )


def hash_document(content: str) -> str:
    """Content hash of a whole document: ``sha256:<64 hex chars>``."""
    return f"{FINGERPRINT_ALGORITHM}:{sha256_hex(content)}"


def document_id(path: str) -> str:
    """Deterministic document identifier derived from its path."""
    return f"doc_{sha256_hex(path)[:FINGERPRINT_HEX_LENGTH]}"
