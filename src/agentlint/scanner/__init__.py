"""Scan orchestration.

Submodules
----------
- ``files``: include/exclude glob matching and directory collection.
- ``models``: ``ScanResult`` and per-document summaries.
- ``scanner``: ``Scanner`` (pipeline, baseline application, verdict) and
  ``build_engine``.
- ``report``: the JSON-compatible report object.
"""

from agentlint.scanner.files import collect_files, matches_any
from agentlint.scanner.models import ScanResult, summarize_document
from agentlint.scanner.report import build_diff_report, build_report
from agentlint.scanner.scanner import (
    EXIT_CONFIG,
    EXIT_FAIL,
    EXIT_INTERNAL,
    EXIT_PARSE,
    EXIT_PASS,
    EXIT_USAGE,
    Scanner,
    build_engine,
)

__all__ = [
    "EXIT_CONFIG",
    "EXIT_FAIL",
    "EXIT_INTERNAL",
    "EXIT_PARSE",
    "EXIT_PASS",
    "EXIT_USAGE",
    "ScanResult",
    "Scanner",
    "build_diff_report",
    "build_engine",
    "build_report",
    "collect_files",
    "matches_any",
    "summarize_document",
]
