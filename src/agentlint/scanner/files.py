"""File collection for directory scans.

Include and exclude patterns are matched against root-relative POSIX
paths with ``fnmatch``; ``*`` crosses directory separators, and a leading
``**/`` also matches at the root (``**/.git/**`` excludes ``.git/HEAD``).
"""

from __future__ import annotations

import logging
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Callable, Iterable

logger = logging.getLogger(__name__)


def matches_any(rel_path: str, patterns: Iterable[str]) -> bool:
    for pattern in patterns:
        if fnmatchcase(rel_path, pattern):
            return True
        if pattern.startswith("**/") and fnmatchcase(rel_path, pattern[3:]):
            return True
    return False


def collect_files(
    root: Path,
    include: Iterable[str],
    exclude: Iterable[str],
    can_handle: Callable[[str], bool] | None = None,
) -> list[str]:
    """Return sorted root-relative paths of files to scan.

    Args:
        root: Directory to walk.
        include: Patterns a file must match.
        exclude: Patterns that remove a file.
        can_handle: Optional extractor predicate; files it rejects are
            skipped.
    """
    include = list(include)
    exclude = list(exclude)
    found: list[str] = []
    try:
        candidates = sorted(root.rglob("*"))
    except OSError:
        logger.warning("Error walking: %s", root, exc_info=True)
        return found
    for path in candidates:
        try:
            if not path.is_file():
                continue
        except OSError:
            continue
        rel = path.relative_to(root).as_posix()
        if not matches_any(rel, include) or matches_any(rel, exclude):
            continue
        if can_handle is not None and not can_handle(rel):
            continue
        found.append(rel)
    return found
