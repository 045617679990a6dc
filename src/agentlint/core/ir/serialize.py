"""JSON-compatible serialisation for IR dataclasses.

``to_dict`` walks any IR dataclass (or list/tuple/dict of them) and
produces plain Python containers suitable for ``json.dumps``:

- ``Severity`` becomes its lowercase label, other enums their ``.value``.
- Tuples become lists.
- Dataclass fields whose value is ``None`` are omitted, mirroring optional
  fields in the report schema.

Output is deterministic for identical input, so ``json.dumps(...,
sort_keys=True)`` of two equal scans is byte-identical.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any

from agentlint.core.ir.enums import Severity


def to_dict(obj: Any) -> Any:
    """Convert an IR object tree into JSON-compatible containers."""
    if isinstance(obj, Severity):
        return obj.label
    if isinstance(obj, Enum):
        return obj.value
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        out: dict[str, Any] = {}
        for f in dataclasses.fields(obj):
            value = getattr(obj, f.name)
            if value is None:
                continue
            out[f.name] = to_dict(value)
        return out
    if isinstance(obj, (list, tuple)):
        return [to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(to_dict(k)): to_dict(v) for k, v in obj.items()}
    return obj
