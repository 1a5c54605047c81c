"""
Canonical JSON serialization.

Stored collections and snapshot digests go through these functions so the
same data always produces the same text.
"""

import json
from typing import Any


def canonicalize(obj: Any) -> Any:
    """
    Convert nested dict/list/tuple to canonical form.

    Rules:
    - dict keys sorted alphabetically
    - tuples converted to lists
    - list order preserved (collections are ordered)
    """
    if isinstance(obj, dict):
        return {k: canonicalize(obj[k]) for k in sorted(obj.keys())}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    return obj


def canonical_json_str(obj: Any) -> str:
    """
    Deterministic JSON string.

    Guarantees:
    - sorted keys, no whitespace
    - ensure_ascii=False keeps UTF-8 text readable
    - allow_nan=False: NaN/inf never reach storage
    """
    canon = canonicalize(obj)
    return json.dumps(canon, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def canonical_json_bytes(obj: Any) -> bytes:
    """Same as canonical_json_str, UTF-8 encoded (for hashing)."""
    return canonical_json_str(obj).encode("utf-8")
