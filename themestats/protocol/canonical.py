"""Deterministic JSON serialization of signed payloads."""
import json
import math
from typing import Any


def _normalize(value: Any) -> Any:
    if isinstance(value, bool) or value is None or isinstance(value, (str, int)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("Non-finite numbers cannot be canonicalized")
        # JavaScript prints integral numbers without a fractional part.
        return int(value) if value.is_integer() else value
    if isinstance(value, dict):
        return {str(k): _normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    raise TypeError(f"Cannot canonicalize value of type {type(value).__name__}")


def canonical_json(value: Any) -> str:
    """Serialize a JSON-compatible value with keys sorted at every depth.

    Arrays keep their order and no insignificant whitespace is emitted, so
    two parties holding the same logical payload derive the same string.
    """
    return json.dumps(
        _normalize(value),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def canonical_bytes(value: Any) -> bytes:
    """UTF-8 encoded :func:`canonical_json` output, the exact signed bytes."""
    return canonical_json(value).encode("utf-8")
