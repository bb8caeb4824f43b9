"""JSON codec used by the JSON parameter encoder.

Only values that map cleanly onto a JSON document are accepted: the top level
must be an object or an array, object keys must be strings, and floats must be
finite.
"""

from __future__ import annotations

import json
import math
from typing import Any

_SCALARS = (str, int, bool, type(None))


def _is_valid_value(value: Any) -> bool:
    if isinstance(value, _SCALARS):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, (list, tuple)):
        return all(_is_valid_value(item) for item in value)
    if isinstance(value, dict):
        return all(isinstance(key, str) and _is_valid_value(item) for key, item in value.items())
    return False


def is_valid_json_object(value: Any) -> bool:
    """Return True when ``value`` can be serialized as a JSON object or array."""
    if not isinstance(value, (dict, list, tuple)):
        return False
    return _is_valid_value(value)


def serialize(value: Any) -> bytes:
    """Serialize ``value`` to compact UTF-8 JSON.

    Raises:
        TypeError: If a value is not JSON serializable.
        ValueError: If a float is NaN or infinite.
    """
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode("utf-8")


__all__ = ["is_valid_json_object", "serialize"]
