# app/utils/json_parser.py
"""
Helpers for reading Spot AI JSON webhook payloads.
Payload shape is vendor-controlled, so nothing here may raise on a missing
or mistyped branch.
"""

import json
from typing import Any, Iterable, Optional, Union

PathKey = Union[str, int]

_MISSING = object()


class InvalidJSONBody(ValueError):
    """Raised when a non-empty request body is not valid JSON."""


def _reject_constant(name: str):
    # NaN / Infinity / -Infinity are not JSON and cannot be stored as JSONB
    raise InvalidJSONBody(f"non-standard JSON constant {name}")


def parse_json_body(raw_body: bytes) -> Any:
    """
    Decode a webhook body. An empty body becomes {}.
    Raises InvalidJSONBody for anything that does not decode, and for bare
    top-level scalars. Only objects and arrays are accepted.
    """
    if not raw_body or not raw_body.strip():
        return {}
    try:
        payload = json.loads(raw_body.decode("utf-8"), parse_constant=_reject_constant)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidJSONBody(str(e)) from e
    if not isinstance(payload, (dict, list)):
        raise InvalidJSONBody(f"top-level JSON {type(payload).__name__} is not an object or array")
    return payload


def split_path(path: str) -> tuple:
    """'data.camera.id' → ('data', 'camera', 'id'). Numeric segments index lists."""
    return tuple(int(p) if p.isdigit() else p for p in path.split("."))


def get_path(data: Any, keys: Iterable[PathKey]) -> Optional[Any]:
    """Safely navigate a nested JSON tree. Returns None if any step is missing."""
    current = data
    for key in keys:
        if isinstance(current, dict):
            current = current.get(key, _MISSING) if isinstance(key, str) else _MISSING
        elif isinstance(current, list) and isinstance(key, int) and not isinstance(key, bool):
            current = current[key] if 0 <= key < len(current) else _MISSING
        else:
            return None
        if current is _MISSING:
            return None
    return current

