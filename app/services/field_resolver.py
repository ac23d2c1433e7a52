# app/services/field_resolver.py
"""
Best-effort extraction of the job fields from a Spot AI webhook payload.

Spot payloads vary by account configuration and API version, so each field
is looked up through an ordered list of candidate paths. The first path that
yields a usable value wins; later paths are only consulted when earlier ones
are missing, null, or blank. When several unrelated fields share a name the
ordering below is the tie-break.
"""

import math
from typing import Any, Optional, Sequence
from app.utils.json_parser import get_path, split_path

NULL_LITERALS = ("null", "undefined")


def paths_from(*dotted: str) -> tuple:
    return tuple(split_path(p) for p in dotted)


# Most specific first: direct camera object, then generic device fields,
# then the same fields nested under data / event / alert.
CAMERA_ID_PATHS = paths_from(
    "camera.id", "cameraId", "camera_id",
    "device.id", "deviceId", "device_id",
    "data.camera.id", "data.cameraId", "data.camera_id",
    "event.camera.id", "event.cameraId", "event.camera_id",
    "alert.camera.id", "alert.cameraId", "alert.camera_id",
)

CAMERA_NAME_PATHS = paths_from(
    "camera.name", "camera_name",
    "data.camera.name",
    "event.camera.name",
)

SCENARIO_PATHS = paths_from(
    "scenario.name", "scenario",
    "rule.name", "rule_name",
    "alert_type", "alert.type",
    "event.type",
)

EVENT_TS_PATHS = paths_from(
    "event.timestamp", "event.time",
    "timestamp", "created_at", "event_time",
)


def _stringify(value: Any) -> Optional[str]:
    """JSON value → the text the sender would see. None for mappings."""
    if value is None:
        return ""
    if isinstance(value, dict):
        return None
    if isinstance(value, list):
        # [120333] → "120333", [1, 2] → "1,2", [] → ""
        parts = [_stringify(item) for item in value]
        if any(part is None for part in parts):
            return None
        return ",".join(parts)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))        # 120333.0 → "120333"
    return str(value)


def as_text(value: Any) -> Optional[str]:
    """
    Coerce a JSON value to its trimmed string form.
    Returns None for null, blank, "null"/"undefined", and mappings.
    0 and false are real values and come back as "0" / "false".
    """
    if value is None:
        return None
    text = _stringify(value)
    if text is None:
        return None
    text = text.strip()
    if not text or text in NULL_LITERALS:
        return None
    return text


def pick_first(payload: Any, paths: Sequence[tuple]) -> Optional[str]:
    """Return the first acceptable value found along paths, or None."""
    for path in paths:
        text = as_text(get_path(payload, path))
        if text is not None:
            return text
    return None


def resolve_camera_id(payload: Any) -> Optional[str]:
    return pick_first(payload, CAMERA_ID_PATHS)


def resolve_camera_name(payload: Any) -> Optional[str]:
    return pick_first(payload, CAMERA_NAME_PATHS)


def resolve_scenario(payload: Any) -> Optional[str]:
    return pick_first(payload, SCENARIO_PATHS)


def resolve_raw_timestamp(payload: Any) -> Optional[str]:
    """Raw timestamp candidate; see timestamp_normalizer for parsing."""
    return pick_first(payload, EVENT_TS_PATHS)

