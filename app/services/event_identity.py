# app/services/event_identity.py
"""
Event identifier resolution.
Every job row needs an event_id. When Spot does not send one we mint a
throwaway id, which means retries of an id-less event are NOT deduplicated.
"""

import secrets
import time
from typing import Any
from app.services.field_resolver import pick_first, paths_from

FALLBACK_PREFIX = "fallback_"

EVENT_ID_PATHS = paths_from(
    "event.id", "event_id", "id",
    "data.id", "alert.id",
    "uuid",
)


def make_fallback_event_id() -> str:
    """fallback_<epoch ms>_<64 random bits as hex>."""
    return f"{FALLBACK_PREFIX}{int(time.time() * 1000)}_{secrets.token_hex(8)}"


def resolve_event_id(payload: Any) -> str:
    return pick_first(payload, EVENT_ID_PATHS) or make_fallback_event_id()


def is_fallback_event_id(event_id: str) -> bool:
    return event_id.startswith(FALLBACK_PREFIX)
