# app/services/spot_event.py
"""
Unified view of one Spot webhook: every job field resolved from the payload.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional
from app.services.event_identity import resolve_event_id
from app.services.field_resolver import (
    resolve_camera_id, resolve_camera_name, resolve_scenario, resolve_raw_timestamp,
)
from app.services.timestamp_normalizer import normalize_timestamp


@dataclass
class ResolvedSpotEvent:
    event_id: str
    camera_id: Optional[str]
    camera_name: Optional[str]
    scenario: Optional[str]
    event_ts: Optional[datetime]
    raw_payload: Any


def resolve_event(payload: Any) -> ResolvedSpotEvent:
    """Run every resolver over payload. Never raises on payload shape."""
    return ResolvedSpotEvent(
        event_id=resolve_event_id(payload),
        camera_id=resolve_camera_id(payload),
        camera_name=resolve_camera_name(payload),
        scenario=resolve_scenario(payload),
        event_ts=normalize_timestamp(resolve_raw_timestamp(payload)),
        raw_payload=payload,
    )
