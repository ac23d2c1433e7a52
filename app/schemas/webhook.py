# app/schemas/webhook.py
from pydantic import BaseModel
from typing import Optional


class IngestResponse(BaseModel):
    ok: bool = True
    inserted: bool
    event_id: str
    camera_id: Optional[str]
    scenario: Optional[str]


class IngestFailure(BaseModel):
    ok: bool = False
    error: Optional[str] = None
