# app/routers/health.py
"""
Liveness probe. Does not touch the database. A DB outage shows up as 500s
on the webhook, not as a dead process.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/healthz", response_class=PlainTextResponse, summary="Liveness check")
def healthz():
    return "ok"
