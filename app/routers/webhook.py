# app/routers/webhook.py
"""
Spot AI webhook endpoint.
POST /webhook/spotai — receives every Spot alert and queues it in spot_jobs.
"""

from typing import Optional
from fastapi import APIRouter, Request, Depends, status
from fastapi.responses import JSONResponse
from app.config import settings
from app.schemas.webhook import IngestResponse, IngestFailure
from app.services.ingestion_gateway import IngestionGateway, JobStoreError
from app.utils.json_parser import parse_json_body, InvalidJSONBody
from app.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


def get_gateway(request: Request) -> IngestionGateway:
    """FastAPI dependency. Returns the gateway built at startup."""
    return request.app.state.gateway


def _failure(status_code: int, error: str = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=IngestFailure(error=error).model_dump(exclude_none=True),
    )


async def _read_capped_body(request: Request, limit: int) -> Optional[bytes]:
    """Read the request body, or None as soon as it exceeds limit bytes."""
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        logger.warning(f"Rejected {declared} byte payload (limit {limit})")
        return None

    chunks, total = [], 0
    async for chunk in request.stream():
        total += len(chunk)
        if total > limit:
            logger.warning(f"Rejected streamed payload past {limit} bytes")
            return None
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/webhook/spotai", response_model=IngestResponse, summary="Spot AI webhook — queues one job per event")
async def receive_spot_event(request: Request, gateway: IngestionGateway = Depends(get_gateway)):
    """
    Returns 200 for any well-formed JSON body, duplicates included, so Spot
    stops retrying. Returns 500 only when the job row could not be written.
    """
    raw_body = await _read_capped_body(request, settings.MAX_BODY_BYTES)
    if raw_body is None:
        return _failure(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "payload too large")

    try:
        payload = parse_json_body(raw_body)
    except InvalidJSONBody as e:
        logger.warning(f"Rejected non-JSON payload: {e}")
        return _failure(status.HTTP_400_BAD_REQUEST, "invalid json")

    try:
        result = await gateway.ingest(payload)
    except JobStoreError as e:
        logger.error(f"Webhook insert error: {e}", exc_info=True)
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR)

    event = result.event
    return IngestResponse(
        inserted=result.inserted,
        event_id=event.event_id,
        camera_id=event.camera_id,
        scenario=event.scenario,
    )
