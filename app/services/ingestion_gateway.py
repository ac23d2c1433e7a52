# app/services/ingestion_gateway.py
"""
Spot webhook → spot_jobs ingestion.

One conditional INSERT per webhook, keyed by event_id:
  insert into spot_jobs (...) values (...) on conflict (event_id) do nothing

Duplicate deliveries are a no-op (inserted=False), not an error. Store
failures are raised as JobStoreError and never retried here; the sender
retries on its own schedule when it sees a 500.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.spot_job import SpotJob, STATUS_NEW
from app.services.event_identity import is_fallback_event_id
from app.services.spot_event import ResolvedSpotEvent, resolve_event
from app.utils.logger import get_logger

logger = get_logger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class JobStoreError(RuntimeError):
    """The job row could not be written (connection, constraint, serialization)."""

    def __init__(self, event_id: str, cause: Exception):
        super().__init__(f"Failed to store job for event {event_id}: {cause}")
        self.event_id = event_id


@dataclass
class IngestResult:
    inserted: bool
    event: ResolvedSpotEvent


class IngestionGateway:
    """Resolves a payload and records it once in spot_jobs."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    async def ingest(self, payload: Any) -> IngestResult:
        event = resolve_event(payload)
        logger.debug(
            f"Resolved: event_id={event.event_id} camera_id={event.camera_id} "
            f"camera_name={event.camera_name} scenario={event.scenario} ts={event.event_ts}"
        )
        if is_fallback_event_id(event.event_id):
            logger.warning(f"[JOB] No event id in payload, minted {event.event_id} (retries will not dedupe)")

        # Only blocking step; runs in a worker thread
        inserted = await asyncio.to_thread(self._insert_if_absent, event)

        if inserted:
            logger.info(f"[JOB] Queued {event.event_id} cam={event.camera_id} scenario={event.scenario}")
        else:
            logger.info(f"[JOB] Duplicate {event.event_id} ignored")
        return IngestResult(inserted=inserted, event=event)

    def _insert_if_absent(self, event: ResolvedSpotEvent) -> bool:
        session = self._session_factory()
        try:
            dialect = session.get_bind().dialect.name
            insert = _INSERT_BY_DIALECT.get(dialect)
            if insert is None:
                raise JobStoreError(event.event_id, ValueError(f"unsupported dialect {dialect!r}"))

            stmt = insert(SpotJob.__table__).values(
                event_id=event.event_id,
                camera_id=event.camera_id,
                camera_name=event.camera_name,
                scenario=event.scenario,
                event_ts=event.event_ts,
                payload=event.raw_payload,
                status=STATUS_NEW,
            ).on_conflict_do_nothing(index_elements=["event_id"])

            result = session.execute(stmt)
            session.commit()
            return result.rowcount == 1
        except SQLAlchemyError as e:
            session.rollback()
            raise JobStoreError(event.event_id, e) from e
        finally:
            session.close()
