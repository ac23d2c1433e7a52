# tests/test_ingestion_gateway.py
"""Unit tests for idempotent job ingestion."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import logging
import pytest
from datetime import datetime, timezone
from unittest.mock import MagicMock
from sqlalchemy.exc import OperationalError
from app.models.spot_job import SpotJob, STATUS_NEW
from app.services.event_identity import is_fallback_event_id
from app.services.ingestion_gateway import IngestionGateway, JobStoreError


def make_payload(event_id="evt-100", camera_id=120333):
    return {
        "event": {"id": event_id, "type": "Person Detected", "timestamp": 1700000000000},
        "camera": {"id": camera_id, "name": "Front Gate"},
    }


def all_jobs(session_factory):
    with session_factory() as db:
        return db.query(SpotJob).order_by(SpotJob.id).all()


class TestIngestionGateway:
    @pytest.mark.asyncio
    async def test_first_delivery_inserts_row(self, session_factory):
        gateway = IngestionGateway(session_factory)
        result = await gateway.ingest(make_payload())

        assert result.inserted is True
        assert result.event.event_id == "evt-100"

        jobs = all_jobs(session_factory)
        assert len(jobs) == 1
        job = jobs[0]
        assert job.event_id == "evt-100"
        assert job.camera_id == "120333"
        assert job.camera_name == "Front Gate"
        assert job.scenario == "Person Detected"
        assert job.status == STATUS_NEW
        assert job.payload == make_payload()
        assert job.event_ts.replace(tzinfo=timezone.utc) == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_duplicate_delivery_is_noop(self, session_factory):
        gateway = IngestionGateway(session_factory)
        first = await gateway.ingest(make_payload())
        second = await gateway.ingest(make_payload(camera_id="changed"))

        assert first.inserted is True
        assert second.inserted is False
        assert second.event.event_id == "evt-100"

        jobs = all_jobs(session_factory)
        assert len(jobs) == 1
        assert jobs[0].camera_id == "120333"   # never updated

    @pytest.mark.asyncio
    async def test_id_less_payloads_are_not_deduplicated(self, session_factory):
        gateway = IngestionGateway(session_factory)
        body = {"camera": {"id": "c-1"}, "scenario": "Motion"}
        first = await gateway.ingest(dict(body))
        second = await gateway.ingest(dict(body))

        assert first.inserted and second.inserted
        assert first.event.event_id != second.event.event_id
        assert is_fallback_event_id(first.event.event_id)
        assert len(all_jobs(session_factory)) == 2

    @pytest.mark.asyncio
    async def test_minted_id_is_logged_as_warning(self, session_factory, caplog):
        gateway = IngestionGateway(session_factory)
        with caplog.at_level(logging.WARNING, logger="app.services.ingestion_gateway"):
            result = await gateway.ingest({"camera": {"id": "c-2"}})
            await gateway.ingest({"id": "has-id"})

        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert result.event.event_id in warnings[0]

    @pytest.mark.asyncio
    async def test_incomplete_payload_still_recorded(self, session_factory):
        gateway = IngestionGateway(session_factory)
        result = await gateway.ingest({"id": "sparse", "timestamp": "not-a-date"})

        assert result.inserted is True
        job = all_jobs(session_factory)[0]
        assert job.camera_id is None
        assert job.camera_name is None
        assert job.scenario is None
        assert job.event_ts is None

    @pytest.mark.asyncio
    async def test_concurrent_duplicates_store_one_row(self, session_factory):
        gateway = IngestionGateway(session_factory)
        results = await asyncio.gather(*(gateway.ingest(make_payload("race-1")) for _ in range(5)))

        assert sum(r.inserted for r in results) == 1
        assert len(all_jobs(session_factory)) == 1

    @pytest.mark.asyncio
    async def test_store_failure_raises_without_retry(self):
        db = MagicMock()
        db.get_bind.return_value.dialect.name = "postgresql"
        db.execute.side_effect = OperationalError("INSERT", {}, Exception("connection refused"))
        gateway = IngestionGateway(lambda: db)

        with pytest.raises(JobStoreError) as exc_info:
            await gateway.ingest(make_payload("evt-down"))

        assert exc_info.value.event_id == "evt-down"
        db.execute.assert_called_once()
        db.rollback.assert_called_once()
        db.commit.assert_not_called()
        db.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_postgres_statement_is_on_conflict_do_nothing(self):
        db = MagicMock()
        db.get_bind.return_value.dialect.name = "postgresql"
        db.execute.return_value.rowcount = 0
        gateway = IngestionGateway(lambda: db)

        result = await gateway.ingest(make_payload())

        assert result.inserted is False
        stmt = db.execute.call_args[0][0]
        from sqlalchemy.dialects import postgresql
        sql = str(stmt.compile(dialect=postgresql.dialect()))
        assert "ON CONFLICT (event_id) DO NOTHING" in sql
        db.commit.assert_called_once()
