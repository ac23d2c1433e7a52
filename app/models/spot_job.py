# app/models/spot_job.py
"""
Spot AI job queue table.
One row per accepted webhook event, keyed uniquely by event_id.
Rows are created here with status NEW and consumed by downstream workers.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON, func
from sqlalchemy.dialects.postgresql import JSONB
from app.database import Base

STATUS_NEW = "NEW"


class SpotJob(Base):
    __tablename__ = "spot_jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(String(255), nullable=False, unique=True)
    camera_id = Column(String(255), index=True)
    camera_name = Column(String(255))
    scenario = Column(String(255))
    event_ts = Column(DateTime(timezone=True))
    payload = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)
    status = Column(String(20), nullable=False, default=STATUS_NEW, index=True)
    received_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<SpotJob {self.id} event={self.event_id} cam={self.camera_id} status={self.status}>"
