# app/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL. The session factory built here is handed to
the ingestion gateway at startup; nothing else writes to the job table.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import Settings, settings


def build_engine(cfg: Settings) -> Engine:
    """Create the engine for cfg.DATABASE_URL with TLS set from PGSSLMODE."""
    url = cfg.DATABASE_URL
    if url.startswith("sqlite"):
        # Local/dev only: no pool sizing, usable from worker threads
        return create_engine(url, connect_args={"check_same_thread": False})

    connect_args = {}
    if url.startswith("postgresql"):
        # Encrypt without verifying the server certificate (managed Postgres)
        connect_args["sslmode"] = "require" if cfg.DB_SSL_ENABLED else "disable"

    return create_engine(
        url,
        pool_pre_ping=True,          # Auto-reconnect if DB connection drops
        pool_size=cfg.DB_POOL_SIZE,
        max_overflow=cfg.DB_MAX_OVERFLOW,
        connect_args=connect_args,
        echo=False,                  # Set True to log all SQL queries (debug only)
    )


engine = build_engine(settings)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def create_tables(bind: Engine = None):
    """
    Creates the job table on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from app.models.spot_job import SpotJob   # noqa

    Base.metadata.create_all(bind=bind or engine)
