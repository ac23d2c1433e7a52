# tests/conftest.py
"""Shared fixtures: a throwaway SQLite job store per test."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before app.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", "")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.database import create_tables


@pytest.fixture
def store_engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'spot_jobs.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(store_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=store_engine)
