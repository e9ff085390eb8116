"""Pytest configuration for global fixtures and logging setup."""
from __future__ import annotations

import os
import tempfile
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = os.environ.get("LOG_DIR") or str(Path(tempfile.gettempdir()) / "runcoach-test-logs")
os.environ["LOG_LEVEL"] = os.environ.get("LOG_LEVEL") or "INFO"

from runcoach.logging_config import configure_logging

configure_logging()

from runcoach.database import Base, get_db
from runcoach.main import app
from runcoach.models.database_models import Athlete, Goal
from runcoach.routers.dependencies import get_today

# A Monday, so week 1 of every plan starts on TODAY
TODAY = date(2026, 10, 12)


@pytest.fixture()
def db_session() -> Iterator[Session]:
    """Fresh in-memory database per test."""

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, future=True)

    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture()
def athlete(db_session: Session) -> Athlete:
    record = Athlete(name="Test Runner", email="runner@example.com")
    db_session.add(record)
    db_session.commit()
    return record


@pytest.fixture()
def make_goal(db_session: Session, athlete: Athlete) -> Callable[..., Goal]:
    """Factory for an active goal owned by the athlete fixture."""

    def _make(**overrides: Any) -> Goal:
        values: Dict[str, Any] = {
            "athlete_id": athlete.id,
            "race_distance": "10k",
            "race_date": TODAY + timedelta(weeks=10),
            "experience_level": "intermediate",
            "current_frequency": 3,
            "longest_recent_run": 45,
            "available_days": ["tuesday", "thursday", "saturday", "sunday"],
            "max_weekday_time": 60,
            "max_weekend_time": 90,
            "is_active": True,
        }
        values.update(overrides)
        goal = Goal(**values)
        db_session.add(goal)
        db_session.flush()
        return goal

    return _make


@pytest.fixture()
def test_client(db_session: Session) -> Iterator[TestClient]:
    """FastAPI test client sharing the test session and a fixed today."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
