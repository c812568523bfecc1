from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.schemas.contest import Event, Forecast, OfficialResult, User
from app.services.scoring import DEFAULT_POLICY

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
GRID = list("ABCDEFGHIJ")


def make_event(race_id, closed=True, **kw):
    delta = timedelta(days=1)
    deadline = NOW - delta if closed else NOW + delta
    return Event(id=race_id, name=f"GP {race_id}", voting_deadline=deadline, **kw)

def make_result(race_id, pole="A", positions=None, crash_pilot="K"):
    return OfficialResult(race_id=race_id, pole=pole,
                          positions=GRID if positions is None else positions,
                          crash_pilot=crash_pilot)

def make_forecast(user_id, race_id, pole="A", positions=None, crash_pilot="K"):
    return Forecast(user_id=user_id, race_id=race_id, pole=pole,
                    positions=GRID if positions is None else positions,
                    crash_pilot=crash_pilot)


@pytest.fixture
def policy():
    return DEFAULT_POLICY

@pytest.fixture
def users():
    return [User(uid="u1", display_name="Ana", email="ana@example.com"),
            User(uid="u2", display_name="Ben"),
            User(uid="u3")]


@pytest.fixture
def db_session():
    """In-memory SQLite shared across the TestClient threadpool."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()

@pytest.fixture
def client(db_session):
    def _get_db():
        yield db_session
    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
