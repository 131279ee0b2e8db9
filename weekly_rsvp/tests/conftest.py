from datetime import datetime, timezone

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session

from weekly_rsvp.core.config import Settings, get_settings
from weekly_rsvp.database.db import Base, get_db
from weekly_rsvp.main import app
from weekly_rsvp.services.events import EventLifecycleManager
from weekly_rsvp.services.persons import PersonDirectory
from weekly_rsvp.services.reservations import ReservationEngine
from weekly_rsvp.stores.sqlalchemy_store import (
    SqlAlchemyEventStore,
    SqlAlchemyPersonStore,
    SqlAlchemyReservationStore,
)

# Use an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine: Engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

FIXED_NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def setup_database():
    """Give every test empty tables."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


# Override the database dependency
def override_get_db():
    db: Session = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def db_session():
    db: Session = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def redis_client(fake_redis, monkeypatch: pytest.MonkeyPatch):
    """Route every lock through the in-process fake Redis."""
    monkeypatch.setattr("weekly_rsvp.services.locks.get_redis_client", lambda: fake_redis)
    return fake_redis


@pytest.fixture
def app_settings() -> Settings:
    return Settings()


@pytest.fixture
def client(app_settings: Settings):
    app.dependency_overrides[get_settings] = lambda: app_settings
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.pop(get_settings, None)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def event_manager(db_session: Session, fixed_clock) -> EventLifecycleManager:
    return EventLifecycleManager(SqlAlchemyEventStore(db_session), Settings(), fixed_clock)


@pytest.fixture
def make_engine(db_session: Session, redis_client, fixed_clock):
    """Build a ReservationEngine over the test session with overridden settings."""

    def _make(clock=fixed_clock, **overrides) -> ReservationEngine:
        settings = Settings(**overrides)
        events = EventLifecycleManager(SqlAlchemyEventStore(db_session), settings, clock)
        return ReservationEngine(
            events,
            PersonDirectory(SqlAlchemyPersonStore(db_session)),
            SqlAlchemyReservationStore(db_session),
            settings,
            clock,
        )

    return _make


def reservation_payload(mobile_no: str = "09171234567", **overrides) -> dict:
    payload = {
        "mobile_no": mobile_no,
        "email": f"{mobile_no}@example.com",
        "first_name": "Juan",
        "last_name": "Dela Cruz",
        "birthday": "1990-01-15",
        "full_address": "123 Rizal Street",
        "city": "Quezon City",
        "vaccinated": True,
        "volunteer": False,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_payload():
    return reservation_payload


@pytest.fixture
def file_sessionmaker(tmp_path):
    """Sessions on a file-backed SQLite database, one connection per thread."""
    file_engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=file_engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=file_engine)
    file_engine.dispose()
