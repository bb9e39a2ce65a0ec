import os

# Keep the app module from touching the on-disk database
os.environ.setdefault("TABLEBOOK_DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tablebook.database import get_db, init_db, make_engine
from tablebook.services.booking import BookingEngine, SlotLocks
from tablebook.services.settings_store import ClosureStore, SettingsStore


class FakeClock:
    """Advances one minute per call."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(minutes=1)
        return value


@pytest.fixture
def db_engine():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 12, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def make_booking(db, clock):
    """Build a BookingEngine over the current settings, optionally patched first."""

    def factory(settings=None, closed=None) -> BookingEngine:
        if settings:
            SettingsStore(db).patch(settings)
        if closed:
            ClosureStore(db).patch(closed)
        return BookingEngine(
            db,
            SettingsStore(db).get(),
            ClosureStore(db).get(),
            locks=SlotLocks(),
            clock=clock,
        )

    return factory


@pytest.fixture
def booking(make_booking):
    return make_booking()


@pytest.fixture
def client(session_factory):
    from tablebook.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
