"""Shared test fixtures: a fresh in-memory database per test."""

from datetime import date, time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from salon_api.catalog import get_professional, list_professionals, seed_catalog
from salon_api.database import Base, make_engine
from salon_api.scheduler import generate_slots, get_slot, publish_slots, slot_id_for
from salon_api.schemas import BookingRequest

MONDAY = date(2026, 10, 19)
SUNDAY = date(2026, 10, 25)


@pytest.fixture
def empty_db():
    """Schema only, no catalog."""
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def db(empty_db):
    """Database with the salon catalog loaded."""
    seed_catalog(empty_db)
    return empty_db


@pytest.fixture
def open_week(db):
    """Every slot from MONDAY through the following Sunday, all of them open."""
    publish_slots(
        db,
        generate_slots(list_professionals(db), start_date=MONDAY, horizon_days=7, open_probability=1.0),
    )
    return db


@pytest.fixture
def slot_at(open_week):
    """Look up a stored slot by professional id, day and HH:MM."""
    def lookup(professional_id="1", day=MONDAY, hhmm="10:00"):
        hour, minute = (int(part) for part in hhmm.split(":"))
        return get_slot(open_week, slot_id_for(professional_id, day, time(hour, minute)))

    return lookup


@pytest.fixture
def ana(db):
    return get_professional(db, "1")


@pytest.fixture
def make_request():
    """Booking details for Maria, overridable per test."""
    def make(**overrides):
        data = {
            "slot_id": "",
            "service_id": "1",
            "client_name": "Maria",
            "client_phone": "11999999999",
        }
        data.update(overrides)
        return BookingRequest(**data)

    return make


@pytest.fixture
def client(open_week):
    """Test client whose requests run against the open_week database."""
    from salon_api.main import app, get_db

    def override_get_db():
        yield open_week

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
