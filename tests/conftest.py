"""
Pytest fixtures for Fleet Inventory tests.

Every test gets a fresh in-memory SQLite database. The DatabaseManager uses a
StaticPool for SQLite, so the API, the audit background task and the test
itself all see the same data.
"""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest  # noqa: E402

from inventory_core.db import db  # noqa: E402
from inventory_core.models import (  # noqa: E402
    BusLine,
    BusModel,
    City,
    Country,
    SeatDiagram,
    ServiceType,
    State,
    Transporter,
)

TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="function")
def test_db():
    """Create a fresh test database for each test."""
    db.reset()
    db.initialize(TEST_DATABASE_URL)
    db.create_all_tables()

    yield TEST_DATABASE_URL, db.SessionLocal, db.engine

    db.drop_all_tables()
    db.reset()


@pytest.fixture
def test_session(test_db):
    """Get a test session from the test database."""
    _, TestingSessionLocal, _ = test_db
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture
def geography(test_session):
    """Mexico / Jalisco / Guadalajara, committed."""
    country = Country(name="Mexico", code="MX")
    test_session.add(country)
    test_session.flush()
    state = State(name="Jalisco", code="JAL", country_id=country.id)
    test_session.add(state)
    test_session.flush()
    city = City(
        name="Guadalajara",
        slug="guadalajara-jal",
        latitude=20.67,
        longitude=-103.35,
        state_id=state.id,
    )
    test_session.add(city)
    test_session.commit()
    return {"country": country, "state": state, "city": city}


@pytest.fixture
def fleet_catalogs(test_session):
    """Transporter, service type, bus line, seat diagram and bus model, committed."""
    transporter = Transporter(name="Autobuses del Norte", code="ADN")
    service_type = ServiceType(name="Executive", code="EXEC")
    test_session.add_all([transporter, service_type])
    test_session.flush()
    bus_line = BusLine(
        name="Norte Ejecutivo",
        code="NE",
        transporter_id=transporter.id,
        service_type_id=service_type.id,
    )
    seat_diagram = SeatDiagram(
        name="Standard 40",
        max_capacity=50,
        num_floors=1,
        seats_per_floor=[{"floor_number": 1, "num_rows": 10, "seats_left": 2, "seats_right": 2}],
        total_seats=40,
    )
    test_session.add_all([bus_line, seat_diagram])
    test_session.flush()
    bus_model = BusModel(
        manufacturer="Volvo",
        model="9700",
        year=2020,
        seating_capacity=44,
        default_seat_diagram_id=seat_diagram.id,
    )
    test_session.add(bus_model)
    test_session.commit()
    return {
        "transporter": transporter,
        "service_type": service_type,
        "bus_line": bus_line,
        "seat_diagram": seat_diagram,
        "bus_model": bus_model,
    }
