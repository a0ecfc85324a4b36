"""Pytest fixtures — file-backed SQLite database per test, plus API helpers."""
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from mealshare.database import Base, get_db
from mealshare.main import app

# Import all models so they register with Base.metadata
from mealshare.models.user import User                                      # noqa: F401
from mealshare.models.participant import Participant, ParticipantDefaultPayor  # noqa: F401
from mealshare.models.event import Event, EventHost                         # noqa: F401
from mealshare.models.event_participant import EventParticipant, EventPayorOverride  # noqa: F401
from mealshare.models.menu import Menu, MenuItem                            # noqa: F401
from mealshare.models.selection import Selection, SelectionAllocation      # noqa: F401
from mealshare.models.shared_cost import SharedCost                         # noqa: F401
from mealshare.models.event_charge import EventCharge                       # noqa: F401
from mealshare.models.payment_link import PaymentLink                       # noqa: F401
from mealshare.models.event_state_change import EventStateChange            # noqa: F401


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite engine for each test.

    A file (not ``:memory:``) so that separate sessions see each other's
    commits, which the concurrent-modification tests rely on.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session, closed after the test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(session_factory):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: create rows via the API, return the JSON response dict
# ---------------------------------------------------------------------------
def create_test_user(client: TestClient, name: str = "Test User", email: str = None) -> dict:
    """Helper — POST /api/users and return response JSON."""
    resp = client.post("/api/users/", json={
        "display_name": name,
        "email": email or f"{uuid.uuid4().hex[:12]}@example.com",
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_participant(client: TestClient, owner_id: str, name: str = "Guest",
                            default_payor_id: str = None) -> dict:
    """Helper — POST /api/participants and return response JSON."""
    payload = {"owner_user_id": owner_id, "display_name": name}
    if default_payor_id:
        payload["default_payor_user_id"] = default_payor_id
    resp = client.post("/api/participants/", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_event(client: TestClient, host_id: str, name: str = "Dinner",
                      exemption: bool = False, cutoff_offset_hours: int = 12,
                      host_ids: list = None) -> dict:
    """Helper — POST /api/events (DRAFT) starting tomorrow."""
    start = datetime.now(timezone.utc) + timedelta(hours=24)
    cutoff = datetime.now(timezone.utc) + timedelta(hours=cutoff_offset_hours)
    resp = client.post("/api/events/", json={
        "name": name,
        "location_text": "Kitchen",
        "host_user_id": host_id,
        "starts_at_utc": start.isoformat(),
        "cutoff_at_utc": cutoff.isoformat(),
        "payor_exemption_enabled": exemption,
        "host_user_ids": host_ids or [],
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def add_test_event_participant(client: TestClient, event_id: str, participant_id: str,
                               attendance: str = "ATTENDING") -> dict:
    """Helper — invite a participant into an event."""
    resp = client.post(f"/api/events/{event_id}/participants", json={
        "participant_id": participant_id,
        "attendance_status": attendance,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_menu_item(client: TestClient, event_id: str, name: str = "Kebab",
                          price: int = 1000) -> dict:
    """Helper — create a menu on the event and one priced item in it."""
    menu = client.post(f"/api/events/{event_id}/menus", json={"name": "Main"})
    assert menu.status_code == 201, menu.text
    resp = client.post(f"/api/menus/{menu.json()['menu_id']}/items", json={
        "name": name,
        "price_irr": price,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def transition(client: TestClient, event_id: str, target: str):
    """Helper — POST a strict lifecycle transition, return the raw response."""
    return client.post(f"/api/events/{event_id}/transition", json={"target_state": target})


def create_test_selection(client: TestClient, event_id: str, actor_id: str, menu_item_id: str,
                          participant_ids: list, quantity: int = 1):
    """Helper — POST a selection as ``actor_id``, return the raw response."""
    return client.post(
        f"/api/events/{event_id}/selections",
        params={"actor_user_id": actor_id},
        json={
            "menu_item_id": menu_item_id,
            "quantity": quantity,
            "participant_ids": participant_ids,
        },
    )
