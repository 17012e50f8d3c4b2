import os
import tempfile
from datetime import date
from decimal import Decimal

# Configure before the application modules read their settings.
_tmpdir = tempfile.mkdtemp(prefix="majestic_haven_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'test.db')}"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_SAMPLE_ROOMS"] = "false"
os.environ["AUTO_CREATE_SCHEMA"] = "true"
os.environ["MAILGUN_API_KEY"] = ""
os.environ["MAILGUN_DOMAIN"] = ""
os.environ["ADMIN_API_KEY"] = "test-admin-key"

import pytest
from fastapi.testclient import TestClient

from majestic_haven.db import Base, SessionLocal, engine
from majestic_haven.main import app
from majestic_haven.models import Booking, BookingStatus, Room

ADMIN_KEY = os.environ["ADMIN_API_KEY"]


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_room(db):
    def _make_room(**overrides) -> Room:
        data = {
            "name": "Harbour Deluxe",
            "type": "Deluxe",
            "price": Decimal("100.00"),
            "description": "Sea views.",
            "amenities": ["Free Wi-Fi", "Minibar"],
            "capacity": 2,
            "image_url": "https://example.com/room.jpg",
        }
        data.update(overrides)
        room = Room(**data)
        db.add(room)
        db.commit()
        db.refresh(room)
        return room
    return _make_room


@pytest.fixture
def make_booking(db):
    def _make_booking(room: Room, check_in: date, check_out: date, status=BookingStatus.CONFIRMED, **overrides) -> Booking:
        data = {
            "guest_name": "Ada Lovelace",
            "guest_email": "ada@example.com",
            "guest_phone": "+44 20 7946 0000",
            "number_of_guests": 1,
            "total_price": room.price * (check_out - check_in).days,
        }
        data.update(overrides)
        booking = Booking(room_id=room.id, check_in_date=check_in, check_out_date=check_out, status=status, **data)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking
    return _make_booking


@pytest.fixture
def admin_headers():
    return {"X-Admin-Key": ADMIN_KEY}
