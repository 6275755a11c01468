"""Shared fixtures: in-memory database, fixed clock, stub notification senders."""

import os
import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

# Settings are read at import time, so they have to be in place first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["ADMIN_PASSWORD"] = "owner-pass-123"
os.environ["ADMIN_PASSWORD_HASH"] = ""
os.environ["OWNER_EMAIL"] = "owner@barbershop.test"
os.environ["POINTS_AWARD_ON"] = "booking"
os.environ["ENABLE_SCHEDULER"] = "false"
os.environ["REMINDER_SEND_DELAY_SECONDS"] = "0"

# Ensure the project root is available on sys.path so tests can import the package.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from barbershop.db import create_db_and_tables, enable_sqlite_foreign_keys, get_session  # noqa: E402
from barbershop.deps import get_notifier, get_now  # noqa: E402
from barbershop.errors import DependencyFailure  # noqa: E402
from barbershop.main import app  # noqa: E402
from barbershop.models import Barber, Service  # noqa: E402
from barbershop.schemas import BookingCreate  # noqa: E402
from barbershop.services import bookings  # noqa: E402
from barbershop.services.notifications import NotificationSender  # noqa: E402

# Saturday noon, shop time
FIXED_NOW = datetime(2025, 5, 31, 12, 0)


class RecordingNotifier(NotificationSender):
    def __init__(self):
        self.emails = []
        self.sms = []

    def send_email(self, to, subject, html):
        self.emails.append((to, subject))
        return f"email-{len(self.emails)}"

    def send_sms(self, to, body):
        self.sms.append((to, body))
        return f"SM{len(self.sms):04d}"


class FailingNotifier(NotificationSender):
    def send_email(self, to, subject, html):
        raise DependencyFailure("email provider unavailable")

    def send_sms(self, to, body):
        raise DependencyFailure("sms provider unavailable")


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine)
    create_db_and_tables(test_engine)
    yield test_engine
    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def failing_notifier():
    return FailingNotifier()


@pytest.fixture
def client(session, now, notifier):
    def get_session_override():
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_now] = lambda: now
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(client):
    response = client.post("/api/admin/login", json={"password": "owner-pass-123"})
    assert response.status_code == 200
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def barber(session):
    barber = Barber(id=5, name="Ivan Dimitrov", title="Master barber")
    session.add(barber)
    session.commit()
    session.refresh(barber)
    return barber


@pytest.fixture
def other_barber(session):
    barber = Barber(id=6, name="Nikolay Georgiev", title="Barber")
    session.add(barber)
    session.commit()
    session.refresh(barber)
    return barber


@pytest.fixture
def service(session):
    """A 40.00 haircut every barber offers."""
    service = Service(name="Classic haircut", description="Cut and style", price=Decimal("40.00"), duration=45)
    session.add(service)
    session.commit()
    session.refresh(service)
    return service


@pytest.fixture
def booking_payload(barber, service):
    def make(when="2025-06-01T10:00:00", phone="0888 123 456", name="Georgi Petrov", **overrides):
        payload = {
            "customer_name": name,
            "customer_phone": phone,
            "customer_email": "georgi@example.com",
            "service_id": service.id,
            "barber_id": barber.id,
            "appointment_date": when,
            "notes": None,
        }
        payload.update(overrides)
        return payload

    return make


@pytest.fixture
def make_booking(session, barber, service, notifier, now):
    """Create a booking through the service layer, skipping HTTP."""
    def make(when=datetime(2025, 6, 1, 10, 0), phone="0888 123 456", name="Georgi Petrov",
             barber_id=None, sender=None):
        appt = BookingCreate(
            customer_name=name,
            customer_phone=phone,
            customer_email="georgi@example.com",
            service_id=service.id,
            barber_id=barber_id or barber.id,
            appointment_date=when,
        )
        return bookings.create_booking(session, appt, sender or notifier, now)

    return make
