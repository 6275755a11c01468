from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from barbershop.config import SHOP_NAME
from barbershop.deps import get_notifier
from barbershop.main import app
from barbershop.models import Booking, NotificationLog, Service
from barbershop.services import bookings


def test_create_booking_success_201(client, booking_payload):
    response = client.post("/api/bookings", json=booking_payload())

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "confirmed"
    assert data["appointment_date"] == "2025-06-01T10:00:00"
    assert data["customer_phone"] == "0888123456"
    assert data["reminder_sent"] is False


def test_create_booking_in_past_400(client, booking_payload):
    response = client.post("/api/bookings", json=booking_payload(when="2025-05-30T10:00:00"))

    assert response.status_code == 400


def test_create_booking_at_current_minute_400(client, booking_payload):
    response = client.post("/api/bookings", json=booking_payload(when="2025-05-31T12:00:00"))

    assert response.status_code == 400


def test_create_booking_aware_time_converted_to_shop_time(client, booking_payload):
    # Sofia is UTC+3 in summer
    response = client.post("/api/bookings", json=booking_payload(when="2025-06-01T07:00:00Z"))

    assert response.status_code == 201
    assert response.json()["appointment_date"] == "2025-06-01T10:00:00"


def test_create_booking_seconds_truncated(client, booking_payload):
    response = client.post("/api/bookings", json=booking_payload(when="2025-06-01T10:00:42"))

    assert response.status_code == 201
    assert response.json()["appointment_date"] == "2025-06-01T10:00:00"


def test_create_booking_duplicate_slot_409(client, session, booking_payload):
    first = client.post("/api/bookings", json=booking_payload())
    second = client.post("/api/bookings", json=booking_payload(phone="0899 000 111", name="Other Client"))

    assert first.status_code == 201
    assert second.status_code == 409
    rows = session.exec(select(Booking)).all()
    assert len(rows) == 1


def test_same_time_different_barber_allowed(client, booking_payload, other_barber):
    first = client.post("/api/bookings", json=booking_payload())
    second = client.post("/api/bookings", json=booking_payload(barber_id=other_barber.id, phone="0899 000 111"))

    assert first.status_code == 201
    assert second.status_code == 201


def test_database_rejects_second_live_booking_for_slot(session, barber, service, make_booking):
    make_booking(when=datetime(2025, 6, 1, 10, 0))

    session.add(Booking(
        customer_name="Racer",
        customer_phone="0899111222",
        customer_email="racer@example.com",
        service_id=service.id,
        barber_id=barber.id,
        appointment_date=datetime(2025, 6, 1, 10, 0),
    ))
    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()


def test_cancelled_booking_frees_slot(client, session, booking_payload, now):
    first = client.post("/api/bookings", json=booking_payload())
    bookings.update_booking_status(session, first.json()["id"], "cancelled", now)

    second = client.post("/api/bookings", json=booking_payload(phone="0899 000 111"))

    assert second.status_code == 201


def test_create_booking_blank_name_400(client, booking_payload):
    response = client.post("/api/bookings", json=booking_payload(name="   "))

    assert response.status_code == 400


def test_create_booking_missing_field_422(client, booking_payload):
    payload = booking_payload()
    payload.pop("customer_email")

    response = client.post("/api/bookings", json=payload)

    assert response.status_code == 422


def test_create_booking_inactive_barber_400(client, session, barber, booking_payload):
    barber.is_active = False
    session.add(barber)
    session.commit()

    response = client.post("/api/bookings", json=booking_payload())

    assert response.status_code == 400


def test_create_booking_service_of_other_barber_400(client, session, other_barber, booking_payload):
    own_service = Service(name="Beard trim", price=20, duration=20, barber_id=other_barber.id)
    session.add(own_service)
    session.commit()

    response = client.post("/api/bookings", json=booking_payload(service_id=own_service.id))

    assert response.status_code == 400


def test_create_booking_unknown_service_400(client, booking_payload):
    response = client.post("/api/bookings", json=booking_payload(service_id=999))

    assert response.status_code == 400


def test_create_booking_sends_confirmations(client, session, notifier, booking_payload):
    response = client.post("/api/bookings", json=booking_payload())
    booking_id = response.json()["id"]

    assert ("georgi@example.com", f"Booking confirmation - {SHOP_NAME}") in notifier.emails
    assert any(to == "0888123456" for to, _ in notifier.sms)
    assert any(to == "owner@barbershop.test" for to, _ in notifier.emails)

    logs = session.exec(select(NotificationLog).where(NotificationLog.booking_id == booking_id)).all()
    assert len(logs) == 4
    assert all(log.status == "sent" for log in logs)


def test_create_booking_survives_notification_failure(client, session, booking_payload, failing_notifier):
    app.dependency_overrides[get_notifier] = lambda: failing_notifier

    response = client.post("/api/bookings", json=booking_payload())

    assert response.status_code == 201
    booking_id = response.json()["id"]
    assert session.get(Booking, booking_id) is not None
    logs = session.exec(select(NotificationLog).where(NotificationLog.booking_id == booking_id)).all()
    assert logs
    assert all(log.status == "failed" for log in logs)
    assert "unavailable" in logs[0].error_message


def test_create_booking_slot_race_409(client, session, booking_payload, monkeypatch):
    # both requests pass the pre-check; the partial unique index decides
    monkeypatch.setattr("barbershop.services.bookings.slot_taken", lambda *args: False)

    first = client.post("/api/bookings", json=booking_payload())
    second = client.post("/api/bookings", json=booking_payload(phone="0899 000 111", name="Other Client"))

    assert first.status_code == 201
    assert second.status_code == 409
    rows = session.exec(select(Booking)).all()
    assert [b.id for b in rows] == [first.json()["id"]]


def test_booking_notifications_listed_for_owner(client, admin_headers, booking_payload):
    booking_id = client.post("/api/bookings", json=booking_payload()).json()["id"]

    response = client.get(f"/api/owner/bookings/{booking_id}/notifications", headers=admin_headers)

    assert response.status_code == 200
    logs = response.json()
    assert {(log["channel"], log["notification_type"]) for log in logs} == {
        ("email", "confirmation"),
        ("sms", "confirmation"),
        ("email", "owner_notification"),
        ("sms", "owner_notification"),
    }
    assert all(log["status"] == "sent" for log in logs)


def test_booking_notifications_unknown_booking_404(client, admin_headers):
    response = client.get("/api/owner/bookings/999/notifications", headers=admin_headers)

    assert response.status_code == 404
