from datetime import date, datetime

from barbershop.core import open_slots
from barbershop.data import DAILY_SLOTS
from barbershop.services import bookings


def test_availability_full_template_when_no_bookings(client, barber):
    response = client.get("/api/bookings/availability", params={"date": "2025-06-02", "barber_id": barber.id})

    assert response.status_code == 200
    assert response.json() == DAILY_SLOTS


def test_availability_today_only_later_hours(client, barber):
    # the fixed clock is 12:00, so 12:00 itself is gone
    response = client.get("/api/bookings/availability", params={"date": "2025-05-31", "barber_id": barber.id})

    assert response.status_code == 200
    assert response.json() == ["14:00", "15:00", "16:00", "17:00", "18:00"]


def test_availability_excludes_booked_slot(client, barber, make_booking):
    make_booking(when=datetime(2025, 6, 1, 10, 0))

    response = client.get("/api/bookings/availability", params={"date": "2025-06-01", "barber_id": barber.id})

    assert "10:00" not in response.json()
    assert len(response.json()) == len(DAILY_SLOTS) - 1


def test_availability_is_per_barber(client, barber, other_barber, make_booking):
    make_booking(when=datetime(2025, 6, 1, 10, 0))

    response = client.get("/api/bookings/availability", params={"date": "2025-06-01", "barber_id": other_barber.id})

    assert response.json() == DAILY_SLOTS


def test_availability_cancelled_booking_frees_slot(client, session, barber, make_booking, now):
    booking = make_booking(when=datetime(2025, 6, 1, 10, 0))
    bookings.update_booking_status(session, booking.id, "cancelled", now)

    response = client.get("/api/bookings/availability", params={"date": "2025-06-01", "barber_id": barber.id})

    assert "10:00" in response.json()


def test_availability_unknown_barber_gets_full_template(client):
    response = client.get("/api/bookings/availability", params={"date": "2025-06-02", "barber_id": 999})

    assert response.json() == DAILY_SLOTS


def test_availability_requires_date(client, barber):
    response = client.get("/api/bookings/availability", params={"barber_id": barber.id})

    assert response.status_code == 422


def test_booked_slots_lists_live_bookings(client, session, barber, make_booking, now):
    make_booking(when=datetime(2025, 6, 1, 9, 0))
    make_booking(when=datetime(2025, 6, 1, 15, 0), phone="0899 555 111")
    cancelled = make_booking(when=datetime(2025, 6, 1, 17, 0), phone="0899 555 222")
    bookings.update_booking_status(session, cancelled.id, "cancelled", now)

    response = client.get("/api/bookings/booked-slots", params={"date": "2025-06-01", "barber_id": barber.id})

    assert response.status_code == 200
    assert response.json() == ["09:00", "15:00"]


def test_open_slots_current_hour_is_not_bookable():
    slots = open_slots(date(2025, 6, 1), datetime(2025, 6, 1, 9, 30), ["11:00"])

    assert slots == ["10:00", "12:00", "14:00", "15:00", "16:00", "17:00", "18:00"]


def test_open_slots_other_day_ignores_clock():
    slots = open_slots(date(2025, 6, 2), datetime(2025, 6, 1, 17, 45), [])

    assert slots == DAILY_SLOTS
