# barbershop/services/availability.py

from datetime import datetime, timedelta, date
from typing import List

from sqlmodel import Session, select

from barbershop.core import open_slots, slot_label
from barbershop.models import Booking


def bookings_for_day(session: Session, barber_id: int, on_date: date) -> List[Booking]:
    day_start_dt = datetime.combine(on_date, datetime.min.time())
    day_end_dt = day_start_dt + timedelta(days=1)

    return session.exec(
        select(Booking)
        .where(Booking.barber_id == barber_id)
        .where(Booking.appointment_date >= day_start_dt)
        .where(Booking.appointment_date < day_end_dt)
        .where(Booking.status != "cancelled")
        .order_by(Booking.appointment_date)
    ).all()


def booked_slots(session: Session, on_date: date, barber_id: int) -> List[str]:
    return [slot_label(b.appointment_date) for b in bookings_for_day(session, barber_id, on_date)]


def resolve_available_slots(session: Session, on_date: date, barber_id: int, now: datetime) -> List[str]:
    """Template slots for the day minus live bookings, minus past hours when on_date is today.

    An unknown or inactive barber simply has no bookings, so the whole template is open.
    """
    return open_slots(on_date, now, booked_slots(session, on_date, barber_id))
