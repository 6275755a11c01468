# barbershop/routers/bookings_routes.py

from datetime import datetime, date
from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from barbershop.db import get_session
from barbershop.deps import get_notifier, get_now
from barbershop.schemas import BookingCreate, BookingPublic
from barbershop.services import availability, bookings
from barbershop.services.notifications import NotificationSender

router = APIRouter(
    prefix="/api/bookings",
    tags=["bookings"],
)


@router.get("/availability", response_model=List[str])
def get_availability(
    date: date,
    barber_id: int,
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
):
    return availability.resolve_available_slots(session, date, barber_id, now)


@router.get("/booked-slots", response_model=List[str])
def get_booked_slots(
    date: date,
    barber_id: int,
    session: Session = Depends(get_session),
):
    return availability.booked_slots(session, date, barber_id)


@router.post("", response_model=BookingPublic, status_code=201)
def create_booking(
    appt: BookingCreate,
    session: Session = Depends(get_session),
    notifier: NotificationSender = Depends(get_notifier),
    now: datetime = Depends(get_now),
):
    return bookings.create_booking(session, appt, notifier, now)
