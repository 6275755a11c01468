# barbershop/services/bookings.py

"""Booking ledger: creation, status transitions, bulk operations and deletes.

Status flows confirmed -> completed or confirmed -> cancelled. Both targets
are terminal. Completing a booking counts a visit in the barber's client
book; cancelling it reverses any points it earned. A hard delete does
neither: it only removes the booking and its notification log.
"""

import logging
from datetime import datetime, timedelta, date
from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barbershop.config import POINTS_AWARD_ON
from barbershop.core import normalize_phone, to_shop_time
from barbershop.data import BOOKING_STATUSES, TERMINAL_STATUSES, shop_settings
from barbershop.errors import (
    DuplicateSlotError,
    InvalidTransitionError,
    NotFoundError,
    PastDateError,
    ValidationError,
)
from barbershop.models import Barber, Booking, NotificationLog, Service
from barbershop.schemas import BookingCreate, BookingPublic
from barbershop.services import barber_clients, loyalty
from barbershop.services.notifications import NotificationSender, notify_booking_created

logger = logging.getLogger(__name__)


def slot_taken(session: Session, barber_id: int, appointment_date: datetime) -> bool:
    existing = session.exec(
        select(Booking)
        .where(Booking.barber_id == barber_id)
        .where(Booking.appointment_date == appointment_date)
        .where(Booking.status != "cancelled")
    ).first()
    return existing is not None


def create_booking(
    session: Session,
    appt: BookingCreate,
    notifier: NotificationSender,
    now: datetime,
) -> Booking:
    appt_start = to_shop_time(appt.appointment_date)

    # 1) Only future start times
    if appt_start <= now:
        raise PastDateError()

    # 2) Validate customer fields
    customer_name = appt.customer_name.strip()
    customer_phone = normalize_phone(appt.customer_phone)
    customer_email = appt.customer_email.strip()
    if not customer_name or not customer_phone or not customer_email:
        raise ValidationError("Customer name, phone and email are required")

    # 3) Validate barber and service
    barber = session.get(Barber, appt.barber_id)
    if barber is None or not barber.is_active:
        raise ValidationError("Barber not available")

    service = session.get(Service, appt.service_id)
    if service is None or not service.is_active:
        raise ValidationError("Service not available")
    if service.barber_id is not None and service.barber_id != barber.id:
        raise ValidationError("Service is not offered by this barber")

    # 4) Reject a slot that already has a live booking
    if slot_taken(session, barber.id, appt_start):
        raise DuplicateSlotError()

    db_booking = Booking(
        customer_name=customer_name,
        customer_phone=customer_phone,
        customer_email=customer_email,
        service_id=service.id,
        barber_id=barber.id,
        appointment_date=appt_start,
        notes=appt.notes,
        status="confirmed",
    )

    session.add(db_booking)
    try:
        session.commit()
    except IntegrityError:
        # a concurrent request took the slot between the check and the insert
        session.rollback()
        raise DuplicateSlotError()

    session.refresh(db_booking)
    logger.info(f"Booking {db_booking.id} created for barber {barber.id} at {appt_start}")

    run_side_effect("register loyalty customer", session, db_booking,
                    lambda: loyalty.ensure_customer(session, customer_phone, customer_name, customer_email))
    run_side_effect("add barber client", session, db_booking,
                    lambda: barber_clients.ensure_barber_client(session, db_booking))
    if POINTS_AWARD_ON == "booking":
        run_side_effect("award points", session, db_booking,
                        lambda: loyalty.award_booking_points(session, db_booking))
    run_side_effect("send notifications", session, db_booking,
                    lambda: notify_booking_created(session, db_booking, notifier))

    session.refresh(db_booking)
    return db_booking


def run_side_effect(name: str, session: Session, booking: Booking, action) -> None:
    """Run a follow-up of an already committed booking change; failures are logged only."""
    try:
        action()
    except Exception as e:
        session.rollback()
        logger.error(f"Failed to {name} for booking {booking.id}: {e}")


def get_booking(session: Session, booking_id: int) -> Booking:
    booking = session.get(Booking, booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")
    return booking


def update_booking_status(
    session: Session,
    booking_id: int,
    status: str,
    now: datetime,
    notes: Optional[str] = None,
) -> Booking:
    if status not in BOOKING_STATUSES:
        raise ValidationError("Invalid status")

    booking = get_booking(session, booking_id)

    # Repeating the current status changes nothing but the notes
    if booking.status == status:
        if notes is not None:
            booking.notes = notes
            session.add(booking)
            session.commit()
            session.refresh(booking)
        return booking

    if booking.status in TERMINAL_STATUSES:
        raise InvalidTransitionError(booking.status, status)

    booking.status = status
    if notes is not None:
        booking.notes = notes
    session.add(booking)
    session.commit()
    session.refresh(booking)
    logger.info(f"Booking {booking.id} is now {status}")

    if status == "completed":
        run_side_effect("record visit", session, booking,
                        lambda: barber_clients.record_completed_visit(session, booking, now))
        if POINTS_AWARD_ON == "completion":
            run_side_effect("award points", session, booking,
                            lambda: loyalty.award_booking_points(session, booking))
    elif status == "cancelled":
        run_side_effect("reverse points", session, booking,
                        lambda: loyalty.reverse_booking_points(session, booking))

    session.refresh(booking)
    return booking


def delete_booking(session: Session, booking_id: int) -> BookingPublic:
    """Permanently remove a booking and its notification log.

    Points and visit counts are left as they are; cancel first to reverse them.
    """
    booking = get_booking(session, booking_id)
    deleted = BookingPublic.model_validate(booking)

    session.exec(delete(NotificationLog).where(NotificationLog.booking_id == booking_id))
    session.delete(booking)
    session.commit()
    logger.info(f"Booking {booking_id} deleted")
    return deleted


def bulk_operation(
    session: Session,
    booking_ids: List[int],
    action: str,
    now: datetime,
    status: Optional[str] = None,
) -> dict:
    if not booking_ids:
        raise ValidationError("Booking IDs array is required")
    if action not in ("delete", "update_status"):
        raise ValidationError("Invalid action")
    if action == "update_status":
        if not status:
            raise ValidationError("Status is required for update_status action")
        if status not in BOOKING_STATUSES:
            raise ValidationError("Invalid status")

    affected = 0
    failed = []
    for booking_id in booking_ids:
        try:
            if action == "delete":
                delete_booking(session, booking_id)
            else:
                update_booking_status(session, booking_id, status, now)
            affected += 1
        except HTTPException as e:
            session.rollback()
            failed.append(booking_id)
            logger.warning(f"Bulk {action} skipped booking {booking_id}: {e.detail}")
        except Exception as e:
            session.rollback()
            failed.append(booking_id)
            logger.error(f"Bulk {action} failed for booking {booking_id}: {e}")

    return {"success": not failed, "affected_count": affected, "failed_ids": failed}


# Owner views

def booking_details(
    session: Session,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    barber_id: Optional[int] = None,
    status: Optional[str] = None,
    newest_first: bool = False,
) -> List[dict]:
    stmt = (
        select(Booking, Service, Barber)
        .join(Service, Booking.service_id == Service.id)
        .join(Barber, Booking.barber_id == Barber.id)
    )
    if start is not None:
        stmt = stmt.where(Booking.appointment_date >= start)
    if end is not None:
        stmt = stmt.where(Booking.appointment_date <= end)
    if barber_id is not None:
        stmt = stmt.where(Booking.barber_id == barber_id)
    if status is not None:
        stmt = stmt.where(Booking.status == status)

    if newest_first:
        stmt = stmt.order_by(Booking.appointment_date.desc())
    else:
        stmt = stmt.order_by(Booking.appointment_date)

    return [
        {
            "id": b.id,
            "customer_name": b.customer_name,
            "customer_phone": b.customer_phone,
            "customer_email": b.customer_email,
            "appointment_date": b.appointment_date,
            "notes": b.notes,
            "status": b.status,
            "service_name": s.name,
            "service_price": s.price,
            "service_duration": s.duration,
            "barber_id": br.id,
            "barber_name": br.name,
            "created_at": b.created_at,
        }
        for b, s, br in session.exec(stmt).all()
    ]


def default_range(now: datetime, start: Optional[datetime], end: Optional[datetime]):
    start = start or now
    end = end or start + timedelta(days=shop_settings["calendar_days"])
    return start, end


def day_bounds(on_date: date):
    start = datetime.combine(on_date, datetime.min.time())
    return start, start + timedelta(days=1)


def dashboard_stats(session: Session, now: datetime) -> dict:
    today_start, tomorrow_start = day_bounds(now.date())
    week_start, _ = day_bounds(now.date() - timedelta(days=now.weekday()))
    month_start, _ = day_bounds(now.date().replace(day=1))

    def count_since(start: datetime, end: Optional[datetime] = None) -> int:
        stmt = select(func.count(Booking.id)).where(Booking.appointment_date >= start)
        if end is not None:
            stmt = stmt.where(Booking.appointment_date < end)
        return session.exec(stmt).one()

    revenue = session.exec(
        select(func.sum(Service.price))
        .select_from(Booking)
        .join(Service, Booking.service_id == Service.id)
        .where(Booking.appointment_date >= month_start)
        .where(Booking.status == "completed")
    ).one()

    return {
        "today": count_since(today_start, tomorrow_start),
        "this_week": count_since(week_start),
        "this_month": count_since(month_start),
        "month_revenue": Decimal(str(revenue or 0)).quantize(Decimal("0.01")),
    }
