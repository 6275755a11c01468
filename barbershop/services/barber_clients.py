# barbershop/services/barber_clients.py

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlmodel import Session, select

from barbershop.core import normalize_phone
from barbershop.models import Barber, BarberClient, Booking

logger = logging.getLogger(__name__)


def find_client(session: Session, barber_id: int, phone: str) -> Optional[BarberClient]:
    return session.exec(
        select(BarberClient)
        .where(BarberClient.barber_id == barber_id)
        .where(BarberClient.phone == normalize_phone(phone))
    ).first()


def ensure_barber_client(session: Session, booking: Booking) -> BarberClient:
    """Add the booking's customer to the barber's client book with no visits yet."""
    client = find_client(session, booking.barber_id, booking.customer_phone)
    if client is not None:
        return client

    client = BarberClient(
        barber_id=booking.barber_id,
        name=booking.customer_name,
        phone=booking.customer_phone,
        email=booking.customer_email,
        notes=f"Added automatically from booking #{booking.id}",
        total_visits=0,
    )
    session.add(client)
    session.commit()
    session.refresh(client)
    logger.info(f"Added {client.name} to barber {client.barber_id} client book")
    return client


def record_completed_visit(session: Session, booking: Booking, now: datetime) -> BarberClient:
    client = find_client(session, booking.barber_id, booking.customer_phone)
    if client is None:
        client = BarberClient(
            barber_id=booking.barber_id,
            name=booking.customer_name,
            phone=booking.customer_phone,
            email=booking.customer_email,
            notes=f"Added automatically when booking #{booking.id} was completed",
            total_visits=1,
            last_visit=now,
        )
        logger.info(f"Created client {booking.customer_name} with 1 visit")
    else:
        client.total_visits = (client.total_visits or 0) + 1
        client.last_visit = now
        client.updated_at = now
        logger.info(f"Client {client.name} now has {client.total_visits} visits")

    session.add(client)
    session.commit()
    session.refresh(client)
    return client


def list_clients(session: Session, barber_id: int) -> List[BarberClient]:
    # most recent visitors first, never-visited last
    return session.exec(
        select(BarberClient)
        .where(BarberClient.barber_id == barber_id)
        .order_by(BarberClient.last_visit.is_(None), BarberClient.last_visit.desc())
    ).all()


def create_client(
    session: Session,
    barber_id: int,
    name: str,
    phone: str,
    email: Optional[str] = None,
    notes: Optional[str] = None,
    preferred_services: Optional[str] = None,
) -> BarberClient:
    if session.get(Barber, barber_id) is None:
        raise HTTPException(status_code=404, detail="Barber not found")
    if find_client(session, barber_id, phone) is not None:
        raise HTTPException(status_code=409, detail="Client with this phone number already exists for this barber")

    client = BarberClient(
        barber_id=barber_id,
        name=name,
        phone=normalize_phone(phone),
        email=email,
        notes=notes,
        preferred_services=preferred_services,
    )
    session.add(client)
    session.commit()
    session.refresh(client)
    return client
