# barbershop/routers/barbers_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_
from sqlmodel import Session, select

from barbershop.db import get_session
from barbershop.deps import require_admin
from barbershop.models import Barber, Service
from barbershop.schemas import (
    BarberClientCreate,
    BarberClientPublic,
    BarberCreate,
    BarberPublic,
    ServiceCreate,
    ServicePublic,
)
from barbershop.services import barber_clients

router = APIRouter(
    tags=["barbers"],
)


@router.get("/api/barbers", response_model=List[BarberPublic])
def list_barbers(session: Session = Depends(get_session)):
    return session.exec(
        select(Barber).where(Barber.is_active == True).order_by(Barber.id)  # noqa: E712
    ).all()


@router.get("/api/services", response_model=List[ServicePublic])
def list_services(
    barber_id: Optional[int] = None,
    session: Session = Depends(get_session),
):
    stmt = select(Service).where(Service.is_active == True)  # noqa: E712
    if barber_id is not None:
        # the barber's own services plus the ones every barber offers
        stmt = stmt.where(or_(Service.barber_id == barber_id, Service.barber_id.is_(None)))
    return session.exec(stmt.order_by(Service.id)).all()


@router.post("/api/owner/barbers", response_model=BarberPublic, status_code=201,
             dependencies=[Depends(require_admin)])
def create_barber(barber: BarberCreate, session: Session = Depends(get_session)):
    db_barber = Barber(**barber.model_dump())
    session.add(db_barber)
    session.commit()
    session.refresh(db_barber)
    return db_barber


@router.patch("/api/owner/barbers/{barber_id}/deactivate", response_model=BarberPublic,
              dependencies=[Depends(require_admin)])
def deactivate_barber(barber_id: int, session: Session = Depends(get_session)):
    db_barber = session.get(Barber, barber_id)
    if db_barber is None:
        raise HTTPException(status_code=404, detail="Barber not found")

    db_barber.is_active = False
    session.add(db_barber)
    session.commit()
    session.refresh(db_barber)
    return db_barber


@router.post("/api/owner/services", response_model=ServicePublic, status_code=201,
             dependencies=[Depends(require_admin)])
def create_service(service: ServiceCreate, session: Session = Depends(get_session)):
    if service.barber_id is not None and session.get(Barber, service.barber_id) is None:
        raise HTTPException(status_code=404, detail="Barber not found")

    db_service = Service(**service.model_dump())
    session.add(db_service)
    session.commit()
    session.refresh(db_service)
    return db_service


@router.patch("/api/owner/services/{service_id}/deactivate", response_model=ServicePublic,
              dependencies=[Depends(require_admin)])
def deactivate_service(service_id: int, session: Session = Depends(get_session)):
    db_service = session.get(Service, service_id)
    if db_service is None:
        raise HTTPException(status_code=404, detail="Service not found")

    db_service.is_active = False
    session.add(db_service)
    session.commit()
    session.refresh(db_service)
    return db_service


@router.get("/api/barbers/{barber_id}/clients", response_model=List[BarberClientPublic],
            dependencies=[Depends(require_admin)])
def list_barber_clients(barber_id: int, session: Session = Depends(get_session)):
    return barber_clients.list_clients(session, barber_id)


@router.post("/api/barbers/{barber_id}/clients", response_model=BarberClientPublic, status_code=201,
             dependencies=[Depends(require_admin)])
def create_barber_client(
    barber_id: int,
    client: BarberClientCreate,
    session: Session = Depends(get_session),
):
    return barber_clients.create_client(
        session,
        barber_id,
        client.name,
        client.phone,
        email=client.email,
        notes=client.notes,
        preferred_services=client.preferred_services,
    )
