# barbershop/routers/owner_routes.py

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from barbershop.db import get_session
from barbershop.deps import get_now, require_admin
from barbershop.models import LoyaltyReward
from barbershop.schemas import (
    BookingDetail,
    BookingPublic,
    BookingStatusUpdate,
    BulkOperation,
    BulkResult,
    DashboardStats,
    DeleteResult,
    LoyaltyCustomerPublic,
    NotificationLogPublic,
    PointAdjustment,
    PointTransactionPublic,
    RewardCreate,
    RewardPublic,
)
from barbershop.services import bookings, loyalty
from barbershop.services.notifications import notification_logs

router = APIRouter(
    prefix="/api/owner",
    tags=["owner"],
    dependencies=[Depends(require_admin)],
)


@router.patch("/bookings/{booking_id}/status", response_model=BookingPublic)
def update_booking_status(
    booking_id: int,
    update: BookingStatusUpdate,
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
):
    return bookings.update_booking_status(session, booking_id, update.status, now, notes=update.notes)


@router.delete("/bookings/{booking_id}", response_model=DeleteResult)
def delete_booking(
    booking_id: int,
    session: Session = Depends(get_session),
):
    deleted = bookings.delete_booking(session, booking_id)
    return {"message": "Booking deleted successfully", "booking": deleted}


@router.get("/bookings/{booking_id}/notifications", response_model=List[NotificationLogPublic])
def booking_notifications(
    booking_id: int,
    session: Session = Depends(get_session),
):
    bookings.get_booking(session, booking_id)
    return notification_logs(session, booking_id)


@router.post("/bulk-operations", response_model=BulkResult)
def bulk_operations(
    op: BulkOperation,
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
):
    return bookings.bulk_operation(session, op.booking_ids, op.action, now, status=op.status)


@router.get("/calendar", response_model=List[BookingDetail])
def calendar(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
):
    start, end = bookings.default_range(now, start_date, end_date)
    return bookings.booking_details(session, start=start, end=end)


@router.get("/bookings/today", response_model=List[BookingDetail])
def bookings_today(
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
):
    start, end = bookings.day_bounds(now.date())
    return bookings.booking_details(session, start=start, end=end)


@router.get("/barber-bookings", response_model=List[BookingDetail])
def barber_bookings(
    barber_id: int,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
):
    start, end = bookings.default_range(now, start_date, end_date)
    return bookings.booking_details(session, start=start, end=end, barber_id=barber_id)


@router.get("/completed-bookings", response_model=List[BookingDetail])
def completed_bookings(session: Session = Depends(get_session)):
    return bookings.booking_details(session, status="completed", newest_first=True)


@router.get("/dashboard/stats", response_model=DashboardStats)
def dashboard_stats(
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
):
    return bookings.dashboard_stats(session, now)


# Loyalty administration

@router.get("/customer-points", response_model=List[LoyaltyCustomerPublic])
def customer_points(session: Session = Depends(get_session)):
    return loyalty.list_customers(session)


@router.post("/loyalty/points", response_model=PointTransactionPublic, status_code=201)
def adjust_points(adjustment: PointAdjustment, session: Session = Depends(get_session)):
    return loyalty.append_transaction(
        session,
        adjustment.customer_id,
        adjustment.points,
        adjustment.type,
        adjustment.reason,
        reference_type="manual",
    )


@router.post("/loyalty/rebuild/{customer_id}", response_model=LoyaltyCustomerPublic)
def rebuild_points(customer_id: int, session: Session = Depends(get_session)):
    return loyalty.rebuild_customer_totals(session, customer_id)


@router.post("/loyalty/rewards", response_model=RewardPublic, status_code=201)
def create_reward(reward: RewardCreate, session: Session = Depends(get_session)):
    db_reward = LoyaltyReward(**reward.model_dump())
    session.add(db_reward)
    session.commit()
    session.refresh(db_reward)
    return db_reward
