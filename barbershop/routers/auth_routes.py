# barbershop/routers/auth_routes.py

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from barbershop.auth import ADMIN_SUBJECT, create_access_token, verify_admin_password
from barbershop.db import get_session
from barbershop.deps import get_notifier, get_now, require_admin
from barbershop.schemas import AdminLogin, ReminderRequest, ReminderRunResult, Token
from barbershop.services import bookings, reminders
from barbershop.services.notifications import NotificationSender

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
)


@router.post("/login", response_model=Token)
def login(credentials: AdminLogin):
    if not verify_admin_password(credentials.password):
        logger.warning("Failed admin login attempt")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": ADMIN_SUBJECT})
    return {"access_token": token, "token_type": "bearer"}


@router.post("/sms/test-reminder", dependencies=[Depends(require_admin)])
def send_test_reminder(
    req: ReminderRequest,
    session: Session = Depends(get_session),
    notifier: NotificationSender = Depends(get_notifier),
):
    bookings.get_booking(session, req.booking_id)
    if not reminders.send_reminder(session, req.booking_id, notifier):
        raise HTTPException(status_code=502, detail="Failed to send SMS reminder")
    return {"message": "SMS reminder sent successfully"}


@router.post("/sms/process-reminders", response_model=ReminderRunResult,
             dependencies=[Depends(require_admin)])
def run_reminders(
    session: Session = Depends(get_session),
    notifier: NotificationSender = Depends(get_notifier),
    now: datetime = Depends(get_now),
):
    return reminders.process_reminders(session, notifier, now)
