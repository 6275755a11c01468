# barbershop/services/reminders.py

import logging
import threading
import time
from datetime import datetime, timedelta
from typing import List

from sqlmodel import Session, select

from barbershop.core import shop_now
from barbershop.models import Booking
from barbershop.services.notifications import (
    NotificationSender,
    booking_summary,
    deliver,
    reminder_sms,
)

logger = logging.getLogger(__name__)

# Serializes reminder sends within the process (scheduler and admin trigger).
_send_lock = threading.Lock()


def bookings_needing_reminders(session: Session, now: datetime) -> List[int]:
    """Confirmed bookings tomorrow that have not had their reminder yet."""
    tomorrow = datetime.combine(now.date() + timedelta(days=1), datetime.min.time())
    day_after = tomorrow + timedelta(days=1)

    return session.exec(
        select(Booking.id)
        .where(Booking.status == "confirmed")
        .where(Booking.reminder_sent == False)  # noqa: E712
        .where(Booking.appointment_date >= tomorrow)
        .where(Booking.appointment_date < day_after)
        .order_by(Booking.appointment_date)
    ).all()


def send_reminder(session: Session, booking_id: int, notifier: NotificationSender) -> bool:
    with _send_lock:
        return _send_reminder(session, booking_id, notifier)


def _send_reminder(session: Session, booking_id: int, notifier: NotificationSender) -> bool:
    booking = session.get(Booking, booking_id)
    if booking is None:
        logger.error(f"Booking not found: {booking_id}")
        return False
    # another scan may have sent it since this one listed it
    session.refresh(booking)
    if booking.reminder_sent:
        logger.info(f"Reminder for booking {booking_id} already sent")
        return False

    body = reminder_sms(booking_summary(session, booking))
    sent = deliver(
        session, booking.id, "sms", booking.customer_phone, body, "reminder",
        lambda: notifier.send_sms(booking.customer_phone, body),
    )
    if not sent:
        # flag stays unset so the next scan retries
        return False

    # the flag is set only after the provider accepted the message
    booking.reminder_sent = True
    booking.reminder_sent_at = shop_now()
    session.add(booking)
    session.commit()
    logger.info(f"SMS reminder sent for booking {booking_id}")
    return True


def process_reminders(
    session: Session,
    notifier: NotificationSender,
    now: datetime,
    delay_seconds: float = 0,
) -> dict:
    booking_ids = bookings_needing_reminders(session, now)
    if not booking_ids:
        logger.info("No bookings need reminders at this time")
        return {"processed": 0, "sent": 0}

    logger.info(f"Processing {len(booking_ids)} reminder notifications...")
    sent = 0
    for booking_id in booking_ids:
        if send_reminder(session, booking_id, notifier):
            sent += 1
        if delay_seconds:
            # stay under the SMS provider's rate limit
            time.sleep(delay_seconds)

    logger.info(f"Finished processing reminders: {sent}/{len(booking_ids)} sent")
    return {"processed": len(booking_ids), "sent": sent}
