# barbershop/services/notifications.py

"""
Booking notifications over email (Resend) and SMS (Twilio).

Sending is best effort: a provider failure is logged and recorded in
notification_logs but never propagates to the booking that triggered it.
"""

import logging
from functools import lru_cache
from typing import Callable, Optional

import resend
from sqlmodel import Session, select
from twilio.rest import Client

from barbershop.config import (
    EMAIL_FROM_ADDRESS,
    OWNER_EMAIL,
    OWNER_PHONE,
    RESEND_API_KEY,
    SHOP_ADDRESS,
    SHOP_NAME,
    SHOP_PHONE,
    TWILIO_ACCOUNT_SID,
    TWILIO_AUTH_TOKEN,
    TWILIO_PHONE_NUMBER,
)
from barbershop.core import shop_now
from barbershop.errors import DependencyFailure
from barbershop.models import Barber, Booking, NotificationLog, Service

logger = logging.getLogger(__name__)


# Returned by senders that only log; deliver() does not count it as sent.
SIMULATED = "simulated"


class NotificationSender:
    """Delivery channels used by the booking flow.

    Both methods return a provider message id (or None), SIMULATED when
    nothing left the process, and raise DependencyFailure when the provider
    rejects the message.
    """

    def send_email(self, to: str, subject: str, html: str) -> Optional[str]:
        raise NotImplementedError

    def send_sms(self, to: str, body: str) -> Optional[str]:
        raise NotImplementedError


class LoggingNotificationSender(NotificationSender):
    """Development sender: logs what would have been sent."""

    def send_email(self, to: str, subject: str, html: str) -> Optional[str]:
        logger.info(f"[EMAIL SIMULATION] to={to} subject={subject!r}")
        return SIMULATED

    def send_sms(self, to: str, body: str) -> Optional[str]:
        logger.info(f"[SMS SIMULATION] to={to} body={body[:60]!r}")
        return SIMULATED


class ProviderNotificationSender(LoggingNotificationSender):
    """Sends through Twilio and Resend, simulating any channel without credentials."""

    def __init__(self, twilio_client: Optional[Client] = None, from_number: Optional[str] = None,
                 email_enabled: bool = False):
        self.twilio_client = twilio_client
        self.from_number = from_number
        self.email_enabled = email_enabled

    def send_email(self, to: str, subject: str, html: str) -> Optional[str]:
        if not self.email_enabled:
            return super().send_email(to, subject, html)
        try:
            response = resend.Emails.send({
                "from": EMAIL_FROM_ADDRESS,
                "to": [to],
                "subject": subject,
                "html": html,
            })
        except Exception as e:
            raise DependencyFailure(f"Resend rejected email to {to}: {e}") from e
        return response.get("id") if isinstance(response, dict) else None

    def send_sms(self, to: str, body: str) -> Optional[str]:
        if self.twilio_client is None:
            return super().send_sms(to, body)
        try:
            message = self.twilio_client.messages.create(body=body, from_=self.from_number, to=to)
        except Exception as e:
            raise DependencyFailure(f"Twilio rejected SMS to {to}: {e}") from e
        return message.sid


@lru_cache(maxsize=1)
def default_sender() -> NotificationSender:
    twilio_client = None
    if TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN and TWILIO_PHONE_NUMBER:
        twilio_client = Client(TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN)
    else:
        logger.warning("Twilio credentials not set - SMS will be logged instead of sent")

    if RESEND_API_KEY:
        resend.api_key = RESEND_API_KEY
    else:
        logger.warning("RESEND_API_KEY not set - emails will be logged instead of sent")

    return ProviderNotificationSender(
        twilio_client=twilio_client,
        from_number=TWILIO_PHONE_NUMBER,
        email_enabled=bool(RESEND_API_KEY),
    )


# Message bodies

def booking_summary(session: Session, booking: Booking) -> dict:
    service = session.get(Service, booking.service_id)
    barber = session.get(Barber, booking.barber_id)
    return {
        "id": booking.id,
        "customer_name": booking.customer_name,
        "customer_phone": booking.customer_phone,
        "customer_email": booking.customer_email,
        "date": booking.appointment_date.strftime("%d.%m.%Y"),
        "time": booking.appointment_date.strftime("%H:%M"),
        "service_name": service.name if service else "",
        "service_price": f"{service.price:.2f}" if service else "",
        "barber_name": barber.name if barber else "",
        "notes": booking.notes,
    }


def confirmation_sms(s: dict) -> str:
    return (
        f"Thank you, {s['customer_name']}! Your booking at {SHOP_NAME} is confirmed.\n"
        f"Date: {s['date']} at {s['time']}\n"
        f"Service: {s['service_name']} with {s['barber_name']} ({s['service_price']})\n"
        f"Address: {SHOP_ADDRESS}. To change your booking call {SHOP_PHONE}."
    )


def owner_sms(s: dict) -> str:
    lines = [
        f"NEW BOOKING #{s['id']} - {SHOP_NAME}",
        f"Client: {s['customer_name']} ({s['customer_phone']}, {s['customer_email']})",
        f"{s['date']} {s['time']} - {s['service_name']} with {s['barber_name']} ({s['service_price']})",
    ]
    if s["notes"]:
        lines.append(f"Notes: {s['notes']}")
    return "\n".join(lines)


def reminder_sms(s: dict) -> str:
    return (
        f"Hello {s['customer_name']}! A reminder of your appointment at {SHOP_NAME} "
        f"tomorrow at {s['time']}.\n"
        f"Service: {s['service_name']} with {s['barber_name']}\n"
        f"Address: {SHOP_ADDRESS}. To change your booking call {SHOP_PHONE}."
    )


def confirmation_email(s: dict) -> tuple[str, str]:
    subject = f"Booking confirmation - {SHOP_NAME}"
    html = (
        f"<h2>Thank you, {s['customer_name']}!</h2>"
        f"<p>Your booking is confirmed.</p>"
        f"<ul><li>Date: {s['date']}</li><li>Time: {s['time']}</li>"
        f"<li>Service: {s['service_name']} ({s['service_price']})</li>"
        f"<li>Barber: {s['barber_name']}</li></ul>"
        f"<p>{SHOP_ADDRESS} &middot; {SHOP_PHONE}</p>"
    )
    return subject, html


def owner_email(s: dict) -> tuple[str, str]:
    subject = f"New booking #{s['id']}: {s['customer_name']} {s['date']} {s['time']}"
    html = (
        f"<h2>New booking</h2>"
        f"<ul><li>Client: {s['customer_name']}</li><li>Phone: {s['customer_phone']}</li>"
        f"<li>Email: {s['customer_email']}</li><li>Service: {s['service_name']} ({s['service_price']})</li>"
        f"<li>Barber: {s['barber_name']}</li><li>When: {s['date']} {s['time']}</li>"
        f"<li>Notes: {s['notes'] or '-'}</li></ul>"
    )
    return subject, html


# Dispatch

def deliver(
    session: Session,
    booking_id: int,
    channel: str,
    recipient: str,
    message: str,
    notification_type: str,
    send: Callable[[], Optional[str]],
) -> bool:
    """Run one send and record the outcome. Never raises on provider failure.

    Returns True only when a provider accepted the message.
    """
    log = NotificationLog(
        booking_id=booking_id,
        channel=channel,
        recipient=recipient,
        message=message,
        notification_type=notification_type,
    )
    try:
        provider_id = send()
        if provider_id == SIMULATED:
            log.status = SIMULATED
            logger.info(f"{notification_type} {channel} to {recipient} for booking {booking_id} was only simulated")
        else:
            log.provider_id = provider_id
            log.status = "sent"
            log.sent_at = shop_now()
            logger.info(f"{notification_type} {channel} sent to {recipient} for booking {booking_id}")
    except Exception as e:
        log.status = "failed"
        log.error_message = str(e)
        logger.error(f"Failed to send {notification_type} {channel} for booking {booking_id}: {e}")

    session.add(log)
    session.commit()
    return log.status == "sent"


def notify_booking_created(session: Session, booking: Booking, notifier: NotificationSender) -> dict:
    """Confirmation to the customer and an alert to the owner, over email and SMS."""
    result = {"customer_email": False, "customer_sms": False, "owner_email": False, "owner_sms": False}
    try:
        summary = booking_summary(session, booking)
    except Exception as e:
        logger.error(f"Could not build notifications for booking {booking.id}: {e}")
        session.rollback()
        return result

    if booking.customer_email:
        subject, html = confirmation_email(summary)
        result["customer_email"] = deliver(
            session, booking.id, "email", booking.customer_email, subject, "confirmation",
            lambda: notifier.send_email(booking.customer_email, subject, html),
        )

    body = confirmation_sms(summary)
    result["customer_sms"] = deliver(
        session, booking.id, "sms", booking.customer_phone, body, "confirmation",
        lambda: notifier.send_sms(booking.customer_phone, body),
    )

    if OWNER_EMAIL:
        subject, html = owner_email(summary)
        result["owner_email"] = deliver(
            session, booking.id, "email", OWNER_EMAIL, subject, "owner_notification",
            lambda: notifier.send_email(OWNER_EMAIL, subject, html),
        )

    body = owner_sms(summary)
    result["owner_sms"] = deliver(
        session, booking.id, "sms", OWNER_PHONE, body, "owner_notification",
        lambda: notifier.send_sms(OWNER_PHONE, body),
    )
    return result


def notification_logs(session: Session, booking_id: int) -> list[NotificationLog]:
    return session.exec(
        select(NotificationLog)
        .where(NotificationLog.booking_id == booking_id)
        .order_by(NotificationLog.id)
    ).all()
