# barbershop/scheduler.py

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.combining import OrTrigger
from apscheduler.triggers.cron import CronTrigger
from sqlmodel import Session

from barbershop.config import REMINDER_SEND_DELAY_SECONDS, SHOP_TIMEZONE
from barbershop.core import shop_now
from barbershop.data import shop_settings
from barbershop.db import engine
from barbershop.services.notifications import default_sender
from barbershop.services.reminders import process_reminders

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler(timezone=SHOP_TIMEZONE)


def run_reminder_job(target_engine=None):
    """One reminder scan in its own session. Errors are logged so the job keeps its schedule."""
    try:
        with Session(target_engine or engine) as session:
            result = process_reminders(
                session,
                default_sender(),
                shop_now(),
                delay_seconds=REMINDER_SEND_DELAY_SECONDS,
            )
        logger.info(f"[SCHEDULER] Reminder scan: {result['sent']}/{result['processed']} sent")
    except Exception as e:
        logger.error(f"[SCHEDULER] Error in reminder job: {e}")


def init_scheduler():
    # both schedules share one job; its runs never overlap
    trigger = OrTrigger([
        # daily run for tomorrow's appointments
        CronTrigger(hour=shop_settings["reminder_hour"], minute=0, timezone=SHOP_TIMEZONE),
        # backup run every 30 minutes during opening hours
        CronTrigger(hour="9-18", minute="*/30", timezone=SHOP_TIMEZONE),
    ])
    scheduler.add_job(
        run_reminder_job,
        trigger,
        id="reminders",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    if not scheduler.running:
        scheduler.start()
    logger.info("SMS reminder job scheduled")


def shutdown_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=False)
