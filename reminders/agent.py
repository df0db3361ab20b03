"""
Scheduled reminder agent.

Uses an APScheduler BackgroundScheduler to check every vehicle once a day
and send reminders over each customer's preferred channels.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Optional, Union

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler

from config import AppConfig, load_config
from models import load_fleet

from .engine import NOTIFICATION_TYPES, send_notifications
from .senders import StubNotifier

logger = logging.getLogger(__name__)

JOB_ID = "reminder_agent_daily"


def check_and_send_reminders(
    data_file: Optional[Union[str, Path]] = None,
    config: Optional[AppConfig] = None,
    notifier: Optional[StubNotifier] = None,
    today: Optional[date] = None,
) -> int:
    """
    Send reminders for every vehicle with services coming due.

    Email and SMS follow the customer's preference; a calendar invite is
    only attached when the earliest service is due within
    `calendar_within_days`. Returns the number of successful sends.
    Failures are logged and never raised.
    """
    config = config or load_config()
    data_file = data_file or config.data_file
    notifier = notifier or StubNotifier(config.notifications.success_rate)

    try:
        fleet = load_fleet(data_file)
        logger.info("Checking reminders for %d vehicles", len(fleet.vehicles))
        result = send_notifications(
            fleet,
            fleet.vehicles,
            notifier,
            notification_types=NOTIFICATION_TYPES,
            notification_config=config.notifications,
            reminder_config=config.reminders,
            today=today,
            calendar_within_days=config.reminders.calendar_within_days,
        )
    except Exception:
        logger.exception("Reminder agent run failed")
        return 0

    for reminder in result.reminders:
        logger.info("Sent reminders for %s to %s", reminder.vehicle, reminder.customer)
    logger.info("Reminder agent completed. Sent %d reminders.", result.notifications_sent)
    return result.notifications_sent


def start_reminder_agent(
    config: Optional[AppConfig] = None,
    scheduler: Optional[BaseScheduler] = None,
) -> BaseScheduler:
    """Register the daily job (midnight by default) and start the scheduler."""
    config = config or load_config()
    scheduler = scheduler or BackgroundScheduler(
        job_defaults={"coalesce": True, "max_instances": 1, "misfire_grace_time": 3600}
    )
    scheduler.add_job(
        check_and_send_reminders,
        "cron",
        hour=config.reminders.cron_hour,
        minute=config.reminders.cron_minute,
        kwargs={"config": config},
        id=JOB_ID,
        replace_existing=True,
    )
    logger.info(
        "Reminder agent scheduled to run daily at %02d:%02d",
        config.reminders.cron_hour,
        config.reminders.cron_minute,
    )
    # BlockingScheduler.start() does not return until shutdown
    if not scheduler.running:
        scheduler.start()
    return scheduler
