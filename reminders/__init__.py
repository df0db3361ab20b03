"""Reminder building, notification dispatch and the scheduled reminder agent."""

from .engine import (
    NOTIFICATION_TYPES,
    NotifyResult,
    Reminder,
    ReminderActions,
    build_reminder,
    collect_reminders,
    send_notifications,
)
from .senders import StubNotifier
from .agent import check_and_send_reminders, start_reminder_agent

__all__ = [
    "NOTIFICATION_TYPES",
    "NotifyResult",
    "Reminder",
    "ReminderActions",
    "build_reminder",
    "collect_reminders",
    "send_notifications",
    "StubNotifier",
    "check_and_send_reminders",
    "start_reminder_agent",
]
