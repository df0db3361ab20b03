"""
Reminder engine.

Turns upcoming service projections into reminders and pushes them through
the notification channels a customer has opted into.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional

from config import NotificationConfig, ReminderConfig
from models import Fleet, UpcomingService, Vehicle

from . import templates
from .senders import StubNotifier

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = ("email", "sms", "calendar")


@dataclass
class ReminderActions:
    email_sent: bool = False
    sms_sent: bool = False
    calendar_invite_attached: bool = False

    def to_dict(self) -> dict:
        return {
            "emailSent": self.email_sent,
            "smsSent": self.sms_sent,
            "calendarInviteAttached": self.calendar_invite_attached,
        }


@dataclass
class Reminder:
    """Upcoming services for one vehicle, addressed to its owner."""

    customer: str
    vehicle: str
    upcoming_services: List[UpcomingService]
    actions: ReminderActions = field(default_factory=ReminderActions)

    def to_dict(self) -> dict:
        return {
            "customer": self.customer,
            "vehicle": self.vehicle,
            "upcomingServices": [svc.to_dict() for svc in self.upcoming_services],
            "actions": self.actions.to_dict(),
        }


@dataclass
class NotifyResult:
    """Recipients per channel for a dispatch run."""

    notifications_sent: int = 0
    successful: Dict[str, List[str]] = field(
        default_factory=lambda: {t: [] for t in NOTIFICATION_TYPES}
    )
    failed: Dict[str, List[str]] = field(
        default_factory=lambda: {t: [] for t in NOTIFICATION_TYPES}
    )
    reminders: List[Reminder] = field(default_factory=list)

    def record(self, channel: str, recipient: str, ok: bool) -> None:
        if ok:
            self.successful[channel].append(recipient)
            self.notifications_sent += 1
        else:
            self.failed[channel].append(recipient)

    def to_dict(self) -> dict:
        return {
            "notificationsSent": self.notifications_sent,
            "successful": self.successful,
            "failed": self.failed,
            "reminders": [r.to_dict() for r in self.reminders],
        }


def build_reminder(
    fleet: Fleet, vehicle: Vehicle, reminder_config: Optional[ReminderConfig] = None
) -> Optional[Reminder]:
    """
    Reminder for a vehicle at its latest logged mileage.

    None when the vehicle has no mileage logs or nothing is coming due.
    """
    reminder_config = reminder_config or ReminderConfig()
    current_mileage = fleet.current_mileage(vehicle.id)
    if current_mileage is None:
        return None

    upcoming = fleet.upcoming_services(
        vehicle,
        current_mileage,
        upcoming_miles=reminder_config.upcoming_miles,
        upcoming_days=reminder_config.upcoming_days,
    )
    if not upcoming:
        return None

    customer = fleet.get_customer(vehicle.customer_id)
    return Reminder(
        customer=customer.name if customer else "",
        vehicle=vehicle.name,
        upcoming_services=upcoming,
    )


def collect_reminders(
    fleet: Fleet,
    vehicles: Iterable[Vehicle],
    reminder_config: Optional[ReminderConfig] = None,
) -> List[Reminder]:
    """Reminders for every vehicle that has something coming due."""
    reminders = []
    for vehicle in vehicles:
        reminder = build_reminder(fleet, vehicle, reminder_config)
        if reminder is not None:
            reminders.append(reminder)
    return reminders


def send_notifications(
    fleet: Fleet,
    vehicles: Iterable[Vehicle],
    notifier: StubNotifier,
    notification_types: Optional[Iterable[str]] = None,
    notification_config: Optional[NotificationConfig] = None,
    reminder_config: Optional[ReminderConfig] = None,
    today: Optional[date] = None,
    calendar_within_days: Optional[int] = None,
) -> NotifyResult:
    """
    Send reminders over the requested channels.

    - email: requested, customer prefers email/both, and email is enabled
    - sms: requested, customer prefers sms/both, and SMS is enabled
    - calendar: requested, and when `calendar_within_days` is given, the
      earliest service is due within that many days
    """
    notification_config = notification_config or NotificationConfig()
    types = set(notification_types or NOTIFICATION_TYPES)
    result = NotifyResult()

    for vehicle in vehicles:
        reminder = build_reminder(fleet, vehicle, reminder_config)
        customer = fleet.get_customer(vehicle.customer_id)
        if reminder is None or customer is None:
            continue

        services = reminder.upcoming_services
        if "email" in types and customer.wants_email and notification_config.email_enabled:
            ok = notifier.send_email(
                customer.email,
                templates.email_subject(vehicle.name),
                templates.email_body(customer.name, vehicle.name, services),
            )
            reminder.actions.email_sent = ok
            result.record("email", customer.email, ok)

        if "sms" in types and customer.wants_sms and notification_config.sms_enabled:
            ok = notifier.send_sms(customer.phone, templates.sms_body(vehicle.name, services))
            reminder.actions.sms_sent = ok
            result.record("sms", customer.phone, ok)

        if "calendar" in types and (
            calendar_within_days is None or services[0].due_in_days <= calendar_within_days
        ):
            ok = notifier.send_calendar_invite(
                customer.email,
                templates.calendar_summary(vehicle.name),
                templates.calendar_description(vehicle.name, services),
                templates.suggested_appointment_date(services[0], today),
            )
            reminder.actions.calendar_invite_attached = ok
            result.record("calendar", customer.email, ok)

        result.reminders.append(reminder)

    logger.info("Dispatch finished: %d notifications sent", result.notifications_sent)
    return result
