"""Message templates and placeholder substitution for reminders."""

import math
import re
from datetime import date, timedelta
from typing import Optional, Sequence

from models import UpcomingService

EMAIL_SUBJECT = "Vehicle Service Reminder: {vehicle}"
EMAIL_BODY = """
Dear {customer},

Your {vehicle} is due for the following service(s):

{services}

Please contact us to schedule an appointment at your earliest convenience.

Thank you for choosing our service center!

Best regards,
Automotive Service Center
"""

SMS_BODY = (
    "Reminder: Your {vehicle} is due for {serviceCount} service(s) {dueTime}. "
    "Please call us to schedule an appointment."
)

CALENDAR_SUMMARY = "{vehicle} Service Appointment"
CALENDAR_DESCRIPTION = """
Vehicle: {vehicle}
Services Due:
{services}

Please contact our service center to confirm this appointment time.
"""

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")

# Appointments are suggested this many days before the earliest service
APPOINTMENT_LEAD_DAYS = 7


def render(template: str, **values) -> str:
    """Substitute {placeholder} tokens in one pass; unknown braces are left alone."""

    def substitute(match):
        key = match.group(1)
        return str(values[key]) if key in values else match.group(0)

    return _PLACEHOLDER_RE.sub(substitute, template)


def services_text(services: Sequence[UpcomingService]) -> str:
    return "".join(
        f"- {svc.type}: Due in {svc.due_in_miles} miles or {svc.due_in_days} days\n"
        for svc in services
    )


def due_time(service: UpcomingService) -> str:
    """'in N days' within a week, else 'in N weeks' (rounded up)."""
    if service.due_in_days <= 7:
        return f"in {service.due_in_days} days"
    return f"in {math.ceil(service.due_in_days / 7)} weeks"


def email_subject(vehicle_name: str) -> str:
    return render(EMAIL_SUBJECT, vehicle=vehicle_name)


def email_body(customer_name: str, vehicle_name: str, services: Sequence[UpcomingService]) -> str:
    return render(
        EMAIL_BODY,
        customer=customer_name,
        vehicle=vehicle_name,
        services=services_text(services),
    )


def sms_body(vehicle_name: str, services: Sequence[UpcomingService]) -> str:
    return render(
        SMS_BODY,
        vehicle=vehicle_name,
        serviceCount=len(services),
        dueTime=due_time(services[0]),
    )


def calendar_summary(vehicle_name: str) -> str:
    return render(CALENDAR_SUMMARY, vehicle=vehicle_name)


def calendar_description(vehicle_name: str, services: Sequence[UpcomingService]) -> str:
    return render(CALENDAR_DESCRIPTION, vehicle=vehicle_name, services=services_text(services))


def suggested_appointment_date(
    service: UpcomingService, today: Optional[date] = None
) -> date:
    """A week before the service is due, but never earlier than tomorrow."""
    today = today or date.today()
    return today + timedelta(days=max(1, service.due_in_days - APPOINTMENT_LEAD_DAYS))
