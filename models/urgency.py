"""Urgency enum for upcoming service levels."""

from enum import Enum

OVERDUE_MILES = 0
OVERDUE_DAYS = 0
UPCOMING_MILES = 500
UPCOMING_DAYS = 30


class Urgency(Enum):
    """Service urgency categories."""

    OVERDUE = "overdue"
    UPCOMING = "upcoming"
    OK = "ok"


def get_service_urgency(due_in_miles: int, due_in_days: int) -> Urgency:
    """Classify a projection against the fixed overdue/upcoming thresholds."""
    if due_in_miles <= OVERDUE_MILES or due_in_days <= OVERDUE_DAYS:
        return Urgency.OVERDUE
    if due_in_miles <= UPCOMING_MILES or due_in_days <= UPCOMING_DAYS:
        return Urgency.UPCOMING
    return Urgency.OK
