"""Helper functions for upcoming service calculations."""

import math
from datetime import date
from typing import Iterable, List, Optional, Sequence

from dateutil.relativedelta import relativedelta

from .mileage_log import MileageLog
from .service_schedule import ServiceSchedule
from .upcoming_service import UpcomingService

DEFAULT_DAILY_MILEAGE = 30
UPCOMING_MILES_THRESHOLD = 500
UPCOMING_DAYS_THRESHOLD = 30
SECONDS_PER_DAY = 24 * 60 * 60


class ScheduleConfigError(ValueError):
    """A service schedule has an interval that cannot be projected."""

    def __init__(self, schedule: ServiceSchedule):
        self.schedule = schedule
        super().__init__(
            f"Service schedule '{schedule.service_type}' for {schedule.make} "
            f"{schedule.model} has invalid intervalMiles={schedule.interval_miles!r}"
        )


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves going toward +infinity."""
    return math.floor(value + 0.5)


def most_recent_logs(
    mileage_logs: Iterable[MileageLog], limit: Optional[int] = 2
) -> List[MileageLog]:
    """Return up to `limit` logs (all when None), newest loggedAt first.

    Logs sharing a timestamp are ordered by id, later inserts first.
    """
    return sorted(
        mileage_logs, key=lambda log: (log.logged_at, log.id), reverse=True
    )[:limit]


def average_daily_mileage(mileage_logs: Sequence[MileageLog]) -> int:
    """
    Estimate miles driven per day from the two most recent logs.

    - Fewer than 2 logs: DEFAULT_DAILY_MILEAGE
    - Otherwise: mileage delta over whole days between them (at least 1 day),
      floored at 1 mile/day so later divisions stay positive
    """
    recent = most_recent_logs(mileage_logs)
    if len(recent) < 2:
        return DEFAULT_DAILY_MILEAGE
    latest, previous = recent
    elapsed = (latest.logged_at - previous.logged_at).total_seconds()
    days_between = max(1, round_half_up(elapsed / SECONDS_PER_DAY))
    return max(1, round_half_up((latest.mileage - previous.mileage) / days_between))


def calculate_upcoming_services(
    current_mileage: int,
    mileage_logs: Sequence[MileageLog],
    schedules: Iterable[ServiceSchedule],
    upcoming_miles: int = UPCOMING_MILES_THRESHOLD,
    upcoming_days: int = UPCOMING_DAYS_THRESHOLD,
) -> List[UpcomingService]:
    """
    Project which scheduled services come due soon.

    Each schedule is assumed to have been serviced at odometer 0 and to recur
    every intervalMiles; intervalMonths is not consulted. A service is kept
    when it is within `upcoming_miles` OR `upcoming_days` (at the vehicle's
    average daily mileage). Result is ordered by miles remaining, ties in
    schedule order.

    Raises:
        ScheduleConfigError: a schedule has a missing or non-positive interval
    """
    avg_daily_mileage = average_daily_mileage(mileage_logs)

    upcoming = []
    for schedule in schedules:
        if not schedule.interval_miles or schedule.interval_miles <= 0:
            raise ScheduleConfigError(schedule)
        # Truncated remainder: keeps the dividend's sign for negative readings
        miles_since = int(math.fmod(current_mileage, schedule.interval_miles))
        miles_until = schedule.interval_miles - miles_since
        days_until = round_half_up(miles_until / avg_daily_mileage)

        if miles_until <= upcoming_miles or days_until <= upcoming_days:
            upcoming.append(
                UpcomingService(
                    type=schedule.service_type,
                    due_in_miles=miles_until,
                    due_in_days=days_until,
                )
            )

    upcoming.sort(key=lambda svc: svc.due_in_miles)
    return upcoming


def calc_next_due_date(last_service_date: date, interval_months: int) -> date:
    """Calculate next due date: last service + interval months."""
    return last_service_date + relativedelta(months=int(interval_months))


def days_until_service_due(
    last_service_date: date, interval_months: int, today: Optional[date] = None
) -> int:
    """Days until a date-based service is due (negative when overdue)."""
    today = today or date.today()
    return (calc_next_due_date(last_service_date, interval_months) - today).days


def is_service_due_by_date(
    last_service_date: date, interval_months: int, today: Optional[date] = None
) -> bool:
    """True once today reaches the date-based due date."""
    today = today or date.today()
    return today >= calc_next_due_date(last_service_date, interval_months)
