"""UpcomingService dataclass for calculated service projections."""

from dataclasses import dataclass

from .urgency import Urgency, get_service_urgency


@dataclass(frozen=True)
class UpcomingService:
    """Miles and days remaining until a scheduled service recurs."""

    type: str
    due_in_miles: int
    due_in_days: int

    @property
    def urgency(self) -> Urgency:
        return get_service_urgency(self.due_in_miles, self.due_in_days)

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "dueInMiles": self.due_in_miles,
            "dueInDays": self.due_in_days,
        }
