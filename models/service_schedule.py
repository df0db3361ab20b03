"""ServiceSchedule class for manufacturer maintenance intervals."""

from typing import Optional


class ServiceSchedule:
    """A recurring maintenance rule tied to a make/model and service type."""

    def __init__(
            self,
            id: int,
            make: str,
            model: str,
            service_type: str,
            interval_miles: int,
            interval_months: int,
            description: Optional[str] = None,
    ):
        self.id = id
        self.make = make
        self.model = model
        self.service_type = service_type
        self.interval_miles = interval_miles
        self.interval_months = interval_months
        self.description = description

    def applies_to(self, make: str, model: str) -> bool:
        """Check if this schedule belongs to the given make/model."""
        return self.make == make and self.model == model

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "make": self.make,
            "model": self.model,
            "serviceType": self.service_type,
            "description": self.description,
            "intervalMiles": self.interval_miles,
            "intervalMonths": self.interval_months,
        }
