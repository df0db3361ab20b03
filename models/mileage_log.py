"""MileageLog class for odometer readings."""

from datetime import datetime


class MileageLog:
    """A timestamped odometer reading for a vehicle."""

    def __init__(self, id: int, vehicle_id: int, mileage: int, logged_at: datetime):
        self.id = id
        self.vehicle_id = vehicle_id
        self.mileage = mileage
        self.logged_at = logged_at

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "vehicleId": self.vehicle_id,
            "mileage": self.mileage,
            "loggedAt": self.logged_at.isoformat(),
        }
