"""Fleet class - the main aggregate over customers, vehicles, logs and schedules."""

from datetime import datetime
from typing import List, Optional, Tuple

from .calculations import (
    UPCOMING_DAYS_THRESHOLD,
    UPCOMING_MILES_THRESHOLD,
    calculate_upcoming_services,
    most_recent_logs,
)
from .customer import Customer
from .mileage_log import MileageLog
from .service_schedule import ServiceSchedule
from .upcoming_service import UpcomingService
from .vehicle import Vehicle


class Fleet:
    """Snapshot of all stored fleet data with lookup helpers."""

    def __init__(
        self,
        customers: Optional[List[Customer]] = None,
        vehicles: Optional[List[Vehicle]] = None,
        mileage_logs: Optional[List[MileageLog]] = None,
        schedules: Optional[List[ServiceSchedule]] = None,
    ):
        self.customers = customers or []
        self.vehicles = vehicles or []
        self.mileage_logs = mileage_logs or []
        self.schedules = schedules or []

    def get_customer(self, customer_id: int) -> Optional[Customer]:
        for customer in self.customers:
            if customer.id == customer_id:
                return customer
        return None

    def get_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        for vehicle in self.vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        return None

    def get_vehicle_by_vin(self, vin: str) -> Optional[Vehicle]:
        for vehicle in self.vehicles:
            if vehicle.vin == vin:
                return vehicle
        return None

    def get_mileage_log(self, log_id: int) -> Optional[MileageLog]:
        for log in self.mileage_logs:
            if log.id == log_id:
                return log
        return None

    def find_vehicles(
        self, customer_id: Optional[int] = None, vehicle_id: Optional[int] = None
    ) -> List[Vehicle]:
        """Vehicles matching the optional filters, newest first."""
        matching = [
            v
            for v in self.vehicles
            if (customer_id is None or v.customer_id == customer_id)
            and (vehicle_id is None or v.id == vehicle_id)
        ]
        return sorted(matching, key=lambda v: (v.created_at or "", v.id), reverse=True)

    def logs_for_vehicle(self, vehicle_id: int) -> List[MileageLog]:
        """Mileage history for a vehicle, newest loggedAt first."""
        return most_recent_logs(
            (log for log in self.mileage_logs if log.vehicle_id == vehicle_id),
            limit=None,
        )

    def latest_log(self, vehicle_id: int) -> Optional[MileageLog]:
        logs = self.logs_for_vehicle(vehicle_id)
        return logs[0] if logs else None

    def neighbouring_logs(
        self, vehicle_id: int, logged_at: datetime, exclude_id: Optional[int] = None
    ) -> Tuple[Optional[MileageLog], Optional[MileageLog]]:
        """
        The logs immediately before and after `logged_at` for a vehicle.

        A log sharing the timestamp counts as before. `exclude_id` leaves out
        the log being edited.
        """
        others = [log for log in self.logs_for_vehicle(vehicle_id) if log.id != exclude_id]
        previous = next((log for log in others if log.logged_at <= logged_at), None)
        following = next((log for log in reversed(others) if log.logged_at > logged_at), None)
        return previous, following

    def current_mileage(self, vehicle_id: int) -> Optional[int]:
        """Latest logged mileage, None when the vehicle has never been logged."""
        latest = self.latest_log(vehicle_id)
        return latest.mileage if latest else None

    def schedules_for(self, make: str, model: str) -> List[ServiceSchedule]:
        return [s for s in self.schedules if s.applies_to(make, model)]

    def upcoming_services(
        self,
        vehicle: Vehicle,
        current_mileage: int,
        upcoming_miles: int = UPCOMING_MILES_THRESHOLD,
        upcoming_days: int = UPCOMING_DAYS_THRESHOLD,
    ) -> List[UpcomingService]:
        """
        Services coming due for a vehicle at the given mileage.

        Feeds the vehicle's two most recent logs and its make/model schedules
        to calculate_upcoming_services().
        """
        recent_logs = self.logs_for_vehicle(vehicle.id)[:2]
        return calculate_upcoming_services(
            current_mileage,
            recent_logs,
            self.schedules_for(vehicle.make, vehicle.model),
            upcoming_miles=upcoming_miles,
            upcoming_days=upcoming_days,
        )
