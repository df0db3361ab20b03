"""
Fleet service reminder models.

This package provides data models for tracking fleet maintenance:
- Customer, Vehicle: Owners and their vehicles
- MileageLog: Timestamped odometer readings
- ServiceSchedule: Per make/model maintenance intervals
- UpcomingService, Urgency: Calculated service projections
- Fleet: Aggregate over all stored data
"""

from .urgency import Urgency, get_service_urgency
from .customer import Customer
from .vehicle import Vehicle
from .mileage_log import MileageLog
from .service_schedule import ServiceSchedule
from .upcoming_service import UpcomingService
from .service_types import ServiceType, SERVICE_INTERVALS, SERVICE_DESCRIPTIONS
from .calculations import (
    ScheduleConfigError,
    average_daily_mileage,
    calculate_upcoming_services,
    days_until_service_due,
    is_service_due_by_date,
)
from .fleet import Fleet
from .loader import (
    NotFoundError,
    load_fleet,
    create_vehicle,
    update_vehicle,
    delete_vehicle,
    add_mileage_log,
    update_mileage_log,
    delete_mileage_log,
    parse_timestamp,
    utc_now,
)
from .seed import build_seed_data, reset_fleet, ensure_data_file

__all__ = [
    "Urgency",
    "get_service_urgency",
    "Customer",
    "Vehicle",
    "MileageLog",
    "ServiceSchedule",
    "UpcomingService",
    "ServiceType",
    "SERVICE_INTERVALS",
    "SERVICE_DESCRIPTIONS",
    "ScheduleConfigError",
    "average_daily_mileage",
    "calculate_upcoming_services",
    "days_until_service_due",
    "is_service_due_by_date",
    "Fleet",
    "NotFoundError",
    "load_fleet",
    "create_vehicle",
    "update_vehicle",
    "delete_vehicle",
    "add_mileage_log",
    "update_mileage_log",
    "delete_mileage_log",
    "parse_timestamp",
    "utc_now",
    "build_seed_data",
    "reset_fleet",
    "ensure_data_file",
]
