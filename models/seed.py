"""Sample fleet data used to reset the data file."""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .loader import format_timestamp, save_fleet_data, utc_now
from .service_types import SERVICE_DESCRIPTIONS, SERVICE_INTERVALS, ServiceType

# Electric vehicles skip oil, fluids, plugs and belts
EV_SERVICE_TYPES = [
    ServiceType.TIRE_ROTATION,
    ServiceType.BRAKE_INSPECTION,
    ServiceType.AIR_FILTER,
    ServiceType.WIPER_BLADES,
    ServiceType.BATTERY_REPLACEMENT,
]
EV_BATTERY_INTERVAL = (100000, 60)


def _schedules_for(make: str, model: str, service_types, overrides=None) -> List[Dict[str, Any]]:
    overrides = overrides or {}
    schedules = []
    for service_type in service_types:
        miles, months = overrides.get(service_type, SERVICE_INTERVALS[service_type])
        schedules.append(
            {
                "make": make,
                "model": model,
                "serviceType": service_type.value,
                "description": SERVICE_DESCRIPTIONS[service_type],
                "intervalMiles": miles,
                "intervalMonths": months,
            }
        )
    return schedules


def build_seed_data(now: Optional[datetime] = None) -> Dict[str, Any]:
    """Build the sample customers, vehicles, mileage logs and schedules."""
    now = now or utc_now()
    created = format_timestamp(now)

    def days_ago(days: int) -> str:
        return format_timestamp(now - timedelta(days=days))

    customers = [
        {
            "id": 1,
            "name": "John Smith",
            "email": "john.smith@example.com",
            "phone": "(555) 123-4567",
            "preferredReminderType": "email",
            "timezone": "America/New_York",
            "createdAt": created,
        },
        {
            "id": 2,
            "name": "Jane Doe",
            "email": "jane.doe@example.com",
            "phone": "(555) 987-6543",
            "preferredReminderType": "both",
            "timezone": "America/Los_Angeles",
            "createdAt": created,
        },
    ]
    vehicles = [
        {"id": 1, "vin": "1HGCM82633A123456", "make": "Honda", "model": "Accord",
         "year": 2020, "customerId": 1, "createdAt": created},
        {"id": 2, "vin": "JH4KA7660NC789012", "make": "Toyota", "model": "Camry",
         "year": 2021, "customerId": 2, "createdAt": created},
        {"id": 3, "vin": "5YJSA1E40FF345678", "make": "Tesla", "model": "Model S",
         "year": 2022, "customerId": 2, "createdAt": created},
    ]
    readings = [
        (1, 5000, days_ago(180)),
        (1, 10000, days_ago(90)),
        (1, 14500, created),
        (2, 3000, days_ago(120)),
        (2, 8000, created),
        (3, 2000, days_ago(60)),
        (3, 4500, created),
    ]
    mileage_logs = [
        {"id": i, "vehicleId": vehicle_id, "mileage": mileage, "loggedAt": logged_at}
        for i, (vehicle_id, mileage, logged_at) in enumerate(readings, start=1)
    ]

    schedules = (
        _schedules_for("Honda", "Accord", list(ServiceType))
        + _schedules_for("Toyota", "Camry", list(ServiceType))
        + _schedules_for(
            "Tesla",
            "Model S",
            EV_SERVICE_TYPES,
            overrides={ServiceType.BATTERY_REPLACEMENT: EV_BATTERY_INTERVAL},
        )
    )
    for i, schedule in enumerate(schedules, start=1):
        schedule["id"] = i

    return {
        "customers": customers,
        "vehicles": vehicles,
        "mileageLogs": mileage_logs,
        "serviceSchedules": schedules,
    }


def reset_fleet(filename: Union[str, Path], now: Optional[datetime] = None) -> Dict[str, int]:
    """Wipe the data file, reload the sample data and report what was created."""
    data = build_seed_data(now)
    save_fleet_data(filename, data)
    return {
        "customersCreated": len(data["customers"]),
        "vehiclesCreated": len(data["vehicles"]),
        "mileageLogsCreated": len(data["mileageLogs"]),
        "serviceSchedulesCreated": len(data["serviceSchedules"]),
    }


def ensure_data_file(filename: Union[str, Path]) -> bool:
    """Seed the data file if it does not exist yet. Returns True when seeded."""
    path = Path(filename)
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    reset_fleet(path)
    return True
