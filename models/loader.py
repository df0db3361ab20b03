"""YAML loading and saving utilities for fleet data."""

import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dateutil import parser as date_parser
from dateutil import tz

from .customer import Customer
from .fleet import Fleet
from .mileage_log import MileageLog
from .service_schedule import ServiceSchedule
from .vehicle import Vehicle

# Serializes read-modify-write cycles between request threads and the agent
_write_lock = threading.RLock()


class NotFoundError(LookupError):
    """A record with the requested id does not exist in the data file."""


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    parsed = value if isinstance(value, datetime) else date_parser.isoparse(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz.UTC)
    return parsed


def format_timestamp(value: datetime) -> str:
    return parse_timestamp(value).isoformat()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _optional_timestamp(value) -> Optional[str]:
    return format_timestamp(value) if value is not None else None


def _as_customer(dct: Dict[str, Any]) -> Customer:
    return Customer(
        dct["id"],
        dct["name"],
        dct["email"],
        dct["phone"],
        dct.get("preferredReminderType"),
        dct.get("timezone"),
        _optional_timestamp(dct.get("createdAt")),
    )


def _as_vehicle(dct: Dict[str, Any]) -> Vehicle:
    return Vehicle(
        dct["id"],
        dct["vin"],
        dct["make"],
        dct["model"],
        dct["year"],
        dct["customerId"],
        _optional_timestamp(dct.get("createdAt")),
    )


def _as_mileage_log(dct: Dict[str, Any]) -> MileageLog:
    return MileageLog(
        dct["id"],
        dct["vehicleId"],
        dct["mileage"],
        parse_timestamp(dct["loggedAt"]),
    )


def _as_schedule(dct: Dict[str, Any]) -> ServiceSchedule:
    return ServiceSchedule(
        dct["id"],
        dct["make"],
        dct["model"],
        dct["serviceType"],
        dct["intervalMiles"],
        dct["intervalMonths"],
        dct.get("description"),
    )


def _read_raw(filename: Union[str, Path]) -> Dict[str, Any]:
    with open(filename, "r") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader) or {}
    for key in ("customers", "vehicles", "mileageLogs", "serviceSchedules"):
        if data.get(key) is None:
            data[key] = []
    return data


def _write_raw(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    """Dump to a sibling temp file, then swap it into place."""
    path = Path(filename)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as fp:
            yaml.dump(
                data,
                fp,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
                width=120,
            )
        os.replace(tmp_name, path)
    except BaseException:
        os.unlink(tmp_name)
        raise


def _next_id(records: List[Dict[str, Any]]) -> int:
    return max((r["id"] for r in records), default=0) + 1


def _find(records: List[Dict[str, Any]], record_id: int, label: str) -> Dict[str, Any]:
    for record in records:
        if record["id"] == record_id:
            return record
    raise NotFoundError(f"{label} {record_id} not found")


def load_fleet(filename: Union[str, Path]) -> Fleet:
    """Load all fleet data from a YAML file."""
    data = _read_raw(filename)
    return Fleet(
        customers=[_as_customer(d) for d in data["customers"]],
        vehicles=[_as_vehicle(d) for d in data["vehicles"]],
        mileage_logs=[_as_mileage_log(d) for d in data["mileageLogs"]],
        schedules=[_as_schedule(d) for d in data["serviceSchedules"]],
    )


def save_fleet_data(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    """Replace the whole data file with raw (camelCase) fleet data."""
    with _write_lock:
        _write_raw(filename, data)


def create_vehicle(
    filename: Union[str, Path],
    vin: str,
    make: str,
    model: str,
    year: int,
    customer_id: int,
    created_at: Optional[datetime] = None,
) -> Vehicle:
    """Append a vehicle to the data file and return it with its new id."""
    with _write_lock:
        data = _read_raw(filename)
        entry = {
            "id": _next_id(data["vehicles"]),
            "vin": vin,
            "make": make,
            "model": model,
            "year": year,
            "customerId": customer_id,
            "createdAt": format_timestamp(created_at or utc_now()),
        }
        data["vehicles"].append(entry)
        _write_raw(filename, data)
    return _as_vehicle(entry)


def update_vehicle(
    filename: Union[str, Path],
    vehicle_id: int,
    make: Optional[str] = None,
    model: Optional[str] = None,
    year: Optional[int] = None,
    customer_id: Optional[int] = None,
) -> Vehicle:
    """
    Update vehicle fields in the data file.

    Only updates fields that are provided (non-None).
    """
    with _write_lock:
        data = _read_raw(filename)
        entry = _find(data["vehicles"], vehicle_id, "Vehicle")
        if make is not None:
            entry["make"] = make
        if model is not None:
            entry["model"] = model
        if year is not None:
            entry["year"] = year
        if customer_id is not None:
            entry["customerId"] = customer_id
        _write_raw(filename, data)
    return _as_vehicle(entry)


def delete_vehicle(filename: Union[str, Path], vehicle_id: int) -> None:
    """Remove a vehicle and its mileage logs from the data file."""
    with _write_lock:
        data = _read_raw(filename)
        entry = _find(data["vehicles"], vehicle_id, "Vehicle")
        data["vehicles"].remove(entry)
        data["mileageLogs"] = [
            log for log in data["mileageLogs"] if log["vehicleId"] != vehicle_id
        ]
        _write_raw(filename, data)


def add_mileage_log(
    filename: Union[str, Path],
    vehicle_id: int,
    mileage: int,
    logged_at: Optional[datetime] = None,
) -> MileageLog:
    """Append a mileage log to the data file and return it with its new id."""
    with _write_lock:
        data = _read_raw(filename)
        entry = {
            "id": _next_id(data["mileageLogs"]),
            "vehicleId": vehicle_id,
            "mileage": mileage,
            "loggedAt": format_timestamp(logged_at or utc_now()),
        }
        data["mileageLogs"].append(entry)
        _write_raw(filename, data)
    return _as_mileage_log(entry)


def update_mileage_log(
    filename: Union[str, Path],
    log_id: int,
    mileage: Optional[int] = None,
    logged_at: Optional[datetime] = None,
) -> MileageLog:
    """Replace the mileage and/or timestamp of an existing log."""
    with _write_lock:
        data = _read_raw(filename)
        entry = _find(data["mileageLogs"], log_id, "Mileage log")
        if mileage is not None:
            entry["mileage"] = mileage
        if logged_at is not None:
            entry["loggedAt"] = format_timestamp(logged_at)
        _write_raw(filename, data)
    return _as_mileage_log(entry)


def delete_mileage_log(filename: Union[str, Path], log_id: int) -> None:
    """Remove a mileage log from the data file."""
    with _write_lock:
        data = _read_raw(filename)
        entry = _find(data["mileageLogs"], log_id, "Mileage log")
        data["mileageLogs"].remove(entry)
        _write_raw(filename, data)
