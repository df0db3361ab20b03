"""Flask JSON API for fleet service reminders."""

import logging
from pathlib import Path

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

# Add parent directory to path for model imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import load_config, setup_logging
from models import (
    NotFoundError,
    add_mileage_log,
    create_vehicle,
    delete_mileage_log,
    delete_vehicle,
    ensure_data_file,
    load_fleet,
    parse_timestamp,
    reset_fleet,
    update_mileage_log,
    update_vehicle,
    utc_now,
)
from models.validators import is_valid_mileage, is_valid_vin, is_valid_year
from reminders import (
    NOTIFICATION_TYPES,
    StubNotifier,
    collect_reminders,
    send_notifications,
    start_reminder_agent,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)
_config = load_config()
app.secret_key = _config.secret_key
app.config["FLEET_CONFIG"] = _config
app.config["NOTIFIER"] = StubNotifier(_config.notifications.success_rate)


class ApiError(Exception):
    """Request failed validation; rendered as an error envelope."""

    def __init__(self, message: str, status: int = 400):
        super().__init__(message)
        self.message = message
        self.status = status


def fleet_config():
    return app.config["FLEET_CONFIG"]


def data_file() -> Path:
    path = fleet_config().data_file
    ensure_data_file(path)
    return path


def get_fleet():
    return load_fleet(data_file())


def ok(data, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def fail(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def query_int(name: str):
    """Optional integer query parameter."""
    value = request.args.get(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ApiError(f"Invalid {name}")


def body_id(body: dict, key: str):
    """Optional integer id from a JSON body; numeric strings are accepted."""
    value = body.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ApiError(f"Invalid {key}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise ApiError(f"Invalid {key}")


def body_timestamp(body: dict, key: str = "loggedAt"):
    value = body.get(key)
    if not value:
        return None
    try:
        return parse_timestamp(value)
    except (ValueError, OverflowError):
        raise ApiError(f"Invalid {key} timestamp")


def vehicle_payload(fleet, vehicle) -> dict:
    """Vehicle with its owner, latest mileage log and most urgent service."""
    payload = vehicle.to_dict()
    customer = fleet.get_customer(vehicle.customer_id)
    payload["customer"] = (
        {k: v for k, v in customer.to_dict().items() if k in ("id", "name", "email", "phone")}
        if customer
        else None
    )
    latest = fleet.latest_log(vehicle.id)
    payload["mileageLogs"] = [latest.to_dict()] if latest else []
    payload["nextService"] = None
    if latest:
        cfg = fleet_config().reminders
        upcoming = fleet.upcoming_services(
            vehicle, latest.mileage, cfg.upcoming_miles, cfg.upcoming_days
        )
        if upcoming:
            payload["nextService"] = upcoming[0].to_dict()
    return payload


def upcoming_payload(fleet, vehicle, mileage: int) -> list:
    cfg = fleet_config().reminders
    return [
        svc.to_dict()
        for svc in fleet.upcoming_services(vehicle, mileage, cfg.upcoming_miles, cfg.upcoming_days)
    ]


@app.errorhandler(ApiError)
def handle_api_error(e: ApiError):
    return fail(e.message, e.status)


@app.errorhandler(NotFoundError)
def handle_not_found_record(e: NotFoundError):
    return fail(str(e), 404)


@app.errorhandler(HTTPException)
def handle_http_error(e: HTTPException):
    if e.code == 404:
        return fail(f"Not Found - {request.path}", 404)
    return fail(e.description or e.name, e.code or 500)


@app.errorhandler(Exception)
def handle_unexpected_error(e: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    message = "Internal Server Error" if fleet_config().is_production else str(e)
    return fail(message, 500)


# =============================================================================
# Vehicles
# =============================================================================


@app.route("/api/vehicles", methods=["GET"])
def list_vehicles():
    """All vehicles, or one customer's, newest first."""
    fleet = get_fleet()
    vehicles = fleet.find_vehicles(customer_id=query_int("customerId"))
    payloads = [vehicle_payload(fleet, v) for v in vehicles]
    return ok({"vehicles": payloads, "total": len(payloads)})


@app.route("/api/vehicles/<int:vehicle_id>", methods=["GET"])
def get_vehicle(vehicle_id: int):
    fleet = get_fleet()
    vehicle = fleet.get_vehicle(vehicle_id)
    if vehicle is None:
        return fail("Vehicle not found", 404)
    return ok({"vehicle": vehicle_payload(fleet, vehicle)})


@app.route("/api/vehicles", methods=["POST"])
def add_vehicle():
    body = json_body()
    vin = body.get("vin")
    make = body.get("make")
    model = body.get("model")
    year = body.get("year")
    customer_id = body_id(body, "customerId")

    if not all([vin, make, model, year, customer_id]):
        return fail("Missing required fields", 400)
    if not is_valid_vin(vin):
        return fail("Invalid VIN format", 400)
    if not is_valid_year(year):
        return fail("Invalid year", 400)

    fleet = get_fleet()
    if fleet.get_customer(customer_id) is None:
        return fail("Customer not found", 404)
    if fleet.get_vehicle_by_vin(vin) is not None:
        return fail("Vehicle with this VIN already exists", 409)

    vehicle = create_vehicle(data_file(), vin, make, model, year, customer_id)
    logger.info("Created vehicle %d (%s)", vehicle.id, vehicle.name)
    return ok({"vehicle": vehicle.to_dict()}, 201)


@app.route("/api/vehicles/<int:vehicle_id>", methods=["PUT"])
def edit_vehicle(vehicle_id: int):
    body = json_body()
    fleet = get_fleet()
    if fleet.get_vehicle(vehicle_id) is None:
        return fail("Vehicle not found", 404)

    year = body.get("year")
    customer_id = body_id(body, "customerId")
    if year and not is_valid_year(year):
        return fail("Invalid year", 400)
    if customer_id and fleet.get_customer(customer_id) is None:
        return fail("Customer not found", 404)

    update_vehicle(
        data_file(),
        vehicle_id,
        make=body.get("make") or None,
        model=body.get("model") or None,
        year=year or None,
        customer_id=customer_id or None,
    )
    fleet = get_fleet()
    return ok({"vehicle": vehicle_payload(fleet, fleet.get_vehicle(vehicle_id))})


@app.route("/api/vehicles/<int:vehicle_id>", methods=["DELETE"])
def remove_vehicle(vehicle_id: int):
    if get_fleet().get_vehicle(vehicle_id) is None:
        return fail("Vehicle not found", 404)
    delete_vehicle(data_file(), vehicle_id)
    return ok({"message": "Vehicle deleted successfully"})


# =============================================================================
# Mileage
# =============================================================================


@app.route("/api/mileage", methods=["POST"])
def log_mileage():
    """Record an odometer reading and return what is now coming due."""
    body = json_body()
    vehicle_id = body_id(body, "vehicleId")
    mileage = body.get("mileage")

    if not vehicle_id or mileage is None:
        return fail("Missing required fields", 400)
    if not is_valid_mileage(mileage):
        return fail("Invalid mileage value", 400)
    logged_at = body_timestamp(body)

    fleet = get_fleet()
    vehicle = fleet.get_vehicle(vehicle_id)
    if vehicle is None:
        return fail("Vehicle not found", 404)

    previous, following = fleet.neighbouring_logs(vehicle_id, logged_at or utc_now())
    if previous and previous.mileage >= mileage:
        return fail("New mileage must be higher than previous mileage", 400)
    if following and following.mileage <= mileage:
        return fail("New mileage must be lower than next log", 400)

    log = add_mileage_log(data_file(), vehicle_id, mileage, logged_at)
    fleet = get_fleet()
    return ok(
        {
            "mileageLog": log.to_dict(),
            "vehicle": vehicle.to_dict(),
            "upcomingServices": upcoming_payload(fleet, vehicle, mileage),
        },
        201,
    )


@app.route("/api/mileage/<int:vehicle_id>", methods=["GET"])
def mileage_history(vehicle_id: int):
    fleet = get_fleet()
    vehicle = fleet.get_vehicle(vehicle_id)
    if vehicle is None:
        return fail("Vehicle not found", 404)
    logs = [log.to_dict() for log in fleet.logs_for_vehicle(vehicle_id)]
    return ok({"mileageLogs": logs, "vehicle": vehicle.to_dict()})


@app.route("/api/mileage/<int:log_id>", methods=["PUT"])
def edit_mileage_log(log_id: int):
    """Correct a reading; it must stay between its chronological neighbours."""
    body = json_body()
    fleet = get_fleet()
    log = fleet.get_mileage_log(log_id)
    if log is None:
        return fail("Mileage log not found", 404)

    mileage = body.get("mileage")
    if mileage is not None and not is_valid_mileage(mileage):
        return fail("Invalid mileage value", 400)
    logged_at = body_timestamp(body)

    vehicle = fleet.get_vehicle(log.vehicle_id)
    if vehicle is None:
        return fail("Vehicle not found", 404)

    new_mileage = mileage if mileage is not None else log.mileage
    previous, following = fleet.neighbouring_logs(
        vehicle.id, logged_at or log.logged_at, exclude_id=log_id
    )

    if previous and previous.mileage >= new_mileage:
        return fail("Mileage must be higher than previous log", 400)
    if following and following.mileage <= new_mileage:
        return fail("Mileage must be lower than next log", 400)

    updated = update_mileage_log(data_file(), log_id, mileage, logged_at)
    fleet = get_fleet()
    return ok(
        {
            "mileageLog": updated.to_dict(),
            "vehicle": vehicle.to_dict(),
            "upcomingServices": upcoming_payload(fleet, vehicle, updated.mileage),
        }
    )


@app.route("/api/mileage/<int:log_id>", methods=["DELETE"])
def remove_mileage_log(log_id: int):
    if get_fleet().get_mileage_log(log_id) is None:
        return fail("Mileage log not found", 404)
    delete_mileage_log(data_file(), log_id)
    return ok({"message": "Mileage log deleted successfully"})


# =============================================================================
# Reminders and notifications
# =============================================================================


def reminders_response(fleet, vehicles):
    reminders = collect_reminders(fleet, vehicles, fleet_config().reminders)
    return ok({"reminders": [r.to_dict() for r in reminders], "total": len(reminders)})


@app.route("/api/reminders", methods=["GET"])
def preview_reminders():
    """Preview reminders, optionally filtered by customer and/or vehicle."""
    fleet = get_fleet()
    vehicles = fleet.find_vehicles(
        customer_id=query_int("customerId"), vehicle_id=query_int("vehicleId")
    )
    return reminders_response(fleet, vehicles)


@app.route("/api/reminders/vehicle/<int:vehicle_id>", methods=["GET"])
def vehicle_reminders(vehicle_id: int):
    fleet = get_fleet()
    vehicle = fleet.get_vehicle(vehicle_id)
    if vehicle is None:
        return fail("Vehicle not found", 404)
    return reminders_response(fleet, [vehicle])


@app.route("/api/reminders/customer/<int:customer_id>", methods=["GET"])
def customer_reminders(customer_id: int):
    fleet = get_fleet()
    if fleet.get_customer(customer_id) is None:
        return fail("Customer not found", 404)
    return reminders_response(fleet, fleet.find_vehicles(customer_id=customer_id))


@app.route("/api/notify", methods=["POST"])
def notify():
    """Manually trigger email/SMS/calendar reminders."""
    body = json_body()
    customer_id = body_id(body, "customerId")
    vehicle_id = body_id(body, "vehicleId")
    if not customer_id and not vehicle_id:
        return fail("Either customerId or vehicleId is required", 400)

    types = body.get("notificationTypes") or list(NOTIFICATION_TYPES)
    if not isinstance(types, list) or any(t not in NOTIFICATION_TYPES for t in types):
        return fail("Invalid notification type", 400)

    cfg = fleet_config()
    fleet = get_fleet()
    vehicles = fleet.find_vehicles(customer_id=customer_id or None, vehicle_id=vehicle_id or None)
    result = send_notifications(
        fleet,
        vehicles,
        app.config["NOTIFIER"],
        notification_types=types,
        notification_config=cfg.notifications,
        reminder_config=cfg.reminders,
    )
    return ok(result.to_dict())


# =============================================================================
# Settings
# =============================================================================


@app.route("/api/settings/reset", methods=["POST"])
def reset_data():
    """Wipe the data file and reload the sample fleet."""
    counts = reset_fleet(fleet_config().data_file)
    logger.info("Data reset: %s", counts)
    return ok({"success": True, **counts})


if __name__ == "__main__":
    setup_logging(_config.log_level)
    start_reminder_agent(_config)
    app.run(debug=not _config.is_production, host="0.0.0.0", port=_config.port, use_reloader=False)
