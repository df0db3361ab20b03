#!/usr/bin/env python3
"""Tests for the Flask JSON API."""

from datetime import datetime, timedelta, timezone
from unittest import mock

import pytest

from config import AppConfig
from reminders import StubNotifier
from web.app import app


@pytest.fixture
def client(tmp_path):
    app.config["TESTING"] = True
    app.config["FLEET_CONFIG"] = AppConfig(data_file=tmp_path / "fleet.yaml")
    app.config["NOTIFIER"] = StubNotifier(1.0)
    with app.test_client() as client:
        yield client


def data_of(response):
    body = response.get_json()
    assert body["success"] is True
    return body["data"]


def error_of(response):
    body = response.get_json()
    assert body["success"] is False
    return body["error"]


# =============================================================================
# Vehicles
# =============================================================================


class TestVehicleEndpoints:
    """Tests for /api/vehicles."""

    def test_list_seeds_missing_data_file(self, client):
        response = client.get("/api/vehicles")
        assert response.status_code == 200
        data = data_of(response)
        assert data["total"] == 3
        assert [v["id"] for v in data["vehicles"]] == [3, 2, 1]

    def test_list_includes_owner_mileage_and_next_service(self, client):
        accord = data_of(client.get("/api/vehicles"))["vehicles"][2]
        assert accord["customer"] == {
            "id": 1,
            "name": "John Smith",
            "email": "john.smith@example.com",
            "phone": "(555) 123-4567",
        }
        assert accord["mileageLogs"][0]["mileage"] == 14500
        assert accord["nextService"] == {
            "type": "Oil Change",
            "dueInMiles": 500,
            "dueInDays": 10,
        }

    def test_list_by_customer(self, client):
        data = data_of(client.get("/api/vehicles?customerId=2"))
        assert [v["id"] for v in data["vehicles"]] == [3, 2]

    def test_list_bad_customer_id(self, client):
        response = client.get("/api/vehicles?customerId=abc")
        assert response.status_code == 400
        assert error_of(response) == "Invalid customerId"

    def test_get_missing(self, client):
        response = client.get("/api/vehicles/99")
        assert response.status_code == 404
        assert error_of(response) == "Vehicle not found"

    def test_create(self, client):
        response = client.post(
            "/api/vehicles",
            json={
                "vin": "2T1BURHE0JC000001",
                "make": "Toyota",
                "model": "Corolla",
                "year": 2018,
                "customerId": 1,
            },
        )
        assert response.status_code == 201
        assert data_of(response)["vehicle"]["id"] == 4
        assert data_of(client.get("/api/vehicles/4"))["vehicle"]["model"] == "Corolla"

    @pytest.mark.parametrize(
        "overrides, status, message",
        [
            ({"make": None}, 400, "Missing required fields"),
            ({"vin": "SHORT"}, 400, "Invalid VIN format"),
            ({"year": 1800}, 400, "Invalid year"),
            ({"customerId": 99}, 404, "Customer not found"),
            ({"vin": "1HGCM82633A123456"}, 409, "Vehicle with this VIN already exists"),
        ],
    )
    def test_create_rejections(self, client, overrides, status, message):
        body = {
            "vin": "2T1BURHE0JC000001",
            "make": "Toyota",
            "model": "Corolla",
            "year": 2018,
            "customerId": 1,
        }
        body.update(overrides)
        response = client.post("/api/vehicles", json=body)
        assert response.status_code == status
        assert error_of(response) == message

    def test_create_accepts_numeric_string_customer_id(self, client):
        response = client.post(
            "/api/vehicles",
            json={
                "vin": "2T1BURHE0JC000001",
                "make": "Toyota",
                "model": "Corolla",
                "year": 2018,
                "customerId": "1",
            },
        )
        assert response.status_code == 201
        assert data_of(response)["vehicle"]["customerId"] == 1

    def test_create_rejects_non_numeric_customer_id(self, client):
        response = client.post(
            "/api/vehicles",
            json={
                "vin": "2T1BURHE0JC000001",
                "make": "Toyota",
                "model": "Corolla",
                "year": 2018,
                "customerId": "one",
            },
        )
        assert response.status_code == 400
        assert error_of(response) == "Invalid customerId"

    def test_update(self, client):
        response = client.put("/api/vehicles/1", json={"model": "Civic"})
        assert response.status_code == 200
        vehicle = data_of(response)["vehicle"]
        assert vehicle["model"] == "Civic"
        assert vehicle["make"] == "Honda"

    def test_update_rejections(self, client):
        assert client.put("/api/vehicles/99", json={"model": "X"}).status_code == 404
        assert client.put("/api/vehicles/1", json={"year": 1800}).status_code == 400
        assert client.put("/api/vehicles/1", json={"customerId": 99}).status_code == 404

    def test_delete(self, client):
        response = client.delete("/api/vehicles/1")
        assert response.status_code == 200
        assert client.get("/api/vehicles/1").status_code == 404
        assert client.get("/api/mileage/1").status_code == 404
        assert client.delete("/api/vehicles/1").status_code == 404


# =============================================================================
# Mileage
# =============================================================================


class TestMileageEndpoints:
    """Tests for /api/mileage."""

    def test_log_mileage_returns_upcoming_services(self, client):
        response = client.post("/api/mileage", json={"vehicleId": 1, "mileage": 14800})
        assert response.status_code == 201
        data = data_of(response)
        assert data["mileageLog"]["mileage"] == 14800
        assert data["vehicle"]["id"] == 1
        assert data["upcomingServices"][0]["type"] == "Oil Change"
        assert data["upcomingServices"][0]["dueInMiles"] == 200

    def test_log_mileage_with_timestamp(self, client):
        response = client.post(
            "/api/mileage",
            json={"vehicleId": 3, "mileage": 5000, "loggedAt": "2030-01-01T08:00:00Z"},
        )
        assert data_of(response)["mileageLog"]["loggedAt"] == "2030-01-01T08:00:00+00:00"

    @pytest.mark.parametrize(
        "body, status, message",
        [
            ({"vehicleId": 1}, 400, "Missing required fields"),
            ({"vehicleId": 1, "mileage": -5}, 400, "Invalid mileage value"),
            ({"vehicleId": 1, "mileage": "lots"}, 400, "Invalid mileage value"),
            ({"vehicleId": 1, "mileage": 15000, "loggedAt": "soon"}, 400, "Invalid loggedAt timestamp"),
            ({"vehicleId": 99, "mileage": 15000}, 404, "Vehicle not found"),
            ({"vehicleId": 1, "mileage": 14500}, 400, "New mileage must be higher than previous mileage"),
        ],
    )
    def test_log_mileage_rejections(self, client, body, status, message):
        response = client.post("/api/mileage", json=body)
        assert response.status_code == status
        assert error_of(response) == message

    def test_log_mileage_numeric_string_vehicle_id(self, client):
        response = client.post("/api/mileage", json={"vehicleId": "1", "mileage": 14800})
        assert response.status_code == 201
        assert data_of(response)["mileageLog"]["vehicleId"] == 1

    @pytest.mark.parametrize("vehicle_id", ["abc", True, 1.5])
    def test_log_mileage_invalid_vehicle_id(self, client, vehicle_id):
        response = client.post("/api/mileage", json={"vehicleId": vehicle_id, "mileage": 14800})
        assert response.status_code == 400
        assert error_of(response) == "Invalid vehicleId"

    def test_log_backdated_mileage_between_neighbours(self, client):
        logged_at = datetime.now(timezone.utc) - timedelta(days=120)
        response = client.post(
            "/api/mileage",
            json={"vehicleId": 1, "mileage": 7000, "loggedAt": logged_at.isoformat()},
        )
        assert response.status_code == 201
        data = data_of(client.get("/api/mileage/1"))
        assert [log["mileage"] for log in data["mileageLogs"]] == [14500, 10000, 7000, 5000]

    def test_log_backdated_mileage_must_stay_below_next(self, client):
        logged_at = datetime.now(timezone.utc) - timedelta(days=120)
        response = client.post(
            "/api/mileage",
            json={"vehicleId": 1, "mileage": 12000, "loggedAt": logged_at.isoformat()},
        )
        assert response.status_code == 400
        assert error_of(response) == "New mileage must be lower than next log"
        assert len(data_of(client.get("/api/mileage/1"))["mileageLogs"]) == 3

    def test_history_newest_first(self, client):
        data = data_of(client.get("/api/mileage/1"))
        assert [log["mileage"] for log in data["mileageLogs"]] == [14500, 10000, 5000]
        assert data["vehicle"]["make"] == "Honda"

    def test_update_between_neighbours(self, client):
        response = client.put("/api/mileage/2", json={"mileage": 12000})
        assert response.status_code == 200
        assert data_of(response)["mileageLog"]["mileage"] == 12000

    def test_update_must_stay_below_next(self, client):
        response = client.put("/api/mileage/2", json={"mileage": 15000})
        assert response.status_code == 400
        assert error_of(response) == "Mileage must be lower than next log"

    def test_update_must_stay_above_previous(self, client):
        response = client.put("/api/mileage/2", json={"mileage": 4000})
        assert response.status_code == 400
        assert error_of(response) == "Mileage must be higher than previous log"

    def test_update_missing(self, client):
        assert client.put("/api/mileage/99", json={"mileage": 1}).status_code == 404

    def test_delete(self, client):
        assert client.delete("/api/mileage/3").status_code == 200
        data = data_of(client.get("/api/mileage/1"))
        assert [log["mileage"] for log in data["mileageLogs"]] == [10000, 5000]
        assert client.delete("/api/mileage/3").status_code == 404


# =============================================================================
# Reminders, notifications and settings
# =============================================================================


class TestReminderEndpoints:
    """Tests for /api/reminders and /api/notify."""

    def test_preview_all(self, client):
        data = data_of(client.get("/api/reminders"))
        assert data["total"] == 1
        assert data["reminders"][0]["vehicle"] == "2020 Honda Accord"

    def test_preview_filtered(self, client):
        assert data_of(client.get("/api/reminders?vehicleId=2"))["total"] == 0
        assert data_of(client.get("/api/reminders?customerId=1"))["total"] == 1

    def test_vehicle_reminders(self, client):
        assert data_of(client.get("/api/reminders/vehicle/1"))["total"] == 1
        assert client.get("/api/reminders/vehicle/99").status_code == 404

    def test_customer_reminders(self, client):
        assert data_of(client.get("/api/reminders/customer/2"))["total"] == 0
        response = client.get("/api/reminders/customer/99")
        assert response.status_code == 404
        assert error_of(response) == "Customer not found"

    def test_notify_requires_target(self, client):
        response = client.post("/api/notify", json={})
        assert response.status_code == 400
        assert error_of(response) == "Either customerId or vehicleId is required"

    def test_notify_rejects_unknown_type(self, client):
        response = client.post(
            "/api/notify", json={"customerId": 1, "notificationTypes": ["fax"]}
        )
        assert response.status_code == 400

    def test_notify_customer(self, client):
        data = data_of(client.post("/api/notify", json={"customerId": 1}))
        assert data["notificationsSent"] == 2
        assert data["successful"]["email"] == ["john.smith@example.com"]
        assert data["reminders"][0]["actions"]["emailSent"] is True

    def test_notify_selected_types(self, client):
        data = data_of(
            client.post("/api/notify", json={"vehicleId": 1, "notificationTypes": ["email"]})
        )
        assert data["notificationsSent"] == 1
        assert data["successful"]["calendar"] == []

    def test_notify_numeric_string_customer_id(self, client):
        data = data_of(client.post("/api/notify", json={"customerId": "1"}))
        assert data["notificationsSent"] == 2

    def test_reset(self, client):
        client.delete("/api/vehicles/1")
        data = data_of(client.post("/api/settings/reset"))
        assert data["vehiclesCreated"] == 3
        assert data["serviceSchedulesCreated"] == 25
        assert client.get("/api/vehicles/1").status_code == 200


class TestErrorHandling:
    """Tests for error envelopes."""

    def test_unknown_route(self, client):
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert error_of(response) == "Not Found - /api/nope"

    def test_method_not_allowed(self, client):
        response = client.patch("/api/vehicles")
        assert response.status_code == 405
        error_of(response)

    def test_unexpected_error_shows_message_in_development(self, client):
        with mock.patch("web.app.get_fleet", side_effect=RuntimeError("boom")):
            response = client.get("/api/vehicles")
        assert response.status_code == 500
        assert error_of(response) == "boom"

    def test_unexpected_error_hidden_in_production(self, client, tmp_path):
        app.config["FLEET_CONFIG"] = AppConfig(
            data_file=tmp_path / "fleet.yaml", app_env="production"
        )
        with mock.patch("web.app.get_fleet", side_effect=RuntimeError("boom")):
            response = client.get("/api/vehicles")
        assert response.status_code == 500
        assert error_of(response) == "Internal Server Error"
