#!/usr/bin/env python3
"""Tests for the fleet CLI formatting helpers and commands."""

from datetime import datetime, timedelta, timezone

import pytest

from fleet import (
    format_channels,
    format_logged_at,
    format_miles,
    format_next_service,
    main,
    make_mileage_table,
    make_upcoming_table,
)
from models import MileageLog, UpcomingService, load_fleet, reset_fleet

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "fleet.yaml"
    reset_fleet(path, now=NOW)
    return path


# =============================================================================
# Formatting helpers
# =============================================================================


class TestFormatHelpers:
    """Tests for CLI formatting helpers."""

    def test_format_miles(self):
        assert format_miles(14500) == "14,500"
        assert format_miles(None) == "-"

    def test_format_logged_at(self):
        assert format_logged_at(NOW) == "2024-06-01 12:00"
        assert format_logged_at(None) == "-"

    def test_format_next_service(self):
        svc = UpcomingService("Oil Change", 500, 17)
        assert format_next_service(svc) == "Oil Change (Due in 2 weeks)"
        assert format_next_service(None) == "-"

    def test_format_channels(self):
        assert format_channels(["a@example.com", "b@example.com"]) == "a@example.com, b@example.com"
        assert format_channels([]) == "-"


class TestTables:
    """Tests for table row builders."""

    def test_mileage_table_shows_miles_driven(self):
        logs = [
            MileageLog(2, 1, 10000, NOW),
            MileageLog(1, 1, 5000, NOW - timedelta(days=90)),
        ]
        rows = make_mileage_table(logs)
        assert rows[0] == [2, "2024-06-01 12:00", "10,000", "5,000"]
        assert rows[1][3] == "-"

    def test_upcoming_table(self):
        rows = make_upcoming_table([UpcomingService("Oil Change", 500, 10)])
        assert rows == [["Oil Change", "500", 10, "UPCOMING"]]


# =============================================================================
# Commands
# =============================================================================


class TestCommands:
    """Tests for CLI commands run through main()."""

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.yaml"), "vehicles"]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_vehicles(self, data_file, capsys):
        assert main([str(data_file), "vehicles"]) == 0
        out = capsys.readouterr().out
        assert "Vehicles: 3" in out
        assert "2020 Honda Accord" in out
        assert "1HG-CM82633-A123456" in out
        assert "Oil Change (Due in 1 weeks)" in out

    def test_vehicles_for_customer(self, data_file, capsys):
        assert main([str(data_file), "vehicles", "--customer", "1"]) == 0
        out = capsys.readouterr().out
        assert "Vehicles: 1" in out
        assert "Camry" not in out

    def test_mileage(self, data_file, capsys):
        assert main([str(data_file), "mileage", "1"]) == 0
        out = capsys.readouterr().out
        assert "Mileage logs: 3" in out
        assert "14,500" in out

    def test_mileage_unknown_vehicle(self, data_file, capsys):
        assert main([str(data_file), "mileage", "99"]) == 1
        assert "Vehicle 99 not found" in capsys.readouterr().out

    def test_log_mileage(self, data_file, capsys):
        assert main([str(data_file), "log-mileage", "1", "14800"]) == 0
        out = capsys.readouterr().out
        assert "Mileage logged." in out
        assert "UPCOMING SERVICES:" in out
        assert load_fleet(data_file).current_mileage(1) == 14800

    def test_log_mileage_dry_run(self, data_file, capsys):
        assert main([str(data_file), "log-mileage", "1", "14800", "--dry-run"]) == 0
        assert "dry run" in capsys.readouterr().out
        assert load_fleet(data_file).current_mileage(1) == 14500

    def test_log_mileage_must_increase(self, data_file, capsys):
        assert main([str(data_file), "log-mileage", "1", "14000"]) == 1
        assert "must be higher" in capsys.readouterr().out

    def test_log_backdated_mileage(self, data_file, capsys):
        assert main([str(data_file), "log-mileage", "1", "7000", "--date", "2024-02-01"]) == 0
        logs = load_fleet(data_file).logs_for_vehicle(1)
        assert [log.mileage for log in logs] == [14500, 10000, 7000, 5000]

    def test_log_backdated_mileage_must_stay_below_next(self, data_file, capsys):
        assert main([str(data_file), "log-mileage", "1", "12000", "--date", "2024-02-01"]) == 1
        assert "must be lower than next logged mileage (10,000)" in capsys.readouterr().out
        assert len(load_fleet(data_file).logs_for_vehicle(1)) == 3

    def test_reminders(self, data_file, capsys):
        assert main([str(data_file), "reminders"]) == 0
        out = capsys.readouterr().out
        assert "Reminders: 1" in out
        assert "2020 Honda Accord (John Smith):" in out

    def test_notify_requires_target(self, data_file, capsys):
        assert main([str(data_file), "notify"]) == 1
        assert "--customer or --vehicle" in capsys.readouterr().out

    def test_notify_dry_run(self, data_file, capsys):
        assert main([str(data_file), "notify", "--customer", "1", "--dry-run"]) == 0
        out = capsys.readouterr().out
        assert "Would notify 1 vehicle owner(s) via email, sms, calendar" in out

    def test_notify(self, data_file, capsys, monkeypatch):
        monkeypatch.setenv("NOTIFICATION_SUCCESS_RATE", "1")
        assert main([str(data_file), "notify", "--vehicle", "1", "--type", "email"]) == 0
        out = capsys.readouterr().out
        assert "Notifications sent: 1" in out
        assert "john.smith@example.com" in out

    def test_reset_creates_file(self, tmp_path, capsys):
        path = tmp_path / "new.yaml"
        assert main([str(path), "reset"]) == 0
        assert "vehiclesCreated: 3" in capsys.readouterr().out
        assert len(load_fleet(path).vehicles) == 3

    def test_agent_once(self, data_file, capsys, monkeypatch):
        monkeypatch.setenv("NOTIFICATION_SUCCESS_RATE", "1")
        assert main([str(data_file), "agent", "--once"]) == 0
        assert "Sent 2 reminders." in capsys.readouterr().out
