#!/usr/bin/env python3
"""
Unified CLI for fleet service reminders.

Commands:
  vehicles     - List vehicles with their latest mileage and next service
  mileage      - View a vehicle's mileage history
  log-mileage  - Record a new odometer reading
  reminders    - Preview upcoming service reminders
  notify       - Send reminders over email, SMS and calendar
  reset        - Replace the data file with the sample fleet
  agent        - Run the daily reminder agent
"""

import argparse
import dataclasses
import sys
from datetime import datetime
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from apscheduler.schedulers.blocking import BlockingScheduler

from config import load_config, setup_logging
from models import (
    Fleet,
    MileageLog,
    UpcomingService,
    add_mileage_log,
    load_fleet,
    parse_timestamp,
    reset_fleet,
    utc_now,
)
from models.formatters import format_mileage, format_service_due, format_vin
from models.validators import is_valid_mileage
from reminders import (
    NOTIFICATION_TYPES,
    StubNotifier,
    check_and_send_reminders,
    collect_reminders,
    send_notifications,
    start_reminder_agent,
)

# =============================================================================
# Formatting helpers
# =============================================================================


def format_miles(miles: Optional[float]) -> str:
    """Format mileage for display."""
    return f"{miles:,.0f}" if miles is not None else "-"


def format_logged_at(logged_at: Optional[datetime]) -> str:
    """Format a log timestamp as local date and time."""
    if logged_at is None:
        return "-"
    return logged_at.strftime("%Y-%m-%d %H:%M")


def format_next_service(svc: Optional[UpcomingService]) -> str:
    """Format e.g. 'Oil Change (Due in 2 weeks)'."""
    if svc is None:
        return "-"
    return f"{svc.type} ({format_service_due(svc.due_in_miles, svc.due_in_days)})"


def format_channels(sent: List[str]) -> str:
    return ", ".join(sent) if sent else "-"


# =============================================================================
# Vehicles command
# =============================================================================


def make_vehicle_table(fleet: Fleet, vehicles, reminder_config) -> List[List[str]]:
    """Convert vehicles to table rows."""
    rows = []
    for vehicle in vehicles:
        customer = fleet.get_customer(vehicle.customer_id)
        mileage = fleet.current_mileage(vehicle.id)
        next_service = None
        if mileage is not None:
            upcoming = fleet.upcoming_services(
                vehicle, mileage, reminder_config.upcoming_miles, reminder_config.upcoming_days
            )
            next_service = upcoming[0] if upcoming else None
        rows.append(
            [
                vehicle.id,
                vehicle.name,
                format_vin(vehicle.vin),
                customer.name if customer else "-",
                format_mileage(mileage),
                format_next_service(next_service),
            ]
        )
    return rows


def cmd_vehicles(args, config):
    """List vehicles with their latest mileage and next service."""
    fleet = load_fleet(args.data_file)
    vehicles = fleet.find_vehicles(customer_id=args.customer)

    print(f"Vehicles: {len(vehicles)}")
    print()
    if not vehicles:
        print("No vehicles found.")
        return 0

    headers = ["ID", "Vehicle", "VIN", "Owner", "Mileage", "Next Service"]
    print(
        tabulate(
            make_vehicle_table(fleet, vehicles, config.reminders),
            headers=headers,
            tablefmt="simple",
        )
    )
    return 0


# =============================================================================
# Mileage command
# =============================================================================


def make_mileage_table(logs: List[MileageLog]) -> List[List[str]]:
    """Convert mileage logs to table rows, with miles driven since the previous one."""
    rows = []
    for i, log in enumerate(logs):
        older = logs[i + 1] if i + 1 < len(logs) else None
        driven = log.mileage - older.mileage if older else None
        rows.append([log.id, format_logged_at(log.logged_at), format_miles(log.mileage), format_miles(driven)])
    return rows


def cmd_mileage(args, config):
    """View a vehicle's mileage history."""
    fleet = load_fleet(args.data_file)
    vehicle = fleet.get_vehicle(args.vehicle_id)
    if vehicle is None:
        print(f"Error: Vehicle {args.vehicle_id} not found")
        return 1

    logs = fleet.logs_for_vehicle(vehicle.id)
    print(f"Vehicle: {vehicle.name}")
    print(f"Mileage logs: {len(logs)}")
    print()

    if not logs:
        print("No mileage logs found.")
        return 0

    headers = ["ID", "Logged At", "Mileage", "Driven"]
    print(tabulate(make_mileage_table(logs), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Log Mileage command
# =============================================================================


def make_upcoming_table(services: List[UpcomingService]) -> List[List[str]]:
    """Convert upcoming services to table rows."""
    return [
        [
            svc.type,
            format_miles(svc.due_in_miles),
            svc.due_in_days,
            svc.urgency.value.upper(),
        ]
        for svc in services
    ]


UPCOMING_HEADERS = ["Service", "Due In (mi)", "Due In (days)", "Urgency"]


def cmd_log_mileage(args, config):
    """Record a new odometer reading."""
    fleet = load_fleet(args.data_file)
    vehicle = fleet.get_vehicle(args.vehicle_id)
    if vehicle is None:
        print(f"Error: Vehicle {args.vehicle_id} not found")
        return 1
    if not is_valid_mileage(args.mileage):
        print(f"Error: Invalid mileage value: {args.mileage}")
        return 1

    logged_at = None
    if args.date:
        try:
            logged_at = parse_timestamp(args.date)
        except ValueError:
            print(f"Error: Invalid date: {args.date}")
            return 1

    previous, following = fleet.neighbouring_logs(vehicle.id, logged_at or utc_now())
    if previous and previous.mileage >= args.mileage:
        print(
            f"Error: New mileage must be higher than previous mileage "
            f"({previous.mileage:,})"
        )
        return 1
    if following and following.mileage <= args.mileage:
        print(
            f"Error: New mileage must be lower than next logged mileage "
            f"({following.mileage:,})"
        )
        return 1

    print(f"Vehicle: {vehicle.name}")
    print(f"Previous mileage: {format_mileage(previous.mileage if previous else None)}")
    print(f"New mileage:      {format_mileage(args.mileage)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    add_mileage_log(args.data_file, vehicle.id, args.mileage, logged_at)
    print("Mileage logged.")

    fleet = load_fleet(args.data_file)
    upcoming = fleet.upcoming_services(
        vehicle, args.mileage, config.reminders.upcoming_miles, config.reminders.upcoming_days
    )
    if upcoming:
        print()
        print("UPCOMING SERVICES:")
        print(tabulate(make_upcoming_table(upcoming), headers=UPCOMING_HEADERS, tablefmt="simple"))
    return 0


# =============================================================================
# Reminders command
# =============================================================================


def cmd_reminders(args, config):
    """Preview upcoming service reminders."""
    fleet = load_fleet(args.data_file)
    vehicles = fleet.find_vehicles(customer_id=args.customer, vehicle_id=args.vehicle)
    reminders = collect_reminders(fleet, vehicles, config.reminders)

    print(f"Reminders: {len(reminders)}")
    print()
    if not reminders:
        print("No services coming due.")
        return 0

    for reminder in reminders:
        print(f"{reminder.vehicle} ({reminder.customer}):")
        print(
            tabulate(
                make_upcoming_table(reminder.upcoming_services),
                headers=UPCOMING_HEADERS,
                tablefmt="simple",
            )
        )
        print()
    return 0


# =============================================================================
# Notify command
# =============================================================================


def cmd_notify(args, config):
    """Send reminders over email, SMS and calendar."""
    if args.customer is None and args.vehicle is None:
        print("Error: Either --customer or --vehicle is required")
        return 1

    fleet = load_fleet(args.data_file)
    vehicles = fleet.find_vehicles(customer_id=args.customer, vehicle_id=args.vehicle)
    types = args.type or list(NOTIFICATION_TYPES)

    if args.dry_run:
        reminders = collect_reminders(fleet, vehicles, config.reminders)
        print(f"Would notify {len(reminders)} vehicle owner(s) via {', '.join(types)}")
        print("(dry run - nothing sent)")
        return 0

    result = send_notifications(
        fleet,
        vehicles,
        StubNotifier(config.notifications.success_rate),
        notification_types=types,
        notification_config=config.notifications,
        reminder_config=config.reminders,
    )

    rows = [
        [channel, format_channels(result.successful[channel]), format_channels(result.failed[channel])]
        for channel in NOTIFICATION_TYPES
    ]
    print(f"Notifications sent: {result.notifications_sent}")
    print()
    print(tabulate(rows, headers=["Channel", "Sent", "Failed"], tablefmt="simple"))
    return 0


# =============================================================================
# Reset command
# =============================================================================


def cmd_reset(args, config):
    """Replace the data file with the sample fleet."""
    if args.dry_run:
        print(f"Would reset {args.data_file} to sample data")
        print("(dry run - no changes made)")
        return 0

    counts = reset_fleet(args.data_file)
    print(f"Reset {args.data_file}:")
    for key, value in counts.items():
        print(f"  {key}: {value}")
    return 0


# =============================================================================
# Agent command
# =============================================================================


def cmd_agent(args, config):
    """Run the reminder agent once, or daily until interrupted."""
    if args.once:
        sent = check_and_send_reminders(config=config)
        print(f"Sent {sent} reminders.")
        return 0

    scheduler = BlockingScheduler(
        job_defaults={"coalesce": True, "max_instances": 1, "misfire_grace_time": 3600}
    )
    try:
        start_reminder_agent(config, scheduler)
    except (KeyboardInterrupt, SystemExit):
        print("Reminder agent stopped.")
    return 0


# =============================================================================
# Main
# =============================================================================


COMMANDS = {
    "vehicles": cmd_vehicles,
    "mileage": cmd_mileage,
    "log-mileage": cmd_log_mileage,
    "reminders": cmd_reminders,
    "notify": cmd_notify,
    "reset": cmd_reset,
    "agent": cmd_agent,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fleet service reminders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/fleet.yaml vehicles
  %(prog)s data/fleet.yaml vehicles --customer 2
  %(prog)s data/fleet.yaml mileage 1
  %(prog)s data/fleet.yaml log-mileage 1 15200 --date 2024-06-01
  %(prog)s data/fleet.yaml reminders --vehicle 1
  %(prog)s data/fleet.yaml notify --customer 2 --type email --type sms
  %(prog)s data/fleet.yaml reset
  %(prog)s data/fleet.yaml agent --once
""",
    )
    parser.add_argument(
        "data_file",
        type=Path,
        help="Path to fleet YAML data file",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Vehicles subcommand
    vehicles_parser = subparsers.add_parser(
        "vehicles", help="List vehicles with their latest mileage and next service"
    )
    vehicles_parser.add_argument("--customer", type=int, help="Only this customer's vehicles")

    # Mileage subcommand
    mileage_parser = subparsers.add_parser("mileage", help="View a vehicle's mileage history")
    mileage_parser.add_argument("vehicle_id", type=int, help="Vehicle ID")

    # Log Mileage subcommand
    log_parser = subparsers.add_parser("log-mileage", help="Record a new odometer reading")
    log_parser.add_argument("vehicle_id", type=int, help="Vehicle ID")
    log_parser.add_argument("mileage", type=int, help="Current odometer reading")
    log_parser.add_argument(
        "--date",
        type=str,
        help="Reading timestamp in ISO-8601 format (default: now)",
    )
    log_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be logged without saving",
    )

    # Reminders subcommand
    reminders_parser = subparsers.add_parser("reminders", help="Preview upcoming service reminders")
    reminders_parser.add_argument("--customer", type=int, help="Filter by customer ID")
    reminders_parser.add_argument("--vehicle", type=int, help="Filter by vehicle ID")

    # Notify subcommand
    notify_parser = subparsers.add_parser("notify", help="Send reminders to vehicle owners")
    notify_parser.add_argument("--customer", type=int, help="Notify this customer")
    notify_parser.add_argument("--vehicle", type=int, help="Notify this vehicle's owner")
    notify_parser.add_argument(
        "--type",
        action="append",
        choices=NOTIFICATION_TYPES,
        help="Notification channel (repeatable, default: all)",
    )
    notify_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show who would be notified without sending",
    )

    # Reset subcommand
    reset_parser = subparsers.add_parser("reset", help="Replace the data file with sample data")
    reset_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be reset without saving",
    )

    # Agent subcommand
    agent_parser = subparsers.add_parser("agent", help="Run the daily reminder agent")
    agent_parser.add_argument(
        "--once",
        action="store_true",
        help="Check and send reminders once, then exit",
    )

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    config = dataclasses.replace(load_config(), data_file=args.data_file)
    setup_logging(config.log_level)

    # Validate data file exists (reset creates it)
    if args.command != "reset" and not args.data_file.exists():
        print(f"Error: File not found: {args.data_file}")
        return 1

    return COMMANDS[args.command](args, config)


if __name__ == "__main__":
    sys.exit(main() or 0)
