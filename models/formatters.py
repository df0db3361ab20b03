"""Display formatting for vehicles, mileage and service projections."""

import re
from typing import Optional

from .urgency import Urgency, get_service_urgency


def format_vehicle_name(year: int, make: str, model: str) -> str:
    return f"{year} {make} {model}"


def format_mileage(mileage: Optional[float]) -> str:
    """Format mileage with comma separator and unit."""
    if mileage is None:
        return "-"
    return f"{mileage:,.0f} mi"


def format_vin(vin: Optional[str]) -> str:
    """Format a VIN as XXX-XXXXXXX-XXXXXXX."""
    if not vin:
        return ""
    return f"{vin[:3]}-{vin[3:10]}-{vin[10:]}"


def format_phone(phone: Optional[str]) -> str:
    """Format 10 or 11 digit US phone numbers, else return input unchanged."""
    if not phone:
        return ""
    digits = re.sub(r"\D", "", phone)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    if len(digits) == 11 and digits[0] == "1":
        return f"+1 ({digits[1:4]}) {digits[4:7]}-{digits[7:]}"
    return phone


def format_service_due(due_in_miles: int, due_in_days: int) -> str:
    """Short human description of when a service is due."""
    if due_in_miles <= 0 or due_in_days <= 0:
        return "Overdue"
    if due_in_miles < 100:
        return f"Due in {due_in_miles} miles"
    if due_in_days < 7:
        return f"Due in {due_in_days} days"
    if due_in_days < 30:
        return f"Due in {due_in_days // 7} weeks"
    return f"Due in {due_in_days // 30} months"


def format_reminder_message(service_type: str, due_in_miles: int, due_in_days: int) -> str:
    """Format e.g. 'Oil Change (UPCOMING): Due in 2 weeks'."""
    urgency = get_service_urgency(due_in_miles, due_in_days)
    message = service_type
    if urgency != Urgency.OK:
        message += f" ({urgency.name})"
    return f"{message}: {format_service_due(due_in_miles, due_in_days)}"
