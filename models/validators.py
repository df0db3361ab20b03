"""Input validation for customer, vehicle and mileage fields."""

import re
from datetime import date
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

MAX_MILEAGE = 1_000_000
MIN_YEAR = 1900

_VIN_RE = re.compile(r"^[A-HJ-NPR-Z0-9]{17}$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_RE = re.compile(r"^[+]?[(]?[0-9]{3}[)]?[-\s.]?[0-9]{3}[-\s.]?[0-9]{4,6}$")


def is_valid_vin(vin) -> bool:
    """17 characters, digits and capitals excluding I, O and Q."""
    return isinstance(vin, str) and bool(_VIN_RE.fullmatch(vin))


def is_valid_email(email) -> bool:
    return isinstance(email, str) and bool(_EMAIL_RE.fullmatch(email))


def is_valid_phone(phone) -> bool:
    return isinstance(phone, str) and bool(_PHONE_RE.fullmatch(phone))


def is_valid_year(year) -> bool:
    """Model years from 1900 through next year."""
    if not _is_int(year):
        return False
    return MIN_YEAR <= year <= date.today().year + 1


def is_valid_mileage(mileage) -> bool:
    if not _is_int(mileage):
        return False
    return 0 <= mileage <= MAX_MILEAGE


def is_valid_timezone(timezone) -> bool:
    if not isinstance(timezone, str) or not timezone:
        return False
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
