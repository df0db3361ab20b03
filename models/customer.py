"""Customer class for vehicle owners."""

from typing import Optional

REMINDER_TYPES = ("email", "sms", "both")


class Customer:
    """A vehicle owner and how they want to be reminded."""

    def __init__(
        self,
        id: int,
        name: str,
        email: str,
        phone: str,
        preferred_reminder_type: str = "email",
        timezone: str = "America/New_York",
        created_at: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.email = email
        self.phone = phone
        self.preferred_reminder_type = preferred_reminder_type or "email"
        self.timezone = timezone or "America/New_York"
        self.created_at = created_at

    @property
    def wants_email(self) -> bool:
        return self.preferred_reminder_type in ("email", "both")

    @property
    def wants_sms(self) -> bool:
        return self.preferred_reminder_type in ("sms", "both")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "preferredReminderType": self.preferred_reminder_type,
            "timezone": self.timezone,
        }
