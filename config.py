"""Runtime configuration read from the environment (and an optional .env file)."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).parent


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    return int(value) if value else default


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    return float(value) if value else default


@dataclass
class NotificationConfig:
    """Stub channel settings; nothing is actually delivered."""

    email_enabled: bool = True
    email_from: str = "service@automotivereminder.com"
    sms_enabled: bool = True
    sms_from: str = "+15551234567"
    success_rate: float = 0.9


@dataclass
class ReminderConfig:
    """Thresholds fed to the upcoming service calculation, and agent timing."""

    upcoming_miles: int = 500
    upcoming_days: int = 30
    calendar_within_days: int = 14
    cron_hour: int = 0
    cron_minute: int = 0


@dataclass
class AppConfig:
    data_file: Path = PROJECT_ROOT / "data" / "fleet.yaml"
    port: int = 5001
    app_env: str = "development"
    secret_key: str = "dev-secret-key-change-in-prod"
    log_level: str = "INFO"
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    reminders: ReminderConfig = field(default_factory=ReminderConfig)

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


def load_config() -> AppConfig:
    """Build configuration from environment variables, falling back to defaults."""
    return AppConfig(
        data_file=Path(os.getenv("DATA_FILE", str(PROJECT_ROOT / "data" / "fleet.yaml"))),
        port=_env_int("PORT", 5001),
        app_env=os.getenv("APP_ENV", "development").lower(),
        secret_key=os.getenv("SECRET_KEY", "dev-secret-key-change-in-prod"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        notifications=NotificationConfig(
            email_enabled=_env_bool("EMAIL_ENABLED", True),
            email_from=os.getenv("EMAIL_FROM", "service@automotivereminder.com"),
            sms_enabled=_env_bool("SMS_ENABLED", True),
            sms_from=os.getenv("SMS_FROM", "+15551234567"),
            success_rate=_env_float("NOTIFICATION_SUCCESS_RATE", 0.9),
        ),
        reminders=ReminderConfig(
            upcoming_miles=_env_int("UPCOMING_MILEAGE_THRESHOLD", 500),
            upcoming_days=_env_int("UPCOMING_DAYS_THRESHOLD", 30),
            calendar_within_days=_env_int("CALENDAR_WITHIN_DAYS", 14),
            cron_hour=_env_int("REMINDER_CRON_HOUR", 0),
            cron_minute=_env_int("REMINDER_CRON_MINUTE", 0),
        ),
    )


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
