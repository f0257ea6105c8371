import os
from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./hms.db")
SQL_ECHO = _get_bool(os.getenv("SQL_ECHO"), default=False)

ALLOWED_ORIGINS = _get_list(os.getenv("ALLOWED_ORIGINS"), ["http://localhost:4200"])

HOSPITAL_TIMEZONE = os.getenv("HOSPITAL_TIMEZONE", "UTC")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

MAX_APPOINTMENT_NOTES_LENGTH = int(os.getenv("MAX_APPOINTMENT_NOTES_LENGTH", "600"))


def get_hospital_timezone() -> tzinfo:
    if HOSPITAL_TIMEZONE.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(HOSPITAL_TIMEZONE)


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and DATABASE_URL.startswith("sqlite"):
        raise RuntimeError("DATABASE_URL must point at a server database in production.")

    try:
        get_hospital_timezone()
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise RuntimeError(f"Unknown HOSPITAL_TIMEZONE: {HOSPITAL_TIMEZONE}") from exc
