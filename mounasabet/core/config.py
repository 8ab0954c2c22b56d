import os

from dotenv import load_dotenv


load_dotenv()


def _get_int(value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    return int(value.strip())


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL")

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), ["http://localhost:3000"])

DEFAULT_AVAILABILITY_RANGE_DAYS = _get_int(os.getenv("DEFAULT_AVAILABILITY_RANGE_DAYS"), 30)

def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and not DATABASE_URL:
        raise RuntimeError("DATABASE_URL must be set in production.")
    if DEFAULT_AVAILABILITY_RANGE_DAYS < 1:
        raise RuntimeError("DEFAULT_AVAILABILITY_RANGE_DAYS must be a positive number of days.")
