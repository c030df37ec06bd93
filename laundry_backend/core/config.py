import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int(value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    return int(value)


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./laundry.db")

CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS"), ["http://localhost:3000"])

SLOT_INCREMENT_MINUTES = _get_int(os.getenv("SLOT_INCREMENT_MINUTES"), 15)
DEFAULT_CYCLE_MINUTES = _get_int(os.getenv("DEFAULT_CYCLE_MINUTES"), 45)

MAX_LOADS_SINGLE_SERVICE = _get_int(os.getenv("MAX_LOADS_SINGLE_SERVICE"), 4)
MAX_LOADS_WASH_DRY = _get_int(os.getenv("MAX_LOADS_WASH_DRY"), 2)

CURRENCY = os.getenv("CURRENCY", "USD")

# Serialize machine assignment per (hall, machine type).
MACHINE_LOCKING = _get_bool(os.getenv("MACHINE_LOCKING"), default=True)


def max_configured_loads() -> int:
    return max(MAX_LOADS_SINGLE_SERVICE, MAX_LOADS_WASH_DRY)


def validate_runtime_config() -> None:
    if MAX_LOADS_SINGLE_SERVICE < 1 or MAX_LOADS_WASH_DRY < 1:
        raise RuntimeError("MAX_LOADS_SINGLE_SERVICE and MAX_LOADS_WASH_DRY must be at least 1.")
    if SLOT_INCREMENT_MINUTES < 1:
        raise RuntimeError("SLOT_INCREMENT_MINUTES must be at least 1.")
    if APP_ENV.lower() == "production" and DATABASE_URL.startswith("sqlite"):
        raise RuntimeError("DATABASE_URL must point at Postgres in production.")
