# backend/linglix/core/config.py
import logging
import os
from pathlib import Path
from typing import Literal, Set

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path} (exists={env_path.exists()})")
    load_dotenv(env_path)


PROD_ENVIRONMENTS: Set[str] = {"prod", "production", "live"}


class Settings(BaseSettings):
    environment: Literal["development", "test", "staging", "production"] = "development"
    log_level: str = Field(default="INFO", description="Root log level applied in main.py")

    database_url: str = Field(
        default="sqlite:///./linglix.db",
        description="SQLAlchemy database URL for the relational store",
    )
    database_echo: bool = False

    # Availability engine policy
    availability_slot_interval_minutes: int = Field(
        default=30,
        description="Cadence at which candidate slots are generated inside a window",
    )
    max_availability_range_days: int = Field(
        default=30,
        description="Largest date range accepted by the date-range availability endpoint",
    )
    default_availability_range_days: int = Field(
        default=7,
        description="Days returned when the client does not request a date or range",
    )

    # Booking policy
    booking_min_advance_hours: int = 24
    booking_max_advance_days: int = 90
    late_cancellation_hours: int = 12
    reschedule_cutoff_hours: int = 4
    max_page_size: int = 100

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "availability_slot_interval_minutes",
        "max_availability_range_days",
        "default_availability_range_days",
        "max_page_size",
    )
    @classmethod
    def _require_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper() or "INFO"
        return value

    @property
    def is_production(self) -> bool:
        return self.environment in PROD_ENVIRONMENTS

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
