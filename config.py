"""Runtime configuration.

Settings are read from environment variables, optionally seeded from a
``.env`` file in the working directory:

- ``VCAL_DEFAULT_TIMEZONE``: zone of the calendar created at startup
  (default ``America/New_York``).
- ``VCAL_DEFAULT_CALENDAR``: name of that calendar (default ``default``).
- ``VCAL_LOG_LEVEL``: logging level name (default ``WARNING``).
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from models.base_calendar import resolve_zone

ENV_VARS = {
    "default_timezone": "VCAL_DEFAULT_TIMEZONE",
    "default_calendar": "VCAL_DEFAULT_CALENDAR",
    "log_level": "VCAL_LOG_LEVEL",
}


class Settings(BaseModel):
    """Application settings.

    Args:
        default_timezone: IANA zone for the startup calendar.
        default_calendar: Name of the startup calendar.
        log_level: Logging level name.
    """

    default_timezone: str = Field(
        default="America/New_York", description="Zone of the startup calendar"
    )
    default_calendar: str = Field(
        default="default", description="Name of the startup calendar"
    )
    log_level: str = Field(default="WARNING", description="Logging level name")

    @field_validator("default_timezone")
    @classmethod
    def validate_timezone(cls, timezone: str) -> str:
        resolve_zone(timezone)
        return timezone.strip()

    @field_validator("default_calendar")
    @classmethod
    def validate_calendar_name(cls, name: str) -> str:
        if not name.strip():
            raise ValueError("default_calendar cannot be blank")
        return name.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, level: str) -> str:
        level = level.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {level}")
        return level

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """Build settings from the environment.

        Args:
            env_file: Path of a .env file to load first (defaults to
                searching the working directory).

        Returns:
            Validated settings.
        """
        load_dotenv(env_file)
        values = {
            field: os.environ[variable]
            for field, variable in ENV_VARS.items()
            if os.environ.get(variable)
        }
        return cls(**values)
