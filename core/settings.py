# core/settings.py

"""
Program-wide configuration for the course roster manager.

Values are read from environment variables prefixed with `ROSTER_` or from a `.env` file
in the working directory. Every field has a default, so the program runs without any configuration.
"""

import logging
import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class RosterSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    default_section: str = Field(
        "None",
        description="Reserved section label meaning 'no section assigned'.",
    )
    data_dir: str = Field(
        os.path.join(os.path.expanduser("~"), "Documents", "Rosters"),
        description="Parent directory for roster stores created without an explicit path.",
    )
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )
    log_file: str | None = Field(
        None, description="Optional path for a rotating log file sink."
    )

    model_config = SettingsConfigDict(
        env_prefix="ROSTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )


def load_settings() -> RosterSettings:
    """Loads and validates application settings."""
    settings = RosterSettings()

    log_level_upper = settings.log_level.upper()
    if log_level_upper not in VALID_LOG_LEVELS:
        logging.warning(
            f"Invalid ROSTER_LOG_LEVEL '{settings.log_level}'. Using INFO."
        )
        settings.log_level = "INFO"
    else:
        settings.log_level = log_level_upper

    return settings


settings: RosterSettings = load_settings()
