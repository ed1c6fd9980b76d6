"""
Configuration for fq.

Module: fq/config.py

fq reads no configuration file; the few ambient settings come from
environment variables prefixed with ``FQ_``.
"""

import logging
import sys

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    """fq settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_prefix="FQ_", extra="ignore")

    # Logging
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that the level is one the logging module knows."""
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level


def load_settings() -> Settings:
    """Load settings from the environment."""
    return Settings()


def configure_logging(settings: Settings, verbose: bool = False) -> None:
    """
    Configure root logging on standard error.

    Args:
        settings: Loaded settings
        verbose: Force DEBUG level
    """
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)
