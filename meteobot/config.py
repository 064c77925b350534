"""
Configuration management for the Weather Bot.
Values come from the environment (.env is loaded on import).
An optional TOML file named by CONFIG_FILE overrides them at startup.
"""

import os
import logging
from pathlib import Path
from typing import List, Any, Optional

import toml
from dotenv import load_dotenv
import pytz

load_dotenv()

# Fixed UTC+3 (POSIX-style names invert the sign)
DEFAULT_TIMEZONE = "Etc/GMT-3"


def _bool_from_value(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    return str(v).strip().lower() in ("true", "1", "yes")


class Config:
    """
    Application configuration.
    TELEGRAM_TOKEN and WEATHER_API_KEY are required; everything else has a default.
    """

    TELEGRAM_TOKEN: str = os.getenv("TELEGRAM_TOKEN", "")
    WEATHER_API_KEY: str = os.getenv("WEATHER_API_KEY", "")
    TIMEZONE: str = os.getenv("TIMEZONE", DEFAULT_TIMEZONE)
    WEATHER_LANG: str = os.getenv("WEATHER_LANG", "ua")
    WEATHER_UNITS: str = os.getenv("WEATHER_UNITS", "metric")
    HEALTH_CHECK_ENABLED: bool = _bool_from_value(os.getenv("HEALTH_CHECK_ENABLED", "true"))
    HEALTH_PORT: int = int(os.getenv("HEALTH_PORT", "8080"))
    LOG_LEVEL: str = (os.getenv("LOG_LEVEL", "INFO") or "INFO").upper()
    CONFIG_FILE: Optional[str] = os.getenv("CONFIG_FILE") or None

    @classmethod
    def set_runtime_config(cls, config: dict) -> None:
        """Overwrite config from a parsed TOML mapping."""
        if "telegram_token" in config:
            cls.TELEGRAM_TOKEN = str(config["telegram_token"] or "")
        if "weather_api_key" in config:
            cls.WEATHER_API_KEY = str(config["weather_api_key"] or "")
        if "timezone" in config:
            cls.TIMEZONE = str(config["timezone"] or DEFAULT_TIMEZONE)
        if "weather_lang" in config:
            cls.WEATHER_LANG = str(config["weather_lang"] or "ua")
        if "weather_units" in config:
            cls.WEATHER_UNITS = str(config["weather_units"] or "metric")
        if "health_check_enabled" in config:
            cls.HEALTH_CHECK_ENABLED = _bool_from_value(config["health_check_enabled"])
        if "health_port" in config:
            cls.HEALTH_PORT = int(config["health_port"] or 8080)
        if "log_level" in config:
            cls.LOG_LEVEL = (str(config["log_level"] or "INFO")).upper()

    @classmethod
    def load_file(cls, path: str) -> None:
        """
        Apply overrides from a TOML file.

        Args:
            path: Path to the TOML file

        Raises:
            FileNotFoundError: If the file does not exist
            toml.TomlDecodeError: If the file is not valid TOML
        """
        data = toml.load(Path(path))
        cls.set_runtime_config(data)

    @classmethod
    def get_timezone(cls) -> pytz.timezone:
        """Get the configured timezone object."""
        try:
            return pytz.timezone(cls.TIMEZONE)
        except pytz.exceptions.UnknownTimeZoneError:
            logging.warning(f"Unknown timezone '{cls.TIMEZONE}', using UTC")
            return pytz.UTC

    @classmethod
    def validate(cls) -> List[str]:
        """
        Validate configuration and return list of errors.
        Returns empty list if configuration is valid.
        """
        errors = []

        if not cls.TELEGRAM_TOKEN:
            errors.append("TELEGRAM_TOKEN is required")

        if not cls.WEATHER_API_KEY:
            errors.append("WEATHER_API_KEY is required")

        if not 0 < cls.HEALTH_PORT < 65536:
            errors.append("HEALTH_PORT must be between 1 and 65535")

        return errors

    @classmethod
    def setup_logging(cls) -> None:
        """Configure logging based on settings."""
        log_level = getattr(logging, cls.LOG_LEVEL, logging.INFO)

        logging.basicConfig(
            level=log_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=[logging.StreamHandler()]
        )

        # Reduce noise from external libraries
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
        logging.getLogger("telegram").setLevel(logging.WARNING)
        logging.getLogger("apscheduler").setLevel(logging.WARNING)
        logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
