"""Application configuration module.

Reads settings from environment variables with sane defaults for a single
embedded SQLite database serving the raffle admin panel and public pages.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _get_bool(name: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def _get_int(name: str, default: int) -> int:
    """Get integer from environment variable with fallback."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_str(name: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.getenv(name, default)


@dataclass(frozen=True)
class Config:
    environment: str
    debug: bool
    web_host: str
    web_port: int
    secret_key: str
    database_path: str
    log_folder: str
    max_content_length: int
    admin_password: str
    backup_history_size: int
    db_busy_timeout: int


def load_config() -> Config:
    """Load application configuration from environment variables.

    Returns:
        Config: Application configuration with validated values
    """
    return Config(
        environment=_get_str("ENVIRONMENT", "development"),
        debug=_get_bool("DEBUG", False),
        web_host=_get_str("WEB_HOST", "0.0.0.0"),
        web_port=_get_int("WEB_PORT", 3000),
        secret_key=_get_str(
            "SECRET_KEY",
            "production_secret_key_must_be_changed_in_production_environment"
        ),
        database_path=_get_str("DATABASE_PATH", "data/fundabenefica.sqlite"),
        log_folder=_get_str("LOG_FOLDER", "logs"),
        # Prize images travel as data URIs inside JSON bodies
        max_content_length=_get_int("MAX_CONTENT_LENGTH", 50 * 1024 * 1024),
        admin_password=_get_str("ADMIN_PASSWORD", "admin123"),
        backup_history_size=_get_int("BACKUP_HISTORY_SIZE", 50),
        db_busy_timeout=_get_int("DB_BUSY_TIMEOUT", 5000),
    )
