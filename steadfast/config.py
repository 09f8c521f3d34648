"""
Configuration module for Steadfast.

Contains constants, settings, and configuration values used throughout the application.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Version
VERSION = "0.1.0"

# Application paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
LOG_DIR = PROJECT_ROOT / "logs"
ENV_FILE = PROJECT_ROOT / ".env"

# Database configuration
DEFAULT_DB_PATH = DATA_DIR / "spiritual_habits.db"
DB_TIMEOUT = 10.0  # seconds

# Legacy key-value store (pre-SQLite data)
DEFAULT_LEGACY_STORE_PATH = DATA_DIR / "legacy_storage.json"

# Analytics windows
DEFAULT_DAILY_WINDOW = 7  # days
DEFAULT_WEEKLY_WINDOW = 4  # weeks
DEFAULT_MONTHLY_WINDOW = 6  # months

# Earliest date considered when loading "all" logs
LEGACY_EPOCH = "2020-01-01"

# Logging configuration
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "steadfast.log"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Environment variable names
ENV_DB_PATH = "STEADFAST_DB_PATH"
ENV_LEGACY_STORE = "STEADFAST_LEGACY_STORE"

# Error messages
ERROR_MESSAGES = {
    "not_open": "Database not open. Call open() first.",
    "not_found": "{entity} not found: {entity_id}",
    "sql_error": "SQL error: {error}",
}


def load_environment(env_path: Optional[Path] = None) -> bool:
    """Load variables from a .env file if one exists."""
    path = env_path or ENV_FILE
    if path.exists():
        return load_dotenv(path)
    return False


def ensure_directories():
    """Ensure required directories exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    LOG_DIR.mkdir(parents=True, exist_ok=True)


def get_log_level():
    """Get the configured log level."""
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    level = os.getenv("LOG_LEVEL", LOG_LEVEL)
    return level_map.get(level.upper(), logging.INFO)


def get_db_path() -> Path:
    """Get the database path, honoring the STEADFAST_DB_PATH override."""
    override = os.getenv(ENV_DB_PATH)
    return Path(override) if override else DEFAULT_DB_PATH


def get_legacy_store_path() -> Path:
    """Get the legacy key-value store path."""
    override = os.getenv(ENV_LEGACY_STORE)
    return Path(override) if override else DEFAULT_LEGACY_STORE_PATH
