"""
Centralized Configuration Module

All application constants, logging configuration, and settings.
Import from here instead of hardcoding values.
"""

import os
import logging
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# ============================================================================
# Load default .env at module import time
# ============================================================================
load_dotenv()

# ============================================================================
# Environment Loading
# ============================================================================

def load_environment(env_file: Optional[str] = None):
    """
    Load environment variables from .env file and refresh the config classes.

    Args:
        env_file: Optional path to .env file. If None, uses default .env
    """
    if env_file:
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path, override=True)
            logging.getLogger(__name__).info(f"Loaded environment from: {env_file}")
        else:
            logging.getLogger(__name__).warning(f"Environment file not found: {env_file}")
    else:
        load_dotenv(override=True)

    AppConfig.reload()
    LogConfig.reload()
    FeatureFlags.reload()


# ============================================================================
# Application Constants
# ============================================================================

class AppConfig:
    """Application-wide configuration constants"""

    # Application Info
    APP_NAME = "phyfake"
    APP_VERSION = "0.1.0"
    APP_DESCRIPTION = "In-memory simulation of a physical server provisioning API"

    # Server
    HOST = os.getenv("HOST", "127.0.0.1")
    PORT = int(os.getenv("PORT", "8080"))

    # Simulation
    SEED_FILE = os.getenv("SEED_FILE")  # Optional JSON dataset
    ACTION_DELAY_SECONDS = float(os.getenv("ACTION_DELAY_SECONDS", "0"))

    @classmethod
    def reload(cls):
        """Re-read values from the environment"""
        cls.HOST = os.getenv("HOST", "127.0.0.1")
        cls.PORT = int(os.getenv("PORT", "8080"))
        cls.SEED_FILE = os.getenv("SEED_FILE")
        cls.ACTION_DELAY_SECONDS = float(os.getenv("ACTION_DELAY_SECONDS", "0"))


# ============================================================================
# Logging Configuration
# ============================================================================

class LogConfig:
    """Logging configuration"""

    # Log Level
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Log Format
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

    # Detailed format with file/line
    DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"

    # File Logging
    LOG_FILE = os.getenv("LOG_FILE")  # Optional
    LOG_FILE_MAX_BYTES = int(os.getenv("LOG_FILE_MAX_BYTES", "10485760"))  # 10MB
    LOG_FILE_BACKUP_COUNT = int(os.getenv("LOG_FILE_BACKUP_COUNT", "5"))

    @classmethod
    def reload(cls):
        cls.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        cls.LOG_FILE = os.getenv("LOG_FILE")
        cls.LOG_FILE_MAX_BYTES = int(os.getenv("LOG_FILE_MAX_BYTES", "10485760"))
        cls.LOG_FILE_BACKUP_COUNT = int(os.getenv("LOG_FILE_BACKUP_COUNT", "5"))


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    """
    Configure application logging.

    Args:
        verbose: Enable verbose (DEBUG) logging
        log_file: Optional log file path
    """
    if verbose:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, LogConfig.LOG_LEVEL, logging.INFO)

    log_format = LogConfig.DETAILED_FORMAT if verbose else LogConfig.LOG_FORMAT

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=LogConfig.LOG_DATE_FORMAT
    )

    if log_file or LogConfig.LOG_FILE:
        from logging.handlers import RotatingFileHandler

        file_path = log_file or LogConfig.LOG_FILE
        file_handler = RotatingFileHandler(
            file_path,
            maxBytes=LogConfig.LOG_FILE_MAX_BYTES,
            backupCount=LogConfig.LOG_FILE_BACKUP_COUNT
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(log_format, LogConfig.LOG_DATE_FORMAT))
        logging.getLogger().addHandler(file_handler)
        logger.info(f"Logging to file: {file_path}")

    # Suppress noisy loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logger.info(f"Logging configured: level={logging.getLevelName(log_level)}")


logger = logging.getLogger(__name__)


# ============================================================================
# Feature Flags
# ============================================================================

class FeatureFlags:
    """Feature flags for optional functionality"""

    DEBUG = os.getenv("DEBUG", "false").lower() == "true"
    RELOAD = os.getenv("RELOAD", "false").lower() == "true"

    @classmethod
    def reload(cls):
        cls.DEBUG = os.getenv("DEBUG", "false").lower() == "true"
        cls.RELOAD = os.getenv("RELOAD", "false").lower() == "true"


# ============================================================================
# Validation
# ============================================================================

def validate_config():
    """
    Validate configuration on startup.
    Raises ValueError if the configuration cannot be used.
    """
    errors = []

    if not 0 < AppConfig.PORT < 65536:
        errors.append(f"PORT out of range: {AppConfig.PORT}")

    if AppConfig.ACTION_DELAY_SECONDS < 0:
        errors.append(f"ACTION_DELAY_SECONDS must not be negative: {AppConfig.ACTION_DELAY_SECONDS}")

    if AppConfig.SEED_FILE and not Path(AppConfig.SEED_FILE).is_file():
        errors.append(f"Seed file not found: {AppConfig.SEED_FILE}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)

    logger.info(f"Configuration validated: seed={'default' if not AppConfig.SEED_FILE else AppConfig.SEED_FILE}")


__all__ = [
    'AppConfig',
    'LogConfig',
    'FeatureFlags',
    'load_environment',
    'setup_logging',
    'validate_config',
]
