"""
ROB Planner Configuration Module.

Centralized configuration management using environment variables.
Supports .env files for local development.

Usage:
    from src.config import settings

    print(settings.historical_data_path)
    print(settings.model_curve_min_rpm)
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
import logging

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_bool(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")


def get_int(key: str, default: int) -> int:
    """Get int from environment variable."""
    try:
        return int(os.getenv(key, str(default)))
    except (ValueError, TypeError):
        return default


@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Historical reference workbook
    historical_data_path: str = field(
        default_factory=lambda: os.getenv("HISTORICAL_DATA_PATH", "data/user_data.xlsx")
    )
    historical_sheet: str = field(default_factory=lambda: os.getenv("HISTORICAL_SHEET", "data"))
    historical_rpm_column: int = field(default_factory=lambda: get_int("HISTORICAL_RPM_COLUMN", 11))
    historical_consumption_column: int = field(
        default_factory=lambda: get_int("HISTORICAL_CONSUMPTION_COLUMN", 12)
    )
    load_historical_on_startup: bool = field(
        default_factory=lambda: get_bool("LOAD_HISTORICAL_ON_STARTUP", True)
    )

    # Model curve sampling (integer RPM, inclusive)
    model_curve_min_rpm: int = field(default_factory=lambda: get_int("MODEL_CURVE_MIN_RPM", 45))
    model_curve_max_rpm: int = field(default_factory=lambda: get_int("MODEL_CURVE_MAX_RPM", 124))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: str = field(
        default_factory=lambda: os.getenv(
            "LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.model_curve_min_rpm > self.model_curve_max_rpm:
            logging.warning(
                f"Model curve range [{self.model_curve_min_rpm}, {self.model_curve_max_rpm}] "
                f"is inverted, using [45, 124]"
            )
            self.model_curve_min_rpm = 45
            self.model_curve_max_rpm = 124

    def configure_logging(self):
        """Configure logging based on settings."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        logging.basicConfig(level=level, format=self.log_format)


# Singleton instance
settings = Settings()

