"""
Max Pain Configuration Module

Centralized configuration management using environment variables.
All config is loaded lazily to avoid import-time failures.
"""

import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

from core.exceptions import ConfigurationError

# Load .env file if it exists
load_dotenv()


def _env_float(name: str, default: str) -> float:
    value = os.getenv(name, default)
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None


@dataclass
class DisplayBandConfig:
    """Strike range shown in display tables and charts."""
    low: float = 3000.0
    high: float = 4000.0


@dataclass
class LoaderConfig:
    """Spreadsheet layout: sheet names and source column names."""
    call_sheet: str = "call"
    put_sheet: str = "put"
    strike_column: str = "Strike"
    volume_column: str = "Total Volume"
    oi_column: str = "At Close"
    change_column: str = "Change"


@dataclass
class LogConfig:
    """Logging settings."""
    level: str
    rotation: str
    log_dir: str
    json_output: bool


class Config:
    """
    Main configuration class.

    Usage:
        config = Config()
        print(config.display_band.low)
        print(config.loader.oi_column)
    """

    _instance: Optional['Config'] = None

    def __new__(cls) -> 'Config':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._load_config()
        self._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Drop the cached instance so the next access re-reads the environment."""
        cls._instance = None

    def _load_config(self):
        """Load all configuration from environment."""
        self.display_band = DisplayBandConfig(
            low=_env_float('DISPLAY_BAND_LOW', '3000'),
            high=_env_float('DISPLAY_BAND_HIGH', '4000'),
        )

        self.loader = LoaderConfig(
            call_sheet=os.getenv('CALL_SHEET', 'call'),
            put_sheet=os.getenv('PUT_SHEET', 'put'),
            strike_column=os.getenv('STRIKE_COLUMN', 'Strike'),
            volume_column=os.getenv('VOLUME_COLUMN', 'Total Volume'),
            oi_column=os.getenv('OI_COLUMN', 'At Close'),
            change_column=os.getenv('CHANGE_COLUMN', 'Change'),
        )

        self.log = LogConfig(
            level=os.getenv('LOG_LEVEL', 'INFO'),
            rotation=os.getenv('LOG_ROTATION', '100 MB'),
            log_dir=os.getenv('LOG_DIR', 'logs'),
            json_output=os.getenv('LOG_JSON', 'false').lower() == 'true',
        )

    def validate(self) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if all valid)
        """
        errors = []

        if self.display_band.low > self.display_band.high:
            errors.append(
                f"DISPLAY_BAND_LOW ({self.display_band.low}) must not exceed "
                f"DISPLAY_BAND_HIGH ({self.display_band.high})"
            )

        if not self.loader.call_sheet:
            errors.append("CALL_SHEET must not be empty")

        if not self.loader.put_sheet:
            errors.append("PUT_SHEET must not be empty")

        if self.loader.call_sheet and self.loader.call_sheet == self.loader.put_sheet:
            errors.append("CALL_SHEET and PUT_SHEET must differ")

        return errors


def get_config() -> Config:
    """Get the global config instance."""
    return Config()
