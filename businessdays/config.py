"""
Configuration management using Pydantic models loaded from YAML.
"""

import os
from pathlib import Path
from typing import List

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .adapters.holiday_client import DEFAULT_HOLIDAYS_URL
from .domain.models import WorkSchedule


class ScheduleConfig(BaseModel):
    """Working blocks and weekend days."""
    morning_start: int = 8
    morning_end: int = 12
    afternoon_start: int = 13
    afternoon_end: int = 17
    weekend_days: List[int] = Field(default_factory=lambda: [6, 7])  # Saturday, Sunday (ISO)
    max_search_days: int = 366

    @field_validator("morning_start", "morning_end", "afternoon_start", "afternoon_end")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v

    @field_validator("weekend_days")
    @classmethod
    def validate_weekend_days(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid ISO range and deduplicated."""
        invalid_days = [day for day in value if day not in range(1, 8)]
        if invalid_days:
            raise ValueError(f"weekend_days must be between 1 and 7, got {invalid_days}")
        # Preserve order while removing duplicates
        return list(dict.fromkeys(value))

    @field_validator("max_search_days")
    @classmethod
    def validate_max_search_days(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("max_search_days must be greater than zero")
        return value

    @model_validator(mode="after")
    def validate_block_order(self) -> "ScheduleConfig":
        """Ensure the morning block closes before the afternoon block opens."""
        if not (
            self.morning_start < self.morning_end
            <= self.afternoon_start < self.afternoon_end
        ):
            raise ValueError(
                "Schedule must satisfy morning_start < morning_end "
                "<= afternoon_start < afternoon_end"
            )
        return self


class HolidaySourceConfig(BaseModel):
    """Remote holiday list settings."""
    url: str = DEFAULT_HOLIDAYS_URL
    timeout_seconds: float = 5.0
    prefetch_years_ahead: int = 1

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value

    @field_validator("prefetch_years_ahead")
    @classmethod
    def validate_prefetch(cls, value: int) -> int:
        if value < 0:
            raise ValueError("prefetch_years_ahead cannot be negative")
        return value


class ServerConfig(BaseModel):
    """HTTP server settings."""
    host: str = "0.0.0.0"
    port: int = 3000


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "America/Bogota"
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    holidays: HolidaySourceConfig = Field(default_factory=HolidaySourceConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    log_level: str = "INFO"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    def to_schedule(self) -> WorkSchedule:
        """Build the domain schedule from this configuration."""
        return WorkSchedule(
            morning_start=self.schedule.morning_start,
            morning_end=self.schedule.morning_end,
            afternoon_start=self.schedule.afternoon_start,
            afternoon_end=self.schedule.afternoon_end,
            weekend_days=tuple(self.schedule.weekend_days),
            timezone=self.timezone,
            max_search_days=self.schedule.max_search_days,
        )

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path


def load_config(config_path: Path | None = None) -> AppConfig:
    """
    Load the application configuration.

    An explicit ``config_path`` must exist. Without one, the default
    config.yaml is used if present, otherwise built-in defaults apply.
    The ``PORT`` environment variable overrides ``server.port``.
    """
    if config_path is not None:
        config = AppConfig.load_from_yaml(config_path)
    else:
        default_path = get_default_config_path()
        config = AppConfig.load_from_yaml(default_path) if default_path.exists() else AppConfig()

    port = os.getenv("PORT")
    if port:
        try:
            config.server.port = int(port)
        except ValueError as exc:
            raise ValueError(f"PORT must be an integer, got {port!r}") from exc

    return config
