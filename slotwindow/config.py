"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import ReschedulePolicy, SlotCatalog, TimeSlot
from .domain.slot_engine import DEFAULT_LEAD_TIME_MINUTES, DEFAULT_TIMEZONE, SlotAvailabilityEngine

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class BookingConfig(BaseModel):
    """Slot catalog and same-day booking settings."""
    slots: List[str] = Field(default_factory=list)  # Explicit labels override the hour range
    start_hour: int = 9
    end_hour: int = 17
    interval_minutes: int = 60
    lead_time_minutes: int = DEFAULT_LEAD_TIME_MINUTES
    refresh_interval_seconds: int = 60

    @field_validator("start_hour", "end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v

    @field_validator("interval_minutes", "refresh_interval_seconds")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Interval must be greater than zero")
        return value

    @field_validator("lead_time_minutes")
    @classmethod
    def validate_lead_time(cls, value: int) -> int:
        if value < 0:
            raise ValueError("lead_time_minutes must not be negative")
        return value

    @field_validator("slots")
    @classmethod
    def validate_slots(cls, value: List[str]) -> List[str]:
        """Ensure every label parses; MalformedSlotError is a ValueError."""
        for label in value:
            TimeSlot.parse(label)
        return value

    @model_validator(mode="after")
    def validate_catalog(self) -> "BookingConfig":
        """Ensure the catalog can be built (ordered, non-empty)."""
        if not self.slots and self.end_hour < self.start_hour:
            raise ValueError("end_hour must not be earlier than start_hour")
        self.build_catalog()
        return self

    def build_catalog(self) -> SlotCatalog:
        if self.slots:
            return SlotCatalog.from_labels(self.slots)
        return SlotCatalog.hourly(self.start_hour, self.end_hour, self.interval_minutes)


class RescheduleConfig(BaseModel):
    """Reschedule policy as shown to customers."""
    min_lead_hours: int = 4
    max_reschedules: int = 3

    @field_validator("min_lead_hours", "max_reschedules")
    @classmethod
    def validate_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Reschedule limits must not be negative")
        return value

    def to_policy(self) -> ReschedulePolicy:
        return ReschedulePolicy(
            min_lead_hours=self.min_lead_hours,
            max_reschedules=self.max_reschedules,
        )


class PaymentConfig(BaseModel):
    currency: str = "INR"
    tax_rate: float = 18

    @field_validator("tax_rate")
    @classmethod
    def validate_tax_rate(cls, value: float) -> float:
        if not 0 <= value <= 100:
            raise ValueError(f"tax_rate must be between 0 and 100, got {value}")
        return value


class ApiConfig(BaseModel):
    """Booking backend connection."""
    base_url: str = "http://localhost:5000"
    access_token: Optional[str] = None
    timeout_seconds: float = 10

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = DEFAULT_TIMEZONE
    booking: BookingConfig = Field(default_factory=BookingConfig)
    reschedule: RescheduleConfig = Field(default_factory=RescheduleConfig)
    payment: PaymentConfig = Field(default_factory=PaymentConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    log_level: str = "WARNING"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value}")
        return level

    def build_engine(self) -> SlotAvailabilityEngine:
        return SlotAvailabilityEngine(
            catalog=self.booking.build_catalog(),
            lead_time_minutes=self.booking.lead_time_minutes,
            timezone=self.timezone,
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


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load an explicit config file, or the default one when it exists.

    Without an explicit path and without a config.yaml, built-in defaults apply.
    """
    if config_path is not None:
        return AppConfig.load_from_yaml(config_path)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)

    return AppConfig()
