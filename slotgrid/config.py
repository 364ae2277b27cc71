"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path
from typing import Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.layout_engine import SlotLayoutEngine


class GridDefaults(BaseModel):
    """Default settings for the calendar grid."""
    start_hour: int = 9
    end_hour: int = 21
    slot_duration_minutes: int = 60
    display_increment_minutes: int = 60
    days: int = 7

    @field_validator("slot_duration_minutes", "display_increment_minutes", "days")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure durations and day counts are positive."""
        if value <= 0:
            raise ValueError("value must be greater than zero")
        return value

    @field_validator("start_hour", "end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 24."""
        if not 0 <= v <= 24:
            raise ValueError(f"Hour must be between 0 and 24, got {v}")
        return v

    @model_validator(mode="after")
    def validate_hours_order(self) -> "GridDefaults":
        """Ensure the visible window opens before it closes."""
        if self.end_hour <= self.start_hour:
            raise ValueError("end_hour must be later than start_hour")
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Berlin"
    grid: GridDefaults = Field(default_factory=GridDefaults)
    enable_out_of_office_merging: bool = True
    availability_file: Optional[Path] = None
    log_level: str = "WARNING"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value!r}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level

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

        config = cls(**data)

        # Relative availability paths are resolved against the config file
        if config.availability_file and not config.availability_file.is_absolute():
            config.availability_file = config_path.parent / config.availability_file

        return config

    def build_engine(self) -> SlotLayoutEngine:
        """Create a layout engine from the grid settings."""
        return SlotLayoutEngine(
            display_increment=self.grid.display_increment_minutes,
            default_slot_duration=self.grid.slot_duration_minutes,
            enable_out_of_office_merging=self.enable_out_of_office_merging,
        )


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
