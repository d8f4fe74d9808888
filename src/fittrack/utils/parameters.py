"""
Configuration and parameter loading using Pydantic.

All parameters are loaded from YAML and validated using Pydantic models.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fittrack.utils.exceptions import ConfigurationError


class StorageConfig(BaseModel):
    """Local key/value storage configuration."""

    dir: str = "data"
    entries_key: str = "fittrack_entries"
    settings_key: str = "fittrack_settings"


class ClockConfig(BaseModel):
    """Clock configuration used for "today"-relative computations."""

    timezone: str = "UTC"


class ChartConfig(BaseModel):
    """Default sizes of the chart series."""

    days: int = Field(default=30, ge=1)
    weeks: int = Field(default=4, ge=1)


class OutputFilesConfig(BaseModel):
    """Output file names configuration."""

    entries_csv: str = "entries.csv"
    weight_series_csv: str = "weight_series.csv"
    steps_series_csv: str = "steps_series.csv"
    export_json: str = "fittrack_export.json"


class OutputConfig(BaseModel):
    """Output configuration."""

    dir: str = "output"
    files: OutputFilesConfig = Field(default_factory=OutputFilesConfig)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    console: bool = True


class AppConfig(BaseSettings):
    """Main application configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    clock: ClockConfig = Field(default_factory=ClockConfig)
    charts: ChartConfig = Field(default_factory=ChartConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(env_prefix="FITTRACK_", case_sensitive=False)


class ParameterLoader:
    """
    Centralized parameter loader for the application.

    Loads and validates configuration from YAML files using Pydantic models.
    Provides type-safe access to all configuration parameters.
    """

    def __init__(self, config_path: str = "config/config.yaml") -> None:
        """
        Initialize parameter loader.

        Args:
            config_path: Path to the YAML configuration file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        self.config_path = Path(config_path)
        self.config: AppConfig
        self._load_config()

    def _load_config(self) -> None:
        """
        Load configuration from YAML file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        if not self.config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, encoding="utf-8") as f:
                config_dict = yaml.safe_load(f) or {}

            self.config = AppConfig(**config_dict)

        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML configuration: {e}") from e
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

    def get_storage_config(self) -> StorageConfig:
        """Get key/value storage configuration."""
        return self.config.storage

    def get_clock_config(self) -> ClockConfig:
        """Get clock configuration."""
        return self.config.clock

    def get_chart_config(self) -> ChartConfig:
        """Get chart series configuration."""
        return self.config.charts

    def get_output_config(self) -> OutputConfig:
        """Get output configuration."""
        return self.config.output

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        return self.config.logging

    def get_raw_config(self) -> dict[str, Any]:
        """
        Get raw configuration dictionary.

        Returns:
            Dictionary representation of the configuration.
        """
        return self.config.model_dump()
