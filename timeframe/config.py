"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path
from typing import List, Literal

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_NAME = "timeframe.yaml"


class ParserConfig(BaseModel):
    """Settings for interval parsing."""
    year_boundary_policy: Literal["allow", "reject"] = "allow"
    separators: List[str] = Field(default_factory=lambda: ["/", "--"])

    @field_validator("separators")
    @classmethod
    def validate_separators(cls, value: List[str]) -> List[str]:
        """Ensure at least one non-empty separator is configured."""
        if not value:
            raise ValueError("separators must not be empty")
        blank = [separator for separator in value if not separator]
        if blank:
            raise ValueError("separators must be non-empty strings")
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "UTC"
    log_level: str = "WARNING"
    parser: ParserConfig = Field(default_factory=ParserConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is known to pendulum."""
        try:
            pendulum.timezone(value)
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalise and validate the logging level name."""
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
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
            raise FileNotFoundError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    @classmethod
    def load(cls, config_path: Path | None = None) -> "AppConfig":
        """
        Load an explicit config file, else the default one, else built-in defaults.
        """
        if config_path is not None:
            return cls.load_from_yaml(config_path)

        default_path = get_default_config_path()
        if default_path.exists():
            return cls.load_from_yaml(default_path)
        return cls()


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for timeframe.yaml in current directory
    config_path = Path.cwd() / DEFAULT_CONFIG_NAME

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / DEFAULT_CONFIG_NAME

    return config_path
