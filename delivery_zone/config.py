"""
Configuration schema for the delivery zone engine.

The engine itself is pure; configuration only covers the ambient concerns
around it: log verbosity and the facility timezone used to turn an instant
into the weekday whose windows apply.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class EngineConfig:
    """
    Engine configuration (immutable, validated at construction).

    Attributes:
        log_level: DEBUG, INFO, WARNING or ERROR
        facility_timezone: IANA timezone name of the delivery facility
    """

    log_level: str = "INFO"
    facility_timezone: str = "America/Los_Angeles"

    def __post_init__(self):
        """Validate engine configuration."""
        level = str(self.log_level).upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level: {self.log_level}. "
                f"Must be one of {VALID_LOG_LEVELS}"
            )
        object.__setattr__(self, 'log_level', level)

        if not self.facility_timezone:
            raise ValueError("facility_timezone cannot be empty")
        try:
            ZoneInfo(self.facility_timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(
                f"Unknown facility_timezone: {self.facility_timezone!r}"
            ) from e

    @property
    def logging_level(self) -> int:
        """log_level as a logging module constant."""
        return getattr(logging, self.log_level)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EngineConfig":
        """
        Build from a mapping; unknown keys are rejected.

        Raises:
            ValueError: Unknown keys or invalid values
        """
        data = dict(data or {})
        unknown = set(data) - {"log_level", "facility_timezone"}
        if unknown:
            raise ValueError(f"Unknown engine config keys: {sorted(unknown)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "EngineConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            log_level: "DEBUG"
            facility_timezone: "America/Los_Angeles"

        Raises:
            FileNotFoundError: Config file missing
            ValueError: Invalid YAML or invalid values
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

        if data is not None and not isinstance(data, dict):
            raise ValueError(f"Config root in {path} must be a mapping")
        return cls.from_dict(data or {})

    def to_dict(self) -> Dict[str, str]:
        return {"log_level": self.log_level, "facility_timezone": self.facility_timezone}
