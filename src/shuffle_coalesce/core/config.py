# src/shuffle_coalesce/core/config.py
"""
Configuration schema and loading for shuffle-coalesce.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_ADVISORY_PARTITION_SIZE = 64 * 1024 * 1024

# Byte strings such as "64m", "64MB", "1GiB". Multiples are binary.
_BYTE_STRING_PATTERN = re.compile(r"^\s*(\d+)\s*([a-zA-Z]*)\s*$")
_BYTE_UNITS: dict[str, int] = {
    "": 1,
    "b": 1,
    "k": 1024,
    "kb": 1024,
    "kib": 1024,
    "m": 1024**2,
    "mb": 1024**2,
    "mib": 1024**2,
    "g": 1024**3,
    "gb": 1024**3,
    "gib": 1024**3,
    "t": 1024**4,
    "tb": 1024**4,
    "tib": 1024**4,
    "p": 1024**5,
    "pb": 1024**5,
    "pib": 1024**5,
}


def parse_byte_size(value: str | int) -> int:
    """Convert a byte string ("64MB", "128m", "1GiB") to a number of bytes.

    Integers are returned unchanged. A bare number string is taken as bytes.

    Raises:
        ValueError: If the string is not a number followed by a known unit
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid byte size: {value!r}")
    if isinstance(value, int):
        return value

    match = _BYTE_STRING_PATTERN.match(value)
    if match is None:
        raise ValueError(f"Invalid byte size: {value!r}")
    number, unit = match.groups()
    multiplier = _BYTE_UNITS.get(unit.lower())
    if multiplier is None:
        raise ValueError(
            f"Unknown byte size unit '{unit}' in {value!r}. "
            f"Valid units: {sorted(u for u in _BYTE_UNITS if u)}"
        )
    return int(number) * multiplier


class CoalesceSettings(BaseModel):
    """Configuration for coalescing shuffle partitions after map statistics arrive.

    Example YAML:
        coalesce:
          enabled: true
          advisory_partition_size_bytes: 64MB
          min_partition_num: 8
    """

    model_config = {"frozen": True}

    enabled: bool = Field(
        default=True,
        description="Merge small contiguous shuffle partitions before reducing",
    )
    advisory_partition_size_bytes: int = Field(
        default=DEFAULT_ADVISORY_PARTITION_SIZE,
        gt=0,
        description="Target size of a coalesced partition (soft upper bound)",
    )
    min_partition_num: int | None = Field(
        default=None,
        gt=0,
        description="Minimum number of coalesced partitions (defaults to 1)",
    )

    @field_validator("advisory_partition_size_bytes", mode="before")
    @classmethod
    def parse_advisory_size(cls, v: Any) -> Any:
        """Accept byte strings like '64MB' in addition to plain integers."""
        if isinstance(v, str):
            return parse_byte_size(v)
        return v

    @property
    def effective_min_partition_num(self) -> int:
        return self.min_partition_num if self.min_partition_num is not None else 1


class LoggingSettings(BaseModel):
    """Structured logging configuration."""

    model_config = {"frozen": True}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level",
    )
    json_output: bool = Field(
        default=False,
        description="Render log lines as JSON instead of console text",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.upper()
        return v


class ShuffleCoalesceSettings(BaseModel):
    """Top-level configuration.

    All sections are optional and fall back to their defaults.
    """

    model_config = {"frozen": True}

    coalesce: CoalesceSettings = Field(
        default_factory=CoalesceSettings,
        description="Partition coalescing configuration",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )


def load_settings(config_path: Path) -> ShuffleCoalesceSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (SHUFFLE_COALESCE_*) - highest priority
    2. Config file (settings.yaml)
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: SHUFFLE_COALESCE_COALESCE__min_partition_num
    for nested keys (nested part spelled as the field name).

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated ShuffleCoalesceSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="SHUFFLE_COALESCE",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; Pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {
        k.lower(): _lowercase_keys(v)
        for k, v in dynaconf_settings.as_dict().items()
        if k not in internal_keys
    }
    return ShuffleCoalesceSettings(**raw_config)


def _lowercase_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k).lower(): _lowercase_keys(v) for k, v in value.items()}
    return value


def resolve_config(settings: ShuffleCoalesceSettings) -> dict[str, Any]:
    """Convert validated settings to a JSON-serializable dict.

    Includes all settings, explicit and defaulted.
    """
    return settings.model_dump(mode="json")
