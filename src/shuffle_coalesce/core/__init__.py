"""Core infrastructure: configuration, logging, statistics loading."""

from shuffle_coalesce.core.config import (
    CoalesceSettings,
    LoggingSettings,
    ShuffleCoalesceSettings,
    load_settings,
    parse_byte_size,
    resolve_config,
)
from shuffle_coalesce.core.logging import configure_logging, get_logger
from shuffle_coalesce.core.statistics_io import load_statistics, parse_statistics

__all__ = [
    "CoalesceSettings",
    "LoggingSettings",
    "ShuffleCoalesceSettings",
    "configure_logging",
    "get_logger",
    "load_settings",
    "load_statistics",
    "parse_byte_size",
    "parse_statistics",
    "resolve_config",
]
