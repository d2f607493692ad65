"""Configuration loading, schema, and defaults."""

from pathfilter.config.loader import ConfigError, load_config, read_filters_text
from pathfilter.config.schema import PathFilterConfig

__all__ = [
    "ConfigError",
    "PathFilterConfig",
    "load_config",
    "read_filters_text",
]
