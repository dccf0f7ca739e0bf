"""Runtime configuration."""
from .settings import Settings, ConfigError, find_config

__all__ = ["Settings", "ConfigError", "find_config"]
