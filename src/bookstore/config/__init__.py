"""Configuration module for the bookstore API.

Handles loading and getting of configuration values from various locations.
"""

from .config import (
    AdminSeed,
    AppConfig,
    configure_logging,
    get_env_str,
    load_config_from_env,
)

__all__ = [
    "AdminSeed",
    "AppConfig",
    "configure_logging",
    "get_env_str",
    "load_config_from_env",
]
