"""Configuration management for bhugo.

This module handles loading and validating configuration from .bhugo.yaml,
the .bhugo env file and the process environment.
"""

from .env_loader import read_env_file
from .loader import env_overrides, load_config, save_config
from .schema import BASE_MANAGED_KEYS, Config, parse_duration

__all__ = [
    "BASE_MANAGED_KEYS",
    "Config",
    "env_overrides",
    "load_config",
    "read_env_file",
    "parse_duration",
    "save_config",
]
