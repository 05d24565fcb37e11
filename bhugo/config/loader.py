"""Configuration loader for bhugo."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigError
from .env_loader import read_env_file
from .schema import Config

DEFAULT_CONFIG_FILE = ".bhugo.yaml"


def _read_yaml(config_path: Path) -> dict[str, Any]:
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping")
    return data


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Collect configuration values from environment variables.

    Each field maps to its upper-case name, e.g. ``hugo_dir`` to ``HUGO_DIR``.
    """
    if environ is None:
        environ = os.environ
    values = {}
    for field in Config.model_fields:
        name = field.upper()
        if name in environ:
            values[field] = environ[name]
    return values


def load_config(
    config_file: Path | None = None,
    env_file: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Build the effective configuration.

    Layers, lowest priority first: defaults, YAML config file, ``.bhugo`` env
    file, process environment.

    Args:
        config_file: YAML file to read. If None, ``.bhugo.yaml`` is used when present.
        env_file: Env file to read. If None, ``.bhugo`` is used when present.
        environ: Environment mapping, defaults to ``os.environ``.

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If an explicitly named file is missing or a value is invalid.
    """
    data: dict[str, Any] = {}

    if config_file is not None:
        if not config_file.exists():
            raise ConfigError(f"Config file {config_file} does not exist")
        data.update(_read_yaml(config_file))
    elif Path(DEFAULT_CONFIG_FILE).exists():
        data.update(_read_yaml(Path(DEFAULT_CONFIG_FILE)))

    if env_file is not None and not env_file.exists():
        raise ConfigError(f"Env file {env_file} does not exist")

    data = {str(k).replace("-", "_").lower(): v for k, v in data.items()}
    data.update(env_overrides(read_env_file(env_file)))
    data.update(env_overrides(environ))

    try:
        return Config.from_dict(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def save_config(config: Config, config_path: Path, overwrite: bool = True) -> None:
    """Save configuration to a YAML file.

    Raises:
        FileExistsError: If the file exists and ``overwrite`` is False.
    """
    if config_path.exists() and not overwrite:
        raise FileExistsError(f"{config_path} already exists")
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(config.to_yaml(), encoding="utf-8")
