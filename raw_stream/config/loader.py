"""
YAML configuration loader for the raw data stream relay.

Loads configuration from YAML files with environment variable substitution.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from raw_stream.config.models import AppConfig


_ENV_REFERENCE = re.compile(r"\$\{(?P<name>[^}:]+)(?::-(?P<default>[^}]*))?\}")


def _substitute_env_vars(value: Any) -> Any:
    """Expand ${VAR} and ${VAR:-default} in string values of nested mappings."""
    if isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, str):
        return _ENV_REFERENCE.sub(
            lambda m: os.environ.get(m["name"], m["default"] or ""), value
        )
    return value


def load_yaml(path: Path) -> dict[str, Any]:
    """
    Load a YAML file and substitute environment variables.

    Raises:
        FileNotFoundError: If the configuration file doesn't exist
        yaml.YAMLError: If the YAML is invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path) as f:
        return _substitute_env_vars(yaml.safe_load(f) or {})


def load_config(
    config_path: str | Path | None = None,
    override_values: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Load relay configuration.

    Args:
        config_path: Path to configuration YAML file. If None, the first of
                    config/raw_stream.yaml, raw_stream.yaml and
                    ~/.raw_stream/raw_stream.yaml that exists is used; if
                    none exists, defaults apply.
        override_values: Dictionary of values to override after loading

    Returns:
        Validated AppConfig object

    Raises:
        FileNotFoundError: If an explicit configuration file is not found
        ValidationError: If configuration is invalid
    """
    config_dict: dict[str, Any] = {}

    if config_path is None:
        default_paths = [
            Path("config/raw_stream.yaml"),
            Path("raw_stream.yaml"),
            Path.home() / ".raw_stream" / "raw_stream.yaml",
        ]
        for path in default_paths:
            if path.exists():
                config_dict = load_yaml(path)
                break
    else:
        config_dict = load_yaml(Path(config_path))

    if override_values:
        config_dict = _deep_merge(config_dict, override_values)

    return AppConfig(**config_dict)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; nested mappings merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = _deep_merge(current, value)
        merged[key] = value
    return merged
