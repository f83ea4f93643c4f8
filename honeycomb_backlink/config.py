"""Configuration loading for the backlink exporter.

Configuration is read from three sources, highest priority first:

1. Explicit overrides passed by the caller
2. Environment variables (``HONEYCOMB_*``)
3. A TOML config file (``honeycomb_backlink.toml``)

The merged values are validated into a :class:`BacklinkConfig`.

Example config file::

    [honeycomb]
    api_key = "your-key"
    dataset = "links"

    [logging]
    debug = false
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from honeycomb_backlink.errors import ConfigError

logger = logging.getLogger("honeycomb_backlink.config")

CONFIG_FILE_NAME = "honeycomb_backlink.toml"
DEFAULT_API_HOST = "https://api.honeycomb.io"

# env var -> (section, key)
ENV_VARS = {
    "HONEYCOMB_API_KEY": ("honeycomb", "api_key"),
    "HONEYCOMB_API_HOST": ("honeycomb", "api_host"),
    "HONEYCOMB_DATASET": ("honeycomb", "dataset"),
    "HONEYCOMB_TIMEOUT": ("honeycomb", "timeout"),
    "HONEYCOMB_BACKLINK_DEBUG": ("logging", "debug"),
}

_BOOL_KEYS = {"debug"}
_FLOAT_KEYS = {"timeout"}
_TRUE_VALUES = {"true", "1", "yes", "on"}


class HoneycombConfig(BaseModel):
    """Delivery settings for the Honeycomb events API."""

    model_config = ConfigDict(extra="forbid")

    api_key: str = Field(default="", description="Honeycomb API key (write key)")
    api_host: str = Field(default=DEFAULT_API_HOST, description="Honeycomb API base URL")
    dataset: Optional[str] = Field(
        default=None,
        description="Dataset used when the resource has no service.name",
    )
    timeout: float = Field(default=10.0, gt=0, description="HTTP timeout in seconds")


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    debug: bool = False


class BacklinkConfig(BaseModel):
    """Top-level configuration."""

    model_config = ConfigDict(extra="forbid")

    honeycomb: HoneycombConfig = Field(default_factory=HoneycombConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def find_config_file() -> Optional[str]:
    """
    Look for a config file in the current directory, then the home directory.

    Returns:
        Path of the first file found, or None
    """
    candidates = [
        Path.cwd() / CONFIG_FILE_NAME,
        Path.home() / f".{CONFIG_FILE_NAME}",
    ]
    for candidate in candidates:
        if candidate.is_file():
            return str(candidate)
    return None


def load_toml_config(path: str) -> Dict[str, Any]:
    """
    Load a TOML config file into a nested dict.

    A missing file yields an empty dict.

    Raises:
        ConfigError: if the file is not valid TOML
    """
    config_path = Path(path)
    if not config_path.is_file():
        return {}
    try:
        with config_path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError("invalid TOML config file", {"path": path, "error": e}) from e


def _convert_env_value(key: str, raw: str) -> Any:
    if key in _BOOL_KEYS:
        return raw.strip().lower() in _TRUE_VALUES
    if key in _FLOAT_KEYS:
        try:
            return float(raw)
        except ValueError as e:
            raise ConfigError("invalid numeric environment value", {"key": key, "value": raw}) from e
    return raw


def load_config_from_env(flat: bool = False) -> Dict[str, Any]:
    """
    Read configuration from HONEYCOMB_* environment variables.

    Unset variables are left out of the result.

    Args:
        flat: Return ``{key: value}`` instead of ``{section: {key: value}}``
    """
    result: Dict[str, Any] = {}
    for env_name, (section, key) in ENV_VARS.items():
        raw = os.environ.get(env_name)
        if raw is None:
            continue
        value = _convert_env_value(key, raw)
        if flat:
            result[key] = value
        else:
            result.setdefault(section, {})[key] = value
    return result


def _flatten_sections(nested: Dict[str, Any]) -> Dict[str, Any]:
    sections = {key: section for section, key in ENV_VARS.values()}
    flat: Dict[str, Any] = {}
    for section, values in nested.items():
        if not isinstance(values, dict):
            flat[section] = values
            continue
        for key, value in values.items():
            expected = sections.get(key)
            if expected is not None and expected != section:
                raise ConfigError(
                    "configuration key in wrong section",
                    {"key": key, "section": section, "expected": expected},
                )
            flat[key] = value
    return flat


def load_config_with_priority(
    config_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Merge file, environment and explicit values into a flat dict.

    Precedence: overrides > environment > config file. When no
    config_file is given, :func:`find_config_file` is consulted.
    """
    path = config_file or find_config_file()
    merged: Dict[str, Any] = {}
    if path:
        merged.update(_flatten_sections(load_toml_config(path)))
    merged.update(load_config_from_env(flat=True))
    if overrides:
        merged.update({k: v for k, v in overrides.items() if v is not None})
    return merged


def _to_nested(flat: Dict[str, Any]) -> Dict[str, Any]:
    sections = {key: section for section, key in ENV_VARS.values()}
    nested: Dict[str, Any] = {}
    for key, value in flat.items():
        section = sections.get(key)
        if section is None:
            raise ConfigError("unknown configuration key", {"key": key})
        nested.setdefault(section, {})[key] = value
    return nested


def load_config(
    config_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> BacklinkConfig:
    """
    Load and validate configuration from all sources.

    Raises:
        ConfigError: on invalid TOML, unknown keys or invalid values
    """
    merged = load_config_with_priority(config_file=config_file, overrides=overrides)
    try:
        config = BacklinkConfig.model_validate(_to_nested(merged))
    except ValidationError as e:
        raise ConfigError("invalid configuration", {"errors": e.error_count()}) from e
    logger.debug("loaded configuration keys: %s", sorted(merged))
    return config


def validate_config(config: BacklinkConfig) -> None:
    """
    Check that a config can initialize the Honeycomb delivery client.

    Raises:
        ConfigError: if the API key is empty or the API host is not http(s)
    """
    if not config.honeycomb.api_key:
        raise ConfigError("honeycomb.api_key is required")
    if not config.honeycomb.api_host.startswith(("http://", "https://")):
        raise ConfigError(
            "honeycomb.api_host must be an http(s) URL",
            {"api_host": config.honeycomb.api_host},
        )
