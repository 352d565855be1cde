"""Loading PpnOptions from YAML configuration."""

import logging
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml

from ppn_options.options import DatapathProtocol, PpnOptions, PpnOptionsBuilder

logger = logging.getLogger(__name__)

# Keys holding durations, given in milliseconds in the configuration file
DURATION_KEYS = {
    "connectivity_check_retry_delay_ms": "connectivity_check_retry_delay",
    "rekey_duration_ms": "rekey_duration",
    "reconnector_initial_time_to_reconnect_ms": "reconnector_initial_time_to_reconnect",
    "reconnector_session_connection_deadline_ms": "reconnector_session_connection_deadline",
    "ipv4_keepalive_interval_ms": "ipv4_keepalive_interval",
    "ipv6_keepalive_interval_ms": "ipv6_keepalive_interval",
}


class ConfigurationError(Exception):
    """Exception raised when a configuration file cannot be turned into options."""


def _parse_duration(key: str, value: Any) -> timedelta | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(
            f"{key} must be a number of milliseconds (got {value!r})"
        )
    try:
        return timedelta(milliseconds=value)
    except (OverflowError, ValueError) as e:
        raise ConfigurationError(
            f"{key} is not a representable number of milliseconds (got {value!r})"
        ) from e


def _parse_datapath_protocol(value: Any) -> DatapathProtocol | None:
    if value is None:
        return None
    try:
        return DatapathProtocol(str(value).upper())
    except ValueError as e:
        allowed = ", ".join(p.value for p in DatapathProtocol)
        raise ConfigurationError(
            f"datapath_protocol must be one of {allowed} (got {value!r})"
        ) from e


def options_from_dict(data: dict[str, Any]) -> PpnOptions:
    """Build options from a configuration mapping.

    Keys are the option names used by PpnOptionsBuilder setters. Duration
    options use the option name with a "_ms" suffix and take milliseconds.

    Args:
        data: Configuration mapping, usually parsed from YAML

    Returns:
        PpnOptions: The options snapshot

    Raises:
        ConfigurationError: If the mapping has unknown keys or malformed values
        ValueError: If a value is rejected by the builder
    """
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration must be a mapping (got {type(data).__name__})"
        )

    builder = PpnOptionsBuilder()
    unknown = []
    for key, value in data.items():
        if key in DURATION_KEYS:
            name = DURATION_KEYS[key]
            value = _parse_duration(key, value)
        elif key in DURATION_KEYS.values():
            # durations are only accepted in their "_ms" form
            unknown.append(key)
            continue
        elif key == "datapath_protocol":
            name = key
            value = _parse_datapath_protocol(value)
        else:
            name = key

        setter = getattr(builder, f"set_{name}", None)
        if setter is None:
            unknown.append(key)
            continue
        setter(value)

    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {', '.join(sorted(map(str, unknown)))}"
        )

    return builder.build()


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML configuration file into a mapping.

    An empty file gives an empty mapping.

    Raises:
        FileNotFoundError: If the file does not exist
        yaml.YAMLError: If the file is not valid YAML
        ConfigurationError: If the document is not a mapping
    """
    logger.info("Loading configuration from %s", path)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration must be a mapping (got {type(data).__name__})"
        )
    return data


def load_options_file(path: Path) -> PpnOptions:
    """Read options from a YAML file; an empty file gives the defaults."""
    return options_from_dict(read_config_file(path))
