"""
Clock Skew Probe - Configuration loader.

Loads configuration from a YAML file and SKEWPROBE_* environment variables.
The monitoring platform supplies target identity and credentials through
either of these (or command-line options) before the probe runs.
"""

from __future__ import annotations

import copy
import logging
import os

import yaml

logger = logging.getLogger(__name__)

NTP_METHOD_MONITOR = "monitor"
NTP_METHOD_NTPLIB = "ntplib"
NTP_METHODS = (NTP_METHOD_MONITOR, NTP_METHOD_NTPLIB)

DEFAULT_CONFIG = {
    "target": {
        "address": "",
        "hostname": "",
        "username": "",
        "password": "",
    },
    "ntp": {
        "method": NTP_METHOD_MONITOR,
        # {server} is replaced with the NTP server given on the command line
        "command": ["w32tm", "/monitor", "/computers:{server}", "/nowarn"],
        "ntplib_version": 3,
    },
    "remote": {
        "namespace": "root\\cimv2",
        "wmi_class": "Win32_UTCTime",
    },
    "logging": {
        "level": "WARNING",
        "file": "",
    },
}

_CONFIG_PATH_ENV = "SKEWPROBE_CONFIG"
_DEFAULT_CONFIG_PATH = "/etc/skewprobe/config.yaml"

# Map SKEWPROBE_* env vars to config paths. Type: str, int, or "list"
_ENV_TO_CONFIG: list[tuple[str, tuple[str, ...], str | type]] = [
    ("SKEWPROBE_TARGET_ADDRESS", ("target", "address"), str),
    ("SKEWPROBE_TARGET_HOSTNAME", ("target", "hostname"), str),
    ("SKEWPROBE_TARGET_USERNAME", ("target", "username"), str),
    ("SKEWPROBE_TARGET_PASSWORD", ("target", "password"), str),
    ("SKEWPROBE_NTP_METHOD", ("ntp", "method"), str),
    ("SKEWPROBE_NTP_COMMAND", ("ntp", "command"), "list"),
    ("SKEWPROBE_NTP_NTPLIB_VERSION", ("ntp", "ntplib_version"), int),
    ("SKEWPROBE_REMOTE_NAMESPACE", ("remote", "namespace"), str),
    ("SKEWPROBE_REMOTE_WMI_CLASS", ("remote", "wmi_class"), str),
    ("SKEWPROBE_LOGGING_LEVEL", ("logging", "level"), str),
    ("SKEWPROBE_LOGGING_FILE", ("logging", "file"), str),
]


def _parse_env_list(val: str) -> list[str]:
    """Parse whitespace-separated string to list of non-empty tokens."""
    return [part for part in val.split() if part]


def _env_overrides() -> dict:
    """Build config override dict from SKEWPROBE_* environment variables."""
    overrides: dict = {}
    for env_key, path, typ in _ENV_TO_CONFIG:
        val = os.environ.get(env_key, "").strip()
        if not val:
            continue
        try:
            if typ is str:
                parsed = val
            elif typ is int:
                parsed = int(val)
            elif typ == "list":
                parsed = _parse_env_list(val)
            else:
                continue
        except (ValueError, TypeError):
            logger.warning("Invalid env %s; ignoring.", env_key)
            continue
        target = overrides
        for key in path[:-1]:
            target = target.setdefault(key, {})
        target[path[-1]] = parsed
    return overrides


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Recursively merge override into base, returning a new dict.

    A section that is a dict in base keeps its base value when the override
    is not a dict (e.g. an empty ``target:`` key in YAML loads as None).
    """
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict):
            if isinstance(value, dict):
                result[key] = _deep_merge(result[key], value)
            elif value is not None:
                logger.warning(
                    "Config section %r must be a mapping, got %s; ignoring.",
                    key,
                    type(value).__name__,
                )
        else:
            result[key] = value
    return result


def load_config(config_path: str | None = None) -> dict:
    """
    Load configuration from a YAML file, falling back to defaults.

    The config file path is resolved in this order:
    1. Explicit ``config_path`` argument
    2. ``SKEWPROBE_CONFIG`` environment variable
    3. Default path ``/etc/skewprobe/config.yaml``

    Missing keys fall back to DEFAULT_CONFIG values. SKEWPROBE_* environment
    variables are applied last.
    """
    path = config_path or os.environ.get(_CONFIG_PATH_ENV, _DEFAULT_CONFIG_PATH)

    config = copy.deepcopy(DEFAULT_CONFIG)

    if os.path.isfile(path):
        try:
            with open(path, "r", encoding="utf-8") as fh:
                user_config = yaml.safe_load(fh) or {}
            if isinstance(user_config, dict):
                config = _deep_merge(config, user_config)
                logger.debug("Configuration loaded from %s", path)
            else:
                logger.error(
                    "Config file %s must contain a mapping; using defaults.", path
                )
        except yaml.YAMLError as exc:
            logger.error("Failed to parse config file %s: %s", path, exc)
        except OSError as exc:
            logger.error("Failed to read config file %s: %s", path, exc)
    else:
        logger.warning("Config file not found at %s; using defaults.", path)

    env_overrides = _env_overrides()
    if env_overrides:
        config = _deep_merge(config, env_overrides)
        logger.debug("Applied config overrides from SKEWPROBE_* environment variables")

    return config


def apply_target_overrides(config: dict, **values: str | None) -> dict:
    """Return config with non-empty target values (address, hostname, ...) replaced."""
    target = {key: value for key, value in values.items() if value}
    if not target:
        return config
    return _deep_merge(config, {"target": target})


def validate_config(config: dict) -> list[str]:
    """
    Validate configuration for a probe run.

    Args:
        config: Configuration dict (from load_config or similar).

    Returns:
        List of error messages. Empty list means config is valid.
    """
    errors: list[str] = []

    target = config.get("target", {})
    if not (target.get("address") or "").strip():
        errors.append("Target address (target.address) must not be empty.")
    if not (target.get("hostname") or "").strip():
        errors.append("Target hostname (target.hostname) must not be empty.")

    ntp = config.get("ntp", {})
    method = ntp.get("method", NTP_METHOD_MONITOR)
    if method not in NTP_METHODS:
        errors.append(
            f"NTP method (ntp.method) must be one of {', '.join(NTP_METHODS)}; "
            f"got {method!r}."
        )
    elif method == NTP_METHOD_MONITOR and not ntp.get("command"):
        errors.append("NTP command (ntp.command) must not be empty.")

    if errors:
        logger.debug("Config validation failed: %s", "; ".join(errors))
    else:
        logger.debug("Config validation passed.")
    return errors
