"""Configuration file loading and CLI overrides for runtime tunables.

Kept out of the entrypoint so precedence is easy to follow: built-in
defaults in Constants, then the config file, then CLI flags.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)

# config key -> (Constants attribute, type)
_TUNABLES = {
    "hashes_url": ("HASHES_URL", str),
    "endoflife_url": ("ENDOFLIFE_URL", str),
    "gitlab_api_base": ("GITLAB_API_BASE", str),
    "gitlab_project_id": ("GITLAB_PROJECT_ID", int),
    "tags_per_page": ("TAGS_PER_PAGE", int),
    "request_timeout": ("REQUEST_TIMEOUT", int),
    "freshness_threshold_hours": ("FRESHNESS_THRESHOLD_HOURS", int),
    "workers": ("DEFAULT_WORKERS", int),
}


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or parsed."""


def load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load configuration from a YAML or JSON file.

    Args:
        config_path: Path to the config file, or None.

    Returns:
        Configuration dict; a top-level ``fingerprinter`` section is used when present.

    Raises:
        ConfigError: If the file is missing or cannot be parsed.
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.lower().endswith(".json"):
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    section = data.get("fingerprinter", data)
    return section if isinstance(section, dict) else {}


def apply_config(config: Dict[str, Any]) -> None:
    """Apply config file values onto Constants.

    Unknown keys and values of the wrong type are logged and ignored.
    """
    for key, value in config.items():
        tunable = _TUNABLES.get(key)
        if tunable is None:
            logger.warning("Ignoring unknown config key: %s", key)
            continue
        attr, cast = tunable
        try:
            setattr(Constants, attr, cast(value))
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid value for %s: %r", key, value)


def apply_cli_overrides(args) -> None:
    """Apply CLI overrides with highest precedence."""
    if getattr(args, "TIMEOUT", None) is not None:
        Constants.REQUEST_TIMEOUT = int(args.TIMEOUT)
    if getattr(args, "FRESHNESS_HOURS", None) is not None:
        Constants.FRESHNESS_THRESHOLD_HOURS = int(args.FRESHNESS_HOURS)
    if getattr(args, "WORKERS", None) is not None:
        Constants.DEFAULT_WORKERS = int(args.WORKERS)

    # Clamp to sane bounds
    Constants.DEFAULT_WORKERS = max(1, min(Constants.DEFAULT_WORKERS, Constants.MAX_WORKERS))
    if Constants.REQUEST_TIMEOUT <= 0:
        logger.warning("Request timeout must be positive, using 30 seconds")
        Constants.REQUEST_TIMEOUT = 30
    if Constants.FRESHNESS_THRESHOLD_HOURS < 0:
        logger.warning("Freshness threshold cannot be negative, using 24 hours")
        Constants.FRESHNESS_THRESHOLD_HOURS = 24


def configure_runtime(args) -> None:
    """Load the config file named by ``--config`` and apply all overrides."""
    config_path = getattr(args, "CONFIG", None)
    config = load_config_file(config_path)
    if config:
        logger.info("Loaded config from: %s", config_path)
    apply_config(config)
    apply_cli_overrides(args)
