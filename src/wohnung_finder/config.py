"""Configuration loader for the wohnung finder."""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

DEFAULT_CONFIG_PATH = "./config/config.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "city": "Berlin",
    "poll": {
        "interval_seconds": 30,
        "max_workers": 4,
        "seen_retention_days": None,  # None keeps seen listings forever
    },
    "http": {
        "timeout_seconds": 15,
        "retries": 1,
    },
    "storage": {
        "state_file": "./data/state.json",
    },
    "server": {
        "host": "0.0.0.0",
        "port": 3000,
    },
    "providers": {},
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load configuration from YAML file and environment variables.

    Values missing from the file are taken from DEFAULT_CONFIG.
    PORT and STATE_FILE from the environment override the file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Dictionary containing merged configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    # Load environment variables from .env file
    load_dotenv()

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            f"Copy config/config.example.yaml to config/config.yaml and customize it."
        )

    with open(config_file, "r", encoding="utf-8") as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise ValueError(f"Configuration root must be a mapping: {config_path}")

    config = _deep_merge(DEFAULT_CONFIG, loaded)

    port = get_env("PORT")
    if port:
        config["server"]["port"] = int(port)
    state_file = get_env("STATE_FILE")
    if state_file:
        config["storage"]["state_file"] = state_file

    _validate_config(config)
    return config


def _validate_config(config: Dict[str, Any]) -> None:
    """Validate configuration structure."""
    poll = config["poll"]
    if not isinstance(poll.get("interval_seconds"), (int, float)) or poll["interval_seconds"] <= 0:
        raise ValueError("poll.interval_seconds must be a positive number")
    if not isinstance(poll.get("max_workers"), int) or poll["max_workers"] < 1:
        raise ValueError("poll.max_workers must be a positive integer")

    retention = poll.get("seen_retention_days")
    if retention is not None and (not isinstance(retention, int) or retention < 1):
        raise ValueError("poll.seen_retention_days must be a positive integer or null")

    http = config["http"]
    if not isinstance(http.get("timeout_seconds"), (int, float)) or http["timeout_seconds"] <= 0:
        raise ValueError("http.timeout_seconds must be a positive number")
    if not isinstance(http.get("retries"), int) or http["retries"] < 0:
        raise ValueError("http.retries must be a non-negative integer")

    providers = config.get("providers") or {}
    if not isinstance(providers, dict):
        raise ValueError("providers must be a mapping of provider id to settings")
    for provider_id, settings in providers.items():
        if settings is not None and not isinstance(settings, dict):
            raise ValueError(f"Settings for provider {provider_id} must be a mapping")


def get_env(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """
    Get environment variable with optional default and required check.

    Args:
        key: Environment variable name
        default: Default value if not set
        required: If True, raise error when not set

    Returns:
        Environment variable value

    Raises:
        ValueError: If required and not set
    """
    value = os.getenv(key, default)
    if required and not value:
        raise ValueError(f"Required environment variable not set: {key}")
    return value
