"""Configuration module."""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

# Environment variable -> (section, key, converter)
ENV_OVERRIDES = {
    "OPENGRAPH_TIMEOUT": ("opengraph", "timeout", float),
    "OPENGRAPH_USER_AGENT": ("opengraph", "user_agent", str),
    "OPENGRAPH_MAX_REDIRECTS": ("opengraph", "max_redirects", int),
    "CACHE_TTL": ("cache", "ttl", float),
    "CACHE_KEY_PREFIX": ("cache", "key_prefix", str),
    "APP_NAME": ("app", "name", str),
    "LOG_LEVEL": ("logging", "level", str),
    "LOG_FORMAT": ("logging", "format", str),
}


def default_config_path() -> Path:
    return Path(__file__).parent / "settings.yaml"


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config/settings.yaml

    Returns:
        Configuration dictionary
    """
    if config_path is None:
        config_path = default_config_path()

    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}

    # Override with environment variables if present
    for env_var, (section, key, convert) in ENV_OVERRIDES.items():
        if env_var in os.environ:
            config.setdefault(section, {})
            if config[section] is None:
                config[section] = {}
            config[section][key] = convert(os.environ[env_var])

    return config
