from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_CONFIG_PATH = Path("propchat.config.yaml")
DEFAULT_SQLITE_PATH = "propchat.db"

BASE_QUERY_DEFAULTS: Dict[str, Any] = {
    "page_size": 5,
    "fuzzy_sample_cap": 100,
    "fuzzy_distance_threshold": 0.3,
}

BASE_CLASSIFIER_DEFAULTS: Dict[str, Any] = {
    "base_url": "https://api.groq.com/openai/v1",
    "model": "mixtral-8x7b-32768",
    "api_key_env": "GROQ_API_KEY",
    "timeout_seconds": 30,
    "max_tokens": 1024,
}


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load the propchat YAML config.

    Args:
        path: Optional path to the config file. Defaults to propchat.config.yaml

    Returns:
        Config dictionary (empty sections are allowed)

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the file is not a YAML mapping
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError("Config must be a dictionary")
    for section in ("storage", "query", "classifier"):
        value = config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ValueError(f"Config '{section}' must be a dictionary if provided")

    return config


def get_sqlite_path(config: Dict[str, Any]) -> str:
    return (config.get("storage") or {}).get("sqlite_path", DEFAULT_SQLITE_PATH)


def get_query_settings(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """
    Resolve query settings with built-in fallbacks.

    Defaults:
    - page_size: 5
    - fuzzy_sample_cap: 100
    - fuzzy_distance_threshold: 0.3 (70% similarity)

    Raises:
        ValueError: If a provided value is out of range
    """
    user_values = (config or {}).get("query") or {}
    settings = {**BASE_QUERY_DEFAULTS, **user_values}

    for key in ("page_size", "fuzzy_sample_cap"):
        value = settings[key]
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError(f"Query setting '{key}' must be a positive integer")

    threshold = settings["fuzzy_distance_threshold"]
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise ValueError("Query setting 'fuzzy_distance_threshold' must be numeric")
    if not 0.0 <= float(threshold) <= 1.0:
        raise ValueError("Query setting 'fuzzy_distance_threshold' must be between 0 and 1")
    settings["fuzzy_distance_threshold"] = float(threshold)

    return settings


def get_classifier_settings(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """Resolve intent classifier settings with built-in fallbacks."""
    user_values = (config or {}).get("classifier") or {}
    settings = {**BASE_CLASSIFIER_DEFAULTS, **user_values}
    settings["base_url"] = str(settings["base_url"]).rstrip("/")
    return settings
