"""Configuration manager for DepGraph using TOML files."""

from __future__ import annotations

import logging
from typing import Any, Dict

import toml

from .config import BASE_DIR

logger = logging.getLogger(__name__)

CONFIG_FILE = BASE_DIR / "config.toml"

GRAPH_SECTION = "graph"

# Keys accepted in the ``[graph]`` section, with the type each is coerced to.
GRAPH_KEYS = {
    "cache_ttl_seconds": float,
    "max_depth": int,
    "include_tests": bool,
    "extensions": list,
    "exclude_dirs": list,
}


def load_full_config() -> Dict[str, Any]:
    """Load the entire TOML config (all sections)."""
    if not CONFIG_FILE.exists():
        return {}
    try:
        with open(CONFIG_FILE, "r") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", CONFIG_FILE, exc)
        return {}


def _save_full_config(config: Dict[str, Any]) -> bool:
    """Write entire config dict to TOML file, preserving all sections."""
    try:
        CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        with open(CONFIG_FILE, "w") as f:
            toml.dump(config, f)
        return True
    except OSError as exc:
        logger.warning("Could not write config %s: %s", CONFIG_FILE, exc)
        return False


def load_graph_config() -> Dict[str, Any]:
    """Load graph settings from the ``[graph]`` section.

    Unknown keys are dropped so a stale config file cannot inject
    unexpected settings. A value of the wrong type is logged and dropped,
    so that key falls back to its default.

    Returns:
        Dict of recognised keys, or an empty dict when nothing is configured.
    """
    section = load_full_config().get(GRAPH_SECTION, {})
    if not isinstance(section, dict):
        logger.warning("Ignoring [%s] in %s: not a table", GRAPH_SECTION, CONFIG_FILE)
        return {}

    settings: Dict[str, Any] = {}
    for key, value in section.items():
        if key not in GRAPH_KEYS:
            continue
        try:
            settings[key] = check_graph_value(key, value)
        except ValueError as exc:
            logger.warning("Ignoring %s in %s: %s", key, CONFIG_FILE, exc)
    return settings


def coerce_graph_value(key: str, raw: str) -> Any:
    """Convert a command-line string into the type stored for *key*.

    Raises:
        KeyError: if *key* is not a graph setting.
        ValueError: if *raw* cannot be converted.
    """
    kind = GRAPH_KEYS[key]
    if kind is bool:
        lowered = raw.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
        raise ValueError(f"Expected a boolean for '{key}', got '{raw}'")
    if kind is list:
        return [item.strip() for item in raw.split(",") if item.strip()]
    try:
        value = kind(raw)
    except ValueError:
        raise ValueError(f"Expected {kind.__name__} for '{key}', got '{raw}'") from None
    return check_graph_value(key, value)


def check_graph_value(key: str, value: Any) -> Any:
    """Validate a value read from TOML for *key*, returning it as the stored type.

    Strings are accepted for every key and go through
    :func:`coerce_graph_value`, so ``include_tests = "false"`` means False
    and ``extensions = ".ts"`` means ``[".ts"]``.

    Raises:
        KeyError: if *key* is not a graph setting.
        ValueError: if *value* has the wrong type or is out of range.
    """
    kind = GRAPH_KEYS[key]
    if isinstance(value, str):
        return coerce_graph_value(key, value)

    if kind is bool:
        if isinstance(value, bool):
            return value
    elif kind is list:
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return value
    elif kind is int:
        if isinstance(value, int) and not isinstance(value, bool):
            if value < 1:
                raise ValueError(f"'{key}' must be at least 1, got {value}")
            return value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        if value < 0:
            raise ValueError(f"'{key}' must not be negative, got {value}")
        return float(value)

    raise ValueError(f"Expected {kind.__name__} for '{key}', got {value!r}")


def save_graph_config(key: str, value: Any) -> bool:
    """Save one graph setting to config TOML.

    Preserves other sections and keys in the file.

    Returns:
        True if saved successfully.
    """
    if key not in GRAPH_KEYS:
        raise KeyError(key)
    config = load_full_config()
    section = config.setdefault(GRAPH_SECTION, {})
    section[key] = value
    return _save_full_config(config)


def clear_graph_config() -> bool:
    """Remove ``[graph]`` section from config, resetting to defaults."""
    config = load_full_config()
    config.pop(GRAPH_SECTION, None)
    return _save_full_config(config)
