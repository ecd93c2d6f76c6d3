"""Configuration management for the piggybank metrics core.

Defaults live in ``settings.json`` next to this module.  Every value can be
overridden with a ``PIGGYBANK_*`` environment variable, which is resolved
once at import time into the module-level constants below.  Calculators
never read these directly; the summary facade and the formatter pass them
in as defaults so callers can still override per call.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

# Base project root - assumes this file is in piggybank/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

SETTINGS_PATH = Path(__file__).parent / "settings.json"

BREAKDOWN_PERIODS = ("month", "quarter", "year")

# Environment variable -> (section, key, type)
_ENV_OVERRIDES = {
    "PIGGYBANK_CURRENCY_SYMBOL": ("currency", "symbol", str),
    "PIGGYBANK_TREND_MONTHS": ("summary", "trend_months", int),
    "PIGGYBANK_BREAKDOWN_PERIOD": ("summary", "breakdown_period", str),
    "PIGGYBANK_RECENT_LIMIT": ("summary", "recent_limit", int),
    "PIGGYBANK_GOAL_LIMIT": ("summary", "goal_limit", int),
    "PIGGYBANK_TREND_LINE_LIMIT": ("summary", "trend_line_limit", int),
    "PIGGYBANK_INSIGHT_LIMIT": ("summary", "insight_limit", int),
    "PIGGYBANK_LOG_LEVEL": ("logging", "level", str),
}


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """Load the JSON defaults and apply environment overrides.

    Args:
        path: Optional alternative settings file (used by tests)

    Returns:
        Nested configuration dictionary

    Raises:
        FileNotFoundError: If the settings file doesn't exist
        json.JSONDecodeError: If the settings file is invalid JSON

    Example:
        >>> load_config()['summary']['trend_months']
        3
    """
    config_path = path or SETTINGS_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config = json.load(f)

    for env_name, (section, key, cast) in _ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw is None or raw.strip() == "":
            continue
        try:
            value = cast(raw.strip())
        except ValueError:
            # Keep the JSON default when an override is not a valid number
            continue
        config.setdefault(section, {})[key] = value

    period = config.get("summary", {}).get("breakdown_period")
    if period not in BREAKDOWN_PERIODS:
        config.setdefault("summary", {})["breakdown_period"] = "month"

    return config


def get_config_value(*keys: str, default: Any = None) -> Any:
    """Get a nested configuration value by key path.

    Example:
        >>> get_config_value('currency', 'symbol')
        '₹'
    """
    try:
        value = load_config()
        for key in keys:
            value = value[key]
        return value
    except (KeyError, TypeError, FileNotFoundError):
        return default


_CONFIG = load_config()

CURRENCY_SYMBOL: str = _CONFIG["currency"]["symbol"]
TREND_MONTHS: int = _CONFIG["summary"]["trend_months"]
BREAKDOWN_PERIOD: str = _CONFIG["summary"]["breakdown_period"]
RECENT_LIMIT: int = _CONFIG["summary"]["recent_limit"]
GOAL_LIMIT: int = _CONFIG["summary"]["goal_limit"]
TREND_LINE_LIMIT: int = _CONFIG["summary"]["trend_line_limit"]
INSIGHT_LIMIT: int = _CONFIG["summary"]["insight_limit"]
LOG_LEVEL: str = _CONFIG["logging"]["level"]

# Data directory for snapshot files used by the command-line scripts
DATA_DIR = Path(os.getenv("PIGGYBANK_DATA_DIR", _PROJECT_ROOT / "data"))


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for scripts.  The library itself never does this."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def get_data_dir() -> str:
    """Get the data directory as a string."""
    return str(DATA_DIR)
