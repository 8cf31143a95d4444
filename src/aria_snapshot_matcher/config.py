"""
Configuration management for the ARIA snapshot matcher

Loads configuration from environment variables with sensible defaults
for snapshot assertions, the baseline store and logging.
"""

import logging
import os
from pathlib import Path
from typing import Literal, TypedDict

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables from .env file
# Try multiple paths for .env file
env_loaded = False
for env_path in [
    Path.cwd() / ".env",
    Path.home() / ".env",
]:
    if env_path.exists():
        logger.info(f"Loading environment from: {env_path}")
        load_dotenv(env_path)
        env_loaded = True
        break

if not env_loaded:
    logger.debug("No .env file found, using system environment variables only")

UpdateMode = Literal["none", "all", "changed", "missing"]

UPDATE_MODES: tuple[str, ...] = ("none", "all", "changed", "missing")
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_PREFIX = "ARIA_SNAPSHOT_"


class MatcherConfig(TypedDict):
    """Configuration for snapshot assertions"""

    # Baselines
    update_snapshots: UpdateMode
    snapshot_dir: str
    ignore_snapshots: bool

    # Failure output
    regexify_received: bool

    # Logging
    log_file: str
    log_level: str


DEFAULT_CONFIG: MatcherConfig = {
    "update_snapshots": "none",
    "snapshot_dir": "__snapshots__",
    "ignore_snapshots": False,
    "regexify_received": True,
    "log_file": "logs/aria-snapshot-mcp.log",
    "log_level": "INFO",
}


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean environment variable"""
    value = os.getenv(key)
    if value is None:
        return default
    value = value.strip().lower()
    if value in ("true", "1", "yes", "on"):
        return True
    if value in ("false", "0", "no", "off"):
        return False
    logger.warning(f"Invalid boolean for {key}: {value!r}, using default {default}")
    return default


def _get_choice_env(key: str, choices: tuple[str, ...], default: str, normalize=str.lower) -> str:
    """Get environment variable restricted to a set of values"""
    value = os.getenv(key)
    if value is None:
        return default
    value = normalize(value.strip())
    if value not in choices:
        logger.warning(
            f"Invalid value for {key}: {value!r} (expected one of {', '.join(choices)}), "
            f"using default {default!r}"
        )
        return default
    return value


def _get_str_env(key: str, default: str) -> str:
    """Get non-empty string environment variable"""
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def load_matcher_config() -> MatcherConfig:
    """
    Load matcher configuration from ARIA_SNAPSHOT_* environment variables.

    Invalid values fall back to their defaults with a warning.

    Returns:
        MatcherConfig with all keys populated
    """
    config: MatcherConfig = {
        "update_snapshots": _get_choice_env(  # type: ignore[typeddict-item]
            f"{ENV_PREFIX}UPDATE", UPDATE_MODES, DEFAULT_CONFIG["update_snapshots"]
        ),
        "snapshot_dir": _get_str_env(f"{ENV_PREFIX}DIR", DEFAULT_CONFIG["snapshot_dir"]),
        "ignore_snapshots": _get_bool_env(f"{ENV_PREFIX}IGNORE", DEFAULT_CONFIG["ignore_snapshots"]),
        "regexify_received": _get_bool_env(f"{ENV_PREFIX}REGEXIFY", DEFAULT_CONFIG["regexify_received"]),
        "log_file": _get_str_env(f"{ENV_PREFIX}LOG_FILE", DEFAULT_CONFIG["log_file"]),
        "log_level": _get_choice_env(
            f"{ENV_PREFIX}LOG_LEVEL", LOG_LEVELS, DEFAULT_CONFIG["log_level"], normalize=str.upper
        ),
    }
    return config
