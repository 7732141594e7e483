"""Configuration management for Bracket Calc.

Machine-specific settings live in settings.json:
   - rules_dir: custom rule-sets directory (overrides the bundled rule-sets)
   - default_output_format: "json" or "text" for CLI output
   - cache_ttl_seconds: how long loaded rule-sets are reused

Config directory resolution:
1. BRACKET_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/bracket-calc/ (XDG_CONFIG_HOME fallback)

Rule-set directory resolution:
1. BRACKET_CALC_RULES_DIR environment variable (if set)
2. settings.json "rules_dir" key
3. rule-sets/ bundled with the package
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

APP_NAME = "bracket-calc"
SETTINGS_FILENAME = "settings.json"
BUNDLED_RULES_DIR = Path(__file__).parent.parent / "rule-sets"


class ConfigNotFoundError(Exception):
    """Raised when a configured path cannot be found."""
    pass


DEFAULT_SETTINGS = {
    "default_output_format": "json",
    "cache_ttl_seconds": 300,
}


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. BRACKET_CALC_CONFIG_PATH environment variable
    2. ~/.config/bracket-calc/ (XDG_CONFIG_HOME)
    """
    env_path = os.environ.get("BRACKET_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value, falling back to DEFAULT_SETTINGS then default."""
    settings = load_settings()
    if key in settings:
        return settings[key]
    return DEFAULT_SETTINGS.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_rules_dir(require_exists: bool = False) -> Path:
    """Get the rule-sets directory.

    Resolution order:
    1. BRACKET_CALC_RULES_DIR environment variable
    2. settings.json "rules_dir" key
    3. Bundled rule-sets shipped with the package

    Args:
        require_exists: If True, raises ConfigNotFoundError when a configured
            directory is missing

    Raises:
        ConfigNotFoundError: If require_exists=True and the configured path is not a directory
    """
    env_path = os.environ.get("BRACKET_CALC_RULES_DIR")
    if env_path:
        rules_dir = Path(env_path).expanduser()
        if require_exists and not rules_dir.is_dir():
            raise ConfigNotFoundError(
                f"Rules directory not found: {rules_dir}\n\n"
                f"Check the BRACKET_CALC_RULES_DIR environment variable."
            )
        return rules_dir

    custom = load_settings().get("rules_dir")
    if custom:
        rules_dir = Path(custom).expanduser()
        if require_exists and not rules_dir.is_dir():
            raise ConfigNotFoundError(
                f"Rules directory not found at configured path: {rules_dir}\n\n"
                f"Update with: bracket-calc settings rules-dir /path/to/rule-sets\n"
                f"Or revert to bundled rule-sets: bracket-calc settings rules-dir --clear"
            )
        return rules_dir

    return BUNDLED_RULES_DIR


def configure_logging() -> None:
    """Configure root logging from the LOG_LEVEL environment variable."""
    log_level = os.environ.get("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
