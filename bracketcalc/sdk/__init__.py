"""Bracket Calc SDK - Core functionality for bracket resolution and breakdowns."""

from .config import (
    ConfigNotFoundError,
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_rules_dir,
    configure_logging,
    BUNDLED_RULES_DIR,
)

from .brackets import (
    Bracket,
    BreakdownResult,
    DataUnavailable,
    NoApplicableRuleSet,
    RuleSet,
    SelectableDate,
    BracketEngine,
    build_engine,
    get_family,
    get_repository,
    FAMILIES,
)

__all__ = [
    # Config
    "ConfigNotFoundError",
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_rules_dir",
    "configure_logging",
    "BUNDLED_RULES_DIR",
    # Brackets
    "Bracket",
    "BreakdownResult",
    "DataUnavailable",
    "NoApplicableRuleSet",
    "RuleSet",
    "SelectableDate",
    "BracketEngine",
    "build_engine",
    "get_family",
    "get_repository",
    "FAMILIES",
]
