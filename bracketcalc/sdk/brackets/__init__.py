"""brackets - Dated bracket schedules and their breakdowns.

Scope:
- Versioned rule-sets, one per effective date, per family (tax, sss)
- Effective-date resolution with fallback to the oldest rule-set
- Bracket lookup, breakdown math (round half-up per field), range labels

Constraints:
- Pure calculation - rule-sets come from an injected repository
- Out-of-range input never fails: negative salary is treated as zero,
  dates before every rule-set use the oldest one

Usage:
    from bracketcalc.sdk.brackets import BracketEngine, get_repository

    engine = BracketEngine(get_repository("tax"), "tax")
    engine.get_bracket("2024-03-15", 30000, schedule="monthly")
"""

from .schemas import (
    Bracket,
    BreakdownResult,
    DataUnavailable,
    NoApplicableRuleSet,
    RuleSet,
    SelectableDate,
)

from .calculator import (
    round2,
    clamp_value,
    compute_breakdown,
    compute_compound_total,
)

from .locator import locate_bracket, sort_brackets
from .resolver import resolve_rule_set, list_selectable_dates, parse_as_of
from .labels import format_range_label, materialize_brackets

from .repository import (
    RuleSetRepository,
    FileRuleSetRepository,
    InMemoryRuleSetRepository,
    get_repository,
)
from .cache import CachingRuleSetRepository

from .families import RuleFamily, TAX, SSS, FAMILIES, get_family
from .engine import BracketEngine, build_engine

__all__ = [
    # Schemas
    "Bracket",
    "BreakdownResult",
    "DataUnavailable",
    "NoApplicableRuleSet",
    "RuleSet",
    "SelectableDate",
    # Calculation
    "round2",
    "clamp_value",
    "compute_breakdown",
    "compute_compound_total",
    "locate_bracket",
    "sort_brackets",
    "resolve_rule_set",
    "list_selectable_dates",
    "parse_as_of",
    "format_range_label",
    "materialize_brackets",
    # Loading
    "RuleSetRepository",
    "FileRuleSetRepository",
    "InMemoryRuleSetRepository",
    "CachingRuleSetRepository",
    "get_repository",
    # Families
    "RuleFamily",
    "TAX",
    "SSS",
    "FAMILIES",
    "get_family",
    "BracketEngine",
    "build_engine",
]
