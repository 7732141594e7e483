"""Effective-date resolution across a family's rule-sets."""

import logging
from datetime import date, datetime
from typing import Sequence, Union

from .schemas import NoApplicableRuleSet, RuleSet, SelectableDate

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str]


def parse_as_of(as_of: DateLike) -> date:
    """Coerce an as-of value (date, datetime or ISO string) to a date.

    Raises:
        ValueError: If a string is not an ISO date
    """
    if isinstance(as_of, datetime):
        return as_of.date()
    if isinstance(as_of, date):
        return as_of
    text = str(as_of).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        raise ValueError(f"Invalid date '{as_of}'. Expected YYYY-MM-DD.")


def _dedupe_last_wins(rule_sets: Sequence[RuleSet]) -> list[RuleSet]:
    """Keep one rule-set per effective_start; the last loaded one wins."""
    by_date: dict[date, RuleSet] = {}
    for rule_set in rule_sets:
        if rule_set.effective_start in by_date:
            logger.warning(
                f"Duplicate rule-set for {rule_set.key}: using '{rule_set.label}' "
                f"over '{by_date[rule_set.effective_start].label}'"
            )
        by_date[rule_set.effective_start] = rule_set
    return list(by_date.values())


def resolve_rule_set(as_of: DateLike, rule_sets: Sequence[RuleSet]) -> RuleSet:
    """Select the rule-set in effect on as_of.

    Picks the latest rule-set whose effective_start is on or before as_of.
    Dates before every rule-set fall back to the oldest one instead of
    failing, so historical lookups always produce a result.

    Args:
        as_of: Date to resolve for
        rule_sets: All rule-sets of one family, any order

    Returns:
        The applicable RuleSet

    Raises:
        NoApplicableRuleSet: If rule_sets is empty
    """
    if not rule_sets:
        raise NoApplicableRuleSet("No rule-sets available to resolve against")

    target = parse_as_of(as_of)
    candidates = sorted(_dedupe_last_wins(rule_sets), key=lambda r: r.effective_start, reverse=True)

    for rule_set in candidates:
        if rule_set.effective_start <= target:
            return rule_set

    oldest = candidates[-1]
    logger.debug(f"{target} predates all rule-sets, falling back to oldest ({oldest.key})")
    return oldest


def list_selectable_dates(rule_sets: Sequence[RuleSet]) -> list[SelectableDate]:
    """List known effective dates, oldest first, one entry per date."""
    ordered = sorted(_dedupe_last_wins(rule_sets), key=lambda r: r.effective_start)
    return [SelectableDate(key=r.key, label=r.label or r.key) for r in ordered]
