"""Bracket engine: repository -> resolver -> locator -> calculator for one family."""

import logging
from pathlib import Path
from typing import Any, Optional, Union

from .cache import CachingRuleSetRepository
from .calculator import Number, compute_breakdown
from .families import RuleFamily, get_family
from .labels import format_range_label, materialize_brackets
from .locator import locate_bracket, sort_brackets
from .repository import RuleSetRepository, get_repository
from .resolver import DateLike, parse_as_of, resolve_rule_set
from .schemas import Bracket, BreakdownResult, RuleSet

logger = logging.getLogger(__name__)


class BracketEngine:
    """Resolves brackets and breakdowns for a single rule family.

    The repository is injected so callers control where rule-sets come from
    (files, memory, a caching wrapper).
    """

    def __init__(self, repository: RuleSetRepository, family: Union[RuleFamily, str]):
        self.repository = repository
        self.family = get_family(family) if isinstance(family, str) else family

    def resolve(self, as_of: DateLike, schedule: Optional[str] = None) -> RuleSet:
        """Return the rule-set in effect on as_of, narrowed to schedule."""
        schedule = self.family.check_schedule(schedule)
        rule_set = resolve_rule_set(as_of, self.repository.load_all())
        return rule_set.for_schedule(schedule)

    def _compute(self, as_of: DateLike, salary: Number, schedule: Optional[str]) -> tuple[RuleSet, BreakdownResult]:
        rule_set = self.resolve(as_of, schedule)
        bracket = locate_bracket(rule_set, salary)
        result = compute_breakdown(bracket, salary, self.family.compound_groups)
        logger.debug(
            f"{self.family.name}: as_of={parse_as_of(as_of)} salary={salary} -> "
            f"rule-set {rule_set.key} ({rule_set.schedule or 'default'}), "
            f"bracket from {bracket.range_start}, total {result.total_amount}"
        )
        return rule_set, result

    def compute(self, as_of: DateLike, salary: Number, schedule: Optional[str] = None) -> BreakdownResult:
        return self._compute(as_of, salary, schedule)[1]

    def get_bracket(self, as_of: DateLike, salary: Number, schedule: Optional[str] = None) -> dict[str, Any]:
        """Compute and flatten into the family's payload shape.

        Tax payload keys: bracket, taxOffset, taxFix, taxByPercentage, taxTotal.
        Unprefixed families use offset, fix, byPercentage, total, plus one
        entry per compound group.
        """
        rule_set, result = self._compute(as_of, salary, schedule)
        return self.flatten(result, rule_set)

    def flatten(self, result: BreakdownResult, rule_set: Optional[RuleSet] = None) -> dict[str, Any]:
        name = self.family.field_name
        payload: dict[str, Any] = {
            "bracket": self._bracket_payload(result.bracket, rule_set),
            name("offset"): result.offset,
            name("fix"): result.fixed_amount,
            name("byPercentage"): result.marginal_amount,
            name("total"): result.total_amount,
        }
        payload.update(result.compound)
        return payload

    def _bracket_payload(self, bracket: Bracket, rule_set: Optional[RuleSet]) -> dict[str, Any]:
        row = bracket.model_dump()
        if rule_set is not None:
            ordered = sort_brackets(rule_set.brackets)
            successor = next((b for b in ordered if b.range_start > bracket.range_start), None)
            row["range_label"] = format_range_label(bracket, successor)
        return row

    def select_dates(self) -> list[dict[str, str]]:
        """Effective dates for selection lists, oldest first."""
        return [entry.model_dump() for entry in self.repository.list_index()]

    def get_table(self, as_of: DateLike, schedule: Optional[str] = None) -> dict[str, Any]:
        """Resolved rule-set with its sorted, labeled bracket list."""
        rule_set = self.resolve(as_of, schedule)
        return {
            "key": rule_set.key,
            "label": rule_set.label,
            "schedule": rule_set.schedule,
            "schedules": rule_set.schedule_names(),
            "brackets": materialize_brackets(rule_set.brackets),
        }


def build_engine(
    family: Union[RuleFamily, str],
    rules_dir: Optional[Union[str, Path]] = None,
    ttl_seconds: Optional[float] = None,
) -> BracketEngine:
    """Engine over the configured rules directory.

    ttl_seconds > 0 wraps the repository in a CachingRuleSetRepository;
    None reads cache_ttl_seconds from settings.json.
    """
    family = get_family(family) if isinstance(family, str) else family
    repository: RuleSetRepository = get_repository(family.name, rules_dir)
    if ttl_seconds is None:
        from ..config import get_setting
        ttl_seconds = float(get_setting("cache_ttl_seconds", 0) or 0)
    if ttl_seconds > 0:
        repository = CachingRuleSetRepository(repository, ttl_seconds=ttl_seconds)
    return BracketEngine(repository, family)
