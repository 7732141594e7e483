"""Bracket lookup within a resolved rule-set."""

from typing import Sequence

from .calculator import Number, clamp_value
from .schemas import Bracket, DataUnavailable, RuleSet


def sort_brackets(brackets: Sequence[Bracket]) -> list[Bracket]:
    """Sort ascending by range_start (stable for equal starts)."""
    return sorted(brackets, key=lambda b: b.range_start)


def _matches(bracket: Bracket, value: float) -> bool:
    if bracket.range_start > value:
        return False
    return bracket.range_end is None or value < bracket.range_end


def locate_bracket(rule_set: RuleSet, value: Number) -> Bracket:
    """Find the bracket that applies to value.

    Brackets are sorted here regardless of load order. Scanning runs from the
    highest range_start down, so the highest qualifying bracket wins. The top
    bracket matches any value at or above its range_start.

    Negative or NaN values are treated as zero. A value below every
    range_start falls back to the lowest bracket; this never raises for a
    non-empty rule-set.

    Raises:
        DataUnavailable: If the rule-set has no brackets
    """
    brackets = sort_brackets(rule_set.brackets)
    if not brackets:
        raise DataUnavailable(f"Rule-set {rule_set.key} has no brackets")

    value = clamp_value(value)

    top = brackets[-1]
    if top.range_start <= value:
        return top

    for bracket in reversed(brackets[:-1]):
        if _matches(bracket, value):
            return bracket

    return brackets[0]
