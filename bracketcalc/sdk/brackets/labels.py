"""Range labels for bracket selection lists and review tables."""

from decimal import Decimal
from typing import Any, Optional, Sequence

from .calculator import CENTS, Number, to_decimal
from .locator import sort_brackets
from .schemas import Bracket


def format_number(amount: Number) -> str:
    """Format without trailing zeros or exponent (1000.0 -> '1000', 999.99 -> '999.99')."""
    normalized = to_decimal(amount).normalize()
    if normalized == normalized.to_integral_value():
        normalized = normalized.quantize(Decimal("1"))
    return format(normalized, "f")


def format_range_label(bracket: Bracket, next_bracket: Optional[Bracket]) -> str:
    """Label a bracket by its successor's floor.

    Example:
        "0 - 999.99" for [0, 1000), "Above 5000" for the top bracket
    """
    if next_bracket is None:
        return f"Above {format_number(bracket.range_start)}"
    upper = to_decimal(next_bracket.range_start) - CENTS
    return f"{format_number(bracket.range_start)} - {format_number(upper)}"


def materialize_brackets(brackets: Sequence[Bracket]) -> list[dict[str, Any]]:
    """Sort brackets and annotate each payload with its range_label."""
    ordered = sort_brackets(brackets)
    rows = []
    for index, bracket in enumerate(ordered):
        successor = ordered[index + 1] if index + 1 < len(ordered) else None
        row = bracket.model_dump()
        row["range_label"] = format_range_label(bracket, successor)
        rows.append(row)
    return rows
