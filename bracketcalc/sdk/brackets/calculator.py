"""Breakdown calculations over a located bracket.

Each derived field is rounded once, half-up to cents. Arithmetic runs on
Decimal values built from each float's shortest repr, so 333.33 * 15% gives
exactly 49.9995 and rounds to 50.00.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Optional, Sequence, Union

from .schemas import Bracket, BreakdownResult

Number = Union[int, float, Decimal]

CENTS = Decimal("0.01")


def to_decimal(amount: Number) -> Decimal:
    """Convert a number to Decimal via its string form (avoids binary float noise)."""
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def round2(amount: Number) -> float:
    """Round half-up to 2 decimal places.

    Example:
        round2(49.9995)  # -> 50.0
        round2(60.005)   # -> 60.01
    """
    return float(to_decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP))


def clamp_value(value: Optional[Number]) -> float:
    """Floor negative, NaN or missing input at zero.

    Raises:
        ValueError: If value is positive infinity
    """
    if value is None:
        return 0.0
    value = float(value)
    if math.isnan(value) or value < 0:
        return 0.0
    if not math.isfinite(value):
        raise ValueError(f"Invalid amount '{value}'. Expected a finite number.")
    return value


def compute_compound_total(parts: Iterable[Number]) -> float:
    """Sum already-rounded parts.

    The total is built from the displayed (rounded) values, so a subtotal
    always equals the sum of its line items.
    """
    total = sum((to_decimal(round2(p)) for p in parts), Decimal("0"))
    return round2(total)


def compute_compound_parts(
    bracket: Bracket,
    groups: Mapping[str, Sequence[str]],
) -> dict[str, dict[str, float]]:
    """Round each bracket part and total it per group.

    Parts are looked up in bracket.parts as "<group>_<part>"; missing parts
    count as zero.
    """
    compound = {}
    for group, part_names in groups.items():
        rounded = {name: round2(bracket.parts.get(f"{group}_{name}", 0.0)) for name in part_names}
        rounded["total"] = compute_compound_total(rounded.values())
        compound[group] = rounded
    return compound


def compute_breakdown(
    bracket: Bracket,
    value: Number,
    compound_groups: Optional[Mapping[str, Sequence[str]]] = None,
) -> BreakdownResult:
    """Compute the monetary breakdown of value within bracket.

    Args:
        bracket: The located bracket
        value: Salary or taxable income (clamped at zero)
        compound_groups: Optional group -> part names to total from bracket.parts

    Returns:
        BreakdownResult with offset, marginal and total amounts
    """
    value_dec = to_decimal(clamp_value(value))
    offset = value_dec - to_decimal(bracket.range_start)
    if offset < 0:
        # Caller bypassed the locator with a value below the floor
        offset = Decimal("0")

    marginal = round2(offset * to_decimal(bracket.percentage_rate) / Decimal("100"))
    total = round2(to_decimal(marginal) + to_decimal(bracket.fixed_amount))

    return BreakdownResult(
        bracket=bracket,
        offset=float(offset),
        marginal_amount=marginal,
        fixed_amount=bracket.fixed_amount,
        total_amount=total,
        compound=compute_compound_parts(bracket, compound_groups or {}),
    )
