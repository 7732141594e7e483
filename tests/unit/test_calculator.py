"""Unit tests for breakdown calculations and rounding."""

from decimal import Decimal

import pytest

from bracketcalc.sdk.brackets import Bracket, compute_breakdown, compute_compound_total, round2
from bracketcalc.sdk.brackets.calculator import clamp_value, compute_compound_parts, to_decimal


class TestRound2:
    """Round half-up to cents."""

    def test_half_rounds_up(self):
        assert round2(49.9995) == 50.0
        assert round2(60.005) == 60.01
        assert round2(0.125) == 0.13

    def test_below_half_rounds_down(self):
        assert round2(1375.0449) == 1375.04

    def test_decimal_input(self):
        assert round2(Decimal("2.675")) == 2.68

    def test_float_noise_does_not_leak(self):
        # 2.675 is stored as 2.67499999... in binary; its repr is still "2.675"
        assert round2(2.675) == 2.68


class TestClampValue:

    @pytest.mark.parametrize("value", [-100, -0.01, float("nan"), None])
    def test_invalid_values_floor_to_zero(self, value):
        assert clamp_value(value) == 0.0

    def test_positive_values_pass_through(self):
        assert clamp_value(1234.5) == 1234.5

    def test_negative_infinity_floors_to_zero(self):
        assert clamp_value(float("-inf")) == 0.0

    def test_infinity_rejected(self):
        with pytest.raises(ValueError, match="finite"):
            clamp_value(float("inf"))


class TestComputeBreakdown:

    def test_end_to_end_single_bracket(self):
        """20% of 1000 over a zero floor is 200.00."""
        bracket = Bracket(range_start=0, fixed_amount=0, percentage_rate=20)
        result = compute_breakdown(bracket, 1000)

        assert result.offset == 1000.0
        assert result.marginal_amount == 200.0
        assert result.total_amount == 200.0
        assert result.bracket == bracket

    def test_each_field_rounded_independently(self):
        """marginal = round2(49.9995) = 50.00, total = round2(50.00 + 10.005) = 60.01."""
        bracket = Bracket(range_start=0, fixed_amount=10.005, percentage_rate=15)
        result = compute_breakdown(bracket, 333.33)

        assert result.offset == 333.33
        assert result.marginal_amount == 50.0
        assert result.total_amount == 60.01

    def test_offset_measured_from_floor(self):
        bracket = Bracket(range_start=20833, fixed_amount=0, percentage_rate=15)
        result = compute_breakdown(bracket, 30000)

        assert result.offset == 9167.0
        assert result.marginal_amount == 1375.05
        assert result.total_amount == 1375.05

    def test_value_below_floor_treated_as_zero_offset(self):
        bracket = Bracket(range_start=33333, fixed_amount=1875, percentage_rate=20)
        result = compute_breakdown(bracket, 1000)

        assert result.offset == 0.0
        assert result.marginal_amount == 0.0
        assert result.total_amount == 1875.0

    def test_negative_value_clamped(self):
        bracket = Bracket(range_start=0, fixed_amount=5, percentage_rate=10)
        result = compute_breakdown(bracket, -250)

        assert result.offset == 0.0
        assert result.total_amount == 5.0

    @pytest.mark.parametrize("fixed,rate", [(0, 0), (10.005, 15), (2500, 25), (82.19, 25), (183541.8, 35)])
    @pytest.mark.parametrize("value", [0, 0.01, 333.33, 1096.5, 20832.99, 777777.77])
    def test_total_equals_rounded_sum_of_fields(self, fixed, rate, value):
        bracket = Bracket(range_start=0, fixed_amount=fixed, percentage_rate=rate)
        result = compute_breakdown(bracket, value)

        expected = round2(to_decimal(result.marginal_amount) + to_decimal(result.fixed_amount))
        assert result.total_amount == expected
        assert result.offset >= 0

    def test_no_compound_groups_by_default(self):
        result = compute_breakdown(Bracket(range_start=0), 100)
        assert result.compound == {}


class TestCompoundTotals:

    def test_sums_rounded_parts(self):
        # Each part displays as 0.00, so the total must too (not round2(0.012) = 0.01)
        assert compute_compound_total([0.004, 0.004, 0.004]) == 0.0
        assert compute_compound_total([1000, 250]) == 1250.0

    def test_total_matches_displayed_line_items(self):
        parts = [33.335, 16.665, 10]
        displayed = [round2(p) for p in parts]
        assert compute_compound_total(parts) == round2(sum(to_decimal(d) for d in displayed))

    def test_empty_parts(self):
        assert compute_compound_total([]) == 0.0

    def test_groups_from_bracket_parts(self):
        bracket = Bracket(
            range_start=24750,
            range_end=25250,
            fixed_amount=1250,
            parts={
                "employee_regular": 1000,
                "employee_mpf": 250,
                "employer_regular": 2000,
                "employer_mpf": 500,
                "employer_ec": 30,
            },
        )
        compound = compute_compound_parts(
            bracket,
            {"employee": ("regular", "mpf"), "employer": ("regular", "mpf", "ec")},
        )

        assert compound["employee"] == {"regular": 1000.0, "mpf": 250.0, "total": 1250.0}
        assert compound["employer"] == {"regular": 2000.0, "mpf": 500.0, "ec": 30.0, "total": 2530.0}

    def test_missing_parts_count_as_zero(self):
        compound = compute_compound_parts(Bracket(range_start=0), {"employee": ("regular", "mpf")})
        assert compound["employee"] == {"regular": 0.0, "mpf": 0.0, "total": 0.0}
