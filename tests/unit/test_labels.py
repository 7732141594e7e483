"""Unit tests for bracket range labels."""

from bracketcalc.sdk.brackets import Bracket, format_range_label, materialize_brackets
from bracketcalc.sdk.brackets.labels import format_number


class TestFormatNumber:

    def test_integers_without_decimals(self):
        assert format_number(1000.0) == "1000"
        assert format_number(0) == "0"
        assert format_number(666667) == "666667"

    def test_cents_kept(self):
        assert format_number(999.99) == "999.99"
        assert format_number(20832.5) == "20832.5"


class TestFormatRangeLabel:

    def test_with_successor(self):
        assert format_range_label(Bracket(range_start=0), Bracket(range_start=1000)) == "0 - 999.99"

    def test_top_bracket(self):
        assert format_range_label(Bracket(range_start=5000), None) == "Above 5000"

    def test_successor_with_cents(self):
        label = format_range_label(Bracket(range_start=10417), Bracket(range_start=16666.5))
        assert label == "10417 - 16666.49"


class TestMaterializeBrackets:

    def test_labels_follow_sorted_order(self):
        rows = materialize_brackets([
            Bracket(range_start=5000),
            Bracket(range_start=0),
            Bracket(range_start=1000),
        ])
        assert [r["range_label"] for r in rows] == ["0 - 999.99", "1000 - 4999.99", "Above 5000"]

    def test_rows_keep_bracket_fields(self):
        rows = materialize_brackets([Bracket(range_start=0, fixed_amount=12.5, percentage_rate=15)])
        assert rows == [{
            "range_start": 0.0,
            "range_end": None,
            "fixed_amount": 12.5,
            "percentage_rate": 15.0,
            "parts": {},
            "range_label": "Above 0",
        }]
