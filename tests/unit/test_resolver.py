"""Unit tests for effective-date resolution."""

from datetime import date, datetime

import pytest

from bracketcalc.sdk.brackets import (
    Bracket,
    NoApplicableRuleSet,
    RuleSet,
    list_selectable_dates,
    parse_as_of,
    resolve_rule_set,
)


def make_rule_set(effective: str, label: str = ""):
    return RuleSet(
        effective_start=date.fromisoformat(effective),
        label=label,
        brackets=[Bracket(range_start=0, percentage_rate=10)],
    )


@pytest.fixture
def rule_sets():
    # Deliberately out of order
    return [make_rule_set("2022-01-01", "2022 rates"), make_rule_set("2020-01-01", "2020 rates")]


class TestResolveRuleSet:

    def test_before_all_falls_back_to_oldest(self, rule_sets):
        assert resolve_rule_set(date(2019, 6, 1), rule_sets).label == "2020 rates"

    def test_after_all_uses_latest(self, rule_sets):
        assert resolve_rule_set(date(2023, 1, 1), rule_sets).label == "2022 rates"

    def test_between_uses_earlier(self, rule_sets):
        assert resolve_rule_set(date(2021, 12, 31), rule_sets).label == "2020 rates"

    def test_effective_date_is_inclusive(self, rule_sets):
        assert resolve_rule_set(date(2022, 1, 1), rule_sets).label == "2022 rates"

    def test_accepts_iso_strings_and_datetimes(self, rule_sets):
        assert resolve_rule_set("2022-03-04", rule_sets).label == "2022 rates"
        assert resolve_rule_set("2022-03-04T08:00:00Z", rule_sets).label == "2022 rates"
        assert resolve_rule_set(datetime(2020, 5, 1, 12, 30), rule_sets).label == "2020 rates"

    def test_duplicate_dates_last_loaded_wins(self, rule_sets):
        rule_sets.append(make_rule_set("2022-01-01", "2022 amended"))
        assert resolve_rule_set(date(2023, 1, 1), rule_sets).label == "2022 amended"

    def test_empty_raises(self):
        with pytest.raises(NoApplicableRuleSet):
            resolve_rule_set(date(2024, 1, 1), [])

    def test_invalid_date_raises_value_error(self, rule_sets):
        with pytest.raises(ValueError, match="Invalid date"):
            resolve_rule_set("next tuesday", rule_sets)


class TestParseAsOf:

    def test_date_passthrough(self):
        assert parse_as_of(date(2024, 2, 29)) == date(2024, 2, 29)

    def test_datetime_truncated(self):
        assert parse_as_of(datetime(2024, 2, 29, 23, 59)) == date(2024, 2, 29)


class TestListSelectableDates:

    def test_ascending_keys_and_labels(self, rule_sets):
        dates = list_selectable_dates(rule_sets)
        assert [(d.key, d.label) for d in dates] == [
            ("2020-01-01", "2020 rates"),
            ("2022-01-01", "2022 rates"),
        ]

    def test_missing_label_uses_key(self):
        dates = list_selectable_dates([make_rule_set("2024-01-01")])
        assert dates[0].label == "2024-01-01"

    def test_one_entry_per_date(self, rule_sets):
        rule_sets.append(make_rule_set("2020-01-01", "2020 amended"))
        dates = list_selectable_dates(rule_sets)
        assert [d.label for d in dates] == ["2020 amended", "2022 rates"]

    def test_empty(self):
        assert list_selectable_dates([]) == []
