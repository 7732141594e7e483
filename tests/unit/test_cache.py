"""Tests for the TTL caching repository wrapper."""

import pytest

from bracketcalc.sdk.brackets import (
    CachingRuleSetRepository,
    DataUnavailable,
    InMemoryRuleSetRepository,
    list_selectable_dates,
)


class CountingRepository(InMemoryRuleSetRepository):
    """In-memory repository that counts reads."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = {"all": 0, "one": 0, "index": 0}
        self.fail = False

    def load_all(self):
        self.calls["all"] += 1
        if self.fail:
            raise DataUnavailable("store offline")
        return super().load_all()

    def load_one(self, effective_start):
        self.calls["one"] += 1
        return super().load_one(effective_start)

    def list_index(self):
        self.calls["index"] += 1
        return list_selectable_dates(super().load_all())


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def inner():
    return CountingRepository(
        [
            {"effective_start": "2023-01-01", "brackets": [{"range_start": 0, "percentage_rate": 14}]},
            {"effective_start": "2025-01-01", "brackets": [{"range_start": 0, "percentage_rate": 15}]},
        ],
        family="sss",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cached(inner, clock):
    return CachingRuleSetRepository(inner, ttl_seconds=60, clock=clock)


class TestCachingRuleSetRepository:

    def test_repeat_reads_hit_cache(self, cached, inner):
        first = cached.load_all()
        second = cached.load_all()

        assert first == second
        assert inner.calls["all"] == 1

    def test_expires_after_ttl(self, cached, inner, clock):
        cached.load_all()
        clock.now += 59
        cached.load_all()
        assert inner.calls["all"] == 1

        clock.now += 2
        cached.load_all()
        assert inner.calls["all"] == 2

    def test_load_one_cached_per_date(self, cached, inner):
        cached.load_one("2023-01-01")
        cached.load_one("2023-01-01")
        cached.load_one("2025-01-01")
        assert inner.calls["one"] == 2

    def test_list_index_cached(self, cached, inner):
        assert [d.key for d in cached.list_index()] == ["2023-01-01", "2025-01-01"]
        cached.list_index()
        assert inner.calls["index"] == 1

    def test_invalidate_pattern(self, cached, inner):
        cached.load_all()
        cached.load_one("2023-01-01")

        assert cached.invalidate("sss:2023-*") == 1
        cached.load_all()
        cached.load_one("2023-01-01")

        assert inner.calls["all"] == 1
        assert inner.calls["one"] == 2

    def test_invalidate_all(self, cached, inner):
        cached.load_all()
        cached.list_index()
        assert cached.invalidate() == 2

        cached.load_all()
        assert inner.calls["all"] == 2

    def test_invalidate_other_family_is_noop(self, cached):
        cached.load_all()
        assert cached.invalidate("tax:*") == 0

    def test_failures_not_cached(self, cached, inner):
        inner.fail = True
        with pytest.raises(DataUnavailable):
            cached.load_all()

        inner.fail = False
        assert len(cached.load_all()) == 2
        assert inner.calls["all"] == 2

    def test_family_passthrough(self, cached):
        assert cached.family == "sss"
