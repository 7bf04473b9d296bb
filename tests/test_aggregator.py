"""Tests for family statistics and the TTL cache behind them."""

import threading
import time

import pytest

from word_families.aggregator import (
    FamilyStatsService,
    compute_family_stats,
    compute_grade_stats,
    compute_word_stats,
)
from word_families.models import FamilyMapping
from word_families.ttl_cache import TTLCache

ACT = " act | acts | acted | acting "
ADAPT = " adapt | adapts | adapted | adapting "


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def records(make_record):
    return [
        make_record("acting", ACT, grade="7"),
        make_record("acts", ACT, grade="7"),
        make_record("acting", ACT, grade="8"),
        make_record("adapt", ADAPT, grade="8"),
        make_record("think"),
    ]


def test_families_sorted_by_total_then_headword(records):
    stats = compute_family_stats(records)

    assert [(s.headword, s.total_count) for s in stats] == [("act", 3), ("adapt", 1)]
    assert [(d.word, d.count) for d in stats[0].derivatives] == [("acting", 2), ("acts", 1)]


def test_ties_break_alphabetically(make_record):
    stats = compute_family_stats([
        make_record("zeal", " zeal "),
        make_record("able", " able "),
    ])
    assert [s.headword for s in stats] == ["able", "zeal"]


def test_unresolved_records_are_excluded(records):
    assert sum(s.total_count for s in compute_family_stats(records)) == 4


def test_mapping_overrides_stored_label(records):
    stats = compute_family_stats(records, [FamilyMapping(word="Acts", headword="action")])

    assert {s.headword: s.total_count for s in stats} == {"act": 2, "action": 1, "adapt": 1}


def test_mapping_can_group_an_unresolved_word(records):
    stats = compute_family_stats(records, [FamilyMapping(word="think", headword="thought")])
    assert "thought" in [s.headword for s in stats]


def test_stat_entry_to_dict(records):
    data = compute_family_stats(records)[0].to_dict()
    assert data == {
        "headword": "act",
        "count": 3,
        "derivatives": [{"word": "acting", "count": 2}, {"word": "acts", "count": 1}],
    }


def test_word_stats(records):
    stats = compute_word_stats(records)
    assert [(s.word, s.count) for s in stats] == [
        ("acting", 2), ("acts", 1), ("adapt", 1), ("think", 1),
    ]


def test_grade_stats_count_distinct_words(records):
    stats = compute_grade_stats(records)
    assert [(s.grade, s.unique_words) for s in stats] == [("7", 2), ("8", 2)]


class TestTTLCache:
    """Expiry and invalidation"""

    def test_value_reused_within_ttl(self):
        clock = FakeClock()
        cache = TTLCache(300, clock=clock)
        calls = []

        def compute():
            calls.append(1)
            return len(calls)

        assert cache.get_or_compute("k", compute) == 1
        clock.now = 299
        assert cache.get_or_compute("k", compute) == 1
        clock.now = 300
        assert cache.get_or_compute("k", compute) == 2

    def test_invalidate_single_key(self):
        cache = TTLCache(10)
        cache.get_or_compute("a", lambda: 1)
        cache.get_or_compute("b", lambda: 2)
        cache.invalidate("a")
        assert cache.get_or_compute("a", lambda: 10) == 10
        assert cache.get_or_compute("b", lambda: 20) == 2

    def test_failed_compute_leaves_no_entry(self):
        cache = TTLCache(10)

        def boom():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            cache.get_or_compute("k", boom)
        assert cache.get_or_compute("k", lambda: "v") == "v"

    def test_concurrent_cold_reads_build_once(self):
        cache = TTLCache(300)
        workers = 8
        barrier = threading.Barrier(workers)
        builds = []
        results = []

        def compute():
            builds.append(1)
            time.sleep(0.05)
            return object()

        def read():
            barrier.wait()
            results.append(cache.get_or_compute("families", compute))

        threads = [threading.Thread(target=read) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(builds) == 1
        assert len(results) == workers
        assert all(result is results[0] for result in results)

    def test_ttl_must_be_positive(self):
        with pytest.raises(ValueError):
            TTLCache(0)


class TestFamilyStatsService:
    """Cached service over a record store"""

    def test_cached_within_ttl(self, store_factory, records, make_record):
        clock = FakeClock()
        store = store_factory(records)
        service = FamilyStatsService(store, cache=TTLCache(300, clock=clock))

        first = service.family_stats()
        store.insert_record(make_record("acted", ACT))
        clock.now = 120

        assert service.family_stats() == first
        assert store.fetch_all_calls == 1

    def test_rebuilt_after_ttl(self, store_factory, records, make_record):
        clock = FakeClock()
        store = store_factory(records)
        service = FamilyStatsService(store, cache=TTLCache(300, clock=clock))

        service.family_stats()
        store.insert_record(make_record("acted", ACT))
        clock.now = 301

        assert service.family_stats()[0].total_count == 4

    def test_reload_drops_cache(self, store_factory, records, make_record):
        store = store_factory(records)
        service = FamilyStatsService(store, ttl=300)

        service.family_stats()
        service.word_stats()
        store.insert_record(make_record("acted", ACT))
        service.reload()

        assert service.family_stats()[0].total_count == 4
        assert ("acted", 1) in [(s.word, s.count) for s in service.word_stats()]

    def test_get_family_is_case_insensitive(self, store_factory, records):
        service = FamilyStatsService(store_factory(records), ttl=300)

        members = service.get_family("ACT")
        assert sorted(r.word for r in members) == ["acting", "acting", "acts"]
        assert service.get_family("nothing") == []

    def test_get_family_by_label_orders_by_word(self, store_factory, records):
        service = FamilyStatsService(store_factory(records), ttl=300)
        assert [r.word for r in service.get_family_by_label(ACT)] == ["acting", "acting", "acts"]

    def test_grade_stats_and_word_records(self, store_factory, records):
        service = FamilyStatsService(store_factory(records), ttl=300)
        assert [s.grade for s in service.grade_stats()] == ["7", "8"]
        assert len(service.get_word_records("acting")) == 2
