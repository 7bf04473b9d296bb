#!/usr/bin/env python3
"""
Family Statistics Aggregator
Groups resolved word records by headword and serves cached occurrence counts.

A record's effective headword comes from a user mapping for its word when one
exists, otherwise from the first segment of its stored family label. Records
with neither are left out of family statistics.

Cached results are rebuilt when their time-to-live expires or when
:meth:`FamilyStatsService.reload` is called. New records and new mappings do
not refresh the cache on their own.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .models import (
    DerivativeCount,
    FamilyMapping,
    FamilyStatEntry,
    GradeStat,
    WordRecord,
    WordStat,
    headword_from_label,
)
from .record_store import WordRecordStore
from .ttl_cache import TTLCache

logger = logging.getLogger(__name__)

FAMILY_STATS_KEY = 'families'
WORD_STATS_KEY = 'words'
GRADE_STATS_KEY = 'grades'


# ---------------------------------------------------------------------------
# Pure aggregation helpers


def mapping_overrides(mappings: Iterable[FamilyMapping]) -> Dict[str, str]:
    """Map lowercased words to their curated headword; later mappings win."""
    overrides: Dict[str, str] = {}
    for mapping in mappings:
        word = mapping.word.strip().lower()
        headword = mapping.headword.strip()
        if word and headword:
            overrides[word] = headword
    return overrides


def effective_headword(record: WordRecord, overrides: Mapping[str, str]) -> Optional[str]:
    override = overrides.get(record.word.strip().lower())
    if override:
        return override
    return headword_from_label(record.family_label)


def group_by_headword(
    records: Iterable[WordRecord],
    mappings: Iterable[FamilyMapping] = (),
) -> Dict[str, List[WordRecord]]:
    overrides = mapping_overrides(mappings)
    groups: Dict[str, List[WordRecord]] = {}
    for record in records:
        headword = effective_headword(record, overrides)
        if headword:
            groups.setdefault(headword, []).append(record)
    return groups


def _stats_from_groups(groups: Mapping[str, List[WordRecord]]) -> List[FamilyStatEntry]:
    stats: List[FamilyStatEntry] = []
    for headword, members in groups.items():
        counts = Counter(record.word.strip().lower() for record in members)
        derivatives = tuple(
            DerivativeCount(word=word, count=count)
            for word, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        )
        stats.append(FamilyStatEntry(
            headword=headword,
            total_count=len(members),
            derivatives=derivatives,
        ))

    stats.sort(key=lambda entry: (-entry.total_count, entry.headword))
    return stats


def compute_family_stats(
    records: Iterable[WordRecord],
    mappings: Iterable[FamilyMapping] = (),
) -> List[FamilyStatEntry]:
    """
    Aggregate records into per-headword totals.

    Families are ordered by total count descending, then headword; the
    derivative breakdown inside each family by count descending, then word.
    """
    return _stats_from_groups(group_by_headword(records, mappings))


def compute_word_stats(records: Iterable[WordRecord]) -> List[WordStat]:
    counts = Counter(record.word for record in records)
    return [
        WordStat(word=word, count=count)
        for word, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]


def compute_grade_stats(records: Iterable[WordRecord]) -> List[GradeStat]:
    """Distinct words per non-empty grade, ordered by grade"""
    words_by_grade: Dict[str, set] = {}
    for record in records:
        grade = record.metadata.get('grade')
        if grade is None or not str(grade).strip():
            continue
        words_by_grade.setdefault(str(grade).strip(), set()).add(record.word)

    return [
        GradeStat(grade=grade, unique_words=len(words))
        for grade, words in sorted(words_by_grade.items())
    ]


# ---------------------------------------------------------------------------
# Cached service


@dataclass(frozen=True)
class FamilyView:
    """Family statistics together with the records behind them"""
    stats: Tuple[FamilyStatEntry, ...] = ()
    groups: Mapping[str, Tuple[WordRecord, ...]] = field(default_factory=dict)


class FamilyStatsService:
    """Serve family, word and grade statistics from a TTL cache"""

    def __init__(
        self,
        store: WordRecordStore,
        ttl: Optional[float] = None,
        cache: Optional[TTLCache] = None,
    ):
        if cache is None:
            if ttl is None:
                from .config import get_app_config
                ttl = get_app_config().stats_cache_ttl
            cache = TTLCache(ttl)
        self.store = store
        self.cache = cache

    def _build_family_view(self) -> FamilyView:
        records = self.store.fetch_all()
        mappings = self.store.fetch_mappings()
        groups = group_by_headword(records, mappings)
        stats = _stats_from_groups(groups)
        logger.info(f"Computed statistics for {len(stats)} word families from {len(records)} records")
        return FamilyView(
            stats=tuple(stats),
            groups={headword: tuple(members) for headword, members in groups.items()},
        )

    def _family_view(self) -> FamilyView:
        return self.cache.get_or_compute(FAMILY_STATS_KEY, self._build_family_view)

    def family_stats(self) -> List[FamilyStatEntry]:
        return list(self._family_view().stats)

    def get_family(self, headword: str) -> List[WordRecord]:
        """Records whose effective headword is ``headword`` (case-insensitive)"""
        groups = self._family_view().groups
        wanted = headword.strip()
        if wanted in groups:
            return list(groups[wanted])
        lowered = wanted.lower()
        members: List[WordRecord] = []
        for name, group in groups.items():
            if name.lower() == lowered:
                members.extend(group)
        return members

    def get_family_by_label(self, label: str) -> List[WordRecord]:
        return self.store.fetch_by_family_label(label)

    def word_stats(self) -> List[WordStat]:
        return self._cached(WORD_STATS_KEY, compute_word_stats)

    def grade_stats(self) -> List[GradeStat]:
        return self._cached(GRADE_STATS_KEY, compute_grade_stats)

    def get_word_records(self, word: str) -> List[WordRecord]:
        return self.store.fetch_by_word(word)

    def _cached(self, key: str, compute: Callable[[List[WordRecord]], list]) -> list:
        return list(self.cache.get_or_compute(key, lambda: tuple(compute(self.store.fetch_all()))))

    def reload(self) -> None:
        """Drop every cached statistic so the next read rebuilds it"""
        self.cache.invalidate()
        logger.info("Statistics cache invalidated")


__all__ = [
    "FamilyStatsService",
    "FamilyView",
    "compute_family_stats",
    "compute_grade_stats",
    "compute_word_stats",
    "effective_headword",
    "group_by_headword",
    "mapping_overrides",
]
