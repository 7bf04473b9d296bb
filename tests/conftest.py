"""Shared fixtures: an in-memory record store and a small vocabulary."""

import pytest

from word_families.exceptions import RecordStoreError
from word_families.models import FamilyMapping, VocabularyEntry, WordRecord
from word_families.vocabulary_index import VocabularySnapshot


class InMemoryWordRecordStore:
    """Record store double mirroring PostgresWordRecordStore's ordering"""

    def __init__(self, records=(), mappings=()):
        self.records = []
        self.mappings = {}
        self.fail_updates_for = set()
        self.fail_inserts_for = set()
        self.fetch_all_calls = 0
        for record in records:
            self.insert_record(record)
        for mapping in mappings:
            self.upsert_mapping(mapping.word, mapping.headword)

    def fetch_all(self):
        self.fetch_all_calls += 1
        return list(self.records)

    def fetch_unlabeled(self):
        return [r for r in self.records if r.family_label is None]

    def fetch_by_word(self, word):
        return [r for r in self.records if r.word == word]

    def fetch_by_family_label(self, label):
        matches = [r for r in self.records if r.family_label == label]
        return sorted(matches, key=lambda r: (r.word, r.id))

    def update_family_label(self, record_id, label):
        if record_id in self.fail_updates_for:
            raise RecordStoreError(f"update failed for {record_id}")
        for record in self.records:
            if record.id == record_id:
                record.family_label = label

    def insert_record(self, record):
        if record.word in self.fail_inserts_for:
            raise RecordStoreError(f"insert failed for {record.word}")
        record.id = len(self.records) + 1
        self.records.append(record)
        return record.id

    def fetch_mappings(self):
        items = [FamilyMapping(word=w, headword=h) for w, h in self.mappings.items()]
        return sorted(items, key=lambda m: (m.headword, m.word))

    def upsert_mapping(self, word, headword):
        self.mappings[word] = headword


@pytest.fixture
def vocabulary():
    return VocabularySnapshot([
        VocabularyEntry.from_row("act", "acts|acted|acting"),
        VocabularyEntry.from_row("active", "actively|activeness"),
        VocabularyEntry.from_row("adapt", "adapts|adapted|adapting", definition="to change"),
        VocabularyEntry.from_row("state", ""),
        VocabularyEntry.from_row("status", "status|statuses|state"),
        VocabularyEntry.from_row("react", "reaction|reacts"),
    ])


@pytest.fixture
def make_record():
    def _make(word, family_label=None, **metadata):
        return WordRecord(word=word, source_text=f"... {word} ...", family_label=family_label, metadata=metadata)
    return _make


@pytest.fixture
def store_factory():
    return InMemoryWordRecordStore
