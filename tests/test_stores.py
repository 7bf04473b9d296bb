"""Tests for the PostgreSQL-backed index and record store using fake db managers."""

from contextlib import contextmanager

import psycopg
import pytest
from fastapi.testclient import TestClient

from web_apps.word_family_app import app, get_vocabulary_index
from word_families.exceptions import (
    PopulationAbortedError,
    RecordStoreError,
    ResolutionUnavailableError,
)
from word_families.family_resolver import FamilyResolver
from word_families.population import populate_family_labels
from word_families.record_store import PostgresWordRecordStore
from word_families.vocabulary_index import PostgresVocabularyIndex


class DeadManager:
    """db manager whose pool cannot hand out connections"""

    def get_cursor(self, dictionary=False, autocommit=False):
        raise psycopg.OperationalError("connection refused")


class RecordingCursor:
    def __init__(self, manager):
        self.manager = manager

    def execute(self, sql, params=None):
        self.manager.executed.append((sql, params))

    def fetchall(self):
        return list(self.manager.rows)

    def fetchone(self):
        return self.manager.rows[0] if self.manager.rows else None


class RecordingManager:
    """db manager that records SQL and returns canned rows"""

    def __init__(self, rows=()):
        self.rows = list(rows)
        self.executed = []

    @contextmanager
    def get_cursor(self, dictionary=False, autocommit=False):
        yield RecordingCursor(self)


class TestVocabularyIndexFailures:
    """Database errors surface as unavailability, never as a miss"""

    @pytest.mark.parametrize("lookup", ["find_by_headword", "find_by_derivative", "find_all_by_derivative"])
    def test_lookups_raise_unavailable(self, lookup):
        index = PostgresVocabularyIndex(DeadManager())

        with pytest.raises(ResolutionUnavailableError) as excinfo:
            getattr(index, lookup)("act")

        assert isinstance(excinfo.value.__cause__, psycopg.OperationalError)

    def test_snapshot_raises_unavailable(self):
        with pytest.raises(ResolutionUnavailableError):
            PostgresVocabularyIndex(DeadManager()).snapshot()

    def test_population_aborts_instead_of_counting_misses(self, store_factory, make_record):
        store = store_factory([make_record("acting"), make_record("think")])
        resolver = FamilyResolver(PostgresVocabularyIndex(DeadManager()))

        with pytest.raises(PopulationAbortedError) as excinfo:
            populate_family_labels(store, resolver, progress_every=50)

        assert excinfo.value.summary.not_found == 0
        assert excinfo.value.summary.updated == 0
        assert all(r.family_label is None for r in store.records)

    def test_resolve_endpoint_returns_503(self):
        app.dependency_overrides[get_vocabulary_index] = lambda: PostgresVocabularyIndex(DeadManager())
        try:
            response = TestClient(app).get("/api/resolve", params={"word": "act"})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 503
        assert response.json() == {"error": "Vocabulary index unavailable"}


class TestVocabularyIndexQueries:
    """SQL sent by the live index"""

    def test_headword_lookup_trims_and_lowercases(self):
        manager = RecordingManager([("act ", "acts|acted", None, None, None)])

        entry = PostgresVocabularyIndex(manager).find_by_headword(" Act ")

        sql, params = manager.executed[0]
        assert "LOWER(TRIM(headword)) = %s" in sql
        assert params == ("act",)
        assert entry.headword == "act"
        assert entry.family_label == " act | acts | acted "

    def test_derivative_lookup_uses_anchored_pattern(self):
        manager = RecordingManager()

        assert PostgresVocabularyIndex(manager).find_by_derivative("Acting") is None

        sql, params = manager.executed[0]
        assert "LOWER(derivative) ~ %s" in sql
        assert params == (r"(^|\|)\s*acting\s*(\||$)", 1)


class TestRecordStoreFailures:
    """Database errors surface as RecordStoreError"""

    def test_reads_raise_record_store_error(self):
        store = PostgresWordRecordStore(DeadManager())

        with pytest.raises(RecordStoreError) as excinfo:
            store.fetch_all()

        assert isinstance(excinfo.value.__cause__, psycopg.OperationalError)

    def test_writes_raise_record_store_error(self):
        store = PostgresWordRecordStore(DeadManager())

        with pytest.raises(RecordStoreError):
            store.update_family_label(1, " act ")
        with pytest.raises(RecordStoreError):
            store.upsert_mapping("acts", "act")

    def test_insert_assigns_returned_id(self, make_record):
        manager = RecordingManager([(42,)])
        record = make_record("acting", grade="7")

        assert PostgresWordRecordStore(manager).insert_record(record) == 42
        assert record.id == 42
        sql, params = manager.executed[0]
        assert sql.startswith("INSERT INTO word_records")
        assert params[:3] == ["acting", "... acting ...", None]
