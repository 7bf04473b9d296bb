#!/usr/bin/env python3
"""
Word record persistence.

``word_records`` holds one row per token imported from a source sentence;
``word_family_mappings`` holds user-curated word -> headword overrides.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Protocol, Sequence

import psycopg

from .exceptions import RecordStoreError
from .models import METADATA_FIELDS, FamilyMapping, WordRecord

logger = logging.getLogger(__name__)

RECORD_COLUMNS = ("id", "word", "sentence", "word_family") + METADATA_FIELDS

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS vocabulary (
        id SERIAL PRIMARY KEY,
        headword VARCHAR(255) NOT NULL,
        derivative TEXT,
        definition TEXT,
        pronunciation VARCHAR(255),
        partofspeech VARCHAR(100)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_vocabulary_headword ON vocabulary (LOWER(TRIM(headword)))",
    """
    CREATE TABLE IF NOT EXISTS word_records (
        id SERIAL PRIMARY KEY,
        word VARCHAR(255) NOT NULL,
        sentence TEXT NOT NULL,
        unit VARCHAR(100),
        section VARCHAR(100),
        test_point TEXT,
        collocation TEXT,
        book VARCHAR(100),
        grade VARCHAR(50),
        chinese_translation TEXT,
        word_family TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_word_records_word ON word_records (word)",
    "CREATE INDEX IF NOT EXISTS idx_word_records_family ON word_records (word_family)",
    """
    CREATE TABLE IF NOT EXISTS word_family_mappings (
        id SERIAL PRIMARY KEY,
        word VARCHAR(255) NOT NULL UNIQUE,
        headword VARCHAR(255) NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
)


def record_from_row(row: Dict[str, Any]) -> WordRecord:
    return WordRecord(
        id=row.get("id"),
        word=row["word"],
        source_text=row.get("sentence") or "",
        family_label=row.get("word_family"),
        metadata={name: row.get(name) for name in METADATA_FIELDS if row.get(name) is not None},
    )


class WordRecordStore(Protocol):
    def fetch_all(self) -> List[WordRecord]: ...

    def fetch_unlabeled(self) -> List[WordRecord]: ...

    def fetch_by_word(self, word: str) -> List[WordRecord]: ...

    def fetch_by_family_label(self, label: str) -> List[WordRecord]: ...

    def update_family_label(self, record_id: int, label: str) -> None: ...

    def insert_record(self, record: WordRecord) -> int: ...

    def fetch_mappings(self) -> List[FamilyMapping]: ...

    def upsert_mapping(self, word: str, headword: str) -> None: ...


class PostgresWordRecordStore:
    """PostgreSQL-backed :class:`WordRecordStore`"""

    def __init__(self, db_manager=None):
        self._db_manager = db_manager

    @contextmanager
    def _cursor(self, dictionary: bool = False):
        if self._db_manager is None:
            from .database_manager import get_database_manager
            self._db_manager = get_database_manager()
        try:
            with self._db_manager.get_cursor(dictionary=dictionary) as cursor:
                yield cursor
        except psycopg.Error as exc:
            logger.error(f"Word record store error: {exc}")
            raise RecordStoreError(str(exc)) from exc

    def ensure_schema(self) -> None:
        with self._cursor() as cursor:
            for statement in SCHEMA_STATEMENTS:
                cursor.execute(statement)
        logger.info("Word family tables ensured in database")

    def _select(self, where: str = "", params: Sequence[Any] = (), order: str = "id ASC") -> List[WordRecord]:
        sql = f"SELECT {', '.join(RECORD_COLUMNS)} FROM word_records"
        if where:
            sql += f" WHERE {where}"
        sql += f" ORDER BY {order}"
        with self._cursor(dictionary=True) as cursor:
            cursor.execute(sql, params)
            rows = cursor.fetchall()
        return [record_from_row(row) for row in rows]

    def fetch_all(self) -> List[WordRecord]:
        return self._select()

    def fetch_unlabeled(self) -> List[WordRecord]:
        return self._select("word_family IS NULL")

    def fetch_by_word(self, word: str) -> List[WordRecord]:
        return self._select("word = %s", (word,))

    def fetch_by_family_label(self, label: str) -> List[WordRecord]:
        return self._select("word_family = %s", (label,), order="word ASC, id ASC")

    def update_family_label(self, record_id: int, label: str) -> None:
        with self._cursor() as cursor:
            cursor.execute(
                "UPDATE word_records SET word_family = %s WHERE id = %s",
                (label, record_id),
            )

    def insert_record(self, record: WordRecord) -> int:
        columns = ["word", "sentence", "word_family"] + list(METADATA_FIELDS)
        values: List[Any] = [record.word, record.source_text, record.family_label]
        values.extend(record.metadata.get(name) for name in METADATA_FIELDS)
        placeholders = ", ".join(["%s"] * len(columns))
        with self._cursor() as cursor:
            cursor.execute(
                f"INSERT INTO word_records ({', '.join(columns)}) VALUES ({placeholders}) RETURNING id",
                values,
            )
            record_id = cursor.fetchone()[0]
        record.id = record_id
        return record_id

    def fetch_mappings(self) -> List[FamilyMapping]:
        with self._cursor() as cursor:
            cursor.execute(
                "SELECT word, headword FROM word_family_mappings ORDER BY headword ASC, word ASC"
            )
            rows = cursor.fetchall()
        return [FamilyMapping(word=word, headword=headword) for word, headword in rows]

    def upsert_mapping(self, word: str, headword: str) -> None:
        with self._cursor() as cursor:
            cursor.execute(
                """
                INSERT INTO word_family_mappings (word, headword)
                VALUES (%s, %s)
                ON CONFLICT (word) DO UPDATE
                SET headword = EXCLUDED.headword, updated_at = CURRENT_TIMESTAMP
                """,
                (word, headword),
            )


__all__ = [
    "WordRecordStore",
    "PostgresWordRecordStore",
    "record_from_row",
    "SCHEMA_STATEMENTS",
]
