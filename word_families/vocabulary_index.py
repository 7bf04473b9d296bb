#!/usr/bin/env python3
"""
Vocabulary Index
Read-only lookups over the ``vocabulary`` table (headword -> derivative list).

Two implementations share one contract:

- :class:`PostgresVocabularyIndex` queries the live table for every lookup.
- :class:`VocabularySnapshot` holds a point-in-time copy in memory, which is
  what batch population resolves against.

Reverse lookups match a token as a whole item of the pipe-delimited
``derivative`` column, never as a substring of a longer derivative.
"""

import re
import logging
from typing import Iterable, List, Optional, Protocol, Dict

import psycopg

from .exceptions import ResolutionUnavailableError
from .models import VocabularyEntry

logger = logging.getLogger(__name__)

_REGEX_SPECIALS_RE = re.compile(r"[.*+?^${}()|\[\]\\]")

VOCABULARY_COLUMNS = "headword, derivative, definition, pronunciation, partofspeech"


def escape_token(token: str) -> str:
    """Backslash-escape regex metacharacters (valid for Python and PostgreSQL)"""
    return _REGEX_SPECIALS_RE.sub(r"\\\g<0>", token)


def build_derivative_pattern(token: str) -> str:
    """
    Pattern matching ``token`` as one item of a pipe-delimited list.

    The token must sit between start-of-string or a pipe and a pipe or
    end-of-string, with optional spaces around it.
    """
    return rf"(^|\|)\s*{escape_token(token.strip().lower())}\s*(\||$)"


class VocabularyIndex(Protocol):
    def find_by_headword(self, word: str) -> Optional[VocabularyEntry]:
        ...

    def find_by_derivative(self, word: str) -> Optional[VocabularyEntry]:
        ...

    def find_all_by_derivative(self, word: str) -> List[VocabularyEntry]:
        ...

    def snapshot(self) -> 'VocabularySnapshot':
        ...


class VocabularySnapshot:
    """In-memory vocabulary index preserving the source row order"""

    def __init__(self, entries: Iterable[VocabularyEntry]):
        self.entries: List[VocabularyEntry] = list(entries)
        self._by_headword: Dict[str, VocabularyEntry] = {}
        for entry in self.entries:
            # First row wins, mirroring the live index's ORDER BY id
            self._by_headword.setdefault(entry.headword.lower(), entry)

    def __len__(self) -> int:
        return len(self.entries)

    def find_by_headword(self, word: str) -> Optional[VocabularyEntry]:
        return self._by_headword.get(word.strip().lower())

    def find_by_derivative(self, word: str) -> Optional[VocabularyEntry]:
        matches = self._iter_derivative_matches(word)
        return next(matches, None)

    def find_all_by_derivative(self, word: str) -> List[VocabularyEntry]:
        return list(self._iter_derivative_matches(word))

    def snapshot(self) -> 'VocabularySnapshot':
        return self

    def _iter_derivative_matches(self, word: str):
        if not word.strip():
            return
        pattern = re.compile(build_derivative_pattern(word))
        for entry in self.entries:
            if entry.derivatives and pattern.search(entry.derivative_column.lower()):
                yield entry


class PostgresVocabularyIndex:
    """Live vocabulary lookups through the shared connection pool"""

    def __init__(self, db_manager=None, table: str = 'vocabulary'):
        self._db_manager = db_manager
        self.table = table

    def _cursor(self):
        if self._db_manager is None:
            from .database_manager import get_database_manager
            self._db_manager = get_database_manager()
        return self._db_manager.get_cursor()

    def _fetch(self, sql: str, params: tuple) -> List[VocabularyEntry]:
        try:
            with self._cursor() as cursor:
                cursor.execute(sql, params)
                rows = cursor.fetchall()
        except psycopg.Error as exc:
            logger.error(f"Vocabulary lookup failed: {exc}")
            raise ResolutionUnavailableError(f"Vocabulary index unavailable: {exc}") from exc

        return [VocabularyEntry.from_row(*row) for row in rows if row[0]]

    def find_by_headword(self, word: str) -> Optional[VocabularyEntry]:
        sql = (
            f"SELECT {VOCABULARY_COLUMNS} FROM {self.table} "
            "WHERE LOWER(TRIM(headword)) = %s ORDER BY id ASC LIMIT 1"
        )
        results = self._fetch(sql, (word.strip().lower(),))
        return results[0] if results else None

    def find_by_derivative(self, word: str) -> Optional[VocabularyEntry]:
        results = self._find_derivative_rows(word, limit=1)
        return results[0] if results else None

    def find_all_by_derivative(self, word: str) -> List[VocabularyEntry]:
        return self._find_derivative_rows(word, limit=None)

    def _find_derivative_rows(self, word: str, limit: Optional[int]) -> List[VocabularyEntry]:
        if not word.strip():
            return []
        sql = (
            f"SELECT {VOCABULARY_COLUMNS} FROM {self.table} "
            "WHERE derivative IS NOT NULL AND LOWER(derivative) ~ %s "
            "ORDER BY id ASC"
        )
        params: tuple = (build_derivative_pattern(word),)
        if limit is not None:
            sql += " LIMIT %s"
            params += (limit,)
        return self._fetch(sql, params)

    def snapshot(self) -> VocabularySnapshot:
        """Load every vocabulary row into a :class:`VocabularySnapshot`"""
        sql = f"SELECT {VOCABULARY_COLUMNS} FROM {self.table} ORDER BY id ASC"
        snapshot = VocabularySnapshot(self._fetch(sql, ()))
        logger.info(f"Loaded vocabulary snapshot with {len(snapshot)} entries")
        return snapshot


__all__ = [
    "VocabularyIndex",
    "VocabularySnapshot",
    "PostgresVocabularyIndex",
    "build_derivative_pattern",
    "escape_token",
]
