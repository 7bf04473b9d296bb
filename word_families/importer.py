#!/usr/bin/env python3
"""
Row Importer
Turns imported rows into word records, one per normalized token.

Rows arrive as dictionaries already parsed from a spreadsheet. The source
sentence is read from the first non-empty of ``Reference``, ``reference``,
``Sentence`` and ``sentence``; rows without one are skipped.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .exceptions import RecordStoreError
from .models import WordRecord
from .normalizer import Normalizer, default_normalizer
from .record_store import WordRecordStore

logger = logging.getLogger(__name__)

SOURCE_TEXT_FIELDS: Sequence[str] = ('Reference', 'reference', 'Sentence', 'sentence')

# Record metadata field -> accepted column names, first non-empty wins
METADATA_COLUMNS: Dict[str, Tuple[str, ...]] = {
    'unit': ('Unit', 'unit'),
    'section': ('Section', 'section'),
    'test_point': ('test_point',),
    'collocation': ('collocation',),
    'book': ('Book', 'book'),
    'grade': ('Grade', 'grade'),
    'chinese_translation': ('Chinese', 'chinese'),
}


@dataclass
class ImportSummary:
    inserted: int = 0
    skipped_rows: int = 0
    failed: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'records': self.inserted,
            'skippedRows': self.skipped_rows,
            'failed': self.failed,
        }


def _first_present(row: Mapping[str, Any], columns: Iterable[str]) -> Optional[Any]:
    for column in columns:
        value = row.get(column)
        if value is None:
            continue
        if isinstance(value, str):
            value = value.strip()
        if value != '':
            return value
    return None


def extract_source_text(row: Mapping[str, Any]) -> Optional[str]:
    value = _first_present(row, SOURCE_TEXT_FIELDS)
    return None if value is None else str(value)


def extract_metadata(row: Mapping[str, Any]) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {}
    for name, columns in METADATA_COLUMNS.items():
        value = _first_present(row, columns)
        if value is not None:
            metadata[name] = value
    return metadata


def build_records(row: Mapping[str, Any], normalizer: Optional[Normalizer] = None) -> List[WordRecord]:
    """Word records for one row; empty when the row has no source text"""
    text = extract_source_text(row)
    if text is None:
        return []

    normalizer = normalizer or default_normalizer
    metadata = extract_metadata(row)
    return [
        WordRecord(word=token, source_text=text, metadata=dict(metadata))
        for token in normalizer.normalize(text)
    ]


def import_rows(
    rows: Iterable[Mapping[str, Any]],
    store: WordRecordStore,
    normalizer: Optional[Normalizer] = None,
) -> ImportSummary:
    """Insert records for every row in order, skipping rows without text."""
    summary = ImportSummary()

    for row in rows:
        if extract_source_text(row) is None:
            logger.debug(f"Skipping row with no sentence: {dict(row)}")
            summary.skipped_rows += 1
            continue

        for record in build_records(row, normalizer):
            try:
                store.insert_record(record)
            except RecordStoreError as exc:
                logger.error(f"Error inserting record for '{record.word}': {exc}")
                summary.failed += 1
                continue
            summary.inserted += 1

    logger.info(
        f"Imported {summary.inserted} records "
        f"({summary.skipped_rows} rows skipped, {summary.failed} failed)"
    )
    return summary


__all__ = [
    "ImportSummary",
    "SOURCE_TEXT_FIELDS",
    "build_records",
    "extract_metadata",
    "extract_source_text",
    "import_rows",
]
