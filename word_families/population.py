#!/usr/bin/env python3
"""Fill in missing family labels on word records.

This module provides the bulk re-scan behind ``populate-headwords``. Only
records whose ``word_family`` is still NULL are scanned, so a second run over
an unchanged vocabulary updates nothing.

Records are processed one at a time. A failure on one record is logged and
counted without stopping its siblings, except when the vocabulary itself
becomes unavailable: recording every remaining token as "not found" would
corrupt the statistics, so the run is aborted instead.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from .exceptions import PopulationAbortedError, RecordStoreError, ResolutionUnavailableError
from .family_resolver import FamilyResolver
from .record_store import WordRecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PopulationSummary:
    """Immutable tally of a population run."""

    total: int = 0
    updated: int = 0
    not_found: int = 0
    failed: int = 0
    cancelled: bool = False

    @property
    def processed(self) -> int:
        return self.updated + self.not_found + self.failed

    def with_updated(self) -> 'PopulationSummary':
        return replace(self, updated=self.updated + 1)

    def with_not_found(self) -> 'PopulationSummary':
        return replace(self, not_found=self.not_found + 1)

    def with_failed(self) -> 'PopulationSummary':
        return replace(self, failed=self.failed + 1)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'updated': self.updated,
            'notFound': self.not_found,
            'failed': self.failed,
            'total': self.total,
            'cancelled': self.cancelled,
        }


def populate_family_labels(
    store: WordRecordStore,
    resolver: FamilyResolver,
    cancel_event: Optional[threading.Event] = None,
    progress_every: Optional[int] = None,
) -> PopulationSummary:
    """Resolve and persist family labels for every unlabeled record.

    Args:
        store: Record store to scan and update.
        resolver: Resolver bound to the vocabulary snapshot for this run.
        cancel_event: When set, the run stops before the next record.
        progress_every: Log a progress line after this many updates.

    Returns:
        :class:`PopulationSummary` with ``updated``, ``not_found``, ``failed``
        and ``total`` counts.

    Raises:
        PopulationAbortedError: the vocabulary index became unavailable; the
            exception carries the partial summary.
    """
    if progress_every is None:
        from .config import get_app_config
        progress_every = get_app_config().progress_every

    records = store.fetch_unlabeled()
    summary = PopulationSummary(total=len(records))
    logger.info(f"Starting word_family population for {len(records)} records...")

    for record in records:
        if cancel_event is not None and cancel_event.is_set():
            logger.warning(
                "Population cancelled after %s of %s records", summary.processed, summary.total
            )
            return replace(summary, cancelled=True)

        try:
            label = resolver.resolve(record.word)
        except ResolutionUnavailableError as exc:
            logger.error(
                "Aborting population at record %s ('%s'): %s", record.id, record.word, exc
            )
            raise PopulationAbortedError(str(exc), summary=summary) from exc

        if label is None:
            summary = summary.with_not_found()
            continue

        try:
            store.update_family_label(record.id, label)
        except RecordStoreError as exc:
            logger.error("Failed to store family for record %s ('%s'): %s", record.id, record.word, exc)
            summary = summary.with_failed()
            continue

        record.family_label = label
        summary = summary.with_updated()
        if summary.updated % progress_every == 0:
            logger.info(f"Progress: {summary.updated}/{summary.total} records updated")

    logger.info(
        "Word family population complete: %s updated, %s not found, %s failed",
        summary.updated,
        summary.not_found,
        summary.failed,
    )
    return summary


__all__ = [
    "PopulationSummary",
    "populate_family_labels",
]
