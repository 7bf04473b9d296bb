#!/usr/bin/env python3
"""
Family Resolver
Maps a token to the family label of its vocabulary entry.

A token may be a headword itself and also appear in another entry's derivative
list. Both lookups are made; the reverse match wins when its derivative count
is at least the forward match's count (a missing forward match counts as
zero), otherwise the forward match is used. Equal counts therefore resolve
to the reverse match.
"""

import logging
from typing import Dict, Iterable, Optional

from .models import VocabularyEntry, count_derivatives
from .vocabulary_index import VocabularyIndex

logger = logging.getLogger(__name__)


def choose_entry(
    forward: Optional[VocabularyEntry],
    reverse: Optional[VocabularyEntry],
) -> Optional[VocabularyEntry]:
    """Apply the forward/reverse tie-break to two lookup results"""
    if reverse is not None and count_derivatives(reverse) >= count_derivatives(forward):
        return reverse
    return forward


def resolve_entry(token: str, index: VocabularyIndex) -> Optional[VocabularyEntry]:
    """
    Find the vocabulary entry a token belongs to.

    Raises:
        ResolutionUnavailableError: the index could not be queried
    """
    lookup = (token or '').strip().lower()
    if not lookup:
        return None

    forward = index.find_by_headword(lookup)
    reverse = index.find_by_derivative(lookup)
    return choose_entry(forward, reverse)


def resolve_family(token: str, index: VocabularyIndex) -> Optional[str]:
    """Return the family label for ``token`` or None when unresolved"""
    entry = resolve_entry(token, index)
    if entry is None:
        return None
    return entry.family_label


class FamilyResolver:
    """Resolver bound to one vocabulary index"""

    def __init__(self, index: VocabularyIndex):
        self.index = index

    def resolve(self, token: str) -> Optional[str]:
        return resolve_family(token, self.index)

    def resolve_tokens(self, tokens: Iterable[str]) -> Dict[str, Optional[str]]:
        """Resolve each distinct token once; keys keep first-seen order."""
        results: Dict[str, Optional[str]] = {}
        for token in tokens:
            if token not in results:
                results[token] = self.resolve(token)
        return results


__all__ = [
    "FamilyResolver",
    "choose_entry",
    "resolve_entry",
    "resolve_family",
]
