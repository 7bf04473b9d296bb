"""Forward (headword -> derivatives) and reverse (derivative -> headwords) lookups."""

import re
from typing import Any, Dict, Optional

from .exceptions import InvalidWordError
from .vocabulary_index import VocabularyIndex

QUERY_WORD_RE = re.compile(r"^[a-zA-Z-]+$")

SEARCH_TYPES = ('forward', 'reverse')


def validate_query_word(word: Optional[str]) -> str:
    """Trim, lowercase and check a spotted word; letters and hyphens only."""
    candidate = (word or '').strip()
    if not candidate:
        raise InvalidWordError("Word parameter is required")
    if not QUERY_WORD_RE.match(candidate):
        raise InvalidWordError(f"Invalid word: {candidate!r}")
    return candidate.lower()


def forward_search(index: VocabularyIndex, word: str) -> Optional[Dict[str, Any]]:
    entry = index.find_by_headword(word)
    if entry is None:
        return None
    return {'type': 'forward', **entry.to_dict()}


def reverse_search(index: VocabularyIndex, word: str) -> Optional[Dict[str, Any]]:
    entries = index.find_all_by_derivative(word)
    if not entries:
        return None
    return {
        'type': 'reverse',
        'searchWord': word,
        'results': [entry.to_dict() for entry in entries],
    }


def search_vocabulary(index: VocabularyIndex, word: Optional[str], search_type: str = 'forward') -> Optional[Dict[str, Any]]:
    """
    Validate ``word`` and run a forward or reverse lookup.

    Returns None when nothing matched.

    Raises:
        InvalidWordError: bad word or unknown search type
        ResolutionUnavailableError: the index could not be queried
    """
    if search_type not in SEARCH_TYPES:
        raise InvalidWordError('Invalid type parameter. Use "forward" or "reverse"')
    query = validate_query_word(word)
    if search_type == 'forward':
        return forward_search(index, query)
    return reverse_search(index, query)
