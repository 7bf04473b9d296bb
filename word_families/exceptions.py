"""Error types raised by the word family engine."""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .population import PopulationSummary


class WordFamilyError(Exception):
    """Base error for the word family engine"""


class ResolutionUnavailableError(WordFamilyError):
    """The vocabulary index could not be queried.

    This is never the same thing as "no match": callers must not record the
    token as unresolved when they see it.
    """


class RecordStoreError(WordFamilyError):
    """Reading or writing word records or mappings failed"""


class InvalidWordError(WordFamilyError, ValueError):
    """A query word or search type was rejected before touching the store"""


class PopulationAbortedError(ResolutionUnavailableError):
    """Batch population stopped because the vocabulary became unavailable."""

    def __init__(self, message: str, summary: Optional['PopulationSummary'] = None):
        super().__init__(message)
        self.summary = summary
