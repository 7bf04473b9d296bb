"""
Word family resolution engine.

This package contains the building blocks of the word family system:
- Sentence normalization and proper noun classification
- Vocabulary index lookups and family resolution
- Batch population of family labels
- Cached family, word and grade statistics
"""

from .exceptions import (
    InvalidWordError,
    PopulationAbortedError,
    RecordStoreError,
    ResolutionUnavailableError,
    WordFamilyError,
)
from .models import (
    FamilyMapping,
    FamilyStatEntry,
    VocabularyEntry,
    WordRecord,
    parse_family_label,
    render_family_label,
)
from .normalizer import Normalizer, normalize, is_proper_noun
from .vocabulary_index import PostgresVocabularyIndex, VocabularySnapshot, build_derivative_pattern
from .family_resolver import FamilyResolver, resolve_family
from .aggregator import FamilyStatsService, compute_family_stats
from .population import PopulationSummary, populate_family_labels
from .importer import ImportSummary, import_rows

__all__ = [
    'WordFamilyError',
    'ResolutionUnavailableError',
    'RecordStoreError',
    'InvalidWordError',
    'PopulationAbortedError',
    'VocabularyEntry',
    'WordRecord',
    'FamilyMapping',
    'FamilyStatEntry',
    'render_family_label',
    'parse_family_label',
    'Normalizer',
    'normalize',
    'is_proper_noun',
    'PostgresVocabularyIndex',
    'VocabularySnapshot',
    'build_derivative_pattern',
    'FamilyResolver',
    'resolve_family',
    'FamilyStatsService',
    'compute_family_stats',
    'PopulationSummary',
    'populate_family_labels',
    'ImportSummary',
    'import_rows',
]
