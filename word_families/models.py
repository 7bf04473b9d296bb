#!/usr/bin/env python3
"""Data containers shared by the resolver, aggregator and stores."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple


# ---------------------------------------------------------------------------
# Pipe-delimited derivative helpers


def split_derivatives(raw: Optional[str]) -> List[str]:
    """Split a ``a | b | c`` derivative column into trimmed, non-empty items."""
    if not raw:
        return []
    return [item.strip() for item in raw.split('|') if item.strip()]


def count_derivatives(entry: Optional['VocabularyEntry']) -> int:
    if entry is None:
        return 0
    return len(entry.derivatives)


def render_family_label(headword: str, derivatives: Sequence[str]) -> str:
    """Render ``" headword | d1 | d2 "`` or ``" headword "`` when there are none."""
    if derivatives:
        return f" {headword} | {' | '.join(derivatives)} "
    return f" {headword} "


def parse_family_label(label: Optional[str]) -> Tuple[Optional[str], List[str]]:
    """Inverse of :func:`render_family_label`: ``(headword, derivatives)``."""
    parts = split_derivatives(label)
    if not parts:
        return None, []
    return parts[0], parts[1:]


def headword_from_label(label: Optional[str]) -> Optional[str]:
    headword, _ = parse_family_label(label)
    return headword


# ---------------------------------------------------------------------------
# Vocabulary


@dataclass(frozen=True)
class VocabularyEntry:
    """One headword row from the vocabulary table."""

    headword: str
    derivatives: Tuple[str, ...] = ()
    definition: Optional[str] = None
    pronunciation: Optional[str] = None
    part_of_speech: Optional[str] = None

    @classmethod
    def from_row(
        cls,
        headword: str,
        derivative: Optional[str],
        definition: Optional[str] = None,
        pronunciation: Optional[str] = None,
        part_of_speech: Optional[str] = None,
    ) -> 'VocabularyEntry':
        return cls(
            headword=headword.strip(),
            derivatives=tuple(split_derivatives(derivative)),
            definition=definition,
            pronunciation=pronunciation,
            part_of_speech=part_of_speech,
        )

    @property
    def derivative_column(self) -> str:
        """Derivatives in the stored ``a | b`` form"""
        return ' | '.join(self.derivatives)

    @property
    def family_label(self) -> str:
        return render_family_label(self.headword, self.derivatives)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'headword': self.headword,
            'derivatives': list(self.derivatives),
            'definition': self.definition,
            'pronunciation': self.pronunciation,
            'partofspeech': self.part_of_speech,
        }


# ---------------------------------------------------------------------------
# Records and overrides


METADATA_FIELDS = (
    'unit', 'section', 'test_point', 'collocation', 'book', 'grade',
    'chinese_translation',
)


@dataclass
class WordRecord:
    """A token extracted from a source sentence, with its family label."""

    word: str
    source_text: str
    family_label: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'id': self.id,
            'word': self.word,
            'sentence': self.source_text,
            'word_family': self.family_label,
        }
        for name in METADATA_FIELDS:
            data[name] = self.metadata.get(name)
        return data


@dataclass(frozen=True)
class FamilyMapping:
    """User-curated reassignment of a word to a headword."""

    word: str
    headword: str


# ---------------------------------------------------------------------------
# Statistics


@dataclass(frozen=True)
class DerivativeCount:
    word: str
    count: int


@dataclass(frozen=True)
class FamilyStatEntry:
    headword: str
    total_count: int
    derivatives: Tuple[DerivativeCount, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'headword': self.headword,
            'count': self.total_count,
            'derivatives': [
                {'word': item.word, 'count': item.count} for item in self.derivatives
            ],
        }


@dataclass(frozen=True)
class WordStat:
    word: str
    count: int


@dataclass(frozen=True)
class GradeStat:
    grade: str
    unique_words: int
