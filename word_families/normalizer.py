#!/usr/bin/env python3
"""
Sentence Normalizer
Turns raw reference sentences into ordered lists of clean word tokens.

Processing order matters: quotes are straightened first so contractions can be
matched, contractions are expanded before punctuation is stripped (the
apostrophe would otherwise be lost), and only then is the text split.
Proper nouns keep their case; everything else is lowercased.
"""

import re
import logging
from typing import Iterable, List, Mapping, Optional, Pattern

from .lexicon import CONTRACTIONS, PROPER_NOUNS, QUOTE_VARIANTS

logger = logging.getLogger(__name__)

_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_PUNCTUATION_KEEP_HYPHEN_RE = re.compile(r"[^\w\s-]")
_WHITESPACE_RE = re.compile(r"\s+")


def _compile_contractions(contractions: Mapping[str, str]) -> Optional[Pattern[str]]:
    if not contractions:
        return None
    # Longest first so "shouldn't" is not shadowed by a shorter key
    keys = sorted(contractions, key=len, reverse=True)
    alternation = "|".join(re.escape(key) for key in keys)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


def match_case(original: str, replacement: str) -> str:
    """Recase ``replacement`` after the first character of ``original``."""
    if not replacement:
        return replacement
    if original[:1].isupper():
        return replacement[0].upper() + replacement[1:]
    return replacement.lower()


class Normalizer:
    """Tokenizer with injectable contraction and proper noun lists"""

    def __init__(
        self,
        contractions: Optional[Mapping[str, str]] = None,
        proper_nouns: Optional[Iterable[str]] = None,
        quote_variants: Optional[Mapping[str, str]] = None,
        preserve_hyphens: bool = False,
    ):
        source = CONTRACTIONS if contractions is None else contractions
        self.contractions = {key.lower(): value for key, value in source.items()}
        self.proper_nouns = frozenset(PROPER_NOUNS if proper_nouns is None else proper_nouns)
        self.quote_table = str.maketrans(dict(QUOTE_VARIANTS if quote_variants is None else quote_variants))
        self.preserve_hyphens = preserve_hyphens
        self._contraction_re = _compile_contractions(self.contractions)
        self._punctuation_re = _PUNCTUATION_KEEP_HYPHEN_RE if preserve_hyphens else _PUNCTUATION_RE

    def normalize_quotes(self, text: str) -> str:
        return text.translate(self.quote_table)

    def expand_contractions(self, text: str) -> str:
        """Expand whole-word contractions, keeping the leading capital."""
        if self._contraction_re is None:
            return text

        def _replace(match: 're.Match[str]') -> str:
            span = match.group(0)
            return match_case(span, self.contractions[span.lower()])

        return self._contraction_re.sub(_replace, text)

    def strip_punctuation(self, text: str) -> str:
        return self._punctuation_re.sub(" ", text)

    def is_proper_noun(self, word: str) -> bool:
        """
        Heuristic proper noun check.

        True for members of the configured set, or for 2-4 character words that
        are entirely uppercase (acronyms such as "UK", "NASA" or "MP3"). Unlisted
        names are lowercased and short all-caps words are kept as-is; both
        are known limitations of a closed list.
        """
        if word in self.proper_nouns:
            return True
        return 2 <= len(word) <= 4 and word.isupper()

    def normalize(self, text: Optional[str]) -> List[str]:
        """
        Convert raw text into an ordered token list.

        Duplicates are kept because occurrence counts matter downstream.

        Args:
            text: Raw sentence or reference string

        Returns:
            Tokens in source order, lowercased unless classified as proper nouns
        """
        if not text or not text.strip():
            return []

        cleaned = self.normalize_quotes(text)
        cleaned = self.expand_contractions(cleaned)
        cleaned = self.strip_punctuation(cleaned)

        tokens: List[str] = []
        for piece in _WHITESPACE_RE.split(cleaned):
            piece = piece.strip()
            if not any(char.isalpha() for char in piece):
                continue
            tokens.append(piece if self.is_proper_noun(piece) else piece.lower())

        return tokens


default_normalizer = Normalizer()


def normalize(text: Optional[str]) -> List[str]:
    """Tokenize ``text`` with the default word lists"""
    return default_normalizer.normalize(text)


def is_proper_noun(word: str) -> bool:
    return default_normalizer.is_proper_noun(word)


__all__ = [
    "Normalizer",
    "default_normalizer",
    "normalize",
    "is_proper_noun",
    "match_case",
]
