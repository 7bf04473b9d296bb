"""
Default word lists used by the normalizer.

The tables are read-only views so a single process can share them between
normalizers. Callers that need different lists pass their own mappings to
:class:`word_families.normalizer.Normalizer`.
"""

from types import MappingProxyType
from typing import FrozenSet, Mapping

# Curly and low-9 quote variants mapped to their straight equivalents
QUOTE_VARIANTS: Mapping[str, str] = MappingProxyType({
    '‘': "'", '’': "'", '‚': "'", '‛': "'",
    '′': "'", '`': "'", '´': "'",
    '“': '"', '”': '"', '„': '"', '‟': '"',
    '″': '"',
})

# Keys are lowercase; expansions are lowercase and recased at match time
CONTRACTIONS: Mapping[str, str] = MappingProxyType({
    "ain't": "am not",
    "aren't": "are not",
    "can't": "cannot",
    "couldn't": "could not",
    "could've": "could have",
    "didn't": "did not",
    "doesn't": "does not",
    "don't": "do not",
    "hadn't": "had not",
    "hasn't": "has not",
    "haven't": "have not",
    "he'd": "he would",
    "he'll": "he will",
    "he's": "he is",
    "here's": "here is",
    "how's": "how is",
    "i'd": "i would",
    "i'll": "i will",
    "i'm": "i am",
    "i've": "i have",
    "isn't": "is not",
    "it'd": "it would",
    "it'll": "it will",
    "it's": "it is",
    "let's": "let us",
    "mightn't": "might not",
    "might've": "might have",
    "mustn't": "must not",
    "must've": "must have",
    "needn't": "need not",
    "shan't": "shall not",
    "she'd": "she would",
    "she'll": "she will",
    "she's": "she is",
    "shouldn't": "should not",
    "should've": "should have",
    "that's": "that is",
    "there's": "there is",
    "they'd": "they would",
    "they'll": "they will",
    "they're": "they are",
    "they've": "they have",
    "wasn't": "was not",
    "we'd": "we would",
    "we'll": "we will",
    "we're": "we are",
    "we've": "we have",
    "weren't": "were not",
    "what's": "what is",
    "where's": "where is",
    "who's": "who is",
    "won't": "will not",
    "wouldn't": "would not",
    "would've": "would have",
    "you'd": "you would",
    "you'll": "you will",
    "you're": "you are",
    "you've": "you have",
})

GIVEN_NAMES = frozenset({
    'Alice', 'Amy', 'Andy', 'Anna', 'Ben', 'Betty', 'Bill', 'Bob', 'Charlie',
    'Chris', 'Daniel', 'David', 'Eddie', 'Emily', 'Emma', 'Frank', 'George',
    'Grace', 'Harry', 'Helen', 'Jack', 'Jane', 'Jenny', 'Jim', 'John',
    'Kate', 'Kevin', 'Leo', 'Lily', 'Linda', 'Lucy', 'Mary', 'Michael',
    'Mike', 'Nancy', 'Nick', 'Paul', 'Peter', 'Sam', 'Sarah', 'Simon',
    'Sophie', 'Steve', 'Susan', 'Tim', 'Tom', 'Tony', 'William',
})

PLACE_NAMES = frozenset({
    'Africa', 'America', 'Asia', 'Australia', 'Beijing', 'Britain',
    'Canada', 'China', 'England', 'Europe', 'France', 'Germany',
    'Guangzhou', 'India', 'Ireland', 'Italy', 'Japan', 'Korea',
    'London', 'Macau', 'Mexico', 'Paris', 'Russia', 'Scotland',
    'Shanghai', 'Shenzhen', 'Singapore', 'Spain', 'Sydney', 'Taiwan',
    'Thailand', 'Tokyo', 'Wales',
})

LANGUAGES = frozenset({
    'Arabic', 'Cantonese', 'Chinese', 'English', 'French', 'German',
    'Italian', 'Japanese', 'Korean', 'Mandarin', 'Portuguese', 'Russian',
    'Spanish',
})

DAYS = frozenset({
    'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday',
    'Sunday',
})

MONTHS = frozenset({
    'January', 'February', 'March', 'April', 'May', 'June', 'July',
    'August', 'September', 'October', 'November', 'December',
})

HONORIFICS = frozenset({'Mr', 'Mrs', 'Ms', 'Miss', 'Dr', 'Prof', 'Sir', 'Madam'})

PROPER_NOUNS: FrozenSet[str] = (
    GIVEN_NAMES | PLACE_NAMES | LANGUAGES | DAYS | MONTHS | HONORIFICS
)

__all__ = [
    'QUOTE_VARIANTS',
    'CONTRACTIONS',
    'PROPER_NOUNS',
]
