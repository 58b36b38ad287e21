from __future__ import annotations

import re
from functools import lru_cache
from typing import List

from .models import Token

# Word characters are ASCII-only so offsets and counts match the editor's own
# word boundaries.
WORD_PATTERN = re.compile(r"\b\w+\b", re.ASCII)
SENTENCE_SPLIT_PATTERN = re.compile(r"[.!?]+")
# A sentence needs a terminator; unfinished lines and headings never match.
SENTENCE_PATTERN = re.compile(r"[^.!?]+[.!?]+")
PARAGRAPH_SPLIT_PATTERN = re.compile(r"\n\s*\n")
LETTER_PATTERN = re.compile(r"[a-zA-Z]")

_NON_LETTERS = re.compile(r"[^a-z]")
_SILENT_SUFFIX = re.compile(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$")
_LEADING_Y = re.compile(r"^y")
_VOWEL_GROUP = re.compile(r"[aeiouy]{1,2}")

SYLLABLE_CACHE_SIZE = 5000


def tokenize_words(text: str) -> List[Token]:
    """Tokenize text into word tokens with character offsets."""
    tokens: List[Token] = []
    for match in WORD_PATTERN.finditer(text):
        tokens.append(
            Token(text=match.group(), start_char=match.start(), end_char=match.end())
        )
    return tokens


def split_sentences(text: str) -> List[str]:
    """Split on runs of sentence terminators, dropping blank fragments."""
    return [part for part in SENTENCE_SPLIT_PATTERN.split(text) if part.strip()]


def split_paragraphs(text: str) -> List[str]:
    """Split on blank-line boundaries, dropping blank fragments."""
    return [part for part in PARAGRAPH_SPLIT_PATTERN.split(text) if part.strip()]


def count_letters(text: str) -> int:
    return len(LETTER_PATTERN.findall(text))


@lru_cache(maxsize=SYLLABLE_CACHE_SIZE)
def syllable_count(word: str) -> int:
    """
    Estimate the number of syllables in ``word``.

    This is a vowel-group heuristic rather than a phonetic count: silent
    trailing ``e``/``es``/``ed`` and a leading ``y`` are dropped, then
    groups of one or two vowels are counted. Words of three letters or fewer
    always count as one syllable.
    """
    w = _NON_LETTERS.sub("", word.lower())
    if len(w) <= 3:
        return 1
    w = _SILENT_SUFFIX.sub("", w, count=1)
    w = _LEADING_Y.sub("", w, count=1)
    return len(_VOWEL_GROUP.findall(w)) or 1
