"""
Readability metrics and style-issue detection over a flattened document.

``analyze`` is a pure function: the same text always yields the same
``AnalysisResult`` and blank input yields an all-zero result.
"""

from __future__ import annotations

import logging
import math
import re
from collections import Counter
from typing import Dict, Iterable, List, Sequence

from .categories import suggestion_for
from .config import AnalyzerSettings
from .models import AnalysisResult, Issue, IssueType, SentenceMatch
from .tokenization import (
    SENTENCE_PATTERN,
    WORD_PATTERN,
    count_letters,
    split_paragraphs,
    split_sentences,
    syllable_count,
    tokenize_words,
)

logger = logging.getLogger(__name__)

ADVERB_PATTERN = re.compile(r"\b\w+ly\b", re.ASCII | re.IGNORECASE)
ADVERB_EXCEPTIONS = frozenset(
    {"family", "only", "july", "reply", "supply", "apply", "belly", "jelly", "rally", "ally"}
)
# Whitespace as the editor sees it: ASCII plus no-break and other Unicode
# spaces, which contenteditable surfaces insert for runs of spaces.
EDITOR_WHITESPACE = r"[\s\u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff]"
PASSIVE_PATTERN = re.compile(
    rf"\b(is|are|was|were|be|been|being){EDITOR_WHITESPACE}+(\w+ed|\w+en)\b",
    re.ASCII | re.IGNORECASE,
)
QUALIFIER_PHRASES = (
    "I think",
    "we think",
    "I believe",
    "we believe",
    "maybe",
    "perhaps",
    "possibly",
    "probably",
    "I guess",
    "we guess",
    "kind of",
    "sort of",
    "a bit",
    "a little",
    "really",
    "extremely",
    "incredibly",
)
QUALIFIER_PATTERNS = tuple(
    re.compile(rf"\b{re.escape(phrase)}\b", re.ASCII | re.IGNORECASE)
    for phrase in QUALIFIER_PHRASES
)

# Words at or above this many syllables count towards the "hard words"
# score penalty; the hardWord issue itself uses AnalyzerSettings.
HARD_WORD_PENALTY_SYLLABLES = 3

DEFAULT_SETTINGS = AnalyzerSettings()

READABILITY_BANDS = (
    (80, "Good Readability"),
    (50, "Needs Improvement"),
)


def analyze(text: object, settings: AnalyzerSettings | None = None) -> AnalysisResult:
    """Compute readability metrics and located issues for ``text``."""
    if not isinstance(text, str) or not text.strip():
        return AnalysisResult()
    settings = settings or DEFAULT_SETTINGS

    words = [token.text for token in tokenize_words(text)]
    word_count = len(words)
    sentence_count = max(1, len(split_sentences(text)))
    paragraph_count = len(split_paragraphs(text))

    syllables = [syllable_count(word) for word in words]
    words_per_sentence = word_count / sentence_count
    syllables_per_word = sum(syllables) / word_count if word_count else 0.0

    flesch = 206.835 - 1.015 * words_per_sentence - 84.6 * syllables_per_word
    flesch_score = _round_tenth(_clamp(flesch, 0.0, 100.0))
    grade_level = max(
        0,
        _round_half_up(
            4.71 * (count_letters(text) / max(1, word_count))
            + 0.5 * words_per_sentence
            - 21.43
        ),
    )

    issues: List[Issue] = []
    issues.extend(find_adverbs(text))
    issues.extend(find_passive_voice(text))
    issues.extend(find_long_sentences(text, settings))
    issues.extend(find_hard_words(text, settings))
    issues.extend(find_qualifiers(text))

    score = composite_score(issues, syllables, settings)
    logger.debug(
        "Analyzed %d chars: %d words, %d sentences, %d issues, score=%d",
        len(text),
        word_count,
        sentence_count,
        len(issues),
        score,
    )
    return AnalysisResult(
        char_count=len(text),
        word_count=word_count,
        sentence_count=sentence_count,
        paragraph_count=paragraph_count,
        reading_time=word_count / settings.words_per_minute,
        flesch_score=flesch_score,
        grade_level=grade_level,
        score=score,
        issues=tuple(issues),
    )


def find_adverbs(text: str) -> List[Issue]:
    issues: List[Issue] = []
    for match in ADVERB_PATTERN.finditer(text):
        if match.group().lower() in ADVERB_EXCEPTIONS:
            continue
        issues.append(_issue("adverb", match.start(), match.group()))
    return issues


def find_passive_voice(text: str) -> List[Issue]:
    return [
        _issue("passive", match.start(), match.group())
        for match in PASSIVE_PATTERN.finditer(text)
    ]


def analyze_sentence(
    sentence: str, settings: AnalyzerSettings | None = None
) -> SentenceMatch:
    """Classify a single sentence by its word count."""
    settings = settings or DEFAULT_SETTINGS
    word_count = len(WORD_PATTERN.findall(sentence))
    sentence_type: IssueType | None = None
    if word_count > settings.very_complex_sentence_words:
        sentence_type = "veryComplex"
    elif word_count > settings.complex_sentence_words:
        sentence_type = "complex"
    return SentenceMatch(text=sentence, word_count=word_count, type=sentence_type)


def find_long_sentences(
    text: str, settings: AnalyzerSettings | None = None
) -> List[Issue]:
    """Flag overlong sentences without letting a sentence cross a line break."""
    issues: List[Issue] = []
    line_start = 0
    for line in text.split("\n"):
        if line.strip():
            for match in SENTENCE_PATTERN.finditer(line):
                sentence = analyze_sentence(match.group(), settings)
                if sentence.type is None:
                    continue
                issues.append(
                    Issue(
                        type=sentence.type,
                        index=line_start + match.start(),
                        length=len(match.group()),
                        text=match.group().strip(),
                        suggestion=suggestion_for(sentence.type),
                    )
                )
        line_start += len(line) + 1
    return issues


def find_hard_words(text: str, settings: AnalyzerSettings | None = None) -> List[Issue]:
    settings = settings or DEFAULT_SETTINGS
    return [
        _issue("hardWord", token.start_char, token.text)
        for token in tokenize_words(text)
        if syllable_count(token.text) >= settings.hard_word_syllables
    ]


def find_qualifiers(text: str) -> List[Issue]:
    issues: List[Issue] = []
    for pattern in QUALIFIER_PATTERNS:
        for match in pattern.finditer(text):
            issues.append(_issue("qualifier", match.start(), match.group()))
    return issues


def composite_score(
    issues: Sequence[Issue],
    syllables: Sequence[int],
    settings: AnalyzerSettings | None = None,
) -> int:
    """Start from 100 and subtract penalties for issues and hard vocabulary."""
    settings = settings or DEFAULT_SETTINGS
    counts = Counter(issue.type for issue in issues)
    word_count = max(1, len(syllables))
    hard_words = sum(1 for count in syllables if count >= HARD_WORD_PENALTY_SYLLABLES)
    very_hard_words = sum(
        1 for count in syllables if count >= settings.hard_word_syllables
    )

    penalty = (
        max(0, counts["adverb"] - settings.adverb_allowance) * 2
        + max(0, counts["passive"] - settings.passive_allowance) * 2
        + (hard_words / word_count) * 15
        + (very_hard_words / word_count) * 25
        + counts["complex"]
        + counts["veryComplex"]
    )
    return int(_clamp(_round_half_up(100 - penalty), 0, 100))


def readability_band(score: int) -> str:
    """Human-readable label for a composite score."""
    for threshold, label in READABILITY_BANDS:
        if score > threshold:
            return label
    return "Hard to Read"


def group_issues(issues: Iterable[Issue]) -> Dict[str, List[Issue]]:
    """Group issues by type, preserving first-seen type order."""
    grouped: Dict[str, List[Issue]] = {}
    for issue in issues:
        grouped.setdefault(issue.type, []).append(issue)
    return grouped


def issues_changed(
    previous: Sequence[Issue] | None,
    current: Sequence[Issue],
    types: Iterable[str] | None = None,
) -> bool:
    """
    Return True when ``current`` differs from ``previous`` by type, offset or
    length, optionally considering only the given issue types.
    """
    if previous is None:
        return True
    wanted = set(types) if types is not None else None

    def signatures(issues: Sequence[Issue]) -> List[tuple[str, int, int]]:
        return [
            issue.signature()
            for issue in issues
            if wanted is None or issue.type in wanted
        ]

    return signatures(previous) != signatures(current)


def _issue(issue_type: IssueType, index: int, matched: str) -> Issue:
    return Issue(
        type=issue_type,
        index=index,
        length=len(matched),
        text=matched,
        suggestion=suggestion_for(issue_type),
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _round_tenth(value: float) -> float:
    # Halves round up, not to even as the built-in round does.
    return _round_half_up(value * 10) / 10


def _clamp(value: float, lower: float, upper: float) -> float:
    return min(upper, max(lower, value))
