from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .tree import TextNode

IssueType = Literal["adverb", "passive", "complex", "veryComplex", "hardWord", "qualifier"]

SENTENCE_ISSUE_TYPES: frozenset[str] = frozenset({"complex", "veryComplex"})


@dataclass(slots=True)
class Document:
    """Represents an input document."""

    doc_id: str
    text: str


@dataclass(slots=True)
class Token:
    """Represents a word token and its inclusive-exclusive character offsets."""

    text: str
    start_char: int
    end_char: int


@dataclass(frozen=True, slots=True)
class Issue:
    """A located defect as a half-open range into the flattened string."""

    type: IssueType
    index: int
    length: int
    text: str
    suggestion: str | None = None

    @property
    def end(self) -> int:
        return self.index + self.length

    def signature(self) -> tuple[str, int, int]:
        """Identity used to decide whether two analysis passes differ."""
        return (self.type, self.index, self.length)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": self.type,
            "index": self.index,
            "length": self.length,
            "text": self.text,
        }
        if self.suggestion is not None:
            payload["suggestion"] = self.suggestion
        return payload


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Metrics and issues computed for one snapshot of a document."""

    char_count: int = 0
    word_count: int = 0
    sentence_count: int = 0
    paragraph_count: int = 0
    reading_time: float = 0.0
    flesch_score: float = 0.0
    grade_level: int = 0
    score: int = 0
    issues: tuple[Issue, ...] = field(default_factory=tuple)

    def issues_of(self, *types: str) -> list[Issue]:
        """Return the issues whose type is one of ``types`` (all when empty)."""
        if not types:
            return list(self.issues)
        wanted = set(types)
        return [issue for issue in self.issues if issue.type in wanted]

    def to_dict(self) -> dict[str, Any]:
        return {
            "char_count": self.char_count,
            "word_count": self.word_count,
            "sentence_count": self.sentence_count,
            "paragraph_count": self.paragraph_count,
            "reading_time": self.reading_time,
            "flesch_score": self.flesch_score,
            "grade_level": self.grade_level,
            "score": self.score,
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass(frozen=True, slots=True)
class SentenceMatch:
    """Word count and length classification for one sentence."""

    text: str
    word_count: int
    type: IssueType | None


@dataclass(slots=True)
class PositionEntry:
    """Offset in the flattened string at which a text node's content begins."""

    node: "TextNode"
    markdown_pos: int
    length: int

    @property
    def end(self) -> int:
        return self.markdown_pos + self.length
