from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .models import IssueType


@dataclass(frozen=True, slots=True)
class Category:
    """Display metadata for one issue category."""

    type: IssueType
    color: str
    label: str
    suggestion: str


CATEGORIES: Dict[str, Category] = {
    "adverb": Category("adverb", "blue", "Adverbs", "Try a stronger verb"),
    "passive": Category("passive", "emerald", "Passive Voice", "Use active voice"),
    "complex": Category(
        "complex", "amber", "Hard Sentences", "Split into smaller sentences"
    ),
    "veryComplex": Category(
        "veryComplex", "red", "Very Hard Sentences", "Split into smaller sentences"
    ),
    "hardWord": Category("hardWord", "purple", "Complex Words", "Use a simpler word"),
    "qualifier": Category(
        "qualifier", "primary", "Weak Qualifiers", "Remove weak qualifier"
    ),
}

ALL_CATEGORIES = "__all__"


def get_category(issue_type: str) -> Category:
    try:
        return CATEGORIES[issue_type]
    except KeyError:
        raise ValueError(f"Unknown issue category '{issue_type}'.") from None


def suggestion_for(issue_type: str) -> str:
    return get_category(issue_type).suggestion


def css_class(issue_type: str) -> str:
    """Class name used by styling keyed on category colour."""
    return f"issue-highlight-{get_category(issue_type).color}"
