from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Collection, Dict, Iterable

from .categories import ALL_CATEGORIES, CATEGORIES
from .tree import ElementNode, TextNode

logger = logging.getLogger(__name__)


def is_visible(
    category: str | None,
    hovered_category: str | None,
    active_categories: Collection[str],
    mode_all_on: bool,
) -> bool:
    """Decide whether one tag of ``category`` should be shown right now."""
    if category is None:
        return False
    if hovered_category is None:
        return mode_all_on and category in active_categories
    if hovered_category == ALL_CATEGORIES:
        return category in active_categories
    return category == hovered_category


def compute_visible(
    tagged_nodes: Iterable[TextNode],
    hovered_category: str | None,
    active_categories: Collection[str],
    mode_all_on: bool,
) -> Dict[TextNode, bool]:
    """Map every tagged node to whether its highlight is visible."""
    return {
        node: is_visible(node.issue_type, hovered_category, active_categories, mode_all_on)
        for node in tagged_nodes
    }


@dataclass(slots=True)
class VisibilityState:
    """Hover target and enabled categories shared by the highlight UI."""

    hovered_category: str | None = None
    active_categories: set[str] = field(default_factory=lambda: set(CATEGORIES))
    mode_all_on: bool = False

    def hover(self, category: str | None) -> None:
        self.hovered_category = category

    def toggle(self, category: str) -> bool:
        """Flip ``category`` in the active set; returns its new state."""
        if category in self.active_categories:
            self.active_categories.discard(category)
            return False
        self.active_categories.add(category)
        return True

    def compute(self, tagged_nodes: Iterable[TextNode]) -> Dict[TextNode, bool]:
        return compute_visible(
            tagged_nodes, self.hovered_category, self.active_categories, self.mode_all_on
        )

    def apply(self, root: ElementNode) -> int:
        """Set the presentation flag on tagged nodes; returns how many are visible."""
        tagged = [node for node in root.iter_text_nodes() if node.is_tagged]
        decisions = self.compute(tagged)
        for node, visible in decisions.items():
            node.visible = visible
        shown = sum(decisions.values())
        logger.debug("Visibility: %d of %d highlights shown", shown, len(tagged))
        return shown
