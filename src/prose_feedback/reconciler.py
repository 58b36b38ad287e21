"""
Project flat-string issue spans back onto the live document tree.

Every pass first clears the tags it owns, folding the pieces a previous pass
split off back into the node they came from, then splits the overlapped
nodes again so each flagged range sits in its own tagged node.
"""

from __future__ import annotations

import logging
from typing import Collection, Dict, Iterable, List, Sequence, Tuple

from .host import HIGHLIGHT_UPDATE_TAG, EditorHost, require_issue_nodes
from .models import Issue, PositionEntry
from .position_map import build_position_map, overlapping_ranges
from .tree import ElementNode, TextNode

logger = logging.getLogger(__name__)

# Piece that was merged away -> (node that absorbed it, offset inside that node).
Relocations = Dict[TextNode, Tuple[TextNode, int]]
_Span = Tuple[int, int, str, int]


def clear_tags(
    root: ElementNode, categories: Collection[str] | None = None
) -> Relocations:
    """
    Untag every tagged node in ``categories`` (all when None), keeping text
    and formatting, then merge split-off pieces back into their neighbour.
    """
    touched: List[ElementNode] = []
    for node in list(root.iter_text_nodes()):
        if node.issue_type is None:
            continue
        if categories is not None and node.issue_type not in categories:
            continue
        node.issue_type = None
        node.visible = False
        if node.parent is not None and all(p is not node.parent for p in touched):
            touched.append(node.parent)

    relocations: Relocations = {}
    for parent in touched:
        _merge_pieces(parent, relocations)
    return relocations


def _merge_pieces(parent: ElementNode, relocations: Relocations) -> None:
    head: TextNode | None = None
    for child in list(parent.children):
        if not isinstance(child, TextNode):
            head = None
            continue
        if (
            head is not None
            and not head.is_tagged
            and not child.is_tagged
            and child.origin is not None
            and child.origin is (head.origin or head)
            and head.same_format(child)
        ):
            relocations[child] = (head, len(head.text))
            head.text += child.text
            child.remove()
            continue
        head = child


def apply_highlights(
    issues: Iterable[Issue],
    position_map: Sequence[PositionEntry],
    categories: Collection[str] | None = None,
    relocations: Relocations | None = None,
) -> int:
    """Split and tag the nodes overlapped by ``issues``; returns tagged pieces."""
    relocations = relocations or {}
    spans: Dict[TextNode, List[_Span]] = {}
    for order, issue in enumerate(issues):
        if categories is not None and issue.type not in categories:
            continue
        for entry, start, end in overlapping_ranges(
            position_map, issue.index, issue.end
        ):
            resolved = _resolve(entry.node, relocations)
            if resolved is None:
                logger.debug("Skipping detached node %r for %s", entry.node, issue.type)
                continue
            node, base = resolved
            if node.is_tagged:
                # Owned by a category outside this pass.
                continue
            spans.setdefault(node, []).append(
                (base + start, base + end, issue.type, order)
            )

    applied = 0
    for node, node_spans in spans.items():
        applied += _tag_spans(node, node_spans)
    return applied


def _resolve(node: TextNode, relocations: Relocations) -> Tuple[TextNode, int] | None:
    offset = 0
    while not node.is_attached():
        if node not in relocations:
            return None
        node, shift = relocations[node]
        offset += shift
    return node, offset


def _tag_spans(node: TextNode, spans: List[_Span]) -> int:
    length = len(node.text)
    labels: List[str | None] = [None] * length
    # Longer spans first so a word-level issue inside a flagged sentence
    # keeps its own tag.
    for start, end, issue_type, _ in sorted(spans, key=lambda s: (s[0] - s[1], s[3])):
        for idx in range(max(0, start), min(length, end)):
            labels[idx] = issue_type

    runs: List[Tuple[int, str | None]] = []
    for idx, label in enumerate(labels):
        if not runs or runs[-1][1] != label:
            runs.append((idx, label))
    if all(label is None for _, label in runs):
        return 0

    pieces = node.split_text(*(start for start, _ in runs[1:]))
    for piece, (_, label) in zip(pieces, runs):
        piece.issue_type = label
    return sum(1 for _, label in runs if label is not None)


def reconcile_tree(
    host: EditorHost,
    issues: Sequence[Issue],
    position_map: Sequence[PositionEntry] | None = None,
    categories: Collection[str] | None = None,
) -> int:
    """
    Clear and re-apply tags without opening an update batch. When no map is
    given it is built after clearing, against the current tree.
    """
    relocations = clear_tags(host.root, categories)
    if position_map is None:
        position_map = build_position_map(host.flatten(), host.text_nodes())
    return apply_highlights(issues, position_map, categories, relocations)


def reconcile(
    host: EditorHost,
    issues: Sequence[Issue],
    position_map: Sequence[PositionEntry] | None = None,
    categories: Collection[str] | None = None,
    snapshot: str | None = None,
) -> int | None:
    """
    Reconcile tags with ``issues`` as one serialized editor update.

    When ``snapshot`` is given it must equal the flattened document inside
    that update; otherwise the tree is left untouched and None is returned.
    """
    applied: int | None = None

    def run() -> None:
        nonlocal applied
        if snapshot is not None and host.flatten() != snapshot:
            return
        applied = reconcile_tree(host, issues, position_map, categories)

    host.update(run, tag=HIGHLIGHT_UPDATE_TAG)
    if applied is None:
        logger.debug("Document moved past the analyzed snapshot; nothing reconciled.")
    else:
        logger.debug("Reconciled %d issues into %d tagged nodes", len(issues), applied)
    return applied


class Reconciler:
    """Owns the tagged nodes for a set of categories on one editor."""

    def __init__(
        self, host: EditorHost, categories: Collection[str] | None = None
    ) -> None:
        require_issue_nodes(host)
        self._host = host
        self._categories = frozenset(categories) if categories is not None else None

    @property
    def categories(self) -> frozenset[str] | None:
        return self._categories

    def reconcile(
        self,
        issues: Sequence[Issue],
        position_map: Sequence[PositionEntry] | None = None,
        snapshot: str | None = None,
    ) -> int | None:
        return reconcile(
            self._host, issues, position_map, self._categories, snapshot=snapshot
        )

    def clear(self) -> None:
        self._host.update(
            lambda: clear_tags(self._host.root, self._categories),
            tag=HIGHLIGHT_UPDATE_TAG,
        )
