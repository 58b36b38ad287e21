from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Sequence, Tuple

from .models import PositionEntry
from .tree import TextNode

logger = logging.getLogger(__name__)

PositionMap = List[PositionEntry]


def build_position_map(flat: str, nodes: Iterable[TextNode]) -> PositionMap:
    """
    Locate each text node's content in the flattened string.

    Nodes are searched for in document order from a forward cursor. A node
    that cannot be found past the cursor is looked up from the start of the
    string instead, without moving the cursor; a node that cannot be found at
    all is left out. Repeated substrings can bind to the wrong occurrence.
    """
    entries: PositionMap = []
    pos = 0
    for node in nodes:
        text = node.text
        if not text:
            continue
        found = flat.find(text, pos)
        if found >= 0:
            entries.append(PositionEntry(node=node, markdown_pos=found, length=len(text)))
            pos = found + len(text)
            continue
        found = flat.find(text)
        if found >= 0:
            entries.append(PositionEntry(node=node, markdown_pos=found, length=len(text)))
        else:
            logger.debug("No match in flattened text for node %r", node)
    entries.sort(key=lambda entry: entry.markdown_pos)
    return entries


def overlapping_ranges(
    position_map: Sequence[PositionEntry], start: int, end: int
) -> Iterator[Tuple[PositionEntry, int, int]]:
    """Yield ``(entry, start_in_node, end_in_node)`` for entries touching [start, end)."""
    for entry in position_map:
        if entry.markdown_pos < end and entry.end > start:
            yield (
                entry,
                max(0, start - entry.markdown_pos),
                min(entry.length, end - entry.markdown_pos),
            )
