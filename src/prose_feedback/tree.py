"""
In-memory document tree and a reference ``EditorHost`` built on it.

The tree mirrors the shape of a rich-text editor state: a root holding
block elements (paragraphs, headings, quotes) whose children are text
nodes. Text nodes carry formatting marks and an optional issue tag.
"""

from __future__ import annotations

import logging
import re
import threading
from typing import Callable, Iterable, Iterator, List, Sequence

from .host import (
    ISSUE_NODE_KIND,
    EditorHost,
    UpdateInfo,
    UpdateListener,
)

logger = logging.getLogger(__name__)

BLOCK_TYPES = ("paragraph", "heading", "quote")
DEFAULT_NODE_KINDS = frozenset({"root", "text", ISSUE_NODE_KIND, *BLOCK_TYPES})

# Innermost first, so bold+italic renders as ***text***.
FORMAT_MARKS = (("code", "`"), ("italic", "*"), ("bold", "**"))

_BLANK_LINE = re.compile(r"\n\s*\n")
_HEADING = re.compile(r"^(#{1,6})\s+(.*)$", re.DOTALL)


class Node:
    """Base class for every node in the tree."""

    kind = "node"

    def __init__(self) -> None:
        self.parent: ElementNode | None = None

    def is_attached(self) -> bool:
        node: Node | None = self
        while node is not None:
            if isinstance(node, RootNode):
                return True
            node = node.parent
        return False

    def index_in_parent(self) -> int:
        if self.parent is None:
            raise ValueError("Node is detached from the tree.")
        for idx, child in enumerate(self.parent.children):
            if child is self:
                return idx
        raise ValueError("Node is missing from its parent's children.")

    def replace(self, other: Node) -> Node:
        """Put ``other`` where this node is and detach this node."""
        parent = self.parent
        if parent is None:
            raise ValueError("Cannot replace a detached node.")
        other.remove()
        idx = self.index_in_parent()
        parent.children[idx] = other
        other.parent = parent
        self.parent = None
        return other

    def insert_after(self, other: Node) -> Node:
        parent = self.parent
        if parent is None:
            raise ValueError("Cannot insert after a detached node.")
        other.remove()
        parent.children.insert(self.index_in_parent() + 1, other)
        other.parent = parent
        return other

    def remove(self) -> None:
        if self.parent is None:
            return
        del self.parent.children[self.index_in_parent()]
        self.parent = None


class TextNode(Node):
    """A run of text with uniform formatting, optionally tagged with an issue."""

    def __init__(
        self,
        text: str,
        format: Iterable[str] = (),
        style: str = "",
        issue_type: str | None = None,
    ) -> None:
        super().__init__()
        self.text = text
        self.format: frozenset[str] = frozenset(format)
        self.style = style
        self.issue_type = issue_type
        # Presentation only; set by the visibility filter.
        self.visible = False
        # Node this one was split from, if it was produced by a split.
        self.origin: TextNode | None = None

    @property
    def kind(self) -> str:  # type: ignore[override]
        return ISSUE_NODE_KIND if self.issue_type is not None else "text"

    @property
    def is_tagged(self) -> bool:
        return self.issue_type is not None

    def same_format(self, other: TextNode) -> bool:
        return self.format == other.format and self.style == other.style

    def copy_with(self, text: str, issue_type: str | None = None) -> TextNode:
        """New detached node with this node's formatting."""
        return TextNode(text, self.format, self.style, issue_type)

    def split_text(self, *offsets: int) -> List[TextNode]:
        """
        Split at ``offsets``; this node keeps the first piece and the rest are
        inserted after it in order. Returns every piece, this node first.
        """
        cuts = sorted({o for o in offsets if 0 < o < len(self.text)})
        if not cuts:
            return [self]
        bounds = [0, *cuts, len(self.text)]
        texts = [self.text[a:b] for a, b in zip(bounds, bounds[1:])]
        self.text = texts[0]
        pieces: List[TextNode] = [self]
        anchor: TextNode = self
        for text in texts[1:]:
            piece = self.copy_with(text, self.issue_type)
            piece.origin = self.origin or self
            anchor.insert_after(piece)
            pieces.append(piece)
            anchor = piece
        return pieces

    def __repr__(self) -> str:
        tag = f", issue_type={self.issue_type!r}" if self.issue_type else ""
        fmt = f", format={sorted(self.format)!r}" if self.format else ""
        return f"TextNode({self.text!r}{fmt}{tag})"


class ElementNode(Node):
    """A node that holds children: a block or the root."""

    kind = "element"

    def __init__(self, children: Sequence[Node] = ()) -> None:
        super().__init__()
        self.children: List[Node] = []
        self.append(*children)

    def append(self, *nodes: Node) -> ElementNode:
        for node in nodes:
            node.remove()
            node.parent = self
            self.children.append(node)
        return self

    def iter_text_nodes(self) -> Iterator[TextNode]:
        for child in list(self.children):
            if isinstance(child, TextNode):
                yield child
            elif isinstance(child, ElementNode):
                yield from child.iter_text_nodes()

    @property
    def text(self) -> str:
        return "".join(node.text for node in self.iter_text_nodes())


class BlockNode(ElementNode):
    """Paragraph, heading or quote."""

    def __init__(
        self, block_type: str = "paragraph", children: Sequence[Node] = (), level: int = 1
    ) -> None:
        if block_type not in BLOCK_TYPES:
            raise ValueError(f"Unknown block type '{block_type}'.")
        super().__init__(children)
        self.block_type = block_type
        self.level = level

    @property
    def kind(self) -> str:  # type: ignore[override]
        return self.block_type

    def __repr__(self) -> str:
        return f"BlockNode({self.block_type!r}, {self.children!r})"


class RootNode(ElementNode):
    kind = "root"

    def __repr__(self) -> str:
        return f"RootNode({self.children!r})"


def paragraph(*nodes: TextNode | str) -> BlockNode:
    return BlockNode("paragraph", [_as_text_node(n) for n in nodes])


def heading(*nodes: TextNode | str, level: int = 1) -> BlockNode:
    return BlockNode("heading", [_as_text_node(n) for n in nodes], level=level)


def quote(*nodes: TextNode | str) -> BlockNode:
    return BlockNode("quote", [_as_text_node(n) for n in nodes])


def _as_text_node(value: TextNode | str) -> TextNode:
    return value if isinstance(value, TextNode) else TextNode(value)


def to_markdown(root: ElementNode) -> str:
    """Flatten the tree into Markdown: blocks separated by blank lines."""
    blocks: List[str] = []
    for child in root.children:
        if isinstance(child, BlockNode):
            inline = _render_inline(list(child.iter_text_nodes()))
            if child.block_type == "heading":
                inline = f"{'#' * child.level} {inline}"
            elif child.block_type == "quote":
                inline = f"> {inline}"
            blocks.append(inline)
        elif isinstance(child, TextNode):
            blocks.append(_render_inline([child]))
    return "\n\n".join(blocks)


def _render_inline(nodes: List[TextNode]) -> str:
    # Adjacent runs with identical marks are wrapped once, so splitting a
    # node never changes the flattened output.
    parts: List[str] = []
    run: List[TextNode] = []
    for node in nodes:
        if run and node.format != run[0].format:
            parts.append(_wrap_run(run))
            run = []
        run.append(node)
    if run:
        parts.append(_wrap_run(run))
    return "".join(parts)


def _wrap_run(run: List[TextNode]) -> str:
    text = "".join(node.text for node in run)
    if not text:
        return text
    for mark, delimiter in FORMAT_MARKS:
        if mark in run[0].format:
            text = f"{delimiter}{text}{delimiter}"
    return text


class MemoryEditor(EditorHost):
    """Reference editing surface holding the document tree in memory."""

    def __init__(
        self,
        root: RootNode | None = None,
        node_kinds: Iterable[str] = DEFAULT_NODE_KINDS,
    ) -> None:
        self._root = root or RootNode()
        self._node_kinds = frozenset(node_kinds)
        self._listeners: List[UpdateListener] = []
        # Serializes all mutations; reentrant so listeners may queue updates.
        self._lock = threading.RLock()

    @classmethod
    def from_text(cls, text: str, **kwargs: object) -> MemoryEditor:
        """Build paragraphs (and ``#`` headings) from blank-line separated text."""
        root = RootNode()
        for chunk in _BLANK_LINE.split(text):
            if not chunk.strip():
                continue
            match = _HEADING.match(chunk)
            if match:
                root.append(heading(match.group(2), level=len(match.group(1))))
            else:
                root.append(paragraph(chunk))
        return cls(root, **kwargs)  # type: ignore[arg-type]

    @property
    def root(self) -> RootNode:
        return self._root

    def flatten(self) -> str:
        with self._lock:
            return to_markdown(self._root)

    def text_nodes(self) -> List[TextNode]:
        with self._lock:
            return list(self._root.iter_text_nodes())

    def tagged_nodes(self) -> List[TextNode]:
        return [node for node in self.text_nodes() if node.is_tagged]

    def has_node_kind(self, kind: str) -> bool:
        return kind in self._node_kinds

    def register_update_listener(self, listener: UpdateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unregister() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unregister

    def update(self, fn: Callable[[], None], tag: str | None = None) -> None:
        with self._lock:
            before = self._text_snapshot()
            fn()
            info = UpdateInfo(
                text_changed=self._text_snapshot() != before,
                tags=frozenset({tag}) if tag else frozenset(),
            )
        logger.debug("Editor update tag=%s text_changed=%s", tag, info.text_changed)
        for listener in list(self._listeners):
            listener(info)

    def _text_snapshot(self) -> List[str]:
        return [
            child.text if isinstance(child, ElementNode) else getattr(child, "text", "")
            for child in self._root.children
        ]
