from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, List

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .tree import RootNode, TextNode

ISSUE_NODE_KIND = "issue"
HIGHLIGHT_UPDATE_TAG = "prose-feedback:highlight"


class NodeKindNotRegisteredError(RuntimeError):
    """Raised when the host editor does not know the tagged-node kind."""


@dataclass(frozen=True, slots=True)
class UpdateInfo:
    """What a batch of tree mutations touched."""

    text_changed: bool
    tags: frozenset[str] = field(default_factory=frozenset)


UpdateListener = Callable[[UpdateInfo], None]


class EditorHost(ABC):
    """Narrow view of the live editing surface the engine works against."""

    @property
    @abstractmethod
    def root(self) -> "RootNode":
        """Root of the mutable document tree."""
        raise NotImplementedError

    @abstractmethod
    def flatten(self) -> str:
        """Return the canonical flattened string snapshot of the document."""
        raise NotImplementedError

    @abstractmethod
    def text_nodes(self) -> List["TextNode"]:
        """Return the text-bearing nodes in document order."""
        raise NotImplementedError

    @abstractmethod
    def update(self, fn: Callable[[], None], tag: str | None = None) -> None:
        """Run ``fn`` as one serialized batch of tree mutations."""
        raise NotImplementedError

    @abstractmethod
    def register_update_listener(self, listener: UpdateListener) -> Callable[[], None]:
        """Subscribe to mutation batches; returns a callable that unsubscribes."""
        raise NotImplementedError

    @abstractmethod
    def has_node_kind(self, kind: str) -> bool:
        """Return True when ``kind`` is registered with the editor."""
        raise NotImplementedError


def require_issue_nodes(host: EditorHost) -> None:
    """Fail fast when the host cannot hold tagged nodes."""
    if not host.has_node_kind(ISSUE_NODE_KIND):
        raise NodeKindNotRegisteredError(
            f"Node kind '{ISSUE_NODE_KIND}' is not registered with the editor."
        )
