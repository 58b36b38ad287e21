from __future__ import annotations

from typing import Callable, List

from prose_feedback.tree import MemoryEditor, RootNode, TextNode, paragraph


class FakeTimer:
    """Timer stand-in that only fires when the test says so."""

    def __init__(self, delay: float, fn: Callable[[], None]) -> None:
        self.delay = delay
        self.fn = fn
        self.started = False
        self.cancelled = False
        self.fired = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def live(self) -> bool:
        return self.started and not self.cancelled and not self.fired


class FakeClock:
    """Timer factory recording every timer it hands out."""

    def __init__(self) -> None:
        self.timers: List[FakeTimer] = []

    def __call__(self, delay: float, fn: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(delay, fn)
        self.timers.append(timer)
        return timer

    def live_timers(self) -> List[FakeTimer]:
        return [timer for timer in self.timers if timer.live]

    def run_pending(self) -> int:
        """Fire the timers that are live right now; returns how many fired."""
        due = self.live_timers()
        for timer in due:
            timer.fired = True
            timer.fn()
        return len(due)


def single_paragraph_editor(*nodes: TextNode | str) -> MemoryEditor:
    return MemoryEditor(RootNode([paragraph(*nodes)]))


def block_texts(editor: MemoryEditor, block: int = 0) -> List[str]:
    return [node.text for node in editor.root.children[block].iter_text_nodes()]  # type: ignore[union-attr]


def tagged(editor: MemoryEditor) -> List[tuple[str, str | None]]:
    return [(node.text, node.issue_type) for node in editor.tagged_nodes()]
