from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def daemon_timer(delay: float, fn: Callable[[], None]) -> TimerHandle:
    timer = threading.Timer(delay, fn)
    timer.daemon = True
    return timer


class Debouncer:
    """
    Run ``callback`` once ``delay`` seconds have passed without a new trigger.

    Each ``trigger`` cancels the pending call, if any, and re-arms the timer
    with the latest arguments.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[..., Any],
        *,
        name: str = "debounce",
        timer_factory: TimerFactory = daemon_timer,
    ) -> None:
        if delay < 0:
            raise ValueError("Debounce delay must be non-negative.")
        self._delay = delay
        self._callback = callback
        self._name = name
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: TimerHandle | None = None
        self._generation = 0
        self._args: tuple[Any, ...] = ()

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def trigger(self, *args: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            generation = self._generation
            self._args = args
            self._timer = self._timer_factory(self._delay, lambda: self._fire(generation))
            self._timer.start()

    def cancel(self) -> bool:
        """Drop the pending call; returns True if one was pending."""
        with self._lock:
            if self._timer is None:
                return False
            self._timer.cancel()
            self._timer = None
            self._generation += 1
            logger.debug("%s: pending call cancelled", self._name)
            return True

    def flush(self) -> bool:
        """Run the pending call now; returns True if one ran."""
        with self._lock:
            if self._timer is None:
                return False
            self._timer.cancel()
            generation = self._generation
        return self._fire(generation)

    def _fire(self, generation: int) -> bool:
        with self._lock:
            # A trigger or cancel that raced this timer wins.
            if generation != self._generation or self._timer is None:
                return False
            self._timer = None
            args = self._args
        self._callback(*args)
        return True
