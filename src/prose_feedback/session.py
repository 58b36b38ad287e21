from __future__ import annotations

import logging
import threading
from typing import Callable, List, Sequence

from .analysis import analyze, issues_changed
from .config import ProseFeedbackConfig
from .host import HIGHLIGHT_UPDATE_TAG, EditorHost, UpdateInfo
from .models import AnalysisResult, Issue
from .reconciler import Reconciler
from .scheduling import Debouncer, TimerFactory, daemon_timer

logger = logging.getLogger(__name__)

AnalysisListener = Callable[[AnalysisResult], None]


class AnalysisSession:
    """
    Live analysis loop for one editor.

    Text edits arm the analysis debounce; a finished analysis arms the
    shorter highlight debounce only when the highlighted issues changed.
    Updates made by the reconciler itself never re-trigger analysis.
    """

    def __init__(
        self,
        host: EditorHost,
        config: ProseFeedbackConfig | None = None,
        *,
        on_analysis: AnalysisListener | None = None,
        timer_factory: TimerFactory = daemon_timer,
    ) -> None:
        self._host = host
        self._config = config or ProseFeedbackConfig()
        self._reconciler = Reconciler(host, self._config.highlight_categories)
        self._listeners: List[AnalysisListener] = []
        if on_analysis is not None:
            self._listeners.append(on_analysis)
        scheduling = self._config.scheduling
        self._analysis = Debouncer(
            scheduling.analysis_delay,
            self.run_analysis,
            name="analysis",
            timer_factory=timer_factory,
        )
        self._highlight = Debouncer(
            scheduling.highlight_delay,
            self._apply_highlights,
            name="highlight",
            timer_factory=timer_factory,
        )
        self._lock = threading.Lock()
        self._last_result: AnalysisResult | None = None
        self._applied_issues: List[Issue] | None = None
        self._scheduled_issues: List[Issue] | None = None
        self._unregister: Callable[[], None] | None = host.register_update_listener(
            self._on_update
        )

    @property
    def last_result(self) -> AnalysisResult | None:
        return self._last_result

    @property
    def analysis_pending(self) -> bool:
        return self._analysis.pending

    @property
    def highlight_pending(self) -> bool:
        return self._highlight.pending

    def add_listener(self, listener: AnalysisListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def run_analysis(self) -> AnalysisResult:
        """Analyze the current snapshot, publish it and schedule highlighting."""
        text = self._host.flatten()
        result = analyze(text, self._config.analyzer)
        self._last_result = result
        for listener in list(self._listeners):
            listener(result)

        relevant = result.issues_of(*self._config.highlight_categories)
        with self._lock:
            if not issues_changed(self._scheduled_issues, relevant):
                logger.debug("Highlighted issues unchanged; skipping reconcile.")
                return result
            self._scheduled_issues = relevant
        self._highlight.trigger(relevant, text)
        return result

    def refresh(self) -> AnalysisResult:
        """Run analysis and highlighting immediately, skipping both debounces."""
        self._analysis.cancel()
        result = self.run_analysis()
        self._highlight.flush()
        return result

    def close(self) -> None:
        self._analysis.cancel()
        self._highlight.cancel()
        if self._unregister is not None:
            self._unregister()
            self._unregister = None

    def _on_update(self, info: UpdateInfo) -> None:
        if HIGHLIGHT_UPDATE_TAG in info.tags or not info.text_changed:
            return
        if self._highlight.cancel():
            with self._lock:
                self._scheduled_issues = self._applied_issues
        self._analysis.trigger()

    def _apply_highlights(self, issues: Sequence[Issue], text: str) -> None:
        # The snapshot is compared inside the reconcile batch, so an edit can
        # never land between the check and the tagging.
        applied = self._reconciler.reconcile(issues, snapshot=text)
        if applied is None:
            logger.debug("Document changed since analysis; dropping highlight pass.")
            with self._lock:
                self._scheduled_issues = self._applied_issues
            return
        with self._lock:
            self._applied_issues = list(issues)
        logger.debug("Applied %d highlights for %d issues", applied, len(issues))
