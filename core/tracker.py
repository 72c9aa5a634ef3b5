"""
ReadingSessionTracker — owner of the reading-session state for Folio.

Holds the session clock, the page dwell recorder and the idle watchdog for
the currently open document. Every mutation (document reset, page change,
pause toggle, idle timeout) goes through this class under a single lock,
so the resume shift of the clock and the live page tracker is never
observed half-applied.

This module has no UI dependencies. The tracker panel (or any other host)
calls tracker methods, feeds activity into the activity source and polls
snapshot() for display.

Callbacks:
    on_status_change(status: str, text: str)
"""

import logging
import threading
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Optional, Tuple

import config
from tracking.analytics import compute_statistics, pages_per_hour
from tracking.clock import SessionClock, now_ms
from tracking.dwell import PageDwellRecorder
from tracking.idle import ActivityHub, IdleWatchdog
from tracking.models import DwellRecord, normalize_page

logger = logging.getLogger(__name__)


@dataclass
class _SessionState:
    """Mutable per-document state. Only touched under the tracker lock."""
    document_id: Any
    clock: SessionClock
    recorder: PageDwellRecorder


@dataclass(frozen=True)
class ReadingSessionSnapshot:
    """
    Read-only view of a session for the presentation layer.

    The counters are fixed at the time of the snapshot; elapsed() and
    get_current_page_duration() read the live clock of the captured session
    so a display can keep ticking between snapshots. Both return 0 once
    that session has been closed or replaced by another document.
    """
    start_time: int
    pages_read: int
    average_time_per_page: float
    total_recorded_time: int
    history: Tuple[DwellRecord, ...]
    current_page: int
    elapsed: Callable[[], int]
    get_current_page_duration: Callable[[], int]

    def pages_per_hour(self) -> float:
        """Reading velocity against the live elapsed time."""
        return pages_per_hour(self.pages_read, self.elapsed())


class ReadingSessionTracker:
    """
    Measures time spent reading the current document, overall and per page.

    State machine: Running <-> Paused, starting Running whenever a new
    document becomes current. The idle watchdog is armed exactly while
    a document is open and the clock is running.

    The tracker panel visibility (is_open) lives here too because the
    single toggle control both reveals the panel and pauses the session.
    """

    def __init__(
        self,
        clock: Callable[[], int] = now_ms,
        activity_source: Optional[ActivityHub] = None,
        scheduler: Optional[Any] = None,
        idle_timeout_ms: int = config.IDLE_TIMEOUT_MS,
        skim_threshold_ms: int = config.SKIM_THRESHOLD_MS,
    ) -> None:
        """
        Args:
            clock: Returns the current time in milliseconds.
            activity_source: Source of pointer/keyboard/scroll/touch signals.
            scheduler: Timer scheduler for the idle watchdog.
            idle_timeout_ms: Inactivity period before auto-pause.
            skim_threshold_ms: Minimum (exclusive) dwell for a page to count.
        """
        self._now = clock
        self.skim_threshold_ms = skim_threshold_ms
        self.activity_source = activity_source if activity_source is not None else ActivityHub()

        self._lock = threading.RLock()
        self._state: Optional[_SessionState] = None
        self._is_open = False

        self.watchdog = IdleWatchdog(
            on_idle=self._on_idle_timeout,
            activity_source=self.activity_source,
            scheduler=scheduler,
            timeout_ms=idle_timeout_ms,
        )

        # ---- Callbacks (set by the host UI) ----
        self.on_status_change: Optional[Callable[[str, str], None]] = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        """Whether the tracker panel is visible."""
        return self._is_open

    @property
    def is_paused(self) -> bool:
        with self._lock:
            return self._state is not None and self._state.clock.is_paused

    @property
    def has_document(self) -> bool:
        return self._state is not None

    @property
    def document_id(self) -> Any:
        with self._lock:
            return self._state.document_id if self._state else None

    @property
    def status(self) -> str:
        with self._lock:
            if self._state is None:
                return config.STATUS_IDLE
            return config.STATUS_PAUSED if self._state.clock.is_paused else config.STATUS_RUNNING

    def elapsed(self) -> int:
        """Session reading time in ms (0 with no document open)."""
        with self._lock:
            return self._elapsed_for(self._state)

    def current_page_duration(self) -> int:
        """Time on the current page in ms (0 with no document open)."""
        with self._lock:
            return self._page_duration_for(self._state)

    def _elapsed_for(self, state: Optional[_SessionState]) -> int:
        # 0 once state is no longer the current session
        with self._lock:
            if state is None or state is not self._state:
                return 0
            return state.clock.elapsed(self._now())

    def _page_duration_for(self, state: Optional[_SessionState]) -> int:
        with self._lock:
            if state is None or state is not self._state:
                return 0
            return state.clock.current_page_duration(self._now(), state.recorder.live)

    def snapshot(self) -> Optional[ReadingSessionSnapshot]:
        """
        Capture the current statistics.

        Returns:
            A ReadingSessionSnapshot, or None if no document is open.
        """
        with self._lock:
            state = self._state
            if state is None:
                return None
            history = tuple(DwellRecord(r.page, r.duration) for r in state.recorder.history)
            stats = compute_statistics(history)
            return ReadingSessionSnapshot(
                start_time=state.clock.start_time,
                pages_read=stats.pages_read,
                average_time_per_page=stats.average_time_per_page,
                total_recorded_time=stats.total_recorded_time,
                history=history,
                current_page=state.recorder.live.page,
                elapsed=partial(self._elapsed_for, state),
                get_current_page_duration=partial(self._page_duration_for, state),
            )

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------

    def open_document(self, document_id: Any, current_page: Any = 1) -> None:
        """
        Make a document current.

        A new identity resets the session: clock restarts running, history
        is emptied and the live tracker starts on current_page. Announcing
        the document that is already current changes nothing.

        Args:
            document_id: Hashable identity of the document.
            current_page: Page on screen (1-indexed). Invalid values fall
                          back to page 1.
        """
        if document_id is None:
            self.close_document()
            return

        with self._lock:
            if self._state is not None and self._state.document_id == document_id:
                return
            page = normalize_page(current_page)
            if page is None:
                logger.warning(f"Invalid start page {current_page!r}, starting on page 1")
                page = 1
            self._reset(document_id, page)

    def reset_session(self) -> None:
        """Restart the session for the current document from scratch."""
        with self._lock:
            if self._state is None:
                return
            self._reset(self._state.document_id, self._state.recorder.live.page)

    def _reset(self, document_id: Any, page: int) -> None:
        # Caller holds self._lock
        now = self._now()
        self._state = _SessionState(
            document_id=document_id,
            clock=SessionClock(now),
            recorder=PageDwellRecorder(page, now, self.skim_threshold_ms),
        )
        self.watchdog.disarm()
        self.watchdog.arm()
        logger.info(f"Reading session started for document {document_id!r} on page {page}")
        self._notify_status_change(config.STATUS_RUNNING, "Reading")

    def close_document(self) -> None:
        """Drop the session state and stop idle monitoring."""
        with self._lock:
            self.watchdog.disarm()
            if self._state is None:
                return
            logger.info(f"Reading session closed for document {self._state.document_id!r}")
            self._state = None
            self._notify_status_change(config.STATUS_IDLE, "No document")

    def dispose(self) -> None:
        """Release the idle timer and activity listener. Safe to call twice."""
        self.close_document()

    # ------------------------------------------------------------------
    # Page tracking
    # ------------------------------------------------------------------

    def set_current_page(self, page: Any) -> Optional[DwellRecord]:
        """
        Handle the reader showing a different page.

        Args:
            page: New 1-indexed page number. Non-positive, non-finite or
                  non-integral values are ignored.

        Returns:
            A copy of the record that received time, or None.
        """
        normalized = normalize_page(page)
        if normalized is None:
            logger.warning(f"Ignoring invalid page number: {page!r}")
            return None

        with self._lock:
            state = self._state
            if state is None:
                logger.debug(f"Page change to {normalized} with no open document")
                return None
            record = state.recorder.change_page(normalized, self._now(), state.clock.is_paused)
            return DwellRecord(record.page, record.duration) if record else None

    # ------------------------------------------------------------------
    # Pause control
    # ------------------------------------------------------------------

    def toggle_pause(self) -> None:
        """
        The tracker's single play/pause control.

        - Paused: resume (and show the panel if hidden).
        - Running with the panel hidden: only reveal the panel.
        - Running with the panel visible: pause.
        """
        with self._lock:
            was_open = self._is_open
            self._is_open = True

            if self._state is None:
                return
            if self._state.clock.is_paused:
                self._resume()
            elif was_open:
                self._pause()

    def pause(self) -> bool:
        """
        Pause the session. No-op if already paused or nothing is open.

        Returns:
            True if the session transitioned to paused.
        """
        with self._lock:
            if self._state is None or self._state.clock.is_paused:
                return False
            self._pause()
            return True

    def resume(self) -> bool:
        """
        Resume a paused session. No-op if running or nothing is open.

        Returns:
            True if the session transitioned to running.
        """
        with self._lock:
            if self._state is None or not self._state.clock.is_paused:
                return False
            self._resume()
            return True

    def show_panel(self) -> None:
        self._is_open = True

    def hide_panel(self) -> None:
        """Hide the tracker panel. The session keeps its state."""
        self._is_open = False

    def _pause(self) -> None:
        # Caller holds self._lock
        if not self._state.clock.pause(self._now()):
            return
        self.watchdog.disarm()
        self._notify_status_change(config.STATUS_PAUSED, "Paused")
        logger.info("Session paused")

    def _resume(self) -> None:
        # Caller holds self._lock
        gap = self._state.clock.resume(self._now(), self._state.recorder.live)
        if gap is None:
            return
        self.watchdog.arm()
        self._notify_status_change(config.STATUS_RUNNING, "Reading")
        logger.info(f"Session resumed after {gap}ms")

    def _on_idle_timeout(self, generation: int) -> None:
        """Called by the watchdog; only the pause half of the toggle."""
        with self._lock:
            # A reset or activity since the timer fired supersedes it
            if not self.watchdog.is_current(generation):
                return
            if self._state is None or self._state.clock.is_paused:
                return
            logger.info("Auto-pausing due to inactivity")
            self._pause()

    def _notify_status_change(self, status: str, text: str) -> None:
        if not self.on_status_change:
            return
        try:
            self.on_status_change(status, text)
        except Exception as e:
            logger.error(f"Status change callback failed: {e}")
