"""Pause-aware session clock."""

import logging
import time
from typing import Optional

from tracking.models import LiveTracker

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Current monotonic time in integer milliseconds."""
    return int(time.monotonic() * 1000)


class SessionClock:
    """
    Tracks elapsed reading time for one document, net of paused intervals.

    Rather than summing paused time, resume() moves start_time forward by
    the length of the pause, so elapsed is always a single subtraction and
    stays continuous across a pause/resume cycle. The live page tracker is
    shifted by the same gap so page dwell and session time agree.
    """

    def __init__(self, start_time: int):
        """
        Start a running clock.

        Args:
            start_time: Session start in milliseconds.
        """
        self.start_time: int = start_time
        self.pause_started_at: Optional[int] = None

    @property
    def is_paused(self) -> bool:
        return self.pause_started_at is not None

    def elapsed(self, now: int) -> int:
        """
        Session duration in milliseconds.

        Frozen at the moment of pausing while paused.
        """
        if self.pause_started_at is not None:
            return self.pause_started_at - self.start_time
        return now - self.start_time

    def current_page_duration(self, now: int, live: LiveTracker) -> int:
        """Time spent on the live page so far, frozen while paused."""
        if self.pause_started_at is not None:
            return self.pause_started_at - live.reference_time
        return now - live.reference_time

    def pause(self, now: int) -> bool:
        """
        Freeze the clock.

        Returns:
            True if the clock was running and is now paused, False if it
            was already paused (no-op).
        """
        if self.pause_started_at is not None:
            return False
        self.pause_started_at = now
        return True

    def resume(self, now: int, live: LiveTracker) -> Optional[int]:
        """
        Unfreeze the clock, discarding the paused interval.

        start_time and live.reference_time move forward by the same gap in
        one step. Callers must hold the session lock so neither shift is
        observed without the other.

        Args:
            now: Resume time in milliseconds.
            live: The dwell recorder's live tracker.

        Returns:
            The length of the pause in ms, or None if the clock was
            already running (no-op).
        """
        if self.pause_started_at is None:
            return None

        # A clock read earlier than the pause start (should not happen with
        # a monotonic source) must not move time backwards
        gap = max(0, now - self.pause_started_at)
        self.start_time += gap
        live.reference_time += gap
        self.pause_started_at = None

        logger.debug(f"Clock resumed after {gap}ms pause")
        return gap
