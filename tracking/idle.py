"""
Idle detection for reading sessions.

The watchdog keeps a single retriggerable timer. Activity signals restart
it; if it ever expires, the session is auto-paused. Timers come from a
scheduler and activity from an activity source, so the same watchdog runs
headless (threading.Timer) or inside the Tk event loop (widget.after).
"""

import logging
import threading
from typing import Any, Callable, List, Optional

import config

logger = logging.getLogger(__name__)

ActivityHandler = Callable[[str], None]


class ActivityHub:
    """
    In-process publisher of user-activity signals.

    Hosts call emit() from their input handlers; the watchdog subscribes
    while the session is running.
    """

    def __init__(self):
        """Initialize with no subscribers."""
        self._handlers: List[ActivityHandler] = []
        self._lock = threading.Lock()

    def subscribe(self, handler: ActivityHandler) -> Callable[[], None]:
        """
        Register a handler for activity signals.

        Returns:
            A callable that removes the registration. Calling it more than
            once is harmless.
        """
        with self._lock:
            self._handlers.append(handler)

        def unsubscribe() -> None:
            with self._lock:
                if handler in self._handlers:
                    self._handlers.remove(handler)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._handlers)

    def emit(self, signal: str) -> None:
        """
        Deliver an activity signal to every subscriber.

        Unknown signal names are ignored.
        """
        if signal not in config.ACTIVITY_SIGNALS:
            logger.debug(f"Ignoring unknown activity signal: {signal}")
            return
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            handler(signal)


class ThreadingScheduler:
    """Runs callbacks after a delay on daemon threading.Timer threads."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay_ms / 1000.0, callback)
        timer.daemon = True
        timer.start()
        return timer

    def cancel(self, handle: threading.Timer) -> None:
        handle.cancel()


class IdleWatchdog:
    """
    Auto-pause trigger after a period without user activity.

    Armed only while the session is running. arm() registers the activity
    listener and starts the timer; disarm() releases both. Each arm or
    activity signal starts a new timer generation; a callback from an older
    generation is ignored, which covers threading.Timer callbacks that
    fire just as they are cancelled.
    """

    def __init__(
        self,
        on_idle: Callable[[int], None],
        activity_source: Optional[ActivityHub] = None,
        scheduler: Optional[Any] = None,
        timeout_ms: int = config.IDLE_TIMEOUT_MS,
    ):
        """
        Args:
            on_idle: Called with the timer generation (without the watchdog
                     lock held) when the timer expires. The receiver should
                     confirm is_current(generation) under its own lock
                     before acting.
            activity_source: Where activity signals come from. A private
                             ActivityHub is created if omitted.
            scheduler: Object with call_later(delay_ms, callback) and
                       cancel(handle). Defaults to ThreadingScheduler.
            timeout_ms: Inactivity period before on_idle fires.
        """
        self.on_idle = on_idle
        self.activity_source = activity_source if activity_source is not None else ActivityHub()
        self.scheduler = scheduler if scheduler is not None else ThreadingScheduler()
        self.timeout_ms = timeout_ms

        self._lock = threading.Lock()
        self._armed = False
        self._generation = 0
        self._timer_handle: Optional[Any] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def is_armed(self) -> bool:
        return self._armed

    def arm(self) -> None:
        """Start watching for inactivity. No-op if already armed."""
        with self._lock:
            if self._armed:
                return
            self._armed = True
            self._unsubscribe = self.activity_source.subscribe(self.notify_activity)
            self._restart_timer()
        logger.debug(f"Idle watchdog armed ({self.timeout_ms}ms)")

    def disarm(self) -> None:
        """Cancel the timer and drop the activity listener. No-op if disarmed."""
        with self._lock:
            if not self._armed:
                return
            self._armed = False
            self._generation += 1
            self._cancel_timer()
            unsubscribe = self._unsubscribe
            self._unsubscribe = None
        if unsubscribe:
            unsubscribe()
        logger.debug("Idle watchdog disarmed")

    def notify_activity(self, signal: str = config.ACTIVITY_POINTER_MOVE) -> None:
        """Restart the inactivity timer. Ignored while disarmed."""
        with self._lock:
            if not self._armed:
                return
            self._restart_timer()

    def _restart_timer(self) -> None:
        # Caller holds self._lock
        self._cancel_timer()
        self._generation += 1
        generation = self._generation
        self._timer_handle = self.scheduler.call_later(
            self.timeout_ms, lambda: self._expire(generation)
        )

    def _cancel_timer(self) -> None:
        # Caller holds self._lock
        if self._timer_handle is not None:
            self.scheduler.cancel(self._timer_handle)
            self._timer_handle = None

    def _expire(self, generation: int) -> None:
        with self._lock:
            if not self._armed or generation != self._generation:
                return
            self._timer_handle = None
        logger.debug(f"Idle timer expired (generation {generation})")
        self.on_idle(generation)

    def is_current(self, generation: int) -> bool:
        """Whether generation is still the live, armed timer."""
        with self._lock:
            return self._armed and generation == self._generation
