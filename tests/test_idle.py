"""Unit tests for the idle watchdog and activity hub."""

import sys
import threading
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from tracking.idle import ActivityHub, IdleWatchdog, ThreadingScheduler
from fakes import FakeTime


class TestActivityHub(unittest.TestCase):
    """Test subscription and signal delivery."""

    def test_emit_reaches_subscribers(self):
        hub = ActivityHub()
        received = []
        hub.subscribe(received.append)

        hub.emit(config.ACTIVITY_SCROLL)
        self.assertEqual(received, [config.ACTIVITY_SCROLL])

    def test_unknown_signal_ignored(self):
        hub = ActivityHub()
        handler = MagicMock()
        hub.subscribe(handler)

        hub.emit("window_resize")
        handler.assert_not_called()

    def test_unsubscribe_is_idempotent(self):
        hub = ActivityHub()
        unsubscribe = hub.subscribe(lambda s: None)
        self.assertEqual(hub.listener_count, 1)

        unsubscribe()
        unsubscribe()
        self.assertEqual(hub.listener_count, 0)


class TestIdleWatchdog(unittest.TestCase):
    """Test arming, retriggering and expiry."""

    def setUp(self):
        self.time = FakeTime()
        self.hub = ActivityHub()
        self.on_idle = MagicMock()
        self.watchdog = IdleWatchdog(
            on_idle=self.on_idle,
            activity_source=self.hub,
            scheduler=self.time,
            timeout_ms=120_000,
        )

    def test_fires_after_timeout(self):
        """No activity for the full timeout triggers on_idle once."""
        self.watchdog.arm()
        self.time.set(119_999)
        self.on_idle.assert_not_called()

        self.time.set(120_000)
        self.on_idle.assert_called_once()

    def test_activity_restarts_timer(self):
        """Each activity signal pushes the deadline out."""
        self.watchdog.arm()
        self.time.set(100_000)
        self.hub.emit(config.ACTIVITY_POINTER_MOVE)

        self.time.set(219_999)
        self.on_idle.assert_not_called()
        self.time.set(220_000)
        self.on_idle.assert_called_once()

    def test_only_one_timer_pending(self):
        """Retriggering cancels the previous timer."""
        self.watchdog.arm()
        for signal in config.ACTIVITY_SIGNALS:
            self.hub.emit(signal)
        self.assertEqual(len(self.time.pending), 1)

    def test_disarm_releases_timer_and_listener(self):
        """Disarm leaves no pending timer and no subscription."""
        self.watchdog.arm()
        self.assertEqual(self.hub.listener_count, 1)

        self.watchdog.disarm()
        self.assertFalse(self.watchdog.is_armed)
        self.assertEqual(self.hub.listener_count, 0)
        self.assertEqual(self.time.pending, [])

        self.time.advance(500_000)
        self.on_idle.assert_not_called()

    def test_arm_twice_registers_once(self):
        self.watchdog.arm()
        self.watchdog.arm()
        self.assertEqual(self.hub.listener_count, 1)
        self.assertEqual(len(self.time.pending), 1)

    def test_activity_ignored_while_disarmed(self):
        """Signals do not schedule anything when not armed."""
        self.watchdog.notify_activity()
        self.assertEqual(self.time.timers, [])

    def test_stale_callback_ignored(self):
        """A timer callback from a cancelled generation does nothing."""
        self.watchdog.arm()
        stale = self.time.pending[0]
        self.watchdog.notify_activity()

        # Simulate the old timer firing anyway (threading.Timer race)
        stale.callback()
        self.on_idle.assert_not_called()

    def test_rearm_after_disarm(self):
        """Re-arming starts a fresh full timeout."""
        self.watchdog.arm()
        self.time.set(60_000)
        self.watchdog.disarm()
        self.time.set(90_000)
        self.watchdog.arm()

        self.time.set(209_999)
        self.on_idle.assert_not_called()
        self.time.set(210_000)
        self.on_idle.assert_called_once()

    def test_on_idle_receives_generation(self):
        """The expiring generation is passed on and is still current."""
        seen = []
        self.on_idle.side_effect = lambda gen: seen.append(self.watchdog.is_current(gen))
        self.watchdog.arm()
        self.time.set(120_000)

        self.assertEqual(seen, [True])

    def test_is_current_after_activity_and_disarm(self):
        self.watchdog.arm()
        self.time.set(120_000)
        generation = self.on_idle.call_args.args[0]

        self.watchdog.notify_activity()
        self.assertFalse(self.watchdog.is_current(generation))

        self.watchdog.disarm()
        self.assertFalse(self.watchdog.is_current(generation + 1))

    def test_expiry_logged_at_debug(self):
        """Expiry leaves the user-facing auto-pause message to the tracker."""
        self.watchdog.arm()
        with self.assertLogs("tracking.idle", level="DEBUG") as logs:
            self.time.set(120_000)

        self.assertTrue(any("expired" in r.getMessage() for r in logs.records))
        self.assertTrue(all(r.levelname == "DEBUG" for r in logs.records))


class TestThreadingScheduler(unittest.TestCase):
    """Test the threading.Timer scheduler."""

    @patch("tracking.idle.threading.Timer")
    def test_call_later_starts_daemon_timer(self, mock_timer_cls):
        mock_timer = MagicMock()
        mock_timer_cls.return_value = mock_timer
        callback = MagicMock()

        handle = ThreadingScheduler().call_later(120_000, callback)

        mock_timer_cls.assert_called_once_with(120.0, callback)
        self.assertTrue(mock_timer.daemon)
        mock_timer.start.assert_called_once()
        self.assertIs(handle, mock_timer)

    def test_cancel_prevents_callback(self):
        fired = threading.Event()
        scheduler = ThreadingScheduler()
        handle = scheduler.call_later(50, fired.set)
        scheduler.cancel(handle)
        handle.join(timeout=1)
        self.assertFalse(fired.is_set())


if __name__ == "__main__":
    unittest.main()
