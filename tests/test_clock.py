"""Unit tests for the pause-aware session clock."""

import sys
import unittest
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tracking.clock import SessionClock, now_ms
from tracking.models import LiveTracker


class TestSessionClock(unittest.TestCase):
    """Test elapsed time accounting across pause/resume."""

    def setUp(self):
        """Clock started at t=1000 with the live page started at the same time."""
        self.clock = SessionClock(1000)
        self.live = LiveTracker(page=1, reference_time=1000)

    def test_elapsed_while_running(self):
        """Elapsed is now minus start while running."""
        self.assertFalse(self.clock.is_paused)
        self.assertEqual(self.clock.elapsed(4000), 3000)

    def test_elapsed_frozen_while_paused(self):
        """Elapsed stops advancing at the pause point."""
        self.assertTrue(self.clock.pause(3000))
        self.assertTrue(self.clock.is_paused)
        self.assertEqual(self.clock.elapsed(3000), 2000)
        self.assertEqual(self.clock.elapsed(50_000), 2000)

    def test_continuity_across_pause(self):
        """No time is counted for the paused interval."""
        self.clock.pause(3000)
        before = self.clock.elapsed(3000)
        gap = self.clock.resume(10_000, self.live)

        self.assertEqual(gap, 7000)
        self.assertEqual(self.clock.elapsed(10_000), before)
        self.assertEqual(self.clock.elapsed(11_000), before + 1000)

    def test_resume_shifts_live_tracker_by_same_gap(self):
        """Resume moves start_time and the live reference time together."""
        self.clock.pause(3000)
        self.clock.resume(10_000, self.live)

        self.assertEqual(self.clock.start_time, 8000)
        self.assertEqual(self.live.reference_time, 8000)
        self.assertIsNone(self.clock.pause_started_at)

    def test_double_pause_is_noop(self):
        """A second pause does not move the pause start."""
        self.clock.pause(2000)
        self.assertFalse(self.clock.pause(5000))
        self.assertEqual(self.clock.pause_started_at, 2000)

    def test_resume_while_running_is_noop(self):
        """Resume from Running does not shift anything."""
        self.assertIsNone(self.clock.resume(5000, self.live))
        self.assertEqual(self.clock.start_time, 1000)
        self.assertEqual(self.live.reference_time, 1000)

    def test_double_resume_applies_shift_once(self):
        """Only the first resume after a pause shifts time."""
        self.clock.pause(2000)
        self.clock.resume(4000, self.live)
        self.clock.resume(9000, self.live)
        self.assertEqual(self.clock.start_time, 3000)
        self.assertEqual(self.live.reference_time, 3000)

    def test_current_page_duration(self):
        """Page duration is live while running, frozen while paused."""
        self.live.reference_time = 2500
        self.assertEqual(self.clock.current_page_duration(4000, self.live), 1500)

        self.clock.pause(5000)
        self.assertEqual(self.clock.current_page_duration(9000, self.live), 2500)

    def test_multiple_pause_cycles(self):
        """Several pauses are all excluded from elapsed time."""
        self.clock.pause(2000)                 # 1000 elapsed
        self.clock.resume(5000, self.live)
        self.clock.pause(6000)                 # +1000
        self.clock.resume(20_000, self.live)
        self.assertEqual(self.clock.elapsed(20_500), 2500)


class TestNowMs(unittest.TestCase):
    """Test the default time source."""

    def test_now_ms_is_monotonic_int(self):
        first = now_ms()
        second = now_ms()
        self.assertIsInstance(first, int)
        self.assertGreaterEqual(second, first)


if __name__ == "__main__":
    unittest.main()
