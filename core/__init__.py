"""
Core session package for Folio.

Contains the headless ReadingSessionTracker that owns all reading-session
state. Zero UI dependencies.
"""

from core.tracker import ReadingSessionSnapshot, ReadingSessionTracker

__all__ = ["ReadingSessionSnapshot", "ReadingSessionTracker"]
