"""Time accounting for reading sessions: clock, page dwell, idle detection, analytics."""
