"""Analytics for computing reading statistics from dwell history."""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import config
from tracking.models import DwellRecord


@dataclass(frozen=True)
class ReadingStats:
    """Summary metrics derived from a dwell history."""
    pages_read: int
    total_recorded_time: int
    average_time_per_page: float


def compute_statistics(history: Sequence[DwellRecord]) -> ReadingStats:
    """
    Compute summary statistics from a dwell history.

    Pure function: recomputed on every call, nothing is cached.

    Args:
        history: Committed dwell records.

    Returns:
        ReadingStats with pages_read (distinct pages), total_recorded_time
        (ms) and average_time_per_page (ms, 0 when no pages were read).
    """
    pages_read = len({record.page for record in history})
    total = sum(record.duration for record in history)
    average = total / pages_read if pages_read > 0 else 0.0
    return ReadingStats(
        pages_read=pages_read,
        total_recorded_time=total,
        average_time_per_page=average,
    )


def pages_per_hour(
    pages_read: int,
    elapsed_ms: int,
    min_window_ms: int = config.MIN_VELOCITY_WINDOW_MS,
) -> float:
    """
    Reading velocity in pages per hour.

    Elapsed time is floored at min_window_ms so the rate does not blow up
    in the first seconds of a session.

    Examples:
        >>> pages_per_hour(1, 10_000)
        60.0
        >>> pages_per_hour(30, 1_800_000)
        60.0
    """
    if pages_read <= 0:
        return 0.0
    window = max(elapsed_ms, min_window_ms)
    return pages_read / window * 3_600_000


def format_clock(ms: int) -> Tuple[Optional[str], str, str]:
    """
    Split a duration into stopwatch display parts.

    Returns:
        (hours, minutes, seconds) where hours is None under one hour and
        minutes/seconds are zero-padded to two digits.

    Examples:
        >>> format_clock(65_000)
        (None, '01', '05')
        >>> format_clock(3_725_000)
        ('1', '02', '05')
    """
    total_seconds = max(0, int(ms // 1000))
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return (str(hours) if hours > 0 else None, f"{minutes:02d}", f"{seconds:02d}")


def format_duration(ms: float, full_precision: bool = False) -> str:
    """
    Format a duration in milliseconds to human-readable text.

    Truncation happens here, at display time only.

    Args:
        ms: Duration in milliseconds.
        full_precision: If True, always show all components including
                        seconds even when hours > 0.

    Returns:
        Formatted string like "1 min 30 secs", "45 secs", "2 hrs 15 mins".

    Examples:
        >>> format_duration(90_000)
        '1 min 30 secs'
        >>> format_duration(3_725_000)
        '1 hr 2 mins'
        >>> format_duration(0)
        '0 sec'
    """
    total_seconds = int(ms // 1000) if ms >= 0 else 0

    hours = total_seconds // 3600
    mins = (total_seconds % 3600) // 60
    secs = total_seconds % 60

    parts = []

    if hours > 0:
        parts.append(f"{hours} {'hr' if hours == 1 else 'hrs'}")

    if mins > 0 or (full_precision and hours > 0):
        parts.append(f"{mins} {'min' if mins == 1 else 'mins'}")

    if (secs > 0 or full_precision) and (hours == 0 or full_precision):
        parts.append(f"{secs} {'sec' if secs == 1 else 'secs'}")

    return " ".join(parts) if parts else "0 sec"


def waveform_bars(
    history: Sequence[DwellRecord],
    current_page: Optional[int],
    live_page_duration: int,
    paused: bool,
    bar_count: int = config.WAVEFORM_BARS,
) -> List[Dict[str, object]]:
    """
    Build the bar heights for the tracker panel's page waveform.

    The live page is appended after the history as the newest bar. Heights
    are percentages scaled by square root against the longest recent bar
    (at least WAVEFORM_MIN_SCALE_MS) and clamped to [10, 100]. Slots with
    no data get a low placeholder wave.

    Returns:
        bar_count dicts, oldest first. Data bars have type "data", height
        and active (True only for the live page while running). Empty
        slots have type "empty" and height.
    """
    durations = [record.duration for record in history]
    if current_page is not None:
        live = live_page_duration if paused else max(100, live_page_duration)
        durations.append(max(0, live))

    recent = durations[-bar_count:]
    max_duration = max(recent + [config.WAVEFORM_MIN_SCALE_MS])
    scale = math.sqrt(max_duration)

    bars: List[Dict[str, object]] = []
    for i in range(bar_count):
        data_index = len(durations) - 1 - i
        if data_index >= 0:
            ratio = math.sqrt(durations[data_index]) / scale
            bars.insert(0, {
                "type": "data",
                "height": min(100.0, max(10.0, ratio * 100)),
                "active": data_index == len(durations) - 1 and current_page is not None and not paused,
            })
        else:
            bars.insert(0, {"type": "empty", "height": 10 + math.sin(i * 0.9) * 5})
    return bars
