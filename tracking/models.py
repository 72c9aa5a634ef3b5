"""Data records shared by the session clock and the page dwell recorder."""

import math
import numbers
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class LiveTracker:
    """
    The page currently on screen and the time its dwell began being measured.

    There is exactly one per session. The dwell recorder replaces it on every
    page boundary; the session clock shifts reference_time on resume.
    """
    page: int
    reference_time: int


@dataclass
class DwellRecord:
    """Cumulative committed reading time (ms) for one page."""
    page: int
    duration: int


def normalize_page(page: Any) -> Optional[int]:
    """
    Validate a page number coming from the reader.

    Accepts positive integers and integral floats (3.0 -> 3). Everything
    else (bools, zero, negatives, NaN, infinities, fractions, non-numbers)
    is rejected.

    Args:
        page: Raw page value from the page-changed signal.

    Returns:
        The page as an int, or None if it is not a usable page number.
    """
    if isinstance(page, bool) or not isinstance(page, numbers.Real):
        return None
    if isinstance(page, numbers.Integral):
        value = int(page)
    else:
        as_float = float(page)
        if not math.isfinite(as_float) or not as_float.is_integer():
            return None
        value = int(as_float)
    return value if value >= 1 else None
