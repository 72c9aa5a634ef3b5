"""Configuration settings for Folio."""

import logging
import os
import sys
from pathlib import Path
from dotenv import load_dotenv


def is_bundled() -> bool:
    """
    Check if the application is running from a PyInstaller bundle.

    Returns:
        True if running from a bundled executable, False otherwise.
    """
    return getattr(sys, 'frozen', False) and hasattr(sys, '_MEIPASS')


# Load environment variables from .env file (only in development)
if not is_bundled():
    # Explicitly load from the project root (where config.py lives)
    # so .env is found regardless of current working directory
    _env_path = Path(__file__).parent / ".env"
    load_dotenv(_env_path)


def _get_int_env(env_var: str, default: int, minimum: int = 0) -> int:
    """
    Read an integer setting from the environment.

    Args:
        env_var: Environment variable name.
        default: Value used when the variable is unset or invalid.
        minimum: Smallest accepted value (inclusive).

    Returns:
        The parsed integer, or default.
    """
    raw = os.getenv(env_var, "")
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"{env_var}={raw!r} is not an integer, using default {default}"
        )
        return default
    if value < minimum:
        logging.getLogger(__name__).warning(
            f"{env_var}={value} is below {minimum}, using default {default}"
        )
        return default
    return value


# --- Reading session tracking ---
# All durations are integer milliseconds.

# Auto-pause after this long without pointer/keyboard/scroll/touch activity
IDLE_TIMEOUT_MS = _get_int_env("IDLE_TIMEOUT_MS", 120_000, minimum=1)

# A page must stay on screen strictly longer than this to count as read.
# Rapid flips (jump-to-page, skimming) are dropped.
SKIM_THRESHOLD_MS = _get_int_env("SKIM_THRESHOLD_MS", 2_000)

# Velocity (pages/hour) never divides by less than this much elapsed time
MIN_VELOCITY_WINDOW_MS = _get_int_env("MIN_VELOCITY_WINDOW_MS", 60_000, minimum=1)

# Activity signals that keep the session awake
ACTIVITY_POINTER_DOWN = "pointer_down"
ACTIVITY_POINTER_MOVE = "pointer_move"
ACTIVITY_KEY_DOWN = "key_down"
ACTIVITY_SCROLL = "scroll"
ACTIVITY_TOUCH_START = "touch_start"

ACTIVITY_SIGNALS = frozenset({
    ACTIVITY_POINTER_DOWN,
    ACTIVITY_POINTER_MOVE,
    ACTIVITY_KEY_DOWN,
    ACTIVITY_SCROLL,
    ACTIVITY_TOUCH_START,
})

# Session status values reported to the UI
STATUS_IDLE = "idle"  # No document open
STATUS_RUNNING = "running"
STATUS_PAUSED = "paused"

# --- Tracker panel ---
DISPLAY_REFRESH_MS = _get_int_env("DISPLAY_REFRESH_MS", 100, minimum=10)
WAVEFORM_BARS = _get_int_env("WAVEFORM_BARS", 24, minimum=1)
WAVEFORM_MIN_SCALE_MS = 5_000  # Bars are scaled against at least 5 seconds
GHOST_FADE_MS = _get_int_env("GHOST_FADE_MS", 4_000, minimum=1)  # Dim panel after no mouse motion
GHOST_ALPHA = 0.2

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")  # Can override in .env: DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
