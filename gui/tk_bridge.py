"""
Adapters that run the idle watchdog inside the Tk event loop.

Kept free of tkinter imports so they work with any widget exposing
after/after_cancel/bind_all/unbind_all (and can be tested with mocks).
"""

import logging
from typing import Any, Callable, Dict, Optional

import config
from tracking.idle import ActivityHub

logger = logging.getLogger(__name__)

# Tk event sequences and the activity signal each one represents.
# Tk has no touch-start event; touch screens deliver button presses.
TK_ACTIVITY_EVENTS: Dict[str, str] = {
    "<ButtonPress>": config.ACTIVITY_POINTER_DOWN,
    "<Motion>": config.ACTIVITY_POINTER_MOVE,
    "<KeyPress>": config.ACTIVITY_KEY_DOWN,
    "<MouseWheel>": config.ACTIVITY_SCROLL,
    "<Button-4>": config.ACTIVITY_SCROLL,  # X11 wheel up
    "<Button-5>": config.ACTIVITY_SCROLL,  # X11 wheel down
}


class TkScheduler:
    """Schedules watchdog timers with widget.after on the Tk main loop."""

    def __init__(self, widget: Any):
        self.widget = widget

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> str:
        return self.widget.after(delay_ms, callback)

    def cancel(self, handle: str) -> None:
        try:
            self.widget.after_cancel(handle)
        except Exception as e:
            # Widget already destroyed during teardown
            logger.debug(f"after_cancel failed: {e}")


class TkActivitySource(ActivityHub):
    """
    Activity hub fed by application-wide Tk input events.

    attach() binds the events on the root window; detach() removes the
    bindings. Subscribers come and go through the hub as usual.
    """

    def __init__(self):
        super().__init__()
        self._root: Optional[Any] = None

    @property
    def is_attached(self) -> bool:
        return self._root is not None

    def attach(self, root: Any) -> None:
        """Bind input events on root. No-op if already attached."""
        if self._root is not None:
            return
        self._root = root
        for sequence, signal in TK_ACTIVITY_EVENTS.items():
            root.bind_all(sequence, lambda _event, s=signal: self.emit(s), add="+")

    def detach(self) -> None:
        """Remove the input bindings. Safe to call twice."""
        root = self._root
        if root is None:
            return
        self._root = None
        for sequence in TK_ACTIVITY_EVENTS:
            try:
                root.unbind_all(sequence)
            except Exception as e:
                logger.debug(f"unbind_all {sequence} failed: {e}")


# Widget classes that take typed text; window-level shortcuts skip them
TEXT_INPUT_CLASSES = frozenset({"Entry", "TEntry", "Text", "Spinbox", "TSpinbox"})


def is_text_input(widget: Any) -> bool:
    """Whether widget is a Tk text-entry widget."""
    try:
        return widget.winfo_class() in TEXT_INPUT_CLASSES
    except Exception:
        # Event widgets can be plain strings for some virtual events
        return False


def keyboard_shortcut(action: Callable[[], None]) -> Callable[[Any], None]:
    """
    Wrap action as a window-level key handler.

    Keys pressed while a text input has focus are left to that input.
    """
    def handler(event: Any) -> None:
        # Event propagation continues so the "all" tag still reports activity
        if not is_text_input(getattr(event, "widget", None)):
            action()

    return handler
