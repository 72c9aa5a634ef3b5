"""
Floating reading-tracker panel.

Shows the session clock, live page time, reading velocity and a waveform of
recent page dwell times. The panel only reads from the tracker: its 100ms
refresh tick calls snapshot()/elapsed() and never mutates session state.
The only writes go through the tracker's own controls (pause toggle, hide,
reset).
"""

import logging
from typing import Callable, Optional

import customtkinter as ctk

import config
from core.tracker import ReadingSessionTracker
from gui.ui_components import COLORS, RoundedButton, get_ctk_font
from tracking.analytics import format_clock, format_duration, waveform_bars
from tracking.idle import ActivityHub

logger = logging.getLogger(__name__)

WAVEFORM_HEIGHT = 40
WAVEFORM_WIDTH = 200


class TrackerPanel(ctk.CTkToplevel):
    """
    Always-on-top window bound to a ReadingSessionTracker.

    Visibility follows tracker.is_open; call sync_visibility() after any
    action that may change it. "Ghost mode" dims the window after a few
    seconds without mouse motion while the session is running.
    """

    def __init__(self, master, tracker: ReadingSessionTracker, activity_source: Optional[ActivityHub] = None):
        super().__init__(master, fg_color=COLORS["panel_bg"])
        self.tracker = tracker
        self.title("Reading Session")
        self.resizable(False, False)
        self.attributes("-topmost", True)
        self.protocol("WM_DELETE_WINDOW", self.hide)

        self._refresh_after_id: Optional[str] = None
        self._ghost_after_id: Optional[str] = None
        self._is_ghost_idle = False
        self._is_hovered = False
        self._unsubscribe_activity: Optional[Callable[[], None]] = None

        self._build()

        self.bind("<Enter>", self._on_enter)
        self.bind("<Leave>", self._on_leave)
        if activity_source is not None:
            self._unsubscribe_activity = activity_source.subscribe(self._on_activity)
        self._reset_ghost_timer()

        self.sync_visibility()
        self._refresh()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _build(self) -> None:
        top = ctk.CTkFrame(self, fg_color=COLORS["transparent"])
        top.pack(fill="x", padx=16, pady=(12, 4))

        self.status_dot = ctk.CTkLabel(top, text="●", text_color=COLORS["live"], font=get_ctk_font("metric"))
        self.status_dot.pack(side="left")
        ctk.CTkLabel(
            top, text="SESSION_01", text_color=COLORS["panel_muted"], font=get_ctk_font("label")
        ).pack(side="left", padx=(6, 0))
        ctk.CTkButton(
            top, text="✕", width=24, height=24, fg_color=COLORS["transparent"],
            hover_color=COLORS["panel_border"], text_color=COLORS["panel_muted"],
            command=self.hide,
        ).pack(side="right")

        body = ctk.CTkFrame(self, fg_color=COLORS["transparent"])
        body.pack(fill="both", expand=True, padx=16, pady=(0, 12))

        left = ctk.CTkFrame(body, fg_color=COLORS["transparent"])
        left.pack(side="left", fill="both", expand=True)

        self.clock_label = ctk.CTkLabel(
            left, text="00:00", text_color=COLORS["panel_text"], font=get_ctk_font("clock"), anchor="w"
        )
        self.clock_label.pack(anchor="w")
        self.page_label = ctk.CTkLabel(
            left, text="", text_color=COLORS["panel_muted"], font=get_ctk_font("label"), anchor="w"
        )
        self.page_label.pack(anchor="w")

        self.waveform = ctk.CTkCanvas(
            left, width=WAVEFORM_WIDTH, height=WAVEFORM_HEIGHT,
            bg=COLORS["panel_bg"], highlightthickness=0,
        )
        self.waveform.pack(anchor="w", pady=(6, 0))

        right = ctk.CTkFrame(body, fg_color=COLORS["transparent"])
        right.pack(side="left", fill="y", padx=(16, 0))

        ctk.CTkLabel(
            right, text="VELOCITY", text_color=COLORS["panel_muted"], font=get_ctk_font("label")
        ).pack(anchor="w")
        self.velocity_label = ctk.CTkLabel(
            right, text="0 PG/HR", text_color=COLORS["panel_text"], font=get_ctk_font("metric")
        )
        self.velocity_label.pack(anchor="w")
        self.pages_label = ctk.CTkLabel(
            right, text="", text_color=COLORS["panel_muted"], font=get_ctk_font("label"), justify="left"
        )
        self.pages_label.pack(anchor="w", pady=(4, 8))

        buttons = ctk.CTkFrame(right, fg_color=COLORS["transparent"])
        buttons.pack(anchor="w")
        self.pause_button = RoundedButton(
            buttons, text="Pause", command=self.toggle_pause, width=72, height=32, radius=16,
            bg_color=COLORS["panel_bg"], hover_color=COLORS["panel_border"],
            border_width=1, border_color=COLORS["live"],
        )
        self.pause_button.pack(side="left")
        RoundedButton(
            buttons, text="Reset", command=self.reset, width=56, height=28, radius=14,
            bg_color=COLORS["panel_bg"], hover_color=COLORS["panel_border"],
            text_color=COLORS["panel_muted"], border_width=1, border_color=COLORS["panel_border"],
        ).pack(side="left", padx=(6, 0))

    # ------------------------------------------------------------------
    # Controls (the only paths from the panel into tracker state)
    # ------------------------------------------------------------------

    def toggle_pause(self) -> None:
        self.tracker.toggle_pause()
        self.sync_visibility()

    def hide(self) -> None:
        self.tracker.hide_panel()
        self.sync_visibility()

    def reset(self) -> None:
        """Start the current document's session over."""
        self.tracker.reset_session()

    def sync_visibility(self) -> None:
        """Show or withdraw the window to match tracker.is_open."""
        if self.tracker.is_open:
            self.deiconify()
            self.lift()
        else:
            self.withdraw()

    # ------------------------------------------------------------------
    # Display refresh (read-only)
    # ------------------------------------------------------------------

    def _refresh(self) -> None:
        self._refresh_after_id = None
        try:
            self._render()
        except Exception as e:
            logger.error(f"Tracker panel refresh failed: {e}")
        self._refresh_after_id = self.after(config.DISPLAY_REFRESH_MS, self._refresh)

    def _render(self) -> None:
        snapshot = self.tracker.snapshot()
        paused = self.tracker.is_paused

        if snapshot is None:
            self.clock_label.configure(text="00:00")
            self.page_label.configure(text="NO DOCUMENT")
            self.velocity_label.configure(text="0 PG/HR")
            self.pages_label.configure(text="")
            self._draw_waveform(waveform_bars([], None, 0, True))
            self._apply_alpha(paused=True)
            return

        elapsed = snapshot.elapsed()
        page_ms = snapshot.get_current_page_duration()

        hours, minutes, seconds = format_clock(elapsed)
        clock_text = f"{minutes}:{seconds}" if hours is None else f"{hours}:{minutes}:{seconds}"
        self.clock_label.configure(text=clock_text)
        self.page_label.configure(text=f"PAGE {snapshot.current_page} · {format_duration(page_ms)}")
        self.velocity_label.configure(text=f"{round(snapshot.pages_per_hour())} PG/HR")
        self.pages_label.configure(
            text=f"{snapshot.pages_read} PAGES\n{format_duration(snapshot.average_time_per_page)} AVG"
        )

        self.status_dot.configure(text_color=COLORS["panel_muted"] if paused else COLORS["live"])
        self.pause_button.configure(text="Resume" if paused else "Pause")

        self._draw_waveform(waveform_bars(snapshot.history, snapshot.current_page, page_ms, paused))
        self._apply_alpha(paused)

    def _draw_waveform(self, bars) -> None:
        self.waveform.delete("all")
        if not bars:
            return
        slot = WAVEFORM_WIDTH / len(bars)
        for i, bar in enumerate(bars):
            height = WAVEFORM_HEIGHT * float(bar["height"]) / 100
            if bar["type"] == "data":
                color = COLORS["live"] if bar.get("active") else COLORS["bar"]
            else:
                color = COLORS["bar_empty"]
            x0 = i * slot
            self.waveform.create_rectangle(
                x0, WAVEFORM_HEIGHT - height, x0 + slot - 2, WAVEFORM_HEIGHT,
                fill=color, outline="",
            )

    # ------------------------------------------------------------------
    # Ghost mode
    # ------------------------------------------------------------------

    def _on_activity(self, signal: str) -> None:
        if signal == config.ACTIVITY_POINTER_MOVE:
            self._reset_ghost_timer()

    def _reset_ghost_timer(self) -> None:
        self._is_ghost_idle = False
        if self._ghost_after_id is not None:
            self.after_cancel(self._ghost_after_id)
        self._ghost_after_id = self.after(config.GHOST_FADE_MS, self._on_ghost_timeout)

    def _on_ghost_timeout(self) -> None:
        self._ghost_after_id = None
        self._is_ghost_idle = True

    def _on_enter(self, _event=None) -> None:
        self._is_hovered = True

    def _on_leave(self, _event=None) -> None:
        self._is_hovered = False

    def _apply_alpha(self, paused: bool) -> None:
        ghost = self._is_ghost_idle and not self._is_hovered and not paused
        self.attributes("-alpha", config.GHOST_ALPHA if ghost else 1.0)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def destroy(self) -> None:
        for after_id in (self._refresh_after_id, self._ghost_after_id):
            if after_id is not None:
                try:
                    self.after_cancel(after_id)
                except Exception as e:
                    logger.debug(f"after_cancel failed: {e}")
        self._refresh_after_id = None
        self._ghost_after_id = None
        if self._unsubscribe_activity:
            self._unsubscribe_activity()
            self._unsubscribe_activity = None
        super().destroy()
