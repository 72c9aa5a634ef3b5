"""
Folio UI Components - CustomTkinter Edition

Colours, fonts and small widget wrappers shared by the reader window and
the tracker panel.
"""
import logging
from typing import Callable, Optional
import customtkinter as ctk
from customtkinter import CTkFont

logger = logging.getLogger(__name__)


# --- Design System Constants ---
COLORS = {
    "bg": "#F9F8F4",            # Warm Cream (reader background)
    "surface": "#FFFFFF",
    "text_primary": "#1C1C1E",
    "text_secondary": "#8E8E93",
    "panel_bg": "#000000",      # Tracker panel is a black puck
    "panel_text": "#FFFFFF",
    "panel_muted": "#7A7A7A",
    "panel_border": "#2A2A2A",
    "live": "#EF4444",          # Red for the live page / running indicator
    "bar": "#FFFFFF",
    "bar_empty": "#262626",
    "button_bg": "#1C1C1E",
    "button_bg_hover": "#333333",
    "button_text": "#FFFFFF",
    "transparent": "transparent",
}

FONT_SPECS = {
    # key: (family, size, weight)
    "clock": ("Courier", 30, "normal"),
    "clock_small": ("Courier", 20, "bold"),
    "metric": ("Courier", 16, "normal"),
    "label": ("Courier", 9, "normal"),
    "body": ("Helvetica", 14, "normal"),
    "heading": ("Helvetica", 20, "bold"),
}


def get_ctk_font(font_key: str, scale: float = 1.0) -> CTkFont:
    """
    Get a CTkFont object for the given font key.

    Args:
        font_key: Key from FONT_SPECS. Unknown keys fall back to "body".
        scale: Scale factor to apply (default 1.0).

    Returns:
        CTkFont object.
    """
    family, size, weight = FONT_SPECS.get(font_key, FONT_SPECS["body"])
    return CTkFont(family=family, size=max(8, int(size * scale)), weight=weight)


class RoundedButton(ctk.CTkButton):
    """A rounded CTkButton with the app's default colours."""

    def __init__(
        self,
        parent,
        text: str,
        command: Optional[Callable] = None,
        width: int = 120,
        height: int = 36,
        radius: int = 18,
        bg_color: str = COLORS["button_bg"],
        hover_color: Optional[str] = None,
        text_color: str = COLORS["button_text"],
        font_type: str = "body",
        **kwargs,
    ):
        super().__init__(
            parent,
            text=text,
            command=command,
            width=width,
            height=height,
            corner_radius=radius,
            fg_color=bg_color,
            hover_color=hover_color or COLORS["button_bg_hover"],
            text_color=text_color,
            font=get_ctk_font(font_type),
            **kwargs,
        )
