"""
Folio reader window.

A minimal page navigator that stands in for the document viewer: it owns
the current document identity and page number and forwards both to the
ReadingSessionTracker. Rendering the document itself is left to the viewer
this window is embedded with.
"""

import logging
from pathlib import Path
from tkinter import filedialog
from typing import Optional

import customtkinter as ctk

from core.tracker import ReadingSessionTracker
from gui.tk_bridge import TkActivitySource, TkScheduler, keyboard_shortcut
from gui.tracker_panel import TrackerPanel
from gui.ui_components import COLORS, RoundedButton, get_ctk_font

logger = logging.getLogger(__name__)


class FolioApp:
    """Main window: document picker, page navigation and tracker toggle."""

    def __init__(self, document: Optional[str] = None, total_pages: int = 100):
        """
        Args:
            document: Optional path/identity of the document to open at start.
            total_pages: Number of pages to navigate through.
        """
        ctk.set_appearance_mode("light")
        self.root = ctk.CTk(fg_color=COLORS["bg"])
        self.root.title("Folio")
        self.root.geometry("520x260")
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)

        self.total_pages = max(1, total_pages)
        self.current_page = 1

        self.activity_source = TkActivitySource()
        self.activity_source.attach(self.root)
        self.tracker = ReadingSessionTracker(
            activity_source=self.activity_source,
            scheduler=TkScheduler(self.root),
        )
        self.tracker.on_status_change = self._on_status_change

        self._build()
        self.panel = TrackerPanel(self.root, self.tracker, self.activity_source)

        self.root.bind("<Left>", keyboard_shortcut(lambda: self.go_to_page(self.current_page - 1)))
        self.root.bind("<Right>", keyboard_shortcut(lambda: self.go_to_page(self.current_page + 1)))
        self.root.bind("<KeyPress-t>", keyboard_shortcut(self.toggle_tracker))

        if document:
            self.open_document(document)

    def _build(self) -> None:
        self.title_label = ctk.CTkLabel(
            self.root, text="No document", font=get_ctk_font("heading"), text_color=COLORS["text_primary"]
        )
        self.title_label.pack(pady=(24, 4))
        self.status_label = ctk.CTkLabel(
            self.root, text="", font=get_ctk_font("body"), text_color=COLORS["text_secondary"]
        )
        self.status_label.pack()

        nav = ctk.CTkFrame(self.root, fg_color=COLORS["transparent"])
        nav.pack(pady=16)
        RoundedButton(nav, text="‹", width=40, command=lambda: self.go_to_page(self.current_page - 1)).pack(side="left")
        self.page_entry = ctk.CTkEntry(nav, width=64, justify="center")
        self.page_entry.pack(side="left", padx=8)
        self.page_entry.bind("<Return>", self._on_jump)
        self.pages_label = ctk.CTkLabel(nav, text=f"of {self.total_pages}", font=get_ctk_font("body"))
        self.pages_label.pack(side="left", padx=(0, 8))
        RoundedButton(nav, text="›", width=40, command=lambda: self.go_to_page(self.current_page + 1)).pack(side="left")

        actions = ctk.CTkFrame(self.root, fg_color=COLORS["transparent"])
        actions.pack()
        RoundedButton(actions, text="Open…", command=self._choose_document).pack(side="left", padx=4)
        RoundedButton(actions, text="Tracker", command=self.toggle_tracker).pack(side="left", padx=4)

        self._update_page_entry()

    # ------------------------------------------------------------------
    # Document / page signals
    # ------------------------------------------------------------------

    def open_document(self, document: str) -> None:
        self.current_page = 1
        self.tracker.open_document(document, self.current_page)
        self.title_label.configure(text=Path(document).name or document)
        self._update_page_entry()

    def go_to_page(self, page: int) -> None:
        if self.tracker.document_id is None:
            return
        page = max(1, min(self.total_pages, page))
        if page == self.current_page:
            self._update_page_entry()
            return
        self.current_page = page
        self.tracker.set_current_page(page)
        self._update_page_entry()

    def toggle_tracker(self) -> None:
        self.panel.toggle_pause()

    def _choose_document(self) -> None:
        path = filedialog.askopenfilename(
            parent=self.root, filetypes=[("PDF documents", "*.pdf"), ("All files", "*.*")]
        )
        if path:
            self.open_document(path)

    def _on_jump(self, _event=None) -> None:
        try:
            page = int(self.page_entry.get())
        except ValueError:
            self._update_page_entry()
            return
        self.go_to_page(page)

    def _update_page_entry(self) -> None:
        self.page_entry.delete(0, "end")
        self.page_entry.insert(0, str(self.current_page))

    def _on_status_change(self, status: str, text: str) -> None:
        # Idle auto-pause runs on the Tk loop via TkScheduler, so direct
        # widget updates are safe here
        self.status_label.configure(text=text)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> None:
        self.root.mainloop()

    def on_close(self) -> None:
        """Tear down timers and input bindings before the window goes."""
        self.tracker.on_status_change = None
        self.tracker.dispose()
        self.activity_source.detach()
        self.panel.destroy()
        self.root.destroy()
