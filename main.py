#!/usr/bin/env python3
"""
Folio - Main Entry Point

A document reader companion that tracks how long you spend reading,
overall and per page, with pause/resume and automatic idle pausing.

Usage:
    python main.py                      # Launch the reader window (default)
    python main.py --document book.pdf  # Open a document at start
    python main.py --cli                # Terminal mode
"""

import argparse
import logging
import sys
from typing import Optional

import config
from core.tracker import ReadingSessionTracker
from tracking.analytics import format_duration

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format=config.LOG_FORMAT
)
logger = logging.getLogger(__name__)

CLI_HELP = """Commands:
  o ID    open document ID (resets the session)
  n / p   next / previous page
  g N     go to page N
  t       toggle tracker (show, then pause/resume)
  s       show statistics
  q       quit"""


def format_stats(tracker: ReadingSessionTracker) -> str:
    """Render the tracker's snapshot as plain text."""
    snapshot = tracker.snapshot()
    if snapshot is None:
        return "No document open."

    lines = [
        f"Document:       {tracker.document_id}",
        f"Status:         {tracker.status}",
        f"Elapsed:        {format_duration(snapshot.elapsed(), full_precision=True)}",
        f"Current page:   {snapshot.current_page} ({format_duration(snapshot.get_current_page_duration())})",
        f"Pages read:     {snapshot.pages_read}",
        f"Avg per page:   {format_duration(snapshot.average_time_per_page)}",
        f"Velocity:       {round(snapshot.pages_per_hour())} pages/hr",
    ]
    for record in snapshot.history:
        lines.append(f"  page {record.page:>4}: {format_duration(record.duration)}")
    return "\n".join(lines)


def handle_command(tracker: ReadingSessionTracker, line: str) -> Optional[str]:
    """
    Apply one CLI command to the tracker.

    Every command also counts as keyboard activity for the idle watchdog.

    Returns:
        Text to print, or None to quit.
    """
    tracker.activity_source.emit(config.ACTIVITY_KEY_DOWN)
    parts = line.strip().split()
    if not parts:
        return ""
    command, args = parts[0].lower(), parts[1:]

    if command == "q":
        return None
    if command == "o":
        if not args:
            return "Usage: o ID"
        tracker.open_document(" ".join(args), 1)
        return f"Opened {' '.join(args)} on page 1"
    if command in ("n", "p"):
        snapshot = tracker.snapshot()
        if snapshot is None:
            return "No document open."
        page = snapshot.current_page + (1 if command == "n" else -1)
        if page < 1:
            return "Already on the first page."
        tracker.set_current_page(page)
        return f"Page {page}"
    if command == "g":
        try:
            page = int(args[0])
        except (IndexError, ValueError):
            return "Usage: g N"
        if page < 1:
            return f"Invalid page: {page}"
        if tracker.snapshot() is None:
            return "No document open."
        tracker.set_current_page(page)
        return f"Page {page}"
    if command == "t":
        tracker.toggle_pause()
        return f"Tracker {'visible' if tracker.is_open else 'hidden'}, {tracker.status}"
    if command == "s":
        return format_stats(tracker)
    return CLI_HELP


def run_cli(document: Optional[str]) -> None:
    """Interactive terminal session."""
    tracker = ReadingSessionTracker()

    def on_status_change(status: str, text: str) -> None:
        # Idle auto-pause arrives from a timer thread, mid-prompt
        if status == config.STATUS_PAUSED:
            print(f"\n⏸ {text}")

    tracker.on_status_change = on_status_change
    if document:
        tracker.open_document(document, 1)

    print(CLI_HELP)
    try:
        while True:
            try:
                line = input("> ")
            except EOFError:
                break
            output = handle_command(tracker, line)
            if output is None:
                break
            if output:
                print(output)
    except KeyboardInterrupt:
        print()
    finally:
        tracker.dispose()
    print("Goodbye!")


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Folio reading session tracker")
    parser.add_argument("--cli", action="store_true", help="Run in terminal mode")
    parser.add_argument("--document", help="Document to open at start")
    parser.add_argument("--pages", type=int, default=100, help="Page count for the reader window")
    args = parser.parse_args()

    if args.cli:
        run_cli(args.document)
        return

    try:
        from gui.app import FolioApp
    except ImportError as e:
        logger.error(f"GUI unavailable ({e}); use --cli")
        sys.exit(1)

    FolioApp(document=args.document, total_pages=args.pages).run()


if __name__ == "__main__":
    main()
