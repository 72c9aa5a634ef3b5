"""Per-page dwell time recording."""

import logging
from typing import Dict, List, Optional

import config
from tracking.models import DwellRecord, LiveTracker

logger = logging.getLogger(__name__)


class PageDwellRecorder:
    """
    Accumulates how long each page stays on screen.

    History holds one DwellRecord per page, ordered by the page's first
    committed visit. Returning to a page adds to its existing record in
    place. Visits no longer than the skim threshold are dropped so that
    flicking through pages does not pollute the statistics.
    """

    def __init__(self, page: int, now: int, skim_threshold_ms: int = config.SKIM_THRESHOLD_MS):
        """
        Start measuring the given page.

        Args:
            page: Page on screen when the session starts (already validated).
            now: Current time in milliseconds.
            skim_threshold_ms: Visits must last strictly longer than this
                               to be committed.
        """
        self.live = LiveTracker(page=page, reference_time=now)
        self.history: List[DwellRecord] = []
        self.skim_threshold_ms = skim_threshold_ms
        self._records: Dict[int, DwellRecord] = {}

    def change_page(self, new_page: int, now: int, paused: bool) -> Optional[DwellRecord]:
        """
        Handle the reader moving to another page.

        While paused only the page is swapped; the reference time is left
        alone because resume shifts it past the paused interval.

        Args:
            new_page: Page now on screen (already validated).
            now: Current time in milliseconds.
            paused: Whether the session clock is paused.

        Returns:
            The record that received time, or None if nothing was committed.
        """
        if new_page == self.live.page:
            return None

        if paused:
            self.live.page = new_page
            return None

        committed = None
        duration = now - self.live.reference_time
        if duration > self.skim_threshold_ms:
            committed = self._commit(self.live.page, duration)
        else:
            logger.debug(f"Skipped page {self.live.page}: {duration}ms is below skim threshold")

        # Always restart measurement at the page boundary
        self.live = LiveTracker(page=new_page, reference_time=now)
        return committed

    def _commit(self, page: int, duration: int) -> DwellRecord:
        record = self._records.get(page)
        if record is None:
            record = DwellRecord(page=page, duration=duration)
            self._records[page] = record
            self.history.append(record)
        else:
            record.duration += duration
        logger.debug(f"Committed {duration}ms to page {page} (total {record.duration}ms)")
        return record
