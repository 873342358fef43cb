"""
Reading Store
=============

Holds the single most recent Reading.

Every ingest REPLACES the reading. Nothing carries over from the previous
line: if the new line has no Water key, water and waterStatus are gone.

The swap happens under a lock so nobody can see a reading that is half
old and half new.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from plant_monitor.models import Reading
from plant_monitor.services.line_parser import parse_line_safely

logger = logging.getLogger(__name__)


class ReadingStore:
    """
    In-memory home of the current Reading.

    HOW TO USE:
    ----------
    store = ReadingStore()
    reading = store.ingest("Moisture:512,MOIST,Temp:24.5")
    store.current()  # same reading
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._current = Reading()

    def current(self) -> Reading:
        """The newest reading (an empty one before the first ingest)."""
        with self._lock:
            return self._current

    def ingest(
        self,
        raw: str,
        on_parse_error: Optional[Callable[[Exception], None]] = None,
    ) -> Reading:
        """
        Parse a device line and make it the current reading.

        `timestamp` is always the receipt time and `raw` is always the line,
        even when parsing fails. If parsing is interrupted, the fields found
        before the failure are kept and `on_parse_error` is called with the
        exception.
        """
        with self._lock:
            received_at = datetime.now(timezone.utc)
            fields, error = parse_line_safely(raw)

            self._current = Reading(timestamp=received_at, raw=raw, **fields)
            reading = self._current

        if error is not None:
            logger.error(f"Error parsing sensor data: {error}")
            if on_parse_error is not None:
                on_parse_error(error)

        return reading
