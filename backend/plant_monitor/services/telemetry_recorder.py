"""
Telemetry Recorder
==================

Writes everything that happens to the durable sinks (SQLite + files).

These writes are "best effort":
- They run after the HTTP response (as FastAPI background tasks)
- Each sink is tried on its own, so a broken CSV file doesn't stop the
  database write
- A failure is logged and, if the database still works, saved as an
  "error" log record
- Nothing here ever raises to the caller

Nothing is retried. A failed write is logged and dropped.
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Callable, Optional

from plant_monitor.models import (
    Reading,
    SensorLogRecord,
    SensorLogData,
    ServoLogRecord,
    ServoLogData,
    SystemLogRecord,
    SystemLogData,
    ErrorLogRecord,
    ErrorLogData,
)
from plant_monitor.services.history_store import HistoryStore
from plant_monitor.services.file_log import FileLogWriter

logger = logging.getLogger(__name__)


class TelemetryRecorder:
    """
    Fans out each event to every sink, isolating failures.

    HOW TO USE:
    ----------
    recorder = TelemetryRecorder(history_store, file_log)
    recorder.record_reading(reading)
    recorder.record_servo_command(90)
    recorder.record_system("Server started", version="1.0.0")
    recorder.record_error("Something broke", exc)
    """

    def __init__(self, history: HistoryStore, file_log: Optional[FileLogWriter] = None):
        self.history = history
        self.file_log = file_log

    # =========================================================================
    # EVENTS
    # =========================================================================

    def record_reading(self, reading: Reading) -> None:
        """Persist a freshly ingested reading to every sink."""
        self._attempt(
            "Error saving sensor data to database",
            lambda: self.history.append_reading(reading),
        )
        self._attempt(
            "Error saving sensor log",
            lambda: self.history.append_log(SensorLogRecord(
                timestamp=reading.timestamp,
                message="Sensor data received",
                data=SensorLogData(raw=reading.raw),
            )),
        )
        if self.file_log is not None:
            self._attempt(
                "Error writing to file log",
                lambda: self.file_log.append_sensor_line(reading),
            )
            self._attempt(
                "Error writing to CSV file",
                lambda: self.file_log.append_csv_row(reading),
            )
        logger.debug(f"Recorded reading from {reading.timestamp.isoformat()}")

    def record_servo_command(self, position) -> None:
        """Persist a servo request made from the dashboard."""
        now = datetime.now(timezone.utc)
        self._attempt(
            "Error saving servo log",
            lambda: self.history.append_log(ServoLogRecord(
                timestamp=now,
                message=f"Servo position set to {position}",
                data=ServoLogData(position=position),
            )),
        )
        if self.file_log is not None:
            self._attempt(
                "Error writing to servo log file",
                lambda: self.file_log.append_servo_line(position, now),
            )

    def record_system(self, message: str, **details) -> None:
        """Save a system log record (startup, shutdown, maintenance)."""
        self._attempt(
            "Error saving system log",
            lambda: self.history.append_log(SystemLogRecord(
                message=message,
                data=SystemLogData(**details),
            )),
        )

    def record_error(self, message: str, error: BaseException) -> None:
        """Save an error log record. If that fails too, only log it."""
        record = ErrorLogRecord(
            message=message,
            data=ErrorLogData(
                error_message=str(error) or error.__class__.__name__,
                stack="".join(traceback.format_exception(error)),
            ),
        )
        try:
            self.history.append_log(record)
        except Exception as e:
            logger.error(f"Error saving error log ({message}): {e}")

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _attempt(self, failure_message: str, write: Callable[[], object]) -> bool:
        """Run one sink write; on failure log it and record an error entry."""
        try:
            write()
            return True
        except Exception as e:
            logger.error(f"{failure_message}: {e}")
            self.record_error(failure_message, e)
            return False
