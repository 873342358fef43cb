"""
Services Package
================

These are the "workers" that do the actual work.

- line_parser: Turns the device's status line into fields
- ReadingStore: Holds the current reading
- CommandMailbox: Holds the one pending servo command
- HistoryStore: SQLite history of readings and log records
- FileLogWriter: Daily text logs and the CSV export
- TelemetryRecorder: Writes events to all of the above, best effort
- PlantMonitor: The boss that owns everything
"""

from .line_parser import parse_line, parse_line_safely
from .reading_store import ReadingStore
from .command_mailbox import CommandMailbox
from .history_store import HistoryStore
from .file_log import FileLogWriter
from .telemetry_recorder import TelemetryRecorder
from .plant_monitor import PlantMonitor

__all__ = [
    "parse_line",
    "parse_line_safely",
    "ReadingStore",
    "CommandMailbox",
    "HistoryStore",
    "FileLogWriter",
    "TelemetryRecorder",
    "PlantMonitor",
]
