"""
Plant Monitor
=============

This is the BRAIN of the whole operation!

WHAT IT DOES:
------------
1. Owns the current reading (ReadingStore)
2. Owns the servo mailbox (CommandMailbox)
3. Owns the durable log (HistoryStore + FileLogWriter) and the recorder
   that writes to them
4. Runs the retention job that trims old history (if enabled)

LIFECYCLE:
---------
Created once when the server starts and handed to the routers. Nothing in
memory survives a restart, and that's fine: the database is the record of
history, the current reading comes back with the next device report.
"""

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Union

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from plant_monitor.services.command_mailbox import CommandMailbox
from plant_monitor.services.file_log import FileLogWriter
from plant_monitor.services.history_store import HistoryStore
from plant_monitor.services.reading_store import ReadingStore
from plant_monitor.services.telemetry_recorder import TelemetryRecorder

logger = logging.getLogger(__name__)


class PlantMonitor:
    """
    The central object the routers talk to.

    HOW TO USE:
    ----------
    monitor = PlantMonitor(db_path="data/plant_monitor.db", log_dir="logs")
    monitor.start()        # inside the running event loop
    monitor.readings.ingest("Moisture:512,MOIST")
    await monitor.shutdown()
    """

    RETENTION_JOB_ID = "prune_history"

    def __init__(
        self,
        db_path: Union[str, Path] = "data/plant_monitor.db",
        log_dir: Optional[Union[str, Path]] = "logs",
        retention_days: int = 0,
        retention_check_hours: int = 24,
    ):
        """
        Set up the monitor.

        Args:
            db_path: SQLite file for readings and log records
            log_dir: Folder for the daily text logs and CSV (None = no files)
            retention_days: Delete history older than this. 0 keeps everything.
            retention_check_hours: How often the retention job runs
        """
        self.readings = ReadingStore()
        self.mailbox = CommandMailbox()
        self.history = HistoryStore(db_path)
        self.file_log = FileLogWriter(log_dir) if log_dir else None
        self.recorder = TelemetryRecorder(self.history, self.file_log)

        self.retention_days = retention_days
        self.retention_check_hours = retention_check_hours

        # Started by start(); AsyncIOScheduler needs the running loop
        self.scheduler = AsyncIOScheduler()

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self):
        """Start background jobs. Call from inside the event loop."""
        if self.retention_days > 0:
            self.scheduler.add_job(
                self.prune_history,
                trigger=IntervalTrigger(hours=self.retention_check_hours),
                id=self.RETENTION_JOB_ID,
                replace_existing=True,
            )
            logger.info(
                f"History retention: {self.retention_days} days "
                f"(checked every {self.retention_check_hours}h)"
            )
        self.scheduler.start()

    async def shutdown(self):
        """Stop background jobs."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)

    # =========================================================================
    # MAINTENANCE
    # =========================================================================

    def prune_history(self) -> tuple[int, int]:
        """Delete readings and log records older than the retention window."""
        cutoff = datetime.now(timezone.utc) - timedelta(days=self.retention_days)
        try:
            readings_deleted, logs_deleted = self.history.prune(cutoff)
        except Exception as e:
            logger.error(f"History pruning failed: {e}", exc_info=True)
            self.recorder.record_error("Error pruning history", e)
            return 0, 0

        logger.info(
            f"Pruned {readings_deleted} readings and {logs_deleted} log records "
            f"older than {cutoff.isoformat()}"
        )
        if readings_deleted or logs_deleted:
            self.recorder.record_system(
                "History pruned",
                readings_deleted=readings_deleted,
                logs_deleted=logs_deleted,
                cutoff=cutoff.isoformat(),
            )
        return readings_deleted, logs_deleted
