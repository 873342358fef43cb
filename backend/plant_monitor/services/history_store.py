"""
History Store
=============

The durable log: every reading the device ever sent, plus the audit log
(sensor / servo / system / error records).

This is the system of record. The in-memory reading and the servo mailbox
are lost on restart; this SQLite file isn't.

TABLES:
------
    readings  - one row per ingested Reading
    logs      - one row per LogRecord, payload stored as JSON text

Timestamps are stored as UTC ISO-8601 strings with a fixed layout, so
ordering and range checks can compare them as text.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from plant_monitor.models import LogRecord, Reading, log_record_adapter
from plant_monitor.services.line_parser import is_finite_number

logger = logging.getLogger(__name__)


READING_COLUMNS = (
    "timestamp",
    "moisture",
    "moisture_status",
    "light",
    "light_status",
    "water",
    "water_status",
    "temperature",
    "humidity",
    "servo",
    "raw",
)


def to_db_timestamp(value: datetime) -> str:
    """UTC ISO string with microseconds. Naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


SQLITE_INT_MIN = -(2 ** 63)
SQLITE_INT_MAX = 2 ** 63 - 1


def _db_number(value):
    # NaN and inf are stored as NULL; ints past 64 bits go in as REAL
    if not is_finite_number(value):
        return None
    if isinstance(value, int) and not SQLITE_INT_MIN <= value <= SQLITE_INT_MAX:
        return float(value)
    return value


class HistoryStore:
    """SQLite-backed reading history and audit log."""

    DEFAULT_LIMIT = 100

    def __init__(self, db_path: Union[str, Path] = "data/plant_monitor.db"):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @contextmanager
    def _get_connection(self):
        """Context manager for database connections."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self):
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS readings (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    moisture REAL,
                    moisture_status TEXT,
                    light REAL,
                    light_status TEXT,
                    water REAL,
                    water_status TEXT,
                    temperature REAL,
                    humidity REAL,
                    servo REAL,
                    raw TEXT NOT NULL
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_readings_timestamp
                ON readings(timestamp)
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    type TEXT NOT NULL,
                    message TEXT NOT NULL,
                    data TEXT
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_logs_type_timestamp
                ON logs(type, timestamp)
            """)

    # =========================================================================
    # WRITES
    # =========================================================================

    def append_reading(self, reading: Reading) -> int:
        """Store a reading. Returns the new row id."""
        values = (
            to_db_timestamp(reading.timestamp),
            _db_number(reading.moisture),
            reading.moisture_status,
            _db_number(reading.light),
            reading.light_status,
            _db_number(reading.water),
            reading.water_status,
            _db_number(reading.temperature),
            _db_number(reading.humidity),
            _db_number(reading.servo),
            reading.raw,
        )
        placeholders = ", ".join("?" for _ in READING_COLUMNS)

        with self._get_connection() as conn:
            cursor = conn.execute(
                f"INSERT INTO readings ({', '.join(READING_COLUMNS)}) VALUES ({placeholders})",
                values,
            )
            return cursor.lastrowid

    def append_log(self, record: LogRecord) -> int:
        """Store a log record. Returns the new row id."""
        payload = record.data.model_dump(mode="json", by_alias=True)

        with self._get_connection() as conn:
            cursor = conn.execute(
                "INSERT INTO logs (timestamp, type, message, data) VALUES (?, ?, ?, ?)",
                (
                    to_db_timestamp(record.timestamp),
                    record.type,
                    record.message,
                    json.dumps(payload),
                ),
            )
            return cursor.lastrowid

    def prune(self, before: datetime) -> tuple[int, int]:
        """
        Delete readings and log records older than `before`.

        Returns (readings_deleted, logs_deleted).
        """
        cutoff = to_db_timestamp(before)
        with self._get_connection() as conn:
            readings_deleted = conn.execute(
                "DELETE FROM readings WHERE timestamp < ?", (cutoff,)
            ).rowcount
            logs_deleted = conn.execute(
                "DELETE FROM logs WHERE timestamp < ?", (cutoff,)
            ).rowcount
        return readings_deleted, logs_deleted

    # =========================================================================
    # QUERIES (read-only)
    # =========================================================================

    def history(self, limit: int = DEFAULT_LIMIT, skip: int = 0) -> list[Reading]:
        """Stored readings, newest first."""
        with self._get_connection() as conn:
            rows = conn.execute(
                f"""
                SELECT {', '.join(READING_COLUMNS)} FROM readings
                ORDER BY timestamp DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (limit, skip),
            ).fetchall()

        return [self._row_to_reading(row) for row in rows]

    def logs(
        self,
        type: Optional[str] = None,
        limit: int = DEFAULT_LIMIT,
        skip: int = 0,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[LogRecord]:
        """
        Stored log records, newest first.

        Args:
            type: only records of exactly this type
            start_date: only records at or after this instant
            end_date: only records at or before this instant
        """
        clauses = []
        params: list = []

        if type:
            clauses.append("type = ?")
            params.append(type)
        if start_date is not None:
            clauses.append("timestamp >= ?")
            params.append(to_db_timestamp(start_date))
        if end_date is not None:
            clauses.append("timestamp <= ?")
            params.append(to_db_timestamp(end_date))

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.extend([limit, skip])

        with self._get_connection() as conn:
            rows = conn.execute(
                f"""
                SELECT id, timestamp, type, message, data FROM logs
                {where}
                ORDER BY timestamp DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                params,
            ).fetchall()

        records = []
        for row in rows:
            try:
                records.append(self._row_to_log(row))
            except (ValueError, TypeError) as e:
                logger.error(f"Skipping unreadable log record {row['id']}: {e}")
        return records

    @staticmethod
    def _row_to_reading(row: sqlite3.Row) -> Reading:
        values = dict(row)
        for field in ("moisture", "light", "water", "servo"):
            # Integer sensors come back from REAL columns as floats
            if isinstance(values[field], float) and values[field].is_integer():
                values[field] = int(values[field])
        return Reading(**values)

    @staticmethod
    def _row_to_log(row: sqlite3.Row) -> LogRecord:
        return log_record_adapter.validate_python({
            "id": row["id"],
            "timestamp": row["timestamp"],
            "type": row["type"],
            "message": row["message"],
            "data": json.loads(row["data"]) if row["data"] else {},
        })
