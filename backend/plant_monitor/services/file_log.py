"""
Daily File Logs
===============

Plain files next to the database, kept for anyone who reads the logs with
`tail -f` or opens the CSV in a spreadsheet.

FILES (inside LOG_DIR):
----------------------
    sensor_data_2024-05-01.log    "<timestamp> - <raw line>" per reading
    servo_control_2024-05-01.log  "<timestamp> - Set servo to position: 90"
    sensors_data.csv              timestamp,moisture,light,water,temperature,humidity

The date in the file name is the UTC date of the entry.
"""

import csv
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Union

from plant_monitor.models import Reading
from plant_monitor.services.line_parser import is_finite_number

logger = logging.getLogger(__name__)


CSV_HEADER = ["timestamp", "moisture", "light", "water", "temperature", "humidity"]


def _csv_value(value) -> str:
    if value is None or not is_finite_number(value):
        return ""
    return str(value)


class FileLogWriter:
    """Appends to the daily text logs and the CSV export."""

    CSV_FILE = "sensors_data.csv"

    def __init__(self, log_dir: Union[str, Path] = "logs"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def _daily_file(self, prefix: str, when: datetime) -> Path:
        day = when.astimezone(timezone.utc).date().isoformat()
        return self.log_dir / f"{prefix}_{day}.log"

    def append_sensor_line(self, reading: Reading) -> Path:
        """Add '<timestamp> - <raw>' to today's sensor log."""
        path = self._daily_file("sensor_data", reading.timestamp)
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{reading.timestamp.isoformat()} - {reading.raw}\n")
        return path

    def append_csv_row(self, reading: Reading) -> Path:
        """Add the numeric values of a reading to the CSV, header first if new."""
        path = self.log_dir / self.CSV_FILE
        is_new = not path.exists()

        with open(path, "a", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            if is_new:
                writer.writerow(CSV_HEADER)
            writer.writerow([
                reading.timestamp.isoformat(),
                _csv_value(reading.moisture),
                _csv_value(reading.light),
                _csv_value(reading.water),
                _csv_value(reading.temperature),
                _csv_value(reading.humidity),
            ])
        return path

    def append_servo_line(self, position, when: datetime) -> Path:
        """Add a 'Set servo to position' line to today's servo log."""
        path = self._daily_file("servo_control", when)
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{when.isoformat()} - Set servo to position: {position}\n")
        return path
