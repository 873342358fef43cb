"""
Models Package
==============

This is where all our data models live.
Import from here instead of the individual files.

Example:
    from plant_monitor.models import Reading
"""

from .reading import (
    # The current state of the plant
    Reading,

    # What the device and dashboard send us
    SensorDataPayload,
    ServoCommandRequest,

    # What we send back
    StatusResponse,
    ServoCommandResponse,
    ServoCheckResponse,
)
from .log_record import (
    LogRecord,
    SensorLogRecord,
    ServoLogRecord,
    SystemLogRecord,
    ErrorLogRecord,
    SensorLogData,
    ServoLogData,
    SystemLogData,
    ErrorLogData,
    log_record_adapter,
)

__all__ = [
    "Reading",
    "SensorDataPayload",
    "ServoCommandRequest",
    "StatusResponse",
    "ServoCommandResponse",
    "ServoCheckResponse",
    "LogRecord",
    "SensorLogRecord",
    "ServoLogRecord",
    "SystemLogRecord",
    "ErrorLogRecord",
    "SensorLogData",
    "ServoLogData",
    "SystemLogData",
    "ErrorLogData",
    "log_record_adapter",
]
