"""
Log Record Models
=================
Durable audit entries. Every record has a `type` and each type has its
own payload schema:

    sensor -> {"raw": "..."}
    servo  -> {"position": 90}
    system -> free-form details
    error  -> {"errorMessage": "...", "stack": "..."}

LogRecord is a discriminated union, so parsing a stored row gives back the
right class for its type.
"""

from datetime import datetime, timezone
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


# =============================================================================
# PAYLOADS
# =============================================================================

class SensorLogData(BaseModel):
    raw: str


class ServoLogData(BaseModel):
    position: Union[int, float]


class SystemLogData(BaseModel):
    """Anything worth noting about the process (version, port, ...)."""
    model_config = ConfigDict(extra="allow")


class ErrorLogData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error_message: str = Field(..., alias="errorMessage")
    stack: Optional[str] = None


# =============================================================================
# RECORDS
# =============================================================================

class _LogRecordBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = Field(None, description="Assigned by storage")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    message: str


class SensorLogRecord(_LogRecordBase):
    type: Literal["sensor"] = "sensor"
    data: SensorLogData


class ServoLogRecord(_LogRecordBase):
    type: Literal["servo"] = "servo"
    data: ServoLogData


class SystemLogRecord(_LogRecordBase):
    type: Literal["system"] = "system"
    data: SystemLogData = Field(default_factory=SystemLogData)


class ErrorLogRecord(_LogRecordBase):
    type: Literal["error"] = "error"
    data: ErrorLogData


LogRecord = Annotated[
    Union[SensorLogRecord, ServoLogRecord, SystemLogRecord, ErrorLogRecord],
    Field(discriminator="type"),
]

log_record_adapter = TypeAdapter(LogRecord)
