"""
Reading Models
==============
Pydantic models for the plant monitor's sensor data.

This module defines:
- Reading: one parsed snapshot of the device (what GET /data returns)
- Request models: what the device and the dashboard send us
- Response models: what we send back

WIRE FORMAT:
    The dashboard expects camelCase keys (moistureStatus, lightStatus, ...),
    so every multi-word field carries an alias. Inside Python we use the
    snake_case names.

NOT-A-NUMBER VALUES:
    When a value on the device line can't be parsed (e.g. "Moisture:abc")
    the field holds float('nan'). JSON has no NaN (or inf), so those go out
    as null.
"""

import math
from datetime import datetime, timezone
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer


# An integer, a float (temperature/humidity or the NaN sentinel), or absent
SensorValue = Optional[Union[int, float]]


# =============================================================================
# READING - the current state of the plant
# =============================================================================

class Reading(BaseModel):
    """
    One snapshot of device state.

    A Reading is never edited in place. Every ingest builds a fresh one
    and swaps it in, so a field missing from the newest device line is
    always absent here (no stale values from earlier lines).

    Example (as JSON):
        {
            "timestamp": "2024-05-01T12:00:00+00:00",
            "moisture": 512,
            "moistureStatus": "MOIST",
            "light": 700,
            "lightStatus": "BRIGHT",
            "water": 45,
            "waterStatus": "MEDIUM",
            "temperature": 24.5,
            "humidity": 55.0,
            "servo": 90,
            "raw": "Moisture:512,MOIST,Light:700,BRIGHT,..."
        }
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the server received the report"
    )
    moisture: SensorValue = Field(None, description="Soil moisture (raw ADC)")
    moisture_status: Optional[str] = Field(None, alias="moistureStatus")
    light: SensorValue = Field(None, description="Light level (raw ADC)")
    light_status: Optional[str] = Field(None, alias="lightStatus")
    water: SensorValue = Field(None, description="Water tank level")
    water_status: Optional[str] = Field(None, alias="waterStatus")
    temperature: SensorValue = Field(None, description="Temperature in °C")
    humidity: SensorValue = Field(None, description="Relative humidity %")
    servo: SensorValue = Field(None, description="Last reported servo position")
    raw: str = Field("", description="The device line exactly as received")

    @field_serializer("moisture", "light", "water", "temperature", "humidity", "servo")
    def nan_as_null(self, value: Any) -> Any:
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return value


# =============================================================================
# REQUEST MODELS
# =============================================================================

class SensorDataPayload(BaseModel):
    """
    Body of POST /data, sent by the device.

    Example:
        {"data": "Moisture:512,MOIST,Light:700,BRIGHT,Water:45,MEDIUM,Temp:24.5,Humid:55,Servo:90"}
    """
    data: str = Field(..., description="Raw comma-delimited status line")


class ServoCommandRequest(BaseModel):
    """
    Body of POST /servo, sent by the dashboard.

    `position` is checked by the router, which answers 400 when it isn't
    a number between 0 and 180.
    """
    position: Any = Field(None, description="Target servo angle, 0-180")


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class StatusResponse(BaseModel):
    """Generic {status, message} answer used by the write endpoints."""
    status: str = Field(..., description="'success' or 'error'")
    message: Optional[str] = Field(None, description="Human-readable detail")


class ServoCommandResponse(BaseModel):
    """Answer to POST /servo."""
    status: str = "success"
    message: str = "Servo position request received"
    position: Union[int, float]


class ServoCheckResponse(BaseModel):
    """
    Answer to GET /servo-check.

    status is "success" (with a position) or "no_request" (without one).
    """
    status: str
    position: Optional[Union[int, float]] = None
