"""
Sensor Data API Router
======================

This is where the device drops off its readings and the dashboard picks
them up.

HOW IT WORKS:
------------
1. The device POSTs its status line to /data every few seconds
2. We parse it and make it the current reading (in memory, instantly)
3. We send back "success"
4. AFTER the response, background tasks save it to the database and the
   log files. If those fail the device never hears about it.

ALL ENDPOINTS:
-------------
POST   /data           - Device reports a status line
GET    /data           - Current reading
GET    /data/history   - Stored readings, newest first (limit, skip)
"""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from fastapi.responses import JSONResponse

from plant_monitor.models import Reading, SensorDataPayload, StatusResponse
from plant_monitor.utils.validation import parse_page_param

logger = logging.getLogger(__name__)

router = APIRouter(tags=["data"])


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================
# The PlantMonitor is created at startup and handed to us here

_plant_monitor = None  # This gets set when the app starts


def set_plant_monitor(monitor):
    """
    Called when the app starts to give us the plant monitor.
    """
    global _plant_monitor
    _plant_monitor = monitor


def get_plant_monitor():
    """
    Get the plant monitor for use in endpoints.

    Every endpoint function that needs the monitor uses this.
    """
    if _plant_monitor is None:
        raise HTTPException(status_code=500, detail="Server not fully started yet")
    return _plant_monitor


# =============================================================================
# DEVICE ENDPOINT
# =============================================================================

@router.post("/data", response_model=StatusResponse)
async def receive_sensor_data(
    body: SensorDataPayload,
    background_tasks: BackgroundTasks,
    monitor=Depends(get_plant_monitor),
):
    """
    Device reports its status line.

    **Body (JSON)**
    - data: e.g. "Moisture:512,MOIST,Light:700,BRIGHT,Water:45,MEDIUM,Temp:24.5,Humid:55,Servo:90"

    Answers success as soon as the line is in memory. A bad token in the
    line doesn't fail the request; that field is just null.
    """
    logger.info(f"Received data: {body.data}")

    def report_parse_error(error: Exception):
        background_tasks.add_task(
            monitor.recorder.record_error, "Error parsing sensor data", error
        )

    try:
        reading = monitor.readings.ingest(body.data, on_parse_error=report_parse_error)
    except Exception as e:
        logger.exception("Error processing data request")
        background_tasks.add_task(
            monitor.recorder.record_error, "Error processing data request", e
        )
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": str(e)},
            background=background_tasks,
        )

    # Durable writes happen after the response goes out
    background_tasks.add_task(monitor.recorder.record_reading, reading)

    return StatusResponse(status="success", message="Data received")


# =============================================================================
# DASHBOARD ENDPOINTS
# =============================================================================

@router.get("/data", response_model=Reading)
async def get_current_data(monitor=Depends(get_plant_monitor)):
    """
    The newest reading.

    Before the device has reported anything, every sensor field is null
    and raw is "".
    """
    return monitor.readings.current()


@router.get("/data/history", response_model=list[Reading])
def get_data_history(
    background_tasks: BackgroundTasks,
    limit: Optional[str] = None,
    skip: Optional[str] = None,
    monitor=Depends(get_plant_monitor),
):
    """
    Stored readings, newest first.

    **Query**
    - limit: how many (default 100)
    - skip: how many of the newest to skip (default 0)
    """
    try:
        return monitor.history.history(
            limit=parse_page_param(limit, default=100),
            skip=parse_page_param(skip, default=0),
        )
    except Exception as e:
        logger.exception("Error fetching history")
        background_tasks.add_task(
            monitor.recorder.record_error, "Error fetching sensor history", e
        )
        return JSONResponse(status_code=500, content={"error": str(e)})
