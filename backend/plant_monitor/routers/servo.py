"""
Servo Control API Router
========================

The dashboard can't talk to the device directly; the device only ever
calls us. So servo control works like a mailbox:

    [Dashboard] --POST /servo {position: 90}--> [Mailbox]
    [Device]    --GET /servo-check-----------> [Mailbox] -> {position: 90}, then empty

Endpoints:
  POST /servo        - Dashboard asks for a new position (0-180)
  GET  /servo-check  - Device picks up the pending position, if any
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from fastapi.responses import JSONResponse

from plant_monitor.models import ServoCommandRequest, ServoCommandResponse, ServoCheckResponse
from plant_monitor.routers.data import get_plant_monitor
from plant_monitor.utils.validation import validate_servo_position, SERVO_MIN, SERVO_MAX

logger = logging.getLogger(__name__)

router = APIRouter(tags=["servo"])


@router.post("/servo", response_model=ServoCommandResponse)
async def set_servo_position(
    body: ServoCommandRequest,
    background_tasks: BackgroundTasks,
    monitor=Depends(get_plant_monitor),
):
    """
    Queue a servo position for the device.

    **Body (JSON)**
    - position (required): a number from 0 to 180

    Replaces any position the device hasn't picked up yet.
    """
    if not validate_servo_position(body.position):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid position. Must be a number between {SERVO_MIN} and {SERVO_MAX}.",
        )

    position = body.position
    logger.info(f"Setting servo position to: {position}")

    try:
        monitor.mailbox.set_pending(position)
    except Exception as e:
        logger.exception("Error processing servo request")
        background_tasks.add_task(
            monitor.recorder.record_error, "Error processing servo request", e
        )
        return JSONResponse(status_code=500, content={"status": "error", "message": str(e)})

    background_tasks.add_task(monitor.recorder.record_servo_command, position)

    return ServoCommandResponse(position=position)


@router.get(
    "/servo-check",
    response_model=ServoCheckResponse,
    response_model_exclude_none=True,
)
async def check_servo_request(monitor=Depends(get_plant_monitor)):
    """
    Device asks "is there a position for me?"

    - {"status": "success", "position": 90}: move there (the request is now cleared)
    - {"status": "no_request"}: nothing to do
    """
    position = monitor.mailbox.poll_and_clear()
    if position is None:
        return ServoCheckResponse(status="no_request")

    logger.info(f"Delivered servo position {position} to device")
    return ServoCheckResponse(status="success", position=position)
