"""
Logs API Router
===============

Read-only access to the audit log for the dashboard.

Endpoint:
  GET /logs?type=servo&limit=50&skip=0&startDate=2024-05-01&endDate=2024-05-02

All query parameters are optional. Results are newest first.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from plant_monitor.models import LogRecord
from plant_monitor.routers.data import get_plant_monitor
from plant_monitor.utils.validation import parse_page_param, parse_date_bound

logger = logging.getLogger(__name__)

router = APIRouter(tags=["logs"])


@router.get("/logs", response_model=list[LogRecord])
def get_logs(
    type: Optional[str] = None,
    limit: Optional[str] = None,
    skip: Optional[str] = None,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    monitor=Depends(get_plant_monitor),
):
    """
    Audit log records.

    **Query**
    - type: sensor | servo | system | error (exact match)
    - limit: how many (default 100)
    - skip: how many of the newest to skip (default 0)
    - startDate, endDate: ISO date or datetime, both ends included
    """
    try:
        start = parse_date_bound(start_date)
        end = parse_date_bound(end_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid date: {e}")

    try:
        return monitor.history.logs(
            type=type,
            limit=parse_page_param(limit, default=100),
            skip=parse_page_param(skip, default=0),
            start_date=start,
            end_date=end,
        )
    except Exception as e:
        logger.exception("Error fetching logs")
        return JSONResponse(status_code=500, content={"error": str(e)})
