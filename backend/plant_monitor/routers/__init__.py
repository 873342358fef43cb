"""
Routers Package
===============

Routers are like the reception desk - they direct incoming requests
to the right place.
"""

from .data import router as data_router, set_plant_monitor, get_plant_monitor
from .servo import router as servo_router
from .logs import router as logs_router

__all__ = [
    "data_router",
    "servo_router",
    "logs_router",
    "set_plant_monitor",
    "get_plant_monitor",
]
