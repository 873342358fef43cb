"""
Utility modules for the plant monitor backend.
"""

from plant_monitor.utils.validation import (
    validate_servo_position,
    parse_page_param,
    parse_date_bound,
    SERVO_MIN,
    SERVO_MAX,
)

__all__ = [
    "validate_servo_position",
    "parse_page_param",
    "parse_date_bound",
    "SERVO_MIN",
    "SERVO_MAX",
]
