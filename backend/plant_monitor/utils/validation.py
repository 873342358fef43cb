"""
Input Validation Utilities
===========================

Validation and lenient parsing for what the dashboard and device send us.
"""

import math
import re
from datetime import datetime, timezone
from typing import Any, Optional


SERVO_MIN = 0
SERVO_MAX = 180

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def validate_servo_position(value: Any, min_pos: int = SERVO_MIN, max_pos: int = SERVO_MAX) -> bool:
    """
    Validate a servo position from a JSON body.

    Args:
        value: Whatever came in as "position"
        min_pos: Smallest allowed angle
        max_pos: Largest allowed angle

    Returns:
        True if it's a real number (not a bool, not NaN) within range
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return min_pos <= value <= max_pos


def parse_page_param(value: Optional[str], default: int) -> int:
    """
    Read a limit/skip query parameter the forgiving way.

    The leading integer is used ("20abc" -> 20). Missing, non-numeric,
    zero or negative values fall back to `default`, except that 0 is kept
    when the default itself is 0 (skip=0).

    Args:
        value: Raw query string value (or None)
        default: Fallback (100 for limit, 0 for skip)

    Returns:
        A non-negative integer
    """
    if value is None:
        return default
    match = _LEADING_INT.match(value)
    if not match:
        return default
    number = int(match.group(1))
    if number < 0 or (number == 0 and default != 0):
        return default
    return number


def parse_date_bound(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a startDate/endDate query value.

    Accepts ISO-8601 dates ("2024-05-01") and datetimes
    ("2024-05-01T12:00:00Z", "2024-05-01T12:00:00+02:00"). Naive values
    are taken as UTC.

    Returns:
        An aware datetime, or None if value is empty

    Raises:
        ValueError: if the value isn't a date
    """
    if value is None or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
