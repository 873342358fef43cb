"""
Line Parser
===========

Turns the device's status line into reading fields.

THE LINE FORMAT:
---------------
    Moisture:512,MOIST,Light:700,BRIGHT,Water:45,MEDIUM,Temp:24.5,Humid:55,Servo:90

It's a comma-separated list of tokens. A token is either:
- Key:Value  (Moisture, Light, Water, Servo are integers; Temp, Humid are floats)
- a bare word (a status like DRY or BRIGHT)

A status word belongs to Moisture/Light/Water only when it comes RIGHT
AFTER that key's token. "DRY,Moisture:10" does not give moisture a status.

WHAT HAPPENS WITH BAD INPUT:
---------------------------
- Unknown keys and stray words are skipped
- A value that isn't a number becomes float('nan'), parsing keeps going
- A key that shows up twice: the last one wins
- A key that isn't there: the field is simply missing from the result

Numbers are read leniently: leading whitespace is skipped and the longest
numeric prefix is used, so "512abc" is 512 and "24.5C" is 24.5.
"""

import logging
import math
import re
from typing import Iterator, Optional, Union

logger = logging.getLogger(__name__)


NAN = float("nan")

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_int(value: str) -> Union[int, float]:
    """
    Leading integer of `value`, or NaN if there isn't one.

    Digit strings too long for int() come back as a float (inf when huge).
    """
    match = _INT_PREFIX.match(value)
    if not match:
        return NAN
    digits = match.group(1)
    try:
        return int(digits)
    except ValueError:
        return float(digits)


def parse_float(value: str) -> float:
    """Leading decimal number of `value`, or NaN if there isn't one."""
    match = _FLOAT_PREFIX.match(value)
    return float(match.group(1)) if match else NAN


# key on the line -> (field name, value parser, status field or None)
FIELD_SPECS = {
    "Moisture": ("moisture", parse_int, "moisture_status"),
    "Light": ("light", parse_int, "light_status"),
    "Water": ("water", parse_int, "water_status"),
    "Temp": ("temperature", parse_float, None),
    "Humid": ("humidity", parse_float, None),
    "Servo": ("servo", parse_int, None),
}


def iter_fields(raw: str) -> Iterator[tuple[str, Union[int, float, str]]]:
    """
    Yield (field_name, value) pairs in the order they appear on the line.

    A field can be yielded more than once; whoever collects them should let
    later values overwrite earlier ones.
    """
    parts = raw.split(",")

    for i, token in enumerate(parts):
        part = token.strip()
        if ":" not in part:
            continue

        pieces = part.split(":")
        key, value = pieces[0], pieces[1]

        spec = FIELD_SPECS.get(key)
        if spec is None:
            continue

        field, parser, status_field = spec
        yield field, parser(value)

        # Status must be the very next token, and must not be a Key:Value
        if status_field and i + 1 < len(parts) and ":" not in parts[i + 1]:
            yield status_field, parts[i + 1].strip()


def parse_line(raw: str) -> dict:
    """
    Parse one status line into a dict of reading fields.

    Only fields present on the line are in the result.

    Example:
        >>> parse_line("Temp:25.0,Humid:60.0")
        {'temperature': 25.0, 'humidity': 60.0}
    """
    return dict(iter_fields(raw))


def parse_line_safely(raw: str) -> tuple[dict, Optional[Exception]]:
    """
    Like parse_line, but never raises.

    Returns the fields that were extracted and the exception that stopped
    parsing (None if the whole line was read). Callers use the partial
    fields and report the error.
    """
    fields: dict = {}
    try:
        for field, value in iter_fields(raw):
            fields[field] = value
    except Exception as e:
        logger.warning(f"Sensor line parsing stopped early: {e!r} (line={raw[:200]!r})")
        return fields, e
    return fields, None


def is_finite_number(value) -> bool:
    """False for NaN and infinities, which JSON and SQLite can't hold."""
    return not isinstance(value, float) or math.isfinite(value)
