"""Human readable byte sizes.

Units are binary multiples (1KB == 1024 bytes), matching how upload limits
such as ``25MB`` are written in configuration.
"""
import math
import re
from typing import Any, Optional

UNITS = {
    "b": 1,
    "kb": 1 << 10,
    "mb": 1 << 20,
    "gb": 1 << 30,
    "tb": 1 << 40,
    "pb": 1 << 50,
}

_SIZE_RE = re.compile(r"^\s*([-+]?\d+(?:\.\d+)?)\s*(b|kb|mb|gb|tb|pb)?\s*$", re.IGNORECASE)


def parse_size(value: Any) -> Optional[int]:
    """Parse ``value`` into a byte count.

    Integers and floats are taken as bytes. Strings may carry a unit suffix.
    Returns None for anything that cannot be read as a size.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        return int(math.floor(value))
    if not isinstance(value, str):
        return None

    match = _SIZE_RE.match(value)
    if not match:
        return None
    number = float(match.group(1))
    unit = (match.group(2) or "b").lower()
    return int(math.floor(number * UNITS[unit]))


def format_size(value: int, unit: Optional[str] = None) -> str:
    """Format a byte count, e.g. ``26214400`` -> ``"25MB"``.

    Without an explicit unit the largest unit giving a value >= 1 is used.
    """
    if unit is None:
        unit = "b"
        for name, multiple in UNITS.items():
            if abs(value) >= multiple:
                unit = name
    multiple = UNITS[unit.lower()]
    number = round(value / multiple, 2)
    if number == int(number):
        number = int(number)
    return f"{number}{unit.upper()}"
