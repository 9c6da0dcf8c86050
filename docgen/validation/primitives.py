"""Type predicates shared by the field validators."""
import math
from collections.abc import Mapping
from typing import Any


def is_integer(x: Any) -> bool:
    """True when ``x`` reads as a finite number without a fractional part.

    Numeric strings count ("12", "3.0"); booleans do not.
    """
    if isinstance(x, bool):
        return False
    try:
        num = float(x)
    except (TypeError, ValueError):
        return False
    return math.isfinite(num) and num % 1 == 0


def is_string(x: Any) -> bool:
    return isinstance(x, str)


def is_non_empty_string(x: Any) -> bool:
    return is_string(x) and x.strip() != ""


def is_plain_object(x: Any) -> bool:
    return isinstance(x, Mapping)


def is_provided(x: Any) -> bool:
    """Whether an optional field counts as supplied.

    None, False, "" and numeric zero are treated as not supplied. Containers
    are always supplied, even when empty.
    """
    if x is None or x is False:
        return False
    if isinstance(x, str):
        return x != ""
    if isinstance(x, (int, float)):
        return x != 0 and not (isinstance(x, float) and math.isnan(x))
    return True
