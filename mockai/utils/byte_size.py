"""Human-readable byte size parsing ("10kb", "1.5mb", "512")."""

from __future__ import annotations

import math
import re

_UNITS: dict[str, int] = {
    "b": 1,
    "kb": 1 << 10,
    "mb": 1 << 20,
    "gb": 1 << 30,
    "tb": 1 << 40,
    "pb": 1 << 50,
}

_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(b|kb|mb|gb|tb|pb)?\s*$", re.IGNORECASE)


def parse_byte_size(value: str | int) -> int:
    """Parse a size expression into a number of bytes.

    Plain integers are bytes. Units are binary multiples (1kb == 1024 bytes)
    and case-insensitive. Fractional results are floored.

    Args:
        value: Size as an int or a string such as ``"10kb"``.

    Returns:
        Size in bytes.

    Raises:
        ValueError: If the value is negative or not a recognizable size.
    """

    if isinstance(value, bool):
        raise ValueError(f"invalid byte size: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"byte size must be >= 0, got {value}")
        return value

    match = _SIZE_RE.match(str(value))
    if match is None:
        raise ValueError(f"invalid byte size: {value!r}")

    number, unit = match.groups()
    multiplier = _UNITS[(unit or "b").lower()]
    return math.floor(float(number) * multiplier)
