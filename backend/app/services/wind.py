"""Wind direction labels."""

import math
from typing import Any, Optional

CARDINAL_DIRECTIONS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]

SECTOR_DEGREES = 360.0 / len(CARDINAL_DIRECTIONS)  # 22.5


def compass_direction(degrees: Any) -> Optional[str]:
    """Label a bearing with its 16-point compass sector.

    Each sector is centred on its label, so N covers [-11.25, 11.25).
    Bearings outside [0, 360) wrap around.

    Returns:
        The label, or None if degrees is not a finite number.
    """
    if degrees is None or isinstance(degrees, bool):
        return None
    try:
        value = float(degrees)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None

    idx = math.floor((value + SECTOR_DEGREES / 2) / SECTOR_DEGREES)
    return CARDINAL_DIRECTIONS[idx % len(CARDINAL_DIRECTIONS)]
