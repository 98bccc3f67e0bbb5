"""Snapshot enrichment.

Combines the latest raw upstream reading with the current pressure trend
and compass labels into the dict that is broadcast to subscribers.
"""

from datetime import datetime
from typing import Any, Mapping, Optional

from .pressure_trend import TrendResult
from .wind import compass_direction

# Ambient Weather device data field names
PRESSURE_FIELD = "baromrelin"
WIND_DIR_FIELD = "winddir"
WIND_DIR_AVG_FIELD = "winddir_avg10m"


def build_snapshot(
    raw: Optional[Mapping[str, Any]],
    timestamp: datetime,
    trend: TrendResult,
) -> Optional[dict[str, Any]]:
    """Build a publishable snapshot from a raw reading.

    Raw fields are copied through; timestamp, pressureTrend, windDirection
    and windDirectionAvg are added on top. windDirection is left out when
    the raw bearing is missing or unusable.

    Returns:
        The snapshot dict, or None if no reading has been received yet.
    """
    if raw is None:
        return None

    snapshot = dict(raw)
    snapshot["timestamp"] = timestamp.isoformat()
    snapshot["pressureTrend"] = trend.to_dict()

    direction = compass_direction(raw.get(WIND_DIR_FIELD))
    if direction is not None:
        snapshot["windDirection"] = direction
    else:
        snapshot.pop("windDirection", None)

    avg = raw.get(WIND_DIR_AVG_FIELD)
    snapshot["windDirectionAvg"] = compass_direction(avg) if avg is not None else None

    return snapshot
