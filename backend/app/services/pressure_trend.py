"""Barometric pressure trend analysis.

Keeps a bounded, time-windowed history of pressure samples and classifies
the trend as rising/falling/steady from a least-squares fit over the window.
"""

import enum
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

# Slope threshold for trend classification (pressure units per hour)
TREND_THRESHOLD = 0.02

# Time window for trend analysis
TREND_WINDOW_HOURS = 3

# Minimum samples inside the window before a trend is reported
TREND_MIN_SAMPLES = 6

# Maximum number of samples retained
HISTORY_CAPACITY = 500


class TrendClassification(str, enum.Enum):
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
    STEADY = "STEADY"
    RISING = "RISING"
    FALLING = "FALLING"


@dataclass(frozen=True)
class Reading:
    """A single timestamped pressure sample."""
    timestamp: datetime
    pressure: float


@dataclass(frozen=True)
class TrendResult:
    """Result of pressure trend analysis."""
    classification: TrendClassification
    change_rate: float  # Pressure change per hour over the window

    def to_dict(self) -> dict:
        return {"trend": self.classification.value, "changeRate": self.change_rate}


INSUFFICIENT = TrendResult(TrendClassification.INSUFFICIENT_DATA, 0.0)


def classify_slope(slope: float, threshold: float = TREND_THRESHOLD) -> TrendClassification:
    """Map a pressure slope to a trend; the threshold itself is not steady."""
    if abs(slope) < threshold:
        return TrendClassification.STEADY
    if slope > 0:
        return TrendClassification.RISING
    return TrendClassification.FALLING


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PressureTrendAnalyzer:
    """Rolling pressure history with on-demand trend classification."""

    def __init__(
        self,
        window_hours: float = TREND_WINDOW_HOURS,
        min_samples: int = TREND_MIN_SAMPLES,
        capacity: int = HISTORY_CAPACITY,
        threshold: float = TREND_THRESHOLD,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.window_hours = window_hours
        self.min_samples = min_samples
        self.capacity = capacity
        self.threshold = threshold
        self._clock = clock
        self._history: deque[Reading] = deque()

    def __len__(self) -> int:
        return len(self._history)

    @property
    def readings(self) -> tuple[Reading, ...]:
        return tuple(self._history)

    def add_reading(self, pressure: float, timestamp: Optional[datetime] = None) -> None:
        """Append a sample, evicting the oldest one once over capacity."""
        self._history.append(Reading(timestamp or self._clock(), float(pressure)))
        if len(self._history) > self.capacity:
            self._history.popleft()

    def get_trend(self) -> TrendResult:
        """Prune stale samples and classify the trend over the window.

        Returns:
            TrendResult; INSUFFICIENT_DATA with a zero rate when fewer than
            min_samples remain inside the window.
        """
        cutoff = self._clock() - timedelta(hours=self.window_hours)
        self._history = deque(r for r in self._history if r.timestamp >= cutoff)

        if len(self._history) < self.min_samples:
            return INSUFFICIENT

        slope = self._slope(cutoff)
        if slope is None:
            # All samples share one timestamp, regression is undefined
            return TrendResult(TrendClassification.STEADY, 0.0)

        return TrendResult(classify_slope(slope, self.threshold), slope)

    def _slope(self, cutoff: datetime) -> Optional[float]:
        """Ordinary least-squares slope of pressure against hours since cutoff."""
        xs = [(r.timestamp - cutoff).total_seconds() / 3600.0 for r in self._history]
        ys = [r.pressure for r in self._history]
        if len(set(xs)) < 2:
            return None

        n = len(xs)
        sum_x = sum(xs)
        sum_y = sum(ys)
        sum_xy = sum(x * y for x, y in zip(xs, ys))
        sum_xx = sum(x * x for x in xs)

        denominator = n * sum_xx - sum_x * sum_x
        if denominator == 0:
            return None
        return (n * sum_xy - sum_x * sum_y) / denominator
