"""Relay hub: one upstream feed, many live subscribers.

Feeds upstream readings through the pressure trend analyzer and snapshot
enricher, and fans snapshots and connection status changes out to every
subscriber. Late joiners get the latest snapshot and status on arrival.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Protocol

from .enricher import PRESSURE_FIELD, build_snapshot
from .pressure_trend import PressureTrendAnalyzer
from ..schemas.ws import EVT_CONNECTION_STATUS, EVT_WEATHER_DATA
from ..upstream.transport import UpstreamTransport

logger = logging.getLogger(__name__)


class Subscriber(Protocol):
    """A downstream connection. send() must not block."""

    def send(self, event: str, data: Any) -> None: ...


def _pressure_value(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        pressure = float(value)
    except (TypeError, ValueError):
        return None
    return pressure if math.isfinite(pressure) else None


class RelayHub:
    """Owns upstream connection state and the subscriber set."""

    def __init__(
        self,
        transport: UpstreamTransport,
        api_keys: list[str],
        analyzer: Optional[PressureTrendAnalyzer] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.transport = transport
        self.api_keys = list(api_keys)
        self.analyzer = analyzer if analyzer is not None else PressureTrendAnalyzer()
        self._clock = clock if clock is not None else (lambda: datetime.now(timezone.utc))
        # Insertion-ordered; broadcasts enumerate subscribers in join order
        self._subscribers: dict[Subscriber, None] = {}
        self._connected = False
        self._raw: Optional[dict[str, Any]] = None
        self._raw_timestamp: Optional[datetime] = None
        self._latest_snapshot: Optional[dict[str, Any]] = None

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def latest_snapshot(self) -> Optional[dict[str, Any]]:
        return self._latest_snapshot

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def status(self) -> dict[str, bool]:
        return {"connected": self._connected}

    # --- Lifecycle ---

    async def start(self) -> None:
        self.transport.set_listener(self)
        await self.transport.start()

    async def stop(self) -> None:
        await self.transport.stop()

    # --- Upstream events ---

    async def on_upstream_connect(self) -> None:
        self._connected = True
        try:
            await self.transport.subscribe(self.api_keys)
        except Exception as exc:
            logger.error("Upstream subscribe failed: %s", exc)
        self._broadcast(EVT_CONNECTION_STATUS, self.status())

    async def on_upstream_disconnect(self) -> None:
        self._connected = False
        self._broadcast(EVT_CONNECTION_STATUS, self.status())

    async def on_upstream_data(self, raw: Mapping[str, Any]) -> None:
        if not isinstance(raw, Mapping):
            logger.warning("Dropping non-mapping upstream payload: %r", type(raw).__name__)
            return

        if PRESSURE_FIELD in raw:
            pressure = _pressure_value(raw[PRESSURE_FIELD])
            if pressure is not None:
                self.analyzer.add_reading(pressure)
            else:
                logger.warning("Ignoring unusable %s value: %r", PRESSURE_FIELD, raw[PRESSURE_FIELD])

        self._raw = dict(raw)
        self._raw_timestamp = self._clock()
        self._latest_snapshot = self.build_snapshot()
        self._broadcast(EVT_WEATHER_DATA, self._latest_snapshot)

    def build_snapshot(self) -> Optional[dict[str, Any]]:
        """Enriched view of the latest raw reading, or None before any data."""
        if self._raw is None:
            return None
        return build_snapshot(self._raw, self._raw_timestamp, self.analyzer.get_trend())

    # --- Subscribers ---

    def add_subscriber(self, subscriber: Subscriber) -> None:
        self._subscribers[subscriber] = None
        logger.info("Subscriber joined. Total: %d", len(self._subscribers))

        # Replay current state so the client need not wait for the next event
        if self._latest_snapshot is not None:
            self._deliver(subscriber, EVT_WEATHER_DATA, self._latest_snapshot)
        self._deliver(subscriber, EVT_CONNECTION_STATUS, self.status())

    def remove_subscriber(self, subscriber: Subscriber) -> None:
        if subscriber in self._subscribers:
            del self._subscribers[subscriber]
            logger.info("Subscriber left. Total: %d", len(self._subscribers))

    def _broadcast(self, event: str, data: Any) -> None:
        # Iterate a copy: a failed delivery removes its subscriber
        for subscriber in list(self._subscribers):
            self._deliver(subscriber, event, data)

    def _deliver(self, subscriber: Subscriber, event: str, data: Any) -> None:
        try:
            subscriber.send(event, data)
        except Exception as exc:
            logger.warning("Dropping subscriber after failed %s delivery: %s", event, exc)
            self.remove_subscriber(subscriber)
