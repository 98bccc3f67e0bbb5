"""Upstream transport interface.

The relay hub depends only on these protocols, so the real Socket.IO
connector and the fakes used in tests are interchangeable.
"""

from typing import Any, Mapping, Protocol


class UpstreamListener(Protocol):
    """Receives upstream lifecycle and reading events."""

    async def on_upstream_connect(self) -> None: ...

    async def on_upstream_disconnect(self) -> None: ...

    async def on_upstream_data(self, raw: Mapping[str, Any]) -> None: ...


class UpstreamTransport(Protocol):
    """A single upstream telemetry connection.

    Implementations own reconnection and backoff; listeners only see
    connect/disconnect transitions.
    """

    def set_listener(self, listener: UpstreamListener) -> None: ...

    async def start(self) -> None: ...

    async def stop(self) -> None: ...

    async def subscribe(self, api_keys: list[str]) -> None: ...
