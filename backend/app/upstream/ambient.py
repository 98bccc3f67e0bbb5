"""Socket.IO connector for the Ambient Weather realtime API.

Owns the one upstream connection. The initial connect is retried here with
capped exponential backoff; once established, python-socketio's built-in
reconnection takes over.
"""

import asyncio
import logging
from typing import Any, Optional

import socketio
from socketio.exceptions import ConnectionError as SocketIOConnectionError

from .protocol import (
    EVT_CONNECT,
    EVT_DATA,
    EVT_DISCONNECT,
    EVT_SUBSCRIBE,
    EVT_SUBSCRIBED,
    build_url,
    subscription_request,
)
from .transport import UpstreamListener

logger = logging.getLogger(__name__)

INITIAL_BACKOFF_SEC = 1.0
MAX_BACKOFF_SEC = 60.0


class AmbientWeatherTransport:
    """UpstreamTransport over socketio.AsyncClient."""

    def __init__(self, endpoint: str, app_key: str):
        self.url = build_url(endpoint, app_key)
        self._listener: Optional[UpstreamListener] = None
        self._connect_task: asyncio.Task | None = None
        self._sio = socketio.AsyncClient(
            reconnection=True,
            reconnection_attempts=0,  # retry forever
            reconnection_delay=1,
            reconnection_delay_max=30,
        )
        self._sio.on(EVT_CONNECT, self._handle_connect)
        self._sio.on(EVT_DISCONNECT, self._handle_disconnect)
        self._sio.on(EVT_SUBSCRIBED, self._handle_subscribed)
        self._sio.on(EVT_DATA, self._handle_data)

    def set_listener(self, listener: UpstreamListener) -> None:
        self._listener = listener

    async def start(self) -> None:
        """Connect in the background so the web server starts immediately."""
        if self._connect_task and not self._connect_task.done():
            return
        self._connect_task = asyncio.create_task(self._connect_loop())

    async def stop(self) -> None:
        if self._connect_task:
            self._connect_task.cancel()
            try:
                await self._connect_task
            except asyncio.CancelledError:
                pass
            self._connect_task = None
        # shutdown() also aborts a reconnection in progress; disconnect() does not
        await self._sio.shutdown()
        logger.info("Upstream connection closed")

    async def subscribe(self, api_keys: list[str]) -> None:
        await self._sio.emit(EVT_SUBSCRIBE, subscription_request(api_keys))
        logger.info("Subscribed to %d device(s)", len(api_keys))

    async def _connect_loop(self) -> None:
        backoff = INITIAL_BACKOFF_SEC
        while True:
            try:
                logger.info("Connecting to Ambient Weather realtime API")
                await self._sio.connect(self.url, transports=["websocket"])
                return
            except SocketIOConnectionError as exc:
                logger.warning(
                    "Upstream connect failed (%s), retrying in %.0fs", exc, backoff,
                )
            except Exception as exc:
                logger.error(
                    "Upstream connect error: %s, retrying in %.0fs", exc, backoff,
                    exc_info=True,
                )
            await asyncio.sleep(backoff)
            backoff = min(backoff * 2, MAX_BACKOFF_SEC)

    # --- Socket.IO handlers ---

    async def _handle_connect(self) -> None:
        logger.info("Connected to Ambient Weather")
        if self._listener is None:
            return
        try:
            await self._listener.on_upstream_connect()
        except Exception:
            logger.error("Upstream connect handler failed", exc_info=True)

    async def _handle_disconnect(self, *args: Any) -> None:
        # Newer python-socketio releases pass a disconnect reason
        logger.info("Disconnected from Ambient Weather")
        if self._listener is None:
            return
        try:
            await self._listener.on_upstream_disconnect()
        except Exception:
            logger.error("Upstream disconnect handler failed", exc_info=True)

    async def _handle_subscribed(self, data: Any) -> None:
        devices = data.get("devices", []) if isinstance(data, dict) else []
        logger.info("Upstream subscription acknowledged (%d device(s))", len(devices))

    async def _handle_data(self, data: Any) -> None:
        if self._listener is None:
            return
        try:
            await self._listener.on_upstream_data(data)
        except Exception:
            logger.error("Upstream data handler failed", exc_info=True)
