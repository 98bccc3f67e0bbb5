"""WebSocket endpoint for live weather data.

Each browser connection is registered with the relay hub as a subscriber.
The hub only enqueues; a per-connection pump task does the actual writes,
so a slow browser never holds up the broadcast to the others.
"""

import asyncio
import json
import logging
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

from ..schemas.ws import WSMessage
from ..services.relay import RelayHub

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 32


class SubscriberClosed(Exception):
    """Raised when sending to a subscriber whose connection has gone."""


class WebSocketSubscriber:
    """Bounded outbox in front of one browser WebSocket."""

    def __init__(self, websocket: WebSocket, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        self.websocket = websocket
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=queue_size)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def send(self, event: str, data: Any) -> None:
        if self._closed:
            raise SubscriberClosed("WebSocket already closed")
        message = WSMessage(type=event, data=data).model_dump(mode="json")
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            # Latest state wins: drop the oldest queued message
            self._queue.get_nowait()
            self._queue.put_nowait(message)

    def close(self) -> None:
        self._closed = True

    async def pump(self) -> None:
        """Write queued messages to the socket until closed or cancelled."""
        try:
            while True:
                message = await self._queue.get()
                await self.websocket.send_json(message)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.debug("WebSocket send failed: %s", exc)
            self._closed = True


async def websocket_endpoint(websocket: WebSocket) -> None:
    """Handle a browser WebSocket for live data streaming."""
    hub: RelayHub = websocket.app.state.hub
    queue_size = getattr(websocket.app.state, "subscriber_queue_size", DEFAULT_QUEUE_SIZE)

    await websocket.accept()
    subscriber = WebSocketSubscriber(websocket, queue_size=queue_size)
    pump_task = asyncio.create_task(subscriber.pump())
    hub.add_subscriber(subscriber)

    try:
        while True:
            data = await websocket.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                continue
            if isinstance(msg, dict) and msg.get("type") == "ping":
                subscriber.send("pong", None)
    except (WebSocketDisconnect, ConnectionResetError, OSError, SubscriberClosed):
        pass
    except Exception:
        logger.debug("WebSocket closed unexpectedly", exc_info=True)
    finally:
        subscriber.close()
        hub.remove_subscriber(subscriber)
        pump_task.cancel()
        try:
            await pump_task
        except asyncio.CancelledError:
            pass
