"""Ambient Weather realtime API: Socket.IO event names and payloads.

The service speaks Socket.IO over a websocket. After connecting, the
client emits "subscribe" with the device API keys; the server answers
with "subscribed" and then pushes one "data" event per device reading.
"""

from typing import Any
from urllib.parse import urlencode

# --- Event constants ---

EVT_CONNECT = "connect"
EVT_DISCONNECT = "disconnect"
EVT_SUBSCRIBE = "subscribe"
EVT_SUBSCRIBED = "subscribed"
EVT_DATA = "data"

API_VERSION = "1"


def build_url(endpoint: str, app_key: str) -> str:
    """Realtime endpoint URL carrying the application key."""
    query = urlencode({"api": API_VERSION, "applicationKey": app_key})
    return f"{endpoint.rstrip('/')}/?{query}"


def subscription_request(api_keys: list[str]) -> dict[str, Any]:
    """Payload of the "subscribe" event."""
    return {"apiKeys": list(api_keys)}
