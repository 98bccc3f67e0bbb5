"""Pydantic schemas for WebSocket messages."""

from pydantic import BaseModel
from typing import Any

EVT_WEATHER_DATA = "weatherData"
EVT_CONNECTION_STATUS = "connectionStatus"


class WSMessage(BaseModel):
    type: str
    data: Any = None
