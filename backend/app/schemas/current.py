"""Pydantic schemas for the snapshot API responses."""

from typing import Any, Optional

from pydantic import BaseModel


class CurrentResponse(BaseModel):
    connected: bool
    data: Optional[dict[str, Any]] = None


class StatusResponse(BaseModel):
    connected: bool
    subscribers: int
    has_data: bool
    pressure_samples: int
