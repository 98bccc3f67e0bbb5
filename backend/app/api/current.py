"""GET /api/current - Latest enriched snapshot.
   GET /api/status - Upstream link and relay diagnostics.
"""

from fastapi import APIRouter, Request

from ..schemas.current import CurrentResponse, StatusResponse
from ..services.relay import RelayHub

router = APIRouter()


def _hub(request: Request) -> RelayHub:
    return request.app.state.hub


@router.get("/current", response_model=CurrentResponse)
async def get_current(request: Request) -> CurrentResponse:
    hub = _hub(request)
    return CurrentResponse(connected=hub.connected, data=hub.latest_snapshot)


@router.get("/status", response_model=StatusResponse)
async def get_status(request: Request) -> StatusResponse:
    hub = _hub(request)
    return StatusResponse(
        connected=hub.connected,
        subscribers=hub.subscriber_count,
        has_data=hub.latest_snapshot is not None,
        pressure_samples=len(hub.analyzer),
    )
