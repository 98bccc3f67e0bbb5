"""FastAPI application factory and lifespan for the Ambient Weather relay."""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from .config import Settings, load_settings
from .api.router import api_router
from .services.pressure_trend import PressureTrendAnalyzer
from .services.relay import RelayHub
from .upstream.ambient import AmbientWeatherTransport
from .upstream.transport import UpstreamTransport
from .ws.handler import websocket_endpoint

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    # uvicorn only configures its own loggers
    logging.basicConfig(
        level=level.upper(),
        format="%(levelname)s:     %(name)s - %(message)s",
    )


def build_hub(settings: Settings, transport: Optional[UpstreamTransport] = None) -> RelayHub:
    """Wire the relay hub to its upstream transport and trend analyzer."""
    if transport is None:
        transport = AmbientWeatherTransport(settings.endpoint, settings.app_key)
    analyzer = PressureTrendAnalyzer(
        window_hours=settings.trend_window_hours,
        min_samples=settings.trend_min_samples,
        capacity=settings.trend_capacity,
        threshold=settings.trend_threshold,
    )
    return RelayHub(transport, [settings.api_key], analyzer=analyzer)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: start/stop the upstream connection."""
    hub: RelayHub = app.state.hub
    await hub.start()
    logger.info("Relay started")

    yield

    logger.info("Shutting down...")
    try:
        await hub.stop()
    except Exception as exc:
        logger.warning("Upstream shutdown failed: %s", exc)
    logger.info("Application shutdown complete")


def create_app(
    settings: Settings,
    transport: Optional[UpstreamTransport] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Ambient Weather Relay",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.hub = build_hub(settings, transport)
    app.state.subscriber_queue_size = settings.subscriber_queue_size

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes
    app.include_router(api_router)

    # WebSocket
    app.websocket("/ws/live")(websocket_endpoint)

    # Browser assets, mounted last so they don't shadow the routes above
    if settings.public_dir:
        public_dir = Path(settings.public_dir)
        if public_dir.is_dir():
            app.mount("/", StaticFiles(directory=str(public_dir), html=True), name="public")
        else:
            logger.warning("Public directory %s not found, static files disabled", public_dir)

    return app


def main() -> int:
    configure_logging()
    try:
        settings = load_settings()
    except ValidationError as exc:
        invalid = ", ".join(
            "AMBIENT_" + str(err["loc"][0]).upper() for err in exc.errors() if err["loc"]
        )
        logger.error("Invalid configuration (%s). Set AMBIENT_API_KEY and AMBIENT_APP_KEY.", invalid)
        return 1

    logging.getLogger().setLevel(settings.log_level.upper())

    import uvicorn

    app = create_app(settings)
    logger.info("Weather relay listening on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
