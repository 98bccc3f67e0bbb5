"""Top-level API router aggregation."""

from fastapi import APIRouter

from . import current

api_router = APIRouter(prefix="/api")

api_router.include_router(current.router)
