"""Routes API / API routes."""

from fastapi import APIRouter

from diesel_tracker.api import (
    fills,
    exports,
    keepalive,
)

api_router = APIRouter(prefix="/api")

api_router.include_router(fills.router, prefix="/fills", tags=["fills"])
api_router.include_router(exports.router, prefix="/exports", tags=["exports"])
api_router.include_router(keepalive.router, prefix="/keepalive", tags=["keepalive"])
