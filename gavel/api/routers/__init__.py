"""API routers for different resource types."""

from gavel.api.routers.auction import router as auction_router
from gavel.api.routers.auction_websocket import router as auction_websocket_router

__all__ = [
    "auction_router",
    "auction_websocket_router",
]
