"""API services for auction session management."""

from gavel.api.services.auction_service import (
    AuctionService,
    AuctionSessionManager,
    auction_session_manager,
    event_to_payload,
)

__all__ = [
    "AuctionService",
    "AuctionSessionManager",
    "auction_session_manager",
    "event_to_payload",
]
