"""Pydantic schemas for API request/response models."""

from gavel.api.schemas.auction import (
    AdvanceRequest,
    AdvanceResponse,
    AuctionLogResponse,
    AuctionStateSchema,
    AuctionStatsSchema,
    AuctionStatusSchema,
    AuctionTypeSchema,
    AuctionWSMessage,
    AuctionWSMessageType,
    BidRequest,
    CreateAuctionRequest,
    PlayerSchema,
    PoolStatsResponse,
    SessionModeSchema,
    SessionResponse,
    TeamSchema,
)

__all__ = [
    "AdvanceRequest",
    "AdvanceResponse",
    "AuctionLogResponse",
    "AuctionStateSchema",
    "AuctionStatsSchema",
    "AuctionStatusSchema",
    "AuctionTypeSchema",
    "AuctionWSMessage",
    "AuctionWSMessageType",
    "BidRequest",
    "CreateAuctionRequest",
    "PlayerSchema",
    "PoolStatsResponse",
    "SessionModeSchema",
    "SessionResponse",
    "TeamSchema",
]
