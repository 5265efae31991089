"""Auction enumerations."""

from gavel.core.enums.auction import AuctionStatus, AuctionType, RatingBand, RoundResult
from gavel.core.enums.roles import PlayerRole

__all__ = [
    "AuctionStatus",
    "AuctionType",
    "PlayerRole",
    "RatingBand",
    "RoundResult",
]
