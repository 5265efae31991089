"""Core data models."""

from gavel.core.models.auction_state import AuctionState
from gavel.core.models.player import Player
from gavel.core.models.team import MAX_SQUAD_SIZE, Team

__all__ = [
    "AuctionState",
    "MAX_SQUAD_SIZE",
    "Player",
    "Team",
]
