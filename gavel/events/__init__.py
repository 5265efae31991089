"""Event system for the auction."""

from gavel.events.bus import EventBus
from gavel.events.types import (
    AuctionErrorEvent,
    AuctionEvent,
    BidPlacedEvent,
    PlayerSetEvent,
    PlayerSkippedEvent,
    PlayerSoldEvent,
    PlayerUnsoldEvent,
    RoundEndedEvent,
    RunCompleteEvent,
    RunStartedEvent,
    StateChangedEvent,
    TimerExpiredEvent,
    TimerTickEvent,
)

__all__ = [
    "AuctionErrorEvent",
    "AuctionEvent",
    "BidPlacedEvent",
    "EventBus",
    "PlayerSetEvent",
    "PlayerSkippedEvent",
    "PlayerSoldEvent",
    "PlayerUnsoldEvent",
    "RoundEndedEvent",
    "RunCompleteEvent",
    "RunStartedEvent",
    "StateChangedEvent",
    "TimerExpiredEvent",
    "TimerTickEvent",
]
