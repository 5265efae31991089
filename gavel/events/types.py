"""Event types for the auction."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from gavel.core.enums import RoundResult
from gavel.core.models import AuctionState, Player, Team

if TYPE_CHECKING:
    from gavel.core.auction.sequencer import AuctionStats


@dataclass(frozen=True)
class AuctionEvent:
    """Base class for all auction events."""

    state: AuctionState = field(default_factory=AuctionState)
    timestamp: datetime = field(default_factory=datetime.now)


# =============================================================================
# Engine events
# =============================================================================

@dataclass(frozen=True)
class StateChangedEvent(AuctionEvent):
    """Fired on transitions that have no dedicated event (pause, resume, reset, extension)."""

    reason: str = ""  # "paused", "resumed", "reset", "extended"


@dataclass(frozen=True)
class PlayerSetEvent(AuctionEvent):
    """Fired when a player goes under the hammer."""

    player: Optional[Player] = None


@dataclass(frozen=True)
class BidPlacedEvent(AuctionEvent):
    """Fired when a bid is accepted."""

    team: Optional[Team] = None
    amount: float = 0.0
    previous_bid: float = 0.0


@dataclass(frozen=True)
class TimerTickEvent(AuctionEvent):
    """Fired once per tick while bidding."""

    timer: int = 0


@dataclass(frozen=True)
class TimerExpiredEvent(AuctionEvent):
    """Fired when the countdown reaches zero, before the round is resolved."""


@dataclass(frozen=True)
class RoundEndedEvent(AuctionEvent):
    """Fired when a round closes, after the sold/unsold event."""

    result: RoundResult = RoundResult.UNSOLD
    player: Optional[Player] = None
    team: Optional[Team] = None  # Winner, SOLD only
    amount: float = 0.0          # Sale price, SOLD only
    reason: str = ""             # UNSOLD only


@dataclass(frozen=True)
class PlayerSoldEvent(AuctionEvent):
    """Fired when a player is sold."""

    player: Optional[Player] = None
    team: Optional[Team] = None
    amount: float = 0.0


@dataclass(frozen=True)
class PlayerUnsoldEvent(AuctionEvent):
    """Fired when a round closes without a sale."""

    player: Optional[Player] = None
    reason: str = ""


@dataclass(frozen=True)
class AuctionErrorEvent(AuctionEvent):
    """Fired when an operation is rejected."""

    error: str = ""


# =============================================================================
# Sequencer events
# =============================================================================

@dataclass(frozen=True)
class RunStartedEvent(AuctionEvent):
    """Fired when the sequencer starts walking the pool."""

    total_players: int = 0


@dataclass(frozen=True)
class PlayerSkippedEvent(AuctionEvent):
    """Fired when the sequencer passes over an ineligible player."""

    player: Optional[Player] = None
    reason: str = ""


@dataclass(frozen=True)
class RunCompleteEvent(AuctionEvent):
    """Fired when the pool is exhausted."""

    stats: Optional["AuctionStats"] = None
