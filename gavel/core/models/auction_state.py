"""Round state snapshot for the auction engine."""

from dataclasses import dataclass
from typing import Optional

from gavel.core.enums import AuctionStatus
from gavel.core.models.player import Player
from gavel.core.models.team import Team


@dataclass(frozen=True)
class AuctionState:
    """
    State of the current round.

    Immutable: the engine swaps in a new snapshot (dataclasses.replace)
    on every transition, so a snapshot held by an event never changes.
    """

    player: Optional[Player] = None
    current_bid: float = 0.0
    leading_team: Optional[Team] = None
    timer: int = 0
    status: AuctionStatus = AuctionStatus.IDLE

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "player": self.player.to_dict() if self.player else None,
            "current_bid": self.current_bid,
            "leading_team_id": self.leading_team.id if self.leading_team else None,
            "leading_team_name": self.leading_team.name if self.leading_team else None,
            "timer": self.timer,
            "status": self.status.value,
        }
