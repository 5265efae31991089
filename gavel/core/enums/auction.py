"""Auction state enumerations."""

from enum import Enum


class AuctionStatus(Enum):
    """Status of the round for the current player."""

    IDLE = "idle"        # No player on the block
    BIDDING = "bidding"  # Countdown running, bids accepted
    SOLD = "sold"        # Round closed with a winner
    UNSOLD = "unsold"    # Round closed without a winner
    PAUSED = "paused"    # Countdown stopped, bids rejected


class RoundResult(Enum):
    """How a round concluded."""

    SOLD = "SOLD"
    UNSOLD = "UNSOLD"


class RatingBand(Enum):
    """Quality bucket driving AI bidding parameters."""

    ELITE = "elite"                # > 90
    PREMIUM = "premium"            # 80-90
    STANDARD = "standard"          # 70-80
    CONSERVATIVE = "conservative"  # < 70


class AuctionType(Enum):
    """Mega auctions reset squads; mini auctions top them up."""

    MEGA = "mega"
    MINI = "mini"
