"""
Price policy.

IPL-style bid increments and price-band validation. Every function here
is pure: no state, no side effects.

Increments:
- below 5 Cr: 0.25 Cr
- 5 to 10 Cr: 0.5 Cr
- 10 Cr and above: 1 Cr
"""

import math
from dataclasses import dataclass
from typing import Optional

from gavel.core.auction.errors import BidTooHighError, BidTooLowError, PriceValidationError
from gavel.core.models import Player

# (upper bound, increment) tiers, checked in order
INCREMENT_TIERS: list[tuple[float, float]] = [
    (5.0, 0.25),
    (10.0, 0.5),
]
TOP_INCREMENT = 1.0


def bid_increment(current_bid: float) -> float:
    """Get the legal increment for the next bid."""
    for upper, increment in INCREMENT_TIERS:
        if current_bid < upper:
            return increment
    return TOP_INCREMENT


def next_bid(current_bid: float) -> float:
    """Next legal bid, rounded to 2 decimals to avoid float drift."""
    return round(current_bid + bid_increment(current_bid), 2)


def next_bids(current_bid: float, count: int = 5) -> list[float]:
    """Preview the next `count` legal bids."""
    bids = []
    bid = current_bid
    for _ in range(count):
        bid = next_bid(bid)
        bids.append(bid)
    return bids


def validate_bid(bid: float, player: Player) -> None:
    """
    Check a bid against the player's price band.

    Raises:
        PriceValidationError: bid is not a finite number
        BidTooLowError: bid is below min_price
        BidTooHighError: bid is above max_price
    """
    if not math.isfinite(bid):
        raise PriceValidationError(f"Bid amount {bid} is not a finite number")
    if bid < player.min_price:
        raise BidTooLowError(f"Bid amount {bid} is below minimum price {player.min_price}")
    if bid > player.max_price:
        raise BidTooHighError(f"Bid amount {bid} exceeds maximum price {player.max_price}")


@dataclass(frozen=True)
class RoundEndVerdict:
    """Outcome of checking whether a round may close at the current bid."""

    can_end: bool = False
    must_extend: bool = False
    is_valid: bool = True
    error: Optional[str] = None


def evaluate_round_end(current_bid: float, player: Player, timer_expired: bool) -> RoundEndVerdict:
    """
    Decide whether a round can close at the current bid.

    A bid under the floor never closes a round: at expiry the round is
    extended instead. A bid over the ceiling is invalid at any time.
    """
    if current_bid < player.min_price:
        if timer_expired:
            return RoundEndVerdict(
                must_extend=True,
                is_valid=False,
                error=f"Bid ({current_bid}) is below minimum price ({player.min_price}). Auction must continue.",
            )
        return RoundEndVerdict(
            is_valid=False,
            error=f"Bid ({current_bid}) cannot be below minimum price ({player.min_price}).",
        )

    if current_bid > player.max_price:
        return RoundEndVerdict(
            is_valid=False,
            error=f"Bid ({current_bid}) cannot exceed maximum price ({player.max_price}).",
        )

    return RoundEndVerdict(can_end=timer_expired)


def can_round_end(current_bid: float, player: Player, timer_expired: bool) -> bool:
    return evaluate_round_end(current_bid, player, timer_expired).can_end


def must_extend_round(current_bid: float, player: Player, timer_expired: bool) -> bool:
    return evaluate_round_end(current_bid, player, timer_expired).must_extend
