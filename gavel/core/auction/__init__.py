"""
Auction core.

Price policy, AI bidding, the round state machine, the sequencer that
walks the player pool, and the session that wires them together.
"""

from gavel.core.auction.bidding import (
    BiddingConfig,
    BidDecision,
    ai_bid,
    ai_bid_with_stopping,
    attracts_multiple_bidders,
    bidding_intensity_multiplier,
    get_rating_band,
    should_stop_bidding,
)
from gavel.core.auction.config import AuctionConfig, get_config
from gavel.core.auction.engine import AuctionEngine
from gavel.core.auction.errors import (
    AuctionError,
    BidTooHighError,
    BidTooLowError,
    InsufficientPurseError,
    InvalidAuctionStateError,
    PlayerUnavailableError,
    PriceValidationError,
    RetentionError,
    TeamNotFoundError,
)
from gavel.core.auction.pricing import (
    RoundEndVerdict,
    bid_increment,
    can_round_end,
    evaluate_round_end,
    must_extend_round,
    next_bid,
    next_bids,
    validate_bid,
)
from gavel.core.auction.scheduling import (
    AsyncioScheduler,
    ScheduledCall,
    Scheduler,
    VirtualScheduler,
)
from gavel.core.auction.sequencer import AuctionManager, AuctionStats
from gavel.core.auction.session import AuctionSession

__all__ = [
    # Pricing
    "RoundEndVerdict",
    "bid_increment",
    "can_round_end",
    "evaluate_round_end",
    "must_extend_round",
    "next_bid",
    "next_bids",
    "validate_bid",
    # Bidding
    "BiddingConfig",
    "BidDecision",
    "ai_bid",
    "ai_bid_with_stopping",
    "attracts_multiple_bidders",
    "bidding_intensity_multiplier",
    "get_rating_band",
    "should_stop_bidding",
    # Engine and run
    "AuctionConfig",
    "AuctionEngine",
    "AuctionManager",
    "AuctionSession",
    "AuctionStats",
    "get_config",
    # Scheduling
    "AsyncioScheduler",
    "ScheduledCall",
    "Scheduler",
    "VirtualScheduler",
    # Errors
    "AuctionError",
    "BidTooHighError",
    "BidTooLowError",
    "InsufficientPurseError",
    "InvalidAuctionStateError",
    "PlayerUnavailableError",
    "PriceValidationError",
    "RetentionError",
    "TeamNotFoundError",
]
