"""Auction exceptions."""


class AuctionError(Exception):
    """Base class for auction errors."""


class InvalidAuctionStateError(AuctionError):
    """Operation is not legal in the current round status."""


class PlayerUnavailableError(AuctionError):
    """Player is retained, already in a squad, or already auctioned."""


class TeamNotFoundError(AuctionError):
    """No team with the requested ID takes part in the auction."""


class InsufficientPurseError(AuctionError):
    """Team cannot afford the bid."""


class PriceValidationError(AuctionError):
    """Bid falls outside the player's price band."""


class BidTooLowError(PriceValidationError):
    """Bid is below the player's minimum price."""


class BidTooHighError(PriceValidationError):
    """Bid exceeds the player's maximum price."""


class RetentionError(AuctionError):
    """Retention cannot be applied to a team."""
