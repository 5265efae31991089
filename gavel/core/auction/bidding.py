"""
AI Bidding Policy.

Decides, for one AI team and one player, whether to raise the current
bid. Decisions are probabilistic but conditioned on the team's purse,
squad, role needs and aggression, and on the player's rating band.

Flow:
1. Hard refusals (ceiling reached, purse, reserve, rating, squad size)
2. Star-player aggression boost
3. Bid probability from the rating-band model (or the legacy model)
4. Random draw against the probability

A separate circuit breaker (should_stop_bidding) makes teams drop out
naturally as the price nears the ceiling or after repeated bids.
"""

import random
from dataclasses import dataclass
from typing import Optional

from gavel.core.auction.pricing import next_bid
from gavel.core.enums import RatingBand
from gavel.core.models import MAX_SQUAD_SIZE, Player, Team


# Refusal thresholds (crores)
LOW_PURSE_FLOOR = 10.0
RESERVE_FLOOR = 5.0
MIN_GAP_TO_CEILING = 2.0
MIN_GAP_PERCENT = 5.0

# Squad size past which a team stops chasing roles it already filled
LARGE_SQUAD_SIZE = 20

STAR_RATING = 85
STAR_AGGRESSION_BOOST = 0.3  # Up to +30% aggression for a 100-rated player


@dataclass
class BiddingConfig:
    """Tuning knobs for AI bidding."""
    min_rating_threshold: int = 50
    base_bid_probability: float = 0.3   # Legacy model only
    use_rating_bands: bool = True


@dataclass
class BidDecision:
    """Result of an AI bidding decision."""
    should_bid: bool
    reason: str
    bid_amount: Optional[float] = None
    probability: Optional[float] = None


@dataclass(frozen=True)
class BandProfile:
    """Bidding behaviour for one rating band."""
    base_probability: float
    aggression_sensitivity: float
    dropoff_start: float        # Price/ceiling ratio where interest starts fading
    dropoff_rate: float         # Lower is gentler
    max_consecutive_bids: int
    stop_ratio: float           # Price/ceiling ratio where the team walks away
    stop_gap: float             # Absolute gap to ceiling where the team walks away
    intensity: float


BAND_PROFILES: dict[RatingBand, BandProfile] = {
    RatingBand.ELITE: BandProfile(0.7, 1.5, 0.85, 0.3, 5, 0.95, 0.5, 1.5),
    RatingBand.PREMIUM: BandProfile(0.5, 1.2, 0.80, 0.5, 4, 0.90, 0.25, 1.2),
    RatingBand.STANDARD: BandProfile(0.35, 1.0, 0.75, 0.7, 3, 0.85, 0.25, 1.0),
    RatingBand.CONSERVATIVE: BandProfile(0.2, 0.8, 0.70, 0.9, 2, 0.80, 0.25, 0.7),
}


def get_rating_band(rating: int) -> RatingBand:
    """Classify a player rating into a bidding band."""
    if rating > 90:
        return RatingBand.ELITE
    if rating >= 80:
        return RatingBand.PREMIUM
    if rating >= 70:
        return RatingBand.STANDARD
    return RatingBand.CONSERVATIVE


def bidding_intensity_multiplier(rating: int) -> float:
    """How many teams a player of this rating tends to draw in."""
    return BAND_PROFILES[get_rating_band(rating)].intensity


def attracts_multiple_bidders(rating: int) -> bool:
    """Elite and premium players usually see multi-team bidding wars."""
    return get_rating_band(rating) in (RatingBand.ELITE, RatingBand.PREMIUM)


def effective_aggression(team: Team, player: Player) -> float:
    """Team aggression, boosted for star players and capped at 100."""
    if player.rating <= STAR_RATING:
        return float(team.aggression)
    multiplier = 1 + ((player.rating - STAR_RATING) / 15) * STAR_AGGRESSION_BOOST
    return min(100.0, team.aggression * multiplier)


# =============================================================================
# Probability Models
# =============================================================================

def band_bid_probability(
    team: Team,
    player: Player,
    current_bid: float,
    aggression: Optional[float] = None,
) -> float:
    """
    Bid probability from the rating-band model.

    Higher bands start from a higher base, react more strongly to
    aggression, and fade later and more gently near the ceiling.
    """
    if aggression is None:
        aggression = team.aggression
    profile = BAND_PROFILES[get_rating_band(player.rating)]
    price_ratio = current_bid / player.max_price

    probability = profile.base_probability * (
        1 + (aggression / 100 - 0.5) * profile.aggression_sensitivity
    )

    # Encourage opening bids
    if current_bid <= player.base_price * 1.1:
        probability *= 1.2

    if player.is_capped:
        probability *= 1.15

    probability *= 0.8 + (player.popularity / 100) * 0.2

    # Filled roles still allow upgrades, just less often
    if not team.needs_role(player.role):
        probability *= 0.8 if player.rating > STAR_RATING else 0.6

    if price_ratio >= profile.dropoff_start:
        progress = (price_ratio - profile.dropoff_start) / (1 - profile.dropoff_start)
        progress = min(1.0, progress)
        probability *= (1 - progress) ** (1 / profile.dropoff_rate)

    return max(0.0, min(1.0, probability))


def legacy_bid_probability(
    team: Team,
    player: Player,
    current_bid: float,
    config: BiddingConfig,
    aggression: Optional[float] = None,
) -> float:
    """Bid probability from the flat aggression model (no rating bands)."""
    if aggression is None:
        aggression = team.aggression

    probability = (aggression / 100) * config.base_bid_probability
    probability *= 0.5 + (player.rating / 100) * 0.5

    if player.is_capped:
        probability *= 1.2

    probability *= 0.7 + (player.popularity / 100) * 0.3

    price_ratio = current_bid / player.max_price
    if price_ratio > 0.8:
        probability *= 1 - (price_ratio - 0.8) * 2

    return max(0.0, min(1.0, probability))


# =============================================================================
# Decisions
# =============================================================================

def ai_bid(
    team: Team,
    player: Player,
    current_bid: float,
    config: Optional[BiddingConfig] = None,
    rng: Optional[random.Random] = None,
) -> BidDecision:
    """
    Decide whether an AI team raises the bid on a player.

    Checks run in order and the first failing one wins, so the reason
    always names the most basic obstacle.

    Args:
        team: The team deciding
        player: Player under the hammer
        current_bid: Current highest bid
        config: Optional tuning (defaults to BiddingConfig())
        rng: Random source; an unseeded Random if omitted

    Returns:
        BidDecision with the amount when the team bids
    """
    config = config or BiddingConfig()
    rng = rng or random.Random()

    if current_bid >= player.max_price:
        return BidDecision(
            False,
            f"Current bid ({current_bid}) is at or above player's max price ({player.max_price})",
        )

    candidate = next_bid(current_bid)

    if team.purse < candidate:
        return BidDecision(
            False,
            f"Insufficient purse. Required: {candidate}, Available: {team.purse}",
        )

    gap = player.max_price - current_bid
    gap_percent = gap / player.max_price * 100
    if gap_percent < MIN_GAP_PERCENT or gap < MIN_GAP_TO_CEILING:
        return BidDecision(
            False,
            f"Too close to max price. Gap: {gap:.2f} Cr ({gap_percent:.1f}%)",
        )

    if team.purse < LOW_PURSE_FLOOR:
        return BidDecision(False, f"Purse too low ({team.purse:.2f} Cr). Conserving funds.")

    remaining = team.purse - candidate
    if remaining < RESERVE_FLOOR:
        return BidDecision(
            False,
            f"Bid would leave insufficient purse ({remaining:.2f} Cr remaining)",
        )

    if player.rating < config.min_rating_threshold:
        return BidDecision(
            False,
            f"Player rating ({player.rating}) below team threshold ({config.min_rating_threshold})",
        )

    if team.squad_size >= MAX_SQUAD_SIZE:
        return BidDecision(False, f"Squad is full ({team.squad_size}/{MAX_SQUAD_SIZE} players)")

    if (
        not team.needs_role(player.role)
        and team.squad_size >= LARGE_SQUAD_SIZE
        and player.rating <= STAR_RATING
    ):
        return BidDecision(
            False,
            f"Team already has sufficient {player.role.value} players "
            f"and squad is large ({team.squad_size}/{MAX_SQUAD_SIZE})",
        )

    if candidate > player.max_price:
        return BidDecision(
            False,
            f"Next bid ({candidate}) would exceed player's max price ({player.max_price})",
        )

    aggression = effective_aggression(team, player)
    if config.use_rating_bands:
        probability = band_bid_probability(team, player, current_bid, aggression)
    else:
        probability = legacy_bid_probability(team, player, current_bid, config, aggression)

    band = get_rating_band(player.rating)
    draw = rng.random()
    if draw > probability:
        return BidDecision(
            False,
            f"Bid probability ({probability * 100:.1f}%) not met. "
            f"Rating band: {band.value}, Random: {draw * 100:.1f}%",
            probability=probability,
        )

    star_note = ""
    if player.rating > STAR_RATING:
        star_note = f" (enhanced: {aggression:.0f} for star player)"
    band_note = f", band: {band.value}" if config.use_rating_bands else ""
    return BidDecision(
        True,
        f"Bidding {candidate} (aggression: {team.aggression}{star_note}, "
        f"probability: {probability * 100:.1f}%{band_note})",
        bid_amount=candidate,
        probability=probability,
    )


def should_stop_bidding(
    team: Team,
    player: Player,
    current_bid: float,
    consecutive_bids: int = 0,
    max_consecutive_bids: Optional[int] = None,
) -> bool:
    """
    Circuit breaker that makes a team walk away from a player.

    Stops after too many bids on the same player, once the price nears
    the band's walk-away ratio, when the purse runs low, or when the
    remaining gap to the ceiling is negligible.
    """
    profile = BAND_PROFILES[get_rating_band(player.rating)]
    if max_consecutive_bids is None:
        max_consecutive_bids = profile.max_consecutive_bids

    if consecutive_bids >= max_consecutive_bids:
        return True

    if current_bid / player.max_price >= profile.stop_ratio:
        return True

    if team.purse < LOW_PURSE_FLOOR:
        return True

    if player.max_price - current_bid <= profile.stop_gap:
        return True

    return False


def ai_bid_with_stopping(
    team: Team,
    player: Player,
    current_bid: float,
    consecutive_bids: int = 0,
    config: Optional[BiddingConfig] = None,
    rng: Optional[random.Random] = None,
) -> BidDecision:
    """Run the circuit breaker first, then the bidding decision."""
    if should_stop_bidding(team, player, current_bid, consecutive_bids):
        band = get_rating_band(player.rating)
        return BidDecision(
            False,
            f"Team decided to stop bidding (rating band: {band.value}, stopping logic triggered)",
        )

    return ai_bid(team, player, current_bid, config, rng)
