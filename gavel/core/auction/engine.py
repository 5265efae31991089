"""
Auction Engine.

Runs the timed round for one player at a time:

    IDLE -> BIDDING -> SOLD | UNSOLD -> (reset) -> IDLE
             BIDDING <-> PAUSED

Each tick decrements the timer and gives the AI teams one chance to
raise. Any accepted bid resets the timer. When the timer reaches zero the
round is closed through the price policy: sold to the leader, extended
if the bid is still under the floor, or unsold.

All timers come from a Scheduler and are cancelable. Deferred AI passes
re-check the round identity before acting, since the round may have
changed while they waited.
"""

import logging
import random
from dataclasses import replace
from typing import Iterable, Optional

from gavel.core.auction.bidding import BiddingConfig, ai_bid_with_stopping
from gavel.core.auction.config import AuctionConfig, get_config
from gavel.core.auction.errors import (
    AuctionError,
    BidTooLowError,
    InsufficientPurseError,
    InvalidAuctionStateError,
    PlayerUnavailableError,
    PriceValidationError,
    TeamNotFoundError,
)
from gavel.core.auction.pricing import evaluate_round_end, next_bid, validate_bid
from gavel.core.auction.scheduling import AsyncioScheduler, ScheduledCall, Scheduler
from gavel.core.enums import AuctionStatus, RoundResult
from gavel.core.models import AuctionState, Player, Team
from gavel.events import (
    AuctionErrorEvent,
    BidPlacedEvent,
    EventBus,
    PlayerSetEvent,
    PlayerSoldEvent,
    PlayerUnsoldEvent,
    RoundEndedEvent,
    StateChangedEvent,
    TimerExpiredEvent,
    TimerTickEvent,
)

logger = logging.getLogger(__name__)


class AuctionEngine:
    """
    State machine for a single auction round.

    The engine owns the round state and is the only code that mutates
    teams during the auction (purse, squad, overseas count at sale).
    Observers subscribe to the event bus; they never touch state.
    """

    def __init__(
        self,
        teams: Iterable[Team],
        user_team_id: Optional[str] = None,
        bus: Optional[EventBus] = None,
        scheduler: Optional[Scheduler] = None,
        config: Optional[AuctionConfig] = None,
        bidding_config: Optional[BiddingConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._teams: list[Team] = list(teams)
        self.user_team_id = user_team_id
        self.bus = bus or EventBus()
        self.scheduler = scheduler or AsyncioScheduler()
        self.config = config or get_config()
        self.bidding_config = bidding_config or BiddingConfig()
        self.rng = rng or random.Random()

        self._state = AuctionState()
        self._countdown: Optional[ScheduledCall] = None
        self._deferred: list[ScheduledCall] = []

        # Identity of the current round, checked by deferred callbacks
        self._round_id = 0
        # At most one AI bid between ticks
        self._ai_bid_this_tick = False
        # Bids placed on the current player, by team ID
        self._bid_counts: dict[str, int] = {}

    # === Read access ===

    @property
    def state(self) -> AuctionState:
        return self._state

    @property
    def teams(self) -> list[Team]:
        return list(self._teams)

    def get_team(self, team_id: str) -> Optional[Team]:
        for team in self._teams:
            if team.id == team_id:
                return team
        return None

    @property
    def result(self) -> Optional[RoundResult]:
        """Outcome of the current round, or None while it is undecided."""
        if self._state.status == AuctionStatus.SOLD:
            return RoundResult.SOLD
        if self._state.status == AuctionStatus.UNSOLD:
            return RoundResult.UNSOLD
        return None

    def bid_count(self, team_id: str) -> int:
        """Bids a team has placed on the current player."""
        return self._bid_counts.get(team_id, 0)

    # === Round control ===

    def set_current_player(self, player: Player) -> None:
        """
        Put a player under the hammer.

        Raises:
            InvalidAuctionStateError: a round is already in progress
            PlayerUnavailableError: a team already holds the player
        """
        if self._state.status != AuctionStatus.IDLE:
            raise self._reject(InvalidAuctionStateError(
                f"Cannot set player while auction is {self._state.status.value}; reset first"
            ))

        for team in self._teams:
            if team.holds(player):
                raise self._reject(PlayerUnavailableError(
                    f"Player {player.name} ({player.id}) is already held by {team.name}"
                ))

        self._cancel_deferred()
        self._round_id += 1
        self._bid_counts = {}
        self._ai_bid_this_tick = False

        self._state = AuctionState(
            player=player,
            current_bid=player.base_price,
            leading_team=None,
            timer=self.config.timer_duration,
            status=AuctionStatus.BIDDING,
        )
        logger.info(f"Auction open: {player} at base {player.base_price} Cr")
        self.bus.emit(PlayerSetEvent(state=self._state, player=player))

        self._start_countdown()
        self._defer_ai_pass(self.config.initial_engagement_delay)

    def accept_bid(self, team: Team, amount: Optional[float] = None) -> None:
        """
        Accept a bid from a team.

        Args:
            team: Bidding team
            amount: Bid amount; the next legal increment if omitted

        Raises:
            InvalidAuctionStateError: not currently BIDDING
            TeamNotFoundError: team is not part of this auction
            PriceValidationError: amount outside the player's price band,
                or not above the leading bid
            InsufficientPurseError: team cannot afford the amount
        """
        state = self._state
        if state.status != AuctionStatus.BIDDING or state.player is None:
            raise self._reject(InvalidAuctionStateError(
                f"Cannot accept bid when auction is {state.status.value}"
            ))

        if self.get_team(team.id) is None:
            raise self._reject(TeamNotFoundError(f"Team {team.id} is not in this auction"))

        player = state.player
        if amount is None:
            amount = next_bid(state.current_bid)
        amount = round(amount, 2)

        try:
            validate_bid(amount, player)
        except PriceValidationError as e:
            raise self._reject(e)

        if state.leading_team is not None and amount <= state.current_bid:
            raise self._reject(BidTooLowError(
                f"Bid amount {amount} must exceed the leading bid {state.current_bid}"
            ))

        if team.purse < amount:
            raise self._reject(InsufficientPurseError(
                f"Team {team.name} has insufficient purse. Required: {amount}, Available: {team.purse}"
            ))

        previous = state.current_bid
        self._state = replace(
            state,
            current_bid=amount,
            leading_team=team,
            timer=self.config.timer_duration,
        )
        self._bid_counts[team.id] = self._bid_counts.get(team.id, 0) + 1
        self._ai_bid_this_tick = False

        logger.debug(f"Bid: {team.name} {amount} Cr for {player.name} (was {previous})")
        self.bus.emit(BidPlacedEvent(
            state=self._state, team=team, amount=amount, previous_bid=previous,
        ))

        self._start_countdown()
        self._defer_ai_pass(self.config.bid_reaction_delay)

    def place_manual_bid(self, team_id: str, amount: Optional[float] = None) -> None:
        """Place a bid for a team identified by ID (the human-controlled path)."""
        team = self.get_team(team_id)
        if team is None:
            raise self._reject(TeamNotFoundError(f"Team with ID {team_id} not found"))
        self.accept_bid(team, amount)

    def pause(self) -> None:
        """Stop the countdown. Only legal while BIDDING."""
        if self._state.status != AuctionStatus.BIDDING:
            raise self._reject(InvalidAuctionStateError(
                f"Cannot pause when auction is {self._state.status.value}"
            ))
        self._stop_countdown()
        self._state = replace(self._state, status=AuctionStatus.PAUSED)
        self.bus.emit(StateChangedEvent(state=self._state, reason="paused"))

    def resume(self) -> None:
        """Restart the countdown from where it stopped. Only legal while PAUSED."""
        if self._state.status != AuctionStatus.PAUSED:
            raise self._reject(InvalidAuctionStateError(
                f"Cannot resume when auction is {self._state.status.value}"
            ))
        self._state = replace(self._state, status=AuctionStatus.BIDDING)
        self.bus.emit(StateChangedEvent(state=self._state, reason="resumed"))
        self._start_countdown()

    def reset(self) -> None:
        """Return to IDLE, cancelling all pending timers. Always legal."""
        self._stop_countdown()
        self._cancel_deferred()
        self._round_id += 1
        self._bid_counts = {}
        self._state = AuctionState()
        self.bus.emit(StateChangedEvent(state=self._state, reason="reset"))

    def destroy(self) -> None:
        """Cancel all timers and drop every subscriber."""
        self._stop_countdown()
        self._cancel_deferred()
        self._round_id += 1
        self.bus.clear()

    # === Timer ===

    def _start_countdown(self) -> None:
        self._stop_countdown()
        self._countdown = self.scheduler.call_every(self.config.tick_interval, self._tick)

    def _stop_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    def _cancel_deferred(self) -> None:
        for call in self._deferred:
            call.cancel()
        self._deferred = []

    def _tick(self) -> None:
        if self._state.status != AuctionStatus.BIDDING or self._state.timer <= 0:
            return

        self._state = replace(self._state, timer=self._state.timer - 1)
        self._ai_bid_this_tick = False
        self.bus.emit(TimerTickEvent(state=self._state, timer=self._state.timer))

        self._process_ai_bidding()

        # An AI bid resets the timer, so re-read it
        if self._state.status == AuctionStatus.BIDDING and self._state.timer == 0:
            self._handle_expiry()

    def _handle_expiry(self) -> None:
        self._stop_countdown()
        self.bus.emit(TimerExpiredEvent(state=self._state))

        state = self._state
        player = state.player
        if player is None:
            self._end_as_unsold("No player set")
            return

        if state.leading_team is None:
            if state.current_bid == player.base_price:
                self._end_as_unsold("No bids received before timer ended")
            elif state.current_bid < player.min_price:
                self._end_as_unsold(
                    f"Bid ({state.current_bid}) is below minimum price ({player.min_price})"
                )
            else:
                self._end_as_unsold("No valid bidder found")
            return

        verdict = evaluate_round_end(state.current_bid, player, timer_expired=True)
        if verdict.can_end:
            self._end_as_sold()
        elif verdict.must_extend:
            logger.warning(
                f"Timer expired with {state.current_bid} Cr below minimum "
                f"{player.min_price} Cr for {player.name}; extending"
            )
            self._extend_timer()
        elif not verdict.is_valid:
            self._end_as_unsold(verdict.error or "Invalid auction state")
        else:
            logger.warning(
                f"Unexpected expiry state for {player.name}: leader "
                f"{state.leading_team.name} at {state.current_bid} Cr. Attempting to sell"
            )
            self._end_as_sold()

    def _extend_timer(self) -> None:
        self._state = replace(self._state, timer=self.config.timer_duration)
        self.bus.emit(StateChangedEvent(state=self._state, reason="extended"))
        self._start_countdown()

    # === AI bidding ===

    def _defer_ai_pass(self, delay: float) -> None:
        round_id = self._round_id
        player_id = self._state.player.id if self._state.player else None

        def run() -> None:
            state = self._state
            if (
                self._round_id != round_id
                or state.status != AuctionStatus.BIDDING
                or state.player is None
                or state.player.id != player_id
            ):
                return
            self._process_ai_bidding()

        self._deferred = [call for call in self._deferred if not call.cancelled]
        self._deferred.append(self.scheduler.call_later(delay, run))

    def _process_ai_bidding(self) -> None:
        """Give each AI team, in random order, a chance to raise. One bid at most."""
        if self._ai_bid_this_tick:
            return

        state = self._state
        if state.timer == 0 or state.status != AuctionStatus.BIDDING or state.player is None:
            return

        player = state.player
        current_bid = state.current_bid
        leader_id = state.leading_team.id if state.leading_team else None

        candidates = [
            team for team in self._teams
            if team.id != self.user_team_id and team.id != leader_id
        ]
        if not candidates:
            return
        self.rng.shuffle(candidates)

        for team in candidates:
            current_leader = self._state.leading_team
            if (current_leader.id if current_leader else None) != leader_id:
                break

            decision = ai_bid_with_stopping(
                team,
                player,
                current_bid,
                self.bid_count(team.id),
                self.bidding_config,
                self.rng,
            )
            if not decision.should_bid or decision.bid_amount is None:
                logger.debug(f"AI: {team.name} passes on {player.name}. {decision.reason}")
                continue

            try:
                validate_bid(decision.bid_amount, player)
            except PriceValidationError as e:
                logger.debug(f"AI bid validation failed for {team.name}: {e}")
                continue

            if team.purse < decision.bid_amount:
                logger.debug(
                    f"AI: {team.name} cannot afford {decision.bid_amount} Cr (purse: {team.purse})"
                )
                continue

            logger.debug(f"AI: {team.name} bids. {decision.reason}")
            self.accept_bid(team, decision.bid_amount)
            self._ai_bid_this_tick = True
            break

    # === Round end ===

    def _end_as_sold(self) -> None:
        state = self._state
        player = state.player
        team = state.leading_team
        if player is None or team is None:
            self._end_as_unsold("No leading team or player")
            return

        amount = state.current_bid
        if amount < player.min_price:
            self._end_as_unsold(
                f"Cannot sell below minimum price. Bid: {amount}, Minimum: {player.min_price}"
            )
            return

        self._stop_countdown()
        self._cancel_deferred()

        team.debit(amount)
        team.add_player(player)

        self._state = replace(state, status=AuctionStatus.SOLD, timer=0)
        logger.info(f"SOLD: {player.name} to {team.name} for {amount} Cr")

        self.bus.emit(PlayerSoldEvent(state=self._state, player=player, team=team, amount=amount))
        self.bus.emit(RoundEndedEvent(
            state=self._state,
            result=RoundResult.SOLD,
            player=player,
            team=team,
            amount=amount,
        ))

    def _end_as_unsold(self, reason: str) -> None:
        self._stop_countdown()
        self._cancel_deferred()

        player = self._state.player
        self._state = replace(
            self._state,
            status=AuctionStatus.UNSOLD,
            timer=0,
            leading_team=None,
            current_bid=0.0,
        )
        logger.info(f"UNSOLD: {player.name if player else 'no player'}. {reason}")

        self.bus.emit(PlayerUnsoldEvent(state=self._state, player=player, reason=reason))
        self.bus.emit(RoundEndedEvent(
            state=self._state,
            result=RoundResult.UNSOLD,
            player=player,
            reason=reason,
        ))

    # === Errors ===

    def _reject(self, error: AuctionError) -> AuctionError:
        """Report a rejected operation to observers; the caller raises it."""
        self.bus.emit(AuctionErrorEvent(state=self._state, error=str(error)))
        return error
