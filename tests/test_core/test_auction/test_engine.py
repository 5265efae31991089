"""Tests for the auction round state machine."""

import random
from dataclasses import replace

import pytest

from gavel.core.auction import (
    AuctionEngine,
    AuctionError,
    BidTooHighError,
    BidTooLowError,
    InsufficientPurseError,
    InvalidAuctionStateError,
    PlayerUnavailableError,
    PriceValidationError,
    TeamNotFoundError,
)
from gavel.core.enums import AuctionStatus, RoundResult
from gavel.core.models import Team
from gavel.events import (
    AuctionErrorEvent,
    BidPlacedEvent,
    PlayerSetEvent,
    PlayerSoldEvent,
    PlayerUnsoldEvent,
    RoundEndedEvent,
    StateChangedEvent,
    TimerExpiredEvent,
    TimerTickEvent,
)


class TestSetCurrentPlayer:
    """Tests for opening a round."""

    def test_opens_round_at_base_price(self, quiet_engine, player, record_events):
        events = record_events(quiet_engine.bus)
        quiet_engine.set_current_player(player)

        state = quiet_engine.state
        assert state.status == AuctionStatus.BIDDING
        assert state.player == player
        assert state.current_bid == player.base_price
        assert state.leading_team is None
        assert state.timer == 30
        assert quiet_engine.result is None

        assert isinstance(events[0], PlayerSetEvent)
        assert events[0].player == player
        assert events[0].state.status == AuctionStatus.BIDDING

    def test_rejects_while_round_in_progress(self, quiet_engine, player, star_player, record_events):
        quiet_engine.set_current_player(player)
        events = record_events(quiet_engine.bus)

        with pytest.raises(InvalidAuctionStateError):
            quiet_engine.set_current_player(star_player)

        assert quiet_engine.state.player == player
        assert any(isinstance(e, AuctionErrorEvent) for e in events)

    def test_rejects_player_held_by_a_team(self, quiet_engine, team, player):
        team.add_player(player)
        with pytest.raises(PlayerUnavailableError, match="already held by Mumbai Indians"):
            quiet_engine.set_current_player(player)
        assert quiet_engine.state.status == AuctionStatus.IDLE

    def test_held_players_never_set(self, quiet_engine, scheduler, make_player):
        """Across random set/bid/expire/reset sequences, no held player is ever put up."""
        rng = random.Random(7)
        players = [make_player() for _ in range(5)]
        teams = quiet_engine.teams

        for _ in range(300):
            action = rng.choice(["set", "bid", "expire", "reset"])
            if action == "set":
                candidate = rng.choice(players)
                held = any(candidate.id in t.held_player_ids() for t in teams)
                try:
                    quiet_engine.set_current_player(candidate)
                except (PlayerUnavailableError, InvalidAuctionStateError):
                    continue
                assert not held
            elif action == "bid":
                try:
                    quiet_engine.place_manual_bid(rng.choice(teams).id)
                except AuctionError:
                    continue
            elif action == "expire":
                scheduler.advance(31)
            else:
                quiet_engine.reset()

        owned = [p.id for t in teams for p in t.squad]
        assert owned
        assert len(owned) == len(set(owned))


class TestTimer:
    """Tests for the countdown and expiry."""

    def test_tick_decrements(self, quiet_engine, scheduler, player, record_events):
        events = record_events(quiet_engine.bus)
        quiet_engine.set_current_player(player)
        scheduler.advance(1)

        assert quiet_engine.state.timer == 29
        ticks = [e for e in events if isinstance(e, TimerTickEvent)]
        assert [t.timer for t in ticks] == [29]

    def test_no_bids_goes_unsold(self, quiet_engine, scheduler, player, record_events):
        events = record_events(quiet_engine.bus)
        quiet_engine.set_current_player(player)
        scheduler.advance(30)

        state = quiet_engine.state
        assert state.status == AuctionStatus.UNSOLD
        assert state.timer == 0
        assert state.current_bid == 0.0
        assert state.leading_team is None
        assert quiet_engine.result == RoundResult.UNSOLD

        unsold = [e for e in events if isinstance(e, PlayerUnsoldEvent)]
        assert len(unsold) == 1
        assert unsold[0].reason == "No bids received before timer ended"

        types = [type(e) for e in events]
        assert types.index(TimerExpiredEvent) < types.index(PlayerUnsoldEvent)
        assert types[-1] is RoundEndedEvent
        assert events[-1].result == RoundResult.UNSOLD

    def test_nothing_runs_after_round_closes(self, quiet_engine, scheduler, player, record_events):
        quiet_engine.set_current_player(player)
        scheduler.advance(30)
        events = record_events(quiet_engine.bus)
        scheduler.advance(60)
        assert events == []
        assert scheduler.pending == 0

    def test_no_leader_below_floor(self, quiet_engine, scheduler, player, record_events):
        events = record_events(quiet_engine.bus)
        quiet_engine.set_current_player(player)
        quiet_engine._state = replace(quiet_engine.state, current_bid=1.5, timer=1)
        scheduler.advance(1)

        unsold = [e for e in events if isinstance(e, PlayerUnsoldEvent)]
        assert unsold[0].reason == "Bid (1.5) is below minimum price (2.0)"

    def test_no_leader_above_base(self, quiet_engine, scheduler, player, record_events):
        events = record_events(quiet_engine.bus)
        quiet_engine.set_current_player(player)
        quiet_engine._state = replace(quiet_engine.state, current_bid=3.0, timer=1)
        scheduler.advance(1)

        unsold = [e for e in events if isinstance(e, PlayerUnsoldEvent)]
        assert unsold[0].reason == "No valid bidder found"

    def test_leader_below_floor_extends(self, quiet_engine, scheduler, team, floor_player, record_events):
        """A leading bid under the floor keeps the round open for another full timer."""
        events = record_events(quiet_engine.bus)
        quiet_engine.set_current_player(floor_player)
        quiet_engine._state = replace(quiet_engine.state, current_bid=3.0, leading_team=team, timer=1)
        scheduler.advance(1)

        state = quiet_engine.state
        assert state.status == AuctionStatus.BIDDING
        assert state.timer == 30
        assert state.leading_team is team
        assert any(isinstance(e, StateChangedEvent) and e.reason == "extended" for e in events)
        assert not any(isinstance(e, RoundEndedEvent) for e in events)

        # Extended countdown keeps ticking
        scheduler.advance(1)
        assert quiet_engine.state.timer == 29

    def test_leader_above_ceiling_goes_unsold(self, quiet_engine, scheduler, team, player, record_events):
        events = record_events(quiet_engine.bus)
        quiet_engine.set_current_player(player)
        quiet_engine._state = replace(quiet_engine.state, current_bid=12.0, leading_team=team, timer=1)
        scheduler.advance(1)

        assert quiet_engine.state.status == AuctionStatus.UNSOLD
        unsold = [e for e in events if isinstance(e, PlayerUnsoldEvent)]
        assert "cannot exceed maximum price" in unsold[0].reason
        assert team.purse == 100.0


class TestBidding:
    """Tests for accepting bids and selling."""

    def test_manual_bid_and_sale(self, quiet_engine, scheduler, team, player, record_events):
        events = record_events(quiet_engine.bus)
        quiet_engine.set_current_player(player)
        scheduler.advance(5)
        assert quiet_engine.state.timer == 25

        quiet_engine.place_manual_bid("mi")
        state = quiet_engine.state
        assert state.current_bid == 2.25
        assert state.leading_team is team
        assert state.timer == 30
        assert quiet_engine.bid_count("mi") == 1

        bids = [e for e in events if isinstance(e, BidPlacedEvent)]
        assert bids[0].amount == 2.25
        assert bids[0].previous_bid == 2.0

        scheduler.advance(29)
        assert quiet_engine.state.status == AuctionStatus.BIDDING
        scheduler.advance(1)

        assert quiet_engine.state.status == AuctionStatus.SOLD
        assert quiet_engine.result == RoundResult.SOLD
        assert team.purse == 97.75
        assert player in team.squad

        types = [type(e) for e in events]
        assert types.index(PlayerSoldEvent) < types.index(RoundEndedEvent)
        ended = events[-1]
        assert ended.result == RoundResult.SOLD
        assert ended.team is team
        assert ended.amount == 2.25

    def test_explicit_amount(self, quiet_engine, player):
        quiet_engine.set_current_player(player)
        quiet_engine.place_manual_bid("csk", 6.0)
        assert quiet_engine.state.current_bid == 6.0
        assert quiet_engine.state.leading_team.id == "csk"

    def test_opening_bid_at_base_is_allowed(self, quiet_engine, player):
        quiet_engine.set_current_player(player)
        quiet_engine.place_manual_bid("csk", player.base_price)
        assert quiet_engine.state.leading_team.id == "csk"

    def test_must_exceed_leading_bid(self, quiet_engine, player):
        quiet_engine.set_current_player(player)
        quiet_engine.place_manual_bid("csk", 4.0)
        with pytest.raises(BidTooLowError, match="must exceed the leading bid"):
            quiet_engine.place_manual_bid("rcb", 4.0)
        assert quiet_engine.state.leading_team.id == "csk"

    def test_outside_price_band(self, quiet_engine, player):
        quiet_engine.set_current_player(player)
        with pytest.raises(BidTooHighError):
            quiet_engine.place_manual_bid("csk", 11.0)
        with pytest.raises(BidTooLowError):
            quiet_engine.place_manual_bid("csk", 1.0)

    def test_nan_bid_rejected(self, quiet_engine, scheduler, player):
        """A NaN amount never leads a round, so expiry cannot sell at NaN."""
        quiet_engine.set_current_player(player)
        with pytest.raises(PriceValidationError, match="not a finite number"):
            quiet_engine.place_manual_bid("csk", float("nan"))

        assert quiet_engine.state.current_bid == player.base_price
        assert quiet_engine.state.leading_team is None

        scheduler.advance(31)
        csk = quiet_engine.get_team("csk")
        assert quiet_engine.state.status == AuctionStatus.UNSOLD
        assert csk.purse == 100.0
        assert csk.squad == []

    def test_insufficient_purse(self, quiet_engine, team, player):
        quiet_engine.set_current_player(player)
        team.purse = 1.0
        with pytest.raises(InsufficientPurseError):
            quiet_engine.place_manual_bid("mi")
        assert quiet_engine.state.leading_team is None

    def test_unknown_team(self, quiet_engine, player):
        quiet_engine.set_current_player(player)
        with pytest.raises(TeamNotFoundError):
            quiet_engine.place_manual_bid("nope")
        with pytest.raises(TeamNotFoundError):
            quiet_engine.accept_bid(Team(id="ghost", name="Ghost XI"))

    def test_no_bids_when_idle(self, quiet_engine):
        with pytest.raises(InvalidAuctionStateError):
            quiet_engine.place_manual_bid("mi")

    def test_rejection_is_reported(self, quiet_engine, player, record_events):
        quiet_engine.set_current_player(player)
        events = record_events(quiet_engine.bus)
        with pytest.raises(BidTooHighError):
            quiet_engine.place_manual_bid("csk", 50.0)
        errors = [e for e in events if isinstance(e, AuctionErrorEvent)]
        assert len(errors) == 1
        assert "exceeds maximum price" in errors[0].error


class TestPauseResumeReset:
    """Tests for pausing, resuming and resetting."""

    def test_pause_freezes_timer(self, quiet_engine, scheduler, player):
        quiet_engine.set_current_player(player)
        scheduler.advance(3)
        quiet_engine.pause()
        assert quiet_engine.state.status == AuctionStatus.PAUSED

        scheduler.advance(100)
        assert quiet_engine.state.timer == 27

        with pytest.raises(InvalidAuctionStateError):
            quiet_engine.place_manual_bid("csk")

        quiet_engine.resume()
        assert quiet_engine.state.status == AuctionStatus.BIDDING
        scheduler.advance(1)
        assert quiet_engine.state.timer == 26

    def test_pause_and_resume_only_from_legal_states(self, quiet_engine, player):
        with pytest.raises(InvalidAuctionStateError):
            quiet_engine.pause()
        quiet_engine.set_current_player(player)
        with pytest.raises(InvalidAuctionStateError):
            quiet_engine.resume()

    def test_reset_cancels_everything(self, quiet_engine, scheduler, player, record_events):
        quiet_engine.set_current_player(player)
        quiet_engine.place_manual_bid("csk")
        events = record_events(quiet_engine.bus)

        quiet_engine.reset()
        assert quiet_engine.state.status == AuctionStatus.IDLE
        assert quiet_engine.state.player is None
        assert quiet_engine.bid_count("csk") == 0
        assert isinstance(events[0], StateChangedEvent)
        assert events[0].reason == "reset"

        scheduler.advance(60)
        assert len(events) == 1

    def test_destroy_drops_subscribers(self, quiet_engine, scheduler, player):
        quiet_engine.bus.subscribe_all(lambda e: None)
        quiet_engine.set_current_player(player)
        quiet_engine.destroy()
        assert quiet_engine.bus.handler_count() == 0
        scheduler.advance(60)
        assert quiet_engine.state.status == AuctionStatus.BIDDING


class TestAIBidding:
    """Tests for AI participation in a round."""

    def test_ai_bids_after_engagement_delay(self, eager_engine, scheduler, star_player, record_events):
        events = record_events(eager_engine.bus)
        eager_engine.set_current_player(star_player)

        scheduler.advance(0.9)
        assert not any(isinstance(e, BidPlacedEvent) for e in events)
        scheduler.advance(0.1)
        bids = [e for e in events if isinstance(e, BidPlacedEvent)]
        assert len(bids) == 1
        assert bids[0].amount == 2.25

    def test_full_round_sells_to_ai(self, eager_engine, scheduler, teams, star_player, record_events):
        events = record_events(eager_engine.bus)
        eager_engine.set_current_player(star_player)
        scheduler.run_until_idle()

        assert eager_engine.state.status == AuctionStatus.SOLD
        winner = eager_engine.state.leading_team
        price = eager_engine.state.current_bid
        assert winner.id != "mi"
        assert star_player.min_price <= price <= star_player.max_price
        assert winner.purse == round(100.0 - price, 2)
        assert [t.id for t in teams if t.purse < 100.0] == [winner.id]

        bids = [e for e in events if isinstance(e, BidPlacedEvent)]
        assert len(bids) > 1
        assert all(b.team.id != "mi" for b in bids)
        assert all(b.amount > b.previous_bid for b in bids[1:])
        # The leader never outbids itself
        assert all(a.team.id != b.team.id for a, b in zip(bids, bids[1:]))

    def test_deferred_pass_skipped_after_reset(self, eager_engine, scheduler, star_player, record_events):
        """An AI pass scheduled for one round never acts on a later state."""
        events = record_events(eager_engine.bus)
        eager_engine.set_current_player(star_player)
        eager_engine.reset()
        scheduler.advance(5)

        assert not any(isinstance(e, BidPlacedEvent) for e in events)
        assert eager_engine.state.status == AuctionStatus.IDLE

    def test_user_team_excluded(self, teams, scheduler, config, star_player, record_events, fixed_random):
        only_user = [t for t in teams if t.id == "mi"]
        engine = AuctionEngine(
            only_user, user_team_id="mi", scheduler=scheduler, config=config, rng=fixed_random(0.0),
        )
        events = record_events(engine.bus)
        engine.set_current_player(star_player)
        scheduler.run_until_idle()

        assert engine.state.status == AuctionStatus.UNSOLD
        assert not any(isinstance(e, BidPlacedEvent) for e in events)
