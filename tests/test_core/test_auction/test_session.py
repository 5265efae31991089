"""Tests for session wiring and full simulated runs."""

import pytest

from gavel.core.auction import (
    AuctionSession,
    InvalidAuctionStateError,
    TeamNotFoundError,
    VirtualScheduler,
)
from gavel.core.enums import AuctionStatus, AuctionType, RoundResult


class TestCreate:
    """Tests for building a session."""

    def test_defaults(self, config):
        session = AuctionSession.create(scheduler=VirtualScheduler(), config=config, seed=1)

        assert len(session.teams) == 10
        assert len(session.players) == 60
        assert session.auction_type == AuctionType.MEGA
        assert session.user_team is None
        assert session.engine.bus is session.bus
        assert session.manager.bus is session.bus
        assert not session.manager.is_running

    def test_seed_reproduces_pool(self, config):
        a = AuctionSession.create(scheduler=VirtualScheduler(), config=config, seed=7, num_players=10)
        b = AuctionSession.create(scheduler=VirtualScheduler(), config=config, seed=7, num_players=10)
        assert [p.id for p in a.players] == [p.id for p in b.players]

    def test_unknown_user_team(self, config):
        with pytest.raises(TeamNotFoundError):
            AuctionSession.create(scheduler=VirtualScheduler(), config=config, user_team_id="xyz")

    def test_retentions_applied(self, config, make_player):
        keeper = make_player(is_capped=True)
        session = AuctionSession.create(
            players=[keeper, make_player()],
            scheduler=VirtualScheduler(),
            config=config,
            retentions={"csk": [keeper]},
        )
        csk = session.engine.get_team("csk")
        assert csk.purse == 82.0
        assert keeper in csk.retained_players
        assert session.manager.auctionable_players == [session.players[1]]

    def test_unknown_retention_team(self, config, make_player):
        with pytest.raises(TeamNotFoundError):
            AuctionSession.create(
                players=[make_player()],
                scheduler=VirtualScheduler(),
                config=config,
                retentions={"xyz": []},
            )

    def test_select_team(self, config):
        session = AuctionSession.create(scheduler=VirtualScheduler(), config=config, seed=1)
        session.select_team("kkr")
        assert session.user_team.id == "kkr"
        assert session.engine.user_team_id == "kkr"

        session.manager.start()
        with pytest.raises(InvalidAuctionStateError):
            session.select_team("mi")

    def test_select_unknown_team(self, config):
        session = AuctionSession.create(scheduler=VirtualScheduler(), config=config, seed=1)
        with pytest.raises(TeamNotFoundError):
            session.select_team("xyz")


class TestSimulatedRun:
    """End-to-end runs on a virtual clock."""

    @pytest.fixture
    def finished(self, config):
        scheduler = VirtualScheduler()
        session = AuctionSession.create(
            user_team_id="mi",
            scheduler=scheduler,
            config=config,
            auto_advance=True,
            seed=2024,
            num_players=20,
        )
        session.manager.start()
        scheduler.run_until_idle()
        return session

    def test_run_completes(self, finished):
        stats = finished.manager.stats
        assert not finished.manager.is_running
        assert stats.players_auctioned == 20
        assert stats.players_sold + stats.players_unsold == 20
        assert stats.players_sold > 0

    def test_money_is_conserved(self, finished):
        spent = sum(100.0 - t.purse for t in finished.teams)
        assert spent == pytest.approx(finished.manager.stats.total_revenue)

    def test_sales_respect_price_bands(self, finished):
        for team in finished.teams:
            for player in team.squad:
                entry = next(e for e in finished.log.entries if e.player_id == player.id)
                assert player.min_price <= entry.final_price <= player.max_price
                assert entry.winning_team_id == team.id

    def test_no_player_sold_twice(self, finished):
        owned = [p.id for t in finished.teams for p in t.squad]
        assert len(owned) == len(set(owned))

    def test_user_team_untouched_by_ai(self, finished):
        user = finished.user_team
        assert user.purse == 100.0
        assert user.squad == []

    def test_log_matches_stats(self, finished):
        log = finished.log
        stats = finished.manager.stats
        assert len(log.entries) == stats.players_auctioned
        assert sum(1 for e in log.entries if e.status == RoundResult.SOLD) == stats.players_sold

    def test_close(self, finished):
        finished.close()
        assert finished.bus.handler_count() == 0
        assert finished.engine.state.status == AuctionStatus.IDLE

    def test_to_dict(self, finished):
        data = finished.to_dict()
        assert data["auction_type"] == "mega"
        assert data["user_team_id"] == "mi"
        assert data["is_running"] is False
        assert len(data["teams"]) == 10
        assert data["stats"]["players_auctioned"] == 20
