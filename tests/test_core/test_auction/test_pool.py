"""Tests for pool availability and duplicate checks."""

import pytest

from gavel.core.auction import PlayerUnavailableError
from gavel.core.auction.pool import (
    auctionable_players,
    check_for_duplicate,
    find_owning_team,
    find_retaining_team,
    is_player_available,
    is_player_in_squad,
    is_player_retained,
    pool_stats,
    validate_player_for_auction,
)
from gavel.core.league import apply_retentions


@pytest.fixture
def pool(make_player):
    return [make_player(is_capped=True) for _ in range(5)]


@pytest.fixture
def claimed(teams, pool):
    """pool[0] retained by Mumbai, pool[1] bought by Chennai."""
    mi = next(t for t in teams if t.id == "mi")
    csk = next(t for t in teams if t.id == "csk")
    apply_retentions(mi, [pool[0]])
    csk.add_player(pool[1])
    return mi, csk


class TestAvailability:
    """Tests for availability queries."""

    def test_retained_and_bought_players_are_unavailable(self, teams, pool, claimed):
        assert is_player_retained(pool[0], teams)
        assert not is_player_retained(pool[1], teams)
        assert is_player_in_squad(pool[1], teams)
        assert not is_player_available(pool[0], teams)
        assert not is_player_available(pool[1], teams)
        assert is_player_available(pool[2], teams)

    def test_auctionable_keeps_order(self, teams, pool, claimed):
        assert auctionable_players(pool, teams) == pool[2:]

    def test_find_teams(self, teams, pool, claimed):
        mi, csk = claimed
        assert find_retaining_team(pool[0], teams) is mi
        assert find_owning_team(pool[1], teams) is csk
        assert find_retaining_team(pool[2], teams) is None

    def test_pool_stats(self, teams, pool, claimed):
        stats = pool_stats(pool, teams)
        assert stats.total_players == 5
        assert stats.retained_players == 1
        # Retained players sit in the squad too
        assert stats.squad_players == 2
        assert stats.unavailable_players == 2
        assert stats.auctionable_players == 3
        assert stats.to_dict()["auctionable_players"] == 3


class TestDuplicateCheck:
    """Tests for duplicate detection."""

    def test_retention_reported_first(self, teams, pool, claimed):
        check = check_for_duplicate(pool[0], teams)
        assert check.is_duplicate
        assert check.location == "retained"
        assert check.reason == f'Player "{pool[0].name}" is already retained by Mumbai Indians'

    def test_squad(self, teams, pool, claimed):
        check = check_for_duplicate(pool[1], teams)
        assert check.location == "squad"
        assert check.reason == f"Player \"{pool[1].name}\" is already in Chennai Super Kings's squad"

    def test_auctioned(self, teams, pool):
        check = check_for_duplicate(pool[2], teams, {pool[2].id})
        assert check.location == "auctioned"
        assert check.reason == f'Player "{pool[2].name}" has already been auctioned'

    def test_clean(self, teams, pool):
        check = check_for_duplicate(pool[2], teams, set())
        assert not check.is_duplicate
        assert check.reason is None

    def test_validate_raises(self, teams, pool, claimed):
        validate_player_for_auction(pool[2], teams)
        with pytest.raises(PlayerUnavailableError, match="already retained"):
            validate_player_for_auction(pool[0], teams)
