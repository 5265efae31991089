"""Shared pytest fixtures for Gavel tests."""

import random
from typing import Callable

import pytest

from gavel.core.auction import (
    AuctionConfig,
    AuctionEngine,
    BiddingConfig,
    VirtualScheduler,
)
from gavel.core.enums import PlayerRole
from gavel.core.league import create_default_teams
from gavel.core.models import Player, Team
from gavel.events import AuctionEvent, EventBus


class FixedRandom(random.Random):
    """Random source whose draws always return the same value."""

    def __init__(self, value: float, seed: int = 0) -> None:
        super().__init__(seed)
        self.value = value

    def random(self) -> float:
        return self.value


# =============================================================================
# Player Fixtures
# =============================================================================


@pytest.fixture
def player() -> Player:
    """A standard-band batsman: base 2, range 2-10."""
    return Player(
        id="p-standard",
        name="Ruturaj Gaikwad",
        role=PlayerRole.BATSMAN,
        base_price=2.0,
        min_price=2.0,
        max_price=10.0,
        rating=75,
        popularity=60,
    )


@pytest.fixture
def star_player() -> Player:
    """An elite, capped all-rounder: base 2, range 2-20."""
    return Player(
        id="p-star",
        name="Hardik Pandya",
        role=PlayerRole.ALL_ROUNDER,
        base_price=2.0,
        min_price=2.0,
        max_price=20.0,
        rating=95,
        popularity=90,
        is_capped=True,
    )


@pytest.fixture
def floor_player() -> Player:
    """A player whose floor and opening price are both 5."""
    return Player(
        id="p-floor",
        name="Kagiso Rabada",
        role=PlayerRole.BOWLER,
        base_price=5.0,
        min_price=5.0,
        max_price=20.0,
        rating=82,
    )


@pytest.fixture
def make_player() -> Callable[..., Player]:
    """Factory for throwaway players with sequential IDs."""
    counter = iter(range(10_000))

    def factory(**kwargs) -> Player:
        n = next(counter)
        kwargs.setdefault("id", f"gen-{n}")
        kwargs.setdefault("name", f"Player {n}")
        return Player(**kwargs)

    return factory


# =============================================================================
# Team Fixtures
# =============================================================================


@pytest.fixture
def teams() -> list[Team]:
    """The ten default franchises, fresh for each test."""
    return create_default_teams()


@pytest.fixture
def team(teams) -> Team:
    """Mumbai Indians (aggression 70, purse 100)."""
    return next(t for t in teams if t.id == "mi")


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def config() -> AuctionConfig:
    """Explicit timings so tests don't depend on the environment."""
    return AuctionConfig(
        timer_duration=30,
        tick_interval=1.0,
        initial_engagement_delay=1.0,
        bid_reaction_delay=0.3,
        auto_advance=False,
        advance_delay=1.0,
    )


@pytest.fixture
def scheduler() -> VirtualScheduler:
    return VirtualScheduler()


@pytest.fixture
def silent_bidding() -> BiddingConfig:
    """AI configuration under which no team ever bids."""
    return BiddingConfig(min_rating_threshold=101)


@pytest.fixture
def quiet_engine(teams, scheduler, config, silent_bidding) -> AuctionEngine:
    """Engine where only manual bids happen; Mumbai is the user team."""
    return AuctionEngine(
        teams,
        user_team_id="mi",
        scheduler=scheduler,
        config=config,
        bidding_config=silent_bidding,
        rng=random.Random(1),
    )


@pytest.fixture
def eager_engine(teams, scheduler, config) -> AuctionEngine:
    """Engine whose AI teams bid whenever the hard checks allow."""
    return AuctionEngine(
        teams,
        user_team_id="mi",
        scheduler=scheduler,
        config=config,
        rng=FixedRandom(0.0, seed=42),
    )


@pytest.fixture
def record_events() -> Callable[[EventBus], list[AuctionEvent]]:
    """Subscribe to every event on a bus and collect them in order."""

    def attach(bus: EventBus) -> list[AuctionEvent]:
        events: list[AuctionEvent] = []
        bus.subscribe_all(events.append)
        return events

    return attach


@pytest.fixture
def fixed_random() -> Callable[[float], FixedRandom]:
    return FixedRandom
