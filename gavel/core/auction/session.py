"""
Auction session.

Everything one auction run needs, wired together: teams, the player
pool, the user's team, one event bus shared by the engine, sequencer and
log, and the scheduler that drives them all.
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional
from uuid import uuid4

from gavel.core.auction.bidding import BiddingConfig
from gavel.core.auction.config import AuctionConfig
from gavel.core.auction.engine import AuctionEngine
from gavel.core.auction.errors import InvalidAuctionStateError, TeamNotFoundError
from gavel.core.auction.scheduling import AsyncioScheduler, Scheduler, VirtualScheduler
from gavel.core.auction.sequencer import AuctionManager
from gavel.core.enums import AuctionType
from gavel.core.models import Player, Team
from gavel.events import EventBus
from gavel.generators import generate_player_pool
from gavel.logging import AuctionLog

logger = logging.getLogger(__name__)


@dataclass
class AuctionSession:
    """Context for a single auction run."""

    teams: list[Team]
    players: list[Player]
    bus: EventBus
    scheduler: Scheduler
    engine: AuctionEngine
    manager: AuctionManager
    log: AuctionLog
    user_team_id: Optional[str] = None
    auction_type: AuctionType = AuctionType.MEGA
    id: str = field(default_factory=lambda: uuid4().hex[:12])
    created_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def create(
        cls,
        teams: Optional[Iterable[Team]] = None,
        players: Optional[Iterable[Player]] = None,
        user_team_id: Optional[str] = None,
        auction_type: AuctionType = AuctionType.MEGA,
        scheduler: Optional[Scheduler] = None,
        config: Optional[AuctionConfig] = None,
        bidding_config: Optional[BiddingConfig] = None,
        retentions: Optional[dict[str, list[Player]]] = None,
        auto_advance: Optional[bool] = None,
        seed: Optional[int] = None,
        num_players: int = 60,
    ) -> "AuctionSession":
        """
        Build a ready-to-start session.

        Args:
            teams: Participating teams (the ten default franchises if None)
            players: Player pool (a generated pool if None)
            user_team_id: Team controlled by the human; AI never bids for it
            auction_type: Mega or mini auction
            scheduler: Clock for timers (real-time asyncio if None)
            config: Timer and sequencing configuration
            bidding_config: AI bidding tuning
            retentions: Players each team keeps before the auction, by team ID
            auto_advance: Move to the next player automatically after each round
            seed: Seed for the generated pool and the AI's random choices
            num_players: Size of the generated pool

        Raises:
            TeamNotFoundError: user_team_id or a retention key names no team
            RetentionError: a retention cannot be applied
        """
        # League setup depends on the auction errors, so import it here
        from gavel.core.league import apply_retentions, create_default_teams

        teams = list(teams) if teams is not None else create_default_teams()
        team_ids = {t.id for t in teams}
        if user_team_id is not None and user_team_id not in team_ids:
            raise TeamNotFoundError(f"Team with ID {user_team_id} not found")

        rng = random.Random(seed)
        if players is None:
            players = generate_player_pool(num_players, rng=rng)
        players = list(players)

        for team_id, retained in (retentions or {}).items():
            team = next((t for t in teams if t.id == team_id), None)
            if team is None:
                raise TeamNotFoundError(f"Team with ID {team_id} not found")
            apply_retentions(team, retained)

        scheduler = scheduler or AsyncioScheduler()
        bus = EventBus()
        engine = AuctionEngine(
            teams,
            user_team_id=user_team_id,
            bus=bus,
            scheduler=scheduler,
            config=config,
            bidding_config=bidding_config,
            rng=rng,
        )

        # Virtual runs log auction time; live runs log wall-clock time
        clock = scheduler.time if isinstance(scheduler, VirtualScheduler) else None
        log = AuctionLog(clock=clock)
        log.connect_to_event_bus(bus)

        manager = AuctionManager(engine, players, auto_advance=auto_advance)

        session = cls(
            teams=teams,
            players=players,
            bus=bus,
            scheduler=scheduler,
            engine=engine,
            manager=manager,
            log=log,
            user_team_id=user_team_id,
            auction_type=auction_type,
        )
        logger.info(
            f"Session {session.id}: {auction_type.value} auction, {len(teams)} teams, "
            f"{len(players)} players, user team {user_team_id or 'none'}"
        )
        return session

    @property
    def user_team(self) -> Optional[Team]:
        if self.user_team_id is None:
            return None
        return self.engine.get_team(self.user_team_id)

    def select_team(self, team_id: Optional[str]) -> None:
        """
        Choose the team the human controls. Only before the run starts.

        Raises:
            InvalidAuctionStateError: the run is already under way
            TeamNotFoundError: no team with that ID
        """
        if self.manager.is_running:
            raise InvalidAuctionStateError("Cannot change team once the auction has started")
        if team_id is not None and self.engine.get_team(team_id) is None:
            raise TeamNotFoundError(f"Team with ID {team_id} not found")
        self.user_team_id = team_id
        self.engine.user_team_id = team_id

    def close(self) -> None:
        """Stop the run and release timers and subscribers."""
        self.manager.stop()
        self.engine.destroy()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "auction_type": self.auction_type.value,
            "user_team_id": self.user_team_id,
            "is_running": self.manager.is_running,
            "state": self.engine.state.to_dict(),
            "stats": self.manager.stats.to_dict(),
            "remaining_players": self.manager.remaining_count,
            "teams": [t.to_dict() for t in self.teams],
        }
