"""
Auction Sequencer.

Walks the player pool one player at a time, feeding each into the
engine and keeping run statistics. Players that turn out to be held or
already auctioned when their turn comes are skipped and counted.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from gavel.core.auction.engine import AuctionEngine
from gavel.core.auction.errors import AuctionError
from gavel.core.auction.pool import PoolStats, auctionable_players, check_for_duplicate, pool_stats
from gavel.core.auction.scheduling import ScheduledCall
from gavel.core.enums import AuctionStatus, RoundResult
from gavel.core.models import Player
from gavel.events import (
    PlayerSkippedEvent,
    RoundEndedEvent,
    RunCompleteEvent,
    RunStartedEvent,
    StateChangedEvent,
)

logger = logging.getLogger(__name__)


@dataclass
class AuctionStats:
    """Aggregate statistics for an auction run."""
    total_players: int = 0
    players_auctioned: int = 0
    players_sold: int = 0
    players_unsold: int = 0
    players_skipped: int = 0
    total_revenue: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_players": self.total_players,
            "players_auctioned": self.players_auctioned,
            "players_sold": self.players_sold,
            "players_unsold": self.players_unsold,
            "players_skipped": self.players_skipped,
            "total_revenue": self.total_revenue,
        }


class AuctionManager:
    """
    Drives an auction run over a pool of players.

    Listens for RoundEndedEvent on the engine's bus. With auto_advance
    the next player is put up after advance_delay; otherwise the caller
    moves on with proceed_to_next_player().
    """

    def __init__(
        self,
        engine: AuctionEngine,
        players: Iterable[Player],
        auto_advance: Optional[bool] = None,
        advance_delay: Optional[float] = None,
    ) -> None:
        self.engine = engine
        self.bus = engine.bus
        self.scheduler = engine.scheduler

        self.auto_advance = engine.config.auto_advance if auto_advance is None else auto_advance
        self.advance_delay = engine.config.advance_delay if advance_delay is None else advance_delay

        self._players: list[Player] = list(players)
        self._auctionable: list[Player] = []
        self._index = 0
        self._auctioned_ids: set[str] = set()
        self._running = False
        self._pending_advance: Optional[ScheduledCall] = None
        self._stats = AuctionStats()

        self._refresh_pool()
        self.bus.subscribe(RoundEndedEvent, self._on_round_ended)

    # === Read access ===

    @property
    def stats(self) -> AuctionStats:
        return self._stats

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def remaining_count(self) -> int:
        return len(self._auctionable) - self._index

    @property
    def auctionable_players(self) -> list[Player]:
        return list(self._auctionable)

    def pool_stats(self) -> PoolStats:
        return pool_stats(self._players, self.engine.teams)

    # === Run control ===

    def start(self) -> None:
        """Start the run from the first auctionable player."""
        if self._running:
            logger.warning("Auction is already running")
            return

        self._running = True
        self._index = 0
        logger.info(
            f"Auction run started: {len(self._auctionable)} auctionable "
            f"of {self._stats.total_players} players"
        )
        self.bus.emit(RunStartedEvent(
            state=self.engine.state, total_players=self._stats.total_players,
        ))
        self._start_next_player()

    def proceed_to_next_player(self) -> None:
        """Reset the engine and put up the next player. No-op when stopped."""
        if not self._running:
            return
        self._cancel_pending_advance()
        self.engine.reset()
        self._start_next_player()

    def stop(self) -> None:
        """Stop the run, pausing any round in progress."""
        self._running = False
        self._cancel_pending_advance()
        if self.engine.state.status == AuctionStatus.BIDDING:
            self.engine.pause()
        self.bus.emit(StateChangedEvent(state=self.engine.state, reason="stopped"))

    def pause(self) -> None:
        self.engine.pause()

    def resume(self) -> None:
        self.engine.resume()

    def reset(self) -> None:
        """Forget all progress and start over with a fresh pool."""
        self._running = False
        self._cancel_pending_advance()
        self._index = 0
        self._auctioned_ids.clear()
        self._refresh_pool()
        self.engine.reset()

    # === Internals ===

    def _refresh_pool(self) -> None:
        self._auctionable = auctionable_players(self._players, self.engine.teams)
        self._stats = AuctionStats(
            total_players=len(self._players),
            players_skipped=len(self._players) - len(self._auctionable),
        )

    def _cancel_pending_advance(self) -> None:
        if self._pending_advance is not None:
            self._pending_advance.cancel()
            self._pending_advance = None

    def _skip(self, player: Player, reason: str) -> None:
        self._stats.players_skipped += 1
        logger.info(f"Skipping {player.name}: {reason}")
        self.bus.emit(PlayerSkippedEvent(state=self.engine.state, player=player, reason=reason))

    def _next_available_player(self) -> Optional[Player]:
        teams = self.engine.teams
        while self._index < len(self._auctionable):
            player = self._auctionable[self._index]
            self._index += 1

            check = check_for_duplicate(player, teams, self._auctioned_ids)
            if check.is_duplicate:
                self._skip(player, check.reason or "Duplicate player")
                continue

            return player
        return None

    def _start_next_player(self) -> None:
        if self.engine.state.status != AuctionStatus.IDLE:
            self.engine.reset()

        while True:
            player = self._next_available_player()
            if player is None:
                self._running = False
                logger.info(
                    f"Auction run complete: {self._stats.players_sold} sold, "
                    f"{self._stats.players_unsold} unsold, revenue {self._stats.total_revenue} Cr"
                )
                self.bus.emit(RunCompleteEvent(state=self.engine.state, stats=self._stats))
                return

            try:
                self.engine.set_current_player(player)
            except AuctionError as e:
                self._skip(player, str(e))
                self.engine.reset()
                continue

            self._stats.players_auctioned += 1
            self._auctioned_ids.add(player.id)
            return

    def _on_round_ended(self, event: RoundEndedEvent) -> None:
        if event.result == RoundResult.SOLD:
            self._stats.players_sold += 1
            self._stats.total_revenue = round(self._stats.total_revenue + event.amount, 2)
        else:
            self._stats.players_unsold += 1

        if self.auto_advance and self._running:
            self._cancel_pending_advance()
            self._pending_advance = self.scheduler.call_later(
                self.advance_delay, self.proceed_to_next_player,
            )
