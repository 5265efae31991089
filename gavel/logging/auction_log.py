"""In-memory auction log built from the event stream, with file export."""

import csv
import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Union

from gavel.core.enums import RoundResult
from gavel.core.models import Player
from gavel.events import (
    BidPlacedEvent,
    EventBus,
    PlayerSetEvent,
    PlayerSoldEvent,
    PlayerUnsoldEvent,
    RunCompleteEvent,
)

PathLike = Union[str, Path]

CSV_HEADERS = [
    "Player Name",
    "Player ID",
    "Role",
    "Rating",
    "Base Price",
    "Min Price",
    "Max Price",
    "Final Price",
    "Winning Team",
    "Number of Bids",
    "Auction Duration (s)",
    "Status",
    "Unsold Reason",
]


@dataclass
class BidRecord:
    """A single accepted bid."""

    timestamp: float
    team: str
    amount: float
    elapsed_time: float  # Seconds since the player was put up

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "team": self.team,
            "amount": self.amount,
            "elapsed_time": self.elapsed_time,
        }


@dataclass
class AuctionLogEntry:
    """Record of one player's round."""

    player_name: str
    player_id: str
    player_role: str
    player_rating: int
    base_price: float
    min_price: float
    max_price: float
    start_time: float

    final_price: float = 0.0
    winning_team: Optional[str] = None
    winning_team_id: Optional[str] = None
    status: RoundResult = RoundResult.UNSOLD
    unsold_reason: Optional[str] = None
    bid_history: list[BidRecord] = field(default_factory=list)
    end_time: float = 0.0

    @property
    def number_of_bids(self) -> int:
        return len(self.bid_history)

    @property
    def duration(self) -> float:
        return max(0.0, self.end_time - self.start_time)

    @classmethod
    def open(cls, player: Player, start_time: float) -> "AuctionLogEntry":
        return cls(
            player_name=player.name,
            player_id=player.id,
            player_role=player.role.value,
            player_rating=player.rating,
            base_price=player.base_price,
            min_price=player.min_price,
            max_price=player.max_price,
            start_time=start_time,
        )

    def to_dict(self) -> dict:
        return {
            "player_name": self.player_name,
            "player_id": self.player_id,
            "player_role": self.player_role,
            "player_rating": self.player_rating,
            "base_price": self.base_price,
            "min_price": self.min_price,
            "max_price": self.max_price,
            "final_price": self.final_price,
            "winning_team": self.winning_team,
            "winning_team_id": self.winning_team_id,
            "number_of_bids": self.number_of_bids,
            "auction_duration": self.duration,
            "status": self.status.value,
            "unsold_reason": self.unsold_reason,
            "bid_history": [b.to_dict() for b in self.bid_history],
            "auction_start_time": self.start_time,
            "auction_end_time": self.end_time,
        }


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class AuctionLog:
    """
    Per-player record of an auction run.

    Subscribes to an EventBus and builds one entry per player put up.
    A player set while another entry is still open closes the stale entry
    as unsold ("Auction interrupted"); the end of the run closes any open
    entry ("Auction completed").

    Times come from `clock` (seconds). Pass the scheduler's clock for
    virtual-time runs so durations reflect auction time.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self._clock = clock or time.time
        self.entries: list[AuctionLogEntry] = []
        self._current: Optional[AuctionLogEntry] = None
        self._start_time: Optional[float] = None

    def connect_to_event_bus(self, event_bus: EventBus) -> None:
        """Subscribe to events from an event bus."""
        event_bus.subscribe(PlayerSetEvent, self._handle_player_set)
        event_bus.subscribe(BidPlacedEvent, self._handle_bid_placed)
        event_bus.subscribe(PlayerSoldEvent, self._handle_player_sold)
        event_bus.subscribe(PlayerUnsoldEvent, self._handle_player_unsold)
        event_bus.subscribe(RunCompleteEvent, self._handle_run_complete)

    @property
    def current_entry(self) -> Optional[AuctionLogEntry]:
        return self._current

    # === Event handlers ===

    def _handle_player_set(self, event: PlayerSetEvent) -> None:
        if event.player is None:
            return
        if self._current is not None:
            self._finalize(RoundResult.UNSOLD, "Auction interrupted")

        now = self._clock()
        if self._start_time is None:
            self._start_time = now
        self._current = AuctionLogEntry.open(event.player, now)

    def _handle_bid_placed(self, event: BidPlacedEvent) -> None:
        if self._current is None or event.team is None:
            return
        now = self._clock()
        self._current.bid_history.append(BidRecord(
            timestamp=now,
            team=event.team.name,
            amount=event.amount,
            elapsed_time=now - self._current.start_time,
        ))

    def _handle_player_sold(self, event: PlayerSoldEvent) -> None:
        if self._current is None:
            return
        self._current.final_price = event.amount
        if event.team is not None:
            self._current.winning_team = event.team.name
            self._current.winning_team_id = event.team.id
        self._finalize(RoundResult.SOLD)

    def _handle_player_unsold(self, event: PlayerUnsoldEvent) -> None:
        if self._current is None:
            return
        self._finalize(RoundResult.UNSOLD, event.reason or "No bids received")

    def _handle_run_complete(self, event: RunCompleteEvent) -> None:
        if self._current is not None:
            self._finalize(RoundResult.UNSOLD, "Auction completed")

    def _finalize(self, status: RoundResult, reason: Optional[str] = None) -> None:
        entry = self._current
        if entry is None:
            return
        entry.status = status
        entry.unsold_reason = reason if status == RoundResult.UNSOLD else None
        entry.end_time = self._clock()
        self.entries.append(entry)
        self._current = None

    # === Reports ===

    def complete_log(self) -> dict:
        """Full log with run totals."""
        sold = [e for e in self.entries if e.status == RoundResult.SOLD]
        start = self._start_time if self._start_time is not None else self._clock()
        end = max((e.end_time for e in self.entries), default=self._clock())
        return {
            "entries": [e.to_dict() for e in self.entries],
            "total_players": len(self.entries),
            "total_sold": len(sold),
            "total_unsold": len(self.entries) - len(sold),
            "total_revenue": round(sum(e.final_price for e in self.entries), 2),
            "auction_start_timestamp": start,
            "auction_end_timestamp": end,
            "total_duration": max(0.0, end - start),
        }

    def summary(self) -> dict:
        """Totals and averages, overall and for sold players only."""
        sold = [e for e in self.entries if e.status == RoundResult.SOLD]
        return {
            "total_players": len(self.entries),
            "total_sold": len(sold),
            "total_unsold": len(self.entries) - len(sold),
            "total_revenue": round(sum(e.final_price for e in self.entries), 2),
            "average_price": _mean([e.final_price for e in self.entries]),
            "average_bids": _mean([e.number_of_bids for e in self.entries]),
            "average_duration": _mean([e.duration for e in self.entries]),
            "sold_average_price": _mean([e.final_price for e in sold]),
            "sold_average_bids": _mean([e.number_of_bids for e in sold]),
            "sold_average_duration": _mean([e.duration for e in sold]),
        }

    # === Export ===

    def export_json(self, path: PathLike) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.complete_log(), f, indent=2)

    def export_csv(self, path: PathLike) -> None:
        with open(path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(CSV_HEADERS)
            for e in self.entries:
                writer.writerow([
                    e.player_name,
                    e.player_id,
                    e.player_role,
                    e.player_rating,
                    f"{e.base_price:.2f}",
                    f"{e.min_price:.2f}",
                    f"{e.max_price:.2f}",
                    f"{e.final_price:.2f}",
                    e.winning_team or "",
                    e.number_of_bids,
                    f"{e.duration:.2f}",
                    e.status.value,
                    e.unsold_reason or "",
                ])

    def export_bid_history_json(self, path: PathLike) -> None:
        history = [
            {
                "player_name": e.player_name,
                "player_id": e.player_id,
                "bid_history": [b.to_dict() for b in e.bid_history],
            }
            for e in self.entries
        ]
        with open(path, "w", encoding="utf-8") as f:
            json.dump(history, f, indent=2)

    def clear(self) -> None:
        self.entries = []
        self._current = None
        self._start_time = None
