"""Pydantic schemas for the auction API."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


# === Enums (mirroring the core enums) ===

class AuctionStatusSchema(str, Enum):
    """Round status."""
    IDLE = "idle"
    BIDDING = "bidding"
    SOLD = "sold"
    UNSOLD = "unsold"
    PAUSED = "paused"


class AuctionTypeSchema(str, Enum):
    """Mega or mini auction."""
    MEGA = "mega"
    MINI = "mini"


class SessionModeSchema(str, Enum):
    """How a session's clock runs."""
    LIVE = "live"            # Real time on the server's event loop
    SIMULATED = "simulated"  # Virtual time, advanced by the client


# === Request Schemas ===

class PlayerSchema(BaseModel):
    """An auction player."""
    id: str
    name: str
    role: str
    base_price: float
    min_price: float
    max_price: float
    rating: int = Field(ge=0, le=100)
    popularity: int = Field(ge=0, le=100)
    is_capped: bool = False
    is_overseas: bool = False


class CreateAuctionRequest(BaseModel):
    """Request to create an auction session."""
    user_team_id: Optional[str] = None
    auction_type: AuctionTypeSchema = AuctionTypeSchema.MEGA
    mode: SessionModeSchema = SessionModeSchema.LIVE
    auto_advance: bool = True
    seed: Optional[int] = None
    num_players: int = Field(default=60, ge=1, le=500)
    timer_duration: Optional[int] = Field(default=None, gt=0)
    players: Optional[list[PlayerSchema]] = None  # Generated pool if omitted


class BidRequest(BaseModel):
    """Request to place a bid for a team."""
    team_id: str
    amount: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)  # Next increment if omitted


class AdvanceRequest(BaseModel):
    """Request to move a simulated session's clock forward."""
    seconds: float = Field(default=1.0, gt=0, le=86400)


# === Response Schemas ===

class TeamSchema(BaseModel):
    """A franchise and its squad."""
    id: str
    name: str
    purse: float
    aggression: int
    overseas_count: int
    squad_size: int
    squad: list[PlayerSchema] = Field(default_factory=list)
    retained_player_ids: list[str] = Field(default_factory=list)


class AuctionStateSchema(BaseModel):
    """Current round state."""
    player: Optional[PlayerSchema] = None
    current_bid: float = 0.0
    leading_team_id: Optional[str] = None
    leading_team_name: Optional[str] = None
    timer: int = 0
    status: AuctionStatusSchema = AuctionStatusSchema.IDLE


class AuctionStatsSchema(BaseModel):
    """Run statistics."""
    total_players: int = 0
    players_auctioned: int = 0
    players_sold: int = 0
    players_unsold: int = 0
    players_skipped: int = 0
    total_revenue: float = 0.0


class SessionResponse(BaseModel):
    """Full session state."""
    session_id: str
    auction_type: AuctionTypeSchema
    mode: SessionModeSchema
    user_team_id: Optional[str] = None
    is_running: bool = False
    remaining_players: int = 0
    clock: float = 0.0
    state: AuctionStateSchema
    stats: AuctionStatsSchema
    teams: list[TeamSchema] = Field(default_factory=list)


class AdvanceResponse(BaseModel):
    """Result of advancing a simulated session."""
    callbacks_run: int
    session: SessionResponse


class PoolStatsResponse(BaseModel):
    """Counts describing the auction pool."""
    total_players: int
    retained_players: int
    squad_players: int
    auctionable_players: int
    unavailable_players: int


class AuctionLogResponse(BaseModel):
    """Per-player auction log and summary."""
    summary: dict[str, Any]
    entries: list[dict[str, Any]]


# === WebSocket Message Types ===

class AuctionWSMessageType(str, Enum):
    """WebSocket message types for auctions."""
    # Server -> Client
    STATE_SYNC = "state_sync"
    AUCTION_EVENT = "auction_event"
    ERROR = "error"

    # Client -> Server
    BID = "bid"
    PAUSE = "pause"
    RESUME = "resume"
    NEXT = "next"
    REQUEST_SYNC = "request_sync"


class AuctionWSMessage(BaseModel):
    """WebSocket message for auctions."""
    type: AuctionWSMessageType
    payload: Optional[dict[str, Any]] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def state_sync(cls, session: SessionResponse) -> "AuctionWSMessage":
        """Create a state sync message."""
        return cls(
            type=AuctionWSMessageType.STATE_SYNC,
            payload=session.model_dump(mode="json"),
        )

    @classmethod
    def auction_event(cls, event: dict[str, Any]) -> "AuctionWSMessage":
        """Create an auction event message."""
        return cls(type=AuctionWSMessageType.AUCTION_EVENT, payload=event)

    @classmethod
    def create_error(cls, message: str, code: str = "ERROR") -> "AuctionWSMessage":
        """Create an error message."""
        return cls(
            type=AuctionWSMessageType.ERROR,
            error_message=message,
            error_code=code,
        )
