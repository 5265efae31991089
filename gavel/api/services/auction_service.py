"""Service wrapping auction sessions for the API."""

import asyncio
import logging
from dataclasses import replace
from typing import Any, Optional

from fastapi import WebSocket

from gavel.core.auction import (
    AuctionConfig,
    AuctionSession,
    InvalidAuctionStateError,
    VirtualScheduler,
    get_config,
)
from gavel.core.enums import AuctionType
from gavel.core.models import Player
from gavel.events import (
    AuctionErrorEvent,
    AuctionEvent,
    BidPlacedEvent,
    PlayerSetEvent,
    PlayerSkippedEvent,
    PlayerSoldEvent,
    PlayerUnsoldEvent,
    RoundEndedEvent,
    RunCompleteEvent,
    RunStartedEvent,
    StateChangedEvent,
    TimerExpiredEvent,
    TimerTickEvent,
)
from gavel.api.schemas.auction import (
    AuctionLogResponse,
    AuctionStateSchema,
    AuctionStatsSchema,
    AuctionTypeSchema,
    AuctionWSMessage,
    CreateAuctionRequest,
    PlayerSchema,
    PoolStatsResponse,
    SessionModeSchema,
    SessionResponse,
    TeamSchema,
)

logger = logging.getLogger(__name__)


EVENT_NAMES: dict[type, str] = {
    StateChangedEvent: "state_changed",
    PlayerSetEvent: "player_set",
    BidPlacedEvent: "bid_placed",
    TimerTickEvent: "timer_tick",
    TimerExpiredEvent: "timer_expired",
    RoundEndedEvent: "round_ended",
    PlayerSoldEvent: "player_sold",
    PlayerUnsoldEvent: "player_unsold",
    AuctionErrorEvent: "auction_error",
    RunStartedEvent: "run_started",
    PlayerSkippedEvent: "player_skipped",
    RunCompleteEvent: "run_complete",
}


def event_to_payload(event: AuctionEvent) -> dict[str, Any]:
    """Flatten an event into a JSON-ready dict."""
    payload: dict[str, Any] = {
        "event": EVENT_NAMES.get(type(event), type(event).__name__),
        "timestamp": event.timestamp.isoformat(),
        "state": event.state.to_dict(),
    }

    if isinstance(event, StateChangedEvent):
        payload["reason"] = event.reason
    elif isinstance(event, (PlayerSetEvent, PlayerSkippedEvent)):
        payload["player"] = event.player.to_dict() if event.player else None
        if isinstance(event, PlayerSkippedEvent):
            payload["reason"] = event.reason
    elif isinstance(event, BidPlacedEvent):
        payload["team_id"] = event.team.id if event.team else None
        payload["amount"] = event.amount
        payload["previous_bid"] = event.previous_bid
    elif isinstance(event, TimerTickEvent):
        payload["timer"] = event.timer
    elif isinstance(event, (PlayerSoldEvent, RoundEndedEvent)):
        payload["player"] = event.player.to_dict() if event.player else None
        payload["team_id"] = event.team.id if event.team else None
        payload["amount"] = event.amount
        if isinstance(event, RoundEndedEvent):
            payload["result"] = event.result.value
            payload["reason"] = event.reason
    elif isinstance(event, PlayerUnsoldEvent):
        payload["player"] = event.player.to_dict() if event.player else None
        payload["reason"] = event.reason
    elif isinstance(event, AuctionErrorEvent):
        payload["error"] = event.error
    elif isinstance(event, RunStartedEvent):
        payload["total_players"] = event.total_players
    elif isinstance(event, RunCompleteEvent):
        payload["stats"] = event.stats.to_dict() if event.stats else None

    return payload


class AuctionService:
    """
    One auction session exposed to the API.

    Live sessions run on the server's event loop in real time. Simulated
    sessions run on a virtual clock that only moves when `advance` is called.
    Every bus event is pushed to the attached WebSocket, if any.
    """

    def __init__(self, session: AuctionSession, mode: SessionModeSchema) -> None:
        self.session = session
        self.mode = mode
        self._websocket: Optional[WebSocket] = None
        session.bus.subscribe_all(self._on_event)

    @property
    def id(self) -> str:
        return self.session.id

    # === Controls ===

    def start(self) -> None:
        self.session.manager.start()

    def bid(self, team_id: str, amount: Optional[float] = None) -> None:
        self.session.engine.place_manual_bid(team_id, amount)

    def pause(self) -> None:
        self.session.manager.pause()

    def resume(self) -> None:
        self.session.manager.resume()

    def next_player(self) -> None:
        self.session.manager.proceed_to_next_player()

    def stop(self) -> None:
        self.session.manager.stop()

    def advance(self, seconds: float) -> int:
        """
        Move a simulated session's clock forward.

        Returns:
            Number of scheduled callbacks that ran

        Raises:
            InvalidAuctionStateError: the session runs in real time
        """
        scheduler = self.session.scheduler
        if not isinstance(scheduler, VirtualScheduler):
            raise InvalidAuctionStateError("Only simulated sessions can be advanced")
        return scheduler.advance(seconds)

    def close(self) -> None:
        self._websocket = None
        self.session.close()

    # === WebSocket ===

    def attach_websocket(self, websocket: WebSocket) -> None:
        """Attach a WebSocket for updates."""
        self._websocket = websocket

    def detach_websocket(self) -> None:
        """Detach the WebSocket."""
        self._websocket = None

    def _on_event(self, event: AuctionEvent) -> None:
        if self._websocket is None:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return
        asyncio.create_task(self._send_event(event_to_payload(event)))

    async def _send_event(self, payload: dict[str, Any]) -> None:
        """Send an auction event via WebSocket."""
        if not self._websocket:
            return
        try:
            msg = AuctionWSMessage.auction_event(payload)
            await self._websocket.send_json(msg.model_dump(mode="json"))
        except Exception as e:
            logger.debug(f"Session {self.id}: dropped {payload['event']} event ({e})")

    # === Responses ===

    def get_state(self) -> SessionResponse:
        session = self.session
        state = session.engine.state.to_dict()
        return SessionResponse(
            session_id=session.id,
            auction_type=AuctionTypeSchema(session.auction_type.value),
            mode=self.mode,
            user_team_id=session.user_team_id,
            is_running=session.manager.is_running,
            remaining_players=session.manager.remaining_count,
            clock=session.scheduler.time(),
            state=AuctionStateSchema(**state),
            stats=AuctionStatsSchema(**session.manager.stats.to_dict()),
            teams=[
                TeamSchema(
                    id=t.id,
                    name=t.name,
                    purse=t.purse,
                    aggression=t.aggression,
                    overseas_count=t.overseas_count,
                    squad_size=t.squad_size,
                    squad=[PlayerSchema(**p.to_dict()) for p in t.squad],
                    retained_player_ids=[p.id for p in t.retained_players],
                )
                for t in session.teams
            ],
        )

    def get_pool_stats(self) -> PoolStatsResponse:
        return PoolStatsResponse(**self.session.manager.pool_stats().to_dict())

    def get_log(self) -> AuctionLogResponse:
        log = self.session.log
        return AuctionLogResponse(
            summary=log.summary(),
            entries=[e.to_dict() for e in log.entries],
        )


class AuctionSessionManager:
    """Manages auction sessions."""

    def __init__(self) -> None:
        self._sessions: dict[str, AuctionService] = {}

    def create_session(self, request: CreateAuctionRequest) -> AuctionService:
        """
        Create an auction session from an API request.

        Raises:
            TeamNotFoundError: the user team does not exist
            ValueError: a supplied player has invalid prices
        """
        config: AuctionConfig = get_config()
        if request.timer_duration is not None:
            config = replace(config, timer_duration=request.timer_duration)

        players = None
        if request.players is not None:
            players = [Player.from_dict(p.model_dump()) for p in request.players]

        # Live sessions pick up the running loop lazily from the default scheduler
        scheduler = VirtualScheduler() if request.mode == SessionModeSchema.SIMULATED else None

        session = AuctionSession.create(
            players=players,
            user_team_id=request.user_team_id,
            auction_type=AuctionType(request.auction_type.value),
            scheduler=scheduler,
            config=config,
            auto_advance=request.auto_advance,
            seed=request.seed,
            num_players=request.num_players,
        )
        service = AuctionService(session, request.mode)
        self._sessions[session.id] = service
        logger.info(f"Created {request.mode.value} auction session {session.id}")
        return service

    def get_session(self, session_id: str) -> Optional[AuctionService]:
        """Get an existing session."""
        return self._sessions.get(session_id)

    def remove_session(self, session_id: str) -> bool:
        """Close and remove a session."""
        service = self._sessions.pop(session_id, None)
        if service is None:
            return False
        service.close()
        logger.info(f"Removed auction session {session_id}")
        return True

    def attach_websocket(self, session_id: str, websocket: WebSocket) -> bool:
        """Attach a WebSocket to a session."""
        service = self._sessions.get(session_id)
        if service is None:
            return False
        service.attach_websocket(websocket)
        return True

    def detach_websocket(self, session_id: str) -> None:
        """Detach the WebSocket from a session."""
        service = self._sessions.get(session_id)
        if service is not None:
            service.detach_websocket()

    @property
    def active_sessions(self) -> list[str]:
        """Get list of active session IDs."""
        return list(self._sessions.keys())

    async def cleanup_all(self) -> None:
        """Close all sessions."""
        for service in list(self._sessions.values()):
            service.close()
        self._sessions.clear()


# Global session manager instance
auction_session_manager = AuctionSessionManager()
