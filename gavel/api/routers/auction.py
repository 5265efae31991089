"""REST API router for auction sessions."""

from fastapi import APIRouter, HTTPException

from gavel.core.auction import AuctionError, TeamNotFoundError
from gavel.api.schemas.auction import (
    AdvanceRequest,
    AdvanceResponse,
    AuctionLogResponse,
    BidRequest,
    CreateAuctionRequest,
    PoolStatsResponse,
    SessionResponse,
)
from gavel.api.services.auction_service import AuctionService, auction_session_manager

router = APIRouter(prefix="/auctions", tags=["auctions"])


def _get_service(session_id: str) -> AuctionService:
    service = auction_session_manager.get_session(session_id)
    if not service:
        raise HTTPException(status_code=404, detail="Auction session not found")
    return service


def _to_http_error(error: AuctionError) -> HTTPException:
    """Unknown teams are 404s, every other rejection is a 400."""
    status_code = 404 if isinstance(error, TeamNotFoundError) else 400
    return HTTPException(status_code=status_code, detail=str(error))


@router.post("", response_model=SessionResponse)
async def create_auction(request: CreateAuctionRequest) -> SessionResponse:
    """
    Create a new auction session.

    Teams are the ten default franchises. The player pool is generated
    from `seed` unless `players` is given. Simulated sessions do not move
    until advanced via /auctions/{session_id}/advance.
    """
    try:
        service = auction_session_manager.create_session(request)
    except AuctionError as e:
        raise _to_http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return service.get_state()


@router.get("/{session_id}", response_model=SessionResponse)
async def get_auction(session_id: str) -> SessionResponse:
    """Get full session state."""
    return _get_service(session_id).get_state()


@router.delete("/{session_id}")
async def delete_auction(session_id: str) -> dict:
    """Close and remove a session."""
    if not auction_session_manager.remove_session(session_id):
        raise HTTPException(status_code=404, detail="Auction session not found")
    return {"success": True, "session_id": session_id}


@router.post("/{session_id}/start", response_model=SessionResponse)
async def start_auction(session_id: str) -> SessionResponse:
    """Start walking the player pool."""
    service = _get_service(session_id)
    service.start()
    return service.get_state()


@router.post("/{session_id}/bid", response_model=SessionResponse)
async def place_bid(session_id: str, request: BidRequest) -> SessionResponse:
    """Place a bid for a team. Omitting the amount bids the next increment."""
    service = _get_service(session_id)
    try:
        service.bid(request.team_id, request.amount)
    except AuctionError as e:
        raise _to_http_error(e)
    return service.get_state()


@router.post("/{session_id}/pause", response_model=SessionResponse)
async def pause_auction(session_id: str) -> SessionResponse:
    service = _get_service(session_id)
    try:
        service.pause()
    except AuctionError as e:
        raise _to_http_error(e)
    return service.get_state()


@router.post("/{session_id}/resume", response_model=SessionResponse)
async def resume_auction(session_id: str) -> SessionResponse:
    service = _get_service(session_id)
    try:
        service.resume()
    except AuctionError as e:
        raise _to_http_error(e)
    return service.get_state()


@router.post("/{session_id}/next", response_model=SessionResponse)
async def next_player(session_id: str) -> SessionResponse:
    """Abandon the current round and put up the next player."""
    service = _get_service(session_id)
    service.next_player()
    return service.get_state()


@router.post("/{session_id}/stop", response_model=SessionResponse)
async def stop_auction(session_id: str) -> SessionResponse:
    service = _get_service(session_id)
    service.stop()
    return service.get_state()


@router.post("/{session_id}/advance", response_model=AdvanceResponse)
async def advance_auction(session_id: str, request: AdvanceRequest) -> AdvanceResponse:
    """Move a simulated session's clock forward by `seconds`."""
    service = _get_service(session_id)
    try:
        callbacks_run = service.advance(request.seconds)
    except AuctionError as e:
        raise _to_http_error(e)
    return AdvanceResponse(callbacks_run=callbacks_run, session=service.get_state())


@router.get("/{session_id}/pool", response_model=PoolStatsResponse)
async def get_pool(session_id: str) -> PoolStatsResponse:
    return _get_service(session_id).get_pool_stats()


@router.get("/{session_id}/log", response_model=AuctionLogResponse)
async def get_log(session_id: str) -> AuctionLogResponse:
    """Per-player results recorded so far."""
    return _get_service(session_id).get_log()
