"""WebSocket router for real-time auction updates."""

import json

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from gavel.core.auction import AuctionError
from gavel.api.schemas.auction import AuctionWSMessage, AuctionWSMessageType, BidRequest
from gavel.api.services.auction_service import AuctionService, auction_session_manager

router = APIRouter(tags=["auction-websocket"])


@router.websocket("/ws/auctions/{session_id}")
async def auction_websocket(websocket: WebSocket, session_id: str) -> None:
    """
    WebSocket endpoint for real-time auction updates.

    Clients connect to receive:
    - A full state sync on connect and on request
    - Every auction event (bids, ticks, sales, skips, run completion)

    Clients can send:
    - Bids for a team, with an optional amount
    - Round controls (pause, resume, next player)
    """
    await websocket.accept()

    service = auction_session_manager.get_session(session_id)
    if not service:
        await websocket.send_json(
            AuctionWSMessage.create_error(
                f"Auction session {session_id} not found",
                "SESSION_NOT_FOUND"
            ).model_dump(mode="json")
        )
        await websocket.close()
        return

    auction_session_manager.attach_websocket(session_id, websocket)

    try:
        await _send_state_sync(service, websocket)

        while True:
            try:
                data = await websocket.receive_text()
                message = json.loads(data)
                await _handle_client_message(service, websocket, message)
            except WebSocketDisconnect:
                break
            except json.JSONDecodeError:
                await websocket.send_json(
                    AuctionWSMessage.create_error(
                        "Invalid JSON",
                        "INVALID_JSON"
                    ).model_dump(mode="json")
                )
    finally:
        auction_session_manager.detach_websocket(session_id)


async def _handle_client_message(service: AuctionService, websocket: WebSocket, message: dict) -> None:
    """Handle incoming client WebSocket message."""
    if not isinstance(message, dict):
        await _send_error(websocket, "Message must be a JSON object", "INVALID_MESSAGE")
        return

    msg_type = message.get("type")
    payload = message.get("payload") or {}

    try:
        if msg_type == AuctionWSMessageType.BID.value:
            try:
                bid = BidRequest.model_validate(payload)
            except ValidationError as e:
                await _send_error(websocket, f"Invalid bid: {e.errors()[0]['msg']}", "INVALID_BID")
                return
            service.bid(bid.team_id, bid.amount)

        elif msg_type == AuctionWSMessageType.PAUSE.value:
            service.pause()

        elif msg_type == AuctionWSMessageType.RESUME.value:
            service.resume()

        elif msg_type == AuctionWSMessageType.NEXT.value:
            service.next_player()

        elif msg_type == AuctionWSMessageType.REQUEST_SYNC.value:
            await _send_state_sync(service, websocket)

        else:
            await _send_error(websocket, f"Unknown message type: {msg_type}", "UNKNOWN_TYPE")

    except AuctionError as e:
        await _send_error(websocket, str(e), type(e).__name__)


async def _send_state_sync(service: AuctionService, websocket: WebSocket) -> None:
    msg = AuctionWSMessage.state_sync(service.get_state())
    await websocket.send_json(msg.model_dump(mode="json"))


async def _send_error(websocket: WebSocket, message: str, code: str) -> None:
    await websocket.send_json(AuctionWSMessage.create_error(message, code).model_dump(mode="json"))
