"""WebSocket route handlers"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query, status
from typing import Any, Optional
import json
import logging
import uuid

from app.core.config import settings
from app.core.database import get_db_context
from app.core.exceptions import NotFoundException, UnauthorizedException
from app.core.websocket import RELAYED_EVENTS, ClientConnection, canonical_id, event_wishlist_id, manager
from app.services.wishlist_store import WishlistStore
from app.api.v1.auth.services import AuthService

router = APIRouter()
logger = logging.getLogger(__name__)

def _bearer_from_headers(websocket: WebSocket) -> Optional[str]:
    header = websocket.headers.get("authorization")
    if header and header.lower().startswith("bearer "):
        return header[7:].strip()
    return None

async def get_current_user_ws(websocket: WebSocket, token: Optional[str] = None) -> Optional[uuid.UUID]:
    """
    Authenticate a WebSocket handshake

    The credential comes from the ``token`` query parameter or an
    Authorization header. On failure the socket is closed with 1008 before
    it is accepted and None is returned.
    """
    token = token or _bearer_from_headers(websocket)

    try:
        async with get_db_context() as db:
            return await AuthService(db).verify(token)
    except UnauthorizedException as e:
        logger.info(f"Rejected realtime connection: {e.detail}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return None

async def _send_error(connection: ClientConnection, message: str) -> None:
    await connection.send_json({"type": "error", "message": message})

async def _can_join(connection: ClientConnection, wishlist_id: Any) -> bool:
    if not settings.REALTIME_VERIFY_ROOM_ACCESS:
        return True
    try:
        async with get_db_context() as db:
            await WishlistStore(db).get_visible(wishlist_id, connection.user_id)
    except NotFoundException:
        return False
    return True

def _can_relay(connection: ClientConnection, wishlist_id: Any) -> bool:
    """Only members of a room may send into it"""
    if not settings.REALTIME_VERIFY_ROOM_ACCESS:
        return True
    return manager.is_member(connection, wishlist_id)

async def handle_message(connection: ClientConnection, data: Any) -> None:
    """Dispatch one client frame"""
    if not isinstance(data, dict) or not isinstance(data.get("type"), str):
        await _send_error(connection, "Messages must be objects with a type")
        return

    message_type = data["type"]

    if message_type == "ping":
        await connection.send_json({"type": "pong"})

    elif message_type == "join-wishlist":
        wishlist_id = data.get("wishlistId")
        if not wishlist_id:
            await _send_error(connection, "wishlistId is required")
            return
        if not await _can_join(connection, wishlist_id):
            await _send_error(connection, "Wishlist not found")
            return
        manager.join(connection, wishlist_id)
        await connection.send_json({"type": "joined", "wishlistId": canonical_id(wishlist_id)})

    elif message_type == "leave-wishlist":
        wishlist_id = data.get("wishlistId")
        if not wishlist_id:
            await _send_error(connection, "wishlistId is required")
            return
        manager.leave(connection, wishlist_id)
        await connection.send_json({"type": "left", "wishlistId": canonical_id(wishlist_id)})

    elif message_type in RELAYED_EVENTS:
        payload = data.get("data")
        wishlist_id = event_wishlist_id(payload)
        if wishlist_id and not _can_relay(connection, wishlist_id):
            await _send_error(connection, "Wishlist not found")
            return
        try:
            await manager.relay(connection, message_type, payload)
        except ValueError as e:
            await _send_error(connection, str(e))

    else:
        await _send_error(connection, f"Unknown message type: {message_type}")

@router.websocket("/ws/wishlists")
async def wishlist_channel(
    websocket: WebSocket,
    token: Optional[str] = Query(None)
):
    """Realtime wishlist collaboration channel"""
    user_id = await get_current_user_ws(websocket, token)
    if user_id is None:
        return

    connection = await manager.connect(websocket, user_id)

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                await _send_error(connection, "Invalid JSON")
                continue
            await handle_message(connection, data)

    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"WebSocket error for user {user_id}: {str(e)}")
    finally:
        manager.disconnect(connection)
