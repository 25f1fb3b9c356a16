"""Realtime connection manager for wishlist rooms"""

from typing import Any, Dict, Iterable, Optional, Set
from fastapi import WebSocket
from datetime import datetime, timezone
import asyncio
import logging
import uuid

logger = logging.getLogger(__name__)

PRODUCT_ADDED = "product-added"
PRODUCT_UPDATED = "product-updated"
PRODUCT_REMOVED = "product-removed"
WISHLIST_UPDATED = "wishlist-updated"

RELAYED_EVENTS = frozenset({PRODUCT_ADDED, PRODUCT_UPDATED, PRODUCT_REMOVED, WISHLIST_UPDATED})

def canonical_id(wishlist_id: Any) -> str:
    """Normalise any spelling uuid.UUID accepts to its dashed lower-case form"""
    try:
        return str(uuid.UUID(str(wishlist_id)))
    except ValueError:
        return str(wishlist_id)

def room_key(wishlist_id: Any) -> str:
    return f"wishlist-{canonical_id(wishlist_id)}"

def event_wishlist_id(payload: Any) -> Optional[str]:
    """The wishlist a relayed payload is addressed to, if it names one"""
    if not isinstance(payload, dict):
        return None
    return payload.get("wishlistId") or payload.get("wishlist_id")

class ClientConnection:
    """One authenticated realtime connection"""

    def __init__(self, websocket: WebSocket, user_id: str):
        self.id = str(uuid.uuid4())
        self.websocket = websocket
        self.user_id = user_id
        self.rooms: Set[str] = set()

    async def send_json(self, message: Dict[str, Any]) -> None:
        await self.websocket.send_json(message)

    def __repr__(self):
        return f"<ClientConnection(id={self.id!r}, user_id={self.user_id!r})>"

class ConnectionManager:
    """
    Maps live connections to wishlist rooms and relays events between them

    Room membership is mutated only between awaits, so each join, leave or
    disconnect is atomic on the event loop and touches only its own room
    keys. Broadcasts iterate over a snapshot of the room.
    """

    def __init__(self):
        # Active connections: {connection_id: connection}
        self.active_connections: Dict[str, ClientConnection] = {}
        # Room membership: {room_key: {connections}}
        self.rooms: Dict[str, Set[ClientConnection]] = {}

    async def connect(self, websocket: WebSocket, user_id: str) -> ClientConnection:
        """Accept an already authenticated websocket"""
        await websocket.accept()

        connection = ClientConnection(websocket, user_id)
        self.active_connections[connection.id] = connection

        logger.info(f"User {user_id} connected ({connection.id})")

        await connection.send_json({
            "type": "connection",
            "status": "connected",
            "connectionId": connection.id,
            "userId": str(user_id),
            "timestamp": datetime.now(timezone.utc).isoformat()
        })
        return connection

    def disconnect(self, connection: ClientConnection) -> None:
        """Forget a connection and drop it from every room it joined"""
        for key in list(connection.rooms):
            self._remove_member(key, connection)
        self.active_connections.pop(connection.id, None)

        logger.info(f"User {connection.user_id} disconnected ({connection.id})")

    def join(self, connection: ClientConnection, wishlist_id: Any) -> bool:
        """Add the connection to a wishlist room. Returns False if already a member."""
        key = room_key(wishlist_id)
        members = self.rooms.setdefault(key, set())
        if connection in members:
            return False

        members.add(connection)
        connection.rooms.add(key)

        logger.info(f"User {connection.user_id} joined {key}")
        return True

    def leave(self, connection: ClientConnection, wishlist_id: Any) -> bool:
        """Remove the connection from a wishlist room. Leaving a room not joined is a no-op."""
        key = room_key(wishlist_id)
        if key not in connection.rooms:
            return False

        self._remove_member(key, connection)

        logger.info(f"User {connection.user_id} left {key}")
        return True

    async def relay(self, connection: ClientConnection, event: str, payload: Any) -> int:
        """
        Forward a client-originated event to everyone else in the wishlist room

        The payload is broadcast as given; it must name its wishlist through
        ``wishlistId``. Returns the number of connections it was sent to.

        Raises:
            ValueError: If the event kind is not relayed or the payload has no wishlist id
        """
        if event not in RELAYED_EVENTS:
            raise ValueError(f"Unsupported event type: {event}")
        if not isinstance(payload, dict):
            raise ValueError("Event data must be an object")

        wishlist_id = event_wishlist_id(payload)
        if not wishlist_id:
            raise ValueError("Event data must include wishlistId")

        delivered = await self.broadcast_to_room(
            room_key(wishlist_id),
            {"type": event, "data": payload},
            exclude=connection
        )
        logger.debug(f"Relayed {event} from {connection.id} to {delivered} connection(s)")
        return delivered

    async def broadcast_to_room(
        self,
        key: str,
        message: Dict[str, Any],
        exclude: Optional[ClientConnection] = None
    ) -> int:
        """Send a message to every member of a room, fire-and-forget"""
        targets = [member for member in self.rooms.get(key, ()) if member is not exclude]
        if not targets:
            return 0

        results = await asyncio.gather(*(self._send(member, message) for member in targets))
        self._drop_dead(member for member, ok in zip(targets, results) if not ok)
        return sum(results)

    def is_member(self, connection: ClientConnection, wishlist_id: Any) -> bool:
        return room_key(wishlist_id) in connection.rooms

    def room_members(self, wishlist_id: Any) -> Set[ClientConnection]:
        return set(self.rooms.get(room_key(wishlist_id), ()))

    async def _send(self, connection: ClientConnection, message: Dict[str, Any]) -> bool:
        try:
            await connection.send_json(message)
            return True
        except Exception as e:
            logger.warning(f"Dropping connection {connection.id} after failed send: {str(e)}")
            return False

    def _drop_dead(self, connections: Iterable[ClientConnection]) -> None:
        for connection in connections:
            self.disconnect(connection)

    def _remove_member(self, key: str, connection: ClientConnection) -> None:
        members = self.rooms.get(key)
        if members is not None:
            members.discard(connection)
            if not members:
                del self.rooms[key]
        connection.rooms.discard(key)

# Global connection manager
manager = ConnectionManager()
