import pytest

from app.core.websocket import ConnectionManager, room_key

class FakeWebSocket:
    def __init__(self, fail=False):
        self.accepted = False
        self.sent = []
        self.fail = fail

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)

@pytest.fixture
def manager():
    return ConnectionManager()

async def connect(manager, user_id="user", fail=False):
    connection = await manager.connect(FakeWebSocket(), user_id)
    connection.websocket.fail = fail
    return connection

async def test_connect_sends_greeting(manager):
    connection = await connect(manager, "u1")

    greeting = connection.websocket.sent[0]
    assert connection.websocket.accepted
    assert greeting["type"] == "connection"
    assert greeting["connectionId"] == connection.id
    assert greeting["userId"] == "u1"
    assert connection.id in manager.active_connections

async def test_join_is_idempotent(manager):
    connection = await connect(manager)

    assert manager.join(connection, "w1") is True
    assert manager.join(connection, "w1") is False
    assert manager.room_members("w1") == {connection}
    assert connection.rooms == {room_key("w1")}

async def test_leave_room_not_joined_is_noop(manager):
    connection = await connect(manager)

    assert manager.leave(connection, "w1") is False
    assert manager.rooms == {}

async def test_relay_excludes_sender(manager):
    sender = await connect(manager, "a")
    receiver = await connect(manager, "b")
    outsider = await connect(manager, "c")
    manager.join(sender, "w1")
    manager.join(receiver, "w1")
    manager.join(outsider, "w2")

    payload = {"wishlistId": "w1", "product": {"name": "Lamp"}}
    delivered = await manager.relay(sender, "product-added", payload)

    assert delivered == 1
    assert receiver.websocket.sent[-1] == {"type": "product-added", "data": payload}
    assert len(sender.websocket.sent) == 1
    assert len(outsider.websocket.sent) == 1

async def test_relay_rejects_bad_events(manager):
    sender = await connect(manager)

    with pytest.raises(ValueError):
        await manager.relay(sender, "delete-everything", {"wishlistId": "w1"})
    with pytest.raises(ValueError):
        await manager.relay(sender, "product-added", {"product": {}})
    with pytest.raises(ValueError):
        await manager.relay(sender, "product-added", "w1")

async def test_relay_to_empty_room(manager):
    sender = await connect(manager)

    assert await manager.relay(sender, "wishlist-updated", {"wishlistId": "w9"}) == 0

async def test_disconnect_leaves_every_room(manager):
    connection = await connect(manager)
    other = await connect(manager)
    manager.join(connection, "w1")
    manager.join(connection, "w2")
    manager.join(other, "w2")

    manager.disconnect(connection)

    assert connection.id not in manager.active_connections
    assert room_key("w1") not in manager.rooms
    assert manager.room_members("w2") == {other}

async def test_failed_send_drops_connection(manager):
    sender = await connect(manager)
    dead = await connect(manager, fail=True)
    alive = await connect(manager)
    for connection in (sender, dead, alive):
        manager.join(connection, "w1")

    delivered = await manager.relay(sender, "product-removed", {"wishlistId": "w1"})

    assert delivered == 1
    assert dead.id not in manager.active_connections
    assert manager.room_members("w1") == {sender, alive}

async def test_room_key_ignores_uuid_spelling(manager):
    connection = await connect(manager)
    wishlist_id = "5f0c6b8e-3a4d-4c2b-9f1e-7a6b5c4d3e2f"

    manager.join(connection, wishlist_id.upper())

    assert room_key(wishlist_id.replace("-", "")) == f"wishlist-{wishlist_id}"
    assert manager.is_member(connection, wishlist_id)
    assert manager.room_members(wishlist_id) == {connection}
