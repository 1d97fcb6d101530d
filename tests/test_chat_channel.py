import asyncio

import pytest

from pathy_admin.chat import ChatChannel
from pathy_admin.models.events import C2SEvent, S2CEvent
from pathy_admin.transport.envelope import build_presence, parse_event
from pathy_admin.transport.socketio import SocketIOManager

from conftest import AGENT, FakeSocket, make_message


def test_join_emits_presence(socket):
    channel = ChatChannel(socket, AGENT)
    assert channel.join("c1", lambda evt: None)
    assert socket.events(C2SEvent.JOIN_CHAT) == [{"chatId": "c1", "userType": "agent", "userId": "agent-1"}]
    assert channel.joined("c1")


def test_rejoin_replaces_listener(socket):
    channel = ChatChannel(socket, AGENT)
    seen = []
    channel.join("c1", seen.append)
    channel.join("c1", seen.append)
    assert socket.handler_count == 1

    socket.fire("newMessage", {"chatId": "c1", "message": make_message("m1")})
    assert len(seen) == 1


def test_events_for_other_chats_are_dropped(socket):
    channel = ChatChannel(socket, AGENT)
    seen = []
    channel.join("c1", seen.append)

    socket.fire("newMessage", {"chatId": "c2", "message": make_message("m1", chat_id="c2")})
    socket.fire("somethingElse", {"chatId": "c1"})
    assert seen == []


def test_server_presence_aliases(socket):
    channel = ChatChannel(socket, AGENT)
    seen = []
    channel.join("c1", seen.append)

    socket.fire("userTyping", {"chatId": "c1", "userType": "customer", "userId": "u1"})
    socket.fire("userStoppedTyping", {"chatId": "c1", "userType": "customer", "userId": "u1"})
    assert [e.type for e in seen] == [S2CEvent.TYPING, S2CEvent.STOP_TYPING]


def test_leave_stops_typing_and_detaches(socket):
    channel = ChatChannel(socket, AGENT)
    seen = []
    channel.join("c1", seen.append)
    channel.leave("c1")

    assert socket.handler_count == 0
    assert socket.events(C2SEvent.STOP_TYPING) == [build_presence("c1", AGENT)]
    socket.fire("chatResolved", {"chatId": "c1"})
    assert seen == []
    assert not channel.joined("c1")


def test_leave_all(socket):
    channel = ChatChannel(socket, AGENT)
    channel.join("c1", lambda evt: None)
    channel.join("c2", lambda evt: None)
    channel.leave_all()
    assert socket.handler_count == 0
    assert len(socket.events(C2SEvent.STOP_TYPING)) == 2


def test_typing_emits(socket):
    channel = ChatChannel(socket, AGENT)
    channel.typing("c1")
    channel.stop_typing("c1")
    assert [e for e, _ in socket.emitted] == [C2SEvent.TYPING, C2SEvent.STOP_TYPING]


@pytest.mark.parametrize("sio", [None, FakeSocket(connected=False)])
def test_unavailable_channel_is_inert(sio):
    channel = ChatChannel(sio, AGENT)
    assert not channel.available
    assert not channel.join("c1", lambda evt: None)
    channel.typing("c1")
    channel.leave("c1")
    if sio is not None:
        assert sio.emitted == []


def test_parse_event_normalizes_chat_id():
    evt = parse_event("chatResolved", {"chatId": 42})
    assert evt.type == S2CEvent.CHAT_RESOLVED
    assert evt.chat_id == "42"
    assert parse_event("notifications", {"chatId": "c1"}) is None


@pytest.mark.asyncio
async def test_subscribe_yields_scoped_events(socket):
    channel = ChatChannel(socket, AGENT)
    stream = channel.subscribe("c1", poll_interval=0.05)

    async def produce():
        await asyncio.sleep(0.01)
        socket.fire("newMessage", {"chatId": "c2", "message": make_message("x", chat_id="c2")})
        socket.fire("newMessage", {"chatId": "c1", "message": make_message("m1")})

    producer = asyncio.create_task(produce())
    evt = await asyncio.wait_for(stream.__anext__(), timeout=1.0)
    await producer
    assert evt.type == S2CEvent.NEW_MESSAGE
    assert evt.chat_id == "c1"

    socket.connected = False
    with pytest.raises(StopAsyncIteration):
        await asyncio.wait_for(stream.__anext__(), timeout=1.0)
    assert socket.handler_count == 0


def test_manager_dispatch_filters_and_isolates_handlers():
    manager = SocketIOManager("http://relay.test", "tok")
    seen = []

    def broken(event, data):
        raise RuntimeError("boom")

    manager.add_event_handler(broken)
    remove = manager.add_event_handler(lambda event, data: seen.append(event))

    manager._dispatch("connect", {})
    manager._dispatch("newMessage", "not a dict")
    manager._dispatch("newMessage", {"chatId": "c1"})
    remove()
    remove()
    manager._dispatch("chatResolved", {"chatId": "c1"})

    assert seen == ["newMessage"]
    assert not manager.connected


def test_manager_emit_requires_connection():
    with pytest.raises(RuntimeError):
        SocketIOManager("http://relay.test", "tok").emit("joinChat", {})
