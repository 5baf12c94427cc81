"""Tests for the room event transport adapter."""

from __future__ import annotations

import json

import pytest

from Public.WebSocket.Libs import RoomEventHandler

ROOM = "lobby"


class FakeWebSocket:
    def __init__(self):
        self.sent = []

    async def send_text(self, text):
        self.sent.append(json.loads(text))


@pytest.fixture
def websocket():
    return FakeWebSocket()


@pytest.fixture
def handler(manager, presence, websocket):
    return RoomEventHandler(websocket, ROOM, manager, presence)


@pytest.mark.asyncio
async def test_events_flow_into_engine(handler, manager, presence, websocket, sink, clock):
    await handler.handle_media_change({"id": "yt:1", "title": "Warmup"})
    await handler.handle_media_change({"id": "yt:2", "title": "Main"})

    await handler.handle_userlist({"users": [
        {"name": "alice"},
        {"name": "relay", "system": True},
        "bob",
    ]})
    assert websocket.sent[-1] == {"type": "reconciled", "added": 2, "removed": 0}
    assert set(manager.get_watchers(ROOM)) == {"alice", "bob"}

    await handler.handle_leave({"username": "bob"})
    assert presence.snapshot(ROOM) == {"alice"}

    # carol arrives after the halfway mark of the eventual close
    clock.advance(400)
    await handler.handle_join({"username": "carol"})
    assert set(manager.get_watchers(ROOM)) == {"alice", "carol"}

    clock.advance(200)
    await handler.handle_media_change({"id": "yt:3", "title": "Next"})

    assert websocket.sent[-1]["type"] == "session_closed"
    assert websocket.sent[-1]["rewarded_count"] == 1
    assert [name for name, _ in sink.credits] == ["alice"]


@pytest.mark.asyncio
async def test_invalid_payloads_produce_errors(handler, websocket):
    await handler.handle_userlist({"users": "alice"})
    await handler.handle_join({})
    await handler.handle_leave({"username": "  "})

    assert [m["type"] for m in websocket.sent] == ["error", "error", "error"]


@pytest.mark.asyncio
async def test_ping_echoes_id(handler, websocket):
    await handler.handle_ping({"type": "ping", "_ping_id": 7})

    assert websocket.sent == [{"type": "pong", "_ping_id": 7}]
