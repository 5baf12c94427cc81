"""Tests for the economy ledger HTTP reward sink."""

from __future__ import annotations

import json

import httpx
import pytest
import pytest_asyncio

from Libs import global_request
from Public.WatchPayout.Libs import EconomyRewardSink


@pytest_asyncio.fixture
async def ledger():
    requests = []
    responses = {}

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        requests.append((request, body))
        status, payload = responses.get(body["username"], (200, {"success": True}))
        if isinstance(status, Exception):
            raise status
        return httpx.Response(status, json=payload)

    await global_request.start(transport=httpx.MockTransport(handler))
    yield requests, responses
    await global_request.stop()


@pytest.mark.asyncio
async def test_credit_posts_reward(ledger):
    requests, _ = ledger
    sink = EconomyRewardSink("http://economy.test/", token="secret")

    assert await sink.credit("alice", 3) is True

    (request, body) = requests[0]
    assert str(request.url) == "http://economy.test/credit"
    assert request.headers["Authorization"] == "Bearer secret"
    assert body == {"username": "alice", "amount": 3, "trust_change": 0, "reason": "video_watch"}


@pytest.mark.asyncio
async def test_rejected_credit_returns_false(ledger):
    _, responses = ledger
    responses["bob"] = (500, {"error": "nope"})

    assert await EconomyRewardSink("http://economy.test").credit("bob", 1) is False


@pytest.mark.asyncio
async def test_unsuccessful_body_returns_false(ledger):
    _, responses = ledger
    responses["carol"] = (200, {"success": False})

    assert await EconomyRewardSink("http://economy.test").credit("carol", 1) is False


@pytest.mark.asyncio
async def test_transport_error_returns_false(ledger):
    _, responses = ledger
    responses["dave"] = (httpx.ConnectError("refused"), None)

    assert await EconomyRewardSink("http://economy.test").credit("dave", 1) is False
