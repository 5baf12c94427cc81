"""Tests for the asyncio task scheduler."""

from __future__ import annotations

import asyncio

import pytest

from Public.WatchPayout.Libs import TaskScheduler


@pytest.mark.asyncio
async def test_scheduled_callback_runs_after_delay():
    scheduler = TaskScheduler()
    calls = []

    async def callback(value):
        calls.append(value)

    handle = scheduler.schedule(0.01, callback, "x")
    await asyncio.sleep(0.05)

    assert calls == ["x"]
    assert handle.done is True
    assert scheduler.pending == 0


@pytest.mark.asyncio
async def test_cancel_prevents_callback_exactly_once():
    scheduler = TaskScheduler()
    calls = []

    async def callback():
        calls.append(1)

    handle = scheduler.schedule(0.05, callback)
    assert handle.cancel() is True
    assert handle.cancel() is False
    await asyncio.sleep(0.1)

    assert calls == []
    assert handle.cancelled is True


@pytest.mark.asyncio
async def test_cancel_after_completion_is_noop():
    scheduler = TaskScheduler()

    async def callback():
        return None

    handle = scheduler.schedule(0, callback)
    await asyncio.sleep(0.01)

    assert handle.cancel() is False
    assert handle.cancelled is False


@pytest.mark.asyncio
async def test_cancel_all():
    scheduler = TaskScheduler()
    calls = []

    async def callback():
        calls.append(1)

    handles = [scheduler.schedule(0.05, callback) for _ in range(3)]
    assert scheduler.pending == 3
    assert scheduler.cancel_all() == 3
    await asyncio.sleep(0.1)

    assert calls == []
    assert all(h.cancelled for h in handles)


@pytest.mark.asyncio
async def test_failing_callback_does_not_break_loop():
    scheduler = TaskScheduler()

    async def boom():
        raise RuntimeError("boom")

    handle = scheduler.schedule(0, boom, label="boom")
    await asyncio.sleep(0.01)

    assert handle.done is True
