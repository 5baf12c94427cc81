"""Tests for the session/watcher persistence adapter."""

from __future__ import annotations

import pytest

from Public.WatchPayout.Models import MediaInfo

from .conftest import T0


@pytest.mark.asyncio
async def test_session_ids_are_monotonic(store):
    first = await store.create_session("a", MediaInfo("1", "One"), T0)
    second = await store.create_session("b", MediaInfo("2", "Two"), T0 + 1)

    assert second > first


@pytest.mark.asyncio
async def test_missing_media_fields_get_defaults(store):
    session_id = await store.create_session("a", MediaInfo("", ""), T0)
    row = await store.get_session(session_id)

    assert row.media_id == "unknown"
    assert row.media_title == "Untitled"


@pytest.mark.asyncio
async def test_end_time_is_never_revised(store):
    session_id = await store.create_session("a", MediaInfo(), T0)
    await store.close_session(session_id, T0 + 10, 10)
    await store.close_session(session_id, T0 + 99, 99)

    row = await store.get_session(session_id)
    assert row.end_time == T0 + 10
    assert row.duration == 10
    assert await store.open_sessions() == []


@pytest.mark.asyncio
async def test_add_watcher_guards_duplicate_active_row(store):
    session_id = await store.create_session("a", MediaInfo(), T0)

    assert await store.add_watcher(session_id, "alice", T0) is True
    assert await store.add_watcher(session_id, "alice", T0 + 5) is False

    await store.close_watcher(session_id, "alice", T0 + 6)
    assert await store.add_watcher(session_id, "alice", T0 + 7) is True
    assert len(await store.watchers(session_id)) == 2


@pytest.mark.asyncio
async def test_mark_rewarded_only_touches_active_row(store):
    session_id = await store.create_session("a", MediaInfo(), T0)
    await store.add_watcher(session_id, "alice", T0)
    await store.close_watcher(session_id, "alice", T0 + 1)
    await store.add_watcher(session_id, "alice", T0 + 2)

    assert await store.mark_rewarded(session_id, "alice", 3) == 1
    assert await store.mark_rewarded(session_id, "alice", 3) == 0

    old, active = await store.watchers(session_id)
    assert (old.rewarded, old.reward_amount) == (False, 0)
    assert (active.rewarded, active.reward_amount) == (True, 3)


@pytest.mark.asyncio
async def test_unrewarded_active_watchers(store):
    session_id = await store.create_session("a", MediaInfo(), T0)
    await store.add_watcher(session_id, "alice", T0 + 1)
    await store.add_watcher(session_id, "bob", T0 + 2)
    await store.add_watcher(session_id, "carol", T0 + 3)
    await store.close_watcher(session_id, "bob", T0 + 4)
    await store.mark_rewarded(session_id, "carol", 1)

    assert await store.unrewarded_active_watchers(session_id) == [("alice", T0 + 1)]


@pytest.mark.asyncio
async def test_close_all_watchers(store):
    session_id = await store.create_session("a", MediaInfo(), T0)
    await store.add_watcher(session_id, "alice", T0)
    await store.add_watcher(session_id, "bob", T0)
    await store.close_watcher(session_id, "bob", T0 + 1)

    assert await store.close_all_watchers(session_id, T0 + 9) == 1
    leave_times = {w.username: w.leave_time for w in await store.watchers(session_id)}
    assert leave_times == {"alice": T0 + 9, "bob": T0 + 1}


@pytest.mark.asyncio
async def test_user_stats_counts_lucky_rewards(store):
    for amount in (1, 3, 3):
        session_id = await store.create_session("a", MediaInfo(), T0)
        await store.add_watcher(session_id, "Alice", T0)
        await store.mark_rewarded(session_id, "Alice", amount)

    stats = await store.user_stats("alice", lucky_amount=3)

    assert stats == {"videos_watched": 3, "total_earned": 7, "lucky_rewards": 2}


@pytest.mark.asyncio
async def test_user_stats_for_unknown_user(store):
    assert await store.user_stats("nobody", lucky_amount=3) == {
        "videos_watched": 0,
        "total_earned": 0,
        "lucky_rewards": 0,
    }
