import asyncio
from unittest.mock import patch

import pytest

from alice_bridge.session_manager import SessionStore, Turn, clean_old_sessions


def test_session_add_and_get(clock):
    store = SessionStore(clock=clock)
    session = store.get_or_create("test-session")

    store.append(session, Turn("user", "hi"))
    store.append(session, Turn("assistant", "hello"))

    history = store.get("test-session").history
    assert len(history) == 2
    assert history[0].role == "user"
    assert history[1].content == "hello"
    assert session.last_activity == clock.now


def test_existing_session_is_reused(clock):
    store = SessionStore(clock=clock)
    first = store.get_or_create("s1")
    store.append(first, Turn("user", "hi"))

    again = store.get_or_create("s1", is_new=False)
    assert again is first
    assert len(again.history) == 1


def test_new_flag_resets_history(clock):
    store = SessionStore(clock=clock)
    session = store.get_or_create("s1")
    store.append(session, Turn("user", "old"))

    fresh = store.get_or_create("s1", is_new=True)
    assert fresh.history == []
    assert store.get("s1") is fresh


def test_history_is_capped():
    store = SessionStore(max_history=4)
    session = store.get_or_create("s1")
    for i in range(11):
        store.append(session, Turn("user", f"msg {i}"))
        assert len(session.history) <= 4

    assert [t.content for t in session.history] == ["msg 7", "msg 8", "msg 9", "msg 10"]


def test_touch_updates_last_activity(clock):
    store = SessionStore(clock=clock)
    session = store.get_or_create("s1")
    clock.advance(42)
    store.touch(session)
    assert session.last_activity == clock.now


def test_sweep_removes_only_idle_sessions(clock):
    store = SessionStore(ttl_seconds=30 * 60, clock=clock)
    store.get_or_create("idle")
    clock.advance(20 * 60)
    store.get_or_create("active")
    clock.advance(11 * 60)

    removed = store.sweep()

    assert removed == 1
    assert "idle" not in store
    assert "active" in store
    assert len(store) == 1


def test_sweep_keeps_session_exactly_at_threshold(clock):
    store = SessionStore(ttl_seconds=60, clock=clock)
    session = store.get_or_create("s1")
    assert store.sweep(now=session.last_activity + 60) == 0
    assert store.sweep(now=session.last_activity + 61) == 1


def test_swept_session_is_recreated_empty(clock):
    store = SessionStore(ttl_seconds=60, clock=clock)
    session = store.get_or_create("s1")
    store.append(session, Turn("user", "hi"))
    clock.advance(120)
    store.sweep()

    assert store.get_or_create("s1").history == []


@pytest.mark.asyncio
async def test_clean_old_sessions_sweeps_periodically(clock):
    store = SessionStore(ttl_seconds=60, clock=clock)
    store.get_or_create("s1")
    clock.advance(120)

    with patch.object(store, "sweep", wraps=store.sweep) as sweep:
        task = asyncio.create_task(clean_old_sessions(store, interval=0.01))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    assert sweep.called
    assert len(store) == 0
