import asyncio
import math

import pytest

from core import LoadError
from core.desktop.devtools.application.watcher import SnapshotWatcher

from conftest import make_snapshot, make_task


class FakeSource:
    def __init__(self, snapshot):
        self.snapshot = snapshot
        self.fetches = 0
        self.error = None

    def __call__(self):
        self.fetches += 1
        if self.error is not None:
            raise self.error
        return self.snapshot


def _watcher(source, clock, throttle=1.0, signature=None):
    applied = []
    watcher = SnapshotWatcher(source, applied.append, update_throttle=throttle, signature=signature, clock=clock)
    return watcher, applied


def test_load_sets_snapshot_and_apply_time(clock):
    source = FakeSource(make_snapshot(make_task(1)))
    watcher, applied = _watcher(source, clock)
    snap = watcher.load()
    assert snap is source.snapshot
    assert watcher.loaded
    assert watcher.last_applied_at == clock.now
    assert applied == []


def test_load_failure_is_fatal(clock):
    source = FakeSource(None)
    source.error = OSError("permission denied")
    watcher, _ = _watcher(source, clock)
    with pytest.raises(LoadError, match="permission denied"):
        watcher.load()
    assert watcher.failed
    assert not watcher.loaded
    assert watcher.tick() is False
    assert source.fetches == 1


def test_unchanged_tick_applies_nothing(clock):
    source = FakeSource(make_snapshot(make_task(1)))
    watcher, applied = _watcher(source, clock)
    watcher.load()
    clock.advance(5)
    source.snapshot = make_snapshot(make_task(1))  # equal content, new object
    assert watcher.tick() is False
    assert applied == []


def test_change_after_throttle_is_applied(clock):
    source = FakeSource(make_snapshot(make_task(1)))
    watcher, applied = _watcher(source, clock)
    watcher.load()
    clock.advance(1.5)
    source.snapshot = make_snapshot(make_task(1, status="done"))
    assert watcher.tick() is True
    assert applied == [source.snapshot]
    assert watcher.last_applied_at == clock.now


def test_change_inside_throttle_is_dropped_then_picked_up(clock):
    source = FakeSource(make_snapshot(make_task(1)))
    watcher, applied = _watcher(source, clock)
    watcher.load()
    clock.advance(0.3)
    source.snapshot = make_snapshot(make_task(1, status="done"))
    assert watcher.tick() is False
    assert watcher.dropped_count == 1
    assert applied == []
    clock.advance(1.0)
    assert watcher.tick() is True
    assert applied[-1].tasks[0].status == "done"


def test_flood_of_changes_respects_throttle(clock):
    source = FakeSource(make_snapshot(make_task(1)))
    watcher, applied = _watcher(source, clock, throttle=1.0)
    watcher.load()
    times = []
    watcher.on_change = lambda snap: times.append(clock.now)
    duration, step = 10.0, 0.1
    for n in range(int(duration / step)):
        source.snapshot = make_snapshot(make_task(1, title=f"rev {n}"))
        clock.advance(step)
        watcher.tick()
    assert 1 <= len(times) <= math.ceil(duration / 1.0) + 1
    assert all(b - a >= 1.0 - 1e-9 for a, b in zip(times, times[1:]))


def test_mark_applied_suppresses_own_write(clock):
    source = FakeSource(make_snapshot(make_task(1)))
    watcher, applied = _watcher(source, clock)
    watcher.load()
    written = make_snapshot(make_task(1, status="done"))
    watcher.mark_applied(written)
    source.snapshot = make_snapshot(make_task(1, status="done"))
    clock.advance(5)
    assert watcher.tick() is False
    assert applied == []
    assert watcher.snapshot is written


def test_mark_applied_does_not_reset_throttle_clock(clock):
    source = FakeSource(make_snapshot(make_task(1)))
    watcher, applied = _watcher(source, clock)
    watcher.load()
    before = watcher.last_applied_at
    clock.advance(2)
    watcher.mark_applied(make_snapshot(make_task(1, status="done")))
    assert watcher.last_applied_at == before


def test_mark_applied_forces_next_fetch(clock):
    source = FakeSource(make_snapshot(make_task(1), make_task(2)))
    sig = {"value": 1}
    watcher, applied = _watcher(source, clock, throttle=0, signature=lambda: sig["value"])
    watcher.load()
    written = make_snapshot(make_task(1, status="done"), make_task(2))
    # Another writer lands after ours, before the engine records its snapshot.
    source.snapshot = make_snapshot(make_task(1, status="done"), make_task(2, status="in-progress"))
    sig["value"] = 2
    watcher.mark_applied(written)
    clock.advance(1)
    assert watcher.tick() is True
    assert applied[-1].tasks[1].status == "in-progress"


def test_signature_match_skips_fetch(clock):
    source = FakeSource(make_snapshot(make_task(1)))
    sig = {"value": 1}
    watcher, applied = _watcher(source, clock, signature=lambda: sig["value"])
    watcher.load()
    fetches = source.fetches
    clock.advance(5)
    assert watcher.tick() is False
    assert source.fetches == fetches
    sig["value"] = 2
    source.snapshot = make_snapshot(make_task(1, status="done"))
    assert watcher.tick() is True
    assert source.fetches == fetches + 1


def test_dropped_change_is_not_hidden_by_signature(clock):
    source = FakeSource(make_snapshot(make_task(1)))
    sig = {"value": 1}
    watcher, applied = _watcher(source, clock, signature=lambda: sig["value"])
    watcher.load()
    sig["value"] = 2
    source.snapshot = make_snapshot(make_task(1, status="done"))
    clock.advance(0.1)
    assert watcher.tick() is False
    clock.advance(2)
    assert watcher.tick() is True
    assert len(applied) == 1


def test_poll_fetch_error_keeps_previous_snapshot(clock):
    first = make_snapshot(make_task(1))
    source = FakeSource(first)
    watcher, applied = _watcher(source, clock)
    watcher.load()
    source.error = ValueError("half-written file")
    clock.advance(5)
    assert watcher.tick() is False
    assert watcher.snapshot is first
    assert not watcher.failed


def test_refresh_ignores_throttle(clock):
    source = FakeSource(make_snapshot(make_task(1)))
    watcher, applied = _watcher(source, clock)
    watcher.load()
    source.snapshot = make_snapshot(make_task(2))
    assert watcher.refresh() is True
    assert applied == [source.snapshot]
    assert watcher.refresh() is False


def test_refresh_restarts_after_failed_load(clock):
    source = FakeSource(None)
    source.error = OSError("missing")
    watcher, applied = _watcher(source, clock)
    with pytest.raises(LoadError):
        watcher.load()
    source.error = None
    source.snapshot = make_snapshot(make_task(1))
    assert watcher.refresh() is True
    assert watcher.loaded
    assert applied == [source.snapshot]


def test_poll_runs_ticks_until_stopped():
    source = FakeSource(make_snapshot(make_task(1)))
    applied = []
    watcher = SnapshotWatcher(source, applied.append, update_throttle=0.0)

    async def scenario():
        watcher.load()
        task = watcher.start(0.05)
        assert watcher.running
        assert watcher.start(0.05) is task
        source.snapshot = make_snapshot(make_task(1, status="done"))
        for _ in range(40):
            await asyncio.sleep(0.02)
            if applied:
                break
        watcher.stop()
        await asyncio.sleep(0)
        assert not watcher.running

    asyncio.run(scenario())
    assert applied and applied[0].tasks[0].status == "done"


def test_poll_survives_tick_errors(monkeypatch):
    source = FakeSource(make_snapshot(make_task(1)))
    watcher = SnapshotWatcher(source, lambda snap: None)
    calls = []

    def broken_tick(now=None):
        calls.append(now)
        raise RuntimeError("boom")

    monkeypatch.setattr(watcher, "tick", broken_tick)

    async def scenario():
        watcher.load()
        watcher.start(0.05)
        for _ in range(40):
            await asyncio.sleep(0.02)
            if len(calls) >= 2:
                break
        watcher.stop()

    asyncio.run(scenario())
    assert len(calls) >= 2


def test_start_uses_spawn_callback():
    source = FakeSource(make_snapshot(make_task(1)))
    watcher = SnapshotWatcher(source, lambda snap: None)
    spawned = []

    async def scenario():
        loop = asyncio.get_running_loop()

        def spawn(coro):
            task = loop.create_task(coro)
            spawned.append(task)
            return task

        watcher.load()
        watcher.start(1.0, spawn=spawn)
        watcher.stop()
        await asyncio.sleep(0)

    asyncio.run(scenario())
    assert len(spawned) == 1
    assert spawned[0].cancelled()
