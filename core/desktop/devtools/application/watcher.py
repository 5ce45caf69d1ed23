"""Polling watcher that turns an external task store into applied snapshots.

Policy per tick:

* optional cheap pre-check through ``signature()``: when it matches the value
  recorded on the last settled tick the fetch is skipped;
* the fetched snapshot is diffed against the last *applied* snapshot, never the
  last fetched one;
* a change seen less than ``update_throttle`` seconds after the previous apply
  is dropped (not queued); a later tick re-diffs and picks it up;
* local writes call ``mark_applied``; the recorded signature is cleared so the
  next tick re-fetches and diffs against the written snapshot, which also
  catches an external write that landed right after ours.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

from core import LoadError, Snapshot

logger = logging.getLogger("tasklive.watcher")

Fetch = Callable[[], Snapshot]
OnChange = Callable[[Snapshot], None]
Signature = Callable[[], Any]
Spawn = Callable[[Awaitable[None]], "asyncio.Future[None]"]


class SnapshotWatcher:
    MIN_POLL_INTERVAL = 0.05

    def __init__(
        self,
        fetch: Fetch,
        on_change: OnChange,
        update_throttle: float = 1.0,
        signature: Optional[Signature] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.fetch = fetch
        self.on_change = on_change
        self.update_throttle = max(0.0, float(update_throttle))
        self.signature = signature
        self.clock = clock
        self.snapshot: Optional[Snapshot] = None
        self.last_applied_at: Optional[float] = None
        self.failed = False
        self.load_error: Optional[str] = None
        self.applied_count = 0
        self.dropped_count = 0
        self._signature: Any = None
        self._task: Optional["asyncio.Future[None]"] = None

    @property
    def loaded(self) -> bool:
        return self.snapshot is not None and not self.failed

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _read_signature(self) -> Any:
        if self.signature is None:
            return None
        try:
            return self.signature()
        except Exception as exc:
            logger.debug("signature check failed: %s", exc)
            return None

    def load(self) -> Snapshot:
        """Initial fetch. Failure is fatal until `restart()`."""
        sig = self._read_signature()
        try:
            snapshot = self.fetch()
        except Exception as exc:
            self.failed = True
            self.load_error = str(exc) or exc.__class__.__name__
            self.stop()
            logger.warning("initial load failed: %s", self.load_error)
            raise LoadError(self.load_error) from exc
        self.failed = False
        self.load_error = None
        self.snapshot = snapshot
        self.last_applied_at = self.clock()
        self._signature = sig
        return snapshot

    def restart(self) -> Snapshot:
        self.snapshot = None
        self.last_applied_at = None
        self._signature = None
        return self.load()

    def _apply(self, snapshot: Snapshot, now: float, sig: Any) -> None:
        self.snapshot = snapshot
        self.last_applied_at = now
        self._signature = sig
        self.applied_count += 1
        self.on_change(snapshot)

    def tick(self, now: Optional[float] = None) -> bool:
        """One poll step; returns True when a new snapshot was applied."""
        if not self.loaded:
            return False
        now = self.clock() if now is None else now
        sig = self._read_signature()
        if sig is not None and sig == self._signature:
            return False
        try:
            fetched = self.fetch()
        except Exception as exc:
            logger.debug("poll fetch failed, retrying next tick: %s", exc)
            return False
        if fetched == self.snapshot:
            self._signature = sig
            return False
        if self.last_applied_at is not None and now - self.last_applied_at < self.update_throttle:
            self.dropped_count += 1
            logger.debug("change dropped inside throttle window (%.3fs)", now - self.last_applied_at)
            return False
        self._apply(fetched, now, sig)
        return True

    def mark_applied(self, snapshot: Snapshot) -> None:
        """Record a snapshot the engine wrote itself; `on_change` is not called."""
        self.snapshot = snapshot
        self._signature = None

    def refresh(self) -> bool:
        """Manual refresh: fetch now and apply any difference, ignoring the throttle."""
        if not self.loaded:
            self.on_change(self.restart())
            return True
        sig = self._read_signature()
        fetched = self.fetch()
        if fetched == self.snapshot:
            self._signature = sig
            return False
        self._apply(fetched, self.clock(), sig)
        return True

    async def poll(self, interval: float) -> None:
        interval = max(self.MIN_POLL_INTERVAL, float(interval))
        while not self.failed:
            await asyncio.sleep(interval)
            try:
                self.tick()
            except Exception:
                logger.exception("watcher tick failed")

    def start(self, interval: float, spawn: Optional[Spawn] = None) -> "asyncio.Future[None]":
        """Schedule `poll` on the running loop (or through `spawn`)."""
        if self.running:
            return self._task  # type: ignore[return-value]
        coro = self.poll(interval)
        if spawn is not None:
            self._task = spawn(coro)
        else:
            self._task = asyncio.get_running_loop().create_task(coro)
        logger.debug("watcher started (interval=%.2fs, throttle=%.2fs)", interval, self.update_throttle)
        return self._task

    def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            logger.debug("watcher stopped")


__all__ = ["SnapshotWatcher"]
