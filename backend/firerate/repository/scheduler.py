"""Debounced, per-record save scheduling.

Rapid edits to the same record are coalesced: each edit resets that
record's timer, and only the latest payload is written once the record has
been quiet for ``delay`` seconds. At most one write per record is in flight
at a time; an edit that lands during a write is queued behind it rather
than racing it. Unflushed edits are simply superseded by later ones.

Persistence failures stay here. They are logged as they happen and
surfaced from :meth:`DebouncedSaveScheduler.flush`; scoring is never
affected and may be re-run with the same inputs at any time.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from firerate.exceptions import PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_DEBOUNCE_SECONDS = 1.0


class DebouncedSaveScheduler(Generic[T]):
    """Coalesces saves per key and serializes writes for the same key.

    Args:
        writer: Coroutine function that persists one payload.
        delay: Quiet period in seconds before a pending payload is written.

    Must be used from inside a running event loop.
    """

    def __init__(
        self,
        writer: Callable[[T], Awaitable[object]],
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self._writer = writer
        self._delay = delay
        self._pending: dict[str, T] = {}
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._tasks: set[asyncio.Task[None]] = set()
        self._in_flight: set[str] = set()
        self._failures: dict[str, BaseException] = {}

    @property
    def pending_keys(self) -> list[str]:
        return sorted(self._pending)

    @property
    def in_flight_keys(self) -> list[str]:
        return sorted(self._in_flight)

    def schedule(self, key: str, payload: T) -> None:
        """Record the latest payload for *key* and (re)start its timer."""
        loop = asyncio.get_running_loop()
        self._pending[key] = payload
        timer = self._timers.pop(key, None)
        if timer is not None:
            timer.cancel()
        self._timers[key] = loop.call_later(self._delay, self._start_write, key)

    async def flush(self) -> None:
        """Write everything pending now and wait for in-flight writes.

        Raises:
            PersistenceError: If any write failed since the last flush.
        """
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()

        writes = [self._write(key) for key in list(self._pending)]
        await asyncio.gather(*writes, *list(self._tasks))

        if self._failures:
            failed = sorted(self._failures)
            self._failures.clear()
            msg = f"Failed to save {len(failed)} record(s): {', '.join(failed)}"
            raise PersistenceError(msg)

    def close(self) -> list[str]:
        """Cancel every unflushed save. Returns the keys that were dropped."""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        dropped = sorted(self._pending)
        self._pending.clear()
        if dropped:
            logger.info("Dropped %d unflushed save(s): %s", len(dropped), ", ".join(dropped))
        return dropped

    def _start_write(self, key: str) -> None:
        self._timers.pop(key, None)
        task = asyncio.get_running_loop().create_task(self._write(key))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _write(self, key: str) -> None:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                await self._write_pending(key)
        finally:
            # Locks are kept only while a write for the key is queued or running.
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._locks[key]

    async def _write_pending(self, key: str) -> None:
        # An earlier queued write may already have taken the payload.
        if key not in self._pending:
            return
        payload = self._pending.pop(key)
        self._in_flight.add(key)
        try:
            await self._writer(payload)
        except Exception as exc:
            logger.exception("Save failed for %s", key)
            self._failures[key] = exc
        else:
            self._failures.pop(key, None)
        finally:
            self._in_flight.discard(key)
