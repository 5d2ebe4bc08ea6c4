"""Flexible (stale-while-revalidate) reads over any StoreClient.

A flexible value is stored next to a creation stamp, both with the hard
TTL. Reads inside the soft TTL return the cached value. Reads between the
soft and hard TTL return the stale value at once and schedule one
background refresh. A refresh only writes if it holds the store lock and
the stamp it saw is still current, so concurrent stale reads, in this
process or another, regenerate once per cycle.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
import uuid
from collections.abc import Awaitable, Callable

from cacheprobe.core.constants import DEFAULT_FLEXIBLE_LOCK_SECONDS
from cacheprobe.infrastructure.cache.keys import flexible_created_key, flexible_lock_key
from cacheprobe.infrastructure.cache.store_protocol import StoreClient

logger = logging.getLogger(__name__)

Generator = Callable[[], "str | Awaitable[str]"]


async def _call_generator(generator: Generator) -> str:
    result = generator()
    if inspect.isawaitable(result):
        result = await result
    return result


class FlexibleCache:
    """Read-through cache with soft-TTL revalidation and at-most-one refresh.

    Attributes:
        lock_seconds: Lock expiry, and how long a waiting caller polls for a
            value another caller is generating.
    """

    def __init__(
        self,
        store: StoreClient,
        *,
        lock_seconds: int = DEFAULT_FLEXIBLE_LOCK_SECONDS,
        poll_interval: float = 0.05,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize over a store.

        Args:
            store: Store adapter used for values, stamps, and locks.
            lock_seconds: Regeneration lock TTL in seconds (> 0).
            poll_interval: Delay between polls while waiting on another generator.
            clock: Wall clock in seconds; stamps are compared against it.
        """
        if lock_seconds <= 0:
            raise ValueError("lock_seconds must be positive")
        self.lock_seconds = lock_seconds
        self._store = store
        self._poll_interval = poll_interval
        self._clock = clock
        self._pending: dict[str, asyncio.Task[None]] = {}
        self._failures: list[BaseException] = []

    async def flexible(self, key: str, ttl: tuple[int, int], generator: Generator) -> str:
        """Return the value for key, generating or revalidating as needed.

        Args:
            key: Cache key.
            ttl: (soft, hard) TTL in seconds; soft must be below hard.
            generator: Sync or async callable producing the value.

        Returns:
            The cached, stale, or freshly generated value.
        """
        soft, hard = ttl
        if not 0 < soft < hard:
            raise ValueError(f"flexible ttl must satisfy 0 < soft < hard, got {ttl!r}")
        created_key = flexible_created_key(key)
        value = await self._store.get(key)
        created = await self._store.get(created_key)
        if value is None or created is None:
            return await self._populate(key, hard, generator)
        if float(created) + soft > self._clock():
            return value
        logger.debug("Flexible STALE: %s (created %s)", key, created)
        self._schedule_refresh(key, created, hard, generator)
        return value

    async def drain(self) -> None:
        """Wait for scheduled background refreshes; re-raise the first failure."""
        tasks = list(self._pending.values())
        self._pending.clear()
        failures, self._failures = self._failures, []
        if tasks:
            results = await asyncio.gather(*tasks, return_exceptions=True)
            failures.extend(r for r in results if isinstance(r, BaseException))
        if failures:
            raise failures[0]

    async def cancel(self) -> None:
        """Cancel refreshes that have not finished. Used when the connection is released."""
        tasks = [task for task in self._pending.values() if not task.done()]
        self._pending.clear()
        self._failures.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.warning("Cancelled %s unfinished flexible refresh(es)", len(tasks))

    @property
    def pending_refreshes(self) -> int:
        return sum(1 for task in self._pending.values() if not task.done())

    async def _store_value(self, key: str, value: str, hard: int) -> None:
        await self._store.set(key, value, ttl=hard)
        await self._store.set(flexible_created_key(key), str(self._clock()), ttl=hard)

    async def _acquire(self, key: str) -> str | None:
        """Take the regeneration lock for key. Returns the owner token or None."""
        owner = uuid.uuid4().hex
        if await self._store.add(flexible_lock_key(key), owner, self.lock_seconds):
            return owner
        return None

    async def _release(self, key: str, owner: str) -> None:
        """Release the lock for key if this owner still holds it."""
        lock_key = flexible_lock_key(key)
        if await self._store.get(lock_key) == owner:
            await self._store.delete(lock_key)

    async def _populate(self, key: str, hard: int, generator: Generator) -> str:
        """Fill a missing value: one caller generates, the others wait for it."""
        owner = await self._acquire(key)
        if owner is not None:
            try:
                value = await self._store.get(key)
                if value is not None and await self._store.get(flexible_created_key(key)):
                    return value
                value = await _call_generator(generator)
                await self._store_value(key, value, hard)
                logger.debug("Flexible MISS filled: %s", key)
                return value
            finally:
                await self._release(key, owner)

        deadline = time.monotonic() + self.lock_seconds
        while time.monotonic() < deadline:
            await asyncio.sleep(self._poll_interval)
            value = await self._store.get(key)
            if value is not None:
                return value
        logger.warning(
            "Flexible wait for %s exceeded %ss; generating without storing",
            key,
            self.lock_seconds,
        )
        return await _call_generator(generator)

    def _schedule_refresh(self, key: str, created: str, hard: int, generator: Generator) -> None:
        task = self._pending.get(key)
        if task is not None:
            if not task.done():
                return
            if not task.cancelled() and task.exception() is not None:
                self._failures.append(task.exception())
        self._pending[key] = asyncio.create_task(
            self._refresh(key, created, hard, generator),
            name=f"flexible-refresh:{key}",
        )

    async def _refresh(self, key: str, created: str, hard: int, generator: Generator) -> None:
        """Regenerate key if the lock is free and the stamp is still the stale one."""
        owner = await self._acquire(key)
        if owner is None:
            logger.debug("Flexible refresh skipped (locked): %s", key)
            return
        try:
            if await self._store.get(flexible_created_key(key)) != created:
                logger.debug("Flexible refresh skipped (already refreshed): %s", key)
                return
            value = await _call_generator(generator)
            await self._store_value(key, value, hard)
            logger.debug("Flexible REFRESHED: %s", key)
        finally:
            await self._release(key, owner)
