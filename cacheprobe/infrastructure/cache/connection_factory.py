"""Connection factory: ConnectionSpec in, live StoreHandle out.

Selects the adapter for the spec's client variant, bounds the connect step
with spec.connect_timeout, and translates library failures into
StoreConnectionError with a closed kind. Nothing here is process-wide: each
call builds its own client from the spec it is given.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from types import ModuleType
from typing import Any

from cacheprobe.core.constants import DEFAULT_FLEXIBLE_LOCK_SECONDS
from cacheprobe.domain.enums import ClientVariant, ErrorKind
from cacheprobe.domain.exceptions import StoreConnectionError
from cacheprobe.domain.value_objects import ConnectionSpec
from cacheprobe.infrastructure.cache.flexible import FlexibleCache, Generator
from cacheprobe.infrastructure.cache.store_protocol import StoreClient

logger = logging.getLogger(__name__)


class StoreHandle:
    """Live connection capability handed to the probe runner.

    Exposes set/get/delete and the flexible read; owns the store adapter and
    closes it in close().
    """

    def __init__(self, store: StoreClient, spec: ConnectionSpec, flexible_cache: FlexibleCache) -> None:
        self.store = store
        self.spec = spec
        self.flexible_cache = flexible_cache
        self._closed = False

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        return await self.store.set(key, value, ttl=ttl)

    async def get(self, key: str) -> str | None:
        return await self.store.get(key)

    async def delete(self, *keys: str) -> int:
        return await self.store.delete(*keys)

    async def flexible(self, key: str, ttl: tuple[int, int], generator: Generator) -> str:
        return await self.flexible_cache.flexible(key, ttl, generator)

    def describe(self) -> dict[str, Any]:
        return self.store.describe()

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        """Cancel unfinished refreshes and close the store. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        try:
            await self.flexible_cache.cancel()
        finally:
            await self.store.close()
        logger.debug("Store handle closed (%s, %s)", self.spec.client.value, self.spec.topology.value)


def _adapter_module(client: ClientVariant) -> ModuleType:
    """Return the adapter module for a client variant (imported on first use)."""
    if client is ClientVariant.GLIDE:
        from cacheprobe.infrastructure.cache import glide_store

        return glide_store
    from cacheprobe.infrastructure.cache import redis_store

    return redis_store


async def connect(
    spec: ConnectionSpec,
    *,
    lock_seconds: int = DEFAULT_FLEXIBLE_LOCK_SECONDS,
) -> StoreHandle:
    """Open a session described by spec.

    Args:
        spec: Validated connection spec.
        lock_seconds: Lock TTL for the handle's flexible cache.

    Returns:
        A StoreHandle; the caller must close() it (or use open_store()).

    Raises:
        StoreConnectionError: Timeout, auth rejection, unreachable node, or
            protocol/TLS mismatch.
    """
    adapter = _adapter_module(spec.client)
    store_cls = adapter.STORE_CLASS
    target = ", ".join(str(node) for node in spec.nodes)
    logger.info(
        "Connecting %s (%s, %s) to %s",
        spec.client.value,
        spec.topology.value,
        spec.scheme.value,
        target,
    )
    try:
        store = await asyncio.wait_for(store_cls.connect(spec), timeout=spec.connect_timeout)
    except TimeoutError as e:
        raise StoreConnectionError(
            ErrorKind.TIMEOUT,
            f"Connection to {target} did not complete within {spec.connect_timeout}s",
        ) from e
    except adapter.CONNECT_ERRORS as e:
        kind = adapter.classify_connect_error(e)
        logger.warning("Connection to %s failed (%s): %s", target, kind.value, e)
        raise StoreConnectionError(kind, str(e) or type(e).__name__) from e
    return StoreHandle(store, spec, FlexibleCache(store, lock_seconds=lock_seconds))


@asynccontextmanager
async def open_store(
    spec: ConnectionSpec,
    *,
    lock_seconds: int = DEFAULT_FLEXIBLE_LOCK_SECONDS,
) -> AsyncIterator[StoreHandle]:
    """Scoped connection: the handle is closed on every exit path."""
    handle = await connect(spec, lock_seconds=lock_seconds)
    try:
        yield handle
    finally:
        await handle.close()
