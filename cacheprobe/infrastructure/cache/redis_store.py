"""redis-py store adapter (socket-protocol-backed client).

Wraps redis.asyncio.Redis for single-node patterns and
redis.asyncio.cluster.RedisCluster for cluster patterns. Slot routing,
retries, and the RESP parser are redis-py's responsibility.
"""

from __future__ import annotations

import asyncio
import logging
import ssl
from typing import Any

import redis.asyncio as redis
from redis import exceptions as redis_exceptions
from redis.asyncio.cluster import ClusterNode, RedisCluster

from cacheprobe.domain.enums import ErrorKind, TopologyMode
from cacheprobe.domain.exceptions import StoreCommandError
from cacheprobe.domain.value_objects import ConnectionSpec
from cacheprobe.infrastructure.cache.errors import kind_from_message

logger = logging.getLogger(__name__)

# Exceptions the connection factory classifies for this adapter.
CONNECT_ERRORS: tuple[type[BaseException], ...] = (
    redis_exceptions.RedisError,
    redis_exceptions.RedisClusterException,
    OSError,
)

# Errors a store command can raise (cluster routing failures are not RedisError).
COMMAND_ERRORS: tuple[type[BaseException], ...] = (
    redis_exceptions.RedisError,
    redis_exceptions.RedisClusterException,
)


def classify_connect_error(exc: BaseException) -> ErrorKind:
    """Map a redis-py (or socket) failure during connect to a connection error kind.

    Args:
        exc: Exception raised while creating the client or on the first PING.

    Returns:
        TIMEOUT, AUTH_REJECTED, UNREACHABLE, or PROTOCOL_MISMATCH.
    """
    if isinstance(exc, (redis_exceptions.TimeoutError, TimeoutError)):
        return ErrorKind.TIMEOUT
    if isinstance(
        exc,
        (
            redis_exceptions.AuthenticationError,
            redis_exceptions.AuthenticationWrongNumberOfArgsError,
        ),
    ):
        return ErrorKind.AUTH_REJECTED
    if isinstance(exc, ssl.SSLError):
        return ErrorKind.PROTOCOL_MISMATCH
    hint = kind_from_message(str(exc))
    if hint is not None:
        return hint
    if isinstance(exc, (redis_exceptions.ConnectionError, OSError)):
        return ErrorKind.UNREACHABLE
    return ErrorKind.PROTOCOL_MISMATCH


class RedisStore:
    """Async redis-py store over a single-node or cluster client.

    Use RedisStore.connect(spec) to build the client and verify it with a
    PING; call close() when done.
    """

    def __init__(self, client: redis.Redis | RedisCluster, spec: ConnectionSpec) -> None:
        """Initialize with an existing client.

        Args:
            client: redis.asyncio Redis or RedisCluster (or a compatible fake in tests).
            spec: Spec the client was built from.
        """
        self._client = client
        self._spec = spec

    @classmethod
    def build_client(cls, spec: ConnectionSpec) -> redis.Redis | RedisCluster:
        """Create (but do not connect) the redis-py client for spec."""
        common: dict[str, Any] = {
            "username": spec.username,
            "password": spec.password,
            "ssl": spec.use_tls,
            "socket_connect_timeout": spec.connect_timeout,
            "socket_timeout": spec.command_timeout,
            "decode_responses": True,
        }
        if spec.topology is TopologyMode.CLUSTER:
            return RedisCluster(
                startup_nodes=[ClusterNode(node.host, node.port) for node in spec.nodes],
                **common,
            )
        return redis.Redis(
            host=spec.host,
            port=spec.port,
            db=spec.database or 0,
            **common,
        )

    @classmethod
    async def connect(cls, spec: ConnectionSpec) -> RedisStore:
        """Build the client for spec and verify it answers PING.

        Library errors propagate unchanged so the connection factory can
        classify them; the client is closed before they do.
        """
        client = cls.build_client(spec)
        store = cls(client, spec)
        try:
            if isinstance(client, RedisCluster):
                await client.initialize()
            await client.ping()
        except BaseException:
            await store.close()
            raise
        logger.debug("redis-py %s client connected to %s", spec.topology.value, spec.host)
        return store

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except COMMAND_ERRORS as e:
            raise StoreCommandError("PING", str(e)) from e

    async def get(self, key: str) -> str | None:
        """Return the value at key, or None if absent."""
        try:
            value = await self._client.get(key)
        except COMMAND_ERRORS as e:
            raise StoreCommandError("GET", str(e)) from e
        logger.debug("GET %s -> %s", key, "HIT" if value is not None else "MISS")
        return value

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        """SET key with optional TTL (seconds). Returns True when acknowledged."""
        try:
            result = await self._client.set(key, value, ex=ttl)
        except COMMAND_ERRORS as e:
            raise StoreCommandError("SET", str(e)) from e
        logger.debug("SET %s (TTL: %s)", key, ttl)
        return bool(result)

    async def add(self, key: str, value: str, ttl: int) -> bool:
        """SET key NX EX ttl. Returns True when the key was created."""
        try:
            result = await self._client.set(key, value, ex=ttl, nx=True)
        except COMMAND_ERRORS as e:
            raise StoreCommandError("SET", str(e)) from e
        return bool(result)

    async def delete(self, *keys: str) -> int:
        """DEL keys. Returns the number removed."""
        if not keys:
            return 0
        try:
            removed = await self._client.delete(*keys)
        except COMMAND_ERRORS as e:
            raise StoreCommandError("DEL", str(e)) from e
        logger.debug("DEL %s -> %s", keys, removed)
        return int(removed or 0)

    def describe(self) -> dict[str, Any]:
        """Connection diagnostics: client class, topology, endpoint or known nodes."""
        info: dict[str, Any] = {
            "client_class": type(self._client).__name__,
            "topology": self._spec.topology.value,
            "command_timeout": self._spec.command_timeout,
        }
        if isinstance(self._client, RedisCluster):
            info["nodes"] = [node.name for node in self._client.get_nodes()]
        else:
            info["endpoint"] = str(self._spec.nodes[0])
        return info

    async def close(self) -> None:
        """Close the client and its pool. Errors while closing are logged, not raised."""
        try:
            await self._client.aclose()
        except (redis_exceptions.RedisError, OSError, asyncio.TimeoutError) as e:
            logger.warning("redis-py close failed: %s", e)


STORE_CLASS = RedisStore
