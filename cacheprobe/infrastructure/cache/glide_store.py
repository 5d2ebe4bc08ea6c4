"""Valkey GLIDE store adapter (native-driver-backed client).

Wraps GlideClient for single-node patterns and GlideClusterClient for
cluster patterns. GLIDE's Rust core owns connection management, slot
routing, and reconnection; values come back as bytes and are decoded here.
"""

from __future__ import annotations

import logging
from typing import Any

from glide import (
    ClosingError,
    ConditionalChange,
    ExpirySet,
    ExpiryType,
    GlideClient,
    GlideClientConfiguration,
    GlideClusterClient,
    GlideClusterClientConfiguration,
    GlideError,
    NodeAddress as GlideNodeAddress,
    RequestError,
    ServerCredentials,
)
from glide import ConnectionError as GlideConnectionError
from glide import TimeoutError as GlideTimeoutError

from cacheprobe.domain.enums import ErrorKind, TopologyMode
from cacheprobe.domain.exceptions import StoreCommandError
from cacheprobe.domain.value_objects import ConnectionSpec
from cacheprobe.infrastructure.cache.errors import kind_from_message

logger = logging.getLogger(__name__)

# Exceptions the connection factory classifies for this adapter.
CONNECT_ERRORS: tuple[type[BaseException], ...] = (GlideError, OSError)


def classify_connect_error(exc: BaseException) -> ErrorKind:
    """Map a GLIDE failure during connect to a connection error kind.

    Args:
        exc: Exception raised by GlideClient.create / GlideClusterClient.create or PING.

    Returns:
        TIMEOUT, AUTH_REJECTED, UNREACHABLE, or PROTOCOL_MISMATCH.
    """
    if isinstance(exc, (GlideTimeoutError, TimeoutError)):
        return ErrorKind.TIMEOUT
    hint = kind_from_message(str(exc))
    if hint is not None:
        return hint
    if isinstance(exc, (GlideConnectionError, ClosingError, OSError)):
        return ErrorKind.UNREACHABLE
    if isinstance(exc, RequestError):
        return ErrorKind.PROTOCOL_MISMATCH
    return ErrorKind.UNREACHABLE


def _decode(value: bytes | str | None) -> str | None:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


class GlideStore:
    """Async GLIDE store over a standalone or cluster client.

    Use GlideStore.connect(spec) to create the client (GLIDE connects
    eagerly) and verify it with a PING; call close() when done.
    """

    def __init__(self, client: GlideClient | GlideClusterClient, spec: ConnectionSpec) -> None:
        self._client = client
        self._spec = spec

    @staticmethod
    def build_configuration(
        spec: ConnectionSpec,
    ) -> GlideClientConfiguration | GlideClusterClientConfiguration:
        """Translate spec into a GLIDE client configuration."""
        addresses = [GlideNodeAddress(node.host, node.port) for node in spec.nodes]
        credentials = None
        if spec.password:
            credentials = ServerCredentials(password=spec.password, username=spec.username)
        request_timeout = int(spec.command_timeout * 1000)
        if spec.topology is TopologyMode.CLUSTER:
            return GlideClusterClientConfiguration(
                addresses=addresses,
                use_tls=spec.use_tls,
                credentials=credentials,
                request_timeout=request_timeout,
            )
        return GlideClientConfiguration(
            addresses=addresses,
            use_tls=spec.use_tls,
            credentials=credentials,
            database_id=spec.database or 0,
            request_timeout=request_timeout,
        )

    @classmethod
    async def connect(cls, spec: ConnectionSpec) -> GlideStore:
        """Create the GLIDE client for spec and verify it answers PING.

        Library errors propagate unchanged so the connection factory can
        classify them.
        """
        config = cls.build_configuration(spec)
        if spec.topology is TopologyMode.CLUSTER:
            client = await GlideClusterClient.create(config)
        else:
            client = await GlideClient.create(config)
        store = cls(client, spec)
        try:
            await client.ping()
        except BaseException:
            await store.close()
            raise
        logger.debug("GLIDE %s client connected to %s", spec.topology.value, spec.host)
        return store

    async def ping(self) -> bool:
        try:
            return _decode(await self._client.ping()) == "PONG"
        except GlideError as e:
            raise StoreCommandError("PING", str(e)) from e

    async def get(self, key: str) -> str | None:
        """Return the value at key, or None if absent."""
        try:
            value = _decode(await self._client.get(key))
        except GlideError as e:
            raise StoreCommandError("GET", str(e)) from e
        logger.debug("GET %s -> %s", key, "HIT" if value is not None else "MISS")
        return value

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        """SET key with optional TTL (seconds). Returns True when acknowledged."""
        expiry = ExpirySet(ExpiryType.SEC, ttl) if ttl else None
        try:
            result = await self._client.set(key, value, expiry=expiry)
        except GlideError as e:
            raise StoreCommandError("SET", str(e)) from e
        logger.debug("SET %s (TTL: %s)", key, ttl)
        return result is not None

    async def add(self, key: str, value: str, ttl: int) -> bool:
        """SET key NX EX ttl. Returns True when the key was created."""
        try:
            result = await self._client.set(
                key,
                value,
                conditional_set=ConditionalChange.ONLY_IF_DOES_NOT_EXIST,
                expiry=ExpirySet(ExpiryType.SEC, ttl),
            )
        except GlideError as e:
            raise StoreCommandError("SET", str(e)) from e
        return result is not None

    async def delete(self, *keys: str) -> int:
        """DEL keys. Returns the number removed."""
        if not keys:
            return 0
        try:
            removed = await self._client.delete(list(keys))
        except GlideError as e:
            raise StoreCommandError("DEL", str(e)) from e
        logger.debug("DEL %s -> %s", keys, removed)
        return int(removed)

    def describe(self) -> dict[str, Any]:
        """Connection diagnostics: client class, topology, seed addresses."""
        return {
            "client_class": type(self._client).__name__,
            "topology": self._spec.topology.value,
            "command_timeout": self._spec.command_timeout,
            "nodes": [str(node) for node in self._spec.nodes],
        }

    async def close(self) -> None:
        """Close the client. Errors while closing are logged, not raised."""
        try:
            await self._client.close()
        except GlideError as e:
            logger.warning("GLIDE close failed: %s", e)


STORE_CLASS = GlideStore
