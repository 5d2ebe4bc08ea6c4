"""Store protocol implemented by every client adapter."""

from typing import Any, Protocol


class StoreClient(Protocol):
    """Protocol for key-value store adapters (redis-py, GLIDE).

    Values are text. Adapters raise StoreCommandError when the client
    library rejects a command.
    """

    async def ping(self) -> bool:
        """Return True if the store answered PING."""
        ...

    async def get(self, key: str) -> str | None:
        """Return the stored value or None."""
        ...

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        """Store value with optional TTL in seconds. Returns True if acknowledged."""
        ...

    async def add(self, key: str, value: str, ttl: int) -> bool:
        """Store value only if key is absent (SET NX). Returns True if stored."""
        ...

    async def delete(self, *keys: str) -> int:
        """Remove keys. Returns the number of keys removed."""
        ...

    def describe(self) -> dict[str, Any]:
        """Return connection diagnostics (client class, topology, nodes)."""
        ...

    async def close(self) -> None:
        """Release the underlying connection(s)."""
        ...
