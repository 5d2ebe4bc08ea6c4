"""Cache: store adapters, flexible reads, key builders, and the connection factory.

Adapter modules (redis_store, glide_store) are imported on first use by the
connection factory, so only the selected client library has to load.
"""

from cacheprobe.infrastructure.cache.connection_factory import (
    StoreHandle,
    connect,
    open_store,
)
from cacheprobe.infrastructure.cache.flexible import FlexibleCache
from cacheprobe.infrastructure.cache.keys import (
    connection_probe_key,
    flexible_created_key,
    flexible_lock_key,
    flexible_probe_key,
)
from cacheprobe.infrastructure.cache.store_protocol import StoreClient

__all__ = [
    "FlexibleCache",
    "StoreClient",
    "StoreHandle",
    "connect",
    "connection_probe_key",
    "flexible_created_key",
    "flexible_lock_key",
    "flexible_probe_key",
    "open_store",
]
