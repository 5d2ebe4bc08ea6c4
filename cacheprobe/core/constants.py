"""Core constants: connection defaults, key segments, and probe literals.

Single source of truth for defaults used by the spec builder, the settings
adapter, and the cache key builders.
"""

# Connection defaults (used when an option is absent)
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 6379
DEFAULT_SCHEME = "tcp"
DEFAULT_CONNECTION_TYPE = "single"
DEFAULT_CLIENT = "redis-py"
DEFAULT_KEY_PREFIX = "cacheprobe:"
DEFAULT_CONNECT_TIMEOUT = 3.0
DEFAULT_COMMAND_TIMEOUT = 3.0

# Flexible read defaults: soft/hard TTL in seconds, lock wait, concurrent calls
DEFAULT_FLEXIBLE_SOFT_TTL = 30
DEFAULT_FLEXIBLE_HARD_TTL = 60
DEFAULT_FLEXIBLE_LOCK_SECONDS = 5
DEFAULT_FLEXIBLE_CALLS = 5

# Cache key segments
CACHE_KEY_SEP = ":"
CACHE_SEGMENT_CONNECTION = "connection"
CACHE_SEGMENT_FLEXIBLE = "flexible"
CACHE_SEGMENT_CREATED = "created"
CACHE_SEGMENT_LOCK = "lock"

# Basic probe payload
PROBE_TEST_VALUE = "test-value"

# Report layout
REPORT_RULE_WIDTH = 70
