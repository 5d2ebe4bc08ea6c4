"""Domain enumerations for the harness.

Enums represent the fixed sets used by connection specs, probe outcomes,
and the closed error taxonomy.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class TopologyMode(_ValuesMixin, str, Enum):
    """How the store is addressed: one node, or a node set with slot ownership."""

    SINGLE = "single"
    CLUSTER = "cluster"


class ClientVariant(_ValuesMixin, str, Enum):
    """Client implementation used to talk to the store.

    GLIDE is native-driver-backed (Rust core); REDIS_PY speaks RESP over
    sockets from pure Python.
    """

    GLIDE = "glide"
    REDIS_PY = "redis-py"


class Scheme(_ValuesMixin, str, Enum):
    """Transport scheme."""

    TCP = "tcp"
    TLS = "tls"


class ProbeOperation(_ValuesMixin, str, Enum):
    """Probe step executed against a live connection."""

    SET = "set"
    GET = "get"
    DELETE = "delete"
    FLEXIBLE = "flexible"


class PatternStatus(_ValuesMixin, str, Enum):
    """Final status of one connection pattern."""

    SUCCESS = "success"
    FAILURE = "failure"


class ErrorCategory(_ValuesMixin, str, Enum):
    """Stage at which a pattern failed."""

    CONFIG = "config"
    CONNECTION = "connection"
    PROBE = "probe"


class ErrorKind(_ValuesMixin, str, Enum):
    """Closed error taxonomy rendered in the report.

    CONNECTION kinds: TIMEOUT, AUTH_REJECTED, UNREACHABLE, PROTOCOL_MISMATCH.
    PROBE kinds: STORE_REJECTED, VALUE_MISMATCH, UNEXPECTED_EXCEPTION.
    """

    CONFIG_INVALID = "config_invalid"
    TIMEOUT = "timeout"
    AUTH_REJECTED = "auth_rejected"
    UNREACHABLE = "unreachable"
    PROTOCOL_MISMATCH = "protocol_mismatch"
    STORE_REJECTED = "store_rejected"
    VALUE_MISMATCH = "value_mismatch"
    UNEXPECTED_EXCEPTION = "unexpected_exception"


CONNECTION_ERROR_KINDS = frozenset(
    {
        ErrorKind.TIMEOUT,
        ErrorKind.AUTH_REJECTED,
        ErrorKind.UNREACHABLE,
        ErrorKind.PROTOCOL_MISMATCH,
    }
)

PROBE_ERROR_KINDS = frozenset(
    {
        ErrorKind.STORE_REJECTED,
        ErrorKind.VALUE_MISMATCH,
        ErrorKind.UNEXPECTED_EXCEPTION,
    }
)
