"""Cache key builders. Single place for probe key format.

Probe tokens are wrapped in a cluster hash tag so a flexible value, its
creation stamp, and its lock land in the same slot. Tokens must not contain
braces or CACHE_KEY_SEP.
"""

from cacheprobe.core.constants import (
    CACHE_KEY_SEP,
    CACHE_SEGMENT_CONNECTION,
    CACHE_SEGMENT_CREATED,
    CACHE_SEGMENT_FLEXIBLE,
    CACHE_SEGMENT_LOCK,
)

_FORBIDDEN_TOKEN_CHARS = (CACHE_KEY_SEP, "{", "}")


def _validate_token(token: str) -> None:
    """Raise ValueError if token is empty or contains a separator or brace.

    Args:
        token: Per-run probe token.

    Raises:
        ValueError: If token is unusable in a key.
    """
    if not token:
        raise ValueError("Cache key token must be a non-empty string")
    for char in _FORBIDDEN_TOKEN_CHARS:
        if char in token:
            raise ValueError(f"Cache key token {token!r} must not contain {char!r}")


def connection_probe_key(namespace: str, token: str) -> str:
    """Key for the set/get/delete probe."""
    _validate_token(token)
    return f"{namespace}{CACHE_SEGMENT_CONNECTION}{CACHE_KEY_SEP}{{{token}}}"


def flexible_probe_key(namespace: str, token: str) -> str:
    """Key for the flexible-read probe value."""
    _validate_token(token)
    return f"{namespace}{CACHE_SEGMENT_FLEXIBLE}{CACHE_KEY_SEP}{{{token}}}"


def flexible_created_key(key: str) -> str:
    """Key holding the creation stamp of a flexible value."""
    return f"{CACHE_SEGMENT_FLEXIBLE}{CACHE_KEY_SEP}{CACHE_SEGMENT_CREATED}{CACHE_KEY_SEP}{key}"


def flexible_lock_key(key: str) -> str:
    """Key of the regeneration lock for a flexible value."""
    return f"{CACHE_SEGMENT_FLEXIBLE}{CACHE_KEY_SEP}{CACHE_SEGMENT_LOCK}{CACHE_KEY_SEP}{key}"
