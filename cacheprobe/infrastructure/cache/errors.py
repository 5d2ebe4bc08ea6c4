"""Message-based hints for classifying connection failures.

Client libraries report several distinct negotiation failures through the
same exception class (e.g. redis.ConnectionError for both refused sockets
and TLS handshake errors), so adapters consult these markers after their
type-based checks.
"""

from cacheprobe.domain.enums import ErrorKind

_AUTH_MARKERS = (
    "wrongpass",
    "noauth",
    "invalid password",
    "invalid username-password",
    "authentication required",
    "authentication failed",
    "auth failed",
)

_UNREACHABLE_MARKERS = (
    "connection refused",
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "no route to host",
    "network is unreachable",
    "cannot be connected",
    "connection reset",
)

_TLS_MARKERS = (
    "[ssl",
    "ssl:",
    "sslerror",
    "certificate",
    "handshake",
    "wrong version number",
    "tlsv1",
    "unexpected eof",
)

_PROTOCOL_MARKERS = (
    "protocol error",
    "cluster support disabled",
    "cluster mode is not enabled",
    "unknown command 'cluster'",
    "unknown command `cluster`",
    "unknown command 'hello'",
    "unknown command `hello`",
)


def kind_from_message(message: str) -> ErrorKind | None:
    """Return the connection error kind suggested by an error message, or None.

    Auth markers win over everything else; unreachable markers are checked
    before TLS markers because refusal messages embed the host name.
    """
    text = message.lower()
    if any(marker in text for marker in _AUTH_MARKERS):
        return ErrorKind.AUTH_REJECTED
    if any(marker in text for marker in _UNREACHABLE_MARKERS):
        return ErrorKind.UNREACHABLE
    if any(marker in text for marker in _TLS_MARKERS):
        return ErrorKind.PROTOCOL_MISMATCH
    if any(marker in text for marker in _PROTOCOL_MARKERS):
        return ErrorKind.PROTOCOL_MISMATCH
    return None
