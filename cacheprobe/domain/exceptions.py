"""Domain exceptions for the harness.

Every failure a pattern can hit is expressed as one of these exceptions.
Client library errors are translated at the adapter and factory seams, so
the result recorder only ever matches this closed set.
"""

from typing import Any

from cacheprobe.domain.enums import (
    CONNECTION_ERROR_KINDS,
    PROBE_ERROR_KINDS,
    ErrorKind,
    ProbeOperation,
)


class CacheProbeException(Exception):
    """Base exception for all harness errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, kind, operation).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ConfigError(CacheProbeException):
    """Raised when connection options cannot form a valid ConnectionSpec."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional option name.

        Args:
            message: Description of the configuration problem.
            field: Optional option name that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "CONFIG_ERROR", details)

    @property
    def field(self) -> str | None:
        return self.details.get("field")


class StoreConnectionError(CacheProbeException):
    """Raised by the connection factory when a session cannot be established."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        """Initialize with a connection error kind and message.

        Args:
            kind: One of TIMEOUT, AUTH_REJECTED, UNREACHABLE, PROTOCOL_MISMATCH.
            message: Description, usually the client library's message.

        Raises:
            ValueError: If kind is not a connection error kind.
        """
        if kind not in CONNECTION_ERROR_KINDS:
            raise ValueError(f"{kind!r} is not a connection error kind")
        self.kind = kind
        super().__init__(message, "CONNECTION_ERROR", {"kind": kind.value})


class ProbeError(CacheProbeException):
    """Raised when a probe step fails; aborts the remaining steps of the pattern."""

    def __init__(self, operation: ProbeOperation, kind: ErrorKind, message: str) -> None:
        """Initialize with the failing operation, kind, and message.

        Args:
            operation: Probe step that failed.
            kind: One of STORE_REJECTED, VALUE_MISMATCH, UNEXPECTED_EXCEPTION.
            message: Human-readable description.

        Raises:
            ValueError: If kind is not a probe error kind.
        """
        if kind not in PROBE_ERROR_KINDS:
            raise ValueError(f"{kind!r} is not a probe error kind")
        self.operation = operation
        self.kind = kind
        super().__init__(
            message,
            "PROBE_ERROR",
            {"operation": operation.value, "kind": kind.value},
        )


class StoreCommandError(CacheProbeException):
    """Raised by store adapters when the client library rejects a command."""

    def __init__(self, command: str, message: str) -> None:
        super().__init__(message, "STORE_COMMAND_ERROR", {"command": command})
