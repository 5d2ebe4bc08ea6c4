"""Domain layer: enums, value objects, results, and exceptions.

No dependencies on client libraries. Used by application and
infrastructure layers.
"""

from cacheprobe.domain.enums import (
    ClientVariant,
    ErrorCategory,
    ErrorKind,
    PatternStatus,
    ProbeOperation,
    Scheme,
    TopologyMode,
)
from cacheprobe.domain.exceptions import (
    CacheProbeException,
    ConfigError,
    ProbeError,
    StoreCommandError,
    StoreConnectionError,
)
from cacheprobe.domain.results import (
    FailureDetail,
    PatternResult,
    ProbeOutcome,
    SuccessDetail,
    Tally,
)
from cacheprobe.domain.value_objects import ConnectionSpec, NodeAddress

__all__ = [
    # Enums
    "ClientVariant",
    "ErrorCategory",
    "ErrorKind",
    "PatternStatus",
    "ProbeOperation",
    "Scheme",
    "TopologyMode",
    # Exceptions
    "CacheProbeException",
    "ConfigError",
    "ProbeError",
    "StoreCommandError",
    "StoreConnectionError",
    # Results
    "FailureDetail",
    "PatternResult",
    "ProbeOutcome",
    "SuccessDetail",
    "Tally",
    # Value objects
    "ConnectionSpec",
    "NodeAddress",
]
