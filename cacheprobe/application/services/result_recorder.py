"""Turns probe outcomes or pattern exceptions into PatternResult.

Pure data transformation. Exceptions are matched against the closed
taxonomy; anything outside it becomes UNEXPECTED_EXCEPTION so no opaque
library exception type leaks into the report.
"""

from collections.abc import Sequence

from cacheprobe.domain.enums import ErrorCategory, ErrorKind, PatternStatus, ProbeOperation
from cacheprobe.domain.exceptions import ConfigError, ProbeError, StoreConnectionError
from cacheprobe.domain.results import FailureDetail, PatternResult, ProbeOutcome, SuccessDetail


def classify_failure(error: BaseException) -> FailureDetail:
    """Map an exception raised inside a pattern to a FailureDetail.

    Args:
        error: Exception caught at the pattern boundary.

    Returns:
        FailureDetail with category, kind, message, and operation (probe errors).
    """
    if isinstance(error, ConfigError):
        return FailureDetail(ErrorCategory.CONFIG, ErrorKind.CONFIG_INVALID, error.message)
    if isinstance(error, StoreConnectionError):
        return FailureDetail(ErrorCategory.CONNECTION, error.kind, error.message)
    if isinstance(error, ProbeError):
        return FailureDetail(ErrorCategory.PROBE, error.kind, error.message, error.operation)
    message = str(error)
    text = f"{type(error).__name__}: {message}" if message else type(error).__name__
    return FailureDetail(ErrorCategory.PROBE, ErrorKind.UNEXPECTED_EXCEPTION, text)


def _from_outcomes(pattern_name: str, outcomes: Sequence[ProbeOutcome]) -> PatternResult:
    failed = next((o for o in outcomes if not o.success), None)
    if failed is not None:
        return PatternResult(
            pattern_name=pattern_name,
            status=PatternStatus.FAILURE,
            failure_detail=FailureDetail(
                ErrorCategory.PROBE,
                ErrorKind.STORE_REJECTED,
                f"{failed.operation.value} probe did not succeed",
                failed.operation,
            ),
            outcomes=tuple(outcomes),
        )
    flexible = next(
        (o for o in reversed(outcomes) if o.operation is ProbeOperation.FLEXIBLE), None
    )
    last = flexible or (outcomes[-1] if outcomes else None)
    return PatternResult(
        pattern_name=pattern_name,
        status=PatternStatus.SUCCESS,
        success_detail=SuccessDetail(
            result_value=last.observed_value if last else None,
            elapsed=sum(o.elapsed for o in outcomes),
            generator_calls=flexible.generator_calls if flexible else None,
        ),
        outcomes=tuple(outcomes),
    )


def record(
    pattern_name: str,
    outcome: Sequence[ProbeOutcome] | BaseException,
) -> PatternResult:
    """Build the PatternResult for one pattern.

    Args:
        pattern_name: Display name of the pattern.
        outcome: Probe outcomes on success, or the exception that ended the pattern.

    Returns:
        Immutable PatternResult.
    """
    if isinstance(outcome, BaseException):
        return PatternResult(
            pattern_name=pattern_name,
            status=PatternStatus.FAILURE,
            failure_detail=classify_failure(outcome),
        )
    return _from_outcomes(pattern_name, outcome)
