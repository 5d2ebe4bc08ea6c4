"""Probe outcomes and per-pattern results.

ProbeOutcome is produced by the probe runner and consumed immediately by
the result recorder. PatternResult is created once per pattern and is
read-only afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from cacheprobe.domain.enums import ErrorCategory, ErrorKind, PatternStatus, ProbeOperation


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of one probe step."""

    operation: ProbeOperation
    success: bool
    elapsed: float
    observed_value: str | None = None
    generator_calls: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation.value,
            "success": self.success,
            "elapsed": round(self.elapsed, 3),
            "observed_value": self.observed_value,
            "generator_calls": self.generator_calls,
        }


@dataclass(frozen=True)
class SuccessDetail:
    """Detail for a successful pattern: flexible result, total time, generator runs."""

    result_value: str | None
    elapsed: float
    generator_calls: int | None = None


@dataclass(frozen=True)
class FailureDetail:
    """Detail for a failed pattern, classified into the closed taxonomy."""

    category: ErrorCategory
    kind: ErrorKind
    message: str
    operation: ProbeOperation | None = None


@dataclass(frozen=True)
class PatternResult:
    """Outcome of one connection pattern."""

    pattern_name: str
    status: PatternStatus
    success_detail: SuccessDetail | None = None
    failure_detail: FailureDetail | None = None
    outcomes: tuple[ProbeOutcome, ...] = ()

    def __post_init__(self) -> None:
        if self.status is PatternStatus.SUCCESS and self.success_detail is None:
            raise ValueError("Successful PatternResult requires success_detail")
        if self.status is PatternStatus.FAILURE and self.failure_detail is None:
            raise ValueError("Failed PatternResult requires failure_detail")

    @property
    def succeeded(self) -> bool:
        return self.status is PatternStatus.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        data: dict[str, Any] = {
            "pattern": self.pattern_name,
            "status": self.status.value,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }
        if self.success_detail is not None:
            data["result"] = self.success_detail.result_value
            data["time"] = round(self.success_detail.elapsed, 3)
            data["generator_calls"] = self.success_detail.generator_calls
        if self.failure_detail is not None:
            data["error_category"] = self.failure_detail.category.value
            data["error_kind"] = self.failure_detail.kind.value
            data["error_message"] = self.failure_detail.message
            data["operation"] = (
                self.failure_detail.operation.value
                if self.failure_detail.operation
                else None
            )
        return data


@dataclass(frozen=True)
class Tally:
    """Pass/fail count over a result list."""

    succeeded: int
    total: int

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def all_passed(self) -> bool:
        return self.succeeded == self.total
