"""Formats pattern results as a console summary or JSON.

Pure functions of the result list; patterns appear in execution order.
"""

import json
from collections.abc import Sequence

from cacheprobe.core.constants import REPORT_RULE_WIDTH
from cacheprobe.domain.results import PatternResult, Tally

SUCCESS_MARK = "✓"
FAILURE_MARK = "✗"


def rule(char: str = "=") -> str:
    """Horizontal rule used by the report and the per-pattern banners."""
    return char * REPORT_RULE_WIDTH


def tally(results: Sequence[PatternResult]) -> Tally:
    """Count successful patterns."""
    return Tally(succeeded=sum(1 for r in results if r.succeeded), total=len(results))


def _render_result(result: PatternResult) -> list[str]:
    if result.succeeded and result.success_detail is not None:
        detail = result.success_detail
        lines = [
            f"{SUCCESS_MARK} {result.pattern_name}: SUCCESS",
            f"   Time: {detail.elapsed:.3f}s",
        ]
        if detail.generator_calls is not None:
            lines.append(f"   Callback called: {detail.generator_calls} time(s)")
        if detail.result_value is not None:
            lines.append(f"   Result: {detail.result_value}")
        return lines
    failure = result.failure_detail
    lines = [f"{FAILURE_MARK} {result.pattern_name}: FAILED"]
    if failure is not None:
        lines.append(f"   Error: {failure.category.value}/{failure.kind.value}")
        if failure.operation is not None:
            lines.append(f"   Operation: {failure.operation.value}")
        lines.append(f"   Message: {failure.message}")
    return lines


def render(results: Sequence[PatternResult]) -> str:
    """Human-readable summary with a trailing pass/fail tally line."""
    lines = [rule(), "SUMMARY", rule(), ""]
    for result in results:
        lines.extend(_render_result(result))
        lines.append("")
    counts = tally(results)
    lines.append(f"Total: {counts.succeeded}/{counts.total} patterns succeeded")
    return "\n".join(lines)


def render_json(results: Sequence[PatternResult]) -> str:
    """Machine-readable report: results in order plus the tally."""
    counts = tally(results)
    payload = {
        "results": [r.to_dict() for r in results],
        "succeeded": counts.succeeded,
        "total": counts.total,
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)
