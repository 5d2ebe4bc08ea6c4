"""Report renderer: summary text, JSON, and tally."""

import json

from cacheprobe.application.services.report_renderer import render, render_json, rule, tally
from cacheprobe.domain.enums import ErrorCategory, ErrorKind, PatternStatus, ProbeOperation
from cacheprobe.domain.results import FailureDetail, PatternResult, SuccessDetail, Tally


def _success(name: str) -> PatternResult:
    return PatternResult(
        name,
        PatternStatus.SUCCESS,
        success_detail=SuccessDetail("Generated value #1", 0.0123, 1),
    )


def _failure(name: str) -> PatternResult:
    return PatternResult(
        name,
        PatternStatus.FAILURE,
        failure_detail=FailureDetail(
            ErrorCategory.CONNECTION, ErrorKind.UNREACHABLE, "Connection refused"
        ),
    )


def _results() -> list[PatternResult]:
    return [
        _success("Pattern 1"),
        _success("Pattern 2"),
        _failure("Pattern 3"),
        _success("Pattern 4"),
    ]


def test_tally_three_of_four() -> None:
    assert tally(_results()) == Tally(succeeded=3, total=4)


def test_tally_empty() -> None:
    assert tally([]) == Tally(0, 0)


def test_render_lists_patterns_in_order_with_tally() -> None:
    text = render(_results())
    positions = [text.index(f"Pattern {n}:") for n in (1, 2, 3, 4)]
    assert positions == sorted(positions)
    assert text.startswith(rule())
    assert text.endswith("Total: 3/4 patterns succeeded")


def test_render_success_lines() -> None:
    text = render([_success("Pattern 1")])
    assert "✓ Pattern 1: SUCCESS" in text
    assert "   Time: 0.012s" in text
    assert "   Callback called: 1 time(s)" in text
    assert "   Result: Generated value #1" in text


def test_render_failure_lines() -> None:
    failure = PatternResult(
        "Pattern 2",
        PatternStatus.FAILURE,
        failure_detail=FailureDetail(
            ErrorCategory.PROBE, ErrorKind.VALUE_MISMATCH, "GET returned None", ProbeOperation.GET
        ),
    )
    text = render([failure])
    assert "✗ Pattern 2: FAILED" in text
    assert "   Error: probe/value_mismatch" in text
    assert "   Operation: get" in text
    assert "   Message: GET returned None" in text
    assert text.endswith("Total: 0/1 patterns succeeded")


def test_render_json() -> None:
    payload = json.loads(render_json(_results()))
    assert payload["succeeded"] == 3
    assert payload["total"] == 4
    assert [r["pattern"] for r in payload["results"]] == [
        "Pattern 1",
        "Pattern 2",
        "Pattern 3",
        "Pattern 4",
    ]
    assert payload["results"][2]["error_kind"] == "unreachable"
    assert payload["results"][2]["error_category"] == "connection"
