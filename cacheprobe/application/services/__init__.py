"""Application services: spec building, probing, recording, rendering, and the harness."""

from cacheprobe.application.services.harness import (
    DEFAULT_PATTERNS,
    Harness,
    PatternDefinition,
    run_patterns,
)
from cacheprobe.application.services.probe_runner import (
    FlexibleProbeSettings,
    ProbeRunner,
    run_probes,
)
from cacheprobe.application.services.report_renderer import render, render_json, tally
from cacheprobe.application.services.result_recorder import classify_failure, record
from cacheprobe.application.services.spec_builder import build_connection_spec

__all__ = [
    "DEFAULT_PATTERNS",
    "FlexibleProbeSettings",
    "Harness",
    "PatternDefinition",
    "ProbeRunner",
    "build_connection_spec",
    "classify_failure",
    "record",
    "render",
    "render_json",
    "run_patterns",
    "run_probes",
    "tally",
]
