"""Shared utilities: telemetry (logging) and datetime helpers. No harness logic."""
