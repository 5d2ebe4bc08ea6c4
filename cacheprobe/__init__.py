"""Cache connection verification harness for Redis/Valkey-compatible stores."""

__version__ = "1.0.0"
