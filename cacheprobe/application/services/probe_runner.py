"""Runs the ordered correctness probes against a live store handle.

Order: SET, GET (exact match), DELETE (removal reported), then the flexible
read probe. The first failing step raises ProbeError and the remaining
steps are skipped.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from cacheprobe.core.constants import (
    DEFAULT_FLEXIBLE_CALLS,
    DEFAULT_FLEXIBLE_HARD_TTL,
    DEFAULT_FLEXIBLE_LOCK_SECONDS,
    DEFAULT_FLEXIBLE_SOFT_TTL,
    PROBE_TEST_VALUE,
)
from cacheprobe.domain.enums import ErrorKind, ProbeOperation
from cacheprobe.domain.exceptions import ProbeError, StoreCommandError
from cacheprobe.domain.results import ProbeOutcome
from cacheprobe.infrastructure.cache.keys import (
    connection_probe_key,
    flexible_created_key,
    flexible_lock_key,
    flexible_probe_key,
)

if TYPE_CHECKING:
    from cacheprobe.core.config import Settings
    from cacheprobe.infrastructure.cache.connection_factory import StoreHandle

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class FlexibleProbeSettings:
    """Parameters of the flexible-read probe."""

    soft_ttl: int = DEFAULT_FLEXIBLE_SOFT_TTL
    hard_ttl: int = DEFAULT_FLEXIBLE_HARD_TTL
    lock_seconds: int = DEFAULT_FLEXIBLE_LOCK_SECONDS
    calls: int = DEFAULT_FLEXIBLE_CALLS

    def __post_init__(self) -> None:
        if not 0 < self.soft_ttl < self.hard_ttl:
            raise ValueError(
                f"flexible TTLs must satisfy 0 < soft < hard, got {self.soft_ttl}/{self.hard_ttl}"
            )
        if self.calls < 1:
            raise ValueError("flexible probe needs at least one call")

    @classmethod
    def from_settings(cls, settings: Settings) -> FlexibleProbeSettings:
        return cls(
            soft_ttl=settings.flexible_soft_ttl,
            hard_ttl=settings.flexible_hard_ttl,
            lock_seconds=settings.flexible_lock_seconds,
            calls=settings.flexible_calls,
        )


async def _guarded(operation: ProbeOperation, step: Callable[[], Awaitable[T]]) -> T:
    """Run one store step, turning failures into ProbeError for operation."""
    try:
        return await step()
    except ProbeError:
        raise
    except StoreCommandError as e:
        raise ProbeError(operation, ErrorKind.STORE_REJECTED, e.message) from e
    except Exception as e:
        raise ProbeError(
            operation,
            ErrorKind.UNEXPECTED_EXCEPTION,
            f"{type(e).__name__}: {e}",
        ) from e


class ProbeRunner:
    """Executes the probe sequence for one pattern.

    Holds the flexible settings and the token source so tests can pin keys.
    """

    def __init__(
        self,
        flexible_settings: FlexibleProbeSettings | None = None,
        token_factory: Callable[[], str] | None = None,
    ) -> None:
        self.flexible_settings = flexible_settings or FlexibleProbeSettings()
        self._token_factory = token_factory or (lambda: uuid.uuid4().hex[:16])

    async def run(self, handle: StoreHandle, key_namespace: str) -> list[ProbeOutcome]:
        """Run SET, GET, DELETE, and FLEXIBLE in order.

        Args:
            handle: Live store handle (owned by the caller).
            key_namespace: Prefix for probe keys (e.g. 'cacheprobe:').

        Returns:
            One successful ProbeOutcome per step, in execution order.

        Raises:
            ProbeError: On the first failing step.
        """
        token = self._token_factory()
        outcomes = await self.run_basic(handle, connection_probe_key(key_namespace, token))
        outcomes.append(
            await self.run_flexible(handle, flexible_probe_key(key_namespace, token))
        )
        return outcomes

    async def run_basic(self, handle: StoreHandle, key: str) -> list[ProbeOutcome]:
        """SET a fixed value, GET it back, DELETE it."""
        outcomes: list[ProbeOutcome] = []

        started = time.perf_counter()
        stored = await _guarded(ProbeOperation.SET, lambda: handle.set(key, PROBE_TEST_VALUE))
        if not stored:
            raise ProbeError(
                ProbeOperation.SET, ErrorKind.STORE_REJECTED, f"SET {key} was not acknowledged"
            )
        outcomes.append(ProbeOutcome(ProbeOperation.SET, True, time.perf_counter() - started))
        logger.info("  SET: SUCCESS")

        started = time.perf_counter()
        value = await _guarded(ProbeOperation.GET, lambda: handle.get(key))
        if value != PROBE_TEST_VALUE:
            raise ProbeError(
                ProbeOperation.GET,
                ErrorKind.VALUE_MISMATCH,
                f"GET {key} returned {value!r}, expected {PROBE_TEST_VALUE!r}",
            )
        outcomes.append(
            ProbeOutcome(ProbeOperation.GET, True, time.perf_counter() - started, observed_value=value)
        )
        logger.info("  GET: SUCCESS (value: %s)", value)

        started = time.perf_counter()
        removed = await _guarded(ProbeOperation.DELETE, lambda: handle.delete(key))
        if removed < 1:
            raise ProbeError(
                ProbeOperation.DELETE,
                ErrorKind.STORE_REJECTED,
                f"DEL {key} reported no removal",
            )
        outcomes.append(ProbeOutcome(ProbeOperation.DELETE, True, time.perf_counter() - started))
        logger.info("  DEL: SUCCESS")
        return outcomes

    async def run_flexible(self, handle: StoreHandle, key: str) -> ProbeOutcome:
        """Issue concurrent flexible reads and verify a single generator run."""
        settings = self.flexible_settings
        counter = 0

        def generate() -> str:
            nonlocal counter
            counter += 1
            return f"Generated value #{counter}"

        async def read_all() -> list[str]:
            ttl = (settings.soft_ttl, settings.hard_ttl)
            values = await asyncio.gather(
                *(handle.flexible(key, ttl, generate) for _ in range(settings.calls))
            )
            await handle.flexible_cache.drain()
            return list(values)

        started = time.perf_counter()
        try:
            values = await _guarded(ProbeOperation.FLEXIBLE, read_all)
        finally:
            await self._cleanup_flexible(handle, key)
        elapsed = time.perf_counter() - started

        if len(set(values)) != 1:
            raise ProbeError(
                ProbeOperation.FLEXIBLE,
                ErrorKind.VALUE_MISMATCH,
                f"flexible reads disagreed: {sorted(set(values))!r}",
            )
        if counter != 1:
            raise ProbeError(
                ProbeOperation.FLEXIBLE,
                ErrorKind.VALUE_MISMATCH,
                f"generator ran {counter} times for {settings.calls} calls, expected exactly 1",
            )
        logger.info("  FLEXIBLE: SUCCESS (result: %s, callback called %s time(s))", values[0], counter)
        return ProbeOutcome(
            ProbeOperation.FLEXIBLE,
            True,
            elapsed,
            observed_value=values[0],
            generator_calls=counter,
        )

    async def _cleanup_flexible(self, handle: StoreHandle, key: str) -> None:
        """Remove flexible probe keys; a failure here is logged, not raised."""
        try:
            await handle.delete(key, flexible_created_key(key), flexible_lock_key(key))
        except StoreCommandError as e:
            logger.warning("Could not remove flexible probe keys for %s: %s", key, e.message)


async def run_probes(
    handle: StoreHandle,
    key_namespace: str,
    *,
    flexible_settings: FlexibleProbeSettings | None = None,
) -> list[ProbeOutcome]:
    """Run the full probe sequence with a fresh token. See ProbeRunner.run."""
    return await ProbeRunner(flexible_settings).run(handle, key_namespace)
