"""Sequential per-pattern driver.

Each pattern merges its client and connection type over the base options,
builds its own ConnectionSpec, opens a scoped store, runs the probes, and
records the result. Patterns never share state, and any exception stops at
the pattern boundary so later patterns still run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass

from cacheprobe.application.services.probe_runner import FlexibleProbeSettings, ProbeRunner
from cacheprobe.application.services.report_renderer import rule
from cacheprobe.application.services.result_recorder import record
from cacheprobe.application.services.spec_builder import build_connection_spec
from cacheprobe.domain.enums import ClientVariant, TopologyMode
from cacheprobe.domain.exceptions import CacheProbeException
from cacheprobe.domain.results import PatternResult
from cacheprobe.domain.value_objects import ConnectionSpec
from cacheprobe.infrastructure.cache.connection_factory import StoreHandle, open_store

logger = logging.getLogger(__name__)

StoreOpener = Callable[..., AbstractAsyncContextManager[StoreHandle]]


@dataclass(frozen=True)
class PatternDefinition:
    """One client x topology combination to exercise."""

    name: str
    client: str
    connection_type: str

    def options(self, base_options: Mapping[str, str]) -> dict[str, str]:
        """Base options with this pattern's client and connection type applied."""
        return {
            **base_options,
            "client": self.client,
            "connection_type": self.connection_type,
        }


DEFAULT_PATTERNS: tuple[PatternDefinition, ...] = (
    PatternDefinition(
        "Pattern 1: glide + single (single node)",
        ClientVariant.GLIDE.value,
        TopologyMode.SINGLE.value,
    ),
    PatternDefinition(
        "Pattern 2: glide + cluster (cluster mode)",
        ClientVariant.GLIDE.value,
        TopologyMode.CLUSTER.value,
    ),
    PatternDefinition(
        "Pattern 3: redis-py + single (single node)",
        ClientVariant.REDIS_PY.value,
        TopologyMode.SINGLE.value,
    ),
    PatternDefinition(
        "Pattern 4: redis-py + cluster (cluster mode)",
        ClientVariant.REDIS_PY.value,
        TopologyMode.CLUSTER.value,
    ),
)


def _log_configuration(spec: ConnectionSpec) -> None:
    logger.info("Configuration:")
    for name, value in spec.describe().items():
        logger.info("  %s: %s", name, value)


class Harness:
    """Runs patterns one after another against the same base options."""

    def __init__(
        self,
        base_options: Mapping[str, str],
        *,
        flexible_settings: FlexibleProbeSettings | None = None,
        opener: StoreOpener = open_store,
        runner: ProbeRunner | None = None,
    ) -> None:
        """Initialize the harness.

        Args:
            base_options: Connection options shared by every pattern.
            flexible_settings: Flexible probe parameters (defaults apply when None).
            opener: Scoped connection factory (open_store; replaceable in tests).
            runner: Probe runner; built from flexible_settings when None.
        """
        self._base_options = dict(base_options)
        self._flexible_settings = flexible_settings or FlexibleProbeSettings()
        self._opener = opener
        self._runner = runner or ProbeRunner(self._flexible_settings)

    async def run_pattern(self, pattern: PatternDefinition) -> PatternResult:
        """Build, connect, probe, release, and record one pattern."""
        logger.info(rule())
        logger.info(pattern.name)
        logger.info(rule())
        try:
            spec = build_connection_spec(pattern.options(self._base_options))
            _log_configuration(spec)
            async with self._opener(spec, lock_seconds=self._flexible_settings.lock_seconds) as handle:
                logger.info("Connection diagnostics: %s", handle.describe())
                outcomes = await self._runner.run(handle, spec.key_prefix)
        except CacheProbeException as e:
            logger.warning("%s FAILED (%s): %s", pattern.name, e.error_code, e.message)
            return record(pattern.name, e)
        except Exception as e:
            logger.exception("%s FAILED with unexpected %s", pattern.name, type(e).__name__)
            return record(pattern.name, e)
        logger.info("%s SUCCESS", pattern.name)
        return record(pattern.name, outcomes)

    async def run(self, patterns: Sequence[PatternDefinition] = DEFAULT_PATTERNS) -> list[PatternResult]:
        """Run patterns strictly in order; never stops early."""
        results: list[PatternResult] = []
        for pattern in patterns:
            results.append(await self.run_pattern(pattern))
        return results


async def run_patterns(
    patterns: Sequence[PatternDefinition],
    base_options: Mapping[str, str],
    *,
    flexible_settings: FlexibleProbeSettings | None = None,
) -> list[PatternResult]:
    """Run patterns sequentially against base_options. See Harness."""
    harness = Harness(base_options, flexible_settings=flexible_settings)
    return await harness.run(patterns)
