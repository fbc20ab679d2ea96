"""Reporter wrapping an external metrics implementation."""

from __future__ import annotations

from typing import Any, Sequence

from mortar.monitoring.metrics import MortarMetrics
from mortar.monitoring.registry import ExternalRegistry
from mortar.monitoring.types import (
    Counter,
    Gauge,
    Histogram,
    MonitorConfig,
    Tags,
    Timer,
)


class MortarReporter:
    """Adds default tags and context extractors to an external reporter.

    Tag values may also come from the context of each call through the
    configured extractors, which suits per-request values such as a canary
    release marker. Avoid high-cardinality values such as user ids.
    """

    def __init__(self, config: MonitorConfig) -> None:
        self.config = config
        self.external_metrics = config.reporter.metrics()
        self.registry = ExternalRegistry(self.external_metrics)

    def connect(self, ctx: Any) -> Any:
        """Connect the external reporter."""
        return self.config.reporter.connect(ctx)

    def close(self, ctx: Any) -> Any:
        """Close the external reporter."""
        return self.config.reporter.close(ctx)

    def metrics(self) -> "MortarReporter":
        """Return the metrics factory, which is this reporter."""
        return self

    def _new_metrics(self) -> MortarMetrics:
        return MortarMetrics(self.registry, self.config).with_tags(self.config.tags)

    def counter(self, name: str, desc: str) -> Counter:
        """Return a counter carrying the default tags."""
        return self._new_metrics().counter(name, desc)

    def gauge(self, name: str, desc: str) -> Gauge:
        """Return a gauge carrying the default tags."""
        return self._new_metrics().gauge(name, desc)

    def histogram(
        self, name: str, desc: str, buckets: Sequence[float] | None
    ) -> Histogram:
        """Return a histogram carrying the default tags."""
        return self._new_metrics().histogram(name, desc, buckets)

    def timer(self, name: str, desc: str) -> Timer:
        """Return a timer carrying the default tags."""
        return self._new_metrics().timer(name, desc)

    def with_tags(self, tags: Tags | None) -> MortarMetrics:
        """Return a metrics factory with the default tags and then ``tags``."""
        return self._new_metrics().with_tags(tags)