"""Metric factory that attaches default, custom and context tags."""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from mortar.monitoring.noop import NoopMetric, NoopTimer
from mortar.monitoring.registry import ExternalRegistry
from mortar.monitoring.types import (
    Counter,
    ErrorHandler,
    Gauge,
    Histogram,
    MonitorConfig,
    Tags,
    TagsMetric,
    Timer,
)

_logger = logging.getLogger(__name__)


def _log_error(err: BaseException) -> None:
    _logger.warning("monitoring error, %s", err)


class MortarMetrics(TagsMetric):
    """Creates tag-aware metrics through a shared registry.

    Tags set with :meth:`with_tags` are part of every metric created
    afterwards; their keys become the metric's tag keys.
    """

    def __init__(self, registry: ExternalRegistry, config: MonitorConfig) -> None:
        super().__init__(
            tags=config.tags, on_error=config.on_error, extractors=config.extractors
        )
        self.registry = registry
        self.config = config

    @property
    def _error_handler(self) -> ErrorHandler:
        return self.config.on_error or _log_error

    def _tag_keys(self) -> list[str]:
        return sorted(self.tags)

    def _create(
        self,
        kind: str,
        load: Callable[[], Any],
        noop_type: type[NoopMetric],
        wrapper: type,
        name: str,
        desc: str,
        keys: Sequence[str],
    ) -> Any:
        on_error = self._error_handler
        try:
            bricks = load()
        except Exception as err:  # noqa: BLE001 - reported, then replaced by a no-op
            failure = RuntimeError(
                f"error registering {kind} [{name}:{desc}] metric with "
                f"[{' '.join(keys)}] tags, {err}"
            )
            failure.__cause__ = err
            on_error(failure)
            bricks = noop_type(name, desc, err, on_error)
        return wrapper(bricks, self.tags, self.config.extractors, on_error)

    def counter(self, name: str, desc: str) -> Counter:
        """Return a counter tagged with the current tags."""
        keys = self._tag_keys()
        return self._create(
            "counter",
            lambda: self.registry.load_or_store_counter(name, desc, *keys),
            NoopMetric,
            Counter,
            name,
            desc,
            keys,
        )

    def gauge(self, name: str, desc: str) -> Gauge:
        """Return a gauge tagged with the current tags."""
        keys = self._tag_keys()
        return self._create(
            "gauge",
            lambda: self.registry.load_or_store_gauge(name, desc, *keys),
            NoopMetric,
            Gauge,
            name,
            desc,
            keys,
        )

    def histogram(
        self, name: str, desc: str, buckets: Sequence[float] | None
    ) -> Histogram:
        """Return a histogram with ``buckets`` tagged with the current tags."""
        keys = self._tag_keys()
        return self._create(
            "histogram",
            lambda: self.registry.load_or_store_histogram(name, desc, buckets, *keys),
            NoopMetric,
            Histogram,
            name,
            desc,
            keys,
        )

    def timer(self, name: str, desc: str) -> Timer:
        """Return a timer tagged with the current tags."""
        keys = self._tag_keys()
        return self._create(
            "timer",
            lambda: self.registry.load_or_store_timer(name, desc, *keys),
            NoopTimer,
            Timer,
            name,
            desc,
            keys,
        )

    def with_tags(self, tags: Tags | None) -> "MortarMetrics":
        """Add custom tags for every metric created afterwards; returns ``self``."""
        super().with_tags(tags)
        return self