"""Tag-aware wrappers around externally created metrics."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable, Iterable

Tags = dict[str, str]
ContextExtractor = Callable[[Any], Tags]
ErrorHandler = Callable[[BaseException], Any]

_logger = logging.getLogger(__name__)


def _log_error(err: BaseException) -> None:
    _logger.warning("monitoring error, %s", err)


@dataclass
class MonitorConfig:
    """Settings shared by every metric of a reporter."""

    tags: Tags = field(default_factory=dict)
    extractors: list[ContextExtractor] = field(default_factory=list)
    on_error: ErrorHandler | None = None
    reporter: Any = None


class TagsMetric:
    """Holds tag values and merges in custom and context-derived tags.

    The predefined tags are copied before the first change, so they are
    never altered.
    """

    def __init__(
        self,
        tags: Tags | None = None,
        on_error: ErrorHandler | None = None,
        extractors: Iterable[ContextExtractor] = (),
    ) -> None:
        self._lock = threading.Lock()
        self._copied = False
        self.tags: Tags = tags if tags is not None else {}
        self.on_error: ErrorHandler = on_error or _log_error
        self.extractors = list(extractors)

    def with_tags(self, tags: Tags | None):
        """Set tag values, overriding earlier ones; returns ``self``."""
        with self._lock:
            if not self._copied:
                self.tags = dict(self.tags)
                self._copied = True
            if tags:
                self.tags.update(tags)
        return self

    def with_context(self, ctx: Any):
        """Apply the tags every extractor finds in ``ctx``; returns ``self``."""
        for extractor in self.extractors:
            self.with_tags(extractor(ctx))
        return self

    def _resolve(self, bricks: Any) -> Any:
        try:
            return bricks.with_tags(dict(self.tags))
        except Exception as err:  # noqa: BLE001 - any failure is reported
            self.on_error(err)
            return None

    def _identity(self) -> tuple:
        return (type(self), self.tags, self.extractors)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TagsMetric):
            return NotImplemented
        return self._identity() == other._identity()

    __hash__ = None  # type: ignore[assignment]


class _Wrapped(TagsMetric):
    def __init__(
        self,
        bricks: Any,
        tags: Tags | None = None,
        extractors: Iterable[ContextExtractor] = (),
        on_error: ErrorHandler | None = None,
    ) -> None:
        super().__init__(tags, on_error, extractors)
        self.bricks = bricks

    def _identity(self) -> tuple:
        return (*super()._identity(), self.bricks)


class Counter(_Wrapped):
    """Counter that applies its tags on every update."""

    def inc(self) -> None:
        """Increment by one."""
        metric = self._resolve(self.bricks)
        if metric is not None:
            metric.inc()

    def add(self, value: float) -> None:
        """Add ``value``; negative values are not advised."""
        metric = self._resolve(self.bricks)
        if metric is not None:
            metric.add(value)


class Gauge(_Wrapped):
    """Gauge that applies its tags on every update."""

    def set(self, value: float) -> None:
        """Set the gauge to ``value``."""
        metric = self._resolve(self.bricks)
        if metric is not None:
            metric.set(value)

    def add(self, value: float) -> None:
        """Add (or subtract, if negative) ``value``."""
        metric = self._resolve(self.bricks)
        if metric is not None:
            metric.add(value)

    def inc(self) -> None:
        """Add one."""
        metric = self._resolve(self.bricks)
        if metric is not None:
            metric.inc()

    def dec(self) -> None:
        """Subtract one."""
        metric = self._resolve(self.bricks)
        if metric is not None:
            metric.dec()


class Histogram(_Wrapped):
    """Histogram that applies its tags on every record."""

    def record(self, value: float) -> None:
        """Record ``value``."""
        metric = self._resolve(self.bricks)
        if metric is not None:
            metric.record(value)


class Timer(_Wrapped):
    """Timer that applies its tags on every record."""

    def record(self, duration: timedelta) -> None:
        """Record a measured ``duration``."""
        metric = self._resolve(self.bricks)
        if metric is not None:
            metric.record(duration)