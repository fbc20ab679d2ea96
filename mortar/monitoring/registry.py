"""Cache of metrics created by the external metrics implementation."""

from __future__ import annotations

import threading
from typing import Any, Callable, Sequence

_MISSING = object()


class _Cache:
    """Thread-safe store that creates each entry at most once when possible."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: dict[str, Any] = {}

    def load_or_store(self, key: str, create: Callable[[], Any]) -> Any:
        known = self._items.get(key, _MISSING)
        if known is not _MISSING:
            return known
        with self._lock:
            try:
                created = create()
            except Exception:
                # Another caller may have registered it already and the
                # external implementation rejects duplicates.
                known = self._items.get(key, _MISSING)
                if known is not _MISSING:
                    return known
                raise
            return self._items.setdefault(key, created)


class ExternalRegistry:
    """Creates metrics through an external implementation and caches them.

    Metrics are keyed by their name and the set of their tag keys, so asking
    for the same metric twice returns the cached instance. Creation errors
    raised by the external implementation propagate to the caller.
    """

    def __init__(self, external: Any) -> None:
        self.external = external
        self._counters = _Cache()
        self._gauges = _Cache()
        self._histograms = _Cache()
        self._timers = _Cache()

    def load_or_store_counter(self, name: str, desc: str, *keys: str) -> Any:
        """Return the cached counter or create it."""
        return self._counters.load_or_store(
            calc_id(name, *keys), lambda: self.external.counter(name, desc, *keys)
        )

    def load_or_store_gauge(self, name: str, desc: str, *keys: str) -> Any:
        """Return the cached gauge or create it."""
        return self._gauges.load_or_store(
            calc_id(name, *keys), lambda: self.external.gauge(name, desc, *keys)
        )

    def load_or_store_histogram(
        self, name: str, desc: str, buckets: Sequence[float] | None, *keys: str
    ) -> Any:
        """Return the cached histogram or create it with ``buckets``."""
        return self._histograms.load_or_store(
            calc_id(name, *keys),
            lambda: self.external.histogram(name, desc, buckets, *keys),
        )

    def load_or_store_timer(self, name: str, desc: str, *keys: str) -> Any:
        """Return the cached timer or create it."""
        return self._timers.load_or_store(
            calc_id(name, *keys), lambda: self.external.timer(name, desc, *keys)
        )


def calc_id(name: str, *keys: str) -> str:
    """Build a cache key from ``name`` and the distinct, sorted tag keys."""
    if not keys:
        return name
    return "_".join([name, *sorted(set(keys))])