"""Metadata carrier used to propagate trace information."""

from __future__ import annotations

from typing import Callable


class MDTraceCarrier(dict[str, list[str]]):
    """Mapping of lower-case metadata keys to lists of values."""

    def set(self, key: str, value: str) -> None:
        """Replace all values under ``key`` (lower-cased) with ``value``."""
        self[key.lower()] = [value]

    def foreach_key(self, handler: Callable[[str, str], object]) -> None:
        """Call ``handler(key, value)`` for every value; exceptions propagate."""
        for key, values in self.items():
            for value in values:
                handler(key, value)