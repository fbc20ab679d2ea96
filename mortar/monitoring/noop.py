"""Stand-in metrics used when the real metric could not be created."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable


@dataclass
class NoopMetric:
    """A metric that reports the original creation error on every use."""

    name: str
    desc: str
    error: BaseException
    on_error: Callable[[BaseException], Any]

    def with_tags(self, tags: dict[str, str] | None) -> "NoopMetric":
        """Return this metric unchanged."""
        return self

    def inc(self) -> None:
        """Report the failure."""
        self._fail()

    def add(self, value: float) -> None:
        """Report the failure."""
        self._fail()

    def record(self, value: float) -> None:
        """Report the failure."""
        self._fail()

    def set(self, value: float) -> None:
        """Report the failure."""
        self._fail()

    def dec(self) -> None:
        """Report the failure."""
        self._fail()

    def _fail(self) -> None:
        failure = RuntimeError(
            f"still trying to use failed metric {self.name}:{self.desc}, {self.error}"
        )
        failure.__cause__ = self.error
        self.on_error(failure)


class NoopTimer(NoopMetric):
    """Failed timer; accepts durations as ``timedelta`` or seconds."""

    def record(self, duration: timedelta | float) -> None:
        """Report the failure."""
        if isinstance(duration, timedelta):
            seconds = duration.total_seconds()
        else:
            seconds = float(duration)
        super().record(seconds)