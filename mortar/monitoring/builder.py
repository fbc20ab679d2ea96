"""Builder for the monitoring reporter."""

from __future__ import annotations

import logging
from typing import Any, Callable

from mortar.monitoring.reporter import MortarReporter
from mortar.monitoring.types import (
    ContextExtractor,
    ErrorHandler,
    MonitorConfig,
    Tags,
)

_logger = logging.getLogger(__name__)


def _default_on_error(err: BaseException) -> None:
    _logger.warning("monitoring error, %s", err)


class WrapperBuilder:
    """Collects monitoring options and builds a :class:`MortarReporter`."""

    def __init__(self) -> None:
        self._steps: list[Callable[[MonitorConfig], None]] = []

    def set_tags(self, tags: Tags | None) -> "WrapperBuilder":
        """Set default tags included in every metric; ``None`` is ignored."""

        def apply(config: MonitorConfig) -> None:
            if tags is not None:
                config.tags = tags

        self._steps.append(apply)
        return self

    def add_extractors(self, *extractors: ContextExtractor) -> "WrapperBuilder":
        """Add extractors that may override tag values from a context."""
        self._steps.append(lambda config: config.extractors.extend(extractors))
        return self

    def do_on_error(self, on_error: ErrorHandler) -> "WrapperBuilder":
        """Set the handler called on errors while creating or using metrics."""

        def apply(config: MonitorConfig) -> None:
            config.on_error = on_error

        self._steps.append(apply)
        return self

    def build(self, bricks_builder: Any) -> MortarReporter:
        """Apply the options and wrap the reporter ``bricks_builder`` builds."""
        config = MonitorConfig()
        for step in self._steps:
            step(config)
        if config.on_error is None:
            config.on_error = _default_on_error
        if config.tags is None:
            config.tags = {}
        config.reporter = bricks_builder.build()
        return MortarReporter(config)


def builder() -> WrapperBuilder:
    """Return a new :class:`WrapperBuilder`."""
    return WrapperBuilder()