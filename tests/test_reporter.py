from datetime import timedelta

import pytest

from mortar.monitoring.reporter import MortarReporter
from mortar.monitoring.types import MonitorConfig


class FakeMetric:
    def __init__(self):
        self.calls = []

    def inc(self):
        self.calls.append(("inc", ()))

    def set(self, value):
        self.calls.append(("set", (value,)))

    def record(self, value):
        self.calls.append(("record", (value,)))


class FakeBricks:
    def __init__(self):
        self.metric = FakeMetric()
        self.tags_seen = []

    def with_tags(self, tags):
        self.tags_seen.append(tags)
        return self.metric


class FakeExternal:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.created = []

    def _create(self, *call):
        self.created.append(call)
        return self.outcomes.pop(0)

    def counter(self, name, desc, *keys):
        return self._create("counter", name, desc, keys)

    def gauge(self, name, desc, *keys):
        return self._create("gauge", name, desc, keys)

    def histogram(self, name, desc, buckets, *keys):
        return self._create("histogram", name, desc, buckets, keys)

    def timer(self, name, desc, *keys):
        return self._create("timer", name, desc, keys)


class FakeReporter:
    def __init__(self, external, close_error=None):
        self.external = external
        self.close_error = close_error
        self.connected = []
        self.closed = []

    def metrics(self):
        return self.external

    def connect(self, ctx):
        self.connected.append(ctx)

    def close(self, ctx):
        self.closed.append(ctx)
        if self.close_error is not None:
            raise self.close_error


def _setup(*outcomes, close_error=None):
    external = FakeExternal(*outcomes)
    fake = FakeReporter(external, close_error)
    config = MonitorConfig(
        reporter=fake,
        tags={"one": "1", "three": "3"},
        extractors=[lambda ctx: {"three": "33"}],
    )
    return MortarReporter(config), fake, external, config


def test_connect_close():
    reporter, fake, _, _ = _setup()
    ctx = object()
    reporter.connect(ctx)
    reporter.close(ctx)
    assert fake.connected == [ctx]
    assert fake.closed == [ctx]


def test_close_error_propagates():
    reporter, _, _, _ = _setup(close_error=ConnectionError("gone"))
    with pytest.raises(ConnectionError, match="gone"):
        reporter.close(None)


def test_metrics_returns_reporter():
    reporter, _, _, _ = _setup()
    assert reporter.metrics() is reporter


def test_static_tags():
    bricks = FakeBricks()
    reporter, _, external, _ = _setup(bricks)
    reporter.metrics().counter("rate", "rate of something").inc()
    assert external.created == [("counter", "rate", "rate of something", ("one", "three"))]
    assert bricks.tags_seen == [{"one": "1", "three": "3"}]
    assert bricks.metric.calls == [("inc", ())]


def test_with_custom_tags():
    bricks = FakeBricks()
    reporter, _, external, config = _setup(bricks)
    counter = reporter.metrics().with_tags({"two": "2"}).counter("additional", "tags")
    assert external.created == [("counter", "additional", "tags", ("one", "three", "two"))]
    counter = counter.with_tags({"one": "10"})
    counter.inc()
    counter.inc()
    expected = {"one": "10", "two": "2", "three": "3"}
    assert bricks.tags_seen == [expected, expected]
    assert bricks.metric.calls == [("inc", ()), ("inc", ())]
    assert config.tags == {"one": "1", "three": "3"}


def test_registry_is_singleton():
    reporter, _, external, _ = _setup(FakeBricks())
    metrics = reporter.metrics()
    first = metrics.counter("unique", "unique counter")
    for _ in range(100):
        assert metrics.counter("unique", "unique counter") == first
    assert external.created == [("counter", "unique", "unique counter", ("one", "three"))]


def test_gauge_histogram_timer_use_default_tags():
    gauge_bricks = FakeBricks()
    histogram_bricks = FakeBricks()
    timer_bricks = FakeBricks()
    reporter, _, external, _ = _setup(gauge_bricks, histogram_bricks, timer_bricks)
    reporter.gauge("g", "gauge").set(2.0)
    reporter.histogram("h", "histogram", [1.0]).record(0.5)
    reporter.timer("t", "timer").with_context(None).record(timedelta(seconds=2))
    assert external.created == [
        ("gauge", "g", "gauge", ("one", "three")),
        ("histogram", "h", "histogram", [1.0], ("one", "three")),
        ("timer", "t", "timer", ("one", "three")),
    ]
    assert gauge_bricks.tags_seen == [{"one": "1", "three": "3"}]
    assert histogram_bricks.metric.calls == [("record", (0.5,))]
    assert timer_bricks.tags_seen == [{"one": "1", "three": "33"}]
    assert timer_bricks.metric.calls == [("record", (timedelta(seconds=2),))]