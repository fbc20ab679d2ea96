from datetime import timedelta

import pytest

from mortar.monitoring.noop import NoopMetric, NoopTimer

EXPECTED_MESSAGE = "still trying to use failed metric rate:desc, boom"


def _assert_single_error(errors, cause):
    assert len(errors) == 1
    assert errors[0].__cause__ is cause
    assert str(errors[0]) == EXPECTED_MESSAGE


def test_inc_reports_error():
    errors = []
    cause = ValueError("boom")
    metric = NoopMetric("rate", "desc", cause, errors.append)
    metric.inc()
    _assert_single_error(errors, cause)


def test_add_reports_error():
    errors = []
    cause = ValueError("boom")
    metric = NoopMetric("rate", "desc", cause, errors.append)
    metric.add(1.5)
    _assert_single_error(errors, cause)


def test_record_reports_error():
    errors = []
    cause = ValueError("boom")
    metric = NoopMetric("rate", "desc", cause, errors.append)
    metric.record(0.5)
    _assert_single_error(errors, cause)


def test_set_reports_error():
    errors = []
    cause = ValueError("boom")
    metric = NoopMetric("rate", "desc", cause, errors.append)
    metric.set(2.0)
    _assert_single_error(errors, cause)


def test_dec_reports_error():
    errors = []
    cause = ValueError("boom")
    metric = NoopMetric("rate", "desc", cause, errors.append)
    metric.dec()
    _assert_single_error(errors, cause)


def test_with_tags_returns_same_metric():
    errors = []
    metric = NoopMetric("rate", "desc", ValueError("boom"), errors.append)
    assert metric.with_tags({"one": "1"}) is metric
    assert errors == []


def test_repeated_use_reports_each_time():
    errors = []
    metric = NoopMetric("rate", "desc", ValueError("boom"), errors.append)
    metric.inc()
    metric.with_tags({}).inc()
    metric.dec()
    assert len(errors) == 3


@pytest.mark.parametrize("duration", [timedelta(milliseconds=500), 0.5])
def test_timer_record_reports_error(duration):
    errors = []
    cause = ValueError("boom")
    timer = NoopTimer("rate", "desc", cause, errors.append)
    timer.record(duration)
    assert len(errors) == 1
    assert errors[0].__cause__ is cause
    assert "rate:desc" in str(errors[0])


def test_timer_with_tags_returns_same_timer():
    errors = []
    timer = NoopTimer("rate", "desc", ValueError("boom"), errors.append)
    assert timer.with_tags({"a": "b"}) is timer
    assert errors == []