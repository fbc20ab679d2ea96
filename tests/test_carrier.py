import pytest

from mortar.carrier import MDTraceCarrier


def test_set_lowercases_key():
    md = MDTraceCarrier({"one": ["two", "three"]})
    md.set("FOUR", "five")
    assert "four" in md
    assert md["four"] == ["five"]
    assert md["one"] == ["two", "three"]


def test_set_replaces_values():
    md = MDTraceCarrier({"key": ["a", "b"]})
    md.set("Key", "c")
    assert md["key"] == ["c"]


def test_foreach_key_counts_values():
    md = MDTraceCarrier()
    md.set("one", "two")
    md.set("three", "four")
    seen = []
    md.foreach_key(lambda k, v: seen.append((k, v)))
    assert len(seen) == 2
    assert sorted(seen) == [("one", "two"), ("three", "four")]


def test_foreach_key_visits_every_value():
    md = MDTraceCarrier({"k": ["1", "2", "3"]})
    seen = []
    md.foreach_key(lambda k, v: seen.append(v))
    assert seen == ["1", "2", "3"]


def test_foreach_key_with_error():
    md = MDTraceCarrier()
    md.set("one", "two")

    def bad_handler(key, value):
        raise ValueError("bad handler")

    with pytest.raises(ValueError, match="bad handler"):
        md.foreach_key(bad_handler)