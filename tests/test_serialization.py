"""Tests for the JSON replacer/reviver pair."""
from __future__ import annotations

import json

import pytest

import dispatch
from provider import LargeInteger
from serialization import dumps, loads, replacer, revive, reviver


@pytest.fixture(autouse=True)
def fallback_default(monkeypatch):
    monkeypatch.setattr(dispatch, "_default", None)
    monkeypatch.setenv("LARGEINT_BACKEND", "fallback")


class TestReplacer:

    def test_tags_large_integer(self, fallback_dispatcher):
        assert replacer(fallback_dispatcher.from_value(-12)) == "-12n"

    def test_rejects_other_objects(self):
        with pytest.raises(TypeError):
            replacer(object())

    def test_json_default_hook(self, fallback_dispatcher):
        value = fallback_dispatcher.from_value("123456789012345678901234567890")
        text = json.dumps({"v": value, "n": 1}, default=replacer)
        assert json.loads(text) == {"v": "123456789012345678901234567890n", "n": 1}


class TestReviver:

    def test_untagged_values_pass_through(self):
        for value in ("123", "n", "12a n", "1.5n", 7, None, ["1n"]):
            assert reviver(value) == value

    def test_tagged_string(self, fallback_dispatcher):
        value = reviver("-42n", fallback_dispatcher)
        assert isinstance(value, LargeInteger)
        assert fallback_dispatcher.to_int(value) == -42

    def test_uses_default_dispatcher(self):
        value = reviver("5n")
        assert value == dispatch.from_value(5)

    def test_revive_tree(self, fallback_dispatcher):
        tree = {"a": ["1n", {"b": "2n"}, "x"], "c": 3}
        result = revive(tree, fallback_dispatcher)
        assert fallback_dispatcher.to_int(result["a"][0]) == 1
        assert fallback_dispatcher.to_int(result["a"][1]["b"]) == 2
        assert result["a"][2] == "x"
        assert result["c"] == 3


class TestRoundTrip:

    def test_dumps_loads(self, fallback_dispatcher):
        d = fallback_dispatcher
        big = d.from_value("9007199254740993")
        payload = {"balance": big, "history": [d.from_value(-1), 2.5, "note"]}
        text = dumps(payload, sort_keys=True)
        assert '"9007199254740993n"' in text
        restored = loads(text, d)
        assert restored["balance"] == big
        assert restored["history"][0] == d.from_value(-1)
        assert restored["history"][1:] == [2.5, "note"]

    def test_top_level_value(self, fallback_dispatcher):
        value = fallback_dispatcher.from_value(2**100)
        assert loads(dumps(value), fallback_dispatcher) == value
