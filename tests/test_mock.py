"""Tests for mock value synthesis and the variable store."""

import random
import re

import pytest

from xmlassert.mock import MockFunction, synthesize
from xmlassert.variables import UnboundVariable, VariableStore


# --- synthesize ---


def test_plain_text_is_unchanged():
    assert synthesize("hello world") == "hello world"


def test_integer_within_range():
    rng = random.Random(7)
    for _ in range(20):
        assert 3 <= int(synthesize("@integer(3,5)", rng=rng)) <= 5
    assert synthesize("@integer(4,4)") == "4"


def test_placeholder_inside_text():
    assert synthesize("order-@integer(9,9)-x") == "order-9-x"


def test_pick_and_boolean():
    assert synthesize("@pick(red)") == "red"
    assert synthesize("@boolean") in {"true", "false"}


def test_string_length_and_uuid_shape():
    assert len(synthesize("@string(12)")) == 12
    assert re.fullmatch(r"[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}", synthesize("@uuid"))


def test_float_digits():
    assert re.fullmatch(r"\d+\.\d{3}", synthesize("@float(1,2,3)"))


def test_date_format():
    assert re.fullmatch(r"\d{4}/\d{2}/\d{2}", synthesize("@date(%Y/%m/%d)"))


def test_seeded_generation_is_reproducible():
    spec = "@word-@integer(1,1000)-@uuid"
    assert synthesize(spec, rng=random.Random(1)) == synthesize(spec, rng=random.Random(1))


def test_unknown_placeholder_and_email_text_are_kept():
    assert synthesize("@nope(1)") == "@nope(1)"
    assert synthesize("mail me at a@b.com") == "mail me at a@b.com"


def test_bad_arguments_raise():
    with pytest.raises(ValueError, match="integer"):
        synthesize("@integer(x,2)")
    with pytest.raises(ValueError):
        synthesize("@integer(5,1)")


# --- MockFunction ---


def test_mock_function_publishes_under_spec():
    store = VariableStore()
    value = MockFunction(store).execute("  @integer(2,2)  ")
    assert value == "2"
    assert store.get("@integer(2,2)") == "2"


def test_mock_function_publishes_under_name():
    store = VariableStore()
    MockFunction(store).execute("@pick(x)", name="color")
    assert store.get("color") == "x"


def test_mock_function_blank_spec_stores_nothing():
    store = VariableStore()
    assert MockFunction(store).execute("   ") == ""
    assert len(store) == 0


# --- VariableStore ---


def test_expand_known_and_default_variables():
    store = VariableStore({"id": "42"})
    assert store.expand("<id>${id}</id>") == "<id>42</id>"
    assert store.expand("${missing:-none}") == "none"


def test_expand_keeps_regex_text_intact():
    store = VariableStore({"n": "7"})
    assert store.expand(r"^\d+$ costs $5 ${n}") == r"^\d+$ costs $5 7"


def test_expand_unbound_variable_raises():
    with pytest.raises(UnboundVariable, match="missing"):
        VariableStore().expand("${missing}")


def test_snapshot_is_a_copy():
    store = VariableStore()
    store.put("a", "1")
    snap = store.snapshot()
    snap["a"] = "2"
    assert store.get("a") == "1"
    assert "a" in store
