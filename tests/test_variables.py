"""Tests for the variable store and variable resolution."""

from __future__ import annotations

import logging

import pytest

from rjg.engine import Generator, Literal, VariableStore, parse_assignments
from rjg.utils.errors import UndefinedVariableError, VariableCycleError


def test_from_text_parses_json() -> None:
    store = VariableStore.from_text({"n": "42", "obj": '{"a": [1, 2]}', "s": '"x"'})
    assert store.raw("n") == 42
    assert store.raw("obj") == {"a": [1, 2]}
    assert store["s"] == Literal("x")
    assert len(store) == 3
    assert sorted(store) == ["n", "obj", "s"]


def test_unparsable_text_kept_as_string(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="rjg"):
        store = VariableStore.from_text([("name", "Alice")])
    assert store.raw("name") == "Alice"
    assert "'name'" in caplog.text


def test_store_is_read_only() -> None:
    store = VariableStore({"a": 1})
    with pytest.raises(TypeError):
        store["a"] = 2  # type: ignore[index]


def test_variable_may_hold_directives() -> None:
    store = VariableStore.from_text({"id": '{"$str": ["user-", "$i"]}'})
    assert Generator(store).generate(7, {"user": "$id"}) == {"user": "user-7"}


def test_variable_chains() -> None:
    store = VariableStore({"a": "$b", "b": "$c", "c": 3})
    assert Generator(store).generate(0, "$a") == 3


def test_variable_used_twice_is_not_a_cycle() -> None:
    store = VariableStore({"pair": {"$str": ["$x", "$x"]}, "x": "ab"})
    assert Generator(store).generate(0, "$pair") == "abab"


def test_direct_cycle_detected() -> None:
    store = VariableStore({"a": {"x": "$a"}})
    with pytest.raises(VariableCycleError) as info:
        Generator(store).generate(0, "$a")
    assert info.value.chain == ("$a", "$a")


def test_indirect_cycle_detected() -> None:
    store = VariableStore({"a": "$b", "b": ["ignored"], "c": {"$oneof": ["$d"]}, "d": "$c"})
    with pytest.raises(VariableCycleError, match=r"\$c -> \$d -> \$c"):
        Generator(store).generate(0, "$c")


def test_undefined_inside_variable_names_variable() -> None:
    store = VariableStore({"a": {"k": "$missing"}})
    with pytest.raises(UndefinedVariableError) as info:
        Generator(store).generate(0, "$a")
    assert info.value.trail == ["variable '$a'", "key 'k'"]


def test_store_prefix_must_match_generator() -> None:
    store = VariableStore({"a": 1}, prefix="@")
    with pytest.raises(ValueError):
        Generator(store)
    assert Generator(store, prefix="@").generate(0, "@a") == 1


def test_parse_assignments() -> None:
    assert parse_assignments(["a=1", "b=x=y", "c="]) == [("a", "1"), ("b", "x=y"), ("c", "")]


@pytest.mark.parametrize("item", ["novalue", "=1", " =1"])
def test_parse_assignments_rejects(item: str) -> None:
    with pytest.raises(ValueError):
        parse_assignments([item])


@pytest.mark.parametrize("text", ["NaN", "Infinity", "-Infinity"])
def test_non_json_constant_kept_as_string(text: str, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="rjg"):
        store = VariableStore.from_text({"x": text})
    assert store.raw("x") == text
    assert "'x'" in caplog.text
    assert Generator(store).generate(0, {"v": "$x"}) == {"v": text}
