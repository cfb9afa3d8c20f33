"""Tests for services.notation_writer: serializing value trees."""

from __future__ import annotations

import pytest

from schemas.notation import (
    NIL, Bool, Keyword, Map, Number, Set, Str, Symbol, Vector, keyword,
)
from services.notation_parser import parse_notation
from services.notation_writer import dumps


def test_scalars() -> None:
    assert dumps(NIL) == "nil"
    assert dumps(Bool(False)) == "false"
    assert dumps(Number(3)) == "3"
    assert dumps(Number(2.0)) == "2.0"
    assert dumps(keyword("state/inquiry")) == ":state/inquiry"
    assert dumps(Symbol(name="x", namespace="ns")) == "ns/x"


def test_string_escaping() -> None:
    assert dumps(Str('say "hi"\n\\')) == r'"say \"hi\"\n\\"'
    assert dumps(Str("\x01")) == r'"\u0001"'


def test_collections() -> None:
    value = Map((
        (keyword("format"), keyword("v3")),
        (keyword("tags"), Set((Str("a"), Str("b")))),
        (keyword("steps"), Vector((Number(1), NIL))),
    ))
    assert dumps(value) == '{:format :v3, :tags #{"a" "b"}, :steps [1 nil]}'


def test_round_trip_process_shaped_tree() -> None:
    value = Map((
        (keyword("process/id"), keyword("process/demo")),
        (keyword("process/states"), Set((keyword("state/a"), keyword("state/b")))),
        (keyword("process/transitions"), Vector((
            Map((
                (keyword("transition/id"), keyword("transition/go")),
                (keyword("transition/from"), Set((keyword("state/a"),))),
                (keyword("transition/to"), keyword("state/b")),
                (keyword("weight"), Number(-0.25)),
                (keyword("privileged?"), Bool(True)),
                (keyword("note"), Str("tab\there")),
                (Keyword(name="meta"), Map()),
                (Symbol(name="plain"), NIL),
            )),
        ))),
    ))
    assert parse_notation(dumps(value)) == value


def test_round_trip_large_float() -> None:
    value = Vector((Number(1e20), Number(1.5e-7)))
    assert parse_notation(dumps(value)) == value


def test_non_finite_numbers_are_rejected() -> None:
    with pytest.raises(ValueError):
        dumps(Number(float("inf")))


def test_round_trip_deeply_nested_tree() -> None:
    value = Vector((Number(1),))
    for depth in range(3000):
        value = Map(((Number(depth), value),)) if depth % 2 else Vector((value, Set((Number(depth),))))
    text = dumps(value)
    assert text.startswith("{2999 [{2997 [")
    assert parse_notation(text) == value


def test_plain_python_values_are_rejected() -> None:
    with pytest.raises(TypeError):
        dumps("not wrapped")
    with pytest.raises(TypeError):
        dumps(Vector((42,)))
    with pytest.raises(TypeError):
        dumps(Vector(("raw",)))
