"""Tests for services.notation_parser: value trees and syntax errors."""

from __future__ import annotations

import pytest

from schemas.notation import (
    NIL, Bool, Keyword, Map, Number, Set, Str, Symbol, Vector, keyword,
)
from services.errors import NotationSyntaxError
from services.lexer import tokenize
from services.notation_parser import parse, parse_notation


def test_scalars() -> None:
    assert parse_notation("nil") == NIL
    assert parse_notation("true") == Bool(True)
    assert parse_notation("-12") == Number(-12)
    assert parse_notation("1.5") == Number(1.5)
    assert parse_notation('"hi"') == Str("hi")
    assert parse_notation(":state/inquiry") == Keyword(name="inquiry", namespace="state")
    assert parse_notation("sym") == Symbol(name="sym")


def test_parse_accepts_token_sequence() -> None:
    assert parse(tokenize("[1 2]")) == Vector((Number(1), Number(2)))


def test_nested_collections() -> None:
    value = parse_notation('{:a [1 #{:x} {:b "c"}], :d nil}')
    assert isinstance(value, Map)
    a = value.get(keyword("a"))
    assert a == Vector((
        Number(1),
        Set((keyword("x"),)),
        Map(((keyword("b"), Str("c")),)),
    ))
    assert value.get(keyword("d")) == NIL


def test_map_duplicate_key_last_write_wins() -> None:
    value = parse_notation("{:a 1 :a 2}")
    assert isinstance(value, Map)
    assert len(value) == 1
    assert value.get(keyword("a")) == Number(2)


def test_map_duplicate_key_keeps_first_position() -> None:
    value = parse_notation("{:a 1 :b 2 :a 3}")
    assert value.keys() == (keyword("a"), keyword("b"))
    assert value.get(keyword("a")) == Number(3)


def test_map_duplicate_structural_key() -> None:
    value = parse_notation("{[:x 1] :first [:x 1] :second}")
    assert len(value) == 1
    assert value.get(Vector((keyword("x"), Number(1)))) == keyword("second")


def test_set_deduplicates() -> None:
    value = parse_notation("#{:a :a :b}")
    assert isinstance(value, Set)
    assert len(value) == 2
    assert value.items == (keyword("a"), keyword("b"))


def test_set_deduplicates_structurally_equal_collections() -> None:
    value = parse_notation("#{{:k 1} {:k 1} [1 2]}")
    assert len(value) == 2


def test_keyword_and_symbol_are_distinct() -> None:
    value = parse_notation("#{:a a}")
    assert len(value) == 2


def test_deep_nesting_does_not_recurse() -> None:
    depth = 5000
    value = parse_notation("[" * depth + "]" * depth)
    for _ in range(depth - 1):
        assert isinstance(value, Vector)
        value = value.items[0]
    assert value == Vector(())


def test_comments_inside_collections() -> None:
    value = parse_notation("[1 ; one\n 2 ; two\n]")
    assert value == Vector((Number(1), Number(2)))


@pytest.mark.parametrize(
    ("text", "fragment"),
    [
        ("{:a 1", "Missing closing '}'"),
        ("[1 2", "Missing closing ']'"),
        ("#{:a", "Missing closing '}'"),
        ("[1 2}", "does not match vector"),
        ("{:a 1]", "does not match map"),
        ("]", "Unmatched closing delimiter"),
        ("{:a 1 :b}", "odd number of forms"),
        ("", "Document is empty"),
        ("; only a comment", "Document is empty"),
        ("{} {}", "after the end of the document"),
        ("[1 (2)]", "Lists are not supported"),
        ('{:a "open}', "Unterminated string"),
        ("[12abc]", "Invalid number literal"),
    ],
)
def test_syntax_errors(text: str, fragment: str) -> None:
    with pytest.raises(NotationSyntaxError) as exc_info:
        parse_notation(text)
    assert fragment in exc_info.value.message
    assert exc_info.value.kind == "SyntaxError"


def test_syntax_error_carries_position() -> None:
    with pytest.raises(NotationSyntaxError) as exc_info:
        parse_notation("{:a 1\n :b ]}")
    error = exc_info.value
    assert error.position == 10
    assert error.line == 2
    assert error.column == 5
    assert error.to_dict()["kind"] == "SyntaxError"


def test_missing_closer_reports_opener_location() -> None:
    with pytest.raises(NotationSyntaxError) as exc_info:
        parse_notation('{:transitions [{:name :a}')
    assert "vector opened at line 1, column 15" in exc_info.value.message


def test_overlong_integer_is_a_syntax_error() -> None:
    with pytest.raises(NotationSyntaxError) as exc_info:
        parse_notation("{:weight " + "9" * 5000 + "}")
    assert "Invalid number literal" in exc_info.value.message
    assert exc_info.value.position == 9


def test_integer_and_float_are_distinct() -> None:
    assert len(parse_notation("#{1 1.0}")) == 2
    value = parse_notation("{1 :a 1.0 :b}")
    assert value.get(Number(1)) == keyword("a")
    assert value.get(Number(1.0)) == keyword("b")


def test_set_equality_ignores_member_order() -> None:
    assert parse_notation("#{:a [1 2] :b}") == parse_notation("#{:b :a [1 2]}")
    assert parse_notation("[:a :b]") != parse_notation("[:b :a]")


@pytest.mark.parametrize("depth", [500, 3000])
def test_deep_set_members_deduplicate(depth: int) -> None:
    member = "[" * depth + "]" * depth
    value = parse_notation("#{" + member + " " + member + "}")
    assert isinstance(value, Set)
    assert len(value) == 1


@pytest.mark.parametrize("depth", [500, 3000])
def test_deep_map_keys_last_write_wins(depth: int) -> None:
    key = "[" * depth + "]" * depth
    value = parse_notation("{" + key + " 1 :other 2 " + key + " 3}")
    assert isinstance(value, Map)
    assert len(value) == 2
    assert value.entries[0][1] == Number(3)
