"""
Notation Parser

Recursive-descent parser over the lexer's token stream, driven by an explicit
frame stack instead of native recursion so nesting depth is only bounded by
memory. Produces one generic value tree per document.
"""

import logging
from typing import Dict, List, Optional, Sequence

from schemas.notation import (
    NIL, Bool, Keyword, Map, Number, Set, Str, Symbol, Value, Vector,
)
from services.errors import NotationSyntaxError
from services.lexer import Token, TokenType, tokenize

logger = logging.getLogger(__name__)

OPENERS = {
    TokenType.LBRACE: TokenType.RBRACE,
    TokenType.LBRACKET: TokenType.RBRACKET,
    TokenType.SET_OPEN: TokenType.RBRACE,
}
CLOSERS = {TokenType.RBRACE, TokenType.RBRACKET}
COLLECTION_NAMES = {
    TokenType.LBRACE: "map",
    TokenType.LBRACKET: "vector",
    TokenType.SET_OPEN: "set",
}


class _Frame:
    """An open collection waiting for its closing delimiter."""

    __slots__ = ("opener", "items")

    def __init__(self, opener: Token):
        self.opener = opener
        self.items: List[Value] = []

    @property
    def expected_closer(self) -> TokenType:
        return OPENERS[self.opener.type]

    @property
    def name(self) -> str:
        return COLLECTION_NAMES[self.opener.type]

    def build(self, closer: Token) -> Value:
        if self.opener.type == TokenType.LBRACKET:
            return Vector(tuple(self.items))

        if self.opener.type == TokenType.SET_OPEN:
            # dict keeps first-seen order and drops later structural duplicates
            return Set(tuple(dict.fromkeys(self.items)))

        if len(self.items) % 2:
            raise _error(
                f"Map literal opened at line {self.opener.line}, column {self.opener.column} "
                f"has an odd number of forms ({len(self.items)})",
                closer,
            )
        entries: Dict[Value, Value] = {}
        for i in range(0, len(self.items), 2):
            # Re-assigning an existing key keeps its original slot: last write wins.
            entries[self.items[i]] = self.items[i + 1]
        return Map(tuple(entries.items()))


def _error(message: str, token: Token) -> NotationSyntaxError:
    return NotationSyntaxError(message, token.position, token.line, token.column)


def _atom(token: Token) -> Value:
    if token.type == TokenType.NIL:
        return NIL
    if token.type == TokenType.BOOLEAN:
        return Bool(token.value)
    if token.type == TokenType.NUMBER:
        return Number(token.value)
    if token.type == TokenType.STRING:
        return Str(token.value)
    namespace, name = token.value
    if token.type == TokenType.KEYWORD:
        return Keyword(name=name, namespace=namespace)
    return Symbol(name=name, namespace=namespace)


def parse(tokens: Sequence[Token]) -> Value:
    """
    Parse a complete token stream into exactly one value.

    Raises:
        NotationSyntaxError: unmatched or mismatched delimiters, odd-length
            maps, unexpected tokens, empty documents or trailing forms.
    """
    stack: List[_Frame] = []
    result: Optional[Value] = None
    last: Optional[Token] = None

    for token in tokens:
        last = token
        if token.type == TokenType.EOF:
            break

        if token.type == TokenType.UNEXPECTED:
            raise _error(token.value or f"Unexpected input '{token.text}'", token)

        if token.type in OPENERS:
            stack.append(_Frame(token))
            continue

        if token.type in CLOSERS:
            if not stack:
                raise _error(f"Unmatched closing delimiter '{token.text}'", token)
            frame = stack.pop()
            if token.type != frame.expected_closer:
                raise _error(
                    f"Closing delimiter '{token.text}' does not match {frame.name} opened "
                    f"at line {frame.opener.line}, column {frame.opener.column}",
                    token,
                )
            value = frame.build(token)
        else:
            value = _atom(token)

        if stack:
            stack[-1].items.append(value)
        elif result is None:
            result = value
        else:
            raise _error("Unexpected form after the end of the document", token)

    end = last if last is not None else Token(TokenType.EOF, "", 0, 1, 1)
    if stack:
        frame = stack[-1]
        raise _error(
            f"Missing closing '{frame.expected_closer.value}' for {frame.name} opened "
            f"at line {frame.opener.line}, column {frame.opener.column}",
            end,
        )
    if result is None:
        raise _error("Document is empty", end)
    return result


def parse_notation(text: str) -> Value:
    """Tokenize and parse notation text."""
    tokens = tokenize(text)
    logger.debug("Tokenized %d characters into %d tokens", len(text), len(tokens))
    return parse(tokens)
