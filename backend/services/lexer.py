"""
Notation Lexer

Turns raw notation text into a flat list of tokens in one left-to-right scan.
Never raises: anything it cannot classify becomes an UNEXPECTED token and the
parser reports it, so every syntax error comes out of one place.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple


class TokenType(str, Enum):
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    SET_OPEN = "#{"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NIL = "nil"
    KEYWORD = "keyword"
    SYMBOL = "symbol"
    UNEXPECTED = "unexpected"
    EOF = "eof"


@dataclass(frozen=True)
class Token:
    type: TokenType
    text: str
    position: int
    line: int
    column: int
    # Decoded payload: str for strings, int/float for numbers, bool for booleans,
    # (namespace, name) for keywords and symbols, an error message for UNEXPECTED.
    value: Any = None


DELIMITERS = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
}
LITERALS = {"true": (TokenType.BOOLEAN, True), "false": (TokenType.BOOLEAN, False), "nil": (TokenType.NIL, None)}
STRING_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f"}
DIGITS = frozenset("0123456789")

_NUMBER = re.compile(r"[+-]?[0-9]+(\.[0-9]+)?([eE][+-]?[0-9]+)?")
_BARE = re.compile(r"[^\s,{}\[\]()\";]+")
_HEX4 = re.compile(r"[0-9a-fA-F]{4}")
# Characters a bare token may not start with: reader macros, metadata, deref, quoting.
_RESERVED_START = set("#^@~`'\\")


def _split_name(body: str) -> Optional[Tuple[Optional[str], str]]:
    """Split ``ns/name`` into its parts; None when the shape is invalid."""
    if body == "/":
        return None, "/"
    if body.count("/") > 1:
        return None
    namespace, sep, name = body.partition("/")
    if not sep:
        return None, body
    if not namespace or not name:
        return None
    return namespace, name


def _classify_bare(text: str) -> Tuple[TokenType, Any]:
    if text in LITERALS:
        return LITERALS[text]

    if text.startswith(":"):
        body = text[1:]
        if not body or body.startswith(":"):
            return TokenType.UNEXPECTED, f"Invalid keyword '{text}'"
        parts = _split_name(body)
        if parts is None:
            return TokenType.UNEXPECTED, f"Invalid keyword '{text}'"
        return TokenType.KEYWORD, parts

    if text[0] in _RESERVED_START or ":" in text:
        return TokenType.UNEXPECTED, f"Unsupported token '{text}'"
    parts = _split_name(text)
    if parts is None:
        return TokenType.UNEXPECTED, f"Invalid symbol '{text}'"
    return TokenType.SYMBOL, parts


class _Scanner:
    """Cursor over the text that keeps line/column bookkeeping incremental."""

    def __init__(self, text: str):
        self.text = text
        self.length = len(text)
        self.pos = 0
        self.line = 1
        self.line_start = 0
        self.tokens: List[Token] = []

    def emit(self, token_type: TokenType, start: int, line: int, column: int, value: Any = None) -> None:
        self.tokens.append(Token(
            type=token_type,
            text=self.text[start:self.pos],
            position=start,
            line=line,
            column=column,
            value=value,
        ))

    def newline(self, at: int) -> None:
        self.line += 1
        self.line_start = at + 1

    def scan(self) -> List[Token]:
        text = self.text
        while self.pos < self.length:
            c = text[self.pos]

            if c == "," or c.isspace():
                if c == "\n":
                    self.newline(self.pos)
                self.pos += 1
                continue

            if c == ";":
                end = text.find("\n", self.pos)
                self.pos = self.length if end == -1 else end
                continue

            start, line, column = self.pos, self.line, self.pos - self.line_start + 1

            if c in DELIMITERS:
                self.pos += 1
                self.emit(DELIMITERS[c], start, line, column)
            elif c == "#" and text.startswith("#{", self.pos):
                self.pos += 2
                self.emit(TokenType.SET_OPEN, start, line, column)
            elif c == '"':
                self.scan_string(start, line, column)
            elif c in DIGITS or (c in "+-" and text[self.pos + 1:self.pos + 2] in DIGITS):
                self.scan_number(start, line, column)
            elif c in "()":
                self.pos += 1
                self.emit(TokenType.UNEXPECTED, start, line, column, f"Lists are not supported: '{c}'")
            else:
                match = _BARE.match(text, self.pos)
                self.pos = match.end()
                token_type, value = _classify_bare(match.group())
                self.emit(token_type, start, line, column, value)

        column = self.pos - self.line_start + 1
        self.tokens.append(Token(TokenType.EOF, "", self.pos, self.line, column))
        return self.tokens

    def scan_number(self, start: int, line: int, column: int) -> None:
        text = self.text
        match = _NUMBER.match(text, self.pos)
        self.pos = match.end()
        trailing = _BARE.match(text, self.pos)
        if trailing:
            # 12abc, 1.2.3, 1N: digits glued to something that is not a separator
            self.pos = trailing.end()
            self.emit(TokenType.UNEXPECTED, start, line, column,
                      f"Invalid number literal '{text[start:self.pos]}'")
            return
        literal = match.group()
        try:
            if match.group(1) or match.group(2):
                value: Any = float(literal)
            else:
                value = int(literal)
        except ValueError:
            # int() refuses literals past the interpreter's digit limit
            self.emit(TokenType.UNEXPECTED, start, line, column,
                      f"Invalid number literal '{literal[:20]}...': too many digits")
            return
        if isinstance(value, float) and not math.isfinite(value):
            self.emit(TokenType.UNEXPECTED, start, line, column,
                      f"Invalid number literal '{literal}': out of range")
            return
        self.emit(TokenType.NUMBER, start, line, column, value)

    def scan_string(self, start: int, line: int, column: int) -> None:
        text = self.text
        chars: List[str] = []
        error: Optional[str] = None
        i = start + 1
        while i < self.length:
            c = text[i]
            if c == '"':
                self.pos = i + 1
                if error:
                    self.emit(TokenType.UNEXPECTED, start, line, column, error)
                else:
                    self.emit(TokenType.STRING, start, line, column, "".join(chars))
                return
            if c == "\n":
                self.newline(i)
            if c == "\\" and i + 1 < self.length:
                escape = text[i + 1]
                if escape in STRING_ESCAPES:
                    chars.append(STRING_ESCAPES[escape])
                    i += 2
                    continue
                if escape == "u" and _HEX4.match(text, i + 2):
                    chars.append(chr(int(text[i + 2:i + 6], 16)))
                    i += 6
                    continue
                if escape == "\n":
                    self.newline(i + 1)
                if error is None:
                    error = f"Invalid string escape '\\{escape}'"
                i += 2
                continue
            chars.append(c)
            i += 1

        self.pos = self.length
        self.emit(TokenType.UNEXPECTED, start, line, column, "Unterminated string")


def tokenize(text: str) -> List[Token]:
    """
    Tokenize notation text.

    Comments, whitespace and commas are dropped. The returned list always ends
    with a single EOF token.
    """
    return _Scanner(text).scan()
