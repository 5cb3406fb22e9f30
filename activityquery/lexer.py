"""Tokenizer for the query language."""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    IDENT = "identifier"
    IF = "if"
    ELIF = "elif"
    ELSE = "else"
    RETURN = "return"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"
    EQUALS = "=="
    ASSIGN = "="
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LBRACE = "{"
    RBRACE = "}"
    COMMA = ","
    COLON = ":"
    SEMI = ";"


@dataclass(frozen=True)
class Span:
    """Character offsets of a piece of source text and the line it starts on."""

    lo: int
    hi: int
    line: int


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str | float | bool | None
    span: Span


_WHITESPACE = re.compile(r"[ \t\r]+")
_COMMENT = re.compile(r"#[^\n]*")
_NUMBER = re.compile(r"[0-9]+\.?[0-9]*")
_IDENT = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")

_KEYWORDS: dict[str, tuple[TokenKind, bool | None]] = {
    "if": (TokenKind.IF, None),
    "elif": (TokenKind.ELIF, None),
    "else": (TokenKind.ELSE, None),
    "return": (TokenKind.RETURN, None),
    "true": (TokenKind.BOOL, True),
    "false": (TokenKind.BOOL, False),
    "True": (TokenKind.BOOL, True),
    "False": (TokenKind.BOOL, False),
}

_SINGLE_CHAR = {
    kind.value: kind
    for kind in TokenKind
    if len(kind.value) == 1
}


def _string_end(text: str, start: int) -> int | None:
    """Index of the closing quote of the longest string literal at start."""
    end = None
    pos = start + 1
    while True:
        pos = text.find('"', pos)
        if pos == -1:
            return end
        end = pos
        if text[pos - 1] != "\\":
            return end
        pos += 1


def tokenize(text: str) -> Iterator[Token]:
    """Yield the tokens of text, skipping whitespace and comments.

    Tokenizing stops silently at the first character no token can start with.
    """
    pos = 0
    line = 1
    length = len(text)
    while pos < length:
        ch = text[pos]
        if ch in " \t\r":
            pos = _WHITESPACE.match(text, pos).end()
            continue
        if ch == "\n":
            line += 1
            pos += 1
            continue
        if ch == "#":
            pos = _COMMENT.match(text, pos).end()
            continue
        if ch == '"':
            end = _string_end(text, pos)
            if end is None:
                return
            value = text[pos + 1 : end].replace('\\"', '"')
            yield Token(TokenKind.STRING, value, Span(pos, end + 1, line))
            pos = end + 1
            continue
        match = _NUMBER.match(text, pos)
        if match:
            yield Token(TokenKind.NUMBER, float(match.group()), Span(pos, match.end(), line))
            pos = match.end()
            continue
        match = _IDENT.match(text, pos)
        if match:
            word = match.group()
            kind, value = _KEYWORDS.get(word, (TokenKind.IDENT, word))
            yield Token(kind, value, Span(pos, match.end(), line))
            pos = match.end()
            continue
        if text.startswith("==", pos):
            yield Token(TokenKind.EQUALS, None, Span(pos, pos + 2, line))
            pos += 2
            continue
        kind = _SINGLE_CHAR.get(ch)
        if kind is None:
            return
        yield Token(kind, None, Span(pos, pos + 1, line))
        pos += 1