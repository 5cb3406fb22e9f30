"""Parser turning query tokens into a syntax tree."""

from collections.abc import Iterable

from .errors import ParsingError
from .lexer import Span, Token, TokenKind, tokenize
from .syntax import (
    Assign,
    BinaryOp,
    BinaryOperator,
    Call,
    DictExpr,
    Expr,
    If,
    ListExpr,
    Literal,
    Program,
    Return,
    Var,
)

_OPERATORS = {
    TokenKind.PLUS: BinaryOperator.ADD,
    TokenKind.MINUS: BinaryOperator.SUB,
    TokenKind.STAR: BinaryOperator.MUL,
    TokenKind.SLASH: BinaryOperator.DIV,
    TokenKind.PERCENT: BinaryOperator.MOD,
    TokenKind.EQUALS: BinaryOperator.EQUAL,
}


def _describe(token: Token) -> str:
    if token.value is None:
        return f"'{token.kind.value}'"
    return f"{token.kind.value} {token.value!r}"


class Parser:
    """Recursive-descent parser over a sequence of tokens.

    All binary operators share one precedence level and associate to the left.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens = list(tokens)
        self._pos = 0

    def parse_program(self) -> Program:
        statements = self._statements(None)
        if self._peek() is not None:
            raise self._error()
        return Program(statements)

    def _peek(self, offset: int = 0) -> Token | None:
        index = self._pos + offset
        return self._tokens[index] if index < len(self._tokens) else None

    def _at(self, kind: TokenKind, offset: int = 0) -> bool:
        token = self._peek(offset)
        return token is not None and token.kind is kind

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            raise self._error()
        self._pos += 1
        return token

    def _expect(self, kind: TokenKind) -> Token:
        if not self._at(kind):
            raise self._error(kind)
        return self._advance()

    def _error(self, expected: TokenKind | None = None) -> ParsingError:
        token = self._peek()
        if token is None:
            found = "end of input"
        else:
            found = f"{_describe(token)} at line {token.span.line}"
        message = f"unexpected {found}"
        if expected is not None:
            message += f", expected '{expected.value}'"
        return ParsingError(message)

    def _span_from(self, start: Token) -> Span:
        end = self._tokens[self._pos - 1]
        return Span(start.span.lo, end.span.hi, start.span.line)

    def _statements(self, closing: TokenKind | None) -> list[Expr]:
        statements: list[Expr] = []
        while True:
            token = self._peek()
            if token is None:
                if closing is None:
                    return statements
                raise self._error(closing)
            if token.kind is TokenKind.SEMI:
                self._advance()
                continue
            if closing is not None and token.kind is closing:
                return statements
            statements.append(self._statement())

    def _statement(self) -> Expr:
        if self._at(TokenKind.IF):
            return self._if_chain()
        value = self._ret()
        self._expect(TokenKind.SEMI)
        return value

    def _if_chain(self) -> If:
        start = self._advance()
        branches = [self._cond_block()]
        while self._at(TokenKind.ELIF):
            self._advance()
            branches.append(self._cond_block())
        if self._at(TokenKind.ELSE):
            else_token = self._advance()
            block = self._block()
            branches.append((Literal(True, span=self._span_from(else_token)), block))
        return If(branches, span=self._span_from(start))

    def _cond_block(self) -> tuple[Expr, list[Expr]]:
        condition = self._binop()
        return condition, self._block()

    def _block(self) -> list[Expr]:
        self._expect(TokenKind.LBRACE)
        block = self._statements(TokenKind.RBRACE)
        self._expect(TokenKind.RBRACE)
        return block

    def _ret(self) -> Expr:
        if self._at(TokenKind.RETURN):
            start = self._advance()
            value = self._assign()
            return Return(value, span=self._span_from(start))
        return self._assign()

    def _assign(self) -> Expr:
        if self._at(TokenKind.IDENT) and self._at(TokenKind.ASSIGN, 1):
            start = self._advance()
            self._advance()
            value = self._binop()
            return Assign(start.value, value, span=self._span_from(start))
        return self._binop()

    def _binop(self) -> Expr:
        start = self._peek()
        left = self._func()
        while (token := self._peek()) is not None and token.kind in _OPERATORS:
            self._advance()
            right = self._func()
            left = BinaryOp(_OPERATORS[token.kind], left, right, span=self._span_from(start))
        return left

    def _func(self) -> Expr:
        if self._at(TokenKind.IDENT) and self._at(TokenKind.LPAREN, 1):
            start = self._advance()
            self._advance()
            args = [] if self._at(TokenKind.RPAREN) else self._inner_list()
            self._expect(TokenKind.RPAREN)
            return Call(start.value, args, span=self._span_from(start))
        return self._object()

    def _object(self) -> Expr:
        if not self._at(TokenKind.LBRACE):
            return self._list()
        start = self._advance()
        items: dict[str, Expr] = {}
        if not self._at(TokenKind.RBRACE):
            while True:
                key = self._expect(TokenKind.STRING).value
                self._expect(TokenKind.COLON)
                items[key] = self._binop()
                if not self._at(TokenKind.COMMA):
                    break
                self._advance()
        self._expect(TokenKind.RBRACE)
        return DictExpr(items, span=self._span_from(start))

    def _list(self) -> Expr:
        if not self._at(TokenKind.LBRACKET):
            return self._atom()
        start = self._advance()
        items = [] if self._at(TokenKind.RBRACKET) else self._inner_list()
        self._expect(TokenKind.RBRACKET)
        return ListExpr(items, span=self._span_from(start))

    def _inner_list(self) -> list[Expr]:
        items = [self._binop()]
        while self._at(TokenKind.COMMA):
            self._advance()
            items.append(self._binop())
        return items

    def _atom(self) -> Expr:
        token = self._peek()
        if token is None:
            raise self._error()
        if token.kind is TokenKind.IDENT:
            self._advance()
            return Var(token.value, span=token.span)
        if token.kind in (TokenKind.BOOL, TokenKind.NUMBER, TokenKind.STRING):
            self._advance()
            return Literal(token.value, span=token.span)
        if token.kind is TokenKind.LPAREN:
            self._advance()
            inner = self._binop()
            self._expect(TokenKind.RPAREN)
            return inner
        raise self._error()


def parse(tokens: Iterable[Token]) -> Program:
    """Parse a token sequence into a program."""
    return Parser(tokens).parse_program()


def parse_source(text: str) -> Program:
    """Tokenize and parse query text."""
    return parse(tokenize(text))