"""Syntax tree of the query language."""

from dataclasses import dataclass, field
from enum import Enum

from .lexer import Span


class BinaryOperator(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    EQUAL = "=="


class Expr:
    """Base class of every expression node."""


def _span():
    return field(default=None, compare=False, repr=False)


@dataclass
class BinaryOp(Expr):
    op: BinaryOperator
    left: Expr
    right: Expr
    span: Span | None = _span()


@dataclass
class Var(Expr):
    name: str
    span: Span | None = _span()


@dataclass
class Assign(Expr):
    name: str
    value: Expr
    span: Span | None = _span()


@dataclass
class Call(Expr):
    name: str
    args: list[Expr] = field(default_factory=list)
    span: Span | None = _span()


@dataclass
class If(Expr):
    """Conditional chain; the first branch whose condition is true runs."""

    branches: list[tuple[Expr, list[Expr]]] = field(default_factory=list)
    span: Span | None = _span()


@dataclass
class Return(Expr):
    value: Expr
    span: Span | None = _span()


@dataclass(eq=False)
class Literal(Expr):
    """A bool, number or string constant."""

    value: bool | float | str
    span: Span | None = _span()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Literal):
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value


@dataclass
class ListExpr(Expr):
    items: list[Expr] = field(default_factory=list)
    span: Span | None = _span()


@dataclass
class DictExpr(Expr):
    items: dict[str, Expr] = field(default_factory=dict)
    span: Span | None = _span()


@dataclass
class Program:
    statements: list[Expr] = field(default_factory=list)