"""Evaluation of parsed query programs."""

import math
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from .datatype import Function, query_eq
from .errors import EmptyQuery, InvalidType, MathError, VariableNotDefined
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

_ARITHMETIC_ERROR = "Cannot sub something that is not a number!"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _timestamp(moment: Any) -> str:
    if isinstance(moment, datetime):
        return moment.isoformat().replace("+00:00", "Z")
    return str(moment)


def _interval_text(interval: Any) -> str:
    if isinstance(interval, (tuple, list)) and len(interval) == 2:
        start, end = interval
        return f"{_timestamp(start)}/{_timestamp(end)}"
    return str(interval)


def init_env(
    interval: Any,
    builtins: Mapping[str, Function | Callable] | None = None,
) -> dict[str, Any]:
    """Create the starting variables: TIMEINTERVAL and the builtin functions."""
    env: dict[str, Any] = {"TIMEINTERVAL": _interval_text(interval)}
    for name, fn in (builtins or {}).items():
        env[name] = fn if isinstance(fn, Function) else Function(name, fn)
    return env


def _add(left: Any, right: Any) -> Any:
    if _is_number(left):
        if not _is_number(right):
            raise InvalidType("Cannot use + on something that is not a number with a number!")
        return float(left) + float(right)
    if isinstance(left, list):
        if not isinstance(right, list):
            raise InvalidType("Cannot use + on something that is not a list with a list!")
        return left + right
    if isinstance(left, str):
        if not isinstance(right, str):
            raise InvalidType("Cannot use + on something that is not a list with a list!")
        return left + right
    raise InvalidType("Cannot use + on something that is not a number, list or string!")


def _numbers(left: Any, right: Any) -> tuple[float, float]:
    if not _is_number(left) or not _is_number(right):
        raise InvalidType(_ARITHMETIC_ERROR)
    return float(left), float(right)


def _binary(op: BinaryOperator, left: Any, right: Any) -> Any:
    match op:
        case BinaryOperator.ADD:
            return _add(left, right)
        case BinaryOperator.EQUAL:
            return query_eq(left, right)
    a, b = _numbers(left, right)
    match op:
        case BinaryOperator.SUB:
            return a - b
        case BinaryOperator.MUL:
            return a * b
        case BinaryOperator.DIV:
            if b == 0.0:
                raise MathError("Tried to divide by zero!")
            return a / b
        case _:
            try:
                return math.fmod(a, b)
            except ValueError:
                return math.nan


def evaluate(expr: Expr, env: dict[str, Any], datastore: Any) -> Any:
    """Evaluate one expression, updating env for assignments and returns."""
    match expr:
        case BinaryOp(op=op, left=left, right=right):
            left_value = evaluate(left, env, datastore)
            right_value = evaluate(right, env, datastore)
            return _binary(op, left_value, right_value)
        case Assign(name=name, value=value):
            env[name] = evaluate(value, env, datastore)
            return None
        case Var(name=name):
            if name not in env:
                raise VariableNotDefined(name)
            return env[name]
        case Literal(value=value):
            return value
        case Return(value=value):
            env["RETURN"] = evaluate(value, env, datastore)
            return None
        case If(branches=branches):
            for condition, block in branches:
                if query_eq(evaluate(condition, env, datastore), True):
                    for statement in block:
                        evaluate(statement, env, datastore)
                    break
            return None
        case Call(name=name, args=args):
            values = [evaluate(arg, env, datastore) for arg in args]
            if name not in env:
                raise VariableNotDefined(name)
            fn = env[name]
            if not isinstance(fn, Function):
                raise InvalidType(name)
            return fn(values, env, datastore)
        case ListExpr(items=items):
            return [evaluate(item, env, datastore) for item in items]
        case DictExpr(items=items):
            return {key: evaluate(value, env, datastore) for key, value in items.items()}
    raise TypeError(f"unknown expression {expr!r}")


def interpret_program(
    program: Program,
    interval: Any,
    datastore: Any,
    builtins: Mapping[str, Function | Callable] | None = None,
) -> Any:
    """Run every statement and return the value the program returned."""
    env = init_env(interval, builtins)
    for statement in program.statements:
        evaluate(statement, env, datastore)
    if "RETURN" not in env:
        raise EmptyQuery()
    return env.pop("RETURN")