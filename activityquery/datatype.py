"""Values a query works with, and conversions between them.

A query value is one of: ``None``, ``bool``, a number (``float``), ``str``,
``Event``, ``list`` of values, ``dict`` from strings to values, or a
``Function``.
"""

import json
import math
import re
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from .errors import InvalidFunctionParameters, InvalidType, RegexCompileError


@dataclass
class Event:
    """A span of time with attached data."""

    timestamp: datetime
    duration: timedelta = timedelta(0)
    data: dict[str, Any] = field(default_factory=dict)
    id: int | None = None


@dataclass(frozen=True, eq=False)
class Function:
    """A named function callable from a query.

    Functions never compare equal to anything but themselves.
    """

    name: str
    implementation: Callable[[list, dict, Any], Any] = field(repr=False)

    def __call__(self, args: list, env: dict, datastore: Any) -> Any:
        return self.implementation(args, env, datastore)


@dataclass(frozen=True)
class Rule:
    """A classification rule; without a regex it matches nothing."""

    regex: re.Pattern[str] | None = None

    def matches(self, event: Event) -> bool:
        """True if any string value in the event's data matches the regex."""
        if self.regex is None:
            return False
        return any(
            isinstance(value, str) and self.regex.search(value) is not None
            for value in event.data.values()
        )


def _kind(value: Any) -> str:
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "Bool"
    if isinstance(value, (int, float)):
        return "Number"
    if isinstance(value, str):
        return "String"
    if isinstance(value, Event):
        return "Event"
    if isinstance(value, list):
        return "List"
    if isinstance(value, dict):
        return "Dict"
    if isinstance(value, Function):
        return "Function"
    raise TypeError(f"not a query value: {value!r}")


def _format_number(number: float) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    if float(number).is_integer():
        return str(int(number))
    return repr(float(number))


def describe(value: Any) -> str:
    """Debug text of a query value, as used in error messages."""
    match _kind(value):
        case "None":
            return "None()"
        case "Bool":
            return f"Bool({'true' if value else 'false'})"
        case "Number":
            return f"Number({_format_number(value)})"
        case "String":
            return f"String({value})"
        case "Event":
            return f"Event({value!r})"
        case "List":
            return "List([" + ", ".join(describe(item) for item in value) + "])"
        case "Dict":
            items = ", ".join(f"{json.dumps(k)}: {describe(v)}" for k, v in value.items())
            return "Dict({" + items + "})"
        case _:
            return f"Function({value.name})"


def _data_eq(left: Any, right: Any) -> bool:
    kind = _kind(left)
    if kind != _kind(right):
        return False
    match kind:
        case "None":
            return True
        case "Function":
            return False
        case "List":
            return len(left) == len(right) and all(
                _data_eq(a, b) for a, b in zip(left, right)
            )
        case "Dict":
            return left.keys() == right.keys() and all(
                _data_eq(value, right[key]) for key, value in left.items()
            )
        case _:
            return left == right


def query_eq(left: Any, right: Any) -> bool:
    """Compare two values, raising InvalidType if their types differ.

    Two ``None`` values compare as not equal.
    """
    kind = _kind(left)
    if kind != _kind(right) or kind == "Function":
        raise InvalidType(
            f"Cannot compare values of different types {describe(left)} and {describe(right)}"
        )
    if kind == "None":
        return False
    return _data_eq(left, right)


def to_list(value: Any) -> list:
    if isinstance(value, list):
        return list(value)
    raise InvalidFunctionParameters(
        f"Expected function parameter of type List, got {describe(value)}"
    )


def to_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    raise InvalidFunctionParameters(
        f"Expected function parameter of type String, list contains {describe(value)}"
    )


def to_string_list(value: Any) -> list[str]:
    return [to_string(item) for item in to_list(value)]


def to_events(value: Any) -> list[Event]:
    events = []
    for item in to_list(value):
        if not isinstance(item, Event):
            raise InvalidFunctionParameters(
                "Expected function parameter of type List of Events, "
                f"list contains {describe(item)}"
            )
        events.append(item)
    return events


def to_number(value: Any) -> float:
    if _kind(value) == "Number":
        return float(value)
    raise InvalidFunctionParameters(
        f"Expected function parameter of type Number, got {describe(value)}"
    )


def to_count(value: Any) -> int:
    """A number as a non-negative count, truncated and saturated."""
    number = to_number(value)
    if math.isnan(number) or number <= 0:
        return 0
    if math.isinf(number):
        return sys.maxsize
    return int(number)


def to_json(value: Any) -> Any:
    """Convert a plain value (no events, dicts or functions) to JSON data."""
    match _kind(value):
        case "None" | "Bool" | "String":
            return value
        case "Number":
            number = float(value)
            if not math.isfinite(number):
                raise InvalidFunctionParameters(
                    f"Cannot represent {describe(value)} as a JSON number"
                )
            return number
        case "List":
            return [to_json(item) for item in value]
        case _:
            raise InvalidFunctionParameters(
                "Query2 support for parsing values is limited, "
                f"does not support parsing {describe(value)}"
            )


def to_json_list(value: Any) -> list:
    return [to_json(item) for item in to_list(value)]


def to_rule(value: Any) -> Rule:
    """Build a rule from a dict such as ``{"type": "regex", "regex": "..."}``."""
    if not isinstance(value, dict):
        raise InvalidFunctionParameters(f"Expected rule dict, got {describe(value)}")
    if "type" not in value:
        raise InvalidFunctionParameters("rule does not have a type")
    rule_type = value["type"]
    if not isinstance(rule_type, str):
        raise InvalidFunctionParameters("rule type is not a string")
    if rule_type == "none":
        return Rule()
    if rule_type != "regex":
        raise InvalidFunctionParameters(f"Unknown rule type '{rule_type}'")
    if "regex" not in value:
        raise InvalidFunctionParameters("regex rule is missing the 'regex' field")
    pattern = value["regex"]
    if not isinstance(pattern, str):
        raise InvalidFunctionParameters(
            "the regex field of the regex rule is not a string"
        )
    ignore_case = value.get("ignore_case", False)
    if not isinstance(ignore_case, bool):
        raise InvalidFunctionParameters(
            "the ignore_case field of the regex rule is not a bool"
        )
    try:
        regex = re.compile(pattern, re.IGNORECASE if ignore_case else 0)
    except re.error as err:
        raise RegexCompileError(
            f"Failed to compile regex string '{pattern}': '{err!r}"
        ) from err
    return Rule(regex)


def _rule_pairs(value: Any, label: str, convert_first: Callable[[Any], Any]) -> list:
    pairs = []
    for item in to_list(value):
        if not isinstance(item, list):
            raise InvalidFunctionParameters(
                f"Expected function parameter of type list of ({label}, rule) tuples, "
                f"got {describe(item)}"
            )
        malformed = InvalidFunctionParameters(
            f"Expected function parameter of type list of ({label}, rule) tuples, "
            f"list contains {describe(item)}"
        )
        if len(item) < 1:
            raise malformed
        first = convert_first(item[0])
        if len(item) < 2:
            raise malformed
        pairs.append((first, to_rule(item[1])))
    return pairs


def to_tag_rules(value: Any) -> list[tuple[str, Rule]]:
    """Convert ``[[tag, rule], ...]`` to (tag, Rule) pairs."""
    return _rule_pairs(value, "tag", to_string)


def to_category_rules(value: Any) -> list[tuple[list[str], Rule]]:
    """Convert ``[[[name, ...], rule], ...]`` to (category, Rule) pairs."""
    return _rule_pairs(value, "category", to_string_list)