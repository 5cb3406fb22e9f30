"""Errors raised while parsing or running a query."""

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def _quote(text: str) -> str:
    return '"' + "".join(_ESCAPES.get(ch, ch) for ch in text) + '"'


class QueryError(Exception):
    """Base class of every error a query can raise."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{type(self).__name__}({_quote(self.message)})"


class ParsingError(QueryError):
    """The query text could not be parsed."""


class EmptyQuery(QueryError):
    """The query finished without returning a value."""

    def __init__(self) -> None:
        super().__init__("")

    def __str__(self) -> str:
        return "EmptyQuery"


class VariableNotDefined(QueryError):
    """A name was used that has no value."""


class MathError(QueryError):
    """An arithmetic operation failed, such as division by zero."""


class InvalidType(QueryError):
    """A value had a type the operation does not accept."""


class InvalidFunctionParameters(QueryError):
    """A query function got arguments it cannot use."""


class TimeIntervalError(QueryError):
    """The TIMEINTERVAL variable is missing or malformed."""


class BucketQueryError(QueryError):
    """Reading buckets or events from the datastore failed."""


class RegexCompileError(QueryError):
    """A regular expression in the query could not be compiled."""