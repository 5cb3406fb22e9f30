"""Query-language interpreter for time-tracking events, plus local server helpers."""

__version__ = "0.13.1"
__all__ = [
    "errors",
    "lexer",
    "syntax",
    "parser",
    "datatype",
    "interpret",
    "functions",
    "query",
    "dirs",
    "config",
    "device_id",
    "logconfig",
    "hostcheck",
    "cors",
    "httperror",
    "settings",
]