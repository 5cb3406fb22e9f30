"""Entry point for running query text against a datastore."""

import logging
from typing import Any

from .errors import ParsingError
from .functions import builtins, parse_time_interval
from .interpret import interpret_program
from .parser import parse_source

logger = logging.getLogger(__name__)


def query(code: str, interval: Any, datastore: Any) -> Any:
    """Parse and run ``code`` over ``interval``, returning the returned value.

    ``interval`` is either a ``start/end`` string or a pair of datetimes.
    """
    if isinstance(interval, str):
        interval = parse_time_interval(interval)
    try:
        program = parse_source(code)
    except ParsingError as err:
        logger.warning("ParsingError: %s", err.message)
        raise
    return interpret_program(program, interval, datastore, builtins())