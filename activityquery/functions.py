"""Builtin functions available to queries, and the datastore they read from."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any

from .datatype import (
    Event,
    Function,
    _data_eq,
    describe,
    to_count,
    to_events,
    to_string,
)
from .errors import BucketQueryError, InvalidFunctionParameters, TimeIntervalError

logger = logging.getLogger(__name__)


@dataclass
class Datastore:
    """In-memory store of buckets and the events they hold.

    ``buckets`` maps a bucket id to its metadata (hostname, client, ...);
    ``events`` maps a bucket id to its events.
    """

    buckets: dict[str, dict[str, Any]] = field(default_factory=dict)
    events: dict[str, list[Event]] = field(default_factory=dict)

    def get_events(
        self,
        bucket_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> list[Event]:
        """Events of a bucket overlapping [start, end], newest first."""
        if bucket_id not in self.buckets:
            raise KeyError(f"no such bucket '{bucket_id}'")
        selected = [
            replace(event)
            for event in self.events.get(bucket_id, [])
            if (start is None or event.timestamp + event.duration >= start)
            and (end is None or event.timestamp <= end)
        ]
        selected.sort(key=lambda event: event.timestamp, reverse=True)
        return selected if limit is None else selected[:limit]

    def get_buckets(self) -> dict[str, dict[str, Any]]:
        """All buckets by id, each with its id included in its metadata."""
        return {
            bucket_id: {**info, "id": bucket_id}
            for bucket_id, info in self.buckets.items()
        }


def _parse_moment(text: str) -> datetime:
    moment = datetime.fromisoformat(text.strip())
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def parse_time_interval(text: str) -> tuple[datetime, datetime]:
    """Parse ``start/end`` in ISO 8601 into a pair of UTC datetimes."""
    parts = text.split("/")
    if len(parts) != 2:
        raise ValueError(f"time interval must have the form start/end: {text!r}")
    start, end = (_parse_moment(part) for part in parts)
    return start, end


def args_length(args: list, length: int) -> None:
    """Raise unless exactly ``length`` arguments were given."""
    if len(args) != length:
        raise InvalidFunctionParameters(
            f"Expected {length} parameters in function, got {len(args)}"
        )


def get_time_interval(env: Mapping[str, Any]) -> tuple[datetime, datetime]:
    """The interval held by the TIMEINTERVAL variable."""
    if "TIMEINTERVAL" not in env:
        raise TimeIntervalError("TIMEINTERVAL not defined!")
    text = env["TIMEINTERVAL"]
    if not isinstance(text, str):
        raise TimeIntervalError("TIMEINTERVAL is not of type string!")
    try:
        return parse_time_interval(text)
    except ValueError as err:
        raise TimeIntervalError(f"Failed to parse TIMEINTERVAL: {text}") from err


def print_args(args: list, env: Mapping[str, Any], datastore: Any) -> None:
    """Log every argument."""
    for arg in args:
        logger.info("%s", describe(arg))
    return None


def query_bucket(args: list, env: Mapping[str, Any], datastore: Any) -> list[Event]:
    """Events of a bucket within the query's time interval."""
    args_length(args, 1)
    bucket_id = to_string(args[0])
    start, end = get_time_interval(env)
    try:
        return list(datastore.get_events(bucket_id, start, end, None))
    except Exception as err:
        raise BucketQueryError(f"Failed to query bucket: {err!r}") from err


def query_bucket_names(args: list, env: Mapping[str, Any], datastore: Any) -> list[str]:
    """Ids of every bucket in the datastore."""
    args_length(args, 0)
    try:
        buckets = datastore.get_buckets()
    except Exception as err:
        raise BucketQueryError(f"Failed to query bucket names: {err!r}") from err
    return [str(name) for name in buckets]


def contains(args: list, env: Mapping[str, Any], datastore: Any) -> bool:
    """Whether a list holds a value, or a dict holds a key."""
    args_length(args, 2)
    container, item = args
    if isinstance(container, list):
        return any(_data_eq(entry, item) for entry in container)
    if isinstance(container, dict):
        if not isinstance(item, str):
            raise InvalidFunctionParameters(
                f"function contains got second argument {describe(container)}, "
                "expected type String"
            )
        return item in container
    raise InvalidFunctionParameters(
        f"function contains got first argument {describe(container)}, "
        "expected type List or Dict"
    )


def limit_events(args: list, env: Mapping[str, Any], datastore: Any) -> list[Event]:
    """The first ``limit`` events of a list."""
    args_length(args, 2)
    events = to_events(args[0])
    limit = to_count(args[1])
    return events[:limit]


def sum_durations(args: list, env: Mapping[str, Any], datastore: Any) -> float:
    """Total duration of the events in seconds, at millisecond precision."""
    args_length(args, 1)
    total = sum((event.duration for event in to_events(args[0])), timedelta(0))
    micros = total // timedelta(microseconds=1)
    millis = abs(micros) // 1000
    if micros < 0:
        millis = -millis
    return millis / 1000.0


def concat(args: list, env: Mapping[str, Any], datastore: Any) -> list[Event]:
    """All events of every argument list, in order."""
    return [event for arg in args for event in to_events(arg)]


def builtins() -> dict[str, Function]:
    """The functions every query starts with, by name."""
    table = {
        "print": print_args,
        "query_bucket": query_bucket,
        "query_bucket_names": query_bucket_names,
        "contains": contains,
        "limit_events": limit_events,
        "sum_durations": sum_durations,
        "concat": concat,
    }
    return {name: Function(name, fn) for name, fn in table.items()}