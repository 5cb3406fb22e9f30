"""Key-value settings stored under the ``settings.`` namespace."""

import json
import re
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from http import HTTPStatus
from typing import Any

from .httperror import DatastoreError, HttpError, NoSuchKey, from_datastore_error

NAMESPACE = "settings."
MAX_KEY_LENGTH = 128


def _like_to_regex(pattern: str) -> re.Pattern[str]:
    parts = []
    for ch in pattern:
        if ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


class KeyValueStore:
    """Thread-safe in-memory store of string keys and string values."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}
        self._lock = threading.Lock()

    def get_key_values(self, pattern: str) -> dict[str, str]:
        """Entries whose key matches a SQL LIKE pattern (``%`` and ``_``)."""
        regex = _like_to_regex(pattern)
        with self._lock:
            return {k: v for k, v in self._values.items() if regex.fullmatch(k)}

    def get_key_value(self, key: str) -> str:
        with self._lock:
            if key not in self._values:
                raise NoSuchKey(key)
            return self._values[key]

    def set_key_value(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def delete_key_value(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)


@contextmanager
def _datastore_errors() -> Iterator[None]:
    try:
        yield
    except DatastoreError as err:
        raise from_datastore_error(err) from err


def parse_key(key: str) -> str:
    """The namespaced storage key; raises HttpError 400 for overlong keys."""
    if len(key.encode("utf-8")) >= MAX_KEY_LENGTH:
        raise HttpError(HTTPStatus.BAD_REQUEST, "Too long key")
    return NAMESPACE + key


def settings_get(store: KeyValueStore) -> dict[str, Any]:
    """Every setting, keyed without the namespace prefix."""
    with _datastore_errors():
        entries = store.get_key_values(NAMESPACE + "%")
    return {key.removeprefix(NAMESPACE): json.loads(value) for key, value in entries.items()}


def setting_get(store: KeyValueStore, key: str) -> Any:
    """The value of one setting, or None if it is not set."""
    setting_key = parse_key(key)
    try:
        value = store.get_key_value(setting_key)
    except NoSuchKey:
        return None
    except DatastoreError as err:
        raise from_datastore_error(err) from err
    return json.loads(value)


def setting_set(store: KeyValueStore, key: str, value: Any) -> HTTPStatus:
    """Store a JSON-serialisable value; returns 201 Created."""
    setting_key = parse_key(key)
    try:
        text = json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as err:
        raise HttpError(HTTPStatus.BAD_REQUEST, f"Invalid JSON: {err}") from err
    with _datastore_errors():
        store.set_key_value(setting_key, text)
    return HTTPStatus.CREATED


def setting_delete(store: KeyValueStore, key: str) -> None:
    """Remove a setting."""
    setting_key = parse_key(key)
    with _datastore_errors():
        store.delete_key_value(setting_key)