"""Datastore errors and the HTTP error responses they become."""

import json
from collections.abc import Iterable
from http import HTTPStatus


class DatastoreError(Exception):
    """Base class of errors reported by the datastore."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"{type(self).__name__}({json.dumps(self.detail, ensure_ascii=False)})"


class NoSuchBucket(DatastoreError):
    """The bucket does not exist; ``detail`` is its id."""


class BucketAlreadyExists(DatastoreError):
    """A bucket with this id exists already; ``detail`` is its id."""


class NoSuchKey(DatastoreError):
    """The key is not stored; ``detail`` is the key."""


class MpscError(DatastoreError):
    """Communication with the datastore worker failed."""

    def __str__(self) -> str:
        return "MpscError"


class InternalError(DatastoreError):
    """An unexpected failure inside the datastore."""


class Uninitialized(DatastoreError):
    """The datastore was not initialised."""


class OldDbVersion(DatastoreError):
    """The database is of a version that cannot be used."""


class HttpError(Exception):
    """An error response: a status code and a JSON message body."""

    def __init__(self, status: HTTPStatus | int, message: str) -> None:
        super().__init__(message)
        self.status = HTTPStatus(status)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def to_json(self) -> str:
        """The response body; the status is not part of it."""
        return json.dumps({"message": self.message}, separators=(",", ":"), ensure_ascii=False)


def from_datastore_error(error: DatastoreError) -> HttpError:
    """The HTTP response a datastore error is reported as."""
    match error:
        case NoSuchBucket():
            return HttpError(
                HTTPStatus.NOT_FOUND,
                f"The requested bucket '{error.detail}' does not exist",
            )
        case BucketAlreadyExists():
            return HttpError(
                HTTPStatus.NOT_MODIFIED, f"Bucket '{error.detail}' already exists"
            )
        case NoSuchKey():
            return HttpError(
                HTTPStatus.NOT_FOUND,
                f"The requested key(s) '{error.detail}' do not exist",
            )
        case MpscError():
            return HttpError(HTTPStatus.INTERNAL_SERVER_ERROR, "Unexpected Mpsc error!")
        case _:
            return HttpError(HTTPStatus.INTERNAL_SERVER_ERROR, error.detail)


def export_disposition(bucket_ids: Iterable[str]) -> str:
    """Content-Disposition header value of a bucket export."""
    ids = list(bucket_ids)
    if len(ids) == 1:
        return f"attachment; filename=aw-bucket-export_{ids[0]}.json"
    return "attachment; filename=aw-buckets-export.json"