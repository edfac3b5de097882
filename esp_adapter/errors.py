"""Error taxonomy raised by ESP adapters."""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Machine-discriminable tag carried by every :class:`EspError`."""

    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    REQUEST_TIMEOUT = "request_timeout"
    UNPROCESSABLE_ENTITY = "unprocessable_entity"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    CONNECTION_FAILURE = "connection_failure"
    DECODE_FAILURE = "decode_failure"


class EspError(Exception):
    """Base class for classified adapter failures.

    Only subclasses are raised. Each instance exposes ``kind``, the HTTP
    ``status`` (``None`` when the failure happened below HTTP) and a human
    readable ``message``. The base class itself carries no kind.
    """

    kind: ErrorKind | None = None

    def __init__(self, status: int | None = None, message: str | None = None):
        super().__init__(message or f"{type(self).__name__} (status={status})")
        self.status = status
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status!r}, message={self.message!r})"


class BadRequestError(EspError):
    kind = ErrorKind.BAD_REQUEST


class UnauthorizedError(EspError):
    kind = ErrorKind.UNAUTHORIZED


class ForbiddenError(EspError):
    kind = ErrorKind.FORBIDDEN


class ResourceNotFoundError(EspError):
    kind = ErrorKind.NOT_FOUND


class RequestTimeoutError(EspError):
    kind = ErrorKind.REQUEST_TIMEOUT


class UnprocessableEntityError(EspError):
    kind = ErrorKind.UNPROCESSABLE_ENTITY


class ClientError(EspError):
    """Any 4xx status without a dedicated class."""

    kind = ErrorKind.CLIENT_ERROR


class ServerError(EspError):
    """Any 5xx status, and payloads that cannot be decoded."""

    kind = ErrorKind.SERVER_ERROR


class ConnectionFailureError(EspError):
    """The request never produced an HTTP response."""

    kind = ErrorKind.CONNECTION_FAILURE


class DecodeFailureError(ServerError):
    """A response body that could not be parsed.

    Callers see it as a 500 :class:`ServerError` so parser internals never leak.
    """

    kind = ErrorKind.DECODE_FAILURE
