"""Map HTTP statuses and transport failures onto :mod:`esp_adapter.errors`."""
from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from .codec import JsonCodec, PayloadCodec
from .errors import (
    BadRequestError,
    ClientError,
    ConnectionFailureError,
    EspError,
    ForbiddenError,
    RequestTimeoutError,
    ResourceNotFoundError,
    ServerError,
    UnauthorizedError,
    UnprocessableEntityError,
)

_LOGGER = logging.getLogger(__name__)

INVALID_DATACENTER_MESSAGE = (
    "Your API key may be invalid, or you've attempted to access the wrong datacenter"
)
_NAME_RESOLUTION_MARKERS = (
    "nodename nor servname provided",
    "name or service not known",
    "temporary failure in name resolution",
    "getaddrinfo failed",
    "no address associated with hostname",
)


def _status_is(code: int) -> Callable[[int], bool]:
    return lambda status: status == code


def _status_between(low: int, high: int) -> Callable[[int], bool]:
    return lambda status: low <= status <= high


# Evaluated top to bottom, first match wins.
CLASSIFICATION_RULES: tuple[tuple[Callable[[int], bool], type[EspError]], ...] = (
    (_status_is(400), BadRequestError),
    (_status_is(401), UnauthorizedError),
    (_status_is(403), ForbiddenError),
    (_status_is(404), ResourceNotFoundError),
    (_status_is(408), RequestTimeoutError),
    (_status_is(422), UnprocessableEntityError),
    (_status_between(400, 499), ClientError),
    (_status_between(500, 599), ServerError),
)


def error_class_for(status: int) -> type[EspError] | None:
    """Return the error class matching *status*, or ``None`` if it is not an error."""

    for matches, error_cls in CLASSIFICATION_RULES:
        if matches(status):
            return error_cls
    return None


def _detail_from_body(body: str | bytes | None, codec: PayloadCodec) -> str | None:
    if not body:
        return None
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    try:
        parsed: Any = codec.parse(body)
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None
    detail = parsed.get("detail")
    return None if detail is None else str(detail)


def classify(
    status: int,
    body: str | bytes | None = None,
    codec: PayloadCodec | None = None,
    message: str | None = None,
) -> None:
    """Raise the classified error for *status*; return quietly for non-errors.

    The message is the ``detail`` field of the JSON error body when present,
    otherwise *message*. Unparseable bodies never raise here; they fall back
    to *message* as well.
    """

    error_cls = error_class_for(status)
    if error_cls is None:
        return
    detail = _detail_from_body(body, codec or JsonCodec())
    text = detail if detail is not None else message
    _LOGGER.debug("HTTP %s 归类为 %s: %s", status, error_cls.__name__, text)
    raise error_cls(status=status, message=text)


def classify_transport_error(exc: Exception) -> EspError:
    """Translate an httpx transport failure into an :class:`EspError`.

    Timeouts become :class:`RequestTimeoutError` so they are retried like a 408.
    A host that cannot be resolved means the datacenter taken from the API key
    is bogus, so it is reported as :class:`UnauthorizedError`. Everything else,
    including URLs httpx refuses to build, is a :class:`ConnectionFailureError`.
    """

    if isinstance(exc, httpx.TimeoutException):
        return RequestTimeoutError(status=None, message=f"请求超时：{exc}")

    text = str(exc).lower()
    if isinstance(exc, httpx.ConnectError) and any(
        marker in text for marker in _NAME_RESOLUTION_MARKERS
    ):
        return UnauthorizedError(status=401, message=INVALID_DATACENTER_MESSAGE)

    return ConnectionFailureError(status=None, message=str(exc))
