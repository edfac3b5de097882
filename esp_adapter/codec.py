"""Payload decoding for ESP responses."""
from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from .errors import DecodeFailureError

_LOGGER = logging.getLogger(__name__)
GENERIC_FAILURE_MESSAGE = "Something went wrong!"


class PayloadCodec(Protocol):
    """Anything able to turn a response body into structured data."""

    def parse(self, text: str) -> Any:
        """Return the parsed value or raise :class:`ValueError`."""


class JsonCodec:
    """Default codec backed by :mod:`json`."""

    def parse(self, text: str) -> Any:
        return json.loads(text)


def decode_payload(body: str | bytes | None, codec: PayloadCodec | None = None) -> Any:
    """Parse *body* into a result mapping.

    An empty body yields ``None``. A body that fails to parse raises a 500
    :class:`~esp_adapter.errors.ServerError` with a generic message.
    """

    if not body:
        return None
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    parser = codec or JsonCodec()
    try:
        return parser.parse(body)
    except ValueError as exc:
        _LOGGER.debug("响应体解析失败：%s | 片段: %s", exc, body[:512])
        raise DecodeFailureError(status=500, message=GENERIC_FAILURE_MESSAGE) from exc
