"""Single-retry policy for timed out ESP requests."""
from __future__ import annotations

import logging
from typing import Callable, TypeVar

from .errors import RequestTimeoutError

_LOGGER = logging.getLogger(__name__)
MAX_RETRIES = 1

T = TypeVar("T")


def call_with_retry(operation: Callable[[], T], max_retries: int = MAX_RETRIES) -> T:
    """Run *operation*, re-running it from scratch after a request timeout.

    Only :class:`RequestTimeoutError` is retried, at most *max_retries* times
    and without delay. Every other error propagates on the first attempt, and
    a timeout on the last attempt propagates unchanged.
    """

    retries = max(max_retries, 0)
    for attempt in range(1, retries + 1):
        try:
            return operation()
        except RequestTimeoutError as exc:
            _LOGGER.warning("请求超时，准备重试（第 %s/%s 次）：%s", attempt, retries + 1, exc)
    return operation()
