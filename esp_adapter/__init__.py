"""Adapter factory and public API of the ESP adapter package."""
from __future__ import annotations

from typing import Any

from .base import BaseAdapter
from .config import ClientConfig
from .errors import (
    BadRequestError,
    ClientError,
    ConnectionFailureError,
    DecodeFailureError,
    ErrorKind,
    EspError,
    ForbiddenError,
    RequestTimeoutError,
    ResourceNotFoundError,
    ServerError,
    UnauthorizedError,
    UnprocessableEntityError,
)
from .mailchimp import MailchimpAdapter

__all__ = [
    "BadRequestError",
    "BaseAdapter",
    "ClientConfig",
    "ClientError",
    "ConnectionFailureError",
    "DecodeFailureError",
    "ErrorKind",
    "EspError",
    "ForbiddenError",
    "MailchimpAdapter",
    "RequestTimeoutError",
    "ResourceNotFoundError",
    "ServerError",
    "UnauthorizedError",
    "UnprocessableEntityError",
    "make_adapter",
]


def make_adapter(name: str, config: dict[str, Any]) -> BaseAdapter:
    """Return an adapter instance configured by *name* and *config*.

    Parameters
    ----------
    name:
        Adapter identifier from ``config.yaml``.
    config:
        Global configuration mapping. The provider section (``mailchimp``) is
        extracted inside this factory and must contain ``api_key``.
    """

    normalized = (name or "").strip().lower()
    if normalized in {"", "mailchimp"}:
        section = config.get("mailchimp", {}) if isinstance(config, dict) else {}
        if not isinstance(section, dict):
            raise ValueError("mailchimp 配置必须为字典")
        api_key = section.get("api_key")
        if not isinstance(api_key, str) or not api_key.strip():
            raise ValueError("mailchimp.api_key 未配置")
        return MailchimpAdapter(api_key.strip(), config=section)

    raise ValueError(f"未知适配器：{name}")
