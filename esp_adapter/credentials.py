"""Endpoint and Basic auth helpers derived from a Mailchimp API key."""
from __future__ import annotations

import base64
import re
from typing import Any

API_HOST = "api.mailchimp.com"
API_VERSION = "3.0"
INVALID_SERVER = "invalid-server"
_BASIC_USER = "user"
_REGION_PATTERN = re.compile(r"[A-Za-z0-9]+")


def resolve_region(api_key: Any) -> str:
    """Return the datacenter encoded in *api_key* (``"<key>-<dc>"``).

    Keys that are not strings, do not split into exactly two segments on
    ``-``, or whose datacenter is not a plain alphanumeric host label resolve
    to :data:`INVALID_SERVER`. That host never resolves, so requests against it
    fail through the normal connection error path.
    """

    if not isinstance(api_key, str):
        return INVALID_SERVER
    parts = api_key.split("-")
    if len(parts) != 2 or not _REGION_PATTERN.fullmatch(parts[1]):
        return INVALID_SERVER
    return parts[1]


def build_endpoint(api_key: Any) -> str:
    """Return the versioned base URL for the datacenter of *api_key*."""

    return f"https://{resolve_region(api_key)}.{API_HOST}/{API_VERSION}"


def encode_basic_token(api_key: str) -> str:
    """Return the URL-safe base64 token used in the ``Authorization`` header."""

    raw = f"{_BASIC_USER}:{api_key}".encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")
