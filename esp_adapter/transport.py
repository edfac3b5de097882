"""HTTP transport for ESP adapters built on httpx."""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

import httpx

from .classifier import classify, classify_transport_error
from .codec import JsonCodec, PayloadCodec
from .config import ClientConfig
from .credentials import build_endpoint, encode_basic_token

_LOGGER = logging.getLogger(__name__)
_SENSITIVE_HEADERS = {"authorization", "proxy-authorization"}


def _mask_headers_for_log(headers: Mapping[str, str]) -> Dict[str, str]:
    """Return a copy of *headers* with credentials obscured for logging."""

    masked: Dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in _SENSITIVE_HEADERS and value:
            scheme = value.split(" ", 1)
            masked[key] = f"{scheme[0]} ***" if len(scheme) == 2 else "***"
        else:
            masked[key] = value
    return masked


class Transport:
    """Issue authenticated requests against the datacenter of an API key.

    Every completed exchange is classified before :meth:`request` returns, so
    callers only ever see 2xx responses or an :class:`~esp_adapter.errors.EspError`.
    A fresh :class:`httpx.Client` is opened per request; *http_transport* lets
    callers (tests, mostly) substitute the network layer.
    """

    def __init__(
        self,
        api_key: str,
        config: ClientConfig | None = None,
        codec: PayloadCodec | None = None,
        http_transport: httpx.BaseTransport | None = None,
    ):
        self._api_key = api_key
        self.config = config or ClientConfig()
        self.codec = codec or JsonCodec()
        self._http_transport = http_transport

    @property
    def endpoint(self) -> str:
        return build_endpoint(self._api_key)

    def headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Basic {encode_basic_token(self._api_key)}",
        }

    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.config.timeout, connect=self.config.write_timeout)

    def _on_response(self, response: httpx.Response) -> None:
        response.read()
        classify(response.status_code, response.content, codec=self.codec)

    def request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Send one request and return the classified response."""

        endpoint = self.endpoint
        headers = self.headers()
        _LOGGER.info(
            "HTTP 请求: %s %s/%s (timeout=%ss, connect=%ss)",
            method,
            endpoint,
            path,
            self.config.timeout,
            self.config.write_timeout,
        )
        _LOGGER.debug("HTTP 请求头: %s", _mask_headers_for_log(headers))
        if params:
            _LOGGER.debug("HTTP 查询参数: %s", dict(params))

        try:
            with httpx.Client(
                base_url=endpoint,
                headers=headers,
                timeout=self.timeout(),
                transport=self._http_transport,
                event_hooks={"response": [self._on_response]},
            ) as client:
                response = client.request(method, path, params=dict(params or {}))
        except (httpx.RequestError, httpx.InvalidURL, UnicodeError) as exc:
            _LOGGER.warning("HTTP 请求异常：%s", exc)
            raise classify_transport_error(exc) from exc

        _LOGGER.info("HTTP 响应状态 %s", response.status_code)
        return response
