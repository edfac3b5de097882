"""Mailchimp Marketing API adapter."""
from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from .base import BaseAdapter
from .codec import PayloadCodec, decode_payload
from .config import ClientConfig
from .retry import MAX_RETRIES, call_with_retry
from .transport import Transport

_LOGGER = logging.getLogger(__name__)

LIST_COLLECTIONS_PARAMS = (
    "fields",
    "exclude_fields",
    "count",
    "offset",
    "before_date_created",
    "since_date_created",
    "before_campaign_last_sent",
    "since_campaign_last_sent",
    "email",
    "sort_field",
    "sort_dir",
    "has_ecommerce_store",
    "include_total_contacts",
)
COLLECTION_METRICS_PARAMS = ("fields", "exclude_fields", "include_total_contacts")


class MailchimpAdapter(BaseAdapter):
    """Adapter exposing Mailchimp audiences ("lists") and their metrics."""

    def __init__(
        self,
        api_key: str,
        config: Mapping[str, Any] | ClientConfig | None = None,
        codec: PayloadCodec | None = None,
        http_transport: httpx.BaseTransport | None = None,
    ):
        super().__init__(api_key)
        self.config = ClientConfig.from_mapping(config)
        self.transport = Transport(
            api_key, self.config, codec=codec, http_transport=http_transport
        )
        self.max_retries = MAX_RETRIES

    def list_collections(self, options: Mapping[str, Any] | None = None) -> Any:
        """``GET /lists`` forwarding only the recognized query options."""

        return self._get("lists", options, LIST_COLLECTIONS_PARAMS)

    def get_collection_metrics(
        self, collection_id: str, options: Mapping[str, Any] | None = None
    ) -> Any:
        """``GET /lists/{collection_id}`` forwarding only the recognized query options."""

        return self._get(f"lists/{collection_id}", options, COLLECTION_METRICS_PARAMS)

    def _get(self, path: str, options: Mapping[str, Any] | None, allowed: tuple[str, ...]) -> Any:
        def attempt() -> Any:
            params = self.select_params(options, allowed)
            dropped = sorted(str(key) for key in set(options or {}) - set(params))
            if dropped:
                _LOGGER.debug("忽略不支持的查询参数：%s", ", ".join(dropped))
            response = self.transport.request("GET", path, params)
            return decode_payload(response.content, self.transport.codec)

        return call_with_retry(attempt, max_retries=self.max_retries)
