"""Adapter base classes and interfaces."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping


class BaseAdapter(ABC):
    """Unified interface for email service provider adapters."""

    def __init__(self, api_key: str):
        self._api_key = api_key

    @property
    def api_key(self) -> str:
        return self._api_key

    @abstractmethod
    def list_collections(self, options: Mapping[str, Any] | None = None) -> Any:
        """Return the provider's audiences/lists."""
        raise NotImplementedError

    @abstractmethod
    def get_collection_metrics(
        self, collection_id: str, options: Mapping[str, Any] | None = None
    ) -> Any:
        """Return a single audience/list together with its stats."""
        raise NotImplementedError

    @staticmethod
    def select_params(
        options: Mapping[str, Any] | None, allowed: Iterable[str]
    ) -> dict[str, Any]:
        """Return the entries of *options* whose keys are in *allowed*."""

        if not options:
            return {}
        return {name: options[name] for name in allowed if name in options}
