"""Client configuration for ESP adapters."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

DEFAULT_TIMEOUT = 60.0
DEFAULT_WRITE_TIMEOUT = 60.0


def _seconds(raw: Any, name: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} 必须为数字") from exc
    if value < 0:
        raise ValueError(f"{name} 不能为负数")
    return value


@dataclass(frozen=True)
class ClientConfig:
    """Request deadlines in seconds.

    ``timeout`` bounds a whole attempt, ``write_timeout`` bounds establishing
    the connection.
    """

    timeout: float = DEFAULT_TIMEOUT
    write_timeout: float = DEFAULT_WRITE_TIMEOUT

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ClientConfig":
        """Build a config from *data*, ignoring keys it does not recognize."""

        if data is None:
            return cls()
        if isinstance(data, ClientConfig):
            return data
        if not isinstance(data, Mapping):
            raise ValueError("客户端配置必须为字典")
        return cls(
            timeout=_seconds(data.get("timeout", DEFAULT_TIMEOUT), "timeout"),
            write_timeout=_seconds(
                data.get("write_timeout", DEFAULT_WRITE_TIMEOUT), "write_timeout"
            ),
        )
