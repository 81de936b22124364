"""Configuration helpers for the catalog client and the wait loop."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Any

from .errors import ConfigError

DEFAULT_NAMESPACE = "default"
DEFAULT_INTERVAL = "1s"
DEFAULT_TIMEOUT = "5m"
NO_TIMEOUT = ("never", "-1")

_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}
_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")


def _read_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        parsed = float(value)
        return parsed if parsed > 0 else default
    except ValueError:
        return default


def parse_duration(value: str) -> float:
    """Parse a duration such as ``1s``, ``500ms``, ``5m`` or ``1h30m`` into seconds."""

    text = value.strip().lower()
    if not text:
        raise ConfigError("duration must not be empty")

    total = 0.0
    position = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()

    if position != len(text):
        raise ConfigError(
            f"invalid duration ({value}), expected a value like 30s, 5m or 1h30m"
        )
    return total


def default_namespace() -> str:
    """Namespace used when --namespace is not given."""

    return (os.environ.get("SVCAT_NAMESPACE") or "").strip() or DEFAULT_NAMESPACE


@dataclass(frozen=True)
class ClientConfig:
    """Typed container for catalog client configuration."""

    base_url: str
    token: str | None = None
    timeout: float = 10.0
    verify_ssl: bool = True

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Build config using environment variables."""

        base_url = os.environ.get("SVCAT_URL", "").strip()
        if not base_url:
            raise ConfigError(
                "SVCAT_URL is required. "
                "Set it to the resource manager API base URL (e.g., https://catalog.dev.svc)."
            )

        token = (os.environ.get("SVCAT_TOKEN") or "").strip() or None
        timeout = _read_float(os.environ.get("SVCAT_TIMEOUT"), 10.0)
        verify_ssl = _read_bool(os.environ.get("SVCAT_VERIFY_SSL"), True)

        return cls(
            base_url=base_url,
            token=token,
            timeout=timeout,
            verify_ssl=verify_ssl,
        )

    def headers(self, user_agent: str) -> dict[str, str]:
        """Build default headers for outbound requests."""

        headers: dict[str, str] = {
            "User-Agent": user_agent,
            "Accept": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def to_dict(self) -> dict[str, Any]:
        """Return a dict suitable for logging/debugging (token redacted)."""

        return {
            "base_url": self.base_url,
            "token_set": bool(self.token),
            "timeout": self.timeout,
            "verify_ssl": self.verify_ssl,
        }


@dataclass(frozen=True)
class WaitConfig:
    """Poll interval and total wait budget, in seconds.

    ``timeout`` of None waits until the instance is terminal or the wait is
    cancelled. A wait can run past ``timeout`` by one interval plus one
    status query, which is bounded by ``SVCAT_TIMEOUT`` (``ClientConfig.timeout``).
    """

    interval: float = 1.0
    timeout: float | None = 300.0

    def __post_init__(self) -> None:
        if self.interval <= 0:
            raise ConfigError("--interval must be positive")
        if self.timeout is not None:
            if self.timeout <= 0:
                raise ConfigError("--timeout must be positive")
            if self.interval > self.timeout:
                raise ConfigError("--interval cannot be longer than --timeout")

    @classmethod
    def from_flags(
        cls, interval: str = DEFAULT_INTERVAL, timeout: str = DEFAULT_TIMEOUT
    ) -> "WaitConfig":
        """Build from the raw --interval/--timeout flag values."""

        parsed_timeout = (
            None if timeout.strip().lower() in NO_TIMEOUT else parse_duration(timeout)
        )
        return cls(interval=parse_duration(interval), timeout=parsed_timeout)
