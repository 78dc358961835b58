"""Client configuration for pyfruitties."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyfruitties._constants import (
    BASE_URL,
    DEFAULT_DB_PATH,
    DEFAULT_PAGE_NUMBER,
    DEFAULT_REQUEST_TIMEOUT,
)
from pyfruitties.exceptions import FruittiesConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, raw: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(raw)
    except ValueError as exc:
        raise FruittiesConfigError(f"{env_key} must be a number, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class FruittiesConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Root of the remote feed. Pages are fetched from
        ``{base_url}/{page_number}.json``.
    db_path : str
        Path of the sqlite database file, or ``":memory:"``.
    page_number : int
        Feed page fetched by the background refresh.
    request_timeout : float
        Total timeout in seconds for one feed request.
    wal_enabled : bool
        Put file databases in WAL journal mode.
    """

    base_url: str = BASE_URL
    db_path: str = DEFAULT_DB_PATH
    page_number: int = DEFAULT_PAGE_NUMBER
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    wal_enabled: bool = True

    def __post_init__(self) -> None:
        if self.page_number < 0:
            raise FruittiesConfigError(f"page_number must be >= 0, got {self.page_number}")
        if self.request_timeout <= 0:
            raise FruittiesConfigError(f"request_timeout must be > 0, got {self.request_timeout}")
        # Normalize so URL joins never produce a double slash.
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, **overrides: Any) -> FruittiesConfig:
        """Create configuration from ``FRUITTIES_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        for env_key, field_name in (
            ("FRUITTIES_BASE_URL", "base_url"),
            ("FRUITTIES_DB_PATH", "db_path"),
        ):
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        page_env = env.get("FRUITTIES_PAGE_NUMBER")
        if page_env is not None and "page_number" not in overrides:
            config_kwargs["page_number"] = _env_number("FRUITTIES_PAGE_NUMBER", page_env, int)

        timeout_env = env.get("FRUITTIES_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = _env_number("FRUITTIES_REQUEST_TIMEOUT", timeout_env, float)

        if "wal_enabled" not in overrides:
            config_kwargs["wal_enabled"] = _env_bool(env.get("FRUITTIES_WAL_ENABLED"), True)

        config_kwargs.update(overrides)
        return cls(**config_kwargs)
