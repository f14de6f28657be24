from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_API_BASE_URL = "https://storesync-backend1.onrender.com/api"
PAGE_SIZE_OPTIONS = (10, 20, 50)


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str
    api_base_url: str
    timeout_seconds: float = 15.0
    verify_ssl: bool = True
    data_dir: str | None = None
    page_size: int = 10

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    env_name = (os.getenv("STOCKSYNC_ENV") or "dev").strip()
    env_key = env_name.upper()

    api_base_url = (
        (os.getenv(f"STOCKSYNC_API_BASE_URL_{env_key}") or "").strip()
        or (os.getenv("STOCKSYNC_API_BASE_URL") or "").strip()
        or DEFAULT_API_BASE_URL
    )
    _validate(
        api_base_url.startswith(("http://", "https://")),
        f"Invalid STOCKSYNC_API_BASE_URL: expected an http(s) URL, got {api_base_url!r}",
    )

    timeout_seconds = _read_float("STOCKSYNC_TIMEOUT_SECONDS", "15")
    _validate(
        timeout_seconds > 0,
        f"Invalid STOCKSYNC_TIMEOUT_SECONDS: expected > 0, got {timeout_seconds}",
    )

    page_size = _read_int("STOCKSYNC_PAGE_SIZE", "10")
    _validate(
        page_size in PAGE_SIZE_OPTIONS,
        f"Invalid STOCKSYNC_PAGE_SIZE: expected one of {PAGE_SIZE_OPTIONS}, got {page_size}",
    )

    verify_ssl = _coerce_bool(os.getenv("STOCKSYNC_VERIFY_SSL"), True)
    data_dir = (os.getenv("STOCKSYNC_DATA_DIR") or "").strip() or None

    return ClientConfig(
        env_name=env_name,
        api_base_url=api_base_url.rstrip("/"),
        timeout_seconds=timeout_seconds,
        verify_ssl=verify_ssl,
        data_dir=data_dir,
        page_size=page_size,
    )
