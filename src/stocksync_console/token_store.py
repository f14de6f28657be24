from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_dir

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"


@dataclass
class TokenStore:
    """Durable holder of the bearer credential, one JSON file per user profile."""

    app_name: str = "stocksync"
    filename: str = "session.json"
    directory: str | Path | None = None

    def _path(self) -> Path:
        base = Path(self.directory) if self.directory else Path(user_data_dir(self.app_name, "StockSync"))
        base.mkdir(parents=True, exist_ok=True)
        return base / self.filename

    def get(self) -> str | None:
        path = self._path()
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("token_store_unreadable", extra={"path": str(path)})
            self.clear()
            return None
        token = data.get(TOKEN_KEY) if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            self.clear()
            return None
        return token

    def set(self, token: str) -> None:
        if not token:
            raise ValueError("token must be a non-empty string")
        path = self._path()
        path.write_text(json.dumps({TOKEN_KEY: token}, indent=2), encoding="utf-8")
        try:
            path.chmod(0o600)
        except OSError:
            pass

    def clear(self) -> None:
        path = self._path()
        if path.exists():
            path.unlink()


@dataclass
class MemoryTokenStore:
    token: str | None = None

    def get(self) -> str | None:
        return self.token

    def set(self, token: str) -> None:
        if not token:
            raise ValueError("token must be a non-empty string")
        self.token = token

    def clear(self) -> None:
        self.token = None
