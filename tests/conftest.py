from __future__ import annotations

import base64
import json
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from stocksync_console.config import ClientConfig  # noqa: E402
from stocksync_console.http_client import HttpClient  # noqa: E402
from stocksync_console.token_store import MemoryTokenStore  # noqa: E402

BASE_URL = "https://api.test/api"

Handler = Callable[[httpx.Request], "httpx.Response | Awaitable[httpx.Response]"]


class FakeApi:
    """Routes ``(METHOD, path)`` to queued responses and records every request."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Handler]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        status: int = 200,
        content: bytes | None = None,
        handler: Handler | None = None,
    ) -> None:
        if handler is None:

            def handler(request: httpx.Request) -> httpx.Response:
                if content is not None:
                    return httpx.Response(status, content=content)
                return httpx.Response(status, json=json_body)

        self.routes.setdefault((method.upper(), path), []).append(handler)

    def calls(self, method: str | None = None, path: str | None = None) -> list[httpx.Request]:
        return [
            request
            for request in self.requests
            if (method is None or request.method == method.upper())
            and (path is None or _relative(request) == path)
        ]

    def body(self, request: httpx.Request) -> Any:
        return json.loads(request.content.decode("utf-8"))

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, _relative(request)))
        if not queue:
            return httpx.Response(404, json={"message": f"no route for {request.method} {request.url.path}"})
        handler = queue.pop(0) if len(queue) > 1 else queue[0]
        response = handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response


def _relative(request: httpx.Request) -> str:
    return request.url.path.removeprefix("/api")


@pytest.fixture()
def config() -> ClientConfig:
    return ClientConfig(env_name="test", api_base_url=BASE_URL)


@pytest.fixture()
def api() -> FakeApi:
    return FakeApi()


@pytest.fixture()
def tokens() -> MemoryTokenStore:
    return MemoryTokenStore(token="token-abc")


@pytest.fixture()
def http(config: ClientConfig, tokens: MemoryTokenStore, api: FakeApi) -> HttpClient:
    return HttpClient(config, tokens, transport=httpx.MockTransport(api))


@pytest.fixture()
def make_jwt() -> Callable[[dict[str, Any]], str]:
    def _encode(part: dict[str, Any]) -> str:
        return base64.urlsafe_b64encode(json.dumps(part).encode()).decode().rstrip("=")

    def _jwt(claims: dict[str, Any]) -> str:
        return f"{_encode({'alg': 'none', 'typ': 'JWT'})}.{_encode(claims)}.sig"

    return _jwt
