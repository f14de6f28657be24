from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any, Protocol

import httpx

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import AuthorizationError, MalformedResponseError, TransportError
from .filters import clean_filters

logger = logging.getLogger(__name__)

AuthFailureHandler = Callable[[AuthorizationError], None]


class CredentialSource(Protocol):
    def get(self) -> str | None: ...


class HttpClient:
    """Authenticated transport: one base endpoint, bearer header from the token store."""

    def __init__(
        self,
        config: ClientConfig,
        tokens: CredentialSource,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.tokens = tokens
        self._client = client or httpx.AsyncClient(
            base_url=self.config.api_base_url.rstrip("/") + "/",
            timeout=self.config.timeout_seconds,
            verify=self.config.verify_ssl,
            transport=transport,
        )
        self._auth_failure_handler: AuthFailureHandler | None = None

    def register_auth_failure_handler(self, handler: AuthFailureHandler | None) -> None:
        self._auth_failure_handler = handler

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
        report_auth_failure: bool = True,
    ) -> Any:
        headers = {"Accept": "application/json"}
        token = self.tokens.get()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        normalized_method = method.upper()
        relative_path = path.lstrip("/")
        try:
            response = await self._client.request(
                normalized_method,
                relative_path,
                params=clean_filters(params or {}),
                json=json_body,
                headers=headers,
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "transport_failure",
                extra={"method": normalized_method, "path": path, "error_type": type(exc).__name__},
            )
            raise TransportError(
                code="TRANSPORT_ERROR",
                message=str(exc) or type(exc).__name__,
                details={"type": type(exc).__name__},
                status_code=0,
            ) from exc

        if response.is_success:
            return _parse_success(response, normalized_method, path)

        error = map_error(response.status_code, _parse_error_body(response))
        logger.info(
            "http_error",
            extra={"method": normalized_method, "path": path, "status_code": response.status_code},
        )
        if isinstance(error, AuthorizationError) and report_auth_failure and self._auth_failure_handler:
            self._auth_failure_handler(error)
        raise error

    async def aclose(self) -> None:
        await self._client.aclose()


def _parse_success(response: httpx.Response, method: str, path: str) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning("malformed_response_body", extra={"method": method, "path": path})
        raise MalformedResponseError(
            code="MALFORMED_RESPONSE",
            message="Response body is not valid JSON",
            status_code=response.status_code,
            raw_payload=response.text,
        ) from exc


def _parse_error_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {"raw": response.text}

