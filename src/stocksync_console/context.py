from __future__ import annotations

import logging

import httpx

from .config import ClientConfig, load_config
from .http_client import HttpClient
from .route_guard import RouteGuard
from .session import Session, SessionController, TokenStoreLike
from .synchronizers import (
    AlertsSynchronizer,
    AnalyticsSynchronizer,
    ItemsSynchronizer,
    StockSynchronizer,
    SuppliersSynchronizer,
)
from .token_store import TokenStore

logger = logging.getLogger(__name__)


class AppContext:
    """Process-wide wiring: built once at start, torn down with ``aclose``."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        tokens: TokenStoreLike | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_config()
        self.tokens = tokens or TokenStore(directory=self.config.data_dir)
        self.http = HttpClient(self.config, self.tokens, transport=transport)
        self.session = SessionController(self.http, self.tokens)
        self.guard = RouteGuard(self.session)
        self._closed = False

    def init(self) -> Session:
        state = self.session.initialize()
        logger.info("context_ready", extra={"env": self.config.normalized_env, "status": state.status.value})
        return state

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.http.aclose()

    async def __aenter__(self) -> "AppContext":
        self.init()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def items(self) -> ItemsSynchronizer:
        return ItemsSynchronizer(self.http, page_size=self.config.page_size)

    def suppliers(self) -> SuppliersSynchronizer:
        return SuppliersSynchronizer(self.http, page_size=self.config.page_size)

    def stock(self) -> StockSynchronizer:
        return StockSynchronizer(self.http, page_size=self.config.page_size)

    def alerts(self) -> AlertsSynchronizer:
        return AlertsSynchronizer(self.http, page_size=self.config.page_size)

    def analytics(self) -> AnalyticsSynchronizer:
        return AnalyticsSynchronizer(self.http)
