from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..exceptions import ApiError, MalformedResponseError
from ..http_client import HttpClient
from ..models import ItemAnalytics, SupplierAnalytics, TotalStock, decode_object, decode_rows
from ..ui_errors import failure_message
from ..view_state import resolve_state

logger = logging.getLogger(__name__)

AGGREGATE_PATHS = (
    "/analytics/total-stock",
    "/analytics/fast-moving",
    "/analytics/slow-moving",
    "/analytics/reliable-suppliers",
)


class AnalyticsSynchronizer:
    """Read-only dashboard: four aggregates fetched together, one readiness state."""

    resource = "analytics"
    fetch_failed_message = "Failed to fetch analytics"

    def __init__(self, http: HttpClient) -> None:
        self.http = http
        self.total_stock: int | float | None = None
        self.fast_moving: list[ItemAnalytics] = []
        self.slow_moving: list[ItemAnalytics] = []
        self.reliable_suppliers: list[SupplierAnalytics] = []
        self.loading = False
        self.error: str | None = None
        self._issued = 0

    async def _get(self, path: str) -> Any:
        try:
            return await self.http.request("GET", path)
        except MalformedResponseError:
            return None

    async def fetch(self) -> bool:
        self._issued += 1
        ticket = self._issued
        self.loading = True
        self.error = None
        tasks = [asyncio.ensure_future(self._get(path)) for path in AGGREGATE_PATHS]
        try:
            total, fast, slow, suppliers = await asyncio.gather(*tasks)
        except ApiError as exc:
            for task in tasks:
                if not task.done():
                    task.cancel()
                elif not task.cancelled():
                    # retrieve later failures so the loop does not report them as unhandled
                    task.exception()
            if ticket != self._issued:
                return False
            self.error = failure_message(exc, self.fetch_failed_message)
            self.loading = False
            logger.info("analytics_fetch_failed", extra={"status_code": exc.status_code})
            return False
        if ticket != self._issued:
            logger.debug("analytics_stale_discarded", extra={"ticket": ticket, "latest": self._issued})
            return False
        totals = decode_object(total, TotalStock)
        self.total_stock = totals.total_stock if totals is not None else 0
        self.fast_moving = decode_rows(fast, ItemAnalytics).rows
        self.slow_moving = decode_rows(slow, ItemAnalytics).rows
        self.reliable_suppliers = decode_rows(suppliers, SupplierAnalytics).rows
        self.loading = False
        return True

    def render(self) -> dict[str, Any]:
        has_data = self.total_stock is not None
        state = resolve_state(is_loading=self.loading, error=self.error, has_data=has_data)
        return {
            "resource": self.resource,
            "loading": self.loading,
            "error": self.error,
            "total_stock": self.total_stock,
            "fast_moving": [row.model_dump(mode="json") for row in self.fast_moving],
            "slow_moving": [row.model_dump(mode="json") for row in self.slow_moving],
            "reliable_suppliers": [row.model_dump(mode="json") for row in self.reliable_suppliers],
            "view_state": state.render(),
        }
