from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ..exceptions import ApiError, MalformedResponseError
from ..http_client import HttpClient
from ..logging_utils import log_action
from ..models import Alert
from ..ui_errors import failure_message
from .base import ListSynchronizer

logger = logging.getLogger(__name__)


def filter_alerts(alerts: Sequence[Alert], term: str) -> list[Alert]:
    """Case-insensitive match on message, item name and status. Never mutates ``alerts``."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(alerts)
    return [
        alert
        for alert in alerts
        if needle in alert.message.lower()
        or (alert.item is not None and needle in (alert.item.name or "").lower())
        or needle in alert.status.lower()
    ]


class AlertsSynchronizer(ListSynchronizer[Alert]):
    resource = "alerts"
    path = "/alerts"
    model = Alert
    fetch_failed_message = "Failed to fetch alerts"
    empty_message = "No alerts to display."

    def __init__(self, http: HttpClient, *, page_size: int = 10) -> None:
        super().__init__(http, page_size=page_size)
        self.search_term = ""
        self.action_error: str | None = None

    def search(self, term: str) -> list[Alert]:
        self.search_term = term or ""
        self.pagination.page = 1
        return self.visible_rows()

    def visible_rows(self) -> list[Alert]:
        return filter_alerts(self.rows, self.search_term)

    async def acknowledge(self, alert_id: str) -> bool:
        if not self.begin_action(alert_id):
            return False
        self.action_error = None
        try:
            await self.http.request("PATCH", f"{self.path}/{alert_id}/read")
        except MalformedResponseError:
            pass
        except ApiError as exc:
            self.action_error = failure_message(exc, "Failed to mark alert as read")
            log_action(logger, self.resource, "acknowledge", "failure", target_id=alert_id, status_code=exc.status_code)
            return False
        finally:
            self.end_action(alert_id)
        log_action(logger, self.resource, "acknowledge", "success", target_id=alert_id)
        await self.fetch()
        return True

    def render(self) -> dict[str, Any]:
        payload = super().render()
        if self.rows and not payload["page"]["rows"] and not self.loading and not self.error:
            payload["view_state"]["message"] = "No alerts match your search."
        payload["search"] = self.search_term
        payload["action_error"] = self.action_error
        payload["unread"] = sum(1 for alert in self.rows if not alert.is_read)
        return payload
