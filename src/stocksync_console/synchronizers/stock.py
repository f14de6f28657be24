from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from ..dialogs import DialogMode
from ..exceptions import ApiError, DraftValidationError, MalformedResponseError
from ..http_client import HttpClient
from ..models import Item, MovementType, StockMovement, Supplier, decode_rows
from ..ui_errors import failure_message
from .base import EditableSynchronizer, to_number, to_text

logger = logging.getLogger(__name__)

MOVEMENT_KINDS = tuple(kind.value for kind in MovementType)


class StockSynchronizer(EditableSynchronizer[StockMovement]):
    """Stock movement ledger. Movements are recorded, never edited or deleted."""

    resource = "stock"
    path = "/stock"
    model = StockMovement
    filter_keys = ("item", "type", "user", "supplier")
    filter_choices = {"type": MOVEMENT_KINDS}
    singular = "movement"
    create_failed_message = "Failed to record movement"
    fetch_failed_message = "Failed to fetch stock movements"
    empty_message = "No stock movements to display."

    def __init__(self, http: HttpClient, *, page_size: int = 10) -> None:
        super().__init__(http, page_size=page_size)
        self.kind = MovementType.INBOUND
        self.item_options: list[Item] = []
        self.supplier_options: list[Supplier] = []
        self.options_error: str | None = None

    def blank_draft(self) -> dict[str, Any]:
        return {"item": "", "quantity": "", "supplier": "", "note": ""}

    def create_path(self) -> str:
        return f"{self.path}/{self.kind.value}"

    def open_record(self, kind: MovementType | str) -> None:
        self.kind = MovementType(kind)
        self.editor.open(DialogMode.CREATE, self.blank_draft())

    async def record(self, kind: MovementType | str, draft: Mapping[str, Any]) -> bool:
        resolved = MovementType(kind)
        if self.editor.is_submitting:
            return False
        if resolved is not self.kind and self.editor.is_open:
            self.editor.close()
        self.kind = resolved
        return await self.create(draft)

    def encode_draft(self, draft: Mapping[str, Any]) -> dict[str, Any]:
        item = to_text(draft.get("item"))
        if not item:
            raise DraftValidationError("item", "is required")
        payload: dict[str, Any] = {
            "item": item,
            "quantity": to_number(draft.get("quantity"), "quantity"),
            "note": to_text(draft.get("note")),
        }
        if self.kind is MovementType.INBOUND:
            payload["supplier"] = to_text(draft.get("supplier"))
        return payload

    async def load_options(self) -> bool:
        results = await asyncio.gather(
            self.http.request("GET", "/items"),
            self.http.request("GET", "/suppliers"),
            return_exceptions=True,
        )
        # a body that is not JSON reads as an empty pick list
        payloads = [None if isinstance(result, MalformedResponseError) else result for result in results]
        for result in payloads:
            if isinstance(result, BaseException) and not isinstance(result, ApiError):
                raise result
        exc = next((result for result in payloads if isinstance(result, ApiError)), None)
        if exc is not None:
            self.options_error = failure_message(exc, "Failed to load items and suppliers")
            logger.info("stock_options_failed", extra={"status_code": exc.status_code})
            return False
        items_payload, suppliers_payload = payloads
        self.item_options = decode_rows(items_payload, Item).rows
        self.supplier_options = decode_rows(suppliers_payload, Supplier).rows
        self.options_error = None
        return True

    def render(self) -> dict[str, Any]:
        payload = super().render()
        payload["kind"] = self.kind.value
        payload["options"] = {
            "items": [{"id": item.id, "name": item.name, "sku": item.sku} for item in self.item_options],
            "suppliers": [{"id": supplier.id, "name": supplier.name} for supplier in self.supplier_options],
            "error": self.options_error,
        }
        return payload
