from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models import Item
from .base import CrudSynchronizer, to_number, to_text


class ItemsSynchronizer(CrudSynchronizer[Item]):
    resource = "items"
    path = "/items"
    model = Item
    filter_keys = ("name", "sku", "category")
    singular = "item"
    fetch_failed_message = "Failed to fetch items"
    empty_message = "No items to display."

    def blank_draft(self) -> dict[str, Any]:
        return {"name": "", "sku": "", "quantity": "", "location": "", "category": "", "lowStockThreshold": ""}

    def draft_from(self, row: Item) -> dict[str, Any]:
        return {
            "name": row.name,
            "sku": row.sku,
            "quantity": str(row.quantity),
            "location": row.location or "",
            "category": row.category or "",
            "lowStockThreshold": "" if row.low_stock_threshold is None else str(row.low_stock_threshold),
        }

    def encode_draft(self, draft: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "name": to_text(draft.get("name")),
            "sku": to_text(draft.get("sku")),
            "quantity": to_number(draft.get("quantity"), "quantity"),
            "location": to_text(draft.get("location")),
            "category": to_text(draft.get("category")),
            "lowStockThreshold": to_number(draft.get("lowStockThreshold"), "lowStockThreshold"),
        }
