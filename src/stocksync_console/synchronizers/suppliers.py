from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models import Supplier
from .base import CrudSynchronizer, to_number, to_text


class SuppliersSynchronizer(CrudSynchronizer[Supplier]):
    resource = "suppliers"
    path = "/suppliers"
    model = Supplier
    filter_keys = ("name", "email", "phone")
    singular = "supplier"
    fetch_failed_message = "Failed to fetch suppliers"
    empty_message = "No suppliers to display."

    def blank_draft(self) -> dict[str, Any]:
        return {"name": "", "email": "", "phone": "", "address": "", "reliability": "", "performance": ""}

    def draft_from(self, row: Supplier) -> dict[str, Any]:
        contact = row.contact_info
        return {
            "name": row.name,
            "email": contact.email or "",
            "phone": contact.phone or "",
            "address": contact.address or "",
            "reliability": "" if row.reliability is None else str(row.reliability),
            "performance": "" if row.performance is None else str(row.performance),
        }

    def encode_draft(self, draft: Mapping[str, Any]) -> dict[str, Any]:
        # contact fields are flat in the form and nested on the wire
        return {
            "name": to_text(draft.get("name")),
            "contactInfo": {
                "email": to_text(draft.get("email")),
                "phone": to_text(draft.get("phone")),
                "address": to_text(draft.get("address")),
            },
            "reliability": to_number(draft.get("reliability"), "reliability"),
            "performance": to_number(draft.get("performance"), "performance"),
        }
