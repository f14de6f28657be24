from __future__ import annotations

import asyncio

import pytest

from stocksync_console.dialogs import DialogStatus
from stocksync_console.models import MovementType
from stocksync_console.synchronizers import StockSynchronizer

MOVEMENT = {
    "_id": "m1",
    "item": {"_id": "i1", "name": "Bolt"},
    "type": "outbound",
    "quantity": 2,
    "user": {"_id": "u1", "name": "Ada"},
    "note": "order 42",
}


def test_fetch_filters_by_type(http, api) -> None:
    api.add("GET", "/stock", json_body=[MOVEMENT])
    stock = StockSynchronizer(http)

    asyncio.run(stock.set_filter("type", "outbound"))

    assert dict(api.requests[0].url.params) == {"type": "outbound"}
    assert stock.rows[0].type is MovementType.OUTBOUND


def test_type_filter_rejects_unknown_kind(http) -> None:
    stock = StockSynchronizer(http)

    with pytest.raises(ValueError):
        asyncio.run(stock.set_filter("type", "transfer"))


def test_outbound_record_succeeds_and_refetches(http, api) -> None:
    api.add("POST", "/stock/outbound", status=201, json_body=MOVEMENT)
    api.add("GET", "/stock", json_body=[MOVEMENT])
    stock = StockSynchronizer(http)

    ok = asyncio.run(stock.record("outbound", {"item": "i1", "quantity": "2", "supplier": "s1", "note": "order 42"}))

    assert ok is True
    assert api.body(api.calls("POST", "/stock/outbound")[0]) == {"item": "i1", "quantity": 2, "note": "order 42"}
    assert len(api.calls("GET", "/stock")) == 1
    assert stock.editor.status is DialogStatus.CLOSED
    assert [row.id for row in stock.rows] == ["m1"]


def test_inbound_record_includes_supplier(http, api) -> None:
    api.add("POST", "/stock/inbound", status=201, json_body={})
    api.add("GET", "/stock", json_body=[])
    stock = StockSynchronizer(http)
    stock.open_record(MovementType.INBOUND)
    stock.editor.set_field("item", "i1")
    stock.editor.set_field("quantity", "10")
    stock.editor.set_field("supplier", "s1")

    assert asyncio.run(stock.submit()) is True

    assert api.body(api.calls("POST", "/stock/inbound")[0]) == {
        "item": "i1",
        "quantity": 10,
        "note": "",
        "supplier": "s1",
    }


def test_outbound_rejection_surfaces_server_message(http, api) -> None:
    api.add("GET", "/stock", json_body=[MOVEMENT])
    api.add("POST", "/stock/outbound", status=400, json_body={"message": "Insufficient stock"})
    stock = StockSynchronizer(http)
    asyncio.run(stock.fetch())

    ok = asyncio.run(stock.record("outbound", {"item": "i1", "quantity": "500"}))

    assert ok is False
    assert stock.editor.status is DialogStatus.ERROR
    assert stock.editor.error == "Insufficient stock"
    assert stock.editor.draft["quantity"] == "500"
    assert [row.id for row in stock.rows] == ["m1"]
    assert len(api.calls("GET", "/stock")) == 1


def test_record_requires_item(http, api) -> None:
    stock = StockSynchronizer(http)

    assert asyncio.run(stock.record("inbound", {"item": " ", "quantity": "1"})) is False
    assert stock.editor.error == "item: is required"
    assert api.requests == []


def test_switching_kind_replaces_open_dialog(http, api) -> None:
    api.add("POST", "/stock/outbound", status=400, json_body={"message": "Insufficient stock"})
    api.add("POST", "/stock/inbound", status=201, json_body={})
    api.add("GET", "/stock", json_body=[])
    stock = StockSynchronizer(http)
    asyncio.run(stock.record("outbound", {"item": "i1", "quantity": "5"}))

    assert asyncio.run(stock.record("inbound", {"item": "i1", "quantity": "5", "supplier": "s1"})) is True
    assert stock.kind is MovementType.INBOUND
    assert stock.editor.is_open is False


def test_load_options(http, api) -> None:
    api.add("GET", "/items", json_body=[{"_id": "i1", "name": "Bolt", "sku": "B-1"}])
    api.add("GET", "/suppliers", json_body=[{"_id": "s1", "name": "Acme"}])
    stock = StockSynchronizer(http)

    assert asyncio.run(stock.load_options()) is True

    options = stock.render()["options"]
    assert options["items"] == [{"id": "i1", "name": "Bolt", "sku": "B-1"}]
    assert options["suppliers"] == [{"id": "s1", "name": "Acme"}]
    assert options["error"] is None


def test_load_options_failure(http, api) -> None:
    api.add("GET", "/items", json_body=[])
    api.add("GET", "/suppliers", status=503, content=b"")
    stock = StockSynchronizer(http)

    assert asyncio.run(stock.load_options()) is False
    assert stock.options_error == "Failed to load items and suppliers"


def test_record_failure_without_server_message_uses_record_fallback(http, api) -> None:
    api.add("POST", "/stock/inbound", status=500, content=b"")
    stock = StockSynchronizer(http)

    assert asyncio.run(stock.record("inbound", {"item": "i1", "quantity": "3", "supplier": "s1"})) is False

    assert stock.editor.error == "Failed to record movement"


def test_load_options_with_non_json_body_reads_as_empty(http, api) -> None:
    api.add("GET", "/items", content=b"<html></html>")
    api.add("GET", "/suppliers", json_body=[{"_id": "s1", "name": "Acme"}])
    stock = StockSynchronizer(http)

    assert asyncio.run(stock.load_options()) is True

    assert stock.item_options == []
    assert [supplier.id for supplier in stock.supplier_options] == ["s1"]
    assert stock.options_error is None
