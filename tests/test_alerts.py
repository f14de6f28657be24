from __future__ import annotations

import asyncio

from stocksync_console.models import Alert
from stocksync_console.synchronizers import AlertsSynchronizer, filter_alerts

LOW_BOLT = {"_id": "a1", "item": {"_id": "i1", "name": "Bolt"}, "message": "Low stock for Bolt", "status": "unread"}
LOW_NUT = {"_id": "a2", "item": {"_id": "i2", "name": "Nut"}, "message": "Reorder soon", "status": "read"}


def test_null_body_is_an_empty_list_not_an_error(http, api) -> None:
    api.add("GET", "/alerts", content=b"null")
    alerts = AlertsSynchronizer(http)

    assert asyncio.run(alerts.fetch()) is True

    assert alerts.rows == []
    assert alerts.error is None
    assert alerts.render()["view_state"]["status"] == "empty"


def test_filter_alerts_is_case_insensitive_and_pure() -> None:
    rows = [Alert.model_validate(LOW_BOLT), Alert.model_validate(LOW_NUT)]

    assert [alert.id for alert in filter_alerts(rows, "BOLT")] == ["a1"]
    assert [alert.id for alert in filter_alerts(rows, "nut")] == ["a2"]
    assert [alert.id for alert in filter_alerts(rows, "READ")] == ["a1", "a2"]
    assert [alert.id for alert in filter_alerts(rows, "  ")] == ["a1", "a2"]
    assert len(rows) == 2


def test_search_narrows_visible_rows(http, api) -> None:
    api.add("GET", "/alerts", json_body=[LOW_BOLT, LOW_NUT])
    alerts = AlertsSynchronizer(http)
    asyncio.run(alerts.fetch())
    alerts.pagination.page = 4

    visible = alerts.search("reorder")

    assert [alert.id for alert in visible] == ["a2"]
    assert alerts.pagination.page == 1
    assert len(alerts.rows) == 2
    rendered = alerts.render()
    assert rendered["search"] == "reorder"
    assert rendered["unread"] == 1


def test_search_without_matches_has_its_own_message(http, api) -> None:
    api.add("GET", "/alerts", json_body=[LOW_BOLT])
    alerts = AlertsSynchronizer(http)
    asyncio.run(alerts.fetch())

    alerts.search("washer")

    assert alerts.render()["view_state"]["message"] == "No alerts match your search."


def test_acknowledge_marks_read_and_refetches(http, api) -> None:
    api.add("GET", "/alerts", json_body=[LOW_BOLT])
    api.add("GET", "/alerts", json_body=[{**LOW_BOLT, "status": "read"}])
    api.add("PATCH", "/alerts/a1/read", json_body={**LOW_BOLT, "status": "read"})
    alerts = AlertsSynchronizer(http)
    asyncio.run(alerts.fetch())

    assert asyncio.run(alerts.acknowledge("a1")) is True

    assert alerts.rows[0].is_read is True
    assert len(api.calls("PATCH", "/alerts/a1/read")) == 1
    assert len(api.calls("GET", "/alerts")) == 2
    assert alerts.in_flight == set()


def test_acknowledge_failure_sets_action_error_only(http, api) -> None:
    api.add("GET", "/alerts", json_body=[LOW_BOLT])
    api.add("PATCH", "/alerts/a1/read", status=500, content=b"")
    alerts = AlertsSynchronizer(http)
    asyncio.run(alerts.fetch())

    assert asyncio.run(alerts.acknowledge("a1")) is False

    assert alerts.action_error == "Failed to mark alert as read"
    assert alerts.error is None
    assert [alert.id for alert in alerts.rows] == ["a1"]
    assert alerts.in_flight == set()


def test_fetch_failure_message(http, api) -> None:
    api.add("GET", "/alerts", status=500, content=b"")
    alerts = AlertsSynchronizer(http)

    asyncio.run(alerts.fetch())

    assert alerts.error == "Failed to fetch alerts"
    assert alerts.render()["view_state"]["status"] == "fatal_error"


def test_acknowledge_with_non_json_success_body(http, api) -> None:
    api.add("PATCH", "/alerts/a1/read", content=b"OK")
    api.add("GET", "/alerts", json_body=[{**LOW_BOLT, "status": "read"}])
    alerts = AlertsSynchronizer(http)

    assert asyncio.run(alerts.acknowledge("a1")) is True

    assert alerts.action_error is None
    assert alerts.rows[0].is_read is True
