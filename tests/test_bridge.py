from __future__ import annotations

import httpx
import pytest

from calendar_bridge.core import BridgeError
from calendar_bridge.data import EventChanges
from calendar_bridge.domain import ErrorKind

from conftest import make_client, request_json


async def test_list_calendars_parses_bridge_records(bridge_client, bridge_stub):
    calendars = await bridge_client.list_calendars()

    assert [calendar.id for calendar in calendars] == ["cal-1", "cal-2"]
    assert calendars[0].allows_modifications is True
    assert calendars[1].color is None
    assert str(bridge_stub.requests[0].url) == "http://localhost:8080/calendars"


async def test_base_url_uses_configured_port():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=[])

    await make_client(handler, port=9123).list_calendars()
    assert seen == ["http://localhost:9123/calendars"]


async def test_create_event_normalizes_dates(bridge_client, bridge_stub):
    event = await bridge_client.create_event(
        "cal-1",
        "Standup",
        "2025/03/09 10:00:00",
        "2025-03-09T11:00:00",
    )

    sent = request_json(bridge_stub.requests[0])
    assert sent == {
        "title": "Standup",
        "startDate": "2025-03-09T10:00:00.000Z",
        "endDate": "2025-03-09T11:00:00.000Z",
    }
    assert event.start_date == "2025-03-09T10:00:00.000Z"
    assert event.calendar_id == "cal-1"


async def test_create_event_forwards_optional_fields_when_given(bridge_client, bridge_stub):
    await bridge_client.create_event(
        "cal-1",
        "Lunch",
        "2025-03-09T12:00:00Z",
        "2025-03-09T13:00:00Z",
        location="Cafe",
        notes="Bring laptop",
    )

    sent = request_json(bridge_stub.requests[0])
    assert sent["location"] == "Cafe"
    assert sent["notes"] == "Bring laptop"


@pytest.mark.parametrize(("start", "end"), [("not-a-date", "2025-03-09T11:00:00"), ("2025-03-09T10:00:00", "")])
async def test_create_event_with_bad_date_never_calls_bridge(bridge_client, bridge_stub, start, end):
    with pytest.raises(BridgeError) as excinfo:
        await bridge_client.create_event("cal-1", "Standup", start, end)

    assert excinfo.value.kind is ErrorKind.DATE_FORMAT
    assert excinfo.value.error.hint
    assert bridge_stub.requests == []


async def test_update_event_forwards_only_supplied_fields(bridge_client, bridge_stub):
    await bridge_client.update_event("cal-1", "evt-1", {"title": "x"})

    request = bridge_stub.requests[0]
    assert request.method == "PUT"
    assert request.url.path == "/calendars/cal-1/events/evt-1"
    assert request_json(request) == {"title": "x"}


async def test_update_event_normalizes_supplied_dates(bridge_client, bridge_stub):
    changes = EventChanges.from_supplied(start_date="2025/03/09 10:00:00", end_date=None, notes="moved")
    event = await bridge_client.update_event("cal-1", "evt-1", changes)

    assert request_json(bridge_stub.requests[0]) == {
        "startDate": "2025-03-09T10:00:00.000Z",
        "notes": "moved",
    }
    assert event.start_date == "2025-03-09T10:00:00.000Z"


async def test_update_event_with_bad_date_never_calls_bridge(bridge_client, bridge_stub):
    with pytest.raises(BridgeError) as excinfo:
        await bridge_client.update_event("cal-1", "evt-1", {"endDate": "later"})

    assert excinfo.value.kind is ErrorKind.DATE_FORMAT
    assert bridge_stub.requests == []


def test_event_changes_track_presence():
    assert EventChanges.from_supplied(title="x", location=None).supplied() == {"title": "x"}
    assert EventChanges().supplied() == {}


@pytest.mark.parametrize("method", ["delete_event", "delete_calendar"])
async def test_delete_returns_true_on_no_content(bridge_client, method):
    args = ("cal-1", "evt-1") if method == "delete_event" else ("cal-1",)
    assert await getattr(bridge_client, method)(*args) is True


async def test_missing_calendar_is_not_found(bridge_client):
    with pytest.raises(BridgeError) as excinfo:
        await bridge_client.get_calendar("nope")

    assert excinfo.value.kind is ErrorKind.NOT_FOUND


async def test_bridge_date_rejection_is_classified(bridge_stub, bridge_client):
    bridge_stub.override = lambda request: httpx.Response(400, json={"error": "Invalid date format"})

    with pytest.raises(BridgeError) as excinfo:
        await bridge_client.create_event("cal-1", "Standup", "2025-03-09T10:00:00Z", "2025-03-09T11:00:00Z")

    assert excinfo.value.kind is ErrorKind.DATE_FORMAT
    assert len(bridge_stub.requests) == 1


async def test_unreachable_bridge_is_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(BridgeError) as excinfo:
        await make_client(handler).list_calendars()

    assert excinfo.value.kind is ErrorKind.NETWORK
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


async def test_invalid_json_is_unknown():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(BridgeError) as excinfo:
        await make_client(handler).list_calendars()

    assert excinfo.value.kind is ErrorKind.UNKNOWN


async def test_list_events_fills_in_calendar_id(bridge_client):
    events = await bridge_client.list_events("cal-1")
    assert events[0].calendar_id == "cal-1"
    assert events[0].title == "Standup"


@pytest.mark.parametrize(
    ("body", "method", "args"),
    [
        ({"title": "no id"}, "get_calendar", ("cal-1",)),
        (["not", "records"], "get_event", ("cal-1", "evt-1")),
        ({"calendars": []}, "list_calendars", ()),
        ([{"title": "no id"}], "list_events", ("cal-1",)),
    ],
)
async def test_malformed_success_payload_is_unknown_bridge_error(body, method, args):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    with pytest.raises(BridgeError) as excinfo:
        await getattr(make_client(handler), method)(*args)

    assert excinfo.value.kind is ErrorKind.UNKNOWN
    assert "unexpected payload" in excinfo.value.error.message
