"""Shared test fixtures for the calendar bridge."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from calendar_bridge.api import api_state
from calendar_bridge.config import AppSettings, BridgeSettings, DateSettings, LoggingSettings, get_settings
from calendar_bridge.data import BridgeClient

# ---------------------------------------------------------------------------
# Shared helpers (plain functions, not fixtures, importable by test files)
# ---------------------------------------------------------------------------


def make_settings(port: int = 8080, timezone: str = "UTC") -> AppSettings:
    return AppSettings(
        bridge=BridgeSettings(host="localhost", port=port),
        dates=DateSettings(timezone=timezone),
        logging=LoggingSettings(level="INFO", log_file=None),
    )


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content) if request.content else None


_EVENTS = re.compile(r"^/calendars/(?P<calendar>[^/]+)/events$")
_EVENT = re.compile(r"^/calendars/(?P<calendar>[^/]+)/events/(?P<event>[^/]+)$")
_CALENDAR = re.compile(r"^/calendars/(?P<calendar>[^/]+)$")


@dataclass
class BridgeStub:
    """In-memory stand-in for the calendar bridge that echoes write payloads."""

    calendars: List[Dict[str, Any]] = field(
        default_factory=lambda: [
            {"id": "cal-1", "title": "Work", "color": "#ff0000", "allowsModifications": True},
            {"id": "cal-2", "title": "Holidays", "color": None, "allowsModifications": False},
        ]
    )
    requests: List[httpx.Request] = field(default_factory=list)
    override: Optional[Callable[[httpx.Request], Optional[httpx.Response]]] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.override is not None:
            response = self.override(request)
            if response is not None:
                return response

        path = request.url.path
        method = request.method
        if path == "/calendars":
            if method == "GET":
                return httpx.Response(200, json=self.calendars)
            body = request_json(request)
            return httpx.Response(201, json={"id": "cal-new", "allowsModifications": True, **body})

        match = _EVENTS.match(path)
        if match:
            if method == "GET":
                return httpx.Response(
                    200,
                    json=[
                        {
                            "id": "evt-1",
                            "title": "Standup",
                            "startDate": "2025-03-09T10:00:00.000Z",
                            "endDate": "2025-03-09T10:15:00.000Z",
                        }
                    ],
                )
            body = request_json(request)
            return httpx.Response(201, json={"id": "evt-1", "calendarId": match["calendar"], **body})

        match = _EVENT.match(path)
        if match:
            if method == "DELETE":
                return httpx.Response(204)
            if method == "GET":
                return httpx.Response(
                    200,
                    json={"id": match["event"], "calendarId": match["calendar"], "title": "Standup"},
                )
            body = request_json(request)
            return httpx.Response(200, json={"id": match["event"], "title": "Standup", **body})

        match = _CALENDAR.match(path)
        if match:
            for calendar in self.calendars:
                if calendar["id"] == match["calendar"]:
                    if method == "DELETE":
                        return httpx.Response(204)
                    return httpx.Response(200, json=calendar)
            return httpx.Response(404, json={"error": f"Calendar {match['calendar']} not found"})

        return httpx.Response(404, json={"error": "Unknown route"})


def make_client(handler: Callable[[httpx.Request], httpx.Response], **settings: Any) -> BridgeClient:
    return BridgeClient(settings=make_settings(**settings), transport=httpx.MockTransport(handler))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def bridge_stub() -> BridgeStub:
    return BridgeStub()


@pytest.fixture
def bridge_client(bridge_stub: BridgeStub) -> BridgeClient:
    return make_client(bridge_stub)


@pytest.fixture
def installed_bridge(monkeypatch: pytest.MonkeyPatch, bridge_stub: BridgeStub) -> BridgeStub:
    """Point the tool layer at the stub bridge."""

    monkeypatch.setattr(api_state, "bridge", make_client(bridge_stub))
    return bridge_stub


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()
