from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar, Union
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ..config import AppSettings, get_settings
from ..core import BridgeError, DateInput, DateNormalizationError, classify_error, normalize_date
from ..domain import CalendarRef, ClassifiedError, ErrorKind, EventRef

logger = logging.getLogger(__name__)

_DATE_FIELDS = ("start_date", "end_date")

T = TypeVar("T")


class EventChanges(BaseModel):
    """Sparse event update; only fields the caller set are sent to the bridge."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    title: Optional[str] = None
    start_date: Optional[DateInput] = Field(default=None, alias="startDate")
    end_date: Optional[DateInput] = Field(default=None, alias="endDate")
    location: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_supplied(cls, **supplied: Any) -> "EventChanges":
        """Build from keyword arguments, treating ``None`` as "not supplied"."""

        return cls.model_validate({key: value for key, value in supplied.items() if value is not None})

    def supplied(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


def _segment(value: str) -> str:
    return quote(str(value), safe="")


def _records(payload: Any) -> List[Any]:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise TypeError(f"expected a list of records, got {type(payload).__name__}")
    return payload


def _decode(action: str, parse: Callable[[], T]) -> T:
    """Run a record parser, reporting malformed bridge payloads as ``BridgeError``."""

    try:
        return parse()
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        detail = f"{type(exc).__name__}: {exc}"[:200]
        logger.warning("Bridge returned an unexpected payload while trying to %s: %s", action, detail)
        raise BridgeError(
            ClassifiedError(
                kind=ErrorKind.UNKNOWN,
                message=f"Failed to {action}: the calendar bridge returned an unexpected payload",
                original_detail=detail,
            )
        ) from exc


@dataclass(slots=True)
class BridgeClient:
    """Async client for the local calendar bridge HTTP API.

    Every method issues exactly one request through a short-lived
    ``httpx.AsyncClient`` and raises :class:`BridgeError` on failure.
    """

    settings: AppSettings = field(default_factory=get_settings)
    transport: Optional[httpx.AsyncBaseTransport] = None

    @property
    def base_url(self) -> str:
        return self.settings.bridge.base_url

    @property
    def default_tz(self) -> tzinfo:
        return self.settings.dates.default_tz

    async def _request(
        self,
        method: str,
        path: str,
        *,
        action: str,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(base_url=self.base_url, transport=self.transport) as client:
                response = await client.request(method, path, json=json_body)
                response.raise_for_status()
                return response
        except httpx.HTTPError as exc:
            error = classify_error(exc, action=action)
            logger.warning(
                "Bridge %s %s failed (%s): %s",
                method,
                path,
                error.kind.value,
                error.original_detail,
            )
            raise BridgeError(error) from exc

    async def _request_json(
        self,
        method: str,
        path: str,
        *,
        action: str,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        response = await self._request(method, path, action=action, json_body=json_body)
        try:
            return response.json()
        except ValueError as exc:
            raise BridgeError(
                ClassifiedError(
                    kind=ErrorKind.UNKNOWN,
                    message=f"Failed to {action}: the calendar bridge returned invalid JSON",
                    original_detail=response.text[:200],
                )
            ) from exc

    def _normalize(self, value: DateInput, *, action: str, field_name: str, required: bool) -> Optional[str]:
        try:
            normalized = normalize_date(value, default_tz=self.default_tz)
        except DateNormalizationError as exc:
            logger.info("Rejected %s for %s before contacting the bridge: %s", field_name, action, exc)
            raise BridgeError(classify_error(exc, action=action)) from exc
        if normalized is None and required:
            exc = DateNormalizationError(value, f"{field_name} is required")
            raise BridgeError(classify_error(exc, action=action)) from exc
        return normalized

    # Calendars ------------------------------------------------------------
    async def list_calendars(self) -> List[CalendarRef]:
        action = "get calendars"
        records = await self._request_json("GET", "/calendars", action=action)
        return _decode(action, lambda: [CalendarRef.from_record(record) for record in _records(records)])

    async def get_calendar(self, calendar_id: str) -> CalendarRef:
        action = f"get calendar {calendar_id!r}"
        record = await self._request_json("GET", f"/calendars/{_segment(calendar_id)}", action=action)
        return _decode(action, lambda: CalendarRef.from_record(record))

    async def create_calendar(self, title: str, color: Optional[str] = None) -> CalendarRef:
        payload: Dict[str, Any] = {"title": title}
        if color is not None:
            payload["color"] = color
        action = f"create calendar {title!r}"
        record = await self._request_json("POST", "/calendars", action=action, json_body=payload)
        return _decode(action, lambda: CalendarRef.from_record(record))

    async def delete_calendar(self, calendar_id: str) -> bool:
        response = await self._request(
            "DELETE",
            f"/calendars/{_segment(calendar_id)}",
            action=f"delete calendar {calendar_id!r}",
        )
        return response.is_success

    # Events ---------------------------------------------------------------
    async def list_events(self, calendar_id: str) -> List[EventRef]:
        action = f"get events from calendar {calendar_id!r}"
        records = await self._request_json("GET", f"/calendars/{_segment(calendar_id)}/events", action=action)
        return _decode(
            action,
            lambda: [EventRef.from_record(record, calendar_id=calendar_id) for record in _records(records)],
        )

    async def get_event(self, calendar_id: str, event_id: str) -> EventRef:
        action = f"get event {event_id!r}"
        record = await self._request_json(
            "GET",
            f"/calendars/{_segment(calendar_id)}/events/{_segment(event_id)}",
            action=action,
        )
        return _decode(action, lambda: EventRef.from_record(record, calendar_id=calendar_id))

    async def create_event(
        self,
        calendar_id: str,
        title: str,
        start: DateInput,
        end: DateInput,
        location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> EventRef:
        action = f"create event {title!r}"
        payload: Dict[str, Any] = {
            "title": title,
            "startDate": self._normalize(start, action=action, field_name="startDate", required=True),
            "endDate": self._normalize(end, action=action, field_name="endDate", required=True),
        }
        if location is not None:
            payload["location"] = location
        if notes is not None:
            payload["notes"] = notes

        record = await self._request_json(
            "POST",
            f"/calendars/{_segment(calendar_id)}/events",
            action=action,
            json_body=payload,
        )
        return _decode(action, lambda: EventRef.from_record(record, calendar_id=calendar_id))

    async def update_event(
        self,
        calendar_id: str,
        event_id: str,
        changes: Union[EventChanges, Mapping[str, Any]],
    ) -> EventRef:
        if not isinstance(changes, EventChanges):
            changes = EventChanges.model_validate(dict(changes))

        action = f"update event {event_id!r}"
        payload: Dict[str, Any] = {}
        for name, value in changes.supplied().items():
            wire_name = EventChanges.model_fields[name].alias or name
            if name in _DATE_FIELDS:
                value = self._normalize(value, action=action, field_name=wire_name, required=True)
            payload[wire_name] = value

        record = await self._request_json(
            "PUT",
            f"/calendars/{_segment(calendar_id)}/events/{_segment(event_id)}",
            action=action,
            json_body=payload,
        )
        return _decode(action, lambda: EventRef.from_record(record, calendar_id=calendar_id))

    async def delete_event(self, calendar_id: str, event_id: str) -> bool:
        response = await self._request(
            "DELETE",
            f"/calendars/{_segment(calendar_id)}/events/{_segment(event_id)}",
            action=f"delete event {event_id!r}",
        )
        return response.is_success
