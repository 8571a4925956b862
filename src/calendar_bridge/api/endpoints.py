from __future__ import annotations

from typing import Any, Dict, Optional

from ..data import EventChanges
from .adapter import bridge_tool
from .registry import register_api
from .serializers import serialize_calendar, serialize_event
from .state import api_state


@register_api(
    "getCalendars",
    description="List all calendars available through the local calendar bridge.",
    category="calendars",
    tags=("read",),
)
@bridge_tool("get calendars")
async def get_calendars() -> Dict[str, Any]:
    calendars = await api_state.bridge.list_calendars()
    return {"calendars": [serialize_calendar(calendar) for calendar in calendars]}


@register_api(
    "getCalendar",
    description="Fetch a single calendar by its identifier.",
    category="calendars",
    tags=("read",),
)
@bridge_tool("get calendar")
async def get_calendar(*, calendarId: str) -> Dict[str, Any]:
    calendar = await api_state.bridge.get_calendar(calendarId)
    return {"calendar": serialize_calendar(calendar)}


@register_api(
    "getCalendarEvents",
    description="List the events stored in a calendar.",
    category="events",
    tags=("read",),
)
@bridge_tool("get calendar events")
async def get_calendar_events(*, calendarId: str) -> Dict[str, Any]:
    events = await api_state.bridge.list_events(calendarId)
    return {"events": [serialize_event(event) for event in events]}


@register_api(
    "getCalendarEvent",
    description="Fetch a single event from a calendar.",
    category="events",
    tags=("read",),
)
@bridge_tool("get calendar event")
async def get_calendar_event(*, calendarId: str, eventId: str) -> Dict[str, Any]:
    event = await api_state.bridge.get_event(calendarId, eventId)
    return {"event": serialize_event(event)}


@register_api(
    "createCalendar",
    description="Create a new calendar with an optional color.",
    category="calendars",
    tags=("write",),
)
@bridge_tool("create calendar")
async def create_calendar(*, title: str, color: Optional[str] = None) -> Dict[str, Any]:
    calendar = await api_state.bridge.create_calendar(title, color)
    return {"success": True, "message": "Calendar created", "calendar": serialize_calendar(calendar)}


@register_api(
    "createCalendarEvent",
    description=(
        "Create an event in a calendar. Dates may be ISO-8601 or casual forms such as "
        "'2025/03/09 10:00:00'; they are converted to UTC before being sent."
    ),
    category="events",
    tags=("write",),
)
@bridge_tool("create event")
async def create_calendar_event(
    *,
    calendarId: str,
    title: str,
    startDate: str,
    endDate: str,
    location: Optional[str] = None,
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    event = await api_state.bridge.create_event(
        calendarId,
        title,
        startDate,
        endDate,
        location=location,
        notes=notes,
    )
    return {"success": True, "message": "Event created", "event": serialize_event(event)}


@register_api(
    "updateCalendarEvent",
    description="Update an existing event. Only the fields provided are changed.",
    category="events",
    tags=("write",),
)
@bridge_tool("update event")
async def update_calendar_event(
    *,
    calendarId: str,
    eventId: str,
    title: Optional[str] = None,
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    location: Optional[str] = None,
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    changes = EventChanges.from_supplied(
        title=title,
        start_date=startDate,
        end_date=endDate,
        location=location,
        notes=notes,
    )
    event = await api_state.bridge.update_event(calendarId, eventId, changes)
    return {"success": True, "message": "Event updated", "event": serialize_event(event)}


@register_api(
    "deleteCalendarEvent",
    description="Delete an event from a calendar.",
    category="events",
    tags=("write",),
)
@bridge_tool("delete event")
async def delete_calendar_event(*, calendarId: str, eventId: str) -> Dict[str, Any]:
    success = await api_state.bridge.delete_event(calendarId, eventId)
    return {"success": success, "message": "Event deleted" if success else "Failed to delete event"}


@register_api(
    "deleteCalendar",
    description="Delete a calendar and everything in it.",
    category="calendars",
    tags=("write",),
)
@bridge_tool("delete calendar")
async def delete_calendar(*, calendarId: str) -> Dict[str, Any]:
    success = await api_state.bridge.delete_calendar(calendarId)
    return {"success": success, "message": "Calendar deleted" if success else "Failed to delete calendar"}
