from __future__ import annotations

from typing import Any, Dict

from ..domain import CalendarRef, EventRef
from .models import CalendarPayload, EventPayload


def serialize_calendar(calendar: CalendarRef) -> Dict[str, Any]:
    return CalendarPayload.from_domain(calendar).model_dump(by_alias=True)


def serialize_event(event: EventRef) -> Dict[str, Any]:
    return EventPayload.from_domain(event).model_dump(by_alias=True)
