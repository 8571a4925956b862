from __future__ import annotations

from typing import Any, List, Literal, Optional

import orjson
from pydantic import BaseModel, ConfigDict, Field

from ..domain import CalendarRef, EventRef


class CalendarPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    color: Optional[str] = Field(default=None)
    allows_modifications: bool = Field(default=False, alias="allowsModifications")

    @classmethod
    def from_domain(cls, calendar: CalendarRef) -> "CalendarPayload":
        return cls(
            id=calendar.id,
            title=calendar.title,
            color=calendar.color,
            allows_modifications=calendar.allows_modifications,
        )


class EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    calendar_id: str = Field(alias="calendarId")
    title: str
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    location: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None)

    @classmethod
    def from_domain(cls, event: EventRef) -> "EventPayload":
        return cls(
            id=event.id,
            calendar_id=event.calendar_id,
            title=event.title,
            start_date=event.start_date,
            end_date=event.end_date,
            location=event.location,
            notes=event.notes,
        )


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolEnvelope(BaseModel):
    """Response returned by every tool: JSON text content plus an error flag."""

    model_config = ConfigDict(populate_by_name=True)

    content: List[TextContent]
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def wrap(cls, payload: Any, *, is_error: bool = False) -> "ToolEnvelope":
        text = orjson.dumps(payload).decode("utf-8")
        return cls(content=[TextContent(text=text)], is_error=is_error)

    @property
    def text(self) -> str:
        return "".join(block.text for block in self.content)

    @property
    def payload(self) -> Any:
        return orjson.loads(self.text)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)
