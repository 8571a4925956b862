from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .enums import ErrorKind


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass(slots=True)
class CalendarRef:
    id: str
    title: str
    color: Optional[str] = None
    allows_modifications: bool = False

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "CalendarRef":
        return cls(
            id=str(record["id"]),
            title=str(record.get("title") or ""),
            color=_optional_str(record.get("color")),
            allows_modifications=bool(record.get("allowsModifications", False)),
        )


@dataclass(slots=True)
class EventRef:
    id: str
    calendar_id: str
    title: str
    start_date: Optional[str]
    end_date: Optional[str]
    location: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any], *, calendar_id: Optional[str] = None) -> "EventRef":
        return cls(
            id=str(record["id"]),
            calendar_id=str(record.get("calendarId") or calendar_id or ""),
            title=str(record.get("title") or ""),
            start_date=_optional_str(record.get("startDate")),
            end_date=_optional_str(record.get("endDate")),
            location=_optional_str(record.get("location")),
            notes=_optional_str(record.get("notes")),
        )


@dataclass(frozen=True, slots=True)
class ClassifiedError:
    """Diagnostic produced once for a failed bridge operation."""

    kind: ErrorKind
    message: str
    original_detail: Optional[str] = None
    hint: Optional[str] = None
