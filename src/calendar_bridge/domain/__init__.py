"""Domain entities for the calendar bridge."""

from __future__ import annotations

from .enums import ErrorKind
from .models import CalendarRef, ClassifiedError, EventRef

__all__ = ["CalendarRef", "ClassifiedError", "ErrorKind", "EventRef"]
