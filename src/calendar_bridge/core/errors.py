"""Classification of bridge failures into actionable diagnostics.

The bridge does not publish an error contract, so classification is a
heuristic over whatever it sends back. In particular date-format rejections
are detected by matching the upstream text against :data:`DATE_COMPLAINT`,
which is a known approximation: a bridge message that mentions dates for an
unrelated reason will be reported as a date problem.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

import httpx

from ..domain import ClassifiedError, ErrorKind
from .dates import DateNormalizationError

logger = logging.getLogger(__name__)

DATE_COMPLAINT = re.compile(
    r"(?<![a-z])(?:start|end)?date|iso[\s_-]?8601|timestamp",
    re.IGNORECASE,
)
NOT_FOUND_COMPLAINT = re.compile(r"not\s+found|no\s+such|does\s+not\s+exist", re.IGNORECASE)

DATE_FORMAT_HINT = (
    "Provide dates as ISO-8601, for example 2025-03-09T10:00:00Z or "
    "'2025-03-09 10:00:00'. If the calendar keeps rejecting the date, create "
    "or edit the event manually in the Calendar app instead."
)

_MAX_DETAIL_LENGTH = 200


class BridgeError(RuntimeError):
    """A failed bridge operation, already classified."""

    def __init__(self, error: ClassifiedError) -> None:
        super().__init__(error.message)
        self.error = error

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind


def _collapse(text: str) -> str:
    return " ".join(text.split())[:_MAX_DETAIL_LENGTH]


def response_detail(response: httpx.Response) -> str:
    """Best-effort human readable error text from a bridge response."""

    try:
        payload: Any = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        for key in ("error", "message", "detail"):
            value = payload.get(key)
            if isinstance(value, dict):
                nested = value.get("message")
                if isinstance(nested, str) and nested.strip():
                    return _collapse(nested)
            if isinstance(value, str) and value.strip():
                return _collapse(value)

    raw_text = response.text.strip()
    if raw_text:
        return _collapse(raw_text)
    return f"Bridge responded with HTTP {response.status_code} and no error payload"


def mentions_dates(text: Optional[str]) -> bool:
    return bool(text and DATE_COMPLAINT.search(text))


def classify_error(exc: BaseException, *, action: str) -> ClassifiedError:
    """Map an exception raised while performing ``action`` to a diagnostic."""

    if isinstance(exc, BridgeError):
        return exc.error

    if isinstance(exc, DateNormalizationError):
        return ClassifiedError(
            kind=ErrorKind.DATE_FORMAT,
            message=f"Failed to {action}: {exc}",
            original_detail=str(exc),
            hint=DATE_FORMAT_HINT,
        )

    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        detail = response_detail(exc.response)
        if mentions_dates(detail):
            return ClassifiedError(
                kind=ErrorKind.DATE_FORMAT,
                message=f"Failed to {action}: the calendar rejected the date format",
                original_detail=detail,
                hint=DATE_FORMAT_HINT,
            )
        if status == 404 or NOT_FOUND_COMPLAINT.search(detail):
            return ClassifiedError(
                kind=ErrorKind.NOT_FOUND,
                message=f"Failed to {action}: the calendar or event was not found",
                original_detail=detail,
            )
        return ClassifiedError(
            kind=ErrorKind.UNKNOWN,
            message=f"Failed to {action}: the calendar bridge returned HTTP {status}",
            original_detail=detail,
        )

    detail = _collapse(str(exc)) or type(exc).__name__
    if mentions_dates(detail):
        return ClassifiedError(
            kind=ErrorKind.DATE_FORMAT,
            message=f"Failed to {action}: the date could not be processed",
            original_detail=detail,
            hint=DATE_FORMAT_HINT,
        )
    if isinstance(exc, httpx.RequestError):
        return ClassifiedError(
            kind=ErrorKind.NETWORK,
            message=f"Failed to {action}: the calendar bridge is unreachable",
            original_detail=detail,
        )
    return ClassifiedError(
        kind=ErrorKind.UNKNOWN,
        message=f"Failed to {action}",
        original_detail=detail,
    )


__all__ = [
    "BridgeError",
    "DATE_COMPLAINT",
    "DATE_FORMAT_HINT",
    "classify_error",
    "mentions_dates",
    "response_detail",
]
