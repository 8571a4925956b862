"""Normalization of loosely formatted dates into the bridge's wire format.

The bridge accepts exactly one timestamp encoding: UTC ISO-8601 with
millisecond precision and a ``Z`` suffix (``2025-03-09T10:00:00.000Z``).
Callers hand us whatever they have, so every date-bearing request goes
through :func:`normalize_date` first.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timezone, tzinfo
from typing import Iterator, Optional, Union

from dateutil import parser as dateutil_parser

DateInput = Union[None, str, date, datetime]

_WHITESPACE_RUN = re.compile(r"\s+")

# Two fill-in dates that differ in every date field; a casual parse must not depend on them.
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


class DateNormalizationError(ValueError):
    """Raised when a date input cannot be turned into a canonical timestamp."""

    def __init__(self, value: object, reason: str = "unrecognized date format") -> None:
        super().__init__(f"Invalid date {value!r}: {reason}")
        self.value = value
        self.reason = reason


def _parse(text: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00").replace("z", "+00:00"))
    except ValueError:
        return None


def _parse_casual(text: str) -> Optional[datetime]:
    """Last resort for forms such as "March 9, 2025 10:00" or RFC 2822 dates.

    Text that leaves the year, month or day unspecified is rejected rather
    than completed from the current date.
    """

    try:
        first, second = (dateutil_parser.parse(text, default=fill, fuzzy=False) for fill in _FILL_DEFAULTS)
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first


def _candidates(text: str) -> Iterator[str]:
    yield text
    slashless = text.replace("/", "-") if "/" in text else None
    if slashless is not None:
        yield slashless
    if _WHITESPACE_RUN.search(text):
        yield _WHITESPACE_RUN.sub("T", text, count=1)
        if slashless is not None:
            yield _WHITESPACE_RUN.sub("T", slashless, count=1)


def _to_instant(value: DateInput, default_tz: tzinfo) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=default_tz)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=default_tz)
    if not isinstance(value, str):
        raise DateNormalizationError(value, f"unsupported type {type(value).__name__}")

    text = value.strip()
    for candidate in _candidates(text):
        parsed = _parse(candidate)
        if parsed is not None:
            break
    else:
        parsed = _parse_casual(text)
    if parsed is not None:
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=default_tz)
    raise DateNormalizationError(value)


def format_canonical(instant: datetime) -> str:
    """Render an aware datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    utc = instant.astimezone(timezone.utc)
    return utc.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


def normalize_date(value: DateInput, *, default_tz: tzinfo = timezone.utc) -> Optional[str]:
    """Return the canonical timestamp for ``value``.

    ``None`` and blank strings mean "absent" and yield ``None``; callers must
    keep them absent rather than substituting a default. Text is tried as-is,
    then with ``/`` turned into ``-``, then with the first whitespace run
    turned into the ``T`` separator, and finally through dateutil for casual
    forms that name a full calendar date. Naive inputs are read in ``default_tz``.

    Raises:
        DateNormalizationError: if no attempt yields a representable instant.
    """

    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None

    instant = _to_instant(value, default_tz)
    try:
        return format_canonical(instant)
    except (OverflowError, ValueError) as exc:
        raise DateNormalizationError(value, "instant is out of range") from exc


__all__ = ["DateInput", "DateNormalizationError", "format_canonical", "normalize_date"]
