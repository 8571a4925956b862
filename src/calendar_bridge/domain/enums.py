from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    DATE_FORMAT = "DateFormat"
    NETWORK = "Network"
    NOT_FOUND = "NotFound"
    UNKNOWN = "Unknown"
