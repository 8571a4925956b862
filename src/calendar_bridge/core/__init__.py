"""Date normalization and error classification."""

from .dates import DateInput, DateNormalizationError, format_canonical, normalize_date
from .errors import BridgeError, DATE_FORMAT_HINT, classify_error, mentions_dates, response_detail

__all__ = [
    "BridgeError",
    "DATE_FORMAT_HINT",
    "DateInput",
    "DateNormalizationError",
    "classify_error",
    "format_canonical",
    "mentions_dates",
    "normalize_date",
]
