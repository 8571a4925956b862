"""Failure containment between tool calls and the bridge client.

Every tool goes through :func:`bridge_tool`, which turns whatever happens
inside the tool body into exactly one :class:`ToolEnvelope`. Failures are
classified first and rendered second: date-format problems get an enriched
diagnostic with a suggested workaround, everything else a generic one.
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping

from pydantic import ValidationError, validate_call

from ..core import BridgeError, classify_error
from ..domain import ClassifiedError, ErrorKind
from .models import ToolEnvelope

logger = logging.getLogger(__name__)

ToolBody = Callable[..., Awaitable[Dict[str, Any]]]


def strip_unset(arguments: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop parameters the caller explicitly left unset."""

    return {key: value for key, value in arguments.items() if value is not None}


def render_success(payload: Dict[str, Any]) -> ToolEnvelope:
    return ToolEnvelope.wrap(payload)


def render_date_format_failure(failure: str, error: ClassifiedError) -> ToolEnvelope:
    return ToolEnvelope.wrap(
        {
            "error": f"{failure}: the date format was not accepted",
            "kind": ErrorKind.DATE_FORMAT.value,
            "message": error.message,
            "suggestion": error.hint,
        },
        is_error=True,
    )


def render_failure(failure: str, error: ClassifiedError) -> ToolEnvelope:
    return ToolEnvelope.wrap(
        {"error": failure, "kind": error.kind.value, "message": error.message},
        is_error=True,
    )


def _describe_validation(exc: ValidationError) -> str:
    problems = []
    for item in exc.errors():
        location = ".".join(str(part) for part in item.get("loc", ()) if part != "kwargs")
        problems.append(f"{location}: {item.get('msg')}" if location else str(item.get("msg")))
    return "; ".join(problems)


def _classify_safely(exc: Exception, action: str) -> ClassifiedError:
    if isinstance(exc, ValidationError):
        return ClassifiedError(
            kind=ErrorKind.UNKNOWN,
            message=f"Invalid parameters to {action}: {_describe_validation(exc)}",
        )
    try:
        return classify_error(exc, action=action)
    except Exception:  # noqa: BLE001
        logger.exception("Error classification failed while trying to %s", action)
        return ClassifiedError(kind=ErrorKind.UNKNOWN, message=f"Failed to {action}")


def bridge_tool(action: str) -> Callable[[ToolBody], Callable[..., Awaitable[ToolEnvelope]]]:
    """Wrap a tool body so it always returns one envelope and never raises.

    ``action`` is a short verb phrase ("create event") used in messages.
    """

    failure = f"Failed to {action}"

    def decorator(func: ToolBody) -> Callable[..., Awaitable[ToolEnvelope]]:
        validated = validate_call(func)

        @functools.wraps(func)
        async def wrapper(**arguments: Any) -> ToolEnvelope:
            try:
                try:
                    payload = await validated(**strip_unset(arguments))
                except BridgeError as exc:
                    if exc.kind is not ErrorKind.DATE_FORMAT:
                        raise
                    logger.info("%s: %s", failure, exc.error.original_detail)
                    return render_date_format_failure(failure, exc.error)
                return render_success(payload)
            except Exception as exc:  # noqa: BLE001
                error = _classify_safely(exc, action)
                if error.kind is ErrorKind.DATE_FORMAT:
                    return render_date_format_failure(failure, error)
                if error.kind is ErrorKind.UNKNOWN and not isinstance(exc, (BridgeError, ValidationError)):
                    logger.exception("%s", failure)
                else:
                    logger.warning("%s (%s): %s", failure, error.kind.value, error.message)
                return render_failure(failure, error)

        signature = inspect.signature(func)
        wrapper.__signature__ = signature.replace(return_annotation=ToolEnvelope)  # type: ignore[attr-defined]
        wrapper.__annotations__ = {**func.__annotations__, "return": ToolEnvelope}
        return wrapper

    return decorator


__all__ = [
    "bridge_tool",
    "render_date_format_failure",
    "render_failure",
    "render_success",
    "strip_unset",
]
