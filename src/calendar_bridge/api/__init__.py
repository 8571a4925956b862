"""Tool surface exposed over MCP and the local HTTP API."""

from __future__ import annotations

from .models import ToolEnvelope
from .registry import ApiFunction, call_api, get_api_functions, register_api
from .state import api_state

# Import tool modules so decorators run at module import time.
from . import endpoints, meta  # noqa: F401

__all__ = ["ApiFunction", "ToolEnvelope", "api_state", "call_api", "get_api_functions", "register_api"]
