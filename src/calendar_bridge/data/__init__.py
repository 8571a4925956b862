"""Data access layer."""

from __future__ import annotations

from .bridge import BridgeClient, EventChanges

__all__ = ["BridgeClient", "EventChanges"]
