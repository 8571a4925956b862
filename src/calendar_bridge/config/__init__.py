"""Configuration models and helpers."""

from __future__ import annotations

from .settings import AppSettings, BridgeSettings, DateSettings, LoggingSettings, get_settings

__all__ = ["AppSettings", "BridgeSettings", "DateSettings", "LoggingSettings", "get_settings"]
