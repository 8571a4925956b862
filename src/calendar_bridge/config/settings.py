from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import timezone, tzinfo
from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_BRIDGE_PORT = 8080


@dataclass(frozen=True)
class BridgeSettings:
    host: str
    port: int

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


@dataclass(frozen=True)
class DateSettings:
    timezone: str

    @property
    def default_tz(self) -> tzinfo:
        if self.timezone.upper() in {"UTC", "Z"}:
            return timezone.utc
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r, falling back to UTC", self.timezone)
            return timezone.utc


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    log_file: Optional[Path]


@dataclass(frozen=True)
class AppSettings:
    bridge: BridgeSettings
    dates: DateSettings
    logging: LoggingSettings


def _port_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        port = int(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %d", name, raw, default)
        return default
    if not 0 < port < 65536:
        logger.warning("Ignoring out-of-range %s=%d, using %d", name, port, default)
        return default
    return port


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    bridge = BridgeSettings(
        host="localhost",
        port=_port_from_env("CALENDAR_BRIDGE_PORT", DEFAULT_BRIDGE_PORT),
    )

    dates = DateSettings(timezone=os.getenv("CALENDAR_BRIDGE_TIMEZONE", "UTC"))

    log_file = os.getenv("CALENDAR_BRIDGE_LOG_FILE")
    logging_settings = LoggingSettings(
        level=os.getenv("CALENDAR_BRIDGE_LOG_LEVEL", "INFO").upper(),
        log_file=Path(log_file).expanduser() if log_file else None,
    )

    return AppSettings(bridge=bridge, dates=dates, logging=logging_settings)
