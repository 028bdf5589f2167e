from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import tzinfo
from functools import lru_cache
from typing import Mapping
from zoneinfo import ZoneInfoNotFoundError

from magtag_gateway.ingestion.teams import SHARKS_ID
from magtag_gateway.status.timefmt import parse_timezone

logger = logging.getLogger(__name__)

DEFAULT_NHL_API_BASE = "https://statsapi.web.nhl.com/api/v1"


@dataclass(frozen=True)
class GatewaySettings:
    """Runtime options threaded through fetchers and the resolver.

    ``venue_tz_name`` defaults to the fixed "-08:00" offset, which ignores
    daylight saving time. Deployments at a real Pacific venue should set
    ``VENUE_TZ=America/Los_Angeles`` so clocks and relative dates follow DST.
    """

    default_team_id: int = SHARKS_ID
    venue_tz_name: str = "-08:00"
    nhl_api_base: str = DEFAULT_NHL_API_BASE
    today_file: str | None = None
    next_file: str | None = None
    events_url: str | None = None
    events_file: str | None = None
    events_label: str = "Coming Up"
    secondary_schedule_url: str | None = None
    secondary_schedule_file: str | None = None
    secondary_team_label: str = "Barracuda"
    http_timeout_seconds: float = 10.0
    port: int = 8080

    @property
    def venue_tz(self) -> tzinfo:
        return parse_timezone(self.venue_tz_name)

    @property
    def events_enabled(self) -> bool:
        return bool(self.events_url or self.events_file)

    @property
    def secondary_schedule_enabled(self) -> bool:
        return bool(self.secondary_schedule_url or self.secondary_schedule_file)


def _optional(env: Mapping[str, str], key: str) -> str | None:
    value = (env.get(key) or "").strip()
    return value or None


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = _optional(env, key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", key, raw, default)
        return default


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = _optional(env, key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", key, raw, default)
        return default


def _timezone_name(env: Mapping[str, str]) -> str:
    raw = _optional(env, "VENUE_TZ") or "-08:00"
    try:
        parse_timezone(raw)
    except (ValueError, ZoneInfoNotFoundError):
        logger.warning("Invalid VENUE_TZ=%r, using -08:00", raw)
        return "-08:00"
    return raw


def load_settings(env: Mapping[str, str] | None = None) -> GatewaySettings:
    """Build a settings snapshot from environment variables."""

    env = os.environ if env is None else env
    return GatewaySettings(
        default_team_id=_int(env, "DEFAULT_TEAM_ID", SHARKS_ID),
        venue_tz_name=_timezone_name(env),
        nhl_api_base=(_optional(env, "NHL_API_BASE") or DEFAULT_NHL_API_BASE).rstrip("/"),
        today_file=_optional(env, "TODAY_FILE"),
        next_file=_optional(env, "NEXT_FILE"),
        events_url=_optional(env, "EVENTS_URL"),
        events_file=_optional(env, "EVENTS_FILE"),
        events_label=_optional(env, "EVENTS_LABEL") or "Coming Up",
        secondary_schedule_url=_optional(env, "SECONDARY_SCHEDULE_URL"),
        secondary_schedule_file=_optional(env, "SECONDARY_SCHEDULE_FILE"),
        secondary_team_label=_optional(env, "SECONDARY_TEAM_LABEL") or "Barracuda",
        http_timeout_seconds=_float(env, "HTTP_TIMEOUT_SECONDS", 10.0),
        port=_int(env, "PORT", 8080),
    )


@lru_cache(maxsize=1)
def get_settings() -> GatewaySettings:
    return load_settings()
