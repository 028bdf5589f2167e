"""Venue-time projection and compact clock formatting for the display."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

# Fixed offset, no DST. Use ZoneInfo("America/Los_Angeles") for Pacific venues year-round.
DEFAULT_VENUE_TZ = timezone(timedelta(hours=-8))

_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_OFFSET_RE = re.compile(r"([+-])(\d{2}):?(\d{2})")


def parse_timezone(value: str | None) -> tzinfo:
    """Return a tzinfo for a fixed offset ("-08:00") or an IANA name.

    Empty values fall back to the default venue offset. IANA names such as
    "America/Los_Angeles" follow daylight saving time; fixed offsets do not.
    """

    if value is None:
        return DEFAULT_VENUE_TZ
    cleaned = value.strip()
    if not cleaned:
        return DEFAULT_VENUE_TZ
    if cleaned.upper() in {"UTC", "Z"}:
        return timezone.utc
    match = _OFFSET_RE.fullmatch(cleaned)
    if match:
        sign, hours, minutes = match.groups()
        offset = timedelta(hours=int(hours), minutes=int(minutes))
        return timezone(-offset if sign == "-" else offset)
    return ZoneInfo(cleaned)


def _ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_venue(instant: datetime, tz: tzinfo) -> datetime:
    return _ensure_aware(instant).astimezone(tz)


def is_same_local_day(a: datetime, b: datetime, tz: tzinfo) -> bool:
    return to_venue(a, tz).date() == to_venue(b, tz).date()


def format_clock(instant: datetime, tz: tzinfo) -> str:
    local = to_venue(instant, tz)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d}{meridiem}"


def format_relative(
    instant: datetime,
    now: datetime,
    tz: tzinfo,
    is_tbd: bool = False,
) -> str:
    """Describe an upcoming start relative to ``now`` in venue time.

    ``Today @ 7:00PM`` on the same venue day, ``Mar 21 @ 10:00AM`` otherwise.
    A TBD start drops the clock part.
    """

    local = to_venue(instant, tz)
    if is_same_local_day(instant, now, tz):
        day = "Today"
    else:
        day = f"{_MONTHS[local.month - 1]} {local.day}"
    if is_tbd:
        return day
    return f"{day} @ {format_clock(instant, tz)}"


def format_intermission(seconds: int) -> str:
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"
