"""Reduce secondary "what's next" sources to display payloads."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Iterable, TypeVar

from magtag_gateway.status.engine import DisplayPayload, sleep_seconds_until
from magtag_gateway.status.timefmt import format_clock, format_relative


@dataclass(frozen=True)
class DatedEvent:
    instant: datetime
    name: str


@dataclass(frozen=True)
class ScheduledOpponent:
    instant: datetime
    opponent: str
    home: bool = True


_T = TypeVar("_T", DatedEvent, ScheduledOpponent)


def _first_upcoming(entries: Iterable[_T], now: datetime) -> _T | None:
    for entry in entries:
        if entry.instant > now:
            return entry
    return None


def resolve_dated_events(
    events: Iterable[DatedEvent],
    now: datetime,
    tz: tzinfo,
    label: str,
) -> DisplayPayload | None:
    event = _first_upcoming(events, now)
    if event is None:
        return None
    return DisplayPayload(
        top=label,
        middle=event.name,
        bottom=format_relative(event.instant, now, tz),
        current_time=format_clock(now, tz),
        sleep_seconds=sleep_seconds_until(event.instant, now),
        event_instant=event.instant,
    )


def resolve_secondary_schedule(
    schedule: Iterable[ScheduledOpponent],
    now: datetime,
    tz: tzinfo,
    team_label: str,
) -> DisplayPayload | None:
    game = _first_upcoming(schedule, now)
    if game is None:
        return None
    relation = f"vs {game.opponent}" if game.home else f"@ {game.opponent}"
    return DisplayPayload(
        top=f"{team_label} Next Up",
        middle=relation,
        bottom=format_relative(game.instant, now, tz),
        current_time=format_clock(now, tz),
        sleep_seconds=sleep_seconds_until(game.instant, now),
        event_instant=game.instant,
    )
