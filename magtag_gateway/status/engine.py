"""Decide what the e-ink display should show for a team right now."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo

from magtag_gateway.ingestion.schema import GamePhase, GameSnapshot, PeriodClock, TeamRef
from magtag_gateway.status.game_id import next_up_label
from magtag_gateway.status.timefmt import (
    format_clock,
    format_intermission,
    format_relative,
    is_same_local_day,
)

logger = logging.getLogger(__name__)

SHORT_SLEEP_SECONDS = 60
IDLE_SLEEP_SECONDS = 15 * 60
LONG_SLEEP_SECONDS = 2 * 60 * 60
# Inside this window before an event the client polls at the short interval.
NEAR_HORIZON_SECONDS = 20 * 60

DEFAULT_ORDINAL = "1st"
DEFAULT_TIME_REMAINING = "00:00"


class StatusResolutionError(RuntimeError):
    pass


class MissingClockError(StatusResolutionError):
    pass


@dataclass(frozen=True)
class DisplayPayload:
    top: str
    middle: str
    bottom: str
    current_time: str
    sleep_seconds: int
    event_instant: datetime | None = None


def default_payload(team_label: str, now: datetime, tz: tzinfo) -> DisplayPayload:
    label = f"{team_label} Next Up" if team_label else "Next Up"
    return DisplayPayload(
        top=label,
        middle="No Games",
        bottom="",
        current_time=format_clock(now, tz),
        sleep_seconds=IDLE_SLEEP_SECONDS,
        event_instant=None,
    )


def sleep_seconds_until(event_instant: datetime, now: datetime) -> int:
    """Poll interval for an event that has not been reported live yet.

    Past events get the long fallback so a stale upstream still self-corrects.
    Far-off events sleep until the near horizon, capped at the long fallback.
    """

    delta = (event_instant - now).total_seconds()
    if delta < 0:
        return LONG_SLEEP_SECONDS
    if delta > NEAR_HORIZON_SECONDS:
        until_horizon = int(delta - NEAR_HORIZON_SECONDS)
        return max(SHORT_SLEEP_SECONDS, min(LONG_SLEEP_SECONDS, until_horizon))
    return SHORT_SLEEP_SECONDS


def opponent_relation(home: TeamRef, away: TeamRef, team_id: int) -> str:
    if home.id == team_id:
        return f"vs {away.name}"
    return f"@ {home.name}"


def _live_clock_text(clock: PeriodClock) -> str:
    ordinal = clock.ordinal or DEFAULT_ORDINAL
    if clock.intermission.active:
        return f"{ordinal} int|{format_intermission(clock.intermission.seconds_remaining)}"
    remaining = clock.time_remaining or DEFAULT_TIME_REMAINING
    return f"{ordinal} | {remaining}"


def _resolve_today(
    game: GameSnapshot,
    team_id: int,
    now: datetime,
    tz: tzinfo,
) -> DisplayPayload:
    middle = opponent_relation(game.home, game.away, team_id)
    current_time = format_clock(now, tz)

    if game.phase is GamePhase.PREVIEW:
        if game.pregame:
            top, bottom = "Pregame", "Live"
            sleep = SHORT_SLEEP_SECONDS
        else:
            top = next_up_label(game.game_id)
            bottom = format_relative(game.start_time, now, tz, game.time_tbd)
            sleep = sleep_seconds_until(game.start_time, now)
    elif game.phase is GamePhase.LIVE:
        if game.clock is None:
            raise MissingClockError(f"Live game {game.game_id} has no period clock")
        top, bottom = _live_clock_text(game.clock), "Live"
        sleep = SHORT_SLEEP_SECONDS
    elif game.phase is GamePhase.FINAL:
        top, bottom = "Final", ""
        sleep = LONG_SLEEP_SECONDS
    else:
        raise StatusResolutionError(f"Unhandled game phase: {game.phase!r}")

    return DisplayPayload(
        top=top,
        middle=middle,
        bottom=bottom,
        current_time=current_time,
        sleep_seconds=sleep,
        event_instant=game.start_time,
    )


def _resolve_next(
    game: GameSnapshot,
    team_id: int,
    now: datetime,
    tz: tzinfo,
) -> DisplayPayload:
    return DisplayPayload(
        top=next_up_label(game.game_id),
        middle=opponent_relation(game.home, game.away, team_id),
        bottom=format_relative(game.start_time, now, tz, game.time_tbd),
        current_time=format_clock(now, tz),
        sleep_seconds=sleep_seconds_until(game.start_time, now),
        event_instant=game.start_time,
    )


def resolve(
    today: GameSnapshot | None,
    next_game: GameSnapshot | None,
    team_id: int,
    team_label: str,
    now: datetime,
    tz: tzinfo,
) -> DisplayPayload:
    """Resolve the payload for ``team_id`` at ``now``.

    A game scheduled on the current venue day wins over the next scheduled game.
    With neither available the "No Games" payload is returned.
    Raises MissingClockError when a live game carries no period clock.
    """

    if today is not None and is_same_local_day(today.start_time, now, tz):
        logger.debug("Resolving today's game game_id=%s phase=%s", today.game_id, today.phase)
        return _resolve_today(today, team_id, now, tz)
    if next_game is not None:
        logger.debug("Resolving next game game_id=%s", next_game.game_id)
        return _resolve_next(next_game, team_id, now, tz)
    logger.debug("No games for team_id=%s", team_id)
    return default_payload(team_label, now, tz)
