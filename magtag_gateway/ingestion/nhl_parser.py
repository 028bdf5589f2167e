"""Parser for NHL stats API schedule payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import ValidationError

from magtag_gateway.ingestion.schema import (
    GamePhase,
    GameSnapshot,
    Intermission,
    PeriodClock,
    TeamRef,
)

PREGAME_DETAILED_STATE = "Pre-Game"


class MalformedScheduleError(ValueError):
    pass


def _require_dict(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedScheduleError(f"{what} must be an object")
    return value


def _parse_start_time(value: Any) -> datetime:
    if not isinstance(value, str):
        raise MalformedScheduleError(f"gameDate is not an ISO timestamp: {value!r}")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise MalformedScheduleError(f"gameDate is not an ISO timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        raise MalformedScheduleError(f"gameDate must carry a timezone offset: {value!r}")
    return parsed


def _parse_phase(status: dict[str, Any]) -> GamePhase:
    state = status.get("abstractGameState")
    try:
        return GamePhase(state)
    except ValueError as exc:
        raise MalformedScheduleError(f"Unknown abstractGameState: {state!r}") from exc


def _parse_team(teams: dict[str, Any], side: str) -> TeamRef:
    entry = _require_dict(teams.get(side), f"teams.{side}")
    team = _require_dict(entry.get("team"), f"teams.{side}.team")
    return TeamRef(id=team.get("id"), name=team.get("name") or "TBD")


def _parse_clock(linescore: Any) -> PeriodClock | None:
    if not isinstance(linescore, dict):
        return None
    info = linescore.get("intermissionInfo")
    if not isinstance(info, dict):
        info = {}
    return PeriodClock(
        ordinal=linescore.get("currentPeriodOrdinal") or None,
        time_remaining=linescore.get("currentPeriodTimeRemaining") or None,
        intermission=Intermission(
            active=bool(info.get("inIntermission")),
            seconds_remaining=info.get("intermissionTimeRemaining") or 0,
        ),
    )


def parse_game(game: dict[str, Any]) -> GameSnapshot:
    """Parse one entry of ``dates[].games[]`` into a GameSnapshot."""

    game = _require_dict(game, "game")
    status = _require_dict(game.get("status"), "status")
    teams = _require_dict(game.get("teams"), "teams")
    try:
        return GameSnapshot(
            game_id=game.get("gamePk"),
            start_time=_parse_start_time(game.get("gameDate")),
            home=_parse_team(teams, "home"),
            away=_parse_team(teams, "away"),
            phase=_parse_phase(status),
            pregame=status.get("detailedState") == PREGAME_DETAILED_STATE,
            time_tbd=bool(status.get("startTimeTBD")),
            clock=_parse_clock(game.get("linescore")),
        )
    except ValidationError as exc:
        raise MalformedScheduleError(str(exc)) from exc


def parse_schedule(schedule: dict[str, Any]) -> GameSnapshot | None:
    """Return the earliest game of a schedule document, or None when it is empty."""

    schedule = _require_dict(schedule, "schedule")
    total_items = schedule.get("totalItems", 0)
    if not isinstance(total_items, int):
        raise MalformedScheduleError("totalItems must be an integer")
    if total_items == 0:
        return None

    dates = schedule.get("dates")
    if not isinstance(dates, list):
        raise MalformedScheduleError("dates must be a list")
    for game_date in dates:
        games = _require_dict(game_date, "dates[]").get("games")
        if isinstance(games, list) and games:
            return parse_game(games[0])
    return None


def parse_today(document: dict[str, Any]) -> GameSnapshot | None:
    """Parse ``/schedule?expand=schedule.linescore`` output."""
    return parse_schedule(document)


def parse_next(document: dict[str, Any]) -> GameSnapshot | None:
    """Parse ``/teams/{id}?expand=team.schedule.next`` output."""

    document = _require_dict(document, "document")
    teams = document.get("teams")
    if not isinstance(teams, list):
        raise MalformedScheduleError("teams must be a list")
    if not teams:
        return None
    team = _require_dict(teams[0], "teams[]")
    next_schedule = team.get("nextGameSchedule")
    if next_schedule is None:
        return None
    return parse_schedule(next_schedule)
