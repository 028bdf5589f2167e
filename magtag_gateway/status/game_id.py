"""Decode NHL game identifiers into season and competition phase.

Identifiers look like ``2020030181``: the season start year, a two digit
game-type code, then four digits whose meaning depends on the type. Playoff
games spell out ``0`` + round + matchup + game number.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

PRESEASON_CODE = 1
REGULAR_CODE = 2
PLAYOFF_CODE = 3
ALL_STAR_CODE = 4


@dataclass(frozen=True)
class Preseason:
    number: int


@dataclass(frozen=True)
class Regular:
    number: int


@dataclass(frozen=True)
class AllStar:
    number: int


@dataclass(frozen=True)
class Playoff:
    round: int
    matchup: int
    game: int


GamePhaseCode = Union[Preseason, Regular, AllStar, Playoff]


@dataclass(frozen=True)
class GameIdentity:
    season: int
    phase: GamePhaseCode

    @property
    def is_playoff(self) -> bool:
        return isinstance(self.phase, Playoff)


_ROUND_LABELS: dict[int, str] = {
    1: "Round 1",
    2: "Round 2",
    3: "Conf Final",
    4: "Cup Final",
}


def decode_game_id(value: int) -> GameIdentity:
    """Split ``value`` into season and phase. Unknown type codes read as regular season."""

    value = int(value)
    season = value // 1_000_000
    remainder = value % 1_000_000
    code = remainder // 10_000
    number = remainder % 10_000

    if code == PRESEASON_CODE:
        phase: GamePhaseCode = Preseason(number)
    elif code == PLAYOFF_CODE:
        phase = Playoff(
            round=number // 100 % 10,
            matchup=number // 10 % 10,
            game=number % 10,
        )
    elif code == ALL_STAR_CODE:
        phase = AllStar(number)
    else:
        phase = Regular(number)
    return GameIdentity(season=season, phase=phase)


def playoff_label(identity: GameIdentity) -> str | None:
    """Return e.g. ``Round 1 - Game 3`` for playoff games, ``None`` otherwise."""

    phase = identity.phase
    if not isinstance(phase, Playoff):
        return None
    round_label = _ROUND_LABELS.get(phase.round, f"Round {phase.round}")
    return f"{round_label} - Game {phase.game}"


def next_up_label(game_id: int | None) -> str:
    if game_id is None:
        return "Next Up"
    return playoff_label(decode_game_id(game_id)) or "Next Up"
