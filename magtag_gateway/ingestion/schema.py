"""Internal data contract for schedule snapshots."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GamePhase(str, Enum):
    PREVIEW = "Preview"
    LIVE = "Live"
    FINAL = "Final"


class TeamRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class Intermission(BaseModel):
    model_config = ConfigDict(frozen=True)

    active: bool = False
    seconds_remaining: int = Field(default=0, ge=0)


class PeriodClock(BaseModel):
    model_config = ConfigDict(frozen=True)

    ordinal: Optional[str] = None
    time_remaining: Optional[str] = None
    intermission: Intermission = Intermission()


class GameSnapshot(BaseModel):
    """
    A single game as seen at fetch time, used across fetch -> parse -> resolve.
    """

    model_config = ConfigDict(frozen=True)

    # Required fields
    game_id: int
    start_time: datetime
    home: TeamRef
    away: TeamRef
    phase: GamePhase

    # Optional fields
    pregame: bool = False
    time_tbd: bool = False
    clock: Optional[PeriodClock] = None
