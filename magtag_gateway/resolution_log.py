"""Recent display resolutions, newest first, for the /api/resolutions endpoint."""

from __future__ import annotations

from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime
from threading import Lock

from magtag_gateway.status.engine import DisplayPayload


@dataclass(frozen=True)
class ResolutionEntry:
    resolved_at: datetime
    team_id: int
    top: str
    middle: str
    bottom: str
    sleep_seconds: int
    event_instant: datetime | None = None


class ResolutionLog:
    def __init__(self, maxlen: int = 200) -> None:
        self._entries: deque[ResolutionEntry] = deque(maxlen=maxlen)
        self._lock = Lock()

    def record(self, team_id: int, payload: DisplayPayload, resolved_at: datetime) -> ResolutionEntry:
        entry = ResolutionEntry(
            resolved_at=resolved_at,
            team_id=team_id,
            top=payload.top,
            middle=payload.middle,
            bottom=payload.bottom,
            sleep_seconds=payload.sleep_seconds,
            event_instant=payload.event_instant,
        )
        with self._lock:
            self._entries.append(entry)
        return entry

    def entries(self, limit: int = 50, team_id: int | None = None) -> list[dict]:
        """Return up to *limit* entries, newest first, optionally for one team."""
        if limit <= 0:
            return []
        with self._lock:
            items = list(self._entries)
        items.reverse()
        if team_id is not None:
            items = [item for item in items if item.team_id == team_id]
        return [asdict(item) for item in items[:limit]]


_log = ResolutionLog()


def get_resolution_log() -> ResolutionLog:
    return _log
