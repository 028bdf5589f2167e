"""Fetch upstream documents and resolve them into a single display payload."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from magtag_gateway.ingestion.events import fetch_dated_events
from magtag_gateway.ingestion.nhl_client import fetch_next, fetch_today
from magtag_gateway.ingestion.nhl_parser import MalformedScheduleError, parse_next, parse_today
from magtag_gateway.ingestion.schema import GameSnapshot
from magtag_gateway.ingestion.scrape import fetch_secondary_schedule
from magtag_gateway.ingestion.teams import team_nickname
from magtag_gateway.settings import GatewaySettings
from magtag_gateway.status.engine import (
    DisplayPayload,
    StatusResolutionError,
    default_payload,
    resolve,
)
from magtag_gateway.status.merge import select_earliest
from magtag_gateway.status.sources import (
    DatedEvent,
    ScheduledOpponent,
    resolve_dated_events,
    resolve_secondary_schedule,
)

logger = logging.getLogger(__name__)


@dataclass
class UpstreamDocuments:
    today: Any | None = None
    next_game: Any | None = None
    events: list[DatedEvent] = field(default_factory=list)
    secondary_schedule: list[ScheduledOpponent] = field(default_factory=list)


def _parse_or_none(
    parser: Callable[[Any], GameSnapshot | None],
    document: Any | None,
    source: str,
) -> GameSnapshot | None:
    if document is None:
        return None
    try:
        return parser(document)
    except MalformedScheduleError as exc:
        logger.error("Treating malformed %s document as absent: %s", source, exc)
        return None


def resolve_primary(
    documents: UpstreamDocuments,
    team_id: int,
    settings: GatewaySettings,
    now: datetime,
) -> DisplayPayload:
    tz = settings.venue_tz
    team_label = team_nickname(team_id)
    today = _parse_or_none(parse_today, documents.today, "today")
    next_game = _parse_or_none(parse_next, documents.next_game, "next")
    try:
        return resolve(today, next_game, team_id, team_label, now, tz)
    except StatusResolutionError:
        logger.exception("Failed resolving status for team_id=%s", team_id)
        return default_payload(team_label, now, tz)


def resolve_display(
    documents: UpstreamDocuments,
    team_id: int,
    settings: GatewaySettings,
    now: datetime,
) -> DisplayPayload:
    """Resolve the primary team and merge in any configured secondary sources."""

    tz = settings.venue_tz
    primary = resolve_primary(documents, team_id, settings, now)
    events = resolve_dated_events(documents.events, now, tz, settings.events_label)
    secondary = resolve_secondary_schedule(
        documents.secondary_schedule, now, tz, settings.secondary_team_label
    )
    return select_earliest(primary, events, secondary, default=primary)


def collect_documents(team_id: int, settings: GatewaySettings) -> UpstreamDocuments:
    return UpstreamDocuments(
        today=fetch_today(team_id, settings),
        next_game=fetch_next(team_id, settings),
        events=fetch_dated_events(settings) if settings.events_enabled else [],
        secondary_schedule=(
            fetch_secondary_schedule(settings) if settings.secondary_schedule_enabled else []
        ),
    )


def _result_or_default(result: Any, default: Any, source: str) -> Any:
    if isinstance(result, Exception):
        logger.error("Fetching %s failed: %s", source, result)
        return default
    return result


async def collect_documents_async(team_id: int, settings: GatewaySettings) -> UpstreamDocuments:
    """Fetch every upstream document concurrently; failures count as absent."""

    async def _nothing() -> list:
        return []

    today, next_game, events, secondary = await asyncio.gather(
        asyncio.to_thread(fetch_today, team_id, settings),
        asyncio.to_thread(fetch_next, team_id, settings),
        (
            asyncio.to_thread(fetch_dated_events, settings)
            if settings.events_enabled
            else _nothing()
        ),
        (
            asyncio.to_thread(fetch_secondary_schedule, settings)
            if settings.secondary_schedule_enabled
            else _nothing()
        ),
        return_exceptions=True,
    )
    return UpstreamDocuments(
        today=_result_or_default(today, None, "today"),
        next_game=_result_or_default(next_game, None, "next"),
        events=_result_or_default(events, [], "events"),
        secondary_schedule=_result_or_default(secondary, [], "secondary schedule"),
    )
