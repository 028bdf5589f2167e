"""Generic dated-event list, supplied as JSON by URL or file."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from magtag_gateway.ingestion.nhl_client import fetch_json, read_json_file
from magtag_gateway.settings import GatewaySettings
from magtag_gateway.status.sources import DatedEvent

logger = logging.getLogger(__name__)


class DatedEventIn(BaseModel):
    date: datetime
    name: str

    @field_validator("date")
    @classmethod
    def _require_timezone(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            raise ValueError("date must carry a timezone offset")
        return value


def parse_dated_events(document: Any) -> list[DatedEvent]:
    """Parse a JSON list of ``{"date", "name"}`` objects, sorted by instant.

    Raises ValueError when the document is not a list of valid events.
    """

    if not isinstance(document, list):
        raise ValueError("event list must be a JSON array")
    try:
        items = [DatedEventIn.model_validate(item) for item in document]
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc
    events = [DatedEvent(instant=item.date, name=item.name) for item in items]
    return sorted(events, key=lambda event: event.instant)


def fetch_dated_events(settings: GatewaySettings) -> list[DatedEvent]:
    if settings.events_file:
        document = read_json_file(settings.events_file)
    elif settings.events_url:
        document = fetch_json(settings.events_url, timeout=settings.http_timeout_seconds)
    else:
        return []
    if document is None:
        return []
    try:
        return parse_dated_events(document)
    except ValueError as exc:
        logger.error("Ignoring malformed event list: %s", exc)
        return []
