"""Scrape a secondary team's upcoming schedule from an HTML page.

Each game row is expected to carry a ``<time datetime="...">`` element and an
element with class ``opponent``. Away games prefix the opponent with ``@``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from bs4 import BeautifulSoup

from magtag_gateway.ingestion.nhl_client import fetch_text
from magtag_gateway.settings import GatewaySettings
from magtag_gateway.status.sources import ScheduledOpponent

logger = logging.getLogger(__name__)

_ROW_TAGS = ["tr", "li", "article"]


def _parse_instant(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


def _split_opponent(text: str) -> tuple[str, bool]:
    cleaned = " ".join(text.split())
    for prefix in ("@", "at "):
        if cleaned.startswith(prefix):
            return cleaned[len(prefix):].strip(), False
    if cleaned.startswith(("vs ", "vs.")):
        cleaned = cleaned[2:].lstrip(". ")
    return cleaned, True


def parse_schedule_html(html: str) -> list[ScheduledOpponent]:
    """Return (instant, opponent) rows found in ``html``, sorted by instant."""

    soup = BeautifulSoup(html, "html.parser")
    games: list[ScheduledOpponent] = []
    seen: set[tuple[datetime, str]] = set()
    for row in soup.find_all(_ROW_TAGS):
        time_tag = row.find("time")
        opponent_tag = row.find(class_="opponent")
        if time_tag is None or opponent_tag is None:
            continue
        instant = _parse_instant(time_tag.get("datetime"))
        if instant is None:
            logger.debug("Skipping row with unusable time: %s", time_tag)
            continue
        opponent, home = _split_opponent(opponent_tag.get_text())
        if not opponent or (instant, opponent) in seen:
            continue
        seen.add((instant, opponent))
        games.append(ScheduledOpponent(instant=instant, opponent=opponent, home=home))
    return sorted(games, key=lambda game: game.instant)


def fetch_secondary_schedule(settings: GatewaySettings) -> list[ScheduledOpponent]:
    if settings.secondary_schedule_file:
        try:
            html = Path(settings.secondary_schedule_file).read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Failed reading %s: %s", settings.secondary_schedule_file, exc)
            return []
    elif settings.secondary_schedule_url:
        html = fetch_text(
            settings.secondary_schedule_url,
            timeout=settings.http_timeout_seconds,
        )
        if html is None:
            return []
    else:
        return []
    games = parse_schedule_html(html)
    logger.info("Parsed %s secondary schedule rows", len(games))
    return games
