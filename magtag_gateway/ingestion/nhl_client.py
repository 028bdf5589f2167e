"""HTTP client for the NHL stats API schedule endpoints."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

import requests

from magtag_gateway.settings import GatewaySettings

logger = logging.getLogger(__name__)
DEFAULT_RETRIES = 3
DEFAULT_BACKOFF_SECONDS = 0.5
DEFAULT_USER_AGENT = "magtag-gateway/1.0"
MAX_ERROR_SNIPPET = 300

_SESSION = requests.Session()
_SESSION.headers.update(
    {
        "User-Agent": DEFAULT_USER_AGENT,
        "Accept": "application/json, text/html;q=0.9, */*;q=0.8",
    }
)


def fetch_text(url: str, *, timeout: float, params: dict[str, Any] | None = None) -> str | None:
    """GET ``url`` with retries on transport errors and 5xx responses.

    Returns the body on success and None once retries are exhausted or the
    server answers with a non-retryable status.
    """

    last_error: str | None = None
    for attempt in range(DEFAULT_RETRIES):
        try:
            response = _SESSION.get(url, params=params, timeout=timeout)
            if response.status_code >= 500:
                last_error = f"status={response.status_code}"
                logger.warning(
                    "Upstream %s returned status=%s body=%s",
                    url,
                    response.status_code,
                    response.text[:MAX_ERROR_SNIPPET],
                )
            elif response.status_code != 200:
                logger.error(
                    "Upstream %s returned non-200 status=%s body=%s",
                    url,
                    response.status_code,
                    response.text[:MAX_ERROR_SNIPPET],
                )
                return None
            else:
                return response.text
        except requests.RequestException as exc:
            last_error = str(exc)
            logger.warning("Request to %s failed attempt=%s error=%s", url, attempt + 1, exc)
        if attempt < DEFAULT_RETRIES - 1:
            time.sleep(DEFAULT_BACKOFF_SECONDS * (2**attempt))

    logger.error("Giving up on %s after %s attempts: %s", url, DEFAULT_RETRIES, last_error)
    return None


def fetch_json(url: str, *, timeout: float, params: dict[str, Any] | None = None) -> Any | None:
    body = fetch_text(url, timeout=timeout, params=params)
    if body is None:
        return None
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        logger.error("Upstream %s returned invalid JSON: %s", url, exc)
        return None


def read_json_file(path: str) -> Any | None:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed reading %s: %s", path, exc)
        return None


def fetch_today(team_id: int, settings: GatewaySettings) -> Any | None:
    """Return today's schedule document (with linescore) for ``team_id``."""

    if settings.today_file:
        return read_json_file(settings.today_file)
    return fetch_json(
        f"{settings.nhl_api_base}/schedule",
        params={"expand": "schedule.linescore", "teamId": team_id},
        timeout=settings.http_timeout_seconds,
    )


def fetch_next(team_id: int, settings: GatewaySettings) -> Any | None:
    """Return the team document expanded with its next scheduled game."""

    if settings.next_file:
        return read_json_file(settings.next_file)
    return fetch_json(
        f"{settings.nhl_api_base}/teams/{team_id}",
        params={"expand": "team.schedule.next"},
        timeout=settings.http_timeout_seconds,
    )
